#!/usr/bin/env python
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from assetsiq.core.sanitize import SUPPORTED_EXTENSIONS
from assetsiq.core.settings import Settings
from assetsiq.domain import FileStatus
from assetsiq.exporters.asset_export import EXPORT_FORMATS, encode
from assetsiq.infrastructure import ExtractionClient, GeminiExtractionClient
from assetsiq.workers.pipeline import BatchOrchestrator, LocalDocument


def collect_reports(folder: Path) -> list[LocalDocument]:
    paths = sorted(
        path for path in folder.iterdir() if path.is_file() and path.name.lower().endswith(SUPPORTED_EXTENSIONS)
    )
    return [LocalDocument(path) for path in paths]


async def run(folder: Path, formats: list[str], output: Path, client: ExtractionClient | None = None) -> int:
    documents = collect_reports(folder)
    if not documents:
        print(f"No .html/.htm/.mhtml files found in {folder}")
        return 1

    if client is None:
        gemini_client = GeminiExtractionClient.from_settings(Settings.from_env())
        orchestrator = BatchOrchestrator(gemini_client)
        try:
            await orchestrator.process_batch(documents)
        finally:
            await gemini_client.aclose()
    else:
        orchestrator = BatchOrchestrator(client)
        await orchestrator.process_batch(documents)

    for job in orchestrator.jobs():
        detail = f"{job.items_found} assets" if job.status is FileStatus.COMPLETE else f"{job.status.value}: {job.error}"
        print(f"{job.filename}: {detail}")

    output.mkdir(parents=True, exist_ok=True)
    records = orchestrator.records()
    for fmt in formats:
        artifact = encode(records, fmt)
        if artifact is None:
            continue
        target = output / artifact.filename
        target.write_bytes(artifact.content)
        print(f"Wrote {len(records)} records to {target}")

    completed = sum(1 for job in orchestrator.jobs() if job.status is FileStatus.COMPLETE)
    return 0 if completed else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract asset inventory rows from saved system reports")
    parser.add_argument("folder", help="Folder containing .html/.htm/.mhtml reports")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=EXPORT_FORMATS,
        help="Export format; repeat for several (default: csv)",
    )
    parser.add_argument("--output", default=".", help="Directory for export files")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    exit_code = asyncio.run(run(Path(args.folder), args.formats or ["csv"], Path(args.output)))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
