from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from assetsiq.core.sanitize import derive_asset_tag
from assetsiq.core.schema import ASSET_FIELDS, AssetRecord


def make_row(values: dict[str, str] | None = None) -> dict[str, str]:
    """Build a complete wire row with every field blank unless given."""

    row = {name: "" for name in ASSET_FIELDS}
    row.update(values or {})
    return row


class FakeExtractionClient:
    """Returns canned rows (or raises canned errors) keyed by filename."""

    def __init__(self, outcomes: dict[str, list[dict[str, str]] | Exception] | None = None) -> None:
        self.outcomes = outcomes or {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def extract(self, document_text: str, source_filename: str) -> list[AssetRecord]:
        self.calls.append(source_filename)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            outcome = self.outcomes.get(source_filename, [])
            if isinstance(outcome, Exception):
                raise outcome
            tag = derive_asset_tag(source_filename)
            return [AssetRecord.model_validate(row).with_asset_tag(tag) for row in outcome]
        finally:
            self.in_flight -= 1
