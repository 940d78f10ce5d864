"""Application service for the in-memory asset inventory session."""
from __future__ import annotations

from collections import Counter
from typing import Sequence

from assetsiq.core.errors import BatchInProgressError
from assetsiq.exporters.asset_export import ExportArtifact, encode
from assetsiq.workers.pipeline import BatchOrchestrator, DocumentHandle


class InventoryService:
    """Coordinates batch uploads, the accumulated records and exports."""

    def __init__(self, orchestrator: BatchOrchestrator) -> None:
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> BatchOrchestrator:
        return self._orchestrator

    def start_batch(self, documents: Sequence[DocumentHandle]) -> list[dict[str, object]]:
        jobs = self._orchestrator.start_batch(documents)
        return [job.to_dict() for job in jobs]

    async def run_batch(self) -> None:
        await self._orchestrator.run_batch()

    def batch_overview(self) -> dict[str, object]:
        jobs = self._orchestrator.jobs()
        by_status = Counter(job.status.value for job in jobs)
        return {
            "processing": self._orchestrator.processing,
            "batch_error": self._orchestrator.batch_error,
            "files": [job.to_dict() for job in jobs],
            "summary": {
                "total": len(jobs),
                "by_status": dict(by_status),
                "assets": len(self._orchestrator.records()),
            },
        }

    def list_assets(self) -> list[dict[str, str]]:
        return [record.to_row() for record in self._orchestrator.records()]

    def clear(self) -> None:
        if self._orchestrator.processing:
            raise BatchInProgressError("cannot clear while a batch is being processed")
        self._orchestrator.clear_all()

    def export(self, fmt: str) -> ExportArtifact | None:
        return encode(self._orchestrator.records(), fmt)

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._orchestrator = BatchOrchestrator()


_service = InventoryService(BatchOrchestrator())


def get_inventory_service() -> InventoryService:
    """Return the singleton inventory service for the process."""

    return _service


def reset_inventory_state() -> None:
    """Reset the in-memory session (used in tests)."""

    _service.reset()
