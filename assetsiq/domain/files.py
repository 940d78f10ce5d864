"""Domain entities for batch processing."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from assetsiq.core.schema import AssetRecord


class FileStatus(str, Enum):
    PENDING = "pending"
    READING = "reading"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def terminal(self) -> bool:
        return self in (FileStatus.COMPLETE, FileStatus.ERROR)


@dataclass(slots=True)
class FileJob:
    """Progress of one submitted file through the extraction pipeline."""

    filename: str
    status: FileStatus = FileStatus.PENDING
    items_found: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "status": self.status.value,
            "items_found": self.items_found,
            "error": self.error,
        }


@dataclass(slots=True)
class BatchState:
    """Session state owned by a single orchestrator."""

    jobs: list[FileJob] = field(default_factory=list)
    records: list[AssetRecord] = field(default_factory=list)
    batch_error: str | None = None
    processing: bool = False
