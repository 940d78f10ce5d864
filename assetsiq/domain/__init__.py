"""Domain layer definitions."""

from .files import BatchState, FileJob, FileStatus

__all__ = [
    "BatchState",
    "FileJob",
    "FileStatus",
]
