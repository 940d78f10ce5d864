from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Protocol, Sequence

from assetsiq.core.errors import AssetsIQError, BatchInProgressError, FileReadError
from assetsiq.core.schema import AssetRecord
from assetsiq.domain import BatchState, FileJob, FileStatus
from assetsiq.infrastructure import ExtractionClient, get_extraction_client

logger = logging.getLogger(__name__)


class DocumentHandle(Protocol):
    """A submitted file: a name plus a way to read its text."""

    filename: str

    async def read_text(self) -> str: ...


@dataclass(slots=True)
class UploadedDocument:
    """File received over HTTP and held in memory."""

    filename: str
    data: bytes
    content_type: str | None = None

    async def read_text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass(slots=True)
class LocalDocument:
    """File on the local filesystem, read in a worker thread."""

    path: Path

    @property
    def filename(self) -> str:
        return self.path.name

    async def read_text(self) -> str:
        try:
            return await asyncio.to_thread(self.path.read_text, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise FileReadError(f"could not read {self.path}: {exc}") from exc


JobListener = Callable[[list[FileJob]], None]


class BatchOrchestrator:
    """Runs submitted files through extraction one at a time.

    The orchestrator owns the job list and the accumulated records.  Files are
    processed strictly in submission order and a failure is confined to the
    file that caused it; records from earlier files are never discarded.
    """

    def __init__(self, client: ExtractionClient | None = None, *, on_change: JobListener | None = None) -> None:
        self._client = client
        self._on_change = on_change
        self._state = BatchState()
        self._documents: list[DocumentHandle] = []

    # ------------------------------------------------------------------
    # read-only views
    # ------------------------------------------------------------------
    @property
    def processing(self) -> bool:
        return self._state.processing

    @property
    def batch_error(self) -> str | None:
        return self._state.batch_error

    def jobs(self) -> list[FileJob]:
        return [replace(job) for job in self._state.jobs]

    def records(self) -> list[AssetRecord]:
        return list(self._state.records)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.jobs())

    def _transition(self, job: FileJob, status: FileStatus) -> None:
        job.status = status
        self._notify()

    def _fail(self, job: FileJob, exc: BaseException) -> None:
        job.error = str(exc) or exc.__class__.__name__
        job.items_found = 0
        self._transition(job, FileStatus.ERROR)

    @staticmethod
    async def _read(document: DocumentHandle) -> str:
        try:
            return await document.read_text()
        except FileReadError:
            raise
        except (OSError, UnicodeError, ValueError) as exc:
            raise FileReadError(f"could not read {document.filename}: {exc}") from exc

    async def _process_file(self, client: ExtractionClient, document: DocumentHandle, job: FileJob) -> None:
        self._transition(job, FileStatus.READING)
        try:
            text = await self._read(document)
            self._transition(job, FileStatus.ANALYZING)
            records = await client.extract(text, document.filename)
        except AssetsIQError as exc:
            logger.error("Error processing file %s (%s): %s", job.filename, exc.kind, exc)
            self._fail(job, exc)
            return
        except Exception as exc:
            logger.exception("Unexpected error processing file %s", job.filename)
            self._fail(job, exc)
            return

        self._state.records.extend(records)
        job.items_found = len(records)
        self._transition(job, FileStatus.COMPLETE)
        logger.info("Extracted %d asset(s) from %s", job.items_found, job.filename)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def start_batch(self, documents: Sequence[DocumentHandle]) -> list[FileJob]:
        """Register a new batch and publish its jobs as ``pending``.

        Records from earlier batches are kept; only the job list is replaced.
        """

        if self._state.processing:
            raise BatchInProgressError("a batch is already being processed")

        self._documents = list(documents)
        self._state.jobs = [FileJob(filename=document.filename) for document in self._documents]
        self._state.batch_error = None
        self._state.processing = True
        self._notify()
        return self.jobs()

    async def run_batch(self) -> None:
        """Process the registered batch to completion."""

        if not self._state.processing:
            raise RuntimeError("start_batch() must be called before run_batch()")

        documents, self._documents = self._documents, []
        jobs = self._state.jobs
        logger.info("Processing batch of %d file(s)", len(jobs))
        try:
            client = self._client or get_extraction_client()
            for document, job in zip(documents, jobs):
                await self._process_file(client, document, job)
        except Exception as exc:
            logger.exception("Batch aborted outside per-file processing")
            self._state.batch_error = str(exc) or exc.__class__.__name__
            for job in jobs:
                if not job.status.terminal:
                    job.status = FileStatus.ERROR
                    job.error = "batch aborted"
            self._notify()
        finally:
            self._state.processing = False

        failed = sum(1 for job in jobs if job.status is FileStatus.ERROR)
        logger.info("Batch finished: %d file(s), %d failed, %d record(s) total", len(jobs), failed, len(self._state.records))

    async def process_batch(self, documents: Sequence[DocumentHandle]) -> None:
        self.start_batch(documents)
        await self.run_batch()

    def clear_all(self) -> None:
        """Discard every job and accumulated record."""

        self._state.jobs = []
        self._state.records = []
        self._state.batch_error = None
        self._notify()
