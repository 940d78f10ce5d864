from __future__ import annotations


class AssetsIQError(Exception):
    """Base error for failures raised by the asset extraction pipeline."""

    kind = "error"


class ExtractionError(AssetsIQError):
    """Raised when the extraction service cannot turn a document into records."""

    kind = "extraction"


class ConfigMissingError(ExtractionError):
    """Raised before any network call when the service credential is absent."""

    kind = "config_missing"


class ServiceFailureError(ExtractionError):
    """Raised when the transport or the remote model service fails."""

    kind = "service_failure"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ExtractionError):
    """Raised when the service response does not match the record schema."""

    kind = "malformed_response"


class RecordSchemaError(AssetsIQError, ValueError):
    """Raised when a payload cannot be turned into asset records."""

    kind = "record_schema"


class FileReadError(AssetsIQError):
    """Raised when a submitted file cannot be read as text."""

    kind = "read_failure"


class BatchInProgressError(AssetsIQError):
    """Raised when a batch is started or cleared while another one is running."""

    kind = "batch_in_progress"
