"""Infrastructure layer exports."""

from .extraction import (
    ExtractionClient,
    UnconfiguredExtractionClient,
    configure_extraction_client,
    get_extraction_client,
    reset_extraction_client,
)
from .gemini import GeminiExtractionClient

__all__ = [
    "ExtractionClient",
    "GeminiExtractionClient",
    "UnconfiguredExtractionClient",
    "configure_extraction_client",
    "get_extraction_client",
    "reset_extraction_client",
]
