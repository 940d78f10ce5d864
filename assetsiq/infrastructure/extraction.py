"""Extraction service hooks.

The pipeline asks an :class:`ExtractionClient` to turn document text into
asset records.  Until a credential is configured the unconfigured client is
installed, and every extraction fails with ``ConfigMissingError`` without
touching the network.  Application start-up calls
``configure_extraction_client`` once a real client can be built.
"""
from __future__ import annotations

from typing import Protocol

from assetsiq.core.errors import ConfigMissingError
from assetsiq.core.schema import AssetRecord


class ExtractionClient(Protocol):
    """Contract for extraction integrations."""

    async def extract(self, document_text: str, source_filename: str) -> list[AssetRecord]:
        """Return the asset records described by ``document_text``."""


class UnconfiguredExtractionClient:
    """Installed when no service credential is available."""

    async def extract(self, document_text: str, source_filename: str) -> list[AssetRecord]:
        raise ConfigMissingError("GEMINI_API_KEY is not set; cannot call the extraction service")


_client: ExtractionClient = UnconfiguredExtractionClient()


def configure_extraction_client(client: ExtractionClient) -> None:
    """Install the extraction client used by the batch pipeline."""

    global _client
    _client = client


def get_extraction_client() -> ExtractionClient:
    """Return the currently configured extraction client."""

    return _client


def reset_extraction_client() -> None:
    configure_extraction_client(UnconfiguredExtractionClient())
