"""Document clean-up applied before text is sent for extraction."""
from __future__ import annotations

import re

MAX_DOCUMENT_CHARS = 900_000

SUPPORTED_EXTENSIONS = (".html", ".htm", ".mhtml")
SUPPORTED_CONTENT_TYPES = {"text/html"}

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>[\s\S]*?</script\s*>", re.IGNORECASE)
_STYLE_BLOCK = re.compile(r"<style\b[^>]*>[\s\S]*?</style\s*>", re.IGNORECASE)
_REPORT_SUFFIX = re.compile(r"\.(html|htm|mhtml)$", re.IGNORECASE)


def sanitise_document(text: str, max_chars: int = MAX_DOCUMENT_CHARS) -> str:
    """Drop script and style blocks, then cut the text to ``max_chars``."""

    cleaned = _SCRIPT_BLOCK.sub("", text)
    cleaned = _STYLE_BLOCK.sub("", cleaned)
    return cleaned[:max_chars]


def derive_asset_tag(filename: str) -> str:
    """Return the filename without a trailing .html/.htm/.mhtml suffix."""

    return _REPORT_SUFFIX.sub("", filename)


def is_supported_upload(filename: str, content_type: str | None = None) -> bool:
    """Whether a dropped file looks like a saved HTML/MHTML report."""

    if filename.lower().endswith(SUPPORTED_EXTENSIONS):
        return True
    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        return media_type in SUPPORTED_CONTENT_TYPES
    return False
