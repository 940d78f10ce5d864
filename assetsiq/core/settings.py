from __future__ import annotations

import os
from dataclasses import dataclass, field

from assetsiq.core.sanitize import MAX_DOCUMENT_CHARS

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


@dataclass
class Settings:
    """Runtime configuration, read from environment variables."""

    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL
    gemini_api_base: str = DEFAULT_API_BASE
    gemini_temperature: float = 0.1
    gemini_timeout: float = 120.0
    max_document_chars: int = MAX_DOCUMENT_CHARS
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins_env = os.getenv("API_CORS_ORIGINS", "")
        origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            gemini_api_base=os.getenv("GEMINI_API_BASE") or DEFAULT_API_BASE,
            gemini_temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.1")),
            gemini_timeout=float(os.getenv("GEMINI_TIMEOUT", "120")),
            max_document_chars=int(os.getenv("MAX_DOCUMENT_CHARS", str(MAX_DOCUMENT_CHARS))),
            cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
