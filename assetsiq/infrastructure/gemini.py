"""Integration with the Google Gemini ``generateContent`` HTTP API."""
from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from assetsiq.core.errors import (
    ConfigMissingError,
    MalformedResponseError,
    RecordSchemaError,
    ServiceFailureError,
)
from assetsiq.core.normalize import normalise_record
from assetsiq.core.prompt import build_instruction, build_response_schema
from assetsiq.core.sanitize import MAX_DOCUMENT_CHARS, derive_asset_tag, sanitise_document
from assetsiq.core.schema import AssetRecord, records_from_payload
from assetsiq.core.settings import DEFAULT_API_BASE, DEFAULT_MODEL, Settings

logger = logging.getLogger(__name__)


class GeminiExtractionClient:
    """Extracts asset records from report text with a Gemini model."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        api_base: str = DEFAULT_API_BASE,
        temperature: float = 0.1,
        timeout: float = 120.0,
        max_document_chars: int = MAX_DOCUMENT_CHARS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_key = api_key
        self._model = model
        self._request_url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self._temperature = temperature
        self._max_document_chars = max_document_chars
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "GeminiExtractionClient":
        return cls(
            settings.gemini_api_key,
            model=settings.gemini_model,
            api_base=settings.gemini_api_base,
            temperature=settings.gemini_temperature,
            timeout=settings.gemini_timeout,
            max_document_chars=settings.max_document_chars,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _build_payload(self, instruction: str, document: str) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": instruction}, {"text": document}],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": build_response_schema(),
                "temperature": self._temperature,
            },
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] or response.reason_phrase
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.reason_phrase

    @staticmethod
    def _response_text(body: Any) -> str:
        """Concatenate the text parts of the first candidate."""

        if not isinstance(body, dict):
            raise MalformedResponseError("service response is not a JSON object")

        feedback = body.get("promptFeedback") or {}
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise ServiceFailureError(f"request blocked by the model service: {block_reason}")

        candidates = body.get("candidates") or []
        if not isinstance(candidates, list):
            raise MalformedResponseError("service response candidates are not a list")
        if not candidates:
            return ""

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise MalformedResponseError("service response candidate is not an object")
        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise MalformedResponseError("candidate content is not an object")
        parts = content.get("parts") or []
        if not isinstance(parts, list) or not all(isinstance(part, dict) for part in parts):
            raise MalformedResponseError("candidate parts are not a list of objects")
        return "".join(str(part.get("text") or "") for part in parts)

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        try:
            response = await self._client.post(
                self._request_url,
                headers={"x-goog-api-key": self._api_key or ""},
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = self._error_message(exc.response)
            raise ServiceFailureError(f"model service returned HTTP {status}: {message}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise ServiceFailureError(f"could not reach the model service: {exc}") from exc
        return response

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def extract(self, document_text: str, source_filename: str) -> list[AssetRecord]:
        if not self._api_key:
            raise ConfigMissingError("GEMINI_API_KEY is not set; cannot call the extraction service")

        asset_tag = derive_asset_tag(source_filename)
        document = sanitise_document(document_text, self._max_document_chars)
        if len(document) == self._max_document_chars and len(document_text) > self._max_document_chars:
            logger.info("Document %s truncated to %d characters", source_filename, self._max_document_chars)
        logger.debug("Requesting extraction for %s (%d characters, model %s)", source_filename, len(document), self._model)

        response = await self._post(self._build_payload(build_instruction(asset_tag), document))

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError("service response body is not valid JSON") from exc

        result_text = self._response_text(body)
        if not result_text.strip():
            return []

        try:
            parsed = json.loads(result_text)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"model output is not valid JSON: {exc}") from exc

        try:
            records = records_from_payload(parsed)
        except RecordSchemaError as exc:
            raise MalformedResponseError(f"model output does not match the asset schema: {exc}") from exc

        return [normalise_record(record).with_asset_tag(asset_tag) for record in records]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["GeminiExtractionClient"]
