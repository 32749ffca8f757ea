"""ElevenLabs REST client used by the proxy endpoints.

Every call is a single attempt: no retries and no caching. The API key is
injected here and never returned to callers.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from speechdesk.config import settings

logger = logging.getLogger(__name__)


class VendorAPIError(Exception):
    """Raised when the vendor rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_error_detail(payload: Any) -> str | None:
    """Pull a human readable message out of a vendor error body.

    ElevenLabs answers with either ``{"detail": "..."}`` or
    ``{"detail": {"status": "...", "message": "..."}}``.
    """
    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _error_from_response(resp: httpx.Response, default: str) -> VendorAPIError:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    message = extract_error_detail(payload) or default
    return VendorAPIError(message, status_code=resp.status_code)


class ElevenLabsClient:
    """Thin async wrapper over the three vendor endpoints the proxy needs."""

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.elevenlabs.io/v1",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        return {"xi-api-key": self.api_key}

    def _client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise VendorAPIError("ElevenLabs API key is not configured")
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get_json(self, path: str, default_error: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with self._client() as client:
                resp = await client.get(url, headers=self._headers())
        except httpx.RequestError as exc:
            logger.error("Vendor request GET %s failed: %s", path, exc)
            raise VendorAPIError(str(exc) or default_error) from exc

        if not resp.is_success:
            err = _error_from_response(resp, default_error)
            logger.error("Vendor GET %s returned HTTP %d: %s", path, resp.status_code, err.message)
            raise err

        try:
            return resp.json()
        except ValueError as exc:
            raise VendorAPIError(default_error, status_code=resp.status_code) from exc

    async def list_voices(self) -> Any:
        return await self._get_json("/voices", "Failed to fetch voices")

    async def list_models(self) -> Any:
        return await self._get_json("/models", "Failed to fetch models")

    async def stream_speech(
        self,
        voice_id: str,
        text: str,
        model_id: str,
        stability: float,
        similarity_boost: float,
    ) -> bytes:
        """Synthesize ``text`` and return the complete MPEG audio payload."""
        url = f"{self.base_url}/text-to-speech/{quote(voice_id, safe='')}/stream"
        payload = {
            "text": text,
            "model_id": model_id,
            "voice_settings": {
                "stability": stability,
                "similarity_boost": similarity_boost,
            },
        }
        headers = {**self._headers(), "Content-Type": "application/json"}
        try:
            async with self._client() as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.RequestError as exc:
            logger.error("Vendor synthesis request for voice %s failed: %s", voice_id, exc)
            raise VendorAPIError(str(exc) or "Failed to generate speech") from exc

        if not resp.is_success:
            err = _error_from_response(resp, f"Failed to generate speech: {resp.status_code}")
            logger.error(
                "Vendor synthesis for voice %s returned HTTP %d: %s",
                voice_id, resp.status_code, err.message,
            )
            raise err

        logger.info(
            "Synthesized %d chars with model %s (%d bytes)",
            len(text), model_id, len(resp.content),
        )
        return resp.content


def get_vendor_client() -> ElevenLabsClient:
    """FastAPI dependency returning a client bound to the current settings."""
    return ElevenLabsClient(
        api_key=settings.elevenlabs_api_key,
        base_url=settings.elevenlabs_base_url,
        timeout=settings.vendor_timeout_seconds,
    )
