"""SpeechDesk proxy client with async support."""

from __future__ import annotations

from typing import Any

import httpx


class ProxyRequestError(Exception):
    """A proxy call failed: transport error, non-2xx status or malformed body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SpeechDeskClient:
    """Async client for the SpeechDesk proxy endpoints.

    The vendor credential is held by the proxy; this client never sees it.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> SpeechDeskClient:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Use 'async with SpeechDeskClient() as client:'")
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self.client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise ProxyRequestError(str(exc) or f"Request to {path} failed") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code >= 400:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise ProxyRequestError(
                message or f"Request to {path} failed: {resp.status_code}",
                status_code=resp.status_code,
            )
        if data is None:
            raise ProxyRequestError(f"Malformed response from {path}", status_code=resp.status_code)
        return data

    # --- Health ---

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/api/health")

    # --- Catalog ---

    async def list_voices(self) -> Any:
        return await self._request("GET", "/api/voices")

    async def list_models(self) -> Any:
        return await self._request("GET", "/api/models")

    # --- Speech ---

    async def text_to_speech(
        self,
        text: str,
        voice_id: str,
        model: str | None = None,
        stability: float | None = None,
        similarity_boost: float | None = None,
    ) -> str:
        """Request synthesis and return the base64 audio payload."""
        body: dict[str, Any] = {"text": text, "voiceId": voice_id}
        if model:
            body["model"] = model
        if stability is not None:
            body["stability"] = stability
        if similarity_boost is not None:
            body["similarityBoost"] = similarity_boost

        data = await self._request("POST", "/api/text-to-speech", json=body)
        audio = data.get("audioData") if isinstance(data, dict) else None
        if not (isinstance(data, dict) and data.get("success")) or not isinstance(audio, str):
            raise ProxyRequestError("Malformed response from /api/text-to-speech")
        return audio
