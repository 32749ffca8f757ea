"""Initial catalog load: voices and models, fetched once through the proxy."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from speechdesk.client.languages import DEFAULT_LANGUAGE
from speechdesk.client.notifications import Notification, Notifier
from speechdesk.client.proxy_client import ProxyRequestError, SpeechDeskClient
from speechdesk.schemas.catalog import SpeechModel, Voice

logger = logging.getLogger(__name__)

PREFERRED_MODEL_ID = "eleven_turbo_v2"


@dataclass
class SelectionState:
    """Selections shown in the page: catalogs plus what the user picked."""

    voices: list[Voice] = field(default_factory=list)
    models: list[SpeechModel] = field(default_factory=list)
    selected_voice: str = ""
    selected_model: str = PREFERRED_MODEL_ID
    selected_language: str = DEFAULT_LANGUAGE
    stability: float = 0.5
    similarity_boost: float = 0.5


def _entries(payload: Any, key: str) -> list[dict]:
    # /voices wraps its list in {"voices": [...]}; /models answers with a bare list
    if isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


def parse_voices(payload: Any) -> list[Voice]:
    voices = []
    for item in _entries(payload, "voices"):
        try:
            voices.append(Voice.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed voice entry: %s", item)
    return voices


def parse_models(payload: Any) -> list[SpeechModel]:
    models = []
    for item in _entries(payload, "models"):
        try:
            models.append(SpeechModel.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed model entry: %s", item)
    return models


class CatalogLoader:
    """Populates a ``SelectionState`` from the proxy. No retries."""

    def __init__(self, client: SpeechDeskClient, notifier: Notifier):
        self.client = client
        self.notifier = notifier

    async def load(self, state: SelectionState) -> SelectionState:
        await asyncio.gather(self.load_voices(state), self.load_models(state))
        return state

    async def load_voices(self, state: SelectionState) -> None:
        try:
            payload = await self.client.list_voices()
        except ProxyRequestError as exc:
            self._report(exc.message or "Failed to load voices")
            return
        state.voices = parse_voices(payload)
        if state.voices:
            state.selected_voice = state.voices[0].voice_id
        logger.info("Loaded %d voices", len(state.voices))

    async def load_models(self, state: SelectionState) -> None:
        try:
            payload = await self.client.list_models()
        except ProxyRequestError as exc:
            self._report(exc.message or "Failed to load models")
            return
        state.models = parse_models(payload)
        if any(m.model_id == PREFERRED_MODEL_ID for m in state.models):
            state.selected_model = PREFERRED_MODEL_ID
        logger.info("Loaded %d models", len(state.models))

    def _report(self, message: str) -> None:
        logger.error("Error fetching catalog: %s", message)
        self.notifier.notify(Notification("Error", message, variant="destructive"))
