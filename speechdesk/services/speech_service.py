"""Speech synthesis through the vendor, packaged for JSON transport."""

import base64
import logging
import re

from speechdesk.config import settings
from speechdesk.core.exceptions import (
    InvalidVoiceIdError,
    InvalidVoiceSettingError,
    MissingParametersError,
    TextTooLongError,
)
from speechdesk.schemas.speech import SpeechRequest, SpeechResponse
from speechdesk.services.vendor_client import ElevenLabsClient

logger = logging.getLogger(__name__)

# Voice ids become a vendor URL path segment
_VOICE_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


def _voice_setting(name: str, value: float | None, default: float) -> float:
    if value is None:
        return default
    if not 0.0 <= value <= 1.0:
        raise InvalidVoiceSettingError(name, value)
    return value


def validate_request(req: SpeechRequest) -> None:
    """Reject a request before anything is sent to the vendor."""
    if not req.text or not req.voice_id:
        raise MissingParametersError()
    if not _VOICE_ID_RE.fullmatch(req.voice_id):
        raise InvalidVoiceIdError()
    if len(req.text) > settings.max_text_length:
        raise TextTooLongError(settings.max_text_length)
    _voice_setting("stability", req.stability, settings.default_stability)
    _voice_setting("similarityBoost", req.similarity_boost, settings.default_similarity_boost)


async def synthesize(vendor: ElevenLabsClient, req: SpeechRequest) -> SpeechResponse:
    """Validate, call the vendor once and base64-encode the returned audio.

    Vendor failures propagate as ``VendorAPIError``.
    """
    validate_request(req)
    audio = await vendor.stream_speech(
        voice_id=req.voice_id,
        text=req.text,
        model_id=req.model or settings.default_model_id,
        stability=_voice_setting("stability", req.stability, settings.default_stability),
        similarity_boost=_voice_setting(
            "similarityBoost", req.similarity_boost, settings.default_similarity_boost
        ),
    )
    return SpeechResponse(success=True, audioData=base64.b64encode(audio).decode("ascii"))
