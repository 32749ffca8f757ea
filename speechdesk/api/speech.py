"""Text-to-speech proxy endpoint."""

import logging

from fastapi import APIRouter, Depends

from speechdesk.core.exceptions import VendorRequestError
from speechdesk.schemas.common import ErrorResponse
from speechdesk.schemas.speech import SpeechRequest, SpeechResponse
from speechdesk.services import speech_service
from speechdesk.services.vendor_client import ElevenLabsClient, VendorAPIError, get_vendor_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["speech"])


@router.post(
    "/text-to-speech",
    response_model=SpeechResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def text_to_speech(
    body: SpeechRequest,
    vendor: ElevenLabsClient = Depends(get_vendor_client),
):
    """Synthesize ``text`` with ``voiceId`` and return base64 MPEG audio.

    Missing or invalid input is rejected with a 400 before the vendor is
    contacted. Vendor and network failures come back as a 500.
    """
    try:
        return await speech_service.synthesize(vendor, body)
    except VendorAPIError as exc:
        logger.error("Error generating speech: %s", exc.message)
        raise VendorRequestError(exc.message or "Failed to generate speech")
