import logging

from fastapi import APIRouter, Depends

from speechdesk.core.exceptions import VendorRequestError
from speechdesk.schemas.common import ErrorResponse
from speechdesk.services.vendor_client import ElevenLabsClient, VendorAPIError, get_vendor_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/voices", responses={500: {"model": ErrorResponse}})
async def list_voices(vendor: ElevenLabsClient = Depends(get_vendor_client)):
    """Relay the vendor voice catalog verbatim."""
    try:
        return await vendor.list_voices()
    except VendorAPIError as exc:
        logger.error("Error fetching voices: %s", exc.message)
        raise VendorRequestError(exc.message or "Failed to fetch voices")
