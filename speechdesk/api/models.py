import logging

from fastapi import APIRouter, Depends

from speechdesk.core.exceptions import VendorRequestError
from speechdesk.schemas.common import ErrorResponse
from speechdesk.services.vendor_client import ElevenLabsClient, VendorAPIError, get_vendor_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/models", responses={500: {"model": ErrorResponse}})
async def list_models(vendor: ElevenLabsClient = Depends(get_vendor_client)):
    """Relay the vendor model catalog verbatim."""
    try:
        return await vendor.list_models()
    except VendorAPIError as exc:
        logger.error("Error fetching models: %s", exc.message)
        raise VendorRequestError(exc.message or "Failed to fetch models")
