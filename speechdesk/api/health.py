from fastapi import APIRouter

from speechdesk import __version__
from speechdesk.config import settings
from speechdesk.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        version=__version__,
        vendor_configured=bool(settings.elevenlabs_api_key),
    )
