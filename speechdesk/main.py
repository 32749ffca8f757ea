import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from speechdesk import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from speechdesk.config import settings

    logger.info(
        "SpeechDesk %s starting (environment=%s, vendor=%s, key configured=%s)",
        __version__,
        settings.environment,
        settings.elevenlabs_base_url,
        bool(settings.elevenlabs_api_key),
    )
    yield
    logger.info("SpeechDesk shutting down")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render every HTTP error as the ``{"error": ...}`` envelope."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code >= 500:
        logger.error("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "missing" for err in errors):
        message = "Missing required parameters"
    else:
        message = "Invalid request body"
    logger.info("%s %s rejected: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    from speechdesk.config import settings

    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="SpeechDesk",
        description="Text-to-speech proxy for the ElevenLabs API",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # CORS configurable via CORS_ORIGINS env var
    allowed_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    from speechdesk.core.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
    from speechdesk.core.rate_limiter import SlidingWindowRateLimiter

    app.state.rate_limiter = SlidingWindowRateLimiter(settings.rate_limit_per_minute)
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(SecurityHeadersMiddleware)

    from speechdesk.api import API_PREFIX, API_ROUTERS

    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {
            "name": "SpeechDesk",
            "version": __version__,
            "docs": "/docs",
            "health": f"{API_PREFIX}/health",
        }

    return app


app = create_app()
