"""HTTP middleware: per-IP rate limiting and security headers."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from speechdesk.core.rate_limiter import SlidingWindowRateLimiter

TRUSTED_PROXIES = {"127.0.0.1", "::1", "localhost", "172.17.0.1"}


class RateLimitMiddleware(BaseHTTPMiddleware):
    SKIP_PATHS = {"/api/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app: ASGIApp, limiter: SlidingWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if (
            not path.startswith("/api/")
            or path in self.SKIP_PATHS
            or request.method == "OPTIONS"
        ):
            return await call_next(request)

        allowed, headers = self.limiter.check(self._client_key(request))

        if not allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Rate limit exceeded",
                    "retry_after": int(headers.get("Retry-After", "60")),
                },
                headers=headers,
            )

        response: Response = await call_next(request)
        for k, v in headers.items():
            response.headers[k] = v
        return response

    def _client_key(self, request: Request) -> str:
        client = request.client
        ip = client.host if client else "unknown"
        # Only trust X-Forwarded-For from a local reverse proxy
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded and ip in TRUSTED_PROXIES:
            ip = forwarded.split(",")[0].strip()
        return f"ip:{ip}"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=(), payment=(), usb=()"
        )
        return response
