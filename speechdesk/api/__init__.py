"""API router registry used by the app factory.

This keeps route module imports and inclusion order in one place so
`speechdesk.main` stays focused on startup wiring.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import health, models, speech, voices

API_PREFIX = "/api"

API_ROUTERS: tuple[APIRouter, ...] = (
    health.router,
    voices.router,
    models.router,
    speech.router,
)

__all__ = ["API_PREFIX", "API_ROUTERS"]
