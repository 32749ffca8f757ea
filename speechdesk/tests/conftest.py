"""Shared test fixtures for the SpeechDesk test suite.

The vendor is never contacted: API tests swap the vendor client dependency
for one backed by ``httpx.MockTransport``.
"""

import json
import os

os.environ.setdefault("ELEVENLABS_API_KEY", "test-api-key")
os.environ.setdefault("ENVIRONMENT", "test")

import httpx  # noqa: E402
import pytest  # noqa: E402

from speechdesk.client.notifications import Notification  # noqa: E402
from speechdesk.main import app  # noqa: E402
from speechdesk.services.vendor_client import ElevenLabsClient, get_vendor_client  # noqa: E402

FAKE_MP3 = b"ID3\x03\x00\x00\x00\x00\x00\x0f" + b"\xff\xfb\x90\x00" * 32

VOICES_PAYLOAD = {
    "voices": [
        {"voice_id": "21m00Tcm4TlvDq8ikWAM", "name": "Rachel", "preview_url": "https://cdn.example/rachel.mp3"},
        {"voice_id": "AZnzlk1XvdvUeBnXmlld", "name": "Domi", "category": "premade"},
    ]
}

MODELS_PAYLOAD = [
    {"model_id": "eleven_multilingual_v2", "name": "Eleven Multilingual v2", "description": "Most lifelike"},
    {"model_id": "eleven_turbo_v2", "name": "Eleven Turbo v2"},
]


@pytest.fixture(autouse=True)
def _reset_state():
    """Clear rate limiter buckets and dependency overrides between tests."""
    app.state.rate_limiter.clear()
    yield
    app.dependency_overrides.clear()


class VendorStub:
    """Programmable stand-in for the ElevenLabs API."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], httpx.Response | Exception] = {
            ("GET", "/v1/voices"): httpx.Response(200, json=VOICES_PAYLOAD),
            ("GET", "/v1/models"): httpx.Response(200, json=MODELS_PAYLOAD),
        }
        self.speech_response: httpx.Response | Exception = httpx.Response(
            200, content=FAKE_MP3, headers={"Content-Type": "audio/mpeg"}
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path.startswith("/v1/text-to-speech/"):
            result = self.speech_response
        else:
            result = self.routes.get((request.method, path), httpx.Response(404, json={"detail": "Not found"}))
        if isinstance(result, Exception):
            raise result
        return result

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def vendor():
    return VendorStub()


@pytest.fixture
def vendor_client(vendor):
    return ElevenLabsClient(
        api_key="test-api-key",
        base_url="https://api.elevenlabs.io/v1",
        timeout=5,
        transport=httpx.MockTransport(vendor.handler),
    )


@pytest.fixture
async def client(vendor_client):
    """httpx AsyncClient wired to the FastAPI app with a stubbed vendor."""
    app.dependency_overrides[get_vendor_client] = lambda: vendor_client

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c


class RecordingNotifier:
    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]


@pytest.fixture
def notifier():
    return RecordingNotifier()
