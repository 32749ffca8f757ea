"""Tests for the /api proxy endpoints.

Hits the FastAPI app through the ``client`` fixture (httpx AsyncClient with
ASGI transport) while the vendor is served by ``VendorStub``.
"""

import base64

import httpx

from speechdesk.tests.conftest import FAKE_MP3, MODELS_PAYLOAD, VOICES_PAYLOAD


# ---------------------------------------------------------------------------
# Voices / models
# ---------------------------------------------------------------------------

async def test_list_voices_relays_vendor_body(client, vendor):
    resp = await client.get("/api/voices")
    assert resp.status_code == 200
    assert resp.json() == VOICES_PAYLOAD
    assert vendor.requests[0].headers["xi-api-key"] == "test-api-key"
    assert vendor.requests[0].url.path == "/v1/voices"


async def test_list_models_relays_vendor_body(client, vendor):
    resp = await client.get("/api/models")
    assert resp.status_code == 200
    assert resp.json() == MODELS_PAYLOAD
    assert vendor.requests[0].url.path == "/v1/models"


async def test_list_voices_vendor_detail_is_surfaced(client, vendor):
    vendor.routes[("GET", "/v1/voices")] = httpx.Response(401, json={"detail": "Invalid API key"})
    resp = await client.get("/api/voices")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Invalid API key"}


async def test_list_voices_default_message_without_detail(client, vendor):
    vendor.routes[("GET", "/v1/voices")] = httpx.Response(503, text="upstream down")
    resp = await client.get("/api/voices")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch voices"}


async def test_list_models_default_message_without_detail(client, vendor):
    vendor.routes[("GET", "/v1/models")] = httpx.Response(500, json={"unexpected": True})
    resp = await client.get("/api/models")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch models"}


async def test_list_models_network_error(client, vendor):
    vendor.routes[("GET", "/v1/models")] = httpx.ConnectError("connection refused")
    resp = await client.get("/api/models")
    assert resp.status_code == 500
    assert resp.json() == {"error": "connection refused"}


# ---------------------------------------------------------------------------
# Text to speech
# ---------------------------------------------------------------------------

async def test_text_to_speech_success(client, vendor):
    resp = await client.post(
        "/api/text-to-speech",
        json={"text": "Hello world", "voiceId": "21m00Tcm4TlvDq8ikWAM"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    audio = base64.b64decode(data["audioData"], validate=True)
    assert audio == FAKE_MP3
    assert len(audio) > 0


async def test_text_to_speech_forwards_defaults(client, vendor):
    await client.post(
        "/api/text-to-speech",
        json={"text": "Hello", "voiceId": "voice-1"},
    )
    request = vendor.requests[-1]
    assert request.method == "POST"
    assert request.url.path == "/v1/text-to-speech/voice-1/stream"
    assert request.headers["xi-api-key"] == "test-api-key"
    assert vendor.json_body() == {
        "text": "Hello",
        "model_id": "eleven_turbo_v2",
        "voice_settings": {"stability": 0.5, "similarity_boost": 0.5},
    }


async def test_text_to_speech_forwards_model_and_tuning(client, vendor):
    await client.post(
        "/api/text-to-speech",
        json={
            "text": "Hello",
            "voiceId": "voice-1",
            "model": "eleven_multilingual_v2",
            "stability": 0.2,
            "similarityBoost": 0.9,
        },
    )
    body = vendor.json_body()
    assert body["model_id"] == "eleven_multilingual_v2"
    assert body["voice_settings"] == {"stability": 0.2, "similarity_boost": 0.9}


async def test_text_to_speech_empty_text_is_400(client, vendor):
    resp = await client.post("/api/text-to-speech", json={"text": "", "voiceId": "voice-1"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required parameters"}
    assert vendor.requests == []


async def test_text_to_speech_missing_voice_is_400(client, vendor):
    resp = await client.post("/api/text-to-speech", json={"text": "Hello"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required parameters"}
    assert vendor.requests == []


async def test_text_to_speech_without_body_is_400(client, vendor):
    resp = await client.post("/api/text-to-speech")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required parameters"}
    assert vendor.requests == []


async def test_text_to_speech_over_limit_is_400(client, vendor):
    resp = await client.post(
        "/api/text-to-speech",
        json={"text": "a" * 1001, "voiceId": "voice-1"},
    )
    assert resp.status_code == 400
    assert "1000" in resp.json()["error"]
    assert vendor.requests == []


async def test_text_to_speech_exactly_at_limit_is_accepted(client, vendor):
    resp = await client.post(
        "/api/text-to-speech",
        json={"text": "a" * 1000, "voiceId": "voice-1"},
    )
    assert resp.status_code == 200


async def test_text_to_speech_rejects_out_of_range_tuning(client, vendor):
    resp = await client.post(
        "/api/text-to-speech",
        json={"text": "Hello", "voiceId": "voice-1", "stability": 1.5},
    )
    assert resp.status_code == 400
    assert "stability" in resp.json()["error"]
    assert vendor.requests == []


async def test_text_to_speech_rejects_path_like_voice_id(client, vendor):
    resp = await client.post(
        "/api/text-to-speech",
        json={"text": "Hello", "voiceId": "../voices/abc/settings/edit?x="},
    )
    assert resp.status_code == 400
    assert "voiceId" in resp.json()["error"]
    assert vendor.requests == []


async def test_text_to_speech_vendor_redirect_is_an_error(client, vendor):
    vendor.speech_response = httpx.Response(302, headers={"Location": "https://elsewhere.test/"})
    resp = await client.post("/api/text-to-speech", json={"text": "Hello", "voiceId": "v"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate speech: 302"}


async def test_text_to_speech_vendor_detail(client, vendor):
    vendor.speech_response = httpx.Response(500, json={"detail": "invalid voice"})
    resp = await client.post("/api/text-to-speech", json={"text": "Hello", "voiceId": "bad"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "invalid voice"}


async def test_text_to_speech_vendor_structured_detail(client, vendor):
    vendor.speech_response = httpx.Response(
        422, json={"detail": {"status": "voice_not_found", "message": "Voice not found"}}
    )
    resp = await client.post("/api/text-to-speech", json={"text": "Hello", "voiceId": "bad"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Voice not found"}


async def test_text_to_speech_vendor_unparseable_error(client, vendor):
    vendor.speech_response = httpx.Response(502, text="<html>Bad gateway</html>")
    resp = await client.post("/api/text-to-speech", json={"text": "Hello", "voiceId": "v"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate speech: 502"}


async def test_text_to_speech_network_error(client, vendor):
    vendor.speech_response = httpx.ReadTimeout("timed out")
    resp = await client.post("/api/text-to-speech", json={"text": "Hello", "voiceId": "v"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "timed out"}


# ---------------------------------------------------------------------------
# Health, middleware
# ---------------------------------------------------------------------------

async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["vendor_configured"] is True


async def test_root_index(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["health"] == "/api/health"


async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in resp.json()


async def test_security_headers_present(client):
    resp = await client.get("/api/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


async def test_rate_limit_headers_on_api_calls(client):
    resp = await client.get("/api/voices")
    assert "X-RateLimit-Limit" in resp.headers


async def test_rate_limit_exceeded_returns_429(client, vendor):
    from speechdesk.main import app

    for _ in range(app.state.rate_limiter.limit):
        resp = await client.get("/api/models")
        assert resp.status_code == 200

    resp = await client.get("/api/models")
    assert resp.status_code == 429
    assert resp.json()["error"] == "Rate limit exceeded"
    assert "Retry-After" in resp.headers
