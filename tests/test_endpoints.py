"""Tests for the generation, media and service endpoints."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from conftest import make_httpx_response
from httpx import AsyncClient

from mediagate.core.metrics import _normalize_path

HTTPX_CLIENT = "mediagate.gateway.adapters.base.httpx.AsyncClient"


def _vendor_client(mock_client_cls, response) -> AsyncMock:
    mock_client = AsyncMock()
    if isinstance(response, BaseException):
        mock_client.post.side_effect = response
    else:
        mock_client.post.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client_cls.return_value = mock_client
    return mock_client


@pytest.mark.asyncio
async def test_image_success(client: AsyncClient):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        _vendor_client(
            mock_client_cls,
            make_httpx_response(200, json_data={"data": [{"url": "https://x/img.png", "revised_prompt": "p2"}]}),
        )
        response = await client.post(
            "/api/v1/image", json={"provider": "dalle3", "model": "dall-e-3", "prompt": "a fox"}
        )

    assert response.status_code == 200
    assert response.json() == {
        "provider": "openai",
        "model": "dall-e-3",
        "imageUrl": "https://x/img.png",
        "revisedPrompt": "p2",
    }
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_llm_success(client: AsyncClient):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        mock_client = _vendor_client(
            mock_client_cls,
            make_httpx_response(200, json_data={"choices": [{"message": {"content": "Hello"}}]}),
        )
        response = await client.post(
            "/api/v1/llm",
            json={"provider": "openai", "model": "gpt-4o", "messages": [{"role": "user", "content": "Hi"}]},
        )

    assert response.status_code == 200
    assert response.json()["content"] == "Hello"
    assert mock_client.post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test-openai"


@pytest.mark.asyncio
async def test_missing_fields_rejected_before_credentials(client: AsyncClient, credentials):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        response = await client.post("/api/v1/voice", json={"provider": "elevenlabs", "model": "m"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: provider, model, text"}
    assert response.headers["access-control-allow-origin"] == "*"
    assert credentials.calls == []
    mock_client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_json(client: AsyncClient):
    response = await client.post(
        "/api/v1/image", content=b"{oops", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body"}


@pytest.mark.asyncio
async def test_unconfigured_provider(client: AsyncClient, credentials):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        response = await client.post(
            "/api/v1/video", json={"provider": "runway", "model": "gen3", "prompt": "waves"}
        )

    assert response.status_code == 401
    assert response.json() == {"error": "API key not configured for runway"}
    assert credentials.calls == ["runway"]
    mock_client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_vendor_error_becomes_500(client: AsyncClient):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        _vendor_client(mock_client_cls, make_httpx_response(429, text="rate limited"))
        response = await client.post(
            "/api/v1/image", json={"provider": "dalle3", "model": "dall-e-3", "prompt": "a fox"}
        )

    assert response.status_code == 500
    error = response.json()["error"]
    assert "DALL-E" in error
    assert "rate limited" in error
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_transport_error_becomes_500(client: AsyncClient):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        _vendor_client(mock_client_cls, httpx.ConnectError("connection refused"))
        response = await client.post(
            "/api/v1/llm",
            json={"provider": "openai", "model": "gpt-4o", "messages": [{"role": "user", "content": "Hi"}]},
        )

    assert response.status_code == 500
    assert response.json()["error"].startswith("OpenAI request failed")


@pytest.mark.asyncio
async def test_kling_video_id(client: AsyncClient):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        _vendor_client(mock_client_cls, make_httpx_response(200, json_data={"data": {"task_id": "kt-1"}}))
        response = await client.post(
            "/api/v1/video", json={"provider": "kling", "model": "kling-v1", "prompt": "waves"}
        )

    assert response.status_code == 200
    assert response.json() == {"provider": "kling", "model": "kling-v1", "videoId": "kt-1"}


@pytest.mark.asyncio
@pytest.mark.parametrize("endpoint", ["llm", "image", "voice", "video"])
async def test_preflight(client: AsyncClient, credentials, endpoint):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        response = await client.options(f"/api/v1/{endpoint}")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert "OPTIONS" in response.headers["access-control-allow-methods"]
    assert response.headers["access-control-allow-headers"] == "Content-Type"
    assert credentials.calls == []
    mock_client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_kind(client: AsyncClient):
    response = await client.post("/api/v1/music", json={"provider": "x", "model": "y"})
    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_binary_voice_served_from_media_route(client: AsyncClient):
    with patch(HTTPX_CLIENT) as mock_client_cls:
        _vendor_client(
            mock_client_cls,
            make_httpx_response(200, content=b"ID3audio", headers={"content-type": "audio/mpeg"}),
        )
        response = await client.post(
            "/api/v1/voice", json={"provider": "elevenlabs", "model": "eleven_v2", "text": "hello"}
        )

    assert response.status_code == 200
    audio_url = response.json()["audioUrl"]
    assert audio_url.startswith("/api/v1/media/")

    media = await client.get(audio_url)
    assert media.status_code == 200
    assert media.content == b"ID3audio"
    assert media.headers["content-type"] == "audio/mpeg"


@pytest.mark.asyncio
async def test_unknown_media(client: AsyncClient):
    response = await client.get("/api/v1/media/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Media not found or expired"}


@pytest.mark.asyncio
async def test_providers(client: AsyncClient):
    response = await client.get("/api/v1/providers")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"text", "image", "voice", "video"}
    openai = next(p for p in data["text"] if p["provider"] == "openai")
    assert openai == {"provider": "openai", "adapter": "openai", "configured": True}
    runway = next(p for p in data["video"] if p["provider"] == "runway")
    assert runway["configured"] is False


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_metrics(client: AsyncClient):
    await client.get("/api/v1/health")
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_metrics_path_labels_are_bounded():
    assert _normalize_path("/api/v1/image") == "/api/v1/image"
    assert _normalize_path("/api/v1/media/3f2a9c") == "/api/v1/media/{id}"
    assert _normalize_path("/api/v1/music") == "other"
    assert _normalize_path("/wp-login.php") == "other"
