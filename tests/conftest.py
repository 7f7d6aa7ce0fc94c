from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from mediagate.core.config import settings

# Override settings for tests: no real polling delay, relative media URLs
settings.app_env = "development"
settings.public_base_url = ""
settings.video_poll_interval_seconds = 0
settings.video_poll_max_attempts = 3

from mediagate.core.credentials import StaticCredentialResolver  # noqa: E402
from mediagate.gateway.media_store import MediaStore  # noqa: E402
from mediagate.main import create_app  # noqa: E402

TEST_KEYS = {
    "openai": "sk-test-openai",
    "dalle3": "sk-test-dalle",
    "stability": "sk-test-stability",
    "elevenlabs": "xi-test",
    "google_tts": "g-test",
    "kling": "kl-test",
    "together": "tg-test",
}


class SpyCredentialResolver(StaticCredentialResolver):
    """Static resolver that records every lookup."""

    def __init__(self, keys):
        super().__init__(keys)
        self.calls: list[str] = []

    def resolve(self, provider: str) -> str | None:
        self.calls.append(provider)
        return super().resolve(provider)


def make_httpx_response(
    status_code: int,
    json_data: dict | list | None = None,
    text: str = "",
    content: bytes | None = None,
    headers: dict | None = None,
) -> httpx.Response:
    """Create a proper httpx.Response with request set."""
    request = httpx.Request("POST", "https://example.com")
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, headers=headers, request=request)
    if content is not None:
        return httpx.Response(status_code, content=content, headers=headers, request=request)
    return httpx.Response(status_code, text=text, headers=headers, request=request)


@pytest.fixture
def credentials() -> SpyCredentialResolver:
    return SpyCredentialResolver(TEST_KEYS)


@pytest.fixture
def media_store() -> MediaStore:
    return MediaStore(ttl_seconds=60, max_items=8)


@pytest.fixture
def app(credentials, media_store):
    return create_app(credentials=credentials, media_store=media_store)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
