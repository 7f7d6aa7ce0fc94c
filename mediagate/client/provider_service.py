"""Async client for the gateway's generation endpoints.

A thin pass-through: fills documented defaults, posts to the gateway, returns
the primary artifact, raises ProviderServiceError with the gateway's
``error`` message otherwise. No retries, no caching.

Example:
    async with ProviderService("http://localhost:8000") as service:
        url = await service.generate_image(ImageRequest(provider="dalle3", model="dall-e-3", prompt="a fox"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from mediagate.core.config import settings
from mediagate.gateway.types import (
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_VIDEO_DURATION,
)

logger = logging.getLogger(__name__)


def default_timeout() -> float:
    """Create call, the full polling budget, then one more vendor call of headroom."""
    return (
        2 * settings.vendor_timeout_seconds
        + settings.video_poll_interval_seconds * settings.video_poll_max_attempts
    )


class ProviderServiceError(Exception):
    """The gateway answered with an error (or with something that is not a result)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class LLMRequest:
    provider: str
    model: str
    messages: list[dict[str, str]]
    temperature: float | None = None
    max_tokens: int | None = None


@dataclass
class ImageRequest:
    provider: str
    model: str
    prompt: str
    size: str | None = None
    quality: str | None = None


@dataclass
class VoiceRequest:
    provider: str
    model: str
    text: str
    voice: str | None = None


@dataclass
class VideoRequest:
    provider: str
    model: str
    prompt: str
    duration: int | None = None


class ProviderService:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Gateway root URL.
            timeout: Request timeout in seconds. Defaults to default_timeout(), which
                outlasts the gateway's video polling budget.
            transport: Optional httpx transport (e.g. ASGITransport in tests).
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout if timeout is not None else default_timeout(), transport=transport
        )

    async def __aenter__(self) -> ProviderService:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def call_llm(self, request: LLMRequest) -> str:
        data = await self._call(
            "llm",
            {
                "provider": request.provider,
                "model": request.model,
                "messages": request.messages,
                "temperature": DEFAULT_TEMPERATURE if request.temperature is None else request.temperature,
                "maxTokens": request.max_tokens or DEFAULT_MAX_TOKENS,
            },
        )
        return self._artifact(data, "content")

    async def generate_image(self, request: ImageRequest) -> str:
        """Image URL, or the job id when the vendor only accepted the job (status "processing")."""
        data = await self._call(
            "image",
            {
                "provider": request.provider,
                "model": request.model,
                "prompt": request.prompt,
                "size": request.size or DEFAULT_IMAGE_SIZE,
                "quality": request.quality or DEFAULT_IMAGE_QUALITY,
            },
        )
        return self._artifact(data, "imageUrl", "messageId")

    async def generate_voice(self, request: VoiceRequest) -> str:
        body: dict[str, Any] = {"provider": request.provider, "model": request.model, "text": request.text}
        if request.voice:
            body["voice"] = request.voice
        data = await self._call("voice", body)
        return self._artifact(data, "audioUrl")

    async def generate_video(self, request: VideoRequest) -> str:
        data = await self._call(
            "video",
            {
                "provider": request.provider,
                "model": request.model,
                "prompt": request.prompt,
                "duration": request.duration or DEFAULT_VIDEO_DURATION,
            },
        )
        return self._artifact(data, "videoUrl", "videoId")

    async def _call(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(f"/api/v1/{endpoint}", json=body)
        except httpx.TransportError as e:
            raise ProviderServiceError(f"Gateway unreachable: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            raise ProviderServiceError(
                f"Unexpected gateway response (HTTP {response.status_code})", status_code=response.status_code
            )
        if data.get("error"):
            logger.debug("Gateway %s error %d: %s", endpoint, response.status_code, data["error"])
            raise ProviderServiceError(data["error"], status_code=response.status_code)
        return data

    @staticmethod
    def _artifact(data: dict[str, Any], *keys: str) -> str:
        for key in keys:
            if data.get(key) is not None:
                return data[key]
        raise ProviderServiceError(f"Gateway response has no {' or '.join(keys)}")
