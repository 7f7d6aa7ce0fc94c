"""Video generation adapters.

Vendor-specific behaviors:
  - Runway, Luma: create a task, then poll it inside the same request until it
    succeeds, fails, or the attempt budget runs out
  - LTX: synchronous, duration expressed as frames (25 fps)
  - Sora, Veo: synchronous; model identifier pinned by the vendor
  - Kling, Pika, HeyGen: return a job/video identifier rather than a URL
  - Fallback: OpenAI-compatible ``/videos/generations``
"""

from __future__ import annotations

import asyncio
import logging
import math
from abc import abstractmethod
from typing import Any

from mediagate.gateway.adapters.base import DEFAULT_TIMEOUT, BaseVendorAdapter, OpenAICompatibleMixin
from mediagate.gateway.errors import GatewayError, GenerationFailedError, MalformedResponseError
from mediagate.gateway.types import MediaKind, VideoPayload, VideoResult

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_POLL_ATTEMPTS = 120


class _PollingVideoAdapter(BaseVendorAdapter):
    """Task-style vendors: create, then poll a status URL."""

    kind = MediaKind.VIDEO
    status_url_template: str

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_POLL_ATTEMPTS,
        **kwargs,
    ):
        super().__init__(timeout=timeout, **kwargs)
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    @abstractmethod
    def _finished(self, status_data: dict[str, Any]) -> str | None:
        """Return the video URL when the task is done, None while it is still running.

        Raises GenerationFailedError when the vendor reports failure.
        """
        ...

    async def _poll(self, task_id: str, credential: str) -> str:
        url = self.status_url_template.format(task_id=task_id)
        headers = {"Authorization": f"Bearer {credential}"}

        for attempt in range(self.max_attempts):
            await asyncio.sleep(self.poll_interval)

            resp = await self._get(url, vendor=self.vendor_name, headers=headers)
            if not resp.is_success:
                logger.debug("%s poll %d for %s returned HTTP %d", self.vendor_name, attempt, task_id, resp.status_code)
                continue

            status_data = self._json(resp, self.vendor_name)
            with self._response_shape(self.vendor_name):
                video_url = self._finished(status_data)
            if video_url:
                logger.info("%s task %s finished after %d polls", self.vendor_name, task_id, attempt + 1)
                return video_url

        raise GenerationFailedError(f"{self.vendor_name} generation timeout")


class RunwayVideoAdapter(_PollingVideoAdapter):
    name = "runway"
    vendor_name = "Runway"
    api_url = "https://api.runwayml.com/v1/image-to-video"
    status_url_template = "https://api.runwayml.com/v1/tasks/{task_id}"

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"model": model, "promptText": payload.prompt},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            task_id = self._job_id(data["id"], self.vendor_name)

        video_url = await self._poll(task_id, credential)
        return VideoResult(provider="runway", model=model, video_url=video_url)

    def _finished(self, status_data: dict[str, Any]) -> str | None:
        status = status_data.get("status")
        if status == "SUCCEEDED":
            return status_data["output"][0]
        if status == "FAILED":
            raise GenerationFailedError("Runway generation failed")
        return None


class LumaVideoAdapter(_PollingVideoAdapter):
    name = "luma"
    vendor_name = "Luma"
    api_url = "https://api.lumalabs.ai/dream-machine/v1/generations"
    status_url_template = "https://api.lumalabs.ai/dream-machine/v1/generations/{task_id}"

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"prompt": payload.prompt},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            generation_id = self._job_id(data["id"], self.vendor_name)

        video_url = await self._poll(generation_id, credential)
        return VideoResult(provider="luma", model=model, video_url=video_url)

    def _finished(self, status_data: dict[str, Any]) -> str | None:
        state = status_data.get("state")
        if state == "completed":
            return status_data["video"]["url"]
        if state == "failed":
            raise GenerationFailedError("Luma generation failed")
        return None


class LTXVideoAdapter(BaseVendorAdapter):
    name = "ltx"
    vendor_name = "LTX"
    kind = MediaKind.VIDEO
    api_url = "https://api.ltx.studio/v1/generate"
    frames_per_second = 25

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={
                "prompt": payload.prompt,
                "model": model,
                "num_frames": math.ceil(self.frames_per_second * payload.duration),
            },
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            return VideoResult(provider="ltx", model=model, video_url=data["video_url"])


class SoraVideoAdapter(BaseVendorAdapter):
    name = "sora"
    vendor_name = "Sora"
    kind = MediaKind.VIDEO
    api_url = "https://api.openai.com/v1/video/generations"
    pinned_model = "sora-2024-12-01"

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"model": self.pinned_model, "prompt": payload.prompt, "duration": payload.duration},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            return VideoResult(provider="openai", model=self.pinned_model, video_url=data["data"][0]["url"])


class VeoVideoAdapter(BaseVendorAdapter):
    """Vertex AI Veo. Needs a Google Cloud project id; the credential is an OAuth bearer token."""

    name = "veo"
    vendor_name = "Veo"
    kind = MediaKind.VIDEO
    api_url_template = (
        "https://aiplatform.googleapis.com/v1/projects/{project}/locations/{location}"
        "/publishers/google/models/veo-001:predict"
    )
    pinned_model = "veo-001"
    max_duration = 60

    def __init__(self, project_id: str = "", location: str = "us-central1", timeout: float = DEFAULT_TIMEOUT, **kwargs):
        super().__init__(timeout=timeout, **kwargs)
        self.project_id = project_id
        self.location = location

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        if not self.project_id:
            raise GatewayError("Veo API error: GOOGLE_CLOUD_PROJECT is not configured")

        resp = await self._post(
            self.api_url_template.format(project=self.project_id, location=self.location),
            vendor=self.vendor_name,
            json={
                "instances": [{"prompt": payload.prompt}],
                "parameters": {"duration": min(payload.duration, self.max_duration)},
            },
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            return VideoResult(provider="google", model=self.pinned_model, video_url=data["predictions"][0]["videoUrl"])


class KlingVideoAdapter(BaseVendorAdapter):
    name = "kling"
    vendor_name = "Kling"
    kind = MediaKind.VIDEO
    api_url = "https://api.klingai.com/v1/videos/generation"
    max_duration = 10

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={
                "model": model,
                "prompt": payload.prompt,
                "duration_in_seconds": min(payload.duration, self.max_duration),
            },
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            video_id = self._job_id(data["data"]["task_id"], self.vendor_name)
            return VideoResult(provider="kling", model=model, video_id=video_id)


class PikaVideoAdapter(BaseVendorAdapter):
    name = "pika"
    vendor_name = "Pika"
    kind = MediaKind.VIDEO
    api_url = "https://api.pika.art/v1/videos/generations"

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"prompt": payload.prompt, "aspect_ratio": "16:9"},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            video_id = self._job_id(data["id"], self.vendor_name)
            return VideoResult(provider="pika", model=model, video_id=video_id)


class HeyGenVideoAdapter(BaseVendorAdapter):
    name = "heygen"
    vendor_name = "HeyGen"
    kind = MediaKind.VIDEO
    api_url = "https://api.heygen.com/v2/video/generate"

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"prompt": payload.prompt},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)
        with self._response_shape(self.vendor_name):
            video_id = self._job_id(data["video_id"], self.vendor_name)
            return VideoResult(provider="heygen", model=model, video_id=video_id)


class OpenAICompatibleVideoAdapter(OpenAICompatibleMixin, BaseVendorAdapter):
    """Fallback for unregistered video vendors: ``data[0].url`` or a job ``id``."""

    name = "openai_compatible"
    vendor_name = "OpenAI-compatible"
    kind = MediaKind.VIDEO

    async def invoke(self, credential: str, model: str, payload: VideoPayload, *, provider: str) -> VideoResult:
        vendor = self.vendor_label(provider)
        resp = await self._post(
            f"{self.base_url(provider)}/videos/generations",
            vendor=vendor,
            json={"model": model, "prompt": payload.prompt, "duration": payload.duration},
            headers=self._bearer(credential),
        )
        data = self._json(resp, vendor)
        if not isinstance(data, dict):
            raise MalformedResponseError(vendor, "response is not a JSON object")

        items = data.get("data")
        if isinstance(items, list) and items and isinstance(items[0], dict) and items[0].get("url"):
            return VideoResult(provider=provider, model=model, video_url=items[0]["url"])
        if data.get("id"):
            return VideoResult(provider=provider, model=model, video_id=self._job_id(data["id"], vendor))
        raise MalformedResponseError(vendor, "response has neither data[0].url nor id")
