"""Image generation adapters.

Vendor-specific behaviors:
  - DALL-E: JSON with image URL(s) and an optional revised prompt; index 0 is canonical
  - Stability AI: multipart request, raw image bytes back → parked in the media store
  - Flux: JSON ``result.sample``
  - Midjourney: asynchronous job; returns a message id with status "processing"
  - Fallback: OpenAI-compatible ``/images/generations``, either ``data[0].url`` or ``result.sample``
"""

from __future__ import annotations

from mediagate.gateway.adapters.base import DEFAULT_TIMEOUT, BaseVendorAdapter, OpenAICompatibleMixin
from mediagate.gateway.errors import MalformedResponseError
from mediagate.gateway.media_store import MediaStore
from mediagate.gateway.types import ImagePayload, ImageResult, MediaKind, PendingImageResult


class DallEImageAdapter(BaseVendorAdapter):
    name = "dalle"
    vendor_name = "DALL-E"
    kind = MediaKind.IMAGE
    api_url = "https://api.openai.com/v1/images/generations"

    async def invoke(self, credential: str, model: str, payload: ImagePayload, *, provider: str) -> ImageResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={
                "model": model,
                "prompt": payload.prompt,
                "size": payload.size,
                "quality": payload.quality,
                "n": 1,
            },
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)

        with self._response_shape(self.vendor_name):
            first = data["data"][0]
            return ImageResult(
                provider="openai",
                model=model,
                image_url=first["url"],
                revised_prompt=first.get("revised_prompt"),
            )


class StabilityImageAdapter(BaseVendorAdapter):
    name = "stability"
    vendor_name = "Stability AI"
    kind = MediaKind.IMAGE
    api_url = "https://api.stability.ai/v2beta/stable-image/generate/sd3"

    def __init__(self, media_store: MediaStore, timeout: float = DEFAULT_TIMEOUT, **kwargs):
        super().__init__(timeout=timeout, **kwargs)
        self.media_store = media_store

    async def invoke(self, credential: str, model: str, payload: ImagePayload, *, provider: str) -> ImageResult:
        # multipart/form-data with plain fields; (None, value) means "no filename"
        form = {
            "prompt": (None, payload.prompt),
            "model": (None, model),
            "output_format": (None, "png"),
        }
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            files=form,
            headers={"Authorization": f"Bearer {credential}", "Accept": "image/*"},
        )
        if not resp.content:
            raise MalformedResponseError(self.vendor_name, "empty image body")

        content_type = resp.headers.get("content-type", "image/png")
        return ImageResult(provider="stability", model=model, image_url=self.media_store.put(resp.content, content_type))


class FluxImageAdapter(BaseVendorAdapter):
    name = "flux"
    vendor_name = "Flux"
    kind = MediaKind.IMAGE
    api_url = "https://api.bfl.ml/v1/images/generations"

    async def invoke(self, credential: str, model: str, payload: ImagePayload, *, provider: str) -> ImageResult:
        width, height = payload.dimensions()
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"prompt": payload.prompt, "model": model, "width": width, "height": height},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)

        with self._response_shape(self.vendor_name):
            return ImageResult(provider="flux", model=model, image_url=data["result"]["sample"])


class MidjourneyImageAdapter(BaseVendorAdapter):
    """Job-style vendor: the image is not ready when the call returns.

    The job id is surfaced with status "processing"; following up on it is the
    caller's business.
    """

    name = "midjourney"
    vendor_name = "Midjourney"
    kind = MediaKind.IMAGE
    api_url = "https://api.thenextleg.io/v2/imagine"

    async def invoke(self, credential: str, model: str, payload: ImagePayload, *, provider: str) -> PendingImageResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"msg": payload.prompt},
            headers=self._bearer(credential),
        )
        data = self._json(resp, self.vendor_name)

        with self._response_shape(self.vendor_name):
            message_id = self._job_id(data["messageId"], self.vendor_name)
            return PendingImageResult(provider="midjourney", model=model, message_id=message_id)


class OpenAICompatibleImageAdapter(OpenAICompatibleMixin, BaseVendorAdapter):
    """Fallback for unregistered image vendors."""

    name = "openai_compatible"
    vendor_name = "OpenAI-compatible"
    kind = MediaKind.IMAGE
    known_endpoints = {
        "runware": "https://api.runware.ai/v1",
        "prodia": "https://api.prodia.com/v1",
        "segmind": "https://api.segmind.com/v1",
    }

    async def invoke(self, credential: str, model: str, payload: ImagePayload, *, provider: str) -> ImageResult:
        vendor = self.vendor_label(provider)
        resp = await self._post(
            f"{self.base_url(provider)}/images/generations",
            vendor=vendor,
            json={"prompt": payload.prompt, "model": model, "size": payload.size, "n": 1},
            headers=self._bearer(credential),
        )
        data = self._json(resp, vendor)

        image_url = _first_data_url(data) or _result_sample(data)
        if not image_url:
            raise MalformedResponseError(vendor, "response has neither data[0].url nor result.sample")
        return ImageResult(provider=provider, model=model, image_url=image_url)


def _first_data_url(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    items = data.get("data")
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("url") or None
    return None


def _result_sample(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    result = data.get("result")
    if isinstance(result, dict):
        return result.get("sample") or None
    return None
