"""Adapter registry — provider identifier → adapter, per media kind.

Lookup is two-tier: an exact (case-insensitive) match on a registered
provider id, otherwise the kind's OpenAI-compatible fallback adapter. New
vendors exposing that contract work without registration, and adding a
dedicated adapter never touches the dispatcher.

Registries are built once at startup and are read-only afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from mediagate.core.config import Settings
from mediagate.gateway.adapters import (
    AnthropicTextAdapter,
    BaseVendorAdapter,
    CartesiaVoiceAdapter,
    DallEImageAdapter,
    DeepSeekTextAdapter,
    ElevenLabsVoiceAdapter,
    FluxImageAdapter,
    GoogleTextAdapter,
    GoogleVoiceAdapter,
    GroqTextAdapter,
    HeyGenVideoAdapter,
    KlingVideoAdapter,
    LTXVideoAdapter,
    LumaVideoAdapter,
    MidjourneyImageAdapter,
    MistralTextAdapter,
    OpenAICompatibleImageAdapter,
    OpenAICompatibleTextAdapter,
    OpenAICompatibleVideoAdapter,
    OpenAICompatibleVoiceAdapter,
    OpenAITextAdapter,
    OpenAIVoiceAdapter,
    PikaVideoAdapter,
    PlayHTVoiceAdapter,
    RunwayVideoAdapter,
    SoraVideoAdapter,
    StabilityImageAdapter,
    VeoVideoAdapter,
)
from mediagate.gateway.media_store import MediaStore
from mediagate.gateway.types import MediaKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdapterSelection:
    adapter: BaseVendorAdapter
    is_fallback: bool


class AdapterRegistry:
    """Immutable provider-id table with exactly one fallback adapter."""

    def __init__(self, kind: MediaKind, adapters: Mapping[str, BaseVendorAdapter], fallback: BaseVendorAdapter):
        if fallback is None:
            raise ValueError(f"{kind.value} registry needs a fallback adapter")
        self.kind = kind
        self._adapters = MappingProxyType({provider.lower(): adapter for provider, adapter in adapters.items()})
        self._fallback = fallback

    @property
    def fallback(self) -> BaseVendorAdapter:
        return self._fallback

    @property
    def providers(self) -> list[str]:
        return sorted(self._adapters)

    def select(self, provider: str) -> AdapterSelection:
        """Exact match on the lower-cased id, else the fallback."""
        adapter = self._adapters.get(provider.lower())
        if adapter is not None:
            return AdapterSelection(adapter=adapter, is_fallback=False)
        return AdapterSelection(adapter=self._fallback, is_fallback=True)

    def __contains__(self, provider: str) -> bool:
        return provider.lower() in self._adapters


def build_registries(settings: Settings, media_store: MediaStore) -> dict[MediaKind, AdapterRegistry]:
    """Build every kind's registry. Adapters are stateless and shared across calls."""
    timeout = settings.vendor_timeout_seconds

    openai_text = OpenAITextAdapter(timeout=timeout)
    text = AdapterRegistry(
        MediaKind.TEXT,
        {
            "openai": openai_text,
            "anthropic": AnthropicTextAdapter(timeout=timeout),
            "google": GoogleTextAdapter(timeout=timeout),
            "groq": GroqTextAdapter(timeout=timeout),
            "deepseek": DeepSeekTextAdapter(timeout=timeout),
            "mistral": MistralTextAdapter(timeout=timeout),
        },
        fallback=OpenAICompatibleTextAdapter(timeout=timeout),
    )

    dalle = DallEImageAdapter(timeout=timeout)
    stability = StabilityImageAdapter(media_store=media_store, timeout=timeout)
    image = AdapterRegistry(
        MediaKind.IMAGE,
        {
            "dalle3": dalle,
            "dalle4": dalle,
            "sd3": stability,
            "stability": stability,
            "flux": FluxImageAdapter(timeout=timeout),
            "midjourney": MidjourneyImageAdapter(timeout=timeout),
        },
        fallback=OpenAICompatibleImageAdapter(timeout=timeout),
    )

    openai_tts = OpenAIVoiceAdapter(media_store=media_store, timeout=timeout)
    google_tts = GoogleVoiceAdapter(timeout=timeout)
    voice = AdapterRegistry(
        MediaKind.VOICE,
        {
            "elevenlabs": ElevenLabsVoiceAdapter(media_store=media_store, timeout=timeout),
            "openai": openai_tts,
            "openai_tts": openai_tts,
            "playht": PlayHTVoiceAdapter(media_store=media_store, user_id=settings.playht_user_id, timeout=timeout),
            "cartesia": CartesiaVoiceAdapter(media_store=media_store, timeout=timeout),
            "google": google_tts,
            "google_tts": google_tts,
        },
        fallback=OpenAICompatibleVoiceAdapter(media_store=media_store, timeout=timeout),
    )

    poll = {
        "poll_interval": settings.video_poll_interval_seconds,
        "max_attempts": settings.video_poll_max_attempts,
    }
    video = AdapterRegistry(
        MediaKind.VIDEO,
        {
            "runway": RunwayVideoAdapter(timeout=timeout, **poll),
            "luma": LumaVideoAdapter(timeout=timeout, **poll),
            "ltx2": LTXVideoAdapter(timeout=timeout),
            "sora2": SoraVideoAdapter(timeout=timeout),
            "veo3": VeoVideoAdapter(
                project_id=settings.google_cloud_project,
                location=settings.google_cloud_location,
                timeout=timeout,
            ),
            "kling": KlingVideoAdapter(timeout=timeout),
            "pika": PikaVideoAdapter(timeout=timeout),
            "heygen": HeyGenVideoAdapter(timeout=timeout),
        },
        fallback=OpenAICompatibleVideoAdapter(timeout=timeout),
    )

    registries = {MediaKind.TEXT: text, MediaKind.IMAGE: image, MediaKind.VOICE: voice, MediaKind.VIDEO: video}
    for kind, registry in registries.items():
        logger.debug("Registered %s providers: %s", kind.value, ", ".join(registry.providers))
    return registries
