"""Vendor adapters, one module per media kind."""

from mediagate.gateway.adapters.base import BaseVendorAdapter, OpenAICompatibleMixin
from mediagate.gateway.adapters.image import (
    DallEImageAdapter,
    FluxImageAdapter,
    MidjourneyImageAdapter,
    OpenAICompatibleImageAdapter,
    StabilityImageAdapter,
)
from mediagate.gateway.adapters.text import (
    AnthropicTextAdapter,
    DeepSeekTextAdapter,
    GoogleTextAdapter,
    GroqTextAdapter,
    MistralTextAdapter,
    OpenAICompatibleTextAdapter,
    OpenAITextAdapter,
)
from mediagate.gateway.adapters.video import (
    HeyGenVideoAdapter,
    KlingVideoAdapter,
    LTXVideoAdapter,
    LumaVideoAdapter,
    OpenAICompatibleVideoAdapter,
    PikaVideoAdapter,
    RunwayVideoAdapter,
    SoraVideoAdapter,
    VeoVideoAdapter,
)
from mediagate.gateway.adapters.voice import (
    CartesiaVoiceAdapter,
    ElevenLabsVoiceAdapter,
    GoogleVoiceAdapter,
    OpenAICompatibleVoiceAdapter,
    OpenAIVoiceAdapter,
    PlayHTVoiceAdapter,
)

__all__ = [
    "AnthropicTextAdapter",
    "BaseVendorAdapter",
    "CartesiaVoiceAdapter",
    "DallEImageAdapter",
    "DeepSeekTextAdapter",
    "ElevenLabsVoiceAdapter",
    "FluxImageAdapter",
    "GoogleTextAdapter",
    "GoogleVoiceAdapter",
    "GroqTextAdapter",
    "HeyGenVideoAdapter",
    "KlingVideoAdapter",
    "LTXVideoAdapter",
    "LumaVideoAdapter",
    "MidjourneyImageAdapter",
    "MistralTextAdapter",
    "OpenAICompatibleImageAdapter",
    "OpenAICompatibleMixin",
    "OpenAICompatibleTextAdapter",
    "OpenAICompatibleVideoAdapter",
    "OpenAICompatibleVoiceAdapter",
    "OpenAITextAdapter",
    "OpenAIVoiceAdapter",
    "PikaVideoAdapter",
    "PlayHTVoiceAdapter",
    "RunwayVideoAdapter",
    "SoraVideoAdapter",
    "StabilityImageAdapter",
    "VeoVideoAdapter",
]
