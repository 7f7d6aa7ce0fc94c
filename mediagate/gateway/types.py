"""Core types and DTOs for the Media Generation Gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class MediaKind(str, Enum):
    """Kinds of generation the gateway routes."""

    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"
    VIDEO = "video"


# Public endpoint name → kind. Text keeps its historical "llm" path.
ENDPOINT_KINDS: dict[str, MediaKind] = {
    "llm": MediaKind.TEXT,
    "image": MediaKind.IMAGE,
    "voice": MediaKind.VOICE,
    "video": MediaKind.VIDEO,
}

# Kind → the kind-specific mandatory body field
REQUIRED_FIELD: dict[MediaKind, str] = {
    MediaKind.TEXT: "messages",
    MediaKind.IMAGE: "prompt",
    MediaKind.VOICE: "text",
    MediaKind.VIDEO: "prompt",
}


# ---------------------------------------------------------------------------
# Normalized payloads: input to adapters
# ---------------------------------------------------------------------------

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_IMAGE_QUALITY = "standard"
DEFAULT_VIDEO_DURATION = 5


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class TextPayload:
    messages: tuple[ChatMessage, ...]
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    def message_dicts(self) -> list[dict[str, str]]:
        return [m.to_dict() for m in self.messages]


@dataclass(frozen=True)
class ImagePayload:
    prompt: str
    size: str = DEFAULT_IMAGE_SIZE
    quality: str = DEFAULT_IMAGE_QUALITY

    def dimensions(self) -> tuple[int, int]:
        """Parse ``size`` ("WIDTHxHEIGHT"); anything unparseable falls back to 1024x1024."""
        width, sep, height = self.size.lower().partition("x")
        if sep and width.isdigit() and height.isdigit():
            return int(width), int(height)
        return 1024, 1024


@dataclass(frozen=True)
class VoicePayload:
    text: str
    voice: str | None = None


@dataclass(frozen=True)
class VideoPayload:
    prompt: str
    duration: int = DEFAULT_VIDEO_DURATION


Payload = Union[TextPayload, ImagePayload, VoicePayload, VideoPayload]


@dataclass(frozen=True)
class GenerationRequest:
    """A validated, provider-agnostic request. Lives for one call."""

    kind: MediaKind
    provider: str
    model: str
    payload: Payload


# ---------------------------------------------------------------------------
# Results: one tagged variant per media kind
# ---------------------------------------------------------------------------


def _require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValueError(f"Result is missing required fields: {', '.join(missing)}")


@dataclass(frozen=True)
class TextResult:
    kind: ClassVar[MediaKind] = MediaKind.TEXT

    provider: str
    model: str
    content: str
    usage: dict[str, Any] | None = None

    def __post_init__(self):
        # content may legitimately be "" (e.g. max_tokens hit), only identity is mandatory
        _require(provider=self.provider, model=self.model)

    @property
    def artifact(self) -> str:
        return self.content

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"provider": self.provider, "model": self.model, "content": self.content}
        if self.usage is not None:
            data["usage"] = self.usage
        return data


@dataclass(frozen=True)
class ImageResult:
    kind: ClassVar[MediaKind] = MediaKind.IMAGE

    provider: str
    model: str
    image_url: str
    revised_prompt: str | None = None

    def __post_init__(self):
        _require(provider=self.provider, model=self.model, image_url=self.image_url)

    @property
    def artifact(self) -> str:
        return self.image_url

    def to_dict(self) -> dict[str, Any]:
        data = {"provider": self.provider, "model": self.model, "imageUrl": self.image_url}
        if self.revised_prompt is not None:
            data["revisedPrompt"] = self.revised_prompt
        return data


@dataclass(frozen=True)
class PendingImageResult:
    """An image job accepted by an asynchronous vendor; not polled by the gateway."""

    kind: ClassVar[MediaKind] = MediaKind.IMAGE

    provider: str
    model: str
    message_id: str
    status: str = "processing"

    def __post_init__(self):
        _require(provider=self.provider, model=self.model, message_id=self.message_id, status=self.status)

    @property
    def artifact(self) -> str:
        return self.message_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "model": self.model,
            "messageId": self.message_id,
            "status": self.status,
        }


@dataclass(frozen=True)
class AudioResult:
    kind: ClassVar[MediaKind] = MediaKind.VOICE

    provider: str
    model: str
    audio_url: str
    audio_content: str | None = None  # base64, only for vendors that return it inline

    def __post_init__(self):
        _require(provider=self.provider, model=self.model, audio_url=self.audio_url)

    @property
    def artifact(self) -> str:
        return self.audio_url

    def to_dict(self) -> dict[str, Any]:
        data = {"provider": self.provider, "model": self.model, "audioUrl": self.audio_url}
        if self.audio_content is not None:
            data["audioContent"] = self.audio_content
        return data


@dataclass(frozen=True)
class VideoResult:
    kind: ClassVar[MediaKind] = MediaKind.VIDEO

    provider: str
    model: str
    video_url: str | None = None
    video_id: str | None = None

    def __post_init__(self):
        _require(provider=self.provider, model=self.model)
        if not (self.video_url or self.video_id):
            raise ValueError("Result is missing required fields: video_url or video_id")

    @property
    def artifact(self) -> str:
        return self.video_url or self.video_id or ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"provider": self.provider, "model": self.model}
        if self.video_url:
            data["videoUrl"] = self.video_url
        if self.video_id:
            data["videoId"] = self.video_id
        return data


GenerationResult = Union[TextResult, ImageResult, PendingImageResult, AudioResult, VideoResult]


@dataclass
class GatewayReply:
    """HTTP-ready outcome of one gateway call: status code plus JSON body."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
