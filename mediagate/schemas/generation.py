"""Inbound generation request bodies."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from mediagate.gateway.errors import ValidationError
from mediagate.gateway.types import (
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_VIDEO_DURATION,
    REQUIRED_FIELD,
    ChatMessage,
    GenerationRequest,
    ImagePayload,
    MediaKind,
    Payload,
    TextPayload,
    VideoPayload,
    VoicePayload,
)


class ChatMessageIn(BaseModel):
    role: str = Field(..., min_length=1)
    content: str


class _GenerationBody(BaseModel, ABC):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    provider: str
    model: str

    @abstractmethod
    def to_payload(self) -> Payload: ...


class TextGenerationBody(_GenerationBody):
    messages: list[ChatMessageIn] = Field(..., min_length=1)
    temperature: float | None = Field(None, ge=0)
    max_tokens: int | None = Field(None, alias="maxTokens", gt=0)

    def to_payload(self) -> TextPayload:
        return TextPayload(
            messages=tuple(ChatMessage(role=m.role, content=m.content) for m in self.messages),
            temperature=DEFAULT_TEMPERATURE if self.temperature is None else self.temperature,
            max_tokens=self.max_tokens or DEFAULT_MAX_TOKENS,
        )


class ImageGenerationBody(_GenerationBody):
    prompt: str
    size: str | None = None  # default 1024x1024
    quality: str | None = None  # default "standard"

    def to_payload(self) -> ImagePayload:
        return ImagePayload(
            prompt=self.prompt,
            size=self.size or DEFAULT_IMAGE_SIZE,
            quality=self.quality or DEFAULT_IMAGE_QUALITY,
        )


class VoiceGenerationBody(_GenerationBody):
    text: str
    voice: str | None = None  # vendor default when omitted

    def to_payload(self) -> VoicePayload:
        return VoicePayload(text=self.text, voice=self.voice or None)


class VideoGenerationBody(_GenerationBody):
    prompt: str
    duration: int | None = Field(None, gt=0)  # seconds, default 5

    def to_payload(self) -> VideoPayload:
        return VideoPayload(prompt=self.prompt, duration=self.duration or DEFAULT_VIDEO_DURATION)


BODY_MODELS: dict[MediaKind, type[_GenerationBody]] = {
    MediaKind.TEXT: TextGenerationBody,
    MediaKind.IMAGE: ImageGenerationBody,
    MediaKind.VOICE: VoiceGenerationBody,
    MediaKind.VIDEO: VideoGenerationBody,
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def parse_generation_request(kind: MediaKind, raw_body: bytes) -> GenerationRequest:
    """Decode and validate one request body.

    Presence of ``provider``, ``model`` and the kind's mandatory field is
    checked first, so a body missing any of them always gets the
    "Missing required fields" message whatever else is wrong with it.
    """
    try:
        data = json.loads(raw_body or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError("Invalid JSON body") from e

    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    required = ("provider", "model", REQUIRED_FIELD[kind])
    if any(_is_blank(data.get(name)) for name in required):
        raise ValidationError(f"Missing required fields: {', '.join(required)}")

    try:
        body = BODY_MODELS[kind].model_validate(data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors(include_url=False)
        )
        raise ValidationError(f"Invalid request body: {problems}") from e

    return GenerationRequest(kind=kind, provider=body.provider.strip(), model=body.model.strip(), payload=body.to_payload())
