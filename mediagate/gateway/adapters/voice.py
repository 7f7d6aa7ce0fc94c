"""Voice (text-to-speech) adapters.

All vendors take text plus an optional voice id and fall back to their own
default voice. Raw audio bytes are parked in the media store; Google TTS
answers with base64 inside JSON and gets a ``data:`` URI instead, so every
adapter hands back the same shape: a playable audio URL.
"""

from __future__ import annotations

from typing import Any

import httpx

from mediagate.gateway.adapters.base import DEFAULT_TIMEOUT, BaseVendorAdapter, OpenAICompatibleMixin
from mediagate.gateway.errors import MalformedResponseError
from mediagate.gateway.media_store import MediaStore
from mediagate.gateway.types import AudioResult, MediaKind, VoicePayload


class _BinaryAudioAdapter(BaseVendorAdapter):
    kind = MediaKind.VOICE
    default_voice: str = ""
    default_content_type = "audio/mpeg"

    def __init__(self, media_store: MediaStore, timeout: float = DEFAULT_TIMEOUT, **kwargs):
        super().__init__(timeout=timeout, **kwargs)
        self.media_store = media_store

    def _audio_result(self, resp: httpx.Response, *, provider: str, model: str, vendor: str) -> AudioResult:
        if not resp.content:
            raise MalformedResponseError(vendor, "empty audio body")
        content_type = resp.headers.get("content-type", self.default_content_type)
        return AudioResult(provider=provider, model=model, audio_url=self.media_store.put(resp.content, content_type))


class ElevenLabsVoiceAdapter(_BinaryAudioAdapter):
    name = "elevenlabs"
    vendor_name = "ElevenLabs"
    default_voice = "21m00Tcm4TlvDq8ikWAM"
    api_url_template = "https://api.elevenlabs.io/v1/text-to-speech/{voice}"

    async def invoke(self, credential: str, model: str, payload: VoicePayload, *, provider: str) -> AudioResult:
        voice = payload.voice or self.default_voice
        resp = await self._post(
            self.api_url_template.format(voice=voice),
            vendor=self.vendor_name,
            json={
                "text": payload.text,
                "model_id": model,
                "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
            },
            headers={"xi-api-key": credential, "Content-Type": "application/json"},
        )
        return self._audio_result(resp, provider="elevenlabs", model=model, vendor=self.vendor_name)


class OpenAIVoiceAdapter(_BinaryAudioAdapter):
    name = "openai_tts"
    vendor_name = "OpenAI TTS"
    default_voice = "alloy"
    api_url = "https://api.openai.com/v1/audio/speech"

    async def invoke(self, credential: str, model: str, payload: VoicePayload, *, provider: str) -> AudioResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"model": model, "input": payload.text, "voice": payload.voice or self.default_voice},
            headers=self._bearer(credential),
        )
        return self._audio_result(resp, provider="openai", model=model, vendor=self.vendor_name)


class PlayHTVoiceAdapter(_BinaryAudioAdapter):
    name = "playht"
    vendor_name = "PlayHT"
    default_voice = "s3://voice-cloning-zero-shot/d9ff78ba-d016-47f6-b0ef-dd630f59414e/female-cs/manifest.json"
    api_url = "https://api.play.ht/api/v2/tts"

    def __init__(self, media_store: MediaStore, user_id: str = "user_id", timeout: float = DEFAULT_TIMEOUT, **kwargs):
        super().__init__(media_store=media_store, timeout=timeout, **kwargs)
        self.user_id = user_id

    async def invoke(self, credential: str, model: str, payload: VoicePayload, *, provider: str) -> AudioResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={"text": payload.text, "voice": payload.voice or self.default_voice, "output_format": "mp3"},
            headers={**self._bearer(credential), "X-USER-ID": self.user_id},
        )
        return self._audio_result(resp, provider="playht", model=model, vendor=self.vendor_name)


class CartesiaVoiceAdapter(_BinaryAudioAdapter):
    name = "cartesia"
    vendor_name = "Cartesia"
    default_voice = "a0e99841-438c-4a64-b679-ae501e7d6091"
    default_content_type = "audio/pcm"
    api_url = "https://api.cartesia.ai/tts/bytes"
    api_version = "2024-06-10"

    async def invoke(self, credential: str, model: str, payload: VoicePayload, *, provider: str) -> AudioResult:
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={
                "model_id": model,
                "transcript": payload.text,
                "voice": {"mode": "id", "id": payload.voice or self.default_voice},
                "output_format": {"container": "raw", "encoding": "pcm_f32le", "sample_rate": 44100},
            },
            headers={
                "X-API-Key": credential,
                "Cartesia-Version": self.api_version,
                "Content-Type": "application/json",
            },
        )
        return self._audio_result(resp, provider="cartesia", model=model, vendor=self.vendor_name)


class GoogleVoiceAdapter(BaseVendorAdapter):
    """Google Cloud TTS returns base64 audio in JSON; exposed as a data URI."""

    name = "google_tts"
    vendor_name = "Google TTS"
    kind = MediaKind.VOICE
    default_voice = "en-US-Neural2-A"
    api_url = "https://texttospeech.googleapis.com/v1/text:synthesize"

    async def invoke(self, credential: str, model: str, payload: VoicePayload, *, provider: str) -> AudioResult:
        voice = payload.voice or self.default_voice
        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json={
                "input": {"text": payload.text},
                "voice": {"languageCode": _language_code(voice), "name": voice},
                "audioConfig": {"audioEncoding": "MP3"},
            },
            params={"key": credential},
            headers={"Content-Type": "application/json"},
        )
        data = self._json(resp, self.vendor_name)

        with self._response_shape(self.vendor_name):
            audio_content = data["audioContent"]
            return AudioResult(
                provider="google",
                model=model,
                audio_url=f"data:audio/mp3;base64,{audio_content}",
                audio_content=audio_content,
            )


def _language_code(voice: str) -> str:
    """``en-GB-Wavenet-B`` → ``en-GB``; names without a locale prefix default to en-US."""
    parts = voice.split("-")
    if len(parts) >= 3 and len(parts[0]) in (2, 3) and len(parts[1]) == 2:
        return f"{parts[0]}-{parts[1]}"
    return "en-US"


class OpenAICompatibleVoiceAdapter(OpenAICompatibleMixin, _BinaryAudioAdapter):
    """Fallback for unregistered voice vendors: ``POST <base>/tts`` returning audio bytes."""

    name = "openai_compatible"
    vendor_name = "OpenAI-compatible"
    known_endpoints = {
        "deepgram": "https://api.deepgram.com/v1",
        "rime": "https://api.rime.ai/v1",
    }

    async def invoke(self, credential: str, model: str, payload: VoicePayload, *, provider: str) -> AudioResult:
        vendor = self.vendor_label(provider)
        body: dict[str, Any] = {"text": payload.text, "model": model}
        if payload.voice:
            body["voice"] = payload.voice
        resp = await self._post(
            f"{self.base_url(provider)}/tts",
            vendor=vendor,
            json=body,
            headers=self._bearer(credential),
        )
        return self._audio_result(resp, provider=provider, model=model, vendor=vendor)
