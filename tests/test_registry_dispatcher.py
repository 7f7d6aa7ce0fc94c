"""Tests for the adapter registry and the per-kind dispatcher."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from conftest import SpyCredentialResolver, make_httpx_response

from mediagate.core.config import Settings
from mediagate.core.credentials import EnvCredentialResolver, StaticCredentialResolver, credential_env_var
from mediagate.gateway.adapters import (
    DallEImageAdapter,
    OpenAICompatibleTextAdapter,
    OpenAICompatibleVideoAdapter,
    OpenAITextAdapter,
    StabilityImageAdapter,
)
from mediagate.gateway.dispatcher import Dispatcher
from mediagate.gateway.errors import CredentialError, VendorError
from mediagate.gateway.media_store import MediaStore
from mediagate.gateway.registry import AdapterRegistry, build_registries
from mediagate.gateway.types import (
    ChatMessage,
    ImagePayload,
    MediaKind,
    TextPayload,
    TextResult,
    VideoPayload,
    VoicePayload,
)


@pytest.fixture
def registries():
    return build_registries(Settings(_env_file=None), MediaStore())


class TestAdapterRegistry:
    def test_every_kind_registered(self, registries):
        assert set(registries) == set(MediaKind)
        for registry in registries.values():
            assert registry.fallback.name == "openai_compatible"

    def test_registered_ids(self, registries):
        assert registries[MediaKind.TEXT].providers == ["anthropic", "deepseek", "google", "groq", "mistral", "openai"]
        assert {"dalle3", "dalle4", "sd3", "stability", "flux", "midjourney"} == set(registries[MediaKind.IMAGE].providers)
        assert "google_tts" in registries[MediaKind.VOICE]
        assert {"runway", "luma", "ltx2", "sora2", "veo3", "kling", "pika", "heygen"} == set(
            registries[MediaKind.VIDEO].providers
        )

    def test_aliases_share_an_adapter(self, registries):
        image = registries[MediaKind.IMAGE]
        assert image.select("dalle3").adapter is image.select("dalle4").adapter
        assert isinstance(image.select("sd3").adapter, StabilityImageAdapter)
        assert isinstance(image.select("dalle3").adapter, DallEImageAdapter)

    def test_lookup_is_case_insensitive(self, registries):
        selection = registries[MediaKind.TEXT].select("OpenAI")
        assert isinstance(selection.adapter, OpenAITextAdapter)
        assert selection.is_fallback is False

    def test_unknown_provider_uses_fallback(self, registries):
        selection = registries[MediaKind.TEXT].select("together")
        assert isinstance(selection.adapter, OpenAICompatibleTextAdapter)
        assert selection.is_fallback is True
        assert isinstance(registries[MediaKind.VIDEO].select("minimax").adapter, OpenAICompatibleVideoAdapter)

    def test_registry_is_read_only(self):
        adapters = {"openai": OpenAITextAdapter()}
        registry = AdapterRegistry(MediaKind.TEXT, adapters, fallback=OpenAICompatibleTextAdapter())
        adapters["groq"] = OpenAITextAdapter()
        assert "groq" not in registry
        with pytest.raises(TypeError):
            registry._adapters["groq"] = OpenAITextAdapter()

    def test_fallback_required(self):
        with pytest.raises(ValueError):
            AdapterRegistry(MediaKind.TEXT, {}, fallback=None)

    def test_timeouts_from_settings(self):
        registries = build_registries(Settings(_env_file=None, vendor_timeout_seconds=7.5), MediaStore())
        assert registries[MediaKind.TEXT].select("openai").adapter.timeout == 7.5
        assert registries[MediaKind.VIDEO].fallback.timeout == 7.5


class TestCredentials:
    def test_env_var_name(self):
        assert credential_env_var("openai") == "OPENAI_API_KEY"
        assert credential_env_var("google_tts") == "GOOGLE_TTS_API_KEY"

    def test_env_resolver(self):
        resolver = EnvCredentialResolver({"OPENAI_API_KEY": " sk-1 ", "GROQ_API_KEY": "  "})
        assert resolver.resolve("openai") == "sk-1"
        assert resolver.resolve("OpenAI") == "sk-1"
        assert resolver.resolve("groq") is None
        assert resolver.resolve("mistral") is None

    def test_static_resolver(self):
        resolver = StaticCredentialResolver({"Anthropic": "ak", "groq": ""})
        assert resolver.resolve("anthropic") == "ak"
        assert resolver.resolve("groq") is None


def _text_payload() -> TextPayload:
    return TextPayload(messages=(ChatMessage(role="user", content="Hi"),))


class TestDispatcher:
    @pytest.mark.asyncio
    async def test_missing_credential_makes_no_outbound_call(self, registries):
        credentials = SpyCredentialResolver({})
        dispatcher = Dispatcher(registries[MediaKind.TEXT], credentials)

        with patch("mediagate.gateway.adapters.base.httpx.AsyncClient") as mock_client_cls:
            with pytest.raises(CredentialError, match="API key not configured for openai"):
                await dispatcher.dispatch("openai", "gpt-4o", _text_payload())

        assert credentials.calls == ["openai"]
        mock_client_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_routes_to_selected_adapter(self, registries):
        dispatcher = Dispatcher(registries[MediaKind.TEXT], StaticCredentialResolver({"groq": "gk"}))
        adapter = registries[MediaKind.TEXT].select("groq").adapter
        expected = TextResult(provider="groq", model="llama", content="ok")

        with patch.object(adapter, "invoke", AsyncMock(return_value=expected)) as invoke:
            result = await dispatcher.dispatch("GROQ", "llama", _text_payload())

        assert result is expected
        invoke.assert_awaited_once_with("gk", "llama", _text_payload(), provider="GROQ")

    @pytest.mark.asyncio
    async def test_fallback_receives_raw_provider(self, registries):
        dispatcher = Dispatcher(registries[MediaKind.TEXT], StaticCredentialResolver({"together": "tk"}))

        with patch("mediagate.gateway.adapters.base.httpx.AsyncClient") as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.post.return_value = make_httpx_response(
                200, json_data={"choices": [{"message": {"content": "hey"}}]}
            )
            mock_client.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client.__aexit__ = AsyncMock(return_value=None)
            mock_client_cls.return_value = mock_client

            result = await dispatcher.dispatch("together", "llama-3", _text_payload())

        assert mock_client.post.call_args.args[0] == "https://api.together.xyz/v1/chat/completions"
        assert mock_client.post.call_args.kwargs["headers"]["Authorization"] == "Bearer tk"
        assert result.provider == "together"

    @pytest.mark.asyncio
    async def test_adapter_errors_propagate(self, registries):
        dispatcher = Dispatcher(registries[MediaKind.IMAGE], StaticCredentialResolver({"dalle3": "sk"}))
        adapter = registries[MediaKind.IMAGE].select("dalle3").adapter

        with patch.object(adapter, "invoke", AsyncMock(side_effect=VendorError("DALL-E", "nope", 400))):
            with pytest.raises(VendorError, match="DALL-E API error: nope"):
                await dispatcher.dispatch("dalle3", "dall-e-3", ImagePayload(prompt="p"))


_CHAT = {"choices": [{"message": {"content": "ok"}}]}
_AUDIO_BYTES = {"content": b"ID3audio", "headers": {"content-type": "audio/mpeg"}}

# provider id → (kind, vendor POST response, vendor GET response for pollers)
VENDOR_RESPONSES = {
    "openai": (MediaKind.TEXT, {"json_data": _CHAT}, None),
    "groq": (MediaKind.TEXT, {"json_data": _CHAT}, None),
    "deepseek": (MediaKind.TEXT, {"json_data": _CHAT}, None),
    "mistral": (MediaKind.TEXT, {"json_data": _CHAT}, None),
    "anthropic": (MediaKind.TEXT, {"json_data": {"content": [{"type": "text", "text": "ok"}]}}, None),
    "google": (MediaKind.TEXT, {"json_data": {"candidates": [{"content": {"parts": [{"text": "ok"}]}}]}}, None),
    "dalle3": (MediaKind.IMAGE, {"json_data": {"data": [{"url": "https://x/1.png"}]}}, None),
    "dalle4": (MediaKind.IMAGE, {"json_data": {"data": [{"url": "https://x/1.png"}]}}, None),
    "sd3": (MediaKind.IMAGE, {"content": b"\x89PNG", "headers": {"content-type": "image/png"}}, None),
    "stability": (MediaKind.IMAGE, {"content": b"\x89PNG", "headers": {"content-type": "image/png"}}, None),
    "flux": (MediaKind.IMAGE, {"json_data": {"result": {"sample": "https://f/1.png"}}}, None),
    "midjourney": (MediaKind.IMAGE, {"json_data": {"messageId": "m-1"}}, None),
    "elevenlabs": (MediaKind.VOICE, _AUDIO_BYTES, None),
    "openai_tts": (MediaKind.VOICE, _AUDIO_BYTES, None),
    "playht": (MediaKind.VOICE, _AUDIO_BYTES, None),
    "cartesia": (MediaKind.VOICE, {"content": b"\x00\x01", "headers": {"content-type": "audio/pcm"}}, None),
    "google_tts": (MediaKind.VOICE, {"json_data": {"audioContent": "QUJD"}}, None),
    "runway": (MediaKind.VIDEO, {"json_data": {"id": "t1"}}, {"status": "SUCCEEDED", "output": ["https://r/1.mp4"]}),
    "luma": (MediaKind.VIDEO, {"json_data": {"id": "g1"}}, {"state": "completed", "video": {"url": "https://l/1.mp4"}}),
    "ltx2": (MediaKind.VIDEO, {"json_data": {"video_url": "https://ltx/1.mp4"}}, None),
    "sora2": (MediaKind.VIDEO, {"json_data": {"data": [{"url": "https://s/1.mp4"}]}}, None),
    "veo3": (MediaKind.VIDEO, {"json_data": {"predictions": [{"videoUrl": "https://v/1.mp4"}]}}, None),
    "kling": (MediaKind.VIDEO, {"json_data": {"data": {"task_id": "k1"}}}, None),
    "pika": (MediaKind.VIDEO, {"json_data": {"id": "p1"}}, None),
    "heygen": (MediaKind.VIDEO, {"json_data": {"video_id": "h1"}}, None),
}

PAYLOADS = {
    MediaKind.TEXT: _text_payload(),
    MediaKind.IMAGE: ImagePayload(prompt="a fox"),
    MediaKind.VOICE: VoicePayload(text="hello"),
    MediaKind.VIDEO: VideoPayload(prompt="waves"),
}


class TestEveryRegisteredProvider:
    def test_table_covers_registrations(self, registries):
        registered = {p for registry in registries.values() for p in registry.providers}
        # "openai" and "google" are registered for both text and voice
        assert registered == set(VENDOR_RESPONSES) | {"openai", "google"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", sorted(VENDOR_RESPONSES))
    async def test_dispatch_returns_populated_result(self, provider):
        kind, post_response, get_response = VENDOR_RESPONSES[provider]
        settings = Settings(_env_file=None, google_cloud_project="proj", video_poll_interval_seconds=0)
        registry = build_registries(settings, MediaStore())[kind]
        dispatcher = Dispatcher(registry, StaticCredentialResolver({provider: "key"}))

        with patch("mediagate.gateway.adapters.base.httpx.AsyncClient") as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.post.return_value = make_httpx_response(200, **post_response)
            if get_response is not None:
                mock_client.get.return_value = make_httpx_response(200, json_data=get_response)
            mock_client.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client.__aexit__ = AsyncMock(return_value=None)
            mock_client_cls.return_value = mock_client

            result = await dispatcher.dispatch(provider, "some-model", PAYLOADS[kind])

        assert result.kind == kind
        assert result.provider
        assert result.model
        assert result.artifact
        mock_client.post.assert_awaited_once()
