"""Text (chat completion) adapters.

  - OpenAI, Groq, DeepSeek, Mistral: OpenAI chat completions shape
  - Anthropic: Messages API, system prompt carried outside ``messages``
  - Google: Gemini generateContent, ``assistant`` role renamed to ``model``
  - Fallback: any other OpenAI-compatible vendor
"""

from __future__ import annotations

from typing import Any

from mediagate.gateway.adapters.base import BaseVendorAdapter, OpenAICompatibleMixin
from mediagate.gateway.errors import MalformedResponseError
from mediagate.gateway.types import MediaKind, TextPayload, TextResult


class _ChatCompletionsAdapter(BaseVendorAdapter):
    """Adapters whose vendor exposes ``POST /chat/completions`` with Bearer auth."""

    kind = MediaKind.TEXT
    api_url: str

    async def invoke(self, credential: str, model: str, payload: TextPayload, *, provider: str) -> TextResult:
        return await self._chat(self.api_url, credential, model, payload, provider=provider)

    async def _chat(self, url: str, credential: str, model: str, payload: TextPayload, *, provider: str) -> TextResult:
        vendor = self.vendor_label(provider)
        resp = await self._post(
            url,
            vendor=vendor,
            json={
                "model": model,
                "messages": payload.message_dicts(),
                "temperature": payload.temperature,
                "max_tokens": payload.max_tokens,
            },
            headers=self._bearer(credential),
        )
        data = self._json(resp, vendor)

        with self._response_shape(vendor):
            return TextResult(
                provider=self.result_provider(provider),
                model=model,
                content=data["choices"][0]["message"]["content"] or "",
                usage=data.get("usage"),
            )

    def result_provider(self, provider: str) -> str:
        return self.name


class OpenAITextAdapter(_ChatCompletionsAdapter):
    name = "openai"
    vendor_name = "OpenAI"
    api_url = "https://api.openai.com/v1/chat/completions"


class GroqTextAdapter(_ChatCompletionsAdapter):
    name = "groq"
    vendor_name = "Groq"
    api_url = "https://api.groq.com/openai/v1/chat/completions"


class DeepSeekTextAdapter(_ChatCompletionsAdapter):
    name = "deepseek"
    vendor_name = "DeepSeek"
    api_url = "https://api.deepseek.com/v1/chat/completions"


class MistralTextAdapter(_ChatCompletionsAdapter):
    name = "mistral"
    vendor_name = "Mistral"
    api_url = "https://api.mistral.ai/v1/chat/completions"


class OpenAICompatibleTextAdapter(OpenAICompatibleMixin, _ChatCompletionsAdapter):
    """Fallback for unregistered text vendors."""

    name = "openai_compatible"
    vendor_name = "OpenAI-compatible"
    known_endpoints = {
        "together": "https://api.together.xyz/v1",
        "cerebras": "https://api.cerebras.ai/v1",
        "hyperbolic": "https://api.hyperbolic.xyz/v1",
    }

    async def invoke(self, credential: str, model: str, payload: TextPayload, *, provider: str) -> TextResult:
        url = f"{self.base_url(provider)}/chat/completions"
        return await self._chat(url, credential, model, payload, provider=provider)

    def result_provider(self, provider: str) -> str:
        return provider


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


class AnthropicTextAdapter(BaseVendorAdapter):
    name = "anthropic"
    vendor_name = "Anthropic"
    kind = MediaKind.TEXT
    api_url = "https://api.anthropic.com/v1/messages"
    api_version = "2023-06-01"

    async def invoke(self, credential: str, model: str, payload: TextPayload, *, provider: str) -> TextResult:
        # The Messages API rejects a "system" role inside messages
        system_parts = [m.content for m in payload.messages if m.role == "system"]
        body: dict[str, Any] = {
            "model": model,
            "max_tokens": payload.max_tokens,
            "temperature": payload.temperature,
            "messages": [m.to_dict() for m in payload.messages if m.role != "system"],
        }
        if system_parts:
            body["system"] = "\n\n".join(system_parts)

        resp = await self._post(
            self.api_url,
            vendor=self.vendor_name,
            json=body,
            headers={
                "x-api-key": credential,
                "anthropic-version": self.api_version,
                "Content-Type": "application/json",
            },
        )
        data = self._json(resp, self.vendor_name)

        with self._response_shape(self.vendor_name):
            blocks = [b["text"] for b in data["content"] if b.get("type", "text") == "text"]
            if not blocks:
                raise MalformedResponseError(self.vendor_name, "response contains no text content")
            return TextResult(provider=self.name, model=model, content="".join(blocks), usage=data.get("usage"))


# ---------------------------------------------------------------------------
# Google (Gemini)
# ---------------------------------------------------------------------------


class GoogleTextAdapter(BaseVendorAdapter):
    name = "google"
    vendor_name = "Google"
    kind = MediaKind.TEXT
    api_url_template = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    async def invoke(self, credential: str, model: str, payload: TextPayload, *, provider: str) -> TextResult:
        contents = [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in payload.messages
            if m.role != "system"
        ]
        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": payload.temperature,
                "maxOutputTokens": payload.max_tokens,
            },
        }

        # System instruction (separate from contents in Gemini API)
        system_parts = [{"text": m.content} for m in payload.messages if m.role == "system"]
        if system_parts:
            body["systemInstruction"] = {"parts": system_parts}

        resp = await self._post(
            self.api_url_template.format(model=model),
            vendor=self.vendor_name,
            json=body,
            params={"key": credential},
            headers={"Content-Type": "application/json"},
        )
        data = self._json(resp, self.vendor_name)
        if not isinstance(data, dict):
            raise MalformedResponseError(self.vendor_name, "response is not a JSON object")

        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason", "")
            detail = f"prompt blocked: {block_reason}" if block_reason else "response contains no candidates"
            raise MalformedResponseError(self.vendor_name, detail)

        with self._response_shape(self.vendor_name):
            parts = candidates[0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
            return TextResult(provider=self.name, model=model, content=text, usage=data.get("usageMetadata"))
