"""Anthropic Messages API client — implements the ChatProvider interface.

The Messages API takes the system prompt as a top-level field and images
as base64 ``image`` blocks, so domain messages are translated here.
"""

import logging

import httpx

from wirepro.application.interfaces.chat_provider import ChatProvider
from wirepro.domain.entities import ChatMessage, ChatCompletionResult, TokenUsage
from wirepro.domain.exceptions import ChatProviderError
from wirepro.infrastructure.llm.http_errors import (
    missing_key_error,
    response_error,
    transport_error,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1024


def _image_block(url: str) -> dict | None:
    """Anthropic image block from a ``data:<mime>;base64,<data>`` URL."""
    if not url.startswith("data:") or "," not in url:
        return None
    header, data = url.split(",", 1)
    media_type = header[5:].split(";", 1)[0] or "image/jpeg"
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": media_type, "data": data},
    }


class AnthropicClient(ChatProvider):
    """Infrastructure adapter — connects to the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.anthropic.com/v1",
        api_version: str = "2023-06-01",
        *,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": self._api_version,
            "content-type": "application/json",
        }

    @staticmethod
    def _serialize_content(msg: ChatMessage) -> str | list[dict]:
        if isinstance(msg.content, str):
            return msg.content

        blocks: list[dict] = []
        for part in msg.content:
            if part.type == "text":
                blocks.append({"type": "text", "text": part.text or ""})
            elif part.type == "image_url" and part.image_url:
                block = _image_block(part.image_url.get("url", ""))
                if block is not None:
                    blocks.append(block)
                else:
                    logger.warning("Skipping non-inline image for Anthropic request")
        return blocks

    def _build_payload(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict:
        system = "\n\n".join(m.text for m in messages if m.role == "system")
        payload: dict = {
            "model": model,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
            "messages": [
                {"role": m.role, "content": self._serialize_content(m)}
                for m in messages
                if m.role != "system"
            ],
        }
        if system:
            payload["system"] = system
        if temperature is not None:
            payload["temperature"] = temperature
        return payload

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        if not self.is_configured():
            raise missing_key_error(self.provider_name)

        payload = self._build_payload(
            messages, model, temperature=temperature, max_tokens=max_tokens
        )
        url = f"{self._base_url}/messages"

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(url, headers=self._get_headers(), json=payload)
            except httpx.TransportError as e:
                raise transport_error(self.provider_name, e) from e

            if response.status_code != 200:
                raise response_error(self.provider_name, response)

            return self._parse_response(response.json())

        finally:
            if should_close:
                await client.aclose()

    def _parse_response(self, data: dict) -> ChatCompletionResult:
        text = "".join(
            block.get("text", "")
            for block in data.get("content", [])
            if block.get("type") == "text"
        )
        if not text.strip():
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=502,
                message="Empty answer",
            )

        usage = data.get("usage") or {}
        prompt_tokens = usage.get("input_tokens", 0)
        completion_tokens = usage.get("output_tokens", 0)
        return ChatCompletionResult(
            model=data.get("model", ""),
            content=text,
            finish_reason="length" if data.get("stop_reason") == "max_tokens" else "stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            provider=self.provider_name,
        )
