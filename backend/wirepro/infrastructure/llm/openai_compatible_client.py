"""OpenAI-compatible chat client — implements the ChatProvider interface.

Talks to any ``/chat/completions`` endpoint that follows the OpenAI wire
format (OpenAI itself, OpenRouter). Multimodal messages carry images as
``image_url`` parts.
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


class OpenAICompatibleClient(ChatProvider):
    """Infrastructure adapter — connects to an OpenAI-compatible API.

    Uses an injected httpx client when given (connection pooling, tests),
    otherwise a short-lived client per call.
    """

    name = "openai-compatible"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return self.name

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict:
        payload: dict = {
            "model": model,
            "messages": [self._serialize_message(m) for m in messages],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    @staticmethod
    def _serialize_message(msg: ChatMessage) -> dict:
        """Convert a domain ChatMessage to an API-compatible dict."""
        if isinstance(msg.content, str):
            return {"role": msg.role, "content": msg.content}

        parts = []
        for part in msg.content:
            if part.type == "text":
                parts.append({"type": "text", "text": part.text or ""})
            elif part.type == "image_url" and part.image_url:
                parts.append({"type": "image_url", "image_url": part.image_url})
        return {"role": msg.role, "content": parts}

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
        url = f"{self._base_url}/chat/completions"

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(url, headers=self._get_headers(), json=payload)
            except httpx.TransportError as e:
                raise transport_error(self.provider_name, e) from e

            if response.status_code != 200:
                raise response_error(self.provider_name, response)

            return self._parse_completion_response(response.json())

        finally:
            if should_close:
                await client.aclose()

    def _parse_completion_response(self, data: dict) -> ChatCompletionResult:
        """Parse the JSON response into a domain entity."""
        if "error" in data:
            error = data["error"]
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=error.get("code", 500) if isinstance(error, dict) else 500,
                message=error.get("message", "Unknown error") if isinstance(error, dict) else str(error),
            )

        choices = data.get("choices", [])
        if not choices:
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=500,
                message="No choices in response",
            )

        choice = choices[0]
        message = choice.get("message", {})
        content = message.get("content", "") or ""
        if not content.strip():
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=502,
                message="Empty answer",
            )

        usage_data = data.get("usage") or {}
        return ChatCompletionResult(
            model=data.get("model", ""),
            content=content,
            finish_reason=choice.get("finish_reason", "stop") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage_data.get("prompt_tokens", 0),
                completion_tokens=usage_data.get("completion_tokens", 0),
                total_tokens=usage_data.get("total_tokens", 0),
            ),
            provider=self.provider_name,
        )
