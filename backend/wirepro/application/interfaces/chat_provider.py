"""Abstract chat provider interface — port for generation provider adapters.

This interface enables multi-provider support. Each generation provider
(OpenAI, Anthropic, OpenRouter) implements this interface and is queued by
the provider cascade.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from wirepro.domain.entities import ChatMessage, ChatCompletionResult


class ChatProvider(ABC):
    """Port — defines what the application layer needs from any chat provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'openai', 'anthropic')."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs to be called."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        """Send a non-streaming chat completion request.

        Args:
            messages: The conversation, system message first.
            model: The model identifier (e.g. 'gpt-4o-mini').
            temperature: Sampling temperature (0.0–2.0).
            max_tokens: Maximum tokens in the response.

        Returns:
            A ChatCompletionResult with content and usage.

        Raises:
            ChatProviderError: If the provider fails. ``kind`` is
                ``network`` for connectivity failures.
        """
        ...


@dataclass(frozen=True)
class ProviderDescriptor:
    """A queued provider: its name, adapter and the model to request."""

    name: str
    provider: ChatProvider
    model: str
