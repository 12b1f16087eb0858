"""Generation provider adapters — concrete ChatProvider implementations."""

from .anthropic_client import AnthropicClient
from .openai_client import OpenAIClient
from .openai_compatible_client import OpenAICompatibleClient
from .openrouter_client import OpenRouterClient

__all__ = [
    "AnthropicClient",
    "OpenAIClient",
    "OpenAICompatibleClient",
    "OpenRouterClient",
]
