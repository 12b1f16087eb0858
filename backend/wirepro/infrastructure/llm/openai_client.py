"""OpenAI chat completions adapter."""

from wirepro.infrastructure.llm.openai_compatible_client import OpenAICompatibleClient


class OpenAIClient(OpenAICompatibleClient):
    """Infrastructure adapter — OpenAI (https://api.openai.com/v1)."""

    name = "openai"
