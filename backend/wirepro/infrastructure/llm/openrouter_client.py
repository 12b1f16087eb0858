"""OpenRouter API client — OpenAI-compatible, plus OpenRouter attribution headers."""

import httpx

from wirepro.infrastructure.llm.openai_compatible_client import OpenAICompatibleClient


class OpenRouterClient(OpenAICompatibleClient):
    """Infrastructure adapter — connects to the OpenRouter API.

    OpenRouter routes to many upstream models; the model id carries the
    vendor prefix (e.g. 'openai/gpt-4o-mini').
    """

    name = "openrouter"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        app_name: str = "Wire Pro Diagnostics",
        *,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, timeout=timeout, http_client=http_client)
        self._app_name = app_name

    def _get_headers(self) -> dict[str, str]:
        headers = super()._get_headers()
        headers["X-Title"] = self._app_name
        return headers
