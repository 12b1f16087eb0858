"""Domain-specific exceptions — framework-independent."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure classes that drive cascade fallback and offline degradation."""

    NETWORK = "network"
    CONFIGURATION = "configuration"
    PROVIDER = "provider"


class ChatProviderError(Exception):
    """Raised when a chat provider returns an error.

    Provider-agnostic — works for OpenAI, Anthropic, OpenRouter, etc.
    ``kind`` tells the cascade whether the failure was a connectivity
    problem (eligible for the offline path) or a provider-side rejection.
    """

    def __init__(
        self,
        provider: str,
        status_code: int,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.PROVIDER,
    ):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        self.kind = kind
        super().__init__(f"[{provider}] {status_code}: {message}")


class ProviderConfigurationError(Exception):
    """Raised when no generation provider is available for a request."""

    def __init__(self, message: str = "No generation provider is configured"):
        self.message = message
        super().__init__(message)


class CascadeExhaustedError(Exception):
    """Raised when every provider in the cascade failed.

    Carries the per-provider attempts so callers can decide whether the
    offline path applies (see ``last_error``).
    """

    def __init__(self, attempts: list, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        tried = ", ".join(a.provider for a in attempts) or "none"
        super().__init__(f"All providers failed ({tried}): {last_error}")
