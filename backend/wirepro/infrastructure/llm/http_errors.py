"""Translation of httpx failures into provider errors."""

import httpx

from wirepro.domain.exceptions import ChatProviderError, ErrorKind


def transport_error(provider: str, error: httpx.TransportError) -> ChatProviderError:
    """Wrap an httpx transport failure; timeouts and connection failures are network-class."""
    if isinstance(error, (httpx.TimeoutException, httpx.NetworkError)):
        kind = ErrorKind.NETWORK
    else:
        kind = ErrorKind.PROVIDER
    detail = str(error) or type(error).__name__
    return ChatProviderError(
        provider=provider,
        status_code=0,
        message=f"{type(error).__name__}: {detail}",
        kind=kind,
    )


def response_error(provider: str, response: httpx.Response) -> ChatProviderError:
    """ChatProviderError from a non-200 response, using the API's error message when present."""
    try:
        data = response.json()
        error = data.get("error", {})
        if isinstance(error, dict):
            message = error.get("message", response.text)
        else:
            message = str(error) or response.text
    except Exception:
        message = response.text

    kind = ErrorKind.CONFIGURATION if response.status_code in (401, 403) else ErrorKind.PROVIDER
    return ChatProviderError(
        provider=provider,
        status_code=response.status_code,
        message=message,
        kind=kind,
    )


def missing_key_error(provider: str) -> ChatProviderError:
    return ChatProviderError(
        provider=provider,
        status_code=401,
        message="API key not configured",
        kind=ErrorKind.CONFIGURATION,
    )
