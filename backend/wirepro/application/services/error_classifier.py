"""Failure classification for provider errors.

Only connectivity failures make a request eligible for the offline answer;
everything else is a provider-side rejection.
"""

import errno
import socket

from wirepro.domain.exceptions import ChatProviderError, ErrorKind, ProviderConfigurationError

NETWORK_ERROR_CODES: tuple[str, ...] = (
    "ENOTFOUND",
    "EAI_AGAIN",
    "ETIMEDOUT",
    "ECONNRESET",
    "ECONNREFUSED",
    "ENETUNREACH",
    "EHOSTUNREACH",
    "getaddrinfo",
    "Name or service not known",
    "Temporary failure in name resolution",
)

_NETWORK_ERRNOS = frozenset({
    errno.ENETUNREACH,
    errno.EHOSTUNREACH,
    errno.ETIMEDOUT,
    errno.ECONNRESET,
    errno.ECONNREFUSED,
})


def classify_error(error: BaseException | None) -> ErrorKind:
    if error is None:
        return ErrorKind.PROVIDER
    if isinstance(error, ChatProviderError):
        return error.kind
    if isinstance(error, ProviderConfigurationError):
        return ErrorKind.CONFIGURATION
    if isinstance(error, (TimeoutError, ConnectionError, socket.gaierror)):
        return ErrorKind.NETWORK
    if isinstance(error, OSError) and error.errno in _NETWORK_ERRNOS:
        return ErrorKind.NETWORK

    message = str(error)
    if any(code in message for code in NETWORK_ERROR_CODES):
        return ErrorKind.NETWORK
    return ErrorKind.PROVIDER


def is_network_error(error: BaseException | None) -> bool:
    return classify_error(error) is ErrorKind.NETWORK
