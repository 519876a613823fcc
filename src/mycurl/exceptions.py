"""src/mycurl/exceptions.py

mycurl Exceptions hierarchy.
"""

# pylint: disable=redefined-builtin

import enum
from typing import Optional


class FailureKind(enum.Enum):
    """Why a raw URL string could not be decomposed."""

    MISSING_SEPARATOR = "missing-separator"
    UNSUPPORTED_SCHEME = "unsupported-scheme"
    MALFORMED_IPV6 = "malformed-ipv6"
    EMPTY_HOST = "empty-host"
    INVALID_PORT = "invalid-port"


class MyCurlError(Exception):
    """Base exception for all mycurl errors."""


class URLError(MyCurlError, ValueError):
    """
    A raw URL string could not be decomposed.

    Attributes:
        kind: Which decomposition step rejected the input.
        reason: Human-readable description of the failure.
        raw: The offending input, when known.
    """

    kind: FailureKind = FailureKind.MISSING_SEPARATOR

    def __init__(self, reason: str, raw: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class MissingSchemeSeparator(URLError):
    """No ``://`` in the input."""

    kind = FailureKind.MISSING_SEPARATOR


class UnsupportedScheme(URLError):
    """Scheme is neither http nor https."""

    kind = FailureKind.UNSUPPORTED_SCHEME


class MalformedIPv6(URLError):
    """Bracketed IPv6 host is unterminated or followed by garbage."""

    kind = FailureKind.MALFORMED_IPV6


class EmptyHost(URLError):
    """Nothing between the scheme separator and the port or path."""

    kind = FailureKind.EMPTY_HOST


class InvalidPort(URLError):
    """Port contains something other than ASCII digits."""

    kind = FailureKind.INVALID_PORT


class RequestError(MyCurlError):
    """General exception for Request errors."""


class NetworkError(RequestError):
    """
    Base exception for network-related errors.
    Wraps socket errors and other connection issues.
    """


class TimeoutError(RequestError):
    """
    Base exception for timeouts.
    """

    def __init__(self, message: str = "Operation timed out"):
        super().__init__(message)


class ConnectTimeout(TimeoutError):
    """Timeout during connection establishment."""


class ReadTimeout(TimeoutError):
    """Timeout during data reception."""


class TlsError(NetworkError):
    """TLS/SSL handshake or verification errors."""


class ProtocolError(RequestError):
    """
    Errors related to HTTP protocol (parsing, violations).
    """


class InvalidResponseError(ProtocolError):
    """Server sent a response that could not be understood."""


class IncompleteBodyError(ProtocolError):
    """Connection closed before the announced body was fully received."""


class InvalidRequestError(RequestError, ValueError):
    """The request line or a header would carry CR, LF, NUL or a bare space."""


class RedirectLoopError(RequestError):
    """Exception for infinite redirect loops."""


class TooManyRedirects(RequestError):
    """Too many redirects occurred."""


class CacheError(MyCurlError):
    """A cache entry could not be read or written."""


_URL_ERRORS = {
    cls.kind: cls
    for cls in (
        MissingSchemeSeparator,
        UnsupportedScheme,
        MalformedIPv6,
        EmptyHost,
        InvalidPort,
    )
}


def url_error_for(
    kind: FailureKind, reason: str, raw: Optional[str] = None
) -> URLError:
    """Build the URLError subclass matching a decomposition failure kind."""
    return _URL_ERRORS[kind](reason, raw)
