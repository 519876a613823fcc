"""src/mycurl/http/url.py

URL decomposition for mycurl.

Splits a raw URL typed by a user into scheme, host, port and path with
explicit character scanning. Only ``http`` and ``https`` are accepted.
Bracketed IPv6 literals keep their brackets in ``host``. Query strings and
fragments are not split out and stay part of ``path``.

Unbracketed IPv6 literals are not recognized: ``http://::1/`` is read as
host ``""`` and is rejected, and ``http://fe80::1/`` splits at the first
colon and fails on the port.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from mycurl.exceptions import FailureKind, url_error_for

__all__ = [
    "URL",
    "URLParseFailure",
    "FailureKind",
    "DEFAULT_PORTS",
    "parse",
    "parse_url",
]

SCHEME_SEPARATOR = "://"

DEFAULT_PORTS = {"http": "80", "https": "443"}


@dataclass(frozen=True)
class URLParseFailure:
    """
    A raw URL string that could not be decomposed.

    Attributes:
        kind: Which step rejected the input.
        reason: Human-readable description.
        raw: The rejected input.
    """

    kind: FailureKind
    reason: str
    raw: str

    def to_exception(self) -> Exception:
        """Return the URLError subclass matching this failure."""
        return url_error_for(self.kind, self.reason, self.raw)


@dataclass(frozen=True)
class URL:
    """
    Decomposed http/https URL.

    Attributes:
        scheme: ``"http"`` or ``"https"``, always lower case.
        host: Hostname, IPv4 literal, or bracketed IPv6 literal.
        port: All-digit port string, the scheme default when omitted.
        path: Request target starting with ``/``.
    """

    scheme: str
    host: str
    port: str
    path: str

    @classmethod
    def from_string(cls, raw: str) -> "URL":
        """
        Decompose ``raw`` or raise.

        Raises:
            URLError: One of its subclasses, matching the failure kind.
        """
        result = parse(raw)
        if isinstance(result, URLParseFailure):
            raise result.to_exception()
        return result

    @property
    def use_ssl(self) -> bool:
        """Whether the connection must negotiate TLS."""
        return self.scheme == "https"

    @property
    def connect_host(self) -> str:
        """Host suitable for a socket connect call (IPv6 brackets removed)."""
        if self.host.startswith("[") and self.host.endswith("]"):
            return self.host[1:-1]
        return self.host

    @property
    def port_number(self) -> int:
        """Port as an integer. Range is not checked here."""
        return int(self.port)

    @property
    def host_header(self) -> str:
        """Value for the ``Host`` request header."""
        if self.is_default_port():
            return self.host
        return f"{self.host}:{self.port}"

    def is_default_port(self) -> bool:
        """Whether ``port`` is the default for ``scheme``."""
        return DEFAULT_PORTS.get(self.scheme) == self.port

    def geturl(self) -> str:
        """Canonical ``scheme://host:port/path`` form; re-parses to ``self``."""
        return f"{self.scheme}{SCHEME_SEPARATOR}{self.host}:{self.port}{self.path}"

    def __str__(self) -> str:
        return self.geturl()


def _split_authority(rest: str) -> Tuple[str, Optional[str], str]:
    """
    Split the text after ``://`` into host, port and path.

    ``port`` is None when no ``:`` introduced one. ``path`` is whatever
    starts at the first unconsumed ``/``, or ``""``.

    Raises:
        ValueError: The bracketed IPv6 literal is malformed.
    """
    if rest.startswith("["):
        close = rest.find("]")
        if close == -1:
            raise ValueError("unterminated IPv6 literal")

        host = rest[: close + 1]
        after = rest[close + 1 :]
        if after.startswith(":"):
            slash = after.find("/")
            if slash == -1:
                return host, after[1:], ""
            return host, after[1:slash], after[slash:]

        if after and not after.startswith("/"):
            raise ValueError(f"unexpected text after IPv6 literal: {after!r}")
        return host, None, after

    slash = rest.find("/")
    if slash == -1:
        authority, path = rest, ""
    else:
        authority, path = rest[:slash], rest[slash:]

    host, colon, port = authority.partition(":")
    return host, (port if colon else None), path


def _finalize(scheme: str, host: str, port: Optional[str], path: str) -> URL:
    """Apply path and port defaults to extracted components."""
    return URL(
        scheme=scheme,
        host=host,
        port=port or DEFAULT_PORTS[scheme],
        path=path or "/",
    )


def _is_ascii_digits(value: str) -> bool:
    # str.isdigit() also accepts other Unicode digits
    return bool(value) and all("0" <= char <= "9" for char in value)


def parse(raw: str) -> Union[URL, URLParseFailure]:
    """
    Decompose a raw URL string.

    Args:
        raw: URL as typed by a user. Not validated beforehand.

    Returns:
        The decomposed URL, or a URLParseFailure describing why the input
        was rejected. Never raises for malformed input.
    """
    scheme_end = raw.find(SCHEME_SEPARATOR)
    if scheme_end == -1:
        return URLParseFailure(
            FailureKind.MISSING_SEPARATOR, "missing scheme separator '://'", raw
        )

    scheme = raw[:scheme_end].lower()
    if scheme not in DEFAULT_PORTS:
        return URLParseFailure(
            FailureKind.UNSUPPORTED_SCHEME,
            f"unsupported scheme: {raw[:scheme_end]!r}",
            raw,
        )

    try:
        host, port, path = _split_authority(raw[scheme_end + len(SCHEME_SEPARATOR) :])
    except ValueError as exc:
        return URLParseFailure(FailureKind.MALFORMED_IPV6, str(exc), raw)

    if not host:
        return URLParseFailure(FailureKind.EMPTY_HOST, "empty host", raw)

    url = _finalize(scheme, host, port, path)

    if not _is_ascii_digits(url.port):
        return URLParseFailure(
            FailureKind.INVALID_PORT, f"invalid port: {url.port!r}", raw
        )

    return url


def parse_url(raw: str) -> URL:
    """Decompose ``raw``, raising URLError on failure."""
    return URL.from_string(raw)
