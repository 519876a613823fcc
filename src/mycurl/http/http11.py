"""src/mycurl/http/http11.py

HTTP/1.1 request serialization and response head parsing.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

from mycurl.exceptions import (
    InvalidRequestError,
    InvalidResponseError,
    ProtocolError,
)
from mycurl.http.headers import Headers
from mycurl.http.url import URL
from mycurl.version import __version__

__all__ = ["HttpParser", "ResponseHead", "build_request", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = f"mycurl/{__version__}"

HEAD_TERMINATOR = b"\r\n\r\n"

# Characters that would end the request target or start a new line
FORBIDDEN_IN_TARGET = frozenset("\r\n\x00 ")

# Statuses that never carry a body regardless of framing headers
NO_BODY_STATUSES = frozenset({204, 304})


class ResponseHead(NamedTuple):
    """Parsed status line and header block."""

    version: str
    status_code: int
    reason: str
    status_line: str
    headers: Headers

    def has_body(self, method: str) -> bool:
        """Whether a body follows this head for a request using ``method``."""
        if method.upper() == "HEAD":
            return False
        if 100 <= self.status_code < 200:
            return False
        return self.status_code not in NO_BODY_STATUSES


class HttpParser:
    """
    HTTP/1.1 response head parser.

    Handles:
    - Status Line parsing.
    - Header parsing with duplicate handling.
    - Defensive sizing.
    """

    def __init__(self, max_header_size: int = 65536, max_field_count: int = 100):
        self.max_header_size = max_header_size
        self.max_field_count = max_field_count

    def parse_head(self, head: bytes) -> ResponseHead:
        """
        Parse a response head (status line and headers, no terminator).

        Raises:
            ProtocolError: If headers are too large or cannot be decoded.
            InvalidResponseError: If the status line is invalid.
        """
        if len(head) > self.max_header_size:
            raise ProtocolError(
                f"Headers exceed maximum size of {self.max_header_size} bytes"
            )

        try:
            text = head.decode("iso-8859-1")
        except UnicodeDecodeError as e:  # pragma: no cover - latin-1 is total
            raise ProtocolError(f"Header decoding failed: {e}") from e

        lines = text.split("\r\n")
        status_line = lines[0]
        if not status_line:
            raise InvalidResponseError("Empty response")

        version, status_code, reason = self._parse_status_line(status_line)
        fields = self._parse_headers(lines[1:])
        return ResponseHead(version, status_code, reason, status_line, Headers(fields))

    @staticmethod
    def _parse_status_line(status_line: str) -> Tuple[str, int, str]:
        # HTTP/1.1 200 OK
        parts = status_line.split(" ", 2)
        if len(parts) < 2 or not parts[0].startswith("HTTP/"):
            raise InvalidResponseError(f"Invalid status line: {status_line}")

        code = parts[1]
        if len(code) != 3 or not code.isdigit():
            raise InvalidResponseError(f"Invalid status line: {status_line}")

        reason = parts[2] if len(parts) == 3 else ""
        return parts[0], int(code), reason

    def _parse_headers(self, lines: List[str]) -> List[Tuple[str, str]]:
        """
        Parse header lines into (name, value) pairs.
        Lines without a colon are skipped.
        """
        fields: List[Tuple[str, str]] = []

        for line in lines:
            if not line or ":" not in line:
                continue

            if len(fields) >= self.max_field_count:
                raise ProtocolError(
                    f"Too many header fields (max {self.max_field_count})"
                )

            key, value = line.split(":", 1)
            fields.append((key.strip(), value.strip()))

        return fields


def build_request(
    method: str,
    url: URL,
    headers: Optional[Dict[str, str]] = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> bytes:
    """
    Builds the raw HTTP request bytes (no body).

    Raises:
        InvalidRequestError: The path contains CR, LF, NUL or a space, or a
            header name or value contains CR, LF or NUL.
    """
    if FORBIDDEN_IN_TARGET.intersection(url.path):
        raise InvalidRequestError(f"Invalid character in request path: {url.path!r}")
    request_line = f"{method} {url.path} HTTP/1.1\r\n"
    default_headers = {
        "Host": url.host_header,
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Connection": "close",
    }

    extra = headers or {}
    overridden = {k.lower() for k in extra}
    final_headers = {
        k: v for k, v in default_headers.items() if k.lower() not in overridden
    }
    final_headers.update(extra)

    headers_str = ""
    for k, v in final_headers.items():
        # Validate against HTTP header injection attacks
        if "\r" in k or "\n" in k or "\r" in v or "\n" in v:
            raise InvalidRequestError(f"Invalid character in header {k}: {v!r}")
        if "\x00" in k or "\x00" in v:
            raise InvalidRequestError(f"Null byte in header {k}: {v!r}")
        headers_str += f"{k}: {v}\r\n"

    return (request_line + headers_str + "\r\n").encode("utf-8")
