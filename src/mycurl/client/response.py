"""src/mycurl/client/response.py

HTTP Response handling module.

This module provides the Response class returned by Request and Client:
status line, headers and a fully read body.
"""

from typing import List, Optional, cast

from mycurl.http.body import ChunkReadStats
from mycurl.http.headers import Headers

__all__ = ["Response"]


class Response:
    """
    Represents a received HTTP response.

    Attributes:
        status_line: HTTP status line (e.g., "HTTP/1.1 200 OK").
        status_code: HTTP status code as integer.
        reason: Reason phrase from the status line.
        headers: Case-insensitive response headers.
        body: Response body as bytes.
        url: Canonical URL the response was fetched from.
        history: Redirect responses that led to this one, oldest first.
        from_cache: Whether the response was served from the on-disk cache.
        chunk_stats: Decoder counters when the body was chunked.
        bytes_received: Raw bytes read from the socket, head included.
    """

    # pylint: disable=too-many-instance-attributes
    __slots__ = (
        "status_line",
        "status_code",
        "reason",
        "headers",
        "body",
        "url",
        "history",
        "from_cache",
        "chunk_stats",
        "bytes_received",
    )

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        status_code: int,
        headers: Optional[Headers] = None,
        body: bytes = b"",
        *,
        reason: str = "",
        status_line: str = "",
        url: Optional[str] = None,
        from_cache: bool = False,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.status_line = status_line or f"HTTP/1.1 {status_code} {reason}".rstrip()
        self.headers = headers if headers is not None else Headers()
        self.body = body
        self.url = url
        self.history: List["Response"] = []
        self.from_cache = from_cache
        self.chunk_stats: Optional[ChunkReadStats] = None
        self.bytes_received = 0

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"

    @property
    def ok(self) -> bool:
        """True for 2xx and 3xx status codes."""
        return 200 <= self.status_code < 400

    @property
    def is_redirect(self) -> bool:
        """Whether this is a redirect carrying a Location header."""
        return (
            self.status_code in (301, 302, 303, 307, 308)
            and "Location" in self.headers
        )

    def text(self, encoding: Optional[str] = None) -> str:
        """
        Return decoded text.
        """
        if encoding is None:
            content_type = cast(str, self.headers.get("Content-Type", ""))
            if "charset=" in content_type:
                encoding = content_type.split("charset=")[-1].split(";")[0].strip()
            else:
                encoding = "utf-8"  # default fallback

        try:
            return self.body.decode(encoding, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")
