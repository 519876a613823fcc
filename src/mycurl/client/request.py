"""src/mycurl/client/request.py

HTTP request sender with redirect handling.
"""

# pylint: disable=redefined-builtin

import logging
import urllib.parse
from typing import Dict, List, Optional, Union, cast

from mycurl.client.response import Response
from mycurl.config import DEFAULT_MAX_REDIRECTS
from mycurl.exceptions import (
    InvalidResponseError,
    NetworkError,
    RedirectLoopError,
    TooManyRedirects,
)
from mycurl.http.body import (
    ChunkReadStats,
    SocketReader,
    read_chunked,
    read_exact,
    read_until_close,
)
from mycurl.http.http11 import (
    DEFAULT_USER_AGENT,
    HEAD_TERMINATOR,
    HttpParser,
    ResponseHead,
    build_request,
)
from mycurl.http.url import URL
from mycurl.transport.connection import Connection
from mycurl.utils.timing import Timeout

__all__ = ["Request", "DEFAULT_MAX_REDIRECTS"]

logger = logging.getLogger(__name__)


class Request:
    """
    HTTP request sender.
    """

    @classmethod
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def send(
        cls,
        method: str,
        url: Union[str, URL],
        headers: Optional[Dict[str, str]] = None,
        timeout: Union[float, Timeout, None] = 10,
        allow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        limits: Optional[Dict[str, int]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> Response:
        """
        Sends an HTTP request with automatic redirects support.

        Args:
            method: HTTP method.
            url: Raw URL string or an already decomposed URL.
            headers: Extra request headers.
            timeout: Seconds, a Timeout, or None for blocking I/O.
            allow_redirects: Follow 3xx responses carrying a Location.
            max_redirects: Redirect hops allowed before giving up.
            limits: HttpParser limits (max_header_size, max_field_count).
            user_agent: User-Agent header value.

        Raises:
            URLError: ``url`` (or a redirect target) cannot be decomposed.
            RedirectLoopError: A redirect points at an already visited URL.
            TooManyRedirects: More than ``max_redirects`` hops.
        """
        current = url if isinstance(url, URL) else URL.from_string(url)
        history: List[Response] = []
        visited_urls = {current.geturl()}
        current_method = method.upper()
        current_headers = dict(headers or {})

        # Ensure timeout is a Timeout object
        if isinstance(timeout, Timeout):
            timeout_obj = timeout
        else:
            timeout_obj = Timeout.from_float(timeout)

        for _ in range(max_redirects + 1):
            response = cls._perform_request(
                current_method,
                current,
                current_headers,
                timeout_obj,
                limits=limits,
                user_agent=user_agent,
            )

            if not (allow_redirects and response.is_redirect):
                response.history = list(history)
                return response

            response.history = list(history)
            history.append(response)

            location = cast(str, response.headers["Location"])
            target = URL.from_string(urllib.parse.urljoin(current.geturl(), location))
            if target.geturl() in visited_urls:
                raise RedirectLoopError(f"Redirect cycle detected: {target}")
            visited_urls.add(target.geturl())

            status = response.status_code
            if status == 303 or (status in (301, 302) and current_method != "HEAD"):
                current_method = "GET"

            logger.info(
                "Redirect %d: %s -> %s (%s)", status, current, target, current_method
            )
            current = target

        raise TooManyRedirects(f"Exceeded {max_redirects} redirects.")

    @classmethod
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def _perform_request(
        cls,
        method: str,
        url: URL,
        headers: Dict[str, str],
        timeout: Timeout,
        limits: Optional[Dict[str, int]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> Response:
        """Internal method to perform a single HTTP request."""
        request_bytes = build_request(method, url, headers, user_agent=user_agent)
        parser = HttpParser(**(limits or {}))

        logger.debug("%s %s", method, url)
        with Connection.for_url(url, timeout=timeout) as conn:
            conn.sendall(request_bytes)
            reader = SocketReader(conn)

            head = cls._read_head(reader, parser, conn)
            response = Response(
                head.status_code,
                head.headers,
                reason=head.reason,
                status_line=head.status_line,
                url=url.geturl(),
            )

            if head.has_body(method):
                cls._read_body(reader, response)

            response.bytes_received = conn.bytes_received

        logger.debug(
            "%s %s -> %d (%d body bytes)",
            method,
            url,
            response.status_code,
            len(response.body),
        )
        return response

    @staticmethod
    def _read_head(
        reader: SocketReader, parser: HttpParser, conn: Connection
    ) -> ResponseHead:
        """Read the final response head, skipping interim 1xx responses."""
        while True:
            raw_head = reader.read_until(HEAD_TERMINATOR, parser.max_header_size)
            if raw_head is None:
                if conn.bytes_received == 0:
                    raise NetworkError("Server closed connection without response")
                raise InvalidResponseError(
                    "Incomplete response: headers delimiter not found"
                )

            head = parser.parse_head(raw_head)
            if 100 <= head.status_code < 200 and head.status_code != 101:
                logger.debug("Skipping interim response %s", head.status_line)
                continue
            return head

    @staticmethod
    def _read_body(reader: SocketReader, response: Response) -> None:
        """Read the body using the framing announced by the headers."""
        transfer_encoding = cast(
            str, response.headers.get("Transfer-Encoding", "")
        ).lower()
        content_length = response.headers.get("Content-Length")

        if "chunked" in transfer_encoding:
            stats = ChunkReadStats()
            response.chunk_stats = stats
            response.body = read_chunked(reader, stats)

        elif content_length is not None:
            try:
                length = int(content_length.split(",")[0].strip())
            except ValueError as exc:
                raise InvalidResponseError(
                    f"Invalid Content-Length: {content_length!r}"
                ) from exc
            if length < 0:
                raise InvalidResponseError(
                    f"Invalid Content-Length: {content_length!r}"
                )
            response.body = read_exact(reader, length)

        else:
            # No CL, no Chunked -> read until connection closes
            response.body = b"".join(read_until_close(reader))

    @classmethod
    # pylint: disable=too-many-arguments,too-many-positional-arguments,missing-function-docstring
    def get(
        cls,
        url: Union[str, URL],
        headers: Optional[Dict[str, str]] = None,
        timeout: Union[float, Timeout, None] = 10,
        allow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        limits: Optional[Dict[str, int]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> Response:
        return cls.send(
            "GET",
            url,
            headers=headers,
            timeout=timeout,
            allow_redirects=allow_redirects,
            max_redirects=max_redirects,
            limits=limits,
            user_agent=user_agent,
        )

    @classmethod
    # pylint: disable=too-many-arguments,too-many-positional-arguments,missing-function-docstring
    def head(
        cls,
        url: Union[str, URL],
        headers: Optional[Dict[str, str]] = None,
        timeout: Union[float, Timeout, None] = 10,
        allow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        limits: Optional[Dict[str, int]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> Response:
        return cls.send(
            "HEAD",
            url,
            headers=headers,
            timeout=timeout,
            allow_redirects=allow_redirects,
            max_redirects=max_redirects,
            limits=limits,
            user_agent=user_agent,
        )
