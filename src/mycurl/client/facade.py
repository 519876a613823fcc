"""src/mycurl/client/facade.py

Unified facade for mycurl.

Provides ``Client``, the single entry point used by the command line: it
decomposes the URL, consults the on-disk cache, performs the request with
redirect handling, and stores cacheable responses.
"""

import logging
from typing import Dict, Optional, Union

from mycurl.cache.store import ResponseCache
from mycurl.client.request import Request
from mycurl.client.response import Response
from mycurl.config import ClientConfig
from mycurl.exceptions import CacheError
from mycurl.http.url import URL

__all__ = ["Client"]

logger = logging.getLogger(__name__)


class Client:
    """
    High-level HTTP client.

    Attributes:
        config: Timeouts, redirect limit, cache location and User-Agent.
        cache: Response cache, or None when caching is disabled.
    """

    __slots__ = ("config", "cache")

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        use_cache: bool = False,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        """
        Initialize a client.

        Args:
            config: Configuration; defaults to ``ClientConfig.from_env()``.
            use_cache: Enable the on-disk cache at ``config.cache_dir``.
            cache: Explicit cache instance (implies ``use_cache``).
        """
        self.config = config if config is not None else ClientConfig.from_env()
        if cache is None and use_cache:
            cache = ResponseCache(self.config.cache_dir)
        self.cache = cache

    def fetch(
        self,
        url: Union[str, URL],
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
    ) -> Response:
        """
        Fetch ``url``, serving from and filling the cache when enabled.

        Raises:
            URLError: ``url`` cannot be decomposed.
            RequestError: Transport or protocol failure.
        """
        target = url if isinstance(url, URL) else URL.from_string(url)

        if self.cache is not None and method.upper() == "GET":
            entry = self.cache.get(target)
            if entry is not None:
                return entry.to_response()

        response = Request.send(
            method,
            target,
            headers=headers,
            timeout=self.config.timeout,
            max_redirects=self.config.max_redirects,
            user_agent=self.config.user_agent,
        )

        if self.cache is not None and ResponseCache.is_cacheable(method, response):
            try:
                self.cache.put(target, response)
            except CacheError as exc:
                logger.warning("Response not cached: %s", exc)

        return response

    def get(
        self, url: Union[str, URL], headers: Optional[Dict[str, str]] = None
    ) -> Response:
        """Send a GET request."""
        return self.fetch(url, "GET", headers=headers)

    def head(
        self, url: Union[str, URL], headers: Optional[Dict[str, str]] = None
    ) -> Response:
        """Send a HEAD request."""
        return self.fetch(url, "HEAD", headers=headers)
