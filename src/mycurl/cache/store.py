"""src/mycurl/cache/store.py

On-disk response cache.

Each entry is a pair of files named after the SHA-256 of the canonical URL:
``<key>.json`` holds status and headers, ``<key>.body`` holds the payload.
Files are written to a temporary name and moved into place, so readers
never see a half-written entry.
"""

import hashlib
import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from mycurl.client.response import Response
from mycurl.exceptions import CacheError
from mycurl.http.headers import Headers
from mycurl.http.url import URL

__all__ = ["CacheEntry", "ResponseCache"]

logger = logging.getLogger(__name__)

CACHEABLE_METHODS = frozenset({"GET"})
CACHEABLE_STATUSES = frozenset({200})


@dataclass
class CacheEntry:
    """
    A stored response.

    Attributes:
        url: Canonical URL the response was fetched from.
        status_code: HTTP status code.
        reason: Reason phrase.
        headers: Header names (lower case) mapped to every value.
        body: Response payload.
        stored_at: Unix time the entry was written.
    """

    url: str
    status_code: int
    reason: str
    headers: Dict[str, List[str]]
    body: bytes
    stored_at: float

    def to_response(self) -> Response:
        """Rebuild a Response flagged as served from cache."""
        return Response(
            self.status_code,
            Headers(self.headers),
            self.body,
            reason=self.reason,
            url=self.url,
            from_cache=True,
        )


def _canonical(url: Union[str, URL]) -> str:
    return (url if isinstance(url, URL) else URL.from_string(url)).geturl()


class ResponseCache:
    """
    File-backed cache of successful GET responses.

    Attributes:
        directory: Where entries are stored. Created on first write.
    """

    __slots__ = ("directory",)

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    @staticmethod
    def key_for(url: Union[str, URL]) -> str:
        """Hex digest naming the entry for ``url``."""
        return hashlib.sha256(_canonical(url).encode("utf-8")).hexdigest()

    @staticmethod
    def is_cacheable(method: str, response: Response) -> bool:
        """Only fresh 200 responses to GET are stored."""
        return (
            method.upper() in CACHEABLE_METHODS
            and response.status_code in CACHEABLE_STATUSES
            and not response.from_cache
        )

    def _paths(self, url: Union[str, URL]) -> Tuple[Path, Path]:
        key = self.key_for(url)
        return self.directory / f"{key}.json", self.directory / f"{key}.body"

    def load(self, url: Union[str, URL]) -> Optional[CacheEntry]:
        """
        Read the entry for ``url``.

        Returns:
            The entry, or None if nothing is stored.

        Raises:
            CacheError: The entry exists but cannot be read.
        """
        meta_path, body_path = self._paths(url)
        if not meta_path.exists():
            return None

        try:
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
            body = body_path.read_bytes()
            return CacheEntry(
                url=meta["url"],
                status_code=int(meta["status_code"]),
                reason=meta.get("reason", ""),
                headers={k: list(v) for k, v in meta["headers"].items()},
                body=body,
                stored_at=float(meta["stored_at"]),
            )
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise CacheError(f"Unreadable cache entry {meta_path.name}: {exc}") from exc

    def get(self, url: Union[str, URL]) -> Optional[CacheEntry]:
        """Like load(), but a corrupt entry is logged and treated as a miss."""
        try:
            entry = self.load(url)
        except CacheError as exc:
            logger.warning("Ignoring cache entry for %s: %s", url, exc)
            return None

        if entry is None:
            logger.debug("Cache miss: %s", url)
        else:
            logger.info("Cache hit: %s (%d bytes)", url, len(entry.body))
        return entry

    def put(self, url: Union[str, URL], response: Response) -> CacheEntry:
        """
        Store ``response`` under ``url``.

        Raises:
            CacheError: The cache directory is not writable.
        """
        entry = CacheEntry(
            url=_canonical(url),
            status_code=response.status_code,
            reason=response.reason,
            headers=response.headers.to_dict(),
            body=response.body,
            stored_at=time.time(),
        )
        meta = {
            "url": entry.url,
            "status_code": entry.status_code,
            "reason": entry.reason,
            "headers": entry.headers,
            "stored_at": entry.stored_at,
        }
        meta_path, body_path = self._paths(url)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Body first so a visible .json always has its payload
            self._atomic_write(body_path, entry.body)
            self._atomic_write(meta_path, json.dumps(meta).encode("utf-8"))
        except OSError as exc:
            raise CacheError(
                f"Cannot write cache entry for {entry.url}: {exc}"
            ) from exc

        logger.debug("Cached %s as %s", entry.url, meta_path.stem)
        return entry

    def _atomic_write(self, path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> int:
        """Delete every entry; returns the number of files removed."""
        if not self.directory.is_dir():
            return 0
        removed = 0
        for path in self.directory.iterdir():
            if path.suffix in (".json", ".body"):
                path.unlink(missing_ok=True)
                removed += 1
        return removed
