"""utils/report.py

Transfer statistics and the summary lines printed by the CLI.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from mycurl.http.url import URL

__all__ = ["TransferStats", "Stopwatch", "format_stats", "format_url_summary"]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class TransferStats:
    """
    Outcome of one fetch.

    Attributes:
        url: URL as given on the command line.
        size: Body bytes received (or served from cache).
        elapsed: Wall time in seconds.
        finished_at: Local time the transfer completed.
    """

    url: str
    size: int
    elapsed: float
    finished_at: datetime = field(default_factory=datetime.now)

    @property
    def mbps(self) -> float:
        """Throughput in megabits per second, 0.0 when no time elapsed."""
        if self.elapsed <= 0:
            return 0.0
        return (8 * self.size / self.elapsed) / 1e6


class Stopwatch:
    """Measures elapsed wall time with a monotonic clock."""

    __slots__ = ("_start", "_stop")

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._stop: Optional[float] = None

    def start(self) -> "Stopwatch":
        self._start = time.perf_counter()
        self._stop = None
        return self

    def stop(self) -> float:
        if self._start is None:
            raise RuntimeError("Stopwatch was never started")
        self._stop = time.perf_counter()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        """Seconds since start (or between start and stop)."""
        if self._start is None:
            return 0.0
        end = self._stop if self._stop is not None else time.perf_counter()
        return end - self._start

    def __enter__(self) -> "Stopwatch":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


def format_stats(stats: TransferStats) -> str:
    """
    Render the one-line transfer report.

    Example::

        2026-10-19 12:00:00 http://a.com/ 1256 [bytes] 0.120000 [s] 0.083733 [Mbps]
    """
    return (
        f"{stats.finished_at.strftime(TIMESTAMP_FORMAT)} {stats.url} {stats.size} "
        f"[bytes] {stats.elapsed:.6f} [s] {stats.mbps:.6f} [Mbps]"
    )


def format_url_summary(url: URL, output: Optional[str]) -> str:
    """Render the decomposed URL and output target."""
    return (
        f"Protocol: {url.scheme}, Host {url.host}, port = {url.port}, "
        f"path = {url.path}, Output: {output or ''}"
    )
