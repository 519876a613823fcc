"""tests/unit/test_report.py

Unit tests for mycurl.utils.report.
"""

from datetime import datetime
from unittest import mock

import pytest

from mycurl.http.url import parse_url
from mycurl.utils.report import (
    Stopwatch,
    TransferStats,
    format_stats,
    format_url_summary,
)

FIXED = datetime(2026, 10, 19, 12, 30, 5)


class TestTransferStats:
    """Tests for throughput computation and the stats line."""

    def test_mbps(self):
        """Test megabits per second."""
        stats = TransferStats("http://a.com/", size=1_000_000, elapsed=2.0)
        assert stats.mbps == pytest.approx(4.0)

    @pytest.mark.parametrize("elapsed", [0.0, -1.0])
    def test_mbps_without_elapsed_time(self, elapsed):
        """Test that no elapsed time reports zero instead of dividing."""
        assert TransferStats("http://a.com/", 10, elapsed).mbps == 0.0

    def test_format_stats(self):
        """Test the exact report layout."""
        stats = TransferStats("http://a.com/x", 1250, 0.5, finished_at=FIXED)

        assert format_stats(stats) == (
            "2026-10-19 12:30:05 http://a.com/x 1250 [bytes] "
            "0.500000 [s] 0.020000 [Mbps]"
        )

    def test_format_stats_zero_elapsed(self):
        """Test six-decimal zero throughput."""
        stats = TransferStats("http://a.com/", 0, 0.0, finished_at=FIXED)
        assert format_stats(stats).endswith("0 [bytes] 0.000000 [s] 0.000000 [Mbps]")

    def test_url_is_printed_as_given(self):
        """Test that the original argument, not the canonical form, is shown."""
        stats = TransferStats("HTTP://A.com", 1, 1.0, finished_at=FIXED)
        assert " HTTP://A.com 1 [bytes] " in format_stats(stats)


class TestFormatUrlSummary:
    """Tests for the decomposition summary line."""

    def test_with_output(self):
        """Test summary with a file target."""
        url = parse_url("https://[::1]:8443/p?q")
        assert format_url_summary(url, "out.html") == (
            "Protocol: https, Host [::1], port = 8443, path = /p?q, Output: out.html"
        )

    def test_without_output(self):
        """Test summary with no output target."""
        url = parse_url("http://example.com")
        assert format_url_summary(url, None) == (
            "Protocol: http, Host example.com, port = 80, path = /, Output: "
        )


class TestStopwatch:
    """Tests for Stopwatch."""

    @mock.patch("mycurl.utils.report.time.perf_counter")
    def test_elapsed(self, mock_clock):
        """Test elapsed time between start and stop."""
        mock_clock.side_effect = [10.0, 10.25]

        watch = Stopwatch().start()

        assert watch.stop() == pytest.approx(0.25)
        assert watch.elapsed == pytest.approx(0.25)

    @mock.patch("mycurl.utils.report.time.perf_counter")
    def test_context_manager(self, mock_clock):
        """Test use as a context manager."""
        mock_clock.side_effect = [1.0, 3.0]

        with Stopwatch() as watch:
            pass

        assert watch.elapsed == pytest.approx(2.0)

    def test_unstarted(self):
        """Test an unstarted stopwatch."""
        watch = Stopwatch()
        assert watch.elapsed == 0.0
        with pytest.raises(RuntimeError):
            watch.stop()
