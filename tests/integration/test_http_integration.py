"""Integration tests for HTTP client functionality.

These tests use a local HTTP test server to validate real socket
communication, body framing, redirects, caching and the command line
without external dependencies.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

import pytest

from mycurl import Client, ClientConfig, cli
from mycurl.client.request import Request
from mycurl.exceptions import NetworkError, RedirectLoopError, TooManyRedirects

PAGE = b"<html><body>" + b"x" * 5000 + b"</body></html>"


class IntegrationHTTPRequestHandler(BaseHTTPRequestHandler):
    """Simple HTTP server for integration testing."""

    protocol_version = "HTTP/1.1"
    hits = 0

    def log_message(self, format: str, *args: Any) -> None:
        """Suppress server logs during testing."""

    def _send_body(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _redirect(self, status: int, location: str) -> None:
        self.send_response(status)
        self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_GET(self) -> None:
        """Handle GET requests."""
        type(self).hits += 1

        if self.path == "/page":
            self._send_body(200, PAGE)

        elif self.path == "/chunked":
            self.send_response(200)
            self.send_header("Transfer-Encoding", "chunked")
            self.end_headers()
            for piece in (b"Hello, ", b"chunked ", b"world"):
                self.wfile.write(b"%x\r\n%s\r\n" % (len(piece), piece))
            self.wfile.write(b"0\r\nX-Trailer: yes\r\n\r\n")

        elif self.path == "/close":
            self.send_response(200)
            self.end_headers()
            self.wfile.write(b"until close")
            self.close_connection = True

        elif self.path == "/ua":
            self._send_body(200, self.headers.get("User-Agent", "").encode())

        elif self.path == "/redirect":
            self._redirect(302, "/page")

        elif self.path == "/absolute-redirect":
            host, port = self.server.server_address[:2]
            self._redirect(301, f"http://{host}:{port}/chunked")

        elif self.path == "/loop-a":
            self._redirect(302, "/loop-b")

        elif self.path == "/loop-b":
            self._redirect(302, "/loop-a")

        elif self.path.startswith("/hop/"):
            n = int(self.path.rsplit("/", 1)[1])
            self._redirect(302, f"/hop/{n + 1}")

        else:
            self._send_body(404, b"Not Found")

    def do_HEAD(self) -> None:
        """Handle HEAD requests."""
        if self.path == "/redirect":
            self._redirect(302, "/page")
        else:
            self._send_body(200, PAGE)


class TestHTTPIntegration:
    """Integration tests for HTTP client operations."""

    @classmethod
    def setup_class(cls):
        """Start the test HTTP server."""
        cls.server = ThreadingHTTPServer(
            ("127.0.0.1", 0), IntegrationHTTPRequestHandler
        )
        cls.port = cls.server.server_port
        cls.base_url = f"http://127.0.0.1:{cls.port}"

        # Start server in background thread
        cls.server_thread = threading.Thread(target=cls.server.serve_forever)
        cls.server_thread.daemon = True
        cls.server_thread.start()

    @classmethod
    def teardown_class(cls):
        """Stop the test HTTP server."""
        cls.server.shutdown()
        cls.server.server_close()

    def test_content_length_body(self, timeout_context):
        """Test GET with a Content-Length framed body."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/page", timeout=5)

        assert response.status_code == 200
        assert response.body == PAGE
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert response.bytes_received > len(PAGE)

    def test_chunked_body(self, timeout_context):
        """Test chunked transfer decoding against a real socket."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/chunked", timeout=5)

        assert response.body == b"Hello, chunked world"
        assert response.chunk_stats.chunks == 3

    def test_read_until_close(self, timeout_context):
        """Test a body without framing headers."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/close", timeout=5)

        assert response.body == b"until close"

    def test_user_agent_is_sent(self, timeout_context):
        """Test the configured User-Agent header."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/ua", user_agent="probe/1.0")

        assert response.text() == "probe/1.0"

    def test_relative_redirect(self, timeout_context):
        """Test following a relative Location."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/redirect", timeout=5)

        assert response.status_code == 200
        assert response.body == PAGE
        assert [r.status_code for r in response.history] == [302]
        assert response.url == f"{self.base_url}/page"

    def test_absolute_redirect(self, timeout_context):
        """Test following an absolute Location."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/absolute-redirect", timeout=5)

        assert response.body == b"Hello, chunked world"

    def test_head_has_no_body(self, timeout_context):
        """Test that HEAD ignores the announced Content-Length."""
        with timeout_context(10):
            response = Request.head(f"{self.base_url}/redirect", timeout=5)

        assert response.status_code == 200
        assert response.body == b""
        assert response.headers["Content-Length"] == str(len(PAGE))

    def test_redirect_loop(self, timeout_context):
        """Test cycle detection."""
        with timeout_context(10):
            with pytest.raises(RedirectLoopError):
                Request.get(f"{self.base_url}/loop-a", timeout=5)

    def test_redirect_limit(self, timeout_context):
        """Test the hop limit."""
        with timeout_context(10):
            with pytest.raises(TooManyRedirects, match="Exceeded 3 redirects"):
                Request.get(f"{self.base_url}/hop/0", timeout=5, max_redirects=3)

    def test_404_error_response(self, timeout_context):
        """Test handling of 404 error responses."""
        with timeout_context(10):
            response = Request.get(f"{self.base_url}/status/404", timeout=5)

        assert response.status_code == 404
        assert response.ok is False
        assert response.text() == "Not Found"

    def test_connection_refused(self, timeout_context):
        """Test connecting to a closed port."""
        probe = ThreadingHTTPServer(("127.0.0.1", 0), IntegrationHTTPRequestHandler)
        closed_port = probe.server_port
        probe.server_close()

        with timeout_context(10):
            with pytest.raises(NetworkError):
                Request.get(f"http://127.0.0.1:{closed_port}/", timeout=2)

    def test_client_cache(self, tmp_path, timeout_context):
        """Test that a cached page is served without contacting the server."""
        config = ClientConfig.from_env({"MYCURL_CACHE_DIR": str(tmp_path)})
        client = Client(config, use_cache=True)

        with timeout_context(10):
            first = client.get(f"{self.base_url}/page")
            hits = IntegrationHTTPRequestHandler.hits
            second = client.get(f"{self.base_url}/page")

        assert first.from_cache is False
        assert second.from_cache is True
        assert second.body == PAGE
        assert IntegrationHTTPRequestHandler.hits == hits

    def test_cli_end_to_end(self, tmp_path, capsys, monkeypatch, timeout_context):
        """Test the command line writing a page to a file."""
        monkeypatch.setenv("MYCURL_CACHE_DIR", str(tmp_path / "cache"))
        target = tmp_path / "page.html"

        with timeout_context(10):
            status = cli.main(["-o", str(target), f"{self.base_url}/redirect"])

        assert status == 0
        assert target.read_bytes() == PAGE
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == (
            f"Protocol: http, Host 127.0.0.1, port = {self.port}, "
            f"path = /redirect, Output: {target}"
        )
        assert f" {self.base_url}/redirect {len(PAGE)} [bytes] " in lines[1]
