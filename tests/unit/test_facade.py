"""tests/unit/test_facade.py

Unit tests for mycurl.client.facade.Client.
"""

from unittest import mock

import pytest

from mycurl.cache.store import ResponseCache
from mycurl.client.facade import Client
from mycurl.client.response import Response
from mycurl.config import ClientConfig
from mycurl.exceptions import CacheError, UnsupportedScheme
from mycurl.http.headers import Headers
from mycurl.http.url import URL


@pytest.fixture
def config(tmp_path):
    """Configuration isolated from the environment."""
    return ClientConfig.from_env({"MYCURL_CACHE_DIR": str(tmp_path / "cache")})


def ok(body=b"hello"):
    return Response(200, Headers({"Content-Type": "text/plain"}), body, reason="OK")


class TestClient:
    """Tests for Client.fetch() without a cache."""

    @mock.patch("mycurl.client.facade.Request.send")
    def test_fetch_passes_configuration(self, mock_send, config):
        """Test that config values reach the request layer."""
        mock_send.return_value = ok()
        client = Client(config)

        response = client.get("http://example.com/")

        assert response.body == b"hello"
        args, kwargs = mock_send.call_args
        assert args[0] == "GET"
        assert args[1] == URL("http", "example.com", "80", "/")
        assert kwargs["timeout"] is config.timeout
        assert kwargs["max_redirects"] == config.max_redirects
        assert kwargs["user_agent"] == config.user_agent

    @mock.patch("mycurl.client.facade.Request.send")
    def test_head(self, mock_send, config):
        """Test HEAD helper."""
        mock_send.return_value = Response(200)
        Client(config).head("http://example.com/")
        assert mock_send.call_args[0][0] == "HEAD"

    @mock.patch("mycurl.client.facade.Request.send")
    def test_invalid_url_never_reaches_network(self, mock_send, config):
        """Test that decomposition errors are raised before sending."""
        with pytest.raises(UnsupportedScheme):
            Client(config).get("ftp://example.com/")
        mock_send.assert_not_called()

    def test_cache_disabled_by_default(self, config):
        """Test that no cache is created unless asked for."""
        assert Client(config).cache is None
        assert isinstance(Client(config, use_cache=True).cache, ResponseCache)


class TestClientCache:
    """Tests for Client.fetch() with the response cache."""

    @mock.patch("mycurl.client.facade.Request.send")
    def test_second_fetch_served_from_cache(self, mock_send, config):
        """Test that a stored response skips the network."""
        mock_send.return_value = ok()
        client = Client(config, use_cache=True)

        first = client.get("http://example.com/")
        second = client.get("http://example.com:80/")

        assert mock_send.call_count == 1
        assert first.from_cache is False
        assert second.from_cache is True
        assert second.body == b"hello"

    @mock.patch("mycurl.client.facade.Request.send")
    def test_errors_are_not_cached(self, mock_send, config):
        """Test that non-200 responses are fetched every time."""
        mock_send.return_value = Response(404, reason="Not Found")
        client = Client(config, use_cache=True)

        client.get("http://example.com/missing")
        client.get("http://example.com/missing")

        assert mock_send.call_count == 2

    @mock.patch("mycurl.client.facade.Request.send")
    def test_head_bypasses_cache(self, mock_send, config):
        """Test that only GET consults the cache."""
        mock_send.return_value = ok()
        client = Client(config, use_cache=True)
        client.get("http://example.com/")

        client.head("http://example.com/")

        assert mock_send.call_count == 2

    @mock.patch("mycurl.client.facade.Request.send")
    def test_cache_write_failure_is_not_fatal(self, mock_send, config):
        """Test that a failing cache still returns the response."""
        mock_send.return_value = ok()
        cache = mock.Mock(spec=ResponseCache)
        cache.get.return_value = None
        cache.put.side_effect = CacheError("disk full")

        response = Client(config, cache=cache).get("http://example.com/")

        assert response.body == b"hello"
        cache.put.assert_called_once()
