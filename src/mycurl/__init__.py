"""src/mycurl/__init__.py

mycurl - minimal command-line HTTP/HTTPS client.

mycurl fetches a single http or https URL over a raw socket, follows
redirects, optionally caches responses on disk, and reports size and
throughput. It is built entirely on Python's standard library.

Key Features:
    - Hand-written URL decomposition (bracketed IPv6, default ports)
    - HTTP/1.1 with Content-Length, chunked and read-to-close bodies
    - Bounded redirect following with loop detection
    - On-disk response cache
    - Full type hints (PEP 561)

Example:
    Decomposing a URL::

        from mycurl import parse_url

        url = parse_url("https://[2001:db8::1]:8443/p")
        print(url.host, url.port, url.path)

    Fetching::

        from mycurl import Client

        response = Client(use_cache=True).get("https://example.com/")
        print(response.status_code, len(response.body))

    Command line::

        $ mycurl --cache -o page.html https://example.com/
"""

from mycurl.client.facade import Client
from mycurl.client.request import Request
from mycurl.client.response import Response
from mycurl.config import ClientConfig
from mycurl.exceptions import MyCurlError, RequestError, URLError
from mycurl.http.url import URL, FailureKind, URLParseFailure, parse, parse_url
from mycurl.version import __version__

__all__ = [
    "URL",
    "URLParseFailure",
    "FailureKind",
    "parse",
    "parse_url",
    "Client",
    "ClientConfig",
    "Request",
    "Response",
    "MyCurlError",
    "URLError",
    "RequestError",
    "__version__",
]
