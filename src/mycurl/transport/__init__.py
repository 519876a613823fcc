"""src/mycurl/transport/__init__.py

Transport layer module for mycurl.

This module provides low-level connection management: TCP connections
with optional TLS encryption.
"""

from .connection import Connection
from .tls import create_ssl_context

__all__ = ["Connection", "create_ssl_context"]
