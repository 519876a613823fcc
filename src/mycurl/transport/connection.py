"""src/mycurl/transport/connection.py

TCP and TLS connection management module.

This module provides low-level connection handling with support for
TLS encryption and proper error handling for network operations.
"""

import logging
import socket
import ssl
from typing import Any, Optional, Union

# pylint: disable=redefined-builtin
from mycurl.exceptions import ConnectTimeout, NetworkError, ReadTimeout, TlsError
from mycurl.http.url import URL
from mycurl.transport.tls import create_ssl_context
from mycurl.utils.timing import Timeout

logger = logging.getLogger(__name__)


class Connection:
    """
    Manages TCP and TLS connection creation and lifecycle.

    Attributes:
        host: The target hostname or IP address (IPv6 without brackets).
        port: The target port number.
        use_ssl: Whether to use TLS encryption.
        timeout: Connection timeout configuration.
        sock: The underlying socket object.
        bytes_received: Raw bytes read from the socket so far.
    """

    __slots__ = (
        "host",
        "port",
        "use_ssl",
        "timeout",
        "sock",
        "ssl_context",
        "bytes_received",
    )

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        host: str,
        port: int,
        use_ssl: bool = False,
        timeout: Union[float, Timeout, None] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        """
        Initialize connection parameters.
        """
        self.host = host
        self.port = port
        self.use_ssl = use_ssl

        if timeout is None:
            self.timeout = None

        elif isinstance(timeout, Timeout):
            self.timeout = timeout

        else:
            self.timeout = Timeout.from_float(timeout)

        self.ssl_context = ssl_context
        self.sock: Optional[socket.socket] = None
        self.bytes_received = 0

    @classmethod
    def for_url(
        cls, url: URL, timeout: Union[float, Timeout, None] = None
    ) -> "Connection":
        """Build a connection to the host and port of a decomposed URL."""
        return cls(
            url.connect_host, url.port_number, use_ssl=url.use_ssl, timeout=timeout
        )

    def open(self) -> socket.socket:
        """
        Open TCP connection with optional TLS encryption.
        """
        connect_to = self.timeout.connect_timeout if self.timeout else None

        logger.debug(
            "Connecting to %s:%s (tls=%s, timeout=%s)",
            self.host,
            self.port,
            self.use_ssl,
            connect_to,
        )
        try:
            raw_sock = socket.create_connection(
                (self.host, self.port), timeout=connect_to
            )
            if self.use_ssl:
                context = self.ssl_context or create_ssl_context()
                try:
                    self.sock = context.wrap_socket(raw_sock, server_hostname=self.host)

                except socket.timeout as e:
                    raw_sock.close()
                    raise ConnectTimeout(f"Timeout during TLS handshake: {e}") from e

                except (OSError, UnicodeError):
                    raw_sock.close()
                    raise

            else:
                self.sock = raw_sock

            # After connection is established, switch timeout to 'read_timeout'
            read_to = self.timeout.read_timeout if self.timeout else None
            self.sock.settimeout(read_to)

            return self.sock

        except socket.timeout as e:
            raise ConnectTimeout(
                f"Timeout connecting to {self.host}:{self.port}"
            ) from e

        except ssl.SSLError as e:
            raise TlsError(f"TLS Verification Error: {e}") from e

        except UnicodeError as e:
            # idna codec rejects empty or over-long labels
            raise NetworkError(f"Invalid host {self.host!r}: {e}") from e

        except OverflowError as e:
            # socket rejects ports outside 0-65535
            raise NetworkError(f"Invalid port {self.port} for {self.host}") from e

        except OSError as e:
            raise NetworkError(
                f"Connection error to {self.host}:{self.port} - {e}"
            ) from e

    def sendall(self, data: bytes) -> None:
        """Write all of ``data`` to the socket."""
        if not self.sock:
            raise NetworkError("Connection is not open")
        try:
            self.sock.sendall(data)
        except socket.timeout as e:
            raise ReadTimeout(f"Write timed out: {e}") from e
        except OSError as e:
            raise NetworkError(f"Network error during write: {e}") from e

    def recv(self, size: int) -> bytes:
        """Read up to ``size`` bytes; ``b""`` means the peer closed."""
        if not self.sock:
            raise NetworkError("Connection is not open")
        try:
            data = self.sock.recv(size)
        except socket.timeout as e:
            raise ReadTimeout(f"Read timed out: {e}") from e
        except OSError as e:
            raise NetworkError(f"Network error during read: {e}") from e
        self.bytes_received += len(data)
        return data

    def close(self) -> None:
        """
        Close the connection if it is open.
        """
        if self.sock:
            try:
                self.sock.close()
            except OSError:
                pass
            self.sock = None

    def __enter__(self) -> "Connection":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()
