"""src/mycurl/http/body.py

HTTP body reading (fixed-length, chunked, read-to-close) for mycurl.
"""

from dataclasses import dataclass
from typing import Generator, Optional, Protocol

from mycurl.exceptions import IncompleteBodyError, InvalidResponseError

__all__ = [
    "ChunkReadStats",
    "SocketReader",
    "read_exact",
    "read_until_close",
    "iter_read_chunked",
    "read_chunked",
]

CRLF = b"\r\n"
HEX_DIGITS = b"0123456789abcdefABCDEF"


class Readable(Protocol):
    """Anything with a socket-like ``recv``."""

    def recv(self, size: int) -> bytes: ...  # pragma: no cover


@dataclass
class ChunkReadStats:
    """
    Counters collected while decoding a chunked body.

    Attributes:
        socket_bytes: Raw bytes consumed during the chunked phase, framing included.
        body_bytes: Payload bytes delivered.
        chunks: Number of non-empty chunks delivered.
        last_chunk_size: Size of the most recent chunk header read.
        eof_in_size_line: Peer closed while a chunk size line was being read.
        eof_in_chunk_data: Peer closed inside chunk data.
        missing_crlf_after_chunk: Chunk data was not followed by CRLF.
    """

    socket_bytes: int = 0
    body_bytes: int = 0
    chunks: int = 0
    last_chunk_size: int = 0
    eof_in_size_line: bool = False
    eof_in_chunk_data: bool = False
    missing_crlf_after_chunk: bool = False


class SocketReader:
    """
    Buffered reader over a socket-like object.

    Holds bytes read past the header block so body readers see them first.
    """

    __slots__ = ("_source", "_buffer", "_eof", "recv_size")

    def __init__(
        self, source: Readable, initial: bytes = b"", recv_size: int = 65536
    ) -> None:
        self._source = source
        self._buffer = bytearray(initial)
        self._eof = False
        self.recv_size = recv_size

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def _fill(self) -> bool:
        """Read more from the source; False once the peer has closed."""
        if self._eof:
            return False
        chunk = self._source.recv(self.recv_size)
        if not chunk:
            self._eof = True
            return False
        self._buffer.extend(chunk)
        return True

    def read(self, n: int) -> bytes:
        """Return up to ``n`` bytes; fewer only at end of stream."""
        while len(self._buffer) < n and self._fill():
            pass
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data

    def read_some(self) -> bytes:
        """Return whatever is buffered, or one recv worth; ``b""`` at EOF."""
        if not self._buffer:
            self._fill()
        data = bytes(self._buffer)
        self._buffer.clear()
        return data

    def readline(self, limit: int = 65536) -> bytes:
        """
        Return one line including its CRLF.

        At end of stream the partial line (possibly empty) is returned
        without a terminator.
        """
        while True:
            idx = self._buffer.find(CRLF)
            if idx != -1:
                end = idx + len(CRLF)
                line = bytes(self._buffer[:end])
                del self._buffer[:end]
                return line
            if len(self._buffer) > limit:
                raise InvalidResponseError(f"Line exceeds {limit} bytes")
            if not self._fill():
                line = bytes(self._buffer)
                self._buffer.clear()
                return line

    def read_until(self, marker: bytes, limit: int) -> Optional[bytes]:
        """
        Return bytes up to and excluding ``marker``, consuming the marker.

        Returns None if the stream ends first.
        """
        while True:
            idx = self._buffer.find(marker)
            if idx != -1:
                data = bytes(self._buffer[:idx])
                del self._buffer[: idx + len(marker)]
                return data
            if len(self._buffer) > limit:
                raise InvalidResponseError(
                    f"Headers exceed maximum size of {limit} bytes"
                )
            if not self._fill():
                return None


def read_exact(reader: SocketReader, n: int) -> bytes:
    """Read exactly n bytes from the reader."""
    data = reader.read(n)
    if len(data) < n:
        raise IncompleteBodyError(
            f"Connection closed after {len(data)} of {n} body bytes"
        )
    return data


def read_until_close(reader: SocketReader) -> Generator[bytes, None, None]:
    """Yield body data until the peer closes the connection."""
    while True:
        chunk = reader.read_some()
        if not chunk:
            return
        yield chunk


def _parse_chunk_size(line: bytes) -> int:
    size_hex = line.split(b";", 1)[0].strip()
    # int(x, 16) would also take "0x", signs and underscores
    if not size_hex or size_hex.strip(HEX_DIGITS):
        raise InvalidResponseError(f"Invalid chunk size: {line!r}")
    return int(size_hex, 16)


def iter_read_chunked(
    reader: SocketReader, stats: Optional[ChunkReadStats] = None
) -> Generator[bytes, None, None]:
    """
    Iterate over a chunked transfer-encoded body.

    Chunk extensions are ignored. Trailer fields are consumed and dropped.

    Raises:
        IncompleteBodyError: The peer closed mid-body. The matching flag in
            ``stats`` is set first.
        InvalidResponseError: A size line is not hexadecimal.
    """
    if stats is None:
        stats = ChunkReadStats()

    while True:
        line = reader.readline()
        stats.socket_bytes += len(line)
        if not line.endswith(CRLF):
            stats.eof_in_size_line = True
            raise IncompleteBodyError("Connection closed during chunk header")

        size = _parse_chunk_size(line)
        stats.last_chunk_size = size

        if size == 0:
            # Trailer section ends with an empty line
            while True:
                trailer = reader.readline()
                stats.socket_bytes += len(trailer)
                if trailer in (CRLF, b""):
                    return

        data = reader.read(size)
        stats.socket_bytes += len(data)
        if len(data) < size:
            stats.eof_in_chunk_data = True
            raise IncompleteBodyError(
                f"Connection closed after {len(data)} of {size} chunk bytes"
            )

        terminator = reader.read(len(CRLF))
        stats.socket_bytes += len(terminator)
        if terminator != CRLF:
            stats.missing_crlf_after_chunk = True
            raise IncompleteBodyError("Chunk data not followed by CRLF")

        stats.chunks += 1
        stats.body_bytes += size
        yield data


def read_chunked(
    reader: SocketReader, stats: Optional[ChunkReadStats] = None
) -> bytes:
    """Read full chunked body into memory."""
    return b"".join(iter_read_chunked(reader, stats))
