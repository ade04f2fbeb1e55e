"""Transport protocol for ts3query.

This module defines the TransportProtocol interface that every byte-stream
variant (direct TCP, secure-shell channel, test doubles) must implement.
Uses `typing.Protocol` for structural subtyping.

Usage:
    from ts3query.protocols import TransportProtocol

    class FakeTransport:
        # Implement all protocol methods...
        pass

    assert isinstance(FakeTransport(), TransportProtocol)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TransportProtocol(Protocol):
    """Protocol for line-oriented ServerQuery transports.

    A transport is handed to the executor already connected, with the
    handshake (header and optional banner) consumed.

    Methods:
        read_line: Read one line with its terminators stripped.
        write: Write raw bytes.
        close: Release the stream; idempotent.

    Note:
        read_line must raise ConnectionClosedError at end of stream and
        whenever close() is called while a read is pending.
    """

    @property
    def address(self) -> str:
        """Remote address, for logging and errors."""
        ...

    @property
    def closed(self) -> bool:
        """Whether close() was called or the stream ended."""
        ...

    async def read_line(self) -> str:
        """Read the next line.

        Returns:
            The decoded line without trailing ``\\n``/``\\r``.

        Raises:
            ConnectionClosedError: At end of stream or after close().
            NetworkError: If the read fails.
        """
        ...

    async def write(self, data: bytes) -> None:
        """Write ``data`` to the stream.

        Raises:
            ConnectionClosedError: If the stream is closed.
            NetworkError: If the write fails.
        """
        ...

    async def close(self) -> None:
        """Close the stream. Safe to call more than once."""
        ...
