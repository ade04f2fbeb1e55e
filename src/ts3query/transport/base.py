"""Shared line transport for ServerQuery connections.

Both transport variants expose the received bytes as an
``asyncio.StreamReader``; this base class implements line reading, the
connect-time handshake and idempotent close on top of it. Subclasses only
open and close their underlying stream and write bytes.

Handshake:
    1. If ``expect_header`` is set, read one line and require it to equal
       ``connect_header`` (HandshakeError otherwise).
    2. If ``expect_banner`` is also set, read and discard one banner line.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional, TypeVar

import structlog

from ts3query.core.config import ClientConfig
from ts3query.core.exceptions import (
    ConnectionClosedError,
    HandshakeError,
    NetworkError,
)

log = structlog.get_logger()


# Snapshots travel as a single line, so allow for large ones
MAX_LINE_SIZE = 64 * 1024 * 1024

T = TypeVar("T", bound="LineTransport")


class LineTransport(ABC):
    """Line-oriented byte stream with ServerQuery handshake.

    Reads and writes wait until the stream is ready; closing wakes every
    waiter with ConnectionClosedError.

    Attributes:
        address: Remote ``host:port``.
        closed: Whether close() was called.
    """

    def __init__(self, config: ClientConfig) -> None:
        """Initialize an unconnected transport.

        Args:
            config: Connection settings.
        """
        self._config = config
        self._reader: Optional[asyncio.StreamReader] = None
        self._ready = asyncio.Event()
        self._closed = False

    @property
    def address(self) -> str:
        """Remote address, for logging and errors."""
        return self._config.address

    @property
    def closed(self) -> bool:
        """Whether close() was called."""
        return self._closed

    @classmethod
    async def connect(cls: type[T], config: ClientConfig) -> T:
        """Open the stream and perform the handshake.

        No partially connected transport is ever returned: on any failure
        the stream is closed before the error propagates.

        Args:
            config: Connection settings.

        Returns:
            Connected transport, positioned after the handshake.

        Raises:
            NetworkError: If the connection cannot be established or the
                handshake times out.
            SSHTransportError: If secure-shell negotiation fails.
            HandshakeError: If the header does not match.
        """
        transport = cls(config)
        try:
            await transport._open()
            await asyncio.wait_for(transport._handshake(), timeout=config.connect_timeout)
        except asyncio.TimeoutError as e:
            await transport.close()
            raise NetworkError(
                f"Handshake with {config.address} timed out",
                address=config.address,
            ) from e
        except BaseException:
            await transport.close()
            raise

        log.info(
            "query_connected",
            address=config.address,
            transport=cls.__name__,
        )
        return transport

    async def _handshake(self) -> None:
        config = self._config
        if not config.expect_header:
            return

        header = await self.read_line()
        if header != config.connect_header:
            log.warning(
                "query_handshake_failed",
                address=self.address,
                received=header,
            )
            raise HandshakeError(expected=config.connect_header, received=header)

        if config.expect_banner:
            await self.read_line()

    async def _wait_ready(self) -> None:
        if not self._ready.is_set():
            await self._ready.wait()
        if self._closed:
            raise ConnectionClosedError(address=self.address)

    async def read_line(self) -> str:
        """Read the next line with its ``\\n``/``\\r`` terminators stripped.

        Returns:
            Decoded line.

        Raises:
            ConnectionClosedError: At end of stream or after close().
            NetworkError: If the read fails or the line is too long.
        """
        await self._wait_ready()
        assert self._reader is not None

        try:
            data = await self._reader.readline()
        except ValueError as e:
            # readline() reports limit overruns as ValueError
            raise NetworkError(f"Line too long: {e}", address=self.address) from e
        except (ConnectionError, OSError) as e:
            raise NetworkError(f"Read failed: {e}", address=self.address) from e

        if self._closed:
            raise ConnectionClosedError(address=self.address)

        line = data.decode("utf-8", errors="replace").strip("\r\n")
        # The trailing "\r" of the last "\n\r" terminator arrives alone at EOF
        if not line and self._reader.at_eof():
            raise ConnectionClosedError(
                "Server closed connection", address=self.address
            )
        return line

    async def write(self, data: bytes) -> None:
        """Write ``data`` once the stream is ready.

        Raises:
            ConnectionClosedError: If the transport is closed.
            NetworkError: If the write fails.
        """
        await self._wait_ready()
        try:
            await self._write(data)
        except (ConnectionError, OSError) as e:
            if self._closed:
                raise ConnectionClosedError(address=self.address) from e
            raise NetworkError(f"Write failed: {e}", address=self.address) from e

    async def close(self) -> None:
        """Close the stream. Safe to call repeatedly and concurrently with reads."""
        if self._closed:
            return
        self._closed = True
        # Wake anyone still waiting for the stream to become ready
        self._ready.set()
        await self._close_stream()
        log.debug("query_transport_closed", address=self.address)

    async def __aenter__(self: T) -> T:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - closes the stream."""
        await self.close()

    @abstractmethod
    async def _open(self) -> None:
        """Establish the stream, set ``_reader`` and ``_ready``."""

    @abstractmethod
    async def _write(self, data: bytes) -> None:
        """Write raw bytes to the established stream."""

    @abstractmethod
    async def _close_stream(self) -> None:
        """Release the underlying stream; pending reads must see EOF."""
