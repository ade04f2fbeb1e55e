"""Direct TCP transport.

Usage:
    from ts3query.core.config import ClientConfig
    from ts3query.transport.direct import DirectTransport

    transport = await DirectTransport.connect(ClientConfig(host="ts.example.com"))
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from ts3query.core.exceptions import NetworkError
from ts3query.transport.base import MAX_LINE_SIZE, LineTransport

log = structlog.get_logger()


class DirectTransport(LineTransport):
    """ServerQuery over a plain TCP connection."""

    _writer: Optional[asyncio.StreamWriter] = None

    async def _open(self) -> None:
        config = self._config
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(config.host, config.port, limit=MAX_LINE_SIZE),
                timeout=config.connect_timeout,
            )
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Connect to {config.address} timed out",
                address=config.address,
            ) from e
        except OSError as e:
            raise NetworkError(
                f"Failed to connect to {config.address}: {e}",
                address=config.address,
            ) from e

        self._ready.set()

    async def _write(self, data: bytes) -> None:
        assert self._writer is not None
        self._writer.write(data)
        await self._writer.drain()

    async def _close_stream(self) -> None:
        writer = self._writer
        if writer is None:
            return
        # Closing the transport feeds EOF to the reader, waking pending reads
        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=1.0)
        except (asyncio.TimeoutError, ConnectionError, OSError) as e:
            log.debug("query_close_wait_failed", address=self.address, error=str(e))
