"""Transports for ServerQuery connections.

Variants:
    DirectTransport: plain TCP.
    SSHTransport: interactive shell channel of a secure-shell session.

Both present the same line-oriented interface (TransportProtocol), so the
executor above them cannot tell them apart.
"""

from __future__ import annotations

from ts3query.core.config import ClientConfig
from ts3query.transport.base import MAX_LINE_SIZE, LineTransport
from ts3query.transport.direct import DirectTransport
from ts3query.transport.ssh import SSHTransport


async def open_transport(config: ClientConfig) -> LineTransport:
    """Connect the transport variant selected by ``config.ssh.enabled``.

    Args:
        config: Connection settings.

    Returns:
        Connected transport with the handshake consumed.
    """
    if config.ssh.enabled:
        return await SSHTransport.connect(config)
    return await DirectTransport.connect(config)


__all__ = [
    "MAX_LINE_SIZE",
    "LineTransport",
    "DirectTransport",
    "SSHTransport",
    "open_transport",
]
