"""Protocol abstractions for ts3query.

Protocols:
    TransportProtocol: Interface for line-oriented byte-stream transports.
"""

from __future__ import annotations

from ts3query.protocols.transport import TransportProtocol

__all__ = [
    "TransportProtocol",
]
