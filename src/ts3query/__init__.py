"""
ts3query - asynchronous TeamSpeak 3 ServerQuery client

Direct TCP and secure-shell transports, serialized command execution and
typed result mapping.
"""

from ts3query.client import CLIENT_LIST_FULL, Client
from ts3query.core.config import ClientConfig, SSHConfig
from ts3query.core.exceptions import (
    TS3QueryError,
    NetworkError,
    HandshakeError,
    ProtocolError,
    MappingError,
    QueryTimeoutError,
)
from ts3query.protocols import TransportProtocol
from ts3query.wire.command import Command

__version__ = "0.1.0"

__all__ = [
    "Client",
    "CLIENT_LIST_FULL",
    "ClientConfig",
    "SSHConfig",
    "Command",
    "TransportProtocol",
    "TS3QueryError",
    "NetworkError",
    "HandshakeError",
    "ProtocolError",
    "MappingError",
    "QueryTimeoutError",
]
