"""Core module for ts3query.

Exports the core components: exceptions and configuration.
"""

from ts3query.core.exceptions import (
    ERROR_COMMAND_NOT_FOUND,
    TS3QueryError,
    ConfigurationError,
    CommandError,
    NetworkError,
    ConnectionClosedError,
    SSHTransportError,
    HandshakeError,
    ProtocolError,
    MappingError,
    QueryTimeoutError,
)
from ts3query.core.config import (
    DEFAULT_CONNECT_HEADER,
    DEFAULT_PORT,
    DEFAULT_SSH_PORT,
    get_settings,
    reset_settings,
    create_settings,
    load_yaml_file,
    Settings,
    ClientConfig,
    SSHConfig,
    LoggingConfig,
)

__all__ = [
    # Exceptions
    "ERROR_COMMAND_NOT_FOUND",
    "TS3QueryError",
    "ConfigurationError",
    "CommandError",
    "NetworkError",
    "ConnectionClosedError",
    "SSHTransportError",
    "HandshakeError",
    "ProtocolError",
    "MappingError",
    "QueryTimeoutError",
    # Configuration
    "DEFAULT_CONNECT_HEADER",
    "DEFAULT_PORT",
    "DEFAULT_SSH_PORT",
    "get_settings",
    "reset_settings",
    "create_settings",
    "load_yaml_file",
    "Settings",
    "ClientConfig",
    "SSHConfig",
    "LoggingConfig",
]
