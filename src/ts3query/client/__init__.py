"""ServerQuery client: facade, command executor and resource callers.

Exports:
    Client: Connected session with typed and raw command execution.
    CommandExecutor: Serialized write-then-read-until-status round trips.
    ServerMethods: Virtual server and instance commands (``client.server``).
"""

from ts3query.client.executor import CommandExecutor, SESSION_END_COMMANDS
from ts3query.client.server import CLIENT_LIST_FULL, ServerMethods
from ts3query.client.client import Client
from ts3query.client.models import (
    Server,
    CreatedServer,
    Group,
    PrivilegeKey,
    ServerConnectionInfo,
    Instance,
    Channel,
    OnlineClient,
    DBClient,
    Snapshot,
    Version,
    WhoAmI,
)

__all__ = [
    "Client",
    "CommandExecutor",
    "SESSION_END_COMMANDS",
    "ServerMethods",
    "CLIENT_LIST_FULL",
    # Result shapes
    "Server",
    "CreatedServer",
    "Group",
    "PrivilegeKey",
    "ServerConnectionInfo",
    "Instance",
    "Channel",
    "OnlineClient",
    "DBClient",
    "Snapshot",
    "Version",
    "WhoAmI",
]
