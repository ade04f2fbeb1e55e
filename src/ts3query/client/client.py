"""ServerQuery client facade.

The Client owns one transport and one CommandExecutor. Callers either run
raw commands (exec, exec_cmd) and consume the decoded records, or ask for
typed results (exec_into, exec_one, and the resource callers built on
them such as ``client.server``).

Usage:
    from ts3query.client import Client
    from ts3query.core.config import ClientConfig

    async with await Client.connect(ClientConfig(host="ts.example.com")) as client:
        await client.login("serveradmin", "secret")
        await client.use(1)
        for channel in await client.server.channel_list():
            print(channel.name)
"""

from __future__ import annotations

from typing import Iterable, Optional, TypeVar

import structlog

from ts3query.client.executor import CommandExecutor
from ts3query.client.models import Version, WhoAmI
from ts3query.client.server import ServerMethods
from ts3query.core.config import ClientConfig, get_settings
from ts3query.protocols.transport import TransportProtocol
from ts3query.transport import open_transport
from ts3query.wire.command import Command, Option, OptionValue
from ts3query.wire.decoder import RecordSet
from ts3query.wire.mapper import WireModel, first_record, load_record, load_records

log = structlog.get_logger()

M = TypeVar("M", bound=WireModel)


class Client:
    """A connected ServerQuery session.

    Attributes:
        server: Virtual server and instance commands.
        address: Remote ``host:port``.
        usable: False once the session ended, was closed, or was left in
            an unknown state by a timeout or network failure. An unusable
            client must be replaced by a new connection.
    """

    def __init__(self, transport: TransportProtocol, command_timeout: float) -> None:
        """Wrap an already connected transport.

        Prefer :meth:`connect`, which also performs the handshake.

        Args:
            transport: Connected transport; the client takes ownership.
            command_timeout: Default deadline for each command in seconds.
        """
        self._transport = transport
        self._executor = CommandExecutor(transport, command_timeout)
        self.server = ServerMethods(self)

    @classmethod
    async def connect(cls, config: Optional[ClientConfig] = None) -> "Client":
        """Connect, verify the handshake and return a ready client.

        Args:
            config: Connection settings; defaults to the loaded settings.

        Returns:
            Connected client.

        Raises:
            NetworkError: If the server cannot be reached.
            SSHTransportError: If secure-shell negotiation fails.
            HandshakeError: If the server header does not match.
        """
        if config is None:
            config = get_settings().client
        transport = await open_transport(config)
        return cls(transport, config.command_timeout)

    @property
    def address(self) -> str:
        return self._transport.address

    @property
    def usable(self) -> bool:
        return self._executor.usable

    async def exec(self, cmd: Command, timeout: Optional[float] = None) -> RecordSet:
        """Execute ``cmd`` and return its decoded records.

        Args:
            cmd: Command to run.
            timeout: Deadline in seconds, default ``command_timeout``.

        Returns:
            Records of the response, possibly empty.

        Raises:
            ProtocolError: If the server rejects the command.
            QueryTimeoutError: If the deadline expires.
            NetworkError: If the connection fails or is closed.
        """
        return await self._executor.exec(cmd, timeout=timeout)

    async def exec_cmd(
        self,
        name: str,
        /,
        *args: str,
        flags: Iterable[str] = (),
        timeout: Optional[float] = None,
        extra_options: Iterable[Option] = (),
        **options: OptionValue,
    ) -> RecordSet:
        """Build a command from call-style arguments and execute it.

        Options named ``flags``, ``timeout`` or ``extra_options`` go in
        ``extra_options`` as ``(key, value)`` pairs.

        Example:
            await client.exec_cmd("clientlist", flags=["-uid"])
            await client.exec_cmd("servergroupadd", name="Admins")
            await client.exec_cmd("serveredit", virtualserver_maxclients=10)
        """
        cmd = Command.build(name, *args, flags=flags, extra_options=extra_options, **options)
        return await self.exec(cmd, timeout=timeout)

    async def exec_into(
        self, model: type[M], cmd: Command, timeout: Optional[float] = None
    ) -> list[M]:
        """Execute ``cmd`` and map every record onto ``model``.

        Raises:
            MappingError: If a record does not fit ``model``.
        """
        return load_records(model, await self.exec(cmd, timeout=timeout))

    async def exec_one(
        self, model: type[M], cmd: Command, timeout: Optional[float] = None
    ) -> M:
        """Execute ``cmd`` and map its first record onto ``model``.

        An empty response maps as a record without fields, i.e. all
        defaults.
        """
        records = await self.exec(cmd, timeout=timeout)
        return load_record(model, first_record(records))

    async def login(self, username: str, password: str) -> None:
        """Authenticate the query session."""
        await self.exec_cmd(
            "login",
            client_login_name=username,
            client_login_password=password,
        )
        log.info("query_login", address=self.address, username=username)

    async def logout(self) -> None:
        await self.exec_cmd("logout")

    async def use(self, server_id: int, port: Optional[int] = None) -> None:
        """Select the virtual server that later commands apply to.

        Args:
            server_id: Virtual server id.
            port: Voice port of the same server, sent as ``port=``.
        """
        options: dict[str, OptionValue] = {"sid": server_id}
        if port is not None:
            options["port"] = port
        await self.exec_cmd("use", **options)

    async def version(self) -> Version:
        return await self.exec_one(Version, Command("version"))

    async def whoami(self) -> WhoAmI:
        return await self.exec_one(WhoAmI, Command("whoami"))

    async def quit(self) -> None:
        """End the session; the server closes the connection afterwards."""
        await self.exec(Command("quit"))
        await self.close()

    async def close(self) -> None:
        """Close the connection.

        Safe to call repeatedly and while a command is in flight; the
        pending command then fails with ConnectionClosedError.
        """
        if self._transport.closed:
            return
        await self._transport.close()
        log.debug("query_client_closed", address=self.address)

    async def __aenter__(self) -> "Client":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - closes the connection."""
        await self.close()
