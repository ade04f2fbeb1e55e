"""Virtual server and instance commands.

Exposed on a connected client as ``client.server``:

    servers = await client.server.list()
    await client.use(servers[0].id)
    channels = await client.server.channel_list()
    clients = await client.server.client_list(*CLIENT_LIST_FULL)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import Field

from ts3query.client.models import (
    Channel,
    CreatedServer,
    DBClient,
    Group,
    Instance,
    OnlineClient,
    PrivilegeKey,
    Server,
    ServerConnectionInfo,
    Snapshot,
)
from ts3query.wire.command import Command, OptionValue
from ts3query.wire.escape import escape
from ts3query.wire.mapper import Int, Str, WireModel, first_record, load_record

if TYPE_CHECKING:
    from ts3query.client.client import Client


# clientlist option flags, in the order the server documents them
CLIENT_LIST_FULL = (
    "-uid",
    "-away",
    "-voice",
    "-times",
    "-groups",
    "-info",
    "-icon",
    "-country",
    "-ip",
    "-badges",
)


class _ServerID(WireModel):
    id: Int = Field(0, alias="server_id")


class _Token(WireModel):
    token: Str = Field("", alias="token")


class ServerMethods:
    """Server-scoped commands, bound to one client."""

    def __init__(self, client: "Client") -> None:
        self._client = client

    async def list(self) -> list[Server]:
        """Return all virtual servers of the instance."""
        return await self._client.exec_into(Server, Command("serverlist"))

    async def info(self) -> Server:
        """Return the full settings of the selected virtual server."""
        return await self._client.exec_one(Server, Command("serverinfo"))

    async def id_get_by_port(self, port: int) -> int:
        """Return the id of the virtual server listening on ``port``."""
        cmd = Command.build("serveridgetbyport", virtualserver_port=port)
        result = await self._client.exec_one(_ServerID, cmd)
        return result.id

    async def create(self, name: str, /, **props: OptionValue) -> CreatedServer:
        """Create a virtual server.

        Args:
            name: Name of the new server.
            **props: Additional ``virtualserver_*`` properties.

        Returns:
            The new server's id, port and admin privilege key.
        """
        cmd = Command.build("servercreate", virtualserver_name=name, **props)
        return await self._client.exec_one(CreatedServer, cmd)

    async def edit(self, **props: OptionValue) -> None:
        """Change properties of the selected virtual server."""
        await self._client.exec_cmd("serveredit", **props)

    async def delete(self, server_id: int) -> None:
        """Delete a stopped virtual server."""
        await self._client.exec_cmd("serverdelete", sid=server_id)

    async def start(self, server_id: int) -> None:
        await self._client.exec_cmd("serverstart", sid=server_id)

    async def stop(self, server_id: int) -> None:
        await self._client.exec_cmd("serverstop", sid=server_id)

    async def group_list(self) -> list[Group]:
        """Return the server groups of the selected virtual server."""
        return await self._client.exec_into(Group, Command("servergrouplist"))

    async def privilege_key_list(self) -> list[PrivilegeKey]:
        return await self._client.exec_into(PrivilegeKey, Command("privilegekeylist"))

    async def privilege_key_add(self, token_type: int, group_id: int, channel_id: int) -> str:
        """Create a privilege key.

        Args:
            token_type: 0 for a server group, 1 for a channel group.
            group_id: Group granted when the key is redeemed.
            channel_id: Channel for channel group keys, else 0.

        Returns:
            The new token.
        """
        cmd = Command.build(
            "privilegekeyadd",
            tokentype=token_type,
            tokenid1=group_id,
            tokenid2=channel_id,
        )
        result = await self._client.exec_one(_Token, cmd)
        return result.token

    async def connection_info(self) -> ServerConnectionInfo:
        """Return traffic counters of the selected virtual server."""
        return await self._client.exec_one(
            ServerConnectionInfo, Command("serverrequestconnectioninfo")
        )

    async def instance_info(self) -> Instance:
        return await self._client.exec_one(Instance, Command("instanceinfo"))

    async def channel_list(self) -> list[Channel]:
        return await self._client.exec_into(Channel, Command("channellist"))

    async def client_list(self, *flags: str) -> list[OnlineClient]:
        """Return the clients connected to the selected virtual server.

        Args:
            *flags: ``clientlist`` flags selecting extra fields, e.g.
                ``"-uid"``, or ``*CLIENT_LIST_FULL`` for all of them.
                Fields of flags not requested are None.
        """
        cmd = Command.build("clientlist", flags=flags)
        return await self._client.exec_into(OnlineClient, cmd)

    async def client_db_list(self) -> list[DBClient]:
        return await self._client.exec_into(DBClient, Command("clientdblist"))

    async def snapshot_create(self, password: Optional[str] = None) -> Snapshot:
        """Create a snapshot of the selected virtual server.

        The snapshot data is returned in wire form, ready to be sent back
        with ``serversnapshotdeploy``.

        Args:
            password: Optional password to encrypt the snapshot with.
        """
        options = {} if password is None else {"password": password}
        records = await self._client.exec(Command.build("serversnapshotcreate", **options))

        record = dict(first_record(records))
        data = record.get("data")
        if data is not None:
            record["data"] = escape(data)
        return load_record(Snapshot, record)
