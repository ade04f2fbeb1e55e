"""Unit tests for ts3query.client.client and the server resource callers."""

import pytest

from fixtures.fake_transport import OK, FakeTransport
from ts3query.client import CLIENT_LIST_FULL, Client
from ts3query.client.models import Version, WhoAmI
from ts3query.core.config import ClientConfig
from ts3query.core.exceptions import ConnectionClosedError, MappingError
from ts3query.wire.command import Command


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(
        {
            "login": [OK],
            "logout": [OK],
            "use": [OK],
            "version": ["version=3.0.12.2 build=1455547898 platform=FreeBSD", OK],
            "whoami": [r"virtualserver_id=18 client_nickname=serveradmin\sfrom\s127.0.0.1:49725", OK],
            "quit": [OK],
            "serveridgetbyport": ["server_id=3", OK],
            "privilegekeyadd": ["token=abc+def", OK],
            "clientlist": ["clid=1 cid=2 client_unique_identifier=x", OK],
            "serversnapshotcreate": [r"version=3 data=KLUv\/aT\sx", OK],
            "servercreate": ["sid=2 virtualserver_port=9988 token=t", OK],
            "serverdelete": [OK],
            "servergroupadd": ["sgid=13", OK],
            "broken": ["version=1 build=notanumber", OK],
            "empty": [OK],
        }
    )


@pytest.fixture
def client(transport: FakeTransport) -> Client:
    return Client(transport, command_timeout=1.0)


class TestClientCommands:
    """Tests for the facade's session commands."""

    @pytest.mark.asyncio
    async def test_login_escapes_credentials(self, client: Client, transport: FakeTransport) -> None:
        await client.login("serveradmin", "pa ss")
        assert transport.sent == [r"login client_login_name=serveradmin client_login_password=pa\sss"]

    @pytest.mark.asyncio
    async def test_logout(self, client: Client, transport: FakeTransport) -> None:
        await client.logout()
        assert transport.sent == ["logout"]

    @pytest.mark.asyncio
    async def test_use(self, client: Client, transport: FakeTransport) -> None:
        await client.use(1)
        await client.use(1, port=9987)
        assert transport.sent == ["use sid=1", "use sid=1 port=9987"]

    @pytest.mark.asyncio
    async def test_version(self, client: Client) -> None:
        assert await client.version() == Version(version="3.0.12.2", build=1455547898, platform="FreeBSD")

    @pytest.mark.asyncio
    async def test_whoami(self, client: Client) -> None:
        me = await client.whoami()
        assert isinstance(me, WhoAmI)
        assert me.server_id == 18
        assert me.nickname == "serveradmin from 127.0.0.1:49725"

    @pytest.mark.asyncio
    async def test_quit_closes(self, client: Client, transport: FakeTransport) -> None:
        await client.quit()
        assert transport.closed
        assert not client.usable
        with pytest.raises(ConnectionClosedError):
            await client.version()


class TestClientExec:
    """Tests for raw and typed execution helpers."""

    @pytest.mark.asyncio
    async def test_exec_cmd(self, client: Client, transport: FakeTransport) -> None:
        records = await client.exec_cmd("clientlist", flags=["-uid"])
        assert records == [{"clid": "1", "cid": "2", "client_unique_identifier": "x"}]
        assert transport.sent == ["clientlist -uid"]

    @pytest.mark.asyncio
    async def test_exec_cmd_name_and_reserved_options(self, client: Client, transport: FakeTransport) -> None:
        records = await client.exec_cmd(
            "servergroupadd",
            name="Admins",
            extra_options=[("timeout", 5)],
            timeout=1.0,
        )
        assert records == [{"sgid": "13"}]
        assert transport.sent == ["servergroupadd name=Admins timeout=5"]

    @pytest.mark.asyncio
    async def test_exec_one_empty_response_gives_defaults(self, client: Client) -> None:
        assert await client.exec_one(Version, Command("empty")) == Version()

    @pytest.mark.asyncio
    async def test_mapping_error_keeps_connection(self, client: Client) -> None:
        with pytest.raises(MappingError) as exc_info:
            await client.exec_into(Version, Command("broken"))
        assert "build" in exc_info.value.keys
        assert client.usable

    @pytest.mark.asyncio
    async def test_close_idempotent_and_context_manager(self, transport: FakeTransport) -> None:
        async with Client(transport, command_timeout=1.0) as client:
            assert client.address == "fake:10011"
        assert transport.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_connect_uses_settings(self, monkeypatch, transport: FakeTransport) -> None:
        seen = {}

        async def fake_open(config: ClientConfig) -> FakeTransport:
            seen["config"] = config
            return transport

        monkeypatch.setattr("ts3query.client.client.open_transport", fake_open)
        monkeypatch.setattr(
            "ts3query.client.client.get_settings",
            lambda: type("S", (), {"client": ClientConfig(host="ts.example.com", command_timeout=4.0)})(),
        )

        client = await Client.connect()
        assert seen["config"].host == "ts.example.com"
        assert client.usable


class TestServerMethods:
    """Tests for command lines and result handling of client.server."""

    @pytest.mark.asyncio
    async def test_id_get_by_port(self, client: Client, transport: FakeTransport) -> None:
        assert await client.server.id_get_by_port(9987) == 3
        assert transport.sent == ["serveridgetbyport virtualserver_port=9987"]

    @pytest.mark.asyncio
    async def test_privilege_key_add(self, client: Client, transport: FakeTransport) -> None:
        assert await client.server.privilege_key_add(0, 6, 0) == "abc+def"
        assert transport.sent == ["privilegekeyadd tokentype=0 tokenid1=6 tokenid2=0"]

    @pytest.mark.asyncio
    async def test_create_with_properties(self, client: Client, transport: FakeTransport) -> None:
        created = await client.server.create("my server", virtualserver_maxclients=10)
        assert (created.id, created.port, created.token) == (2, 9988, "t")
        assert transport.sent == [r"servercreate virtualserver_name=my\sserver virtualserver_maxclients=10"]

    @pytest.mark.asyncio
    async def test_delete(self, client: Client, transport: FakeTransport) -> None:
        await client.server.delete(4)
        assert transport.sent == ["serverdelete sid=4"]

    @pytest.mark.asyncio
    async def test_client_list_flags(self, client: Client, transport: FakeTransport) -> None:
        clients = await client.server.client_list(*CLIENT_LIST_FULL)
        assert transport.sent == [
            "clientlist -uid -away -voice -times -groups -info -icon -country -ip -badges"
        ]
        assert clients[0].unique_identifier == "x"
        assert clients[0].talk_power is None

    @pytest.mark.asyncio
    async def test_snapshot_kept_in_wire_form(self, client: Client, transport: FakeTransport) -> None:
        snapshot = await client.server.snapshot_create(password="secret")
        assert transport.sent == ["serversnapshotcreate password=secret"]
        assert snapshot.version == 3
        assert snapshot.data == r"KLUv\/aT\sx"
