"""Unit tests for ts3query.core.exceptions module.

Tests the exception hierarchy:
- TS3QueryError (base)
- NetworkError / ConnectionClosedError / SSHTransportError
- HandshakeError
- ProtocolError
- MappingError
- QueryTimeoutError
"""

import pytest


class TestTS3QueryError:
    """Tests for the base TS3QueryError exception."""

    def test_inherits_from_exception(self):
        """TS3QueryError should inherit from Exception."""
        from ts3query.core.exceptions import TS3QueryError

        assert issubclass(TS3QueryError, Exception)

    def test_has_meaningful_default_message(self):
        """TS3QueryError has a meaningful message when raised without args."""
        from ts3query.core.exceptions import TS3QueryError

        error = TS3QueryError()
        assert "error" in str(error).lower()

    def test_repr_and_context(self):
        from ts3query.core.exceptions import TS3QueryError

        error = TS3QueryError("boom")
        assert repr(error) == "TS3QueryError('boom')"
        assert error.context == {}

    @pytest.mark.parametrize(
        "name",
        [
            "ConfigurationError",
            "CommandError",
            "NetworkError",
            "ConnectionClosedError",
            "SSHTransportError",
            "HandshakeError",
            "ProtocolError",
            "MappingError",
            "QueryTimeoutError",
        ],
    )
    def test_all_errors_share_base(self, name):
        """Every ts3query error can be caught as TS3QueryError."""
        from ts3query.core import exceptions

        assert issubclass(getattr(exceptions, name), exceptions.TS3QueryError)


class TestNetworkErrors:
    """Tests for the network error family."""

    def test_connection_closed_default_message(self):
        from ts3query.core.exceptions import ConnectionClosedError, NetworkError

        error = ConnectionClosedError(address="127.0.0.1:10011")
        assert isinstance(error, NetworkError)
        assert str(error) == "Connection closed."
        assert error.context == {"address": "127.0.0.1:10011"}

    def test_ssh_error_is_network_error(self):
        from ts3query.core.exceptions import NetworkError, SSHTransportError

        assert issubclass(SSHTransportError, NetworkError)


class TestHandshakeError:
    """Tests for HandshakeError."""

    def test_message_and_context(self):
        from ts3query.core.exceptions import HandshakeError

        error = HandshakeError(expected="TS3", received="bad")
        assert "'bad'" in str(error)
        assert "'TS3'" in str(error)
        assert error.context == {"expected": "TS3", "received": "bad"}
        assert repr(error) == "HandshakeError(expected='TS3', received='bad')"


class TestProtocolError:
    """Tests for ProtocolError."""

    def test_message_format(self):
        from ts3query.core.exceptions import ProtocolError

        error = ProtocolError(id=256, msg="command not found")
        assert str(error) == "command not found (id: 256)"
        assert error.id == 256
        assert error.msg == "command not found"

    def test_extra_fields_in_message(self):
        from ts3query.core.exceptions import ProtocolError

        error = ProtocolError(id=2568, msg="insufficient client permissions", extra_msg="x", failed_permid=4)
        assert str(error) == "insufficient client permissions (id: 2568): x [failed_permid: 4]"
        assert error.context["failed_permid"] == 4


class TestMappingError:
    """Tests for MappingError."""

    def test_default_message_lists_keys(self):
        from ts3query.core.exceptions import MappingError

        error = MappingError(model="Server", keys=["virtualserver_port"])
        assert "virtualserver_port" in str(error)
        assert error.context == {"model": "Server", "keys": ["virtualserver_port"]}


class TestQueryTimeoutError:
    """Tests for QueryTimeoutError."""

    def test_not_builtin_timeout(self):
        from ts3query.core.exceptions import QueryTimeoutError

        error = QueryTimeoutError(command="serverlist", timeout=1.5)
        assert not isinstance(error, TimeoutError)
        assert str(error) == "Command 'serverlist' timed out after 1.5s."
        assert error.context == {"command": "serverlist", "timeout": 1.5}
