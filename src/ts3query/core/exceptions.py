"""ts3query Exception Hierarchy.

All custom exceptions inherit from TS3QueryError, so callers can catch a
single base class when they do not care about the specific failure mode.

Exception Categories:
- Network errors → connect/read/write failures and closed streams.
- Handshake errors → the connect header did not match.
- Protocol errors → the server answered with a nonzero status line.
  These never tear the connection down.
- Mapping errors → a wire field could not be parsed into its declared kind.
- Timeouts → the per-call deadline expired; the connection is unusable
  afterwards.

Usage:
    from ts3query.core.exceptions import ProtocolError

    try:
        await client.exec_cmd("serverinfo")
    except ProtocolError as e:
        if e.id == ERROR_COMMAND_NOT_FOUND:
            ...
"""

from typing import Any, Optional


# Status id the server uses for "command not recognized"
ERROR_COMMAND_NOT_FOUND = 256


class TS3QueryError(Exception):
    """Base exception for all ts3query errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: Optional[str] = None) -> None:
        """Initialize TS3QueryError.

        Args:
            message: Optional custom message. Defaults to a generic message.
        """
        self.message = message or "A ServerQuery error occurred."
        super().__init__(self.message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context dictionary for structured logging.

        Returns:
            dict: Key-value pairs of exception context.
        """
        return {}

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"{self.__class__.__name__}({self.message!r})"


class ConfigurationError(TS3QueryError):
    """Configuration file or value is invalid.

    Attributes:
        config_path: Path to the configuration file.
        key: The configuration key that caused the error.
    """

    def __init__(
        self,
        config_path: str,
        key: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.config_path = config_path
        self.key = key

        if message is None:
            if key:
                message = f"Invalid configuration in '{config_path}': key '{key}'."
            else:
                message = f"Invalid configuration in '{config_path}'."

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for configuration error."""
        return {"config_path": self.config_path, "key": self.key}


class CommandError(TS3QueryError, ValueError):
    """A command could not be built (empty name, empty argument, bad key)."""


class NetworkError(TS3QueryError):
    """Connecting, reading or writing the underlying stream failed.

    Attributes:
        address: The remote address, when known.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        address: Optional[str] = None,
    ) -> None:
        self.address = address
        super().__init__(message or "ServerQuery network error.")

    @property
    def context(self) -> dict[str, Any]:
        """Return context for network error."""
        return {"address": self.address}


class ConnectionClosedError(NetworkError):
    """The stream is closed, either by the far end or by a local close()."""

    def __init__(
        self,
        message: Optional[str] = None,
        address: Optional[str] = None,
    ) -> None:
        super().__init__(message or "Connection closed.", address=address)


class SSHTransportError(NetworkError):
    """Secure-shell negotiation, authentication or channel setup failed."""


class HandshakeError(TS3QueryError):
    """The connect header did not match the expected value.

    Attributes:
        expected: The header the client was configured to expect.
        received: The line the server actually sent.
    """

    def __init__(
        self,
        expected: str,
        received: str,
        message: Optional[str] = None,
    ) -> None:
        self.expected = expected
        self.received = received

        if message is None:
            message = (
                f"Invalid connection header {received!r} "
                f"(expected {expected!r})."
            )

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for handshake error."""
        return {"expected": self.expected, "received": self.received}

    def __repr__(self) -> str:
        """Return debug representation with attributes."""
        return (
            f"HandshakeError(expected={self.expected!r}, "
            f"received={self.received!r})"
        )


class ProtocolError(TS3QueryError):
    """The server answered a command with a nonzero status id.

    Protocol errors are per-command: the connection stays usable and the
    caller decides whether to retry.

    Attributes:
        id: Status id reported by the server.
        msg: Unescaped status message.
        extra_msg: Optional additional message appended by the server.
        failed_permid: Optional id of the permission that was missing.
    """

    def __init__(
        self,
        id: int,
        msg: str,
        extra_msg: Optional[str] = None,
        failed_permid: Optional[int] = None,
    ) -> None:
        self.id = id
        self.msg = msg
        self.extra_msg = extra_msg
        self.failed_permid = failed_permid

        message = f"{msg} (id: {id})"
        if extra_msg:
            message = f"{message}: {extra_msg}"
        if failed_permid is not None:
            message = f"{message} [failed_permid: {failed_permid}]"

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for protocol error."""
        return {
            "id": self.id,
            "msg": self.msg,
            "extra_msg": self.extra_msg,
            "failed_permid": self.failed_permid,
        }

    def __repr__(self) -> str:
        """Return debug representation with attributes."""
        return f"ProtocolError(id={self.id!r}, msg={self.msg!r})"


class MappingError(TS3QueryError):
    """A record field could not be converted into its declared kind.

    Attributes:
        model: Name of the destination shape.
        keys: Wire keys that failed to convert.
    """

    def __init__(
        self,
        model: str,
        keys: Optional[list[str]] = None,
        message: Optional[str] = None,
    ) -> None:
        self.model = model
        self.keys = keys or []

        if message is None:
            message = f"Cannot decode {model}: invalid field(s) {', '.join(self.keys)}."

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for mapping error."""
        return {"model": self.model, "keys": self.keys}


class QueryTimeoutError(TS3QueryError):
    """A command did not complete before its deadline.

    This is distinct from the built-in :class:`TimeoutError` so callers can
    tell ServerQuery deadlines apart from OS-level ones. The connection must
    be recreated afterwards.

    Attributes:
        command: Name of the command that timed out.
        timeout: Deadline in seconds.
    """

    def __init__(
        self,
        command: str,
        timeout: float,
        message: Optional[str] = None,
    ) -> None:
        self.command = command
        self.timeout = timeout

        if message is None:
            message = f"Command '{command}' timed out after {timeout}s."

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for timeout."""
        return {"command": self.command, "timeout": self.timeout}
