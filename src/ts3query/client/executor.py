"""Serialized command execution over one ServerQuery transport.

Each exec() writes one command line, then reads lines until the status
line, holding a lock for the whole round trip: commands on one connection
never interleave and responses come back in submission order.

Failure policy:
- nonzero status → ProtocolError; the connection stays usable.
- deadline expired mid round trip → QueryTimeoutError; the connection is
  marked unusable because a late response could no longer be matched.
- network failure → NetworkError; the connection is marked unusable.
- end of stream after ``quit`` → treated as a clean end of session.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from ts3query.core.exceptions import (
    ConnectionClosedError,
    NetworkError,
    QueryTimeoutError,
)
from ts3query.protocols.transport import TransportProtocol
from ts3query.wire.command import Command, encode_command
from ts3query.wire.decoder import RecordSet, decode_line, parse_status

log = structlog.get_logger()


# Commands after which the server hangs up
SESSION_END_COMMANDS = frozenset({"quit", "disconnect"})


class CommandExecutor:
    """Runs commands one at a time against a connected transport.

    Attributes:
        transport: The owned transport.
        command_timeout: Default per-call deadline in seconds.
        usable: False once a timeout or network failure left the
            stream in an unknown state.
    """

    def __init__(self, transport: TransportProtocol, command_timeout: float) -> None:
        """Initialize CommandExecutor.

        Args:
            transport: Connected transport (handshake already consumed).
            command_timeout: Default deadline for exec() in seconds.
        """
        self._transport = transport
        self._command_timeout = command_timeout
        self._lock = asyncio.Lock()
        self._unusable_reason: Optional[str] = None

    @property
    def transport(self) -> TransportProtocol:
        """Return the owned transport."""
        return self._transport

    @property
    def command_timeout(self) -> float:
        """Return the default per-call deadline."""
        return self._command_timeout

    @property
    def usable(self) -> bool:
        """Return True while commands may still be sent."""
        return self._unusable_reason is None and not self._transport.closed

    def _check_usable(self) -> None:
        if self._unusable_reason is not None:
            raise ConnectionClosedError(
                f"Connection unusable: {self._unusable_reason}",
                address=self._transport.address,
            )
        if self._transport.closed:
            raise ConnectionClosedError(address=self._transport.address)

    async def exec(self, cmd: Command, timeout: Optional[float] = None) -> RecordSet:
        """Execute ``cmd`` and return the records of its response.

        Args:
            cmd: Command to send.
            timeout: Deadline in seconds, covering the wait for the
                connection and the round trip. Defaults to
                ``command_timeout``.

        Returns:
            Records of every data line before the status line.

        Raises:
            ProtocolError: If the server reports a nonzero status.
            QueryTimeoutError: If the deadline expires.
            ConnectionClosedError: If the connection is closed or unusable.
            NetworkError: If reading or writing fails.
        """
        self._check_usable()
        deadline = self._command_timeout if timeout is None else timeout
        started = asyncio.Event()

        try:
            return await asyncio.wait_for(self._locked_exec(cmd, started), timeout=deadline)
        except asyncio.TimeoutError as e:
            if started.is_set():
                self._unusable_reason = f"'{cmd.name}' timed out after {deadline}s"
            log.warning(
                "query_timeout",
                command=cmd.name,
                timeout=deadline,
                in_flight=started.is_set(),
            )
            raise QueryTimeoutError(command=cmd.name, timeout=deadline) from e

    async def _locked_exec(self, cmd: Command, started: asyncio.Event) -> RecordSet:
        async with self._lock:
            self._check_usable()
            started.set()
            try:
                records = await self._round_trip(cmd)
            except NetworkError as e:
                self._unusable_reason = f"'{cmd.name}' failed: {e.message}"
                raise

            if cmd.name in SESSION_END_COMMANDS:
                self._unusable_reason = "session ended"
            return records

    async def _round_trip(self, cmd: Command) -> RecordSet:
        await self._transport.write(encode_command(cmd))
        log.debug("query_command_sent", command=cmd.name)

        records: RecordSet = []
        while True:
            try:
                line = await self._transport.read_line()
            except ConnectionClosedError:
                if cmd.name in SESSION_END_COMMANDS:
                    log.info("query_session_ended", command=cmd.name)
                    return records
                raise

            status = parse_status(line)
            if status is None:
                if line:
                    records.extend(decode_line(line))
                continue

            if not status.ok:
                error = status.to_error()
                log.info("query_protocol_error", command=cmd.name, **error.context)
                raise error

            log.debug("query_command_done", command=cmd.name, records=len(records))
            return records
