"""Secure-shell transport.

The ServerQuery session runs inside the interactive shell channel of an
SSH connection. paramiko is blocking, so negotiation runs in a worker
thread and a daemon reader thread pumps channel bytes into the shared
``asyncio.StreamReader``. Reads and writes wait until the shell channel is
established; close() wakes them with ConnectionClosedError.

Authentication, in order of preference:
    1. ``key_file`` (``password`` is used as its passphrase)
    2. ``password``
    3. the "none" method

Usage:
    from ts3query.core.config import ClientConfig, SSHConfig
    from ts3query.transport.ssh import SSHTransport

    config = ClientConfig(port=10022, ssh=SSHConfig(enabled=True, password="secret"))
    transport = await SSHTransport.connect(config)
"""

from __future__ import annotations

import asyncio
import hashlib
import socket
import threading
from typing import Any, Callable, Optional

import paramiko
import structlog

from ts3query.core.exceptions import NetworkError, SSHTransportError
from ts3query.transport.base import MAX_LINE_SIZE, LineTransport

log = structlog.get_logger()


RECV_SIZE = 32 * 1024


def host_key_fingerprints(key: paramiko.PKey) -> set[str]:
    """Return the MD5 and SHA256 hex fingerprints of ``key``."""
    return {
        key.get_fingerprint().hex(),
        hashlib.sha256(key.asbytes()).hexdigest(),
    }


class SSHTransport(LineTransport):
    """ServerQuery over a secure-shell interactive channel."""

    _ssh: Optional[paramiko.Transport] = None
    _channel: Optional[paramiko.Channel] = None
    _pump: Optional[threading.Thread] = None
    _loop: Optional[asyncio.AbstractEventLoop] = None
    _eof_fed: bool = False

    async def _open(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._reader = asyncio.StreamReader(limit=MAX_LINE_SIZE)

        ssh, channel = await asyncio.to_thread(self._open_channel)
        if self._closed:
            # close() ran while we were negotiating
            await asyncio.to_thread(ssh.close)
            return

        self._ssh, self._channel = ssh, channel
        self._pump = threading.Thread(
            target=self._pump_loop,
            name=f"ts3query-ssh-{self.address}",
            daemon=True,
        )
        self._pump.start()
        self._ready.set()
        log.info("ssh_channel_ready", address=self.address)

    def _open_channel(self) -> tuple[paramiko.Transport, paramiko.Channel]:
        config = self._config
        try:
            sock = socket.create_connection(
                (config.host, config.port),
                timeout=config.connect_timeout,
            )
        except OSError as e:
            raise NetworkError(
                f"Failed to connect to {config.address}: {e}",
                address=config.address,
            ) from e

        ssh = paramiko.Transport(sock)
        ssh.banner_timeout = config.connect_timeout
        ssh.auth_timeout = config.connect_timeout
        try:
            ssh.start_client(timeout=config.connect_timeout)
            self._verify_host_key(ssh)
            self._authenticate(ssh)
            channel = ssh.open_session(timeout=config.connect_timeout)
            channel.invoke_shell()
        except SSHTransportError:
            ssh.close()
            raise
        except (paramiko.SSHException, EOFError, OSError) as e:
            ssh.close()
            raise SSHTransportError(
                f"SSH session with {config.address} failed: {e}",
                address=config.address,
            ) from e

        return ssh, channel

    def _verify_host_key(self, ssh: paramiko.Transport) -> None:
        expected = self._config.ssh.host_key_fingerprint
        if not expected:
            return
        key = ssh.get_remote_server_key()
        if expected not in host_key_fingerprints(key):
            raise SSHTransportError(
                f"Host key mismatch for {self.address}",
                address=self.address,
            )

    def _authenticate(self, ssh: paramiko.Transport) -> None:
        ssh_config = self._config.ssh
        password = ssh_config.password.get_secret_value() if ssh_config.password else None

        if ssh_config.key_file:
            passphrase = password.encode("utf-8") if password is not None else None
            try:
                # Positional: the keyword is "passphrase" before paramiko 5, "password" after
                key = paramiko.PKey.from_path(ssh_config.key_file, passphrase)
            except (OSError, ValueError, TypeError, paramiko.SSHException) as e:
                raise SSHTransportError(
                    f"Cannot load SSH key {ssh_config.key_file}: {e}",
                    address=self.address,
                ) from e
            ssh.auth_publickey(ssh_config.username, key)
            method = "publickey"
        elif password is not None:
            ssh.auth_password(ssh_config.username, password)
            method = "password"
        else:
            ssh.auth_none(ssh_config.username)
            method = "none"

        if not ssh.is_authenticated():
            raise SSHTransportError(
                f"SSH authentication ({method}) for {ssh_config.username} incomplete",
                address=self.address,
            )
        log.debug("ssh_authenticated", address=self.address, method=method)

    def _pump_loop(self) -> None:
        channel = self._channel
        assert channel is not None
        try:
            while True:
                data = channel.recv(RECV_SIZE)
                if not data:
                    break
                self._call_in_loop(self._feed_data, data)
        except (OSError, EOFError, paramiko.SSHException) as e:
            if not self._closed:
                log.warning("ssh_read_failed", address=self.address, error=str(e))
        finally:
            self._call_in_loop(self._feed_eof)

    def _call_in_loop(self, callback: Callable[..., Any], *args: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # Loop closed between the check and the call
            log.debug("ssh_pump_loop_closed", address=self.address)

    def _feed_data(self, data: bytes) -> None:
        if not self._eof_fed and self._reader is not None:
            self._reader.feed_data(data)

    def _feed_eof(self) -> None:
        if not self._eof_fed and self._reader is not None:
            self._eof_fed = True
            self._reader.feed_eof()

    async def _write(self, data: bytes) -> None:
        channel = self._channel
        assert channel is not None
        try:
            await asyncio.to_thread(channel.sendall, data)
        except paramiko.SSHException as e:
            raise NetworkError(f"SSH write failed: {e}", address=self.address) from e

    async def _close_stream(self) -> None:
        self._feed_eof()
        channel, ssh = self._channel, self._ssh
        if channel is not None:
            channel.close()
        if ssh is not None:
            await asyncio.to_thread(ssh.close)
