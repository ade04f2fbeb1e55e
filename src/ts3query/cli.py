"""ts3query CLI Entry Point.

Runs single ServerQuery commands from the shell. Connection settings come
from the YAML config (``--config``) and ``TS3QUERY_*`` environment
variables.

Usage:
    ts3query -c ~/.ts3query/config.yaml version
    ts3query exec --login serveradmin --password secret --use 1 channellist
    ts3query exec clientlist -uid -away
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog
import typer

from ts3query.client import Client
from ts3query.core.config import get_settings
from ts3query.core.exceptions import CommandError, ConfigurationError, TS3QueryError
from ts3query.wire.command import Command, Option
from ts3query.wire.decoder import RecordSet


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # sys.stderr is looked up each time a logger is created
    return structlog.PrintLogger(file=sys.stderr)


# Log to stderr until the config is loaded; stdout carries command output
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=_stderr_logger,
)
log = structlog.get_logger()

T = TypeVar("T")

app = typer.Typer(
    name="ts3query",
    help="TeamSpeak 3 ServerQuery client",
    no_args_is_help=True,
)


def configure_logging() -> None:
    """Reconfigure logging based on loaded settings."""
    cfg = get_settings().logging
    if cfg.format == "console":
        renderer: Any = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(cfg.level)
        ),
        logger_factory=_stderr_logger,
    )


def load_config_callback(config: Optional[Path]) -> Optional[Path]:
    """Load configuration file if provided."""
    if config and not config.exists():
        typer.echo(f"Error: Config file '{config}' not found", err=True)
        raise typer.Exit(code=1)

    try:
        get_settings(force_reload=True, config_path=config)
    except ConfigurationError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)

    configure_logging()
    if config:
        log.debug("config_loaded", path=str(config))
    return config


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        callback=load_config_callback,
        is_eager=True,
        help="Path to configuration file",
    ),
) -> None:
    """ts3query CLI."""
    pass


def parse_command(tokens: list[str]) -> Command:
    """Build a Command from shell tokens.

    The first token is the command name. ``key=value`` tokens become
    options; any other token (``-uid``, a bare value) is sent as-is in
    positional form.

    Raises:
        CommandError: If the tokens do not form a valid command.
    """
    if not tokens:
        raise CommandError("Missing command name")

    name, *rest = tokens
    args: list[str] = []
    options: list[Option] = []
    for token in rest:
        key, sep, value = token.partition("=")
        if sep and key:
            options.append((key, value))
        else:
            args.append(token)
    return Command(name=name, args=tuple(args), options=tuple(options))


def _run(action: Callable[[Client], Awaitable[T]], login: Optional[str] = None,
         password: Optional[str] = None, use: Optional[int] = None) -> T:
    """Connect, optionally log in and select a server, then run ``action``.

    Raises:
        typer.Exit: With code 1 on any ServerQuery failure.
    """
    async def _session() -> T:
        async with await Client.connect(get_settings().client) as client:
            if login is not None:
                await client.login(login, password or "")
            if use is not None:
                await client.use(use)
            return await action(client)

    try:
        return asyncio.run(_session())
    except TS3QueryError as e:
        log.debug("cli_command_failed", error=repr(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _print_records(records: RecordSet) -> None:
    for record in records:
        typer.echo(json.dumps(record))


@app.command("exec", context_settings={"ignore_unknown_options": True})
def exec_command(
    command: list[str] = typer.Argument(..., help="Command name followed by its arguments"),
    login: Optional[str] = typer.Option(None, "--login", help="Query login name"),
    password: Optional[str] = typer.Option(
        None, "--password", help="Query login password",
        envvar="TS3QUERY_PASSWORD",
    ),
    use: Optional[int] = typer.Option(None, "--use", help="Virtual server id to select"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Command deadline in seconds"),
) -> None:
    """Run one ServerQuery command and print each record as JSON."""
    try:
        cmd = parse_command(command)
    except CommandError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    async def action(client: Client) -> RecordSet:
        return await client.exec(cmd, timeout=timeout)

    _print_records(_run(action, login=login, password=password, use=use))


@app.command("version")
def version_command() -> None:
    """Print the server version."""
    async def action(client: Client) -> Any:
        return await client.version()

    info = _run(action)
    typer.echo(f"{info.version} (build {info.build}) on {info.platform}")


if __name__ == "__main__":
    app()
