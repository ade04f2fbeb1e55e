"""ServerQuery command values and their wire form.

A command line is ``name [arg]* [key[=value]]*``: positional arguments and
option values are escaped, option keys are sent as-is, and an option whose
value is ``None`` is sent as a bare flag (``-uid``, ``-away``, ...).

Usage:
    from ts3query.wire.command import Command, encode_command

    cmd = Command("serveredit", options=[("virtualserver_name", "My Server")])
    encode_command(cmd)  # b'serveredit virtualserver_name=My\\sServer\\n\\r'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence, Union

from ts3query.core.exceptions import CommandError
from ts3query.wire.escape import RESERVED_CHARS, escape


# Line terminator for everything sent and received on the wire
LINE_TERMINATOR = "\n\r"

OptionValue = Optional[Union[str, int, float, bool]]
Option = tuple[str, OptionValue]


def format_value(value: OptionValue) -> Optional[str]:
    """Render an option value as unescaped text.

    Booleans use the protocol's 0/1 convention.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _check_key(key: str) -> None:
    if not key:
        raise CommandError("Option key must not be empty")
    if "=" in key or any(ch in RESERVED_CHARS for ch in key):
        raise CommandError(f"Option key {key!r} contains reserved characters")


@dataclass(frozen=True)
class Command:
    """A single ServerQuery command.

    Attributes:
        name: Command name, e.g. ``serverlist``.
        args: Positional arguments, each non-empty.
        options: Ordered ``(key, value)`` pairs; ``None`` marks a flag.
    """

    name: str
    args: tuple[str, ...] = ()
    options: tuple[Option, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate command fields after initialization."""
        name = self.name.strip() if self.name else ""
        if not name:
            raise CommandError("Command name must not be empty")
        if any(ch in RESERVED_CHARS for ch in name):
            raise CommandError(f"Command name {self.name!r} contains reserved characters")
        object.__setattr__(self, "name", name)

        args = tuple(str(a) for a in self.args)
        for arg in args:
            if not arg:
                raise CommandError(f"Command '{name}' has an empty positional argument")
        object.__setattr__(self, "args", args)

        options = tuple((key, value) for key, value in self.options)
        for key, _ in options:
            _check_key(key)
        object.__setattr__(self, "options", options)

    @classmethod
    def build(
        cls,
        name: str,
        /,
        *args: str,
        flags: Iterable[str] = (),
        extra_options: Iterable[Option] = (),
        **options: OptionValue,
    ) -> "Command":
        """Build a command from call-style arguments.

        Example:
            Command.build("servergroupadd", name="Admins", type=1)
            Command.build("serveredit", extra_options=[("flags", 1)])

        Args:
            name: Command name.
            *args: Positional arguments.
            flags: Bare flag tokens appended after the options.
            extra_options: ``(key, value)`` pairs appended after the keyword
                options, for keys such as ``flags`` that are taken here.
            **options: Keyed options, in call order.

        Returns:
            Command instance.
        """
        opts: list[Option] = list(options.items())
        opts.extend(extra_options)
        opts.extend((flag, None) for flag in flags)
        return cls(name=name, args=tuple(args), options=tuple(opts))

    def with_options(self, options: Union[Mapping[str, OptionValue], Sequence[Option]]) -> "Command":
        """Return a copy with extra options appended."""
        items = options.items() if isinstance(options, Mapping) else options
        return Command(
            name=self.name,
            args=self.args,
            options=self.options + tuple(items),
        )

    def to_line(self) -> str:
        """Serialize to one command line without terminator."""
        parts = [self.name]
        parts.extend(escape(arg) for arg in self.args)
        for key, value in self.options:
            text = format_value(value)
            parts.append(key if text is None else f"{key}={escape(text)}")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_line()


def encode_command(cmd: Command) -> bytes:
    """Encode a command to wire format (UTF-8, line terminated)."""
    return (cmd.to_line() + LINE_TERMINATOR).encode("utf-8")
