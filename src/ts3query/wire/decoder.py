"""Response decoding for ServerQuery.

A data line holds one or more records separated by ``|``; a record holds
fields separated by spaces; a field is ``key=value`` or a bare ``key``.
Splitting is escape aware, so separators that were escaped by the server
never split a value. Decoding never fails: whatever cannot be understood
is simply absent from the result, the server being the validation
authority.

Every response ends with a status line::

    error id=0 msg=ok
    error id=256 msg=command\\snot\\sfound

Usage:
    from ts3query.wire.decoder import decode_line, parse_status

    records = decode_line("cid=1 channel_name=Lobby|cid=2 channel_name=AFK")
    status = parse_status("error id=0 msg=ok")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ts3query.core.exceptions import ProtocolError
from ts3query.wire.escape import ESCAPE_CHAR, unescape


# A missing value (None) marks a flag field: present, but without "=value"
Record = dict[str, Optional[str]]
RecordSet = list[Record]

RECORD_SEPARATOR = "|"
FIELD_SEPARATOR = " "
KEY_VALUE_SEPARATOR = "="

STATUS_PREFIX = "error"


def split_unescaped(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep`` occurrences that are not part of an escape pair."""
    parts: list[str] = []
    start = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == ESCAPE_CHAR:
            i += 2
            continue
        if ch == sep:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return parts


def find_unescaped(text: str, ch: str) -> int:
    """Return the index of the first unescaped ``ch`` in ``text``, or -1."""
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == ESCAPE_CHAR:
            i += 2
            continue
        if c == ch:
            return i
        i += 1
    return -1


def decode_record(segment: str) -> Record:
    """Decode one pipe-free record segment into an ordered mapping."""
    record: Record = {}
    for token in split_unescaped(segment, FIELD_SEPARATOR):
        if not token:
            continue
        pos = find_unescaped(token, KEY_VALUE_SEPARATOR)
        if pos < 0:
            record[unescape(token)] = None
        else:
            record[unescape(token[:pos])] = unescape(token[pos + 1:])
    return record


def decode_line(line: str) -> RecordSet:
    """Decode a raw data line into its records.

    An empty line decodes to a single empty record.
    """
    return [decode_record(segment) for segment in split_unescaped(line, RECORD_SEPARATOR)]


@dataclass(frozen=True)
class StatusLine:
    """The terminating line of a response.

    Attributes:
        id: Status id, 0 on success.
        msg: Unescaped status message.
        extra: Any further fields the server appended (``extra_msg``,
            ``failed_permid``, ...).
    """

    id: int
    msg: str
    extra: Record = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the status reports success."""
        return self.id == 0

    def to_error(self) -> ProtocolError:
        """Build the ProtocolError this status describes."""
        failed_permid: Optional[int] = None
        raw_permid = self.extra.get("failed_permid")
        if raw_permid:
            try:
                failed_permid = int(raw_permid)
            except ValueError:
                failed_permid = None
        return ProtocolError(
            id=self.id,
            msg=self.msg,
            extra_msg=self.extra.get("extra_msg") or None,
            failed_permid=failed_permid,
        )


def is_status_line(line: str) -> bool:
    """Whether ``line`` is a response terminator (starts with the ``error`` token)."""
    return line == STATUS_PREFIX or line.startswith(STATUS_PREFIX + FIELD_SEPARATOR)


def parse_status(line: str) -> Optional[StatusLine]:
    """Parse a status line.

    Returns:
        StatusLine, or None when ``line`` is not a status line. A status
        line with a missing or non-numeric id is reported with id -1 so it
        is never mistaken for success.
    """
    if not is_status_line(line):
        return None

    record = decode_record(line[len(STATUS_PREFIX):])
    raw_id = record.pop("id", None)
    msg = record.pop("msg", None) or ""
    try:
        status_id = int(raw_id) if raw_id is not None else -1
    except ValueError:
        status_id = -1
    return StatusLine(id=status_id, msg=msg, extra=record)
