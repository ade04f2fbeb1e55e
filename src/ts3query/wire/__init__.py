"""Wire format for the ServerQuery protocol.

Modules:
    escape: Reserved-character escape codec.
    command: Command values and their serialized line form.
    decoder: Record and status-line decoding.
    mapper: Declarative mapping of records onto typed shapes.
"""

from ts3query.wire.escape import escape, unescape
from ts3query.wire.command import Command, LINE_TERMINATOR, encode_command
from ts3query.wire.decoder import (
    Record,
    RecordSet,
    StatusLine,
    decode_line,
    decode_record,
    is_status_line,
    parse_status,
)
from ts3query.wire.mapper import (
    WireModel,
    Int,
    Float,
    Bool01,
    Str,
    Timestamp,
    Seconds,
    Milliseconds,
    IntList,
    load_record,
    load_records,
)

__all__ = [
    "escape",
    "unescape",
    "Command",
    "LINE_TERMINATOR",
    "encode_command",
    "Record",
    "RecordSet",
    "StatusLine",
    "decode_line",
    "decode_record",
    "is_status_line",
    "parse_status",
    "WireModel",
    "Int",
    "Float",
    "Bool01",
    "Str",
    "Timestamp",
    "Seconds",
    "Milliseconds",
    "IntList",
    "load_record",
    "load_records",
]
