"""Declarative mapping of decoded records onto typed result shapes.

Result shapes are Pydantic models whose fields carry the wire key as their
alias and one of the kinds below as their type. A single generic routine,
:func:`load_record`, converts a record into such a model:

- keys the model does not declare are ignored,
- a declared key the server omitted keeps the field's zero default, or
  ``None`` when the field is ``Optional``,
- a flag field (key without ``=value``) maps as the empty string,
- text that does not parse as the declared kind raises MappingError.

Usage:
    from pydantic import Field
    from ts3query.wire.mapper import Bool01, Int, Str, WireModel, load_records

    class Channel(WireModel):
        id: Int = Field(0, alias="cid")
        name: Str = Field("", alias="channel_name")
        permanent: Bool01 = Field(False, alias="channel_flag_permanent")

    channels = load_records(Channel, records)
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Annotated, Any, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, PlainValidator, ValidationError

from ts3query.core.exceptions import MappingError
from ts3query.wire.decoder import Record


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

LIST_SEPARATOR = ","

# Plain decimal digits only: no sign other than "-", no underscores
_INT_RE = re.compile(r"-?[0-9]+")


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected text, got {type(value).__name__}")
    return value.strip()


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("expected integer, got bool")
    if isinstance(value, int):
        return value
    text = _text(value)
    if not text:
        return 0
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"expected integer, got {text!r}")
    return int(text)


def _parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("expected number, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    text = _text(value)
    return float(text) if text else 0.0


def _parse_bool01(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in ("0", 0):
        return False
    if value in ("1", 1):
        return True
    raise ValueError(f"expected 0 or 1, got {value!r}")


def _parse_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"expected text, got {type(value).__name__}")


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    seconds = _parse_int(value)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"timestamp {seconds} out of range") from e


def _duration(amount: int, unit: str) -> timedelta:
    try:
        return timedelta(**{unit: amount})
    except OverflowError as e:
        raise ValueError(f"duration of {amount} {unit} out of range") from e


def _parse_seconds(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return _duration(_parse_int(value), "seconds")


def _parse_milliseconds(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return _duration(_parse_int(value), "milliseconds")


def _parse_int_list(value: Any) -> list[int]:
    if isinstance(value, (list, tuple)):
        return [_parse_int(v) for v in value]
    text = _text(value)
    if not text:
        return []
    return [_parse_int(part) for part in text.split(LIST_SEPARATOR) if part.strip()]


Int = Annotated[int, PlainValidator(_parse_int)]
Float = Annotated[float, PlainValidator(_parse_float)]
Bool01 = Annotated[bool, PlainValidator(_parse_bool01)]
Str = Annotated[str, PlainValidator(_parse_str)]
Timestamp = Annotated[datetime, PlainValidator(_parse_timestamp)]
Seconds = Annotated[timedelta, PlainValidator(_parse_seconds)]
Milliseconds = Annotated[timedelta, PlainValidator(_parse_milliseconds)]
IntList = Annotated[list[int], PlainValidator(_parse_int_list)]


class WireModel(BaseModel):
    """Base class for result shapes decoded from ServerQuery records.

    load_record() populates fields from their wire alias only. Fields can
    also be set by name when building values in code.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


M = TypeVar("M", bound=WireModel)


@lru_cache(maxsize=None)
def wire_keys(model: type[WireModel]) -> frozenset[str]:
    """Return the wire keys ``model`` reads."""
    return frozenset(field.alias or name for name, field in model.model_fields.items())


def load_record(model: type[M], record: Record) -> M:
    """Convert one record into ``model``.

    Args:
        model: Destination shape.
        record: Decoded record (wire key -> unescaped value or None).

    Returns:
        Populated model instance.

    Raises:
        MappingError: If a present field cannot be parsed as its kind.
    """
    keys = wire_keys(model)
    data = {
        key: "" if value is None else value
        for key, value in record.items()
        if key in keys
    }
    try:
        return model.model_validate(data)
    except ValidationError as e:
        keys = [str(err["loc"][0]) for err in e.errors() if err.get("loc")]
        raise MappingError(
            model=model.__name__,
            keys=keys,
            message=f"Cannot decode {model.__name__}: {e}",
        ) from e


def load_records(model: type[M], records: Iterable[Record]) -> list[M]:
    """Convert every record in ``records`` into ``model``."""
    return [load_record(model, record) for record in records]


def first_record(records: list[Record]) -> Record:
    """Return the first record of a response, or an empty one."""
    return records[0] if records else {}
