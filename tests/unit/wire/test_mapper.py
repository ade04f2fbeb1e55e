"""Unit tests for ts3query.wire.mapper."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from pydantic import Field

from ts3query.core.exceptions import MappingError
from ts3query.wire.decoder import decode_line
from ts3query.wire.mapper import (
    EPOCH,
    Bool01,
    Float,
    Int,
    IntList,
    Milliseconds,
    Seconds,
    Str,
    Timestamp,
    WireModel,
    first_record,
    load_record,
    load_records,
)


class Sample(WireModel):
    id: Int = Field(0, alias="cid")
    name: Str = Field("", alias="channel_name")
    ratio: Float = Field(0.0, alias="ratio")
    permanent: Bool01 = Field(False, alias="channel_flag_permanent")
    created: Timestamp = Field(EPOCH, alias="created")
    uptime: Seconds = Field(timedelta(0), alias="uptime")
    idle: Milliseconds = Field(timedelta(0), alias="idle")
    groups: IntList = Field(default_factory=list, alias="groups")
    talk_power: Optional[Int] = Field(None, alias="talk_power")
    country: Optional[Str] = Field(None, alias="country")


class TestLoadRecord:
    """Tests for load_record()."""

    def test_all_kinds(self) -> None:
        (record,) = decode_line(
            r"cid=7 channel_name=Lobby\s1 ratio=-18.0000 channel_flag_permanent=1 "
            r"created=1259147468 uptime=90 idle=1500 groups=6,8 talk_power=75 country=BE"
        )
        sample = load_record(Sample, record)

        assert sample.id == 7
        assert sample.name == "Lobby 1"
        assert sample.ratio == -18.0
        assert sample.permanent is True
        assert sample.created == datetime.fromtimestamp(1259147468, tz=timezone.utc)
        assert sample.uptime == timedelta(seconds=90)
        assert sample.idle == timedelta(milliseconds=1500)
        assert sample.groups == [6, 8]
        assert sample.talk_power == 75
        assert sample.country == "BE"

    def test_absent_fields_keep_defaults(self) -> None:
        sample = load_record(Sample, {})
        assert sample.id == 0
        assert sample.name == ""
        assert sample.created == EPOCH
        assert sample.groups == []
        assert sample.talk_power is None

    def test_absent_optional_differs_from_zero(self) -> None:
        assert load_record(Sample, {}).talk_power is None
        assert load_record(Sample, {"talk_power": "0"}).talk_power == 0

    def test_flag_field_maps_as_empty(self) -> None:
        sample = load_record(Sample, {"channel_name": None, "country": None, "cid": None})
        assert sample.name == ""
        assert sample.country == ""
        assert sample.id == 0

    def test_unknown_keys_ignored(self) -> None:
        sample = load_record(Sample, {"cid": "1", "something_new": "x"})
        assert sample.id == 1

    def test_uint64_max(self) -> None:
        sample = load_record(Sample, {"cid": "18446744073709551615"})
        assert sample.id == 18446744073709551615

    def test_populate_by_name(self) -> None:
        """Expected values can be written with field names."""
        assert Sample(id=3, name="x").id == 3

    def test_field_names_are_not_wire_keys(self) -> None:
        sample = load_record(Sample, {"id": "3", "name": "x", "channel_name": "Lobby"})
        assert sample.id == 0
        assert sample.name == "Lobby"

    def test_negative_int(self) -> None:
        assert load_record(Sample, {"cid": "-1"}).id == -1


class TestMappingErrors:
    """Tests for malformed field values."""

    @pytest.mark.parametrize(
        "record, key",
        [
            ({"cid": "abc"}, "cid"),
            ({"ratio": "fast"}, "ratio"),
            ({"channel_flag_permanent": "2"}, "channel_flag_permanent"),
            ({"channel_flag_permanent": ""}, "channel_flag_permanent"),
            ({"groups": "6,x"}, "groups"),
            ({"cid": "1_000"}, "cid"),
            ({"cid": "+5"}, "cid"),
            ({"groups": "6,+8"}, "groups"),
            ({"created": "18446744073709551615"}, "created"),
            ({"uptime": "18446744073709551615"}, "uptime"),
            ({"idle": "18446744073709551615"}, "idle"),
        ],
    )
    def test_bad_value_raises_mapping_error(self, record: dict, key: str) -> None:
        with pytest.raises(MappingError) as exc_info:
            load_record(Sample, record)
        assert exc_info.value.model == "Sample"
        assert key in exc_info.value.keys

    def test_db_client_sentinel_timestamp(self) -> None:
        from ts3query.client.models import DBClient

        with pytest.raises(MappingError) as exc_info:
            load_record(DBClient, {"cldbid": "7", "client_lastconnected": "18446744073709551615"})
        assert exc_info.value.keys == ["client_lastconnected"]

    def test_mapping_error_is_not_protocol_error(self) -> None:
        from ts3query.core.exceptions import ProtocolError

        with pytest.raises(MappingError) as exc_info:
            load_record(Sample, {"cid": "x"})
        assert not isinstance(exc_info.value, ProtocolError)


class TestHelpers:
    """Tests for load_records() and first_record()."""

    def test_load_records(self) -> None:
        samples = load_records(Sample, decode_line("cid=1|cid=2"))
        assert [s.id for s in samples] == [1, 2]

    def test_first_record(self) -> None:
        assert first_record([]) == {}
        assert first_record([{"a": "1"}, {"b": "2"}]) == {"a": "1"}
