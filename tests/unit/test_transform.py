"""Unit tests for turning rows into frames."""

from datetime import UTC, datetime

import pytest

from influx_frames.config import ParserSettings
from influx_frames.core.frames import Frame
from influx_frames.core.models import Row
from influx_frames.core.types import NumberLiteral, Query
from influx_frames.transform import (
    parse_timestamp,
    parse_value,
    transform_rows,
)


def n(text):
    return NumberLiteral(text)


class TestParseTimestamp:
    """Timestamps are whole epoch seconds in UTC"""

    @pytest.mark.unit
    def test_integer_seconds(self):
        assert parse_timestamp(n("1527305440")) == datetime(
            2018, 5, 26, 3, 30, 40, tzinfo=UTC
        )

    @pytest.mark.unit
    def test_fraction_is_truncated(self):
        assert parse_timestamp(n("100.9")) == datetime.fromtimestamp(100, tz=UTC)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "2018-05-26T03:30:40Z", True])
    def test_non_number_is_a_type_error(self, value):
        with pytest.raises(TypeError):
            parse_timestamp(value)

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["1e400", "1e300"])
    def test_out_of_range_is_a_value_error(self, text):
        with pytest.raises(ValueError):
            parse_timestamp(n(text))


class TestParseValue:
    """Null-safe numeric coercion"""

    @pytest.mark.unit
    def test_number(self):
        assert parse_value(n("42.5")) == 42.5

    @pytest.mark.unit
    def test_null_is_none_not_zero(self):
        assert parse_value(None) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["42", True, False])
    def test_non_numbers_become_none(self, value):
        assert parse_value(value) is None

    @pytest.mark.unit
    def test_overflow_becomes_none(self):
        assert parse_value(n("1e400")) is None


class TestFlatRows:
    """Rows without a time column become a single string frame"""

    @pytest.mark.unit
    def test_show_tag_values_uses_second_element(self):
        row = Row(
            name="cpu",
            columns=["key", "value"],
            values=[["k1", "v1"], ["k2", "v2"], ["short"]],
        )
        query = Query(ref_id="A", raw_query='SHOW TAG VALUES WITH KEY = "host"')

        (frame,) = transform_rows([row], query)

        assert frame.name == "cpu"
        assert [f.name for f in frame.fields] == ["value"]
        assert frame.field("value").values == ("v1", "v2")
        assert frame.meta is None

    @pytest.mark.unit
    def test_show_tag_values_match_is_case_insensitive(self):
        row = Row(name="m", columns=["key", "value"], values=[["k1", "v1"]])
        query = Query(ref_id="A", raw_query="show tag values with key = host")
        (frame,) = transform_rows([row], query)
        assert frame.field("value").values == ("v1",)

    @pytest.mark.unit
    def test_other_listings_use_first_element(self):
        row = Row(
            name="measurements",
            columns=["name"],
            values=[["cpu"], ["mem"], []],
        )
        query = Query(ref_id="A", raw_query="SHOW MEASUREMENTS")

        (frame,) = transform_rows([row], query)

        assert frame.name == "measurements"
        assert frame.field("value").values == ("cpu", "mem")

    @pytest.mark.unit
    def test_time_column_match_is_case_sensitive(self):
        row = Row(name="m", columns=["Time", "value"], values=[["a", "b"]])
        (frame,) = transform_rows([row], Query(ref_id="A"))
        assert frame.field("value").values == ("a",)


class TestSeriesRows:
    """Rows with a time column become one frame per value column"""

    @pytest.mark.unit
    def test_one_frame_per_non_time_column(self):
        row = Row(
            name="cpu",
            columns=["time", "mean", "max"],
            tags={"host": "a"},
            values=[[n("100"), n("1.5"), n("2")], [n("200"), None, n("3")]],
        )
        query = Query(ref_id="A", raw_query="SELECT mean(v), max(v) FROM cpu")

        frames = transform_rows([row], query)

        assert [f.name for f in frames] == ["cpu.mean { host: a }", "cpu.max { host: a }"]
        mean = frames[0]
        assert [f.name for f in mean.fields] == ["time", "value"]
        assert mean.field("time").values == (
            datetime.fromtimestamp(100, tz=UTC),
            datetime.fromtimestamp(200, tz=UTC),
        )
        assert mean.field("value").values == (1.5, None)
        assert frames[1].field("value").values == (2.0, 3.0)

    @pytest.mark.unit
    def test_value_field_carries_tags_and_display_name(self):
        row = Row(
            name="cpu",
            columns=["time", "value"],
            tags={"host": "server1"},
            values=[[n("1"), n("1")]],
        )
        query = Query(ref_id="A", alias="[[tag_host]]", raw_query="SELECT 1")

        (frame,) = transform_rows([row], query)

        value = frame.field("value")
        assert frame.name == "server1"
        assert dict(value.labels) == {"host": "server1"}
        assert value.config.display_name_from_ds == "server1"
        assert frame.meta.executed_query_string == "SELECT 1"

    @pytest.mark.unit
    def test_bad_timestamps_drop_the_whole_tuple(self):
        row = Row(
            name="cpu",
            columns=["time", "value"],
            values=[
                [n("100"), n("1")],
                ["not-a-time", n("2")],
                [None, n("3")],
                [n("1e400"), n("4")],
                [],
                [n("300"), n("5")],
            ],
        )

        (frame,) = transform_rows([row], Query(ref_id="A"))

        assert frame.rows == 2
        assert frame.field("value").values == (1.0, 5.0)
        assert frame.field("time").values[-1] == datetime.fromtimestamp(300, tz=UTC)

    @pytest.mark.unit
    def test_non_numeric_values_become_gaps(self):
        row = Row(
            name="cpu",
            columns=["time", "value"],
            values=[[n("1"), "up"], [n("2"), True], [n("3"), None], [n("4"), n("7")]],
        )
        (frame,) = transform_rows([row], Query(ref_id="A"))
        assert frame.field("value").values == (None, None, None, 7.0)

    @pytest.mark.unit
    def test_short_tuple_yields_gap(self):
        row = Row(
            name="cpu",
            columns=["time", "a", "b"],
            values=[[n("1"), n("1")]],
        )
        frames = transform_rows([row], Query(ref_id="A"))
        assert frames[0].field("value").values == (1.0,)
        assert frames[1].field("value").values == (None,)

    @pytest.mark.unit
    def test_time_only_row_produces_no_frames(self):
        row = Row(name="cpu", columns=["time"], values=[[n("1")]])
        assert transform_rows([row], Query(ref_id="A")) == []

    @pytest.mark.unit
    def test_rows_are_processed_in_order(self):
        rows = [
            Row(name="a", columns=["time", "v"], values=[[n("1"), n("1")]]),
            Row(name="b", columns=["name"], values=[["x"]]),
        ]
        frames = transform_rows(rows, Query(ref_id="A"))
        assert [f.name for f in frames] == ["a.v", "b"]
        assert all(isinstance(f, Frame) for f in frames)

    @pytest.mark.unit
    def test_custom_time_column(self):
        row = Row(name="cpu", columns=["ts", "v"], values=[[n("1"), n("2")]])
        settings = ParserSettings(time_column="ts")
        (frame,) = transform_rows([row], Query(ref_id="A"), settings)
        assert frame.name == "cpu.v"
        assert frame.field("value").values == (2.0,)
