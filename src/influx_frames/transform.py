"""Turn decoded series rows into frames.

A row with a ``time`` column is a time series and yields one frame per other
column. Any other row is a flat listing (for example the output of
``SHOW TAG VALUES``) and yields a single frame of strings.

Bad per-tuple data never fails the query: a tuple whose timestamp cannot be
parsed is dropped from that frame, and a value that is not a usable number
becomes ``None``. String and boolean series therefore show up as gaps.
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from typing import TYPE_CHECKING

from influx_frames.config import ParserSettings
from influx_frames.core.frames import Field, FieldConfig, Frame, FrameMeta
from influx_frames.core.types import NumberLiteral
from influx_frames.naming import format_frame_name
from influx_frames.telemetry import FrameAnomalies, ParseTelemetry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from influx_frames.core.models import Row
    from influx_frames.core.types import Query, Value
    from influx_frames.telemetry import ParseRecorder

log = logging.getLogger(__name__)

TIME_FIELD = "time"
VALUE_FIELD = "value"


def parse_timestamp(value: Value) -> datetime:
    """Interpret `value` as whole seconds since the Unix epoch, in UTC.

    The number is converted to a float and truncated toward zero.

    Raises:
        TypeError: If `value` is not a number.
        ValueError: If the number cannot be converted or is out of range.
    """
    if not isinstance(value, NumberLiteral):
        raise TypeError(f"timestamp-value has invalid type: {value!r}")
    seconds = int(value.to_float())
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError) as e:
        raise ValueError(f"timestamp {value} is out of range") from e


def parse_value(value: Value) -> float | None:
    """Coerce a decoded value to a float, or None when it is not usable.

    JSON nulls (for example from ``fill(null)``) stay None rather than
    becoming zero. Only numbers are supported; strings and booleans map to
    None as well.
    """
    if not isinstance(value, NumberLiteral):
        return None
    try:
        return value.to_float()
    except ValueError:
        return None


def has_time_column(row: Row, time_column: str = TIME_FIELD) -> bool:
    return time_column in row.columns


def _flat_frame(row: Row, query: Query, settings: ParserSettings) -> Frame:
    show_tag_values = settings.tag_values_marker.lower() in query.raw_query.lower()
    values: list[str] = []
    for value_tuple in row.values:
        if show_tag_values:
            if len(value_tuple) >= 2:
                values.append(value_tuple[1])
        elif len(value_tuple) >= 1:
            values.append(value_tuple[0])
    return Frame(name=row.name, fields=(Field(VALUE_FIELD, values),))


def _series_frames(
    row: Row,
    query: Query,
    settings: ParserSettings,
    telemetry: ParseRecorder,
) -> list[Frame]:
    frames: list[Frame] = []
    for column_index, column in enumerate(row.columns):
        if column == settings.time_column:
            continue

        times: list[datetime] = []
        values: list[float | None] = []
        dropped = 0
        for value_tuple in row.values:
            try:
                timestamp = parse_timestamp(value_tuple[0])
            except (IndexError, TypeError, ValueError):
                dropped += 1
                continue
            raw = value_tuple[column_index] if column_index < len(value_tuple) else None
            times.append(timestamp)
            values.append(parse_value(raw))

        anomalies = FrameAnomalies(
            series=row.name,
            column=column,
            dropped_tuples=dropped,
            null_values=values.count(None),
        )
        telemetry.record_frame(anomalies)
        if settings.log_anomalies and anomalies:
            log.debug(
                "Series %r column %r: dropped %d tuple(s), %d null value(s)",
                row.name,
                column,
                anomalies.dropped_tuples,
                anomalies.null_values,
            )

        name = format_frame_name(row, column, query)
        frames.append(
            new_data_frame(
                name,
                query.raw_query,
                Field(TIME_FIELD, times),
                Field(
                    VALUE_FIELD,
                    values,
                    labels=row.tags,
                    config=FieldConfig(display_name_from_ds=name),
                ),
            )
        )
    return frames


def new_data_frame(
    name: str, query_string: str, time_field: Field, value_field: Field
) -> Frame:
    """Build a time-series frame that records the executed query text."""
    return Frame(
        name=name,
        fields=(time_field, value_field),
        meta=FrameMeta(executed_query_string=query_string),
    )


def transform_rows(
    rows: Sequence[Row],
    query: Query,
    settings: ParserSettings | None = None,
    telemetry: ParseRecorder | None = None,
) -> list[Frame]:
    """Build the frames for every row of one query result, in row order.

    Args:
        rows: Series rows of a single result.
        query: The query that produced `rows`.
        settings: Parser settings; resolved from the environment if omitted.
        telemetry: Optional recorder for per-frame anomaly counts.

    Returns:
        Frames in row order; time-series rows contribute one frame per
        non-time column, in column order.
    """
    settings = settings if settings is not None else ParserSettings()
    telemetry = telemetry if telemetry is not None else ParseTelemetry()

    frames: list[Frame] = []
    for row in rows:
        if has_time_column(row, settings.time_column):
            frames.extend(_series_frames(row, query, settings, telemetry))
        else:
            frames.append(_flat_frame(row, query, settings))
    return frames
