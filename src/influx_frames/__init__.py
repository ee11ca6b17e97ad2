"""Turn InfluxQL query responses into typed, named frames."""

import importlib.metadata
import logging

from influx_frames.config import ParserSettings, resolve_settings
from influx_frames.core.frames import (
    DataResponse,
    Field,
    FieldConfig,
    Frame,
    FrameMeta,
    QueryDataResponse,
)
from influx_frames.core.models import RawResponse, RawResult, Row
from influx_frames.core.types import Failure, NumberLiteral, Query, Result, Success
from influx_frames.decoder import decode_response
from influx_frames.exceptions import (
    DecodeError,
    EngineError,
    InfluxFramesError,
    QueryError,
)
from influx_frames.naming import AliasRule, format_frame_name
from influx_frames.parser import ResponseParser, parse
from influx_frames.telemetry import (
    FrameAnomalies,
    InMemoryReporter,
    ParseTelemetry,
    TelemetryReporter,
)
from influx_frames.transform import parse_timestamp, parse_value, transform_rows

try:
    __version__ = importlib.metadata.version("influx-frames")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "ResponseParser",
    "parse",
    "decode_response",
    "transform_rows",
    "format_frame_name",
    "parse_timestamp",
    "parse_value",
    # Configuration
    "ParserSettings",
    "resolve_settings",
    # Telemetry (extension points)
    "ParseTelemetry",
    "FrameAnomalies",
    "InMemoryReporter",
    "TelemetryReporter",
    # Input types
    "Query",
    "RawResponse",
    "RawResult",
    "Row",
    "NumberLiteral",
    "AliasRule",
    # Output types
    "Field",
    "FieldConfig",
    "Frame",
    "FrameMeta",
    "DataResponse",
    "QueryDataResponse",
    "Result",
    "Success",
    "Failure",
    # Exceptions
    "InfluxFramesError",
    "DecodeError",
    "EngineError",
    "QueryError",
]
