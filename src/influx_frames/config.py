"""Parser settings using Pydantic.

Settings validate and coerce values from the environment (``INFLUX_FRAMES_``
prefix) and from programmatic overrides. They are resolved once per parser
and never mutated afterwards.
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Pydantic settings schema for `ResponseParser`."""

    model_config = SettingsConfigDict(
        env_prefix="INFLUX_FRAMES_",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
        frozen=True,
    )

    error_ref_id: str = Field(
        default="A",
        description="Response key used for errors that cannot be tied to a query",
        min_length=1,
    )

    tag_values_marker: str = Field(
        default="SHOW TAG VALUES",
        description="Case-insensitive query text that selects the tag value column",
        min_length=1,
    )

    time_column: str = Field(
        default="time",
        description="Column label that marks a row as a time series",
        min_length=1,
    )

    log_anomalies: bool = Field(
        default=False,
        description="Log dropped tuples and null coercions at DEBUG level",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return self.model_dump()


def resolve_settings(**overrides: Any) -> ParserSettings:
    """Resolve settings from the environment, then apply `overrides`.

    Raises:
        pydantic.ValidationError: If any value is invalid.
    """
    return ParserSettings(**overrides)
