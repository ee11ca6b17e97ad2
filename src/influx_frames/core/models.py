"""Pydantic models for the raw result document returned by the engine.

These models validate the shape of the decoded JSON; they do not interpret
it. Values inside `Row.values` are kept exactly as decoded (`None`, `str`,
`bool` or `NumberLiteral`) so the transformer can decide how to coerce them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _RawModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",  # statement_id, partial, messages, ...
        frozen=True,
        arbitrary_types_allowed=True,
    )


class Row(_RawModel):
    """One named series: column labels, series tags and value tuples."""

    name: str = ""
    columns: list[str] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)
    values: list[list[Any]] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("values", mode="before")
    @classmethod
    def _null_values(cls, v: Any) -> Any:
        return [] if v is None else v

    # A null label or tag value reads as an empty string.
    @field_validator("columns", mode="before")
    @classmethod
    def _null_columns(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return ["" if c is None else c for c in v]
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: "" if t is None else t for k, t in v.items()}
        return v


class RawResult(_RawModel):
    """Result of one submitted query, in submission order."""

    error: str | None = None
    series: list[Row] = Field(default_factory=list)

    @field_validator("series", mode="before")
    @classmethod
    def _null_series(cls, v: Any) -> Any:
        return [] if v is None else v


class RawResponse(_RawModel):
    """Top-level response document."""

    error: str | None = None
    results: list[RawResult] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, v: Any) -> Any:
        return [] if v is None else v
