"""Typed tabular output: fields, frames and per-query responses.

A `Frame` is a named group of equal-length `Field`s. Flat listings produce a
single string field; time series produce a `time` field and a nullable
numeric `value` field.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from types import MappingProxyType
import typing

from influx_frames.core.types import _require


def _freeze_mapping(
    m: dict[str, str] | typing.Mapping[str, str] | None,
) -> typing.Mapping[str, str] | None:
    """Return an immutable mapping view or None."""
    if m is None or isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


def _jsonable(value: typing.Any) -> typing.Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class FieldConfig:
    """Display configuration attached to a field."""

    display_name_from_ds: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class FrameMeta:
    """Frame-level metadata."""

    executed_query_string: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class Field:
    """A named column of values with optional labels and display config."""

    name: str
    values: tuple[typing.Any, ...] = ()
    labels: typing.Mapping[str, str] | None = None
    config: FieldConfig | None = None

    def __post_init__(self) -> None:
        """Normalize values to a tuple and freeze labels."""
        _require(
            condition=isinstance(self.name, str),
            message="must be str",
            field_name="name",
            exc=TypeError,
        )
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "labels", _freeze_mapping(self.labels))

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, typing.Any]:
        data: dict[str, typing.Any] = {
            "name": self.name,
            "values": [_jsonable(v) for v in self.values],
        }
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.config is not None:
            data["config"] = dataclasses.asdict(self.config)
        return data


@dataclasses.dataclass(frozen=True, slots=True)
class Frame:
    """A named set of equal-length fields.

    Attributes:
        name: Frame name (series name or resolved display name).
        fields: Columns of the frame, all of the same length.
        meta: Optional metadata such as the executed query text.
    """

    name: str
    fields: tuple[Field, ...] = ()
    meta: FrameMeta | None = None

    def __post_init__(self) -> None:
        """Enforce that every field has the same length."""
        object.__setattr__(self, "fields", tuple(self.fields))
        lengths = {len(f) for f in self.fields}
        _require(
            condition=len(lengths) <= 1,
            message=f"all fields must have the same length, got {sorted(lengths)}",
            field_name="fields",
        )

    @property
    def rows(self) -> int:
        """Number of rows (length of any field)."""
        return len(self.fields[0]) if self.fields else 0

    def field(self, name: str) -> Field:
        """Return the first field called `name`.

        Raises:
            KeyError: If no field has that name.
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def to_dict(self) -> dict[str, typing.Any]:
        data: dict[str, typing.Any] = {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.meta is not None:
            data["meta"] = dataclasses.asdict(self.meta)
        return data


@dataclasses.dataclass(frozen=True, slots=True)
class DataResponse:
    """Outcome of one query: frames on success, an error otherwise."""

    frames: tuple[Frame, ...] = ()
    error: Exception | None = None

    def __post_init__(self) -> None:
        """Normalize frames to a tuple."""
        object.__setattr__(self, "frames", tuple(self.frames))

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, typing.Any]:
        if self.error is not None:
            return {"error": str(self.error)}
        return {"frames": [f.to_dict() for f in self.frames]}


@dataclasses.dataclass(slots=True)
class QueryDataResponse:
    """Mapping from query ref id to its `DataResponse`."""

    responses: dict[str, DataResponse] = dataclasses.field(default_factory=dict)

    def __getitem__(self, ref_id: str) -> DataResponse:
        return self.responses[ref_id]

    def __contains__(self, ref_id: object) -> bool:
        return ref_id in self.responses

    def __len__(self) -> int:
        return len(self.responses)

    def to_dict(self) -> dict[str, typing.Any]:
        return {ref_id: r.to_dict() for ref_id, r in self.responses.items()}
