"""Core value types shared by the decoder, transformer and dispatcher.

Everything here is immutable and built fresh for each parse call. Numbers
decoded from the response body keep their original text as a
`NumberLiteral` until a consumer explicitly asks for a float, so large
integer timestamps and counters are never rounded early.
"""

from __future__ import annotations

import dataclasses
import math
import typing

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result Monad ---
# Stages return Success/Failure instead of raising so that the dispatcher can
# map each failure onto the right response key.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful stage result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed stage result, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Decoded values ---


@dataclasses.dataclass(frozen=True, slots=True)
class NumberLiteral:
    """A JSON number kept in its original textual form.

    Conversion happens only through `to_float`, which fails loudly instead
    of returning an infinity when the literal is outside the float range.
    """

    text: str

    def __post_init__(self) -> None:
        """Validate that the literal is a non-empty string."""
        _require(
            condition=isinstance(self.text, str) and self.text != "",
            message="must be a non-empty str",
            field_name="text",
            exc=TypeError,
        )

    def to_float(self) -> float:
        """Return the literal as a 64-bit float.

        Raises:
            ValueError: If the text is not numeric or overflows a float.
        """
        value = float(self.text)
        if math.isinf(value) or math.isnan(value):
            raise ValueError(f"number {self.text!r} is out of float range")
        return value

    def __str__(self) -> str:
        return self.text


type Value = NumberLiteral | str | bool | None


# --- Query descriptors ---


@dataclasses.dataclass(frozen=True, slots=True)
class Query:
    """The parts of a submitted query that shape its frames.

    Attributes:
        ref_id: Key of this query's entry in the response map.
        alias: Optional legend pattern used to name frames.
        measurement: Substituted for `$m` / `[[measurement]]` in aliases.
        raw_query: Query text; recorded on frames and checked for tag listings.
    """

    ref_id: str
    alias: str = ""
    measurement: str = ""
    raw_query: str = ""

    def __post_init__(self) -> None:
        """Validate field types for predictable downstream behavior."""
        for name in ("ref_id", "alias", "measurement", "raw_query"):
            _require(
                condition=isinstance(getattr(self, name), str),
                message="must be str",
                field_name=name,
                exc=TypeError,
            )
