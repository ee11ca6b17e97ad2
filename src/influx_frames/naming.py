"""Display names for time-series frames.

Without an alias the name is ``<series>.<column>`` followed by the series
tags. With an alias, every ``$token`` or ``[[token]]`` in the pattern is
resolved by trying a fixed, ordered list of `AliasRule`s; the first rule
returning a string wins and a token no rule resolves is kept verbatim.

Supported tokens:
    ``m`` / ``measurement``  the query's measurement
    ``col``                  the current column label
    ``<N>``                  the N-th dot-separated part of the series name
    ``tag_<key>``            the value of series tag ``<key>``
"""

from __future__ import annotations

from collections.abc import Callable
import dataclasses
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from influx_frames.core.models import Row
    from influx_frames.core.types import Query

LEGEND_PATTERN = re.compile(
    r"\[\[([\@\/\w-]+)(\.[\@\/\w-]+)*\]\]*|\$(\s*([\@\w-]+?))*",
    re.ASCII,
)


@dataclasses.dataclass(frozen=True, slots=True)
class AliasContext:
    """What a rule may look at while resolving one token."""

    row: Row
    column: str
    query: Query
    name_segments: tuple[str, ...]


@dataclasses.dataclass(frozen=True, slots=True)
class AliasRule:
    """A named token resolver; `resolve` returns None to fall through."""

    name: str
    resolve: Callable[[str, AliasContext], str | None]


def _measurement(key: str, ctx: AliasContext) -> str | None:
    if key in ("m", "measurement"):
        return ctx.query.measurement
    return None


def _column(key: str, ctx: AliasContext) -> str | None:
    if key == "col":
        return ctx.column
    return None


def _name_segment(key: str, ctx: AliasContext) -> str | None:
    if not (key.isascii() and key.isdigit()):
        return None
    pos = int(key)
    if pos < len(ctx.name_segments):
        return ctx.name_segments[pos]
    return None


def _tag(key: str, ctx: AliasContext) -> str | None:
    if not key.startswith("tag_"):
        return None
    return ctx.row.tags.get(key.replace("tag_", "", 1))


DEFAULT_RULES: tuple[AliasRule, ...] = (
    AliasRule("measurement", _measurement),
    AliasRule("column", _column),
    AliasRule("segment", _name_segment),
    AliasRule("tag", _tag),
)


def _strip_delimiters(token: str) -> str:
    return token.replace("[[", "", 1).replace("]]", "", 1).replace("$", "", 1)


def default_frame_name(row: Row, column: str) -> str:
    """Return ``<series>.<column>`` plus a ``{ key: value ... }`` tag block."""
    tags = [f"{k}: {v}" for k, v in row.tags.items()]
    tag_text = f" {{ {' '.join(tags)} }}" if tags else ""
    return f"{row.name}.{column}{tag_text}"


def format_frame_name(
    row: Row,
    column: str,
    query: Query,
    rules: tuple[AliasRule, ...] = DEFAULT_RULES,
) -> str:
    """Resolve the display name for `column` of `row`.

    Args:
        row: Series the frame is built from.
        column: Label of the value column.
        query: Owning query; supplies the alias and measurement.
        rules: Token rules, tried in order.

    Returns:
        The default name when the query has no alias, else the alias with
        every resolvable token substituted.
    """
    if not query.alias:
        return default_frame_name(row, column)

    ctx = AliasContext(
        row=row,
        column=column,
        query=query,
        name_segments=tuple(row.name.split(".")),
    )

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        key = _strip_delimiters(token)
        for rule in rules:
            resolved = rule.resolve(key, ctx)
            if resolved is not None:
                return resolved
        return token

    return LEGEND_PATTERN.sub(_replace, query.alias)
