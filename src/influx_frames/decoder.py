"""Decode a raw response body into a validated `RawResponse`.

Numbers are decoded as `NumberLiteral` rather than `int`/`float`, so the
original digits survive until the transformer needs a float. Data after the
first complete value is ignored. Non-standard JSON constants (``NaN``,
``Infinity``) are rejected.
"""

import json
import logging
from typing import IO, Never

from pydantic import ValidationError

from influx_frames.core.models import RawResponse
from influx_frames.core.types import Failure, NumberLiteral, Result, Success
from influx_frames.exceptions import DecodeError

log = logging.getLogger(__name__)

type Body = bytes | bytearray | str | IO[bytes] | IO[str]

_JSON_WHITESPACE = " \t\n\r"


def _reject_constant(name: str) -> Never:
    raise ValueError(f"invalid JSON constant {name!r}")


def loads(data: bytes | bytearray | str) -> object:
    """Parse the first JSON value in `data`, keeping numbers as `NumberLiteral`.

    Anything after the first complete value is ignored.

    Raises:
        ValueError: On malformed JSON, undecodable bytes or non-standard
            constants.
    """
    if isinstance(data, bytes | bytearray):
        data = data.decode(json.detect_encoding(data))
    decoder = json.JSONDecoder(
        parse_int=NumberLiteral,
        parse_float=NumberLiteral,
        parse_constant=_reject_constant,
    )
    document, _ = decoder.raw_decode(data.lstrip(_JSON_WHITESPACE))
    return document


def decode_response(body: Body) -> Result[RawResponse, DecodeError]:
    """Read `body` and validate it as a `RawResponse`.

    Args:
        body: Raw bytes/text, or a readable stream producing either.

    Returns:
        `Success` with the decoded response, or `Failure` with a
        `DecodeError` whose ``__cause__`` is the underlying error.
    """
    data = body.read() if hasattr(body, "read") else body

    try:
        document = loads(data)
    except ValueError as e:
        log.debug("Response body is not valid JSON: %s", e)
        error = DecodeError(f"failed to decode response: {e}")
        error.__cause__ = e
        return Failure(error)

    try:
        return Success(RawResponse.model_validate(document))
    except ValidationError as e:
        log.debug("Response body has an unexpected shape: %s", e)
        error = DecodeError(
            f"failed to decode response: {e.error_count()} validation error(s)"
        )
        error.__cause__ = e
        return Failure(error)
