"""Map a raw engine response onto per-query frame results.

`ResponseParser.parse` is the entry point: it decodes the body, reports
request-wide failures under a single fallback key, and otherwise builds one
`DataResponse` per query in submission order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from influx_frames.config import ParserSettings
from influx_frames.core.frames import DataResponse, QueryDataResponse
from influx_frames.core.types import Failure
from influx_frames.decoder import decode_response
from influx_frames.exceptions import EngineError, QueryError
from influx_frames.telemetry import ParseTelemetry
from influx_frames.transform import transform_rows

if TYPE_CHECKING:
    from collections.abc import Sequence

    from influx_frames.core.types import Query
    from influx_frames.decoder import Body
    from influx_frames.telemetry import ParseRecorder

log = logging.getLogger(__name__)


class ResponseParser:
    """Parse engine responses into frames, keyed by query ref id.

    The parser holds only immutable settings; one instance may be shared by
    concurrent callers.

    Attributes:
        settings: Resolved `ParserSettings`.
        telemetry: Recorder for parse timings and per-frame anomaly counts.
    """

    def __init__(
        self,
        settings: ParserSettings | None = None,
        *,
        telemetry: ParseRecorder | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            settings: Optional settings. Defaults are resolved from the
                environment.
            telemetry: Optional recorder from `ParseTelemetry`. Defaults to a
                no-op.
        """
        self.settings = settings if settings is not None else ParserSettings()
        self.telemetry = telemetry if telemetry is not None else ParseTelemetry()

    def parse(self, body: Body, queries: Sequence[Query]) -> QueryDataResponse:
        """Parse `body` into a response map for `queries`.

        Results are paired with queries by position, so the caller must pass
        the queries in the order they were submitted. Queries without a
        result get no entry. More results than queries is a caller error.

        Args:
            body: Response body as bytes/text or a readable stream.
            queries: The submitted queries, in submission order.

        Returns:
            `QueryDataResponse` with either a single fallback-key error (bad
            body or engine-wide error) or one entry per returned result.

        Raises:
            ValueError: If the body holds more results than `queries`.
        """
        resp = QueryDataResponse()

        with self.telemetry.timed(queries=len(queries)):
            decoded = decode_response(body)
            if isinstance(decoded, Failure):
                resp.responses[self.settings.error_ref_id] = DataResponse(
                    error=decoded.error
                )
                return resp

            response = decoded.value
            if response.error:
                log.debug("Engine reported an error: %s", response.error)
                resp.responses[self.settings.error_ref_id] = DataResponse(
                    error=EngineError(response.error)
                )
                return resp

            if len(response.results) > len(queries):
                raise ValueError(
                    f"response has {len(response.results)} results for "
                    f"{len(queries)} queries"
                )

            for result, query in zip(response.results, queries):
                if result.error:
                    log.debug("Query %s failed: %s", query.ref_id, result.error)
                    resp.responses[query.ref_id] = DataResponse(
                        error=QueryError(result.error)
                    )
                else:
                    resp.responses[query.ref_id] = DataResponse(
                        frames=transform_rows(
                            result.series, query, self.settings, self.telemetry
                        )
                    )

        return resp


def parse(body: Body, queries: Sequence[Query]) -> QueryDataResponse:
    """Parse `body` with a default `ResponseParser`."""
    return ResponseParser().parse(body, queries)
