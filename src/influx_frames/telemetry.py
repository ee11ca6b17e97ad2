"""Parse telemetry: how long a parse took and what each frame absorbed.

Disabled by default. `ParseTelemetry` returns a shared no-op recorder unless
``INFLUX_FRAMES_TELEMETRY=1`` (or ``DEBUG=1``) is set at import time and at
least one reporter is supplied. Reporter failures are logged, never raised.

Emitted scopes:
    ``parse``                       timing of one `ResponseParser.parse` call
    ``parse.rows.dropped_tuples``   tuples dropped for an unparsable timestamp
    ``parse.rows.null_values``      values that ended up as None
"""

from collections import deque
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from dataclasses import dataclass
import logging
import os
import time
from typing import Any, Protocol, runtime_checkable

log = logging.getLogger(__name__)

# Evaluated once at import time
_TELEMETRY_ENABLED = (
    os.getenv("INFLUX_FRAMES_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"
)

PARSE_SCOPE = "parse"
DROPPED_TUPLES = f"{PARSE_SCOPE}.rows.dropped_tuples"
NULL_VALUES = f"{PARSE_SCOPE}.rows.null_values"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class FrameAnomalies:
    """Per-tuple problems absorbed while building one time-series frame."""

    series: str
    column: str
    dropped_tuples: int = 0
    null_values: int = 0

    def __bool__(self) -> bool:
        return bool(self.dropped_tuples or self.null_values)


class _NoOpRecorder:
    __slots__ = ()

    enabled = False

    def timed(self, **metadata: Any) -> AbstractContextManager[None]:  # noqa: ARG002
        return nullcontext()

    def record_frame(self, anomalies: FrameAnomalies) -> None:
        pass


class _ReportingRecorder:
    """Forwards parse timings and frame anomaly counts to reporters."""

    __slots__ = ("reporters",)

    enabled = True

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    @contextmanager
    def timed(self, **metadata: Any) -> Iterator[None]:
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            for reporter in self.reporters:
                self._guard(
                    reporter, reporter.record_timing, PARSE_SCOPE, duration, metadata
                )

    def record_frame(self, anomalies: FrameAnomalies) -> None:
        labels = {"series": anomalies.series, "column": anomalies.column}
        for reporter in self.reporters:
            self._guard(
                reporter,
                reporter.record_metric,
                DROPPED_TUPLES,
                anomalies.dropped_tuples,
                labels,
            )
            self._guard(
                reporter,
                reporter.record_metric,
                NULL_VALUES,
                anomalies.null_values,
                labels,
            )

    @staticmethod
    def _guard(
        reporter: TelemetryReporter,
        record: Any,
        scope: str,
        value: Any,
        metadata: dict[str, Any],
    ) -> None:
        try:
            record(scope, value, **metadata)
        except Exception as e:
            log.error(
                "Telemetry reporter '%s' failed: %s",
                type(reporter).__name__,
                e,
                exc_info=True,
            )


_NO_OP_SINGLETON = _NoOpRecorder()

type ParseRecorder = _ReportingRecorder | _NoOpRecorder


def ParseTelemetry(*reporters: TelemetryReporter) -> ParseRecorder:  # noqa: N802
    """Return a parse recorder.

    Returns the shared no-op recorder when telemetry is disabled or no
    reporters are given.
    """
    if _TELEMETRY_ENABLED and reporters:
        return _ReportingRecorder(*reporters)
    return _NO_OP_SINGLETON


class InMemoryReporter:
    """Reporter that keeps the most recent entries per scope in memory.

    Handy for inspecting anomaly counts in notebooks or during debugging::

        reporter = InMemoryReporter()
        parser = ResponseParser(telemetry=ParseTelemetry(reporter))
        parser.parse(body, queries)
        reporter.total("parse.rows.dropped_tuples")
    """

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = {}

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (duration, metadata)
        )

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (value, metadata)
        )

    def total(self, scope: str) -> float:
        """Sum of numeric metric values recorded under `scope`."""
        return sum(
            v for v, _ in self.metrics.get(scope, ()) if isinstance(v, int | float)
        )
