"""Telemetry context and reporter interfaces.

Composed sequences report a small summary when they reach exhaustion. When
telemetry is disabled, or no reporters are supplied, a shared no-op context is
used so that composing and pulling pay nothing for it.
"""

from collections import deque
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
import logging
import time
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

log = logging.getLogger(__name__)


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """An immutable, stateless no-op context."""

    @property
    def enabled(self) -> bool:
        return False

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _EnabledTelemetryContext:
    """Telemetry context that forwards to its reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    @property
    def enabled(self) -> bool:
        return True

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager["_EnabledTelemetryContext"]:
        return self._timed(name, **metadata)

    @contextmanager
    def _timed(self, name: str, **metadata: Any) -> Iterator["_EnabledTelemetryContext"]:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")
        start_time = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start_time
            self._dispatch("record_timing", name, duration, metadata)

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record a metric value."""
        self._dispatch("record_metric", name, value, metadata)

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Record a counter metric."""
        self.metric(name, increment, metric_type="counter", **metadata)

    def _dispatch(
        self, method: str, scope: str, value: Any, metadata: dict[str, Any]
    ) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception as e:
                # A broken reporter must not interrupt iteration
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


_NO_OP_SINGLETON = _NoOpTelemetryContext()

type TelemetryContextProtocol = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(  # noqa: N802
    *reporters: TelemetryReporter, enabled: bool | None = None
) -> TelemetryContextProtocol:
    """Return a telemetry context.

    Args:
        *reporters: Reporters receiving timings and metrics.
        enabled: Force telemetry on or off. When None, the ``telemetry``
            field of the effective settings decides.

    Returns:
        A forwarding context, or the shared no-op instance when disabled or
        when no reporters are given.
    """
    if enabled is None:
        from iter_vals.config import get_settings

        enabled = get_settings().telemetry
    if enabled and reporters:
        return _EnabledTelemetryContext(*reporters)
    return _NO_OP_SINGLETON


class SimpleReporter:
    """In-memory reporter for development and tests.

    Call ``get_report()`` to render the collected data.
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

    def totals(self) -> dict[str, float]:
        """Return the summed numeric value of each metric scope."""
        return {
            scope: sum(v[0] for v in values if isinstance(v[0], int | float))
            for scope, values in self.metrics.items()
        }

    def get_report(self) -> str:
        """Render timings and metric totals as aligned text."""
        lines = ["=== Telemetry Report ==="]
        if self.timings:
            lines.append("--- Timings ---")
            for scope, values in sorted(self.timings.items()):
                durations = [v[0] for v in values]
                lines.append(
                    f"{scope:<30} | Calls: {len(durations):<4} | "
                    f"Total: {sum(durations):.4f}s"
                )
        if self.metrics:
            lines.append("--- Metrics ---")
            for scope, total in sorted(self.totals().items()):
                count = len(self.metrics[scope])
                lines.append(f"{scope:<30} | Count: {count:<4} | Total: {total:,.0f}")
        return "\n".join(lines)
