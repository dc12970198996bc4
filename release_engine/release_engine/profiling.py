"""Wall-clock timing for the analysis hot paths.

``@profile_operation(name)`` wraps a function, measures it with
``time.perf_counter_ns`` and stores the timing in the process-wide
:class:`TimingCollector`.  Every timing is also logged at DEBUG level so
``--verbose`` runs show where the analysis spends its time::

    @profile_operation("graph.build")
    def build_project_graph(projects):
        ...
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class OperationTiming:
    """One measured call of a profiled operation."""

    operation: str
    duration_ms: float


class TimingCollector:
    """Thread-safe store of the most recent timings per operation.

    Parameters
    ----------
    max_results:
        Number of timings retained per operation name.
    """

    _instance: TimingCollector | None = None
    _lock_cls = threading.Lock()

    def __init__(self, max_results: int = 100) -> None:
        self._max_results = max_results
        self._data: dict[str, deque[OperationTiming]] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> TimingCollector:
        """Return the module-level singleton, creating it if needed."""
        if cls._instance is None:
            with cls._lock_cls:
                if cls._instance is None:
                    cls._instance = TimingCollector()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (for testing)."""
        with cls._lock_cls:
            cls._instance = None

    def record(self, timing: OperationTiming) -> None:
        with self._lock:
            bucket = self._data.setdefault(timing.operation, deque(maxlen=self._max_results))
            bucket.append(timing)

    def get_stats(self, operation: str) -> dict[str, Any] | None:
        """Aggregate the retained timings of *operation*.

        Returns ``None`` when nothing was recorded, otherwise
        ``{"operation", "count", "mean_ms", "min_ms", "max_ms"}``.
        """
        with self._lock:
            timings = self._data.get(operation)
            if not timings:
                return None
            durations = [t.duration_ms for t in timings]

        return {
            "operation": operation,
            "count": len(durations),
            "mean_ms": round(sum(durations) / len(durations), 3),
            "min_ms": round(min(durations), 3),
            "max_ms": round(max(durations), 3),
        }

    def get_all_stats(self) -> list[dict[str, Any]]:
        """Return stats for every recorded operation, sorted by name."""
        with self._lock:
            operations = sorted(self._data)
        results = []
        for operation in operations:
            stats = self.get_stats(operation)
            if stats is not None:
                results.append(stats)
        return results


def profile_operation(name: str) -> Callable[[F], F]:
    """Decorator recording the duration of every call under *name*."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_ns = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            finally:
                duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
                TimingCollector.get_instance().record(
                    OperationTiming(operation=name, duration_ms=round(duration_ms, 3))
                )
                logger.debug("PROFILE %s: %.3f ms", name, duration_ms)

        return wrapper  # type: ignore[return-value]

    return decorator
