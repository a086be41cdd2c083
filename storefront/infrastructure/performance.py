"""Performance Monitor — per-operation wall-clock timings kept in memory.

Invariants:
    - start_timer returns a stop callable; each call to it records one sample (ms)
    - get_average_time is 0.0 for operations with no samples
    - Instances are injected by the composition root, never shared module state
"""

import logging
import time
from collections import defaultdict
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PerformanceMonitor:

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._samples: dict[str, list[float]] = defaultdict(list)

    def start_timer(self, operation: str) -> Callable[[], float]:
        started = self._clock()

        def stop() -> float:
            duration_ms = (self._clock() - started) * 1000
            self._samples[operation].append(duration_ms)
            logger.debug(
                f"{operation}: {duration_ms:.2f}ms",
                extra={"operation": operation, "duration_ms": round(duration_ms, 2)},
            )
            return duration_ms

        return stop

    def get_average_time(self, operation: str) -> float:
        samples = self._samples.get(operation)
        if not samples:
            return 0.0
        return sum(samples) / len(samples)

    def get_metrics(self) -> dict[str, dict[str, float]]:
        return {
            operation: {
                "count": len(samples),
                "average": sum(samples) / len(samples),
                "total": sum(samples),
            }
            for operation, samples in self._samples.items()
            if samples
        }

    def clear_metrics(self) -> None:
        self._samples.clear()
