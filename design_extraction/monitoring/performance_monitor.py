"""
Performance monitoring for extraction runs.

Collects timers and free-form metrics in a bounded in-memory buffer and
aggregates the recent window into a `PerformanceMetrics` snapshot: average
duration per operation, process memory, extraction throughput, cache hit
rate, error rate and the number of external calls.
"""

import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional
from uuid import uuid4

import psutil

from design_extraction.models import MemoryUsage, PerformanceMetrics
from design_extraction.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_METRICS = 1000
DEFAULT_WINDOW_SECONDS = 300.0


@dataclass
class Metric:
    """Individual metric data point."""

    name: str
    value: float
    unit: str
    timestamp: float


@dataclass
class _Timer:
    name: str
    started_at: float


class PerformanceMonitor:
    """
    Timer and metric registry.

    Metric names carry meaning for the snapshot: names containing
    ``extraction`` count towards throughput, ``cache_hit``/``cache_miss``
    towards the hit rate, ``error`` towards the error rate and ``api_call``
    towards the external call count.
    """

    def __init__(
        self,
        max_metrics: int = DEFAULT_MAX_METRICS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            max_metrics: Buffer size; the oldest metrics are dropped first
            window_seconds: Trailing window aggregated by get_metrics()
            clock: Wall-clock time source in seconds, used to timestamp metrics
        """
        if max_metrics <= 0:
            raise ValueError(f"max_metrics must be positive, got {max_metrics}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")

        self.window_seconds = window_seconds
        self._clock = clock
        self._timers: Dict[str, _Timer] = {}
        self._metrics: Deque[Metric] = deque(maxlen=max_metrics)
        self._process = psutil.Process()

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def start_timer(self, name: str) -> str:
        """Start timing `name` and return the token to stop it with."""
        token = f"{name}_{uuid4().hex[:12]}"
        self._timers[token] = _Timer(name=name, started_at=time.perf_counter())
        return token

    def end_timer(self, token: str) -> float:
        """
        Stop a timer and record its duration under the timer's name.

        Returns:
            Duration in milliseconds, or 0.0 for an unknown token
        """
        timer = self._timers.pop(token, None)
        if timer is None:
            logger.warning(f"Timer {token} not found")
            return 0.0

        duration_ms = (time.perf_counter() - timer.started_at) * 1000.0
        self.record_metric(timer.name, duration_ms, "ms")
        return duration_ms

    def record_metric(self, name: str, value: float, unit: str = "count") -> None:
        self._metrics.append(Metric(name=name, value=float(value), unit=unit, timestamp=self._clock()))

    def record_operation_start(self, operation: str, metadata: Optional[Dict[str, Any]] = None) -> str:
        """
        Start timing an operation, recording any numeric metadata alongside.

        Args:
            operation: Operation name
            metadata: Values recorded as ``<operation>_<key>`` when numeric

        Returns:
            Timer token for record_operation_end()
        """
        token = self.start_timer(operation)

        for key, value in (metadata or {}).items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                self.record_metric(f"{operation}_{key}", value)

        return token

    def record_operation_end(self, token: str, result_size: Optional[int] = None) -> float:
        """Stop an operation timer, optionally recording the size of its result."""
        timer = self._timers.get(token)
        duration_ms = self.end_timer(token)

        if timer is not None and result_size is not None:
            self.record_metric(f"{timer.name}_result_size", result_size, "items")

        return duration_ms

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def get_metrics(self) -> PerformanceMetrics:
        """Aggregate the metrics recorded inside the trailing window."""
        now = self._clock()
        recent = [m for m in self._metrics if now - m.timestamp < self.window_seconds]

        return PerformanceMetrics(
            timing=self._average_timings(recent),
            memory=self._memory_usage(),
            throughput=self._throughput(recent),
            cache_hit_rate=self._cache_hit_rate(recent),
            error_rate=self._error_rate(recent),
            api_call_count=sum(1 for m in recent if "api_call" in m.name),
            metric_count=len(recent),
            last_updated=datetime.fromtimestamp(now, tz=timezone.utc),
        )

    @staticmethod
    def _average_timings(metrics: List[Metric]) -> Dict[str, float]:
        totals: Dict[str, float] = {}
        counts: Dict[str, int] = {}
        for metric in metrics:
            if metric.unit != "ms":
                continue
            totals[metric.name] = totals.get(metric.name, 0.0) + metric.value
            counts[metric.name] = counts.get(metric.name, 0) + 1
        return {name: totals[name] / counts[name] for name in totals}

    def _throughput(self, metrics: List[Metric]) -> float:
        """Extraction-related metrics per minute over the window."""
        extraction_count = sum(1 for m in metrics if "extraction" in m.name)
        return extraction_count / (self.window_seconds / 60.0)

    @staticmethod
    def _cache_hit_rate(metrics: List[Metric]) -> float:
        hits = sum(1 for m in metrics if "cache_hit" in m.name)
        misses = sum(1 for m in metrics if "cache_miss" in m.name)
        total = hits + misses
        return hits / total if total else 0.0

    @staticmethod
    def _error_rate(metrics: List[Metric]) -> float:
        errors = sum(1 for m in metrics if "error" in m.name)
        operations = len(metrics) - errors
        return errors / operations if operations else 0.0

    def _memory_usage(self) -> MemoryUsage:
        try:
            info = self._process.memory_info()
            return MemoryUsage(
                rss_bytes=info.rss,
                vms_bytes=info.vms,
                percent=self._process.memory_percent(),
            )
        except psutil.Error as e:
            logger.warning(f"Could not read process memory: {e}")
            return MemoryUsage()

    def reset(self) -> None:
        """Drop all timers and metrics."""
        self._timers.clear()
        self._metrics.clear()

    def __len__(self) -> int:
        return len(self._metrics)


def create_performance_monitor(
    max_metrics: int = DEFAULT_MAX_METRICS,
    window_seconds: float = DEFAULT_WINDOW_SECONDS,
) -> PerformanceMonitor:
    """Factory used by the optimizer and CLI."""
    return PerformanceMonitor(max_metrics=max_metrics, window_seconds=window_seconds)
