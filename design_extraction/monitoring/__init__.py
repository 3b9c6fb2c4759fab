"""
Runtime performance monitoring.
"""

from design_extraction.monitoring.performance_monitor import (
    Metric,
    PerformanceMonitor,
    create_performance_monitor,
)

__all__ = [
    "Metric",
    "PerformanceMonitor",
    "create_performance_monitor",
]
