"""
Post-run performance recommendations.
"""

from typing import List

from design_extraction.config import RecommendationThresholds
from design_extraction.models import (
    EffortLevel,
    PerformanceRecommendation,
    ProcessingStats,
    RecommendationPriority,
    RecommendationType,
)


class RecommendationEngine:
    """Turn the statistics of a finished run into ordered recommendations."""

    def __init__(self, thresholds: RecommendationThresholds, caching_enabled: bool = True) -> None:
        self.thresholds = thresholds
        self.caching_enabled = caching_enabled

    def generate(self, stats: ProcessingStats) -> List[PerformanceRecommendation]:
        """
        Evaluate every rule against `stats`.

        Returns:
            Triggered recommendations in rule order; empty when nothing triggered
        """
        recommendations: List[PerformanceRecommendation] = []

        if stats.total_nodes > 0 and stats.skip_ratio > self.thresholds.max_skip_ratio:
            recommendations.append(
                PerformanceRecommendation(
                    type=RecommendationType.OPTIMIZATION,
                    priority=RecommendationPriority.MEDIUM,
                    title="High node skip rate detected",
                    description=(
                        f"{round(stats.skip_ratio * 100)}% of nodes were skipped for performance. "
                        "Consider increasing max_nodes or improving prioritization weights."
                    ),
                    impact="May miss important design elements",
                    effort=EffortLevel.LOW,
                )
            )

        if stats.average_node_time_ms > self.thresholds.max_average_node_time_ms:
            recommendations.append(
                PerformanceRecommendation(
                    type=RecommendationType.PERFORMANCE,
                    priority=RecommendationPriority.HIGH,
                    title="Slow node processing detected",
                    description=(
                        f"Average processing time of {round(stats.average_node_time_ms)}ms per node is high. "
                        "Consider enabling parallel processing or increasing max_workers."
                    ),
                    impact="Significantly slower extraction times",
                    effort=EffortLevel.MEDIUM,
                )
            )

        if (
            self.caching_enabled
            and stats.processed_nodes > 0
            and stats.cache_hit_rate < self.thresholds.min_cache_hit_rate
        ):
            recommendations.append(
                PerformanceRecommendation(
                    type=RecommendationType.CACHING,
                    priority=RecommendationPriority.LOW,
                    title="Low cache hit rate",
                    description=(
                        f"Cache hit rate of {round(stats.cache_hit_rate * 100)}% suggests the cache is not effective. "
                        "Consider adjusting the cache TTL or the cache keys."
                    ),
                    impact="Missed performance opportunities",
                    effort=EffortLevel.LOW,
                )
            )

        if stats.processed_nodes > 0 and stats.error_rate > self.thresholds.max_error_rate:
            recommendations.append(
                PerformanceRecommendation(
                    type=RecommendationType.RELIABILITY,
                    priority=RecommendationPriority.MEDIUM,
                    title="High node failure rate",
                    description=(
                        f"{stats.error_count} of {stats.processed_nodes} nodes "
                        f"({round(stats.error_rate * 100)}%) needed the fallback strategy. "
                        "Consider raising the timeout or the number of retries."
                    ),
                    impact="Extracted records are incomplete or simplified",
                    effort=EffortLevel.LOW,
                )
            )

        return recommendations
