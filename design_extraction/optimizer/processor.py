"""
Per-node extraction pipeline.

Each node goes through a cache lookup, a timed extraction call, retries with
exponential backoff and, once retries are exhausted, the configured fallback
strategy.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

from design_extraction.config import CachingConfig, ProcessingConfig
from design_extraction.models import DesignNode, FallbackStrategy, ProcessingStats
from design_extraction.monitoring.performance_monitor import PerformanceMonitor
from design_extraction.optimizer.cache import ResultCache
from design_extraction.utils.errors import (
    ConfigurationError,
    NodeExtractionFailedError,
    NodeExtractionTimeoutError,
)
from design_extraction.utils.logging import get_logger

logger = get_logger(__name__)

ExtractionFn = Callable[[DesignNode], Awaitable[Any]]


def simplified_record(node: DesignNode, error: str) -> Dict[str, Any]:
    """Minimal stand-in record for a node that could not be extracted."""
    return {
        "id": node.id,
        "name": node.name,
        "type": node.type.value,
        "error": error,
    }


class NodeProcessor:
    """Extract one node at a time with caching, retries and fallback."""

    def __init__(
        self,
        processing: ProcessingConfig,
        caching: CachingConfig,
        cache: ResultCache,
        monitor: PerformanceMonitor,
        stats: ProcessingStats,
    ) -> None:
        self.processing = processing
        self.caching = caching
        self.cache = cache
        self.monitor = monitor
        self.stats = stats

    async def process(self, node: DesignNode, extraction_fn: ExtractionFn) -> Optional[Any]:
        """
        Produce the record for `node`.

        Args:
            node: Node to extract
            extraction_fn: Async callable turning a node into a record

        Returns:
            The extracted, cached or fallback record; None when the node is skipped

        Raises:
            NodeExtractionFailedError: Retries exhausted under the propagate strategy
        """
        if self.caching.enabled:
            cached = self.cache.get(node.id)
            if cached is not None:
                self.monitor.record_metric("cache_hit", 1)
                self.stats.cached_nodes += 1
                self.stats.processed_nodes += 1
                return cached
            self.monitor.record_metric("cache_miss", 1)

        attempts = self.processing.retries + 1
        last_error: Optional[BaseException] = None

        for attempt in range(attempts):
            try:
                result = await self._extract_once(node, extraction_fn)
            except Exception as e:
                last_error = e
                self.monitor.record_metric("node_extraction_error", 1)
                logger.debug(f"Attempt {attempt + 1}/{attempts} for node {node.id} failed: {e}")

                if attempt < attempts - 1:
                    self.monitor.record_metric("node_extraction_retry", 1)
                    await asyncio.sleep(self.processing.retry_base_delay * (2 ** attempt))
                continue

            if self.caching.enabled and result is not None:
                self.cache.set(node.id, result, ttl=self.caching.ttl)
            self.stats.processed_nodes += 1
            return result

        self.stats.processed_nodes += 1
        self.stats.error_count += 1
        return self._apply_fallback(node, attempts, last_error)

    async def _extract_once(self, node: DesignNode, extraction_fn: ExtractionFn) -> Any:
        timeout = self.processing.timeout
        token = self.monitor.start_timer("node_extraction")
        self.monitor.record_metric("extraction_api_call", 1)
        try:
            return await asyncio.wait_for(extraction_fn(node), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise NodeExtractionTimeoutError(node.id, timeout) from e
        finally:
            self.monitor.end_timer(token)

    def _apply_fallback(self, node: DesignNode, attempts: int, error: BaseException) -> Optional[Any]:
        strategy = self.processing.fallback
        self.monitor.record_metric("node_fallback", 1)
        logger.warning(
            f"Node {node.id} failed after {attempts} attempt(s), applying '{strategy.value}' fallback: {error}"
        )

        if strategy is FallbackStrategy.SKIP:
            return None

        if strategy is FallbackStrategy.SIMPLIFY:
            return simplified_record(node, "Simplified due to processing failure")

        if strategy is FallbackStrategy.USE_CACHE:
            stale = self.cache.get_stale(node.id)
            if stale is not None:
                return stale
            return simplified_record(node, "Fallback to cache failed")

        if strategy is FallbackStrategy.PROPAGATE:
            raise NodeExtractionFailedError(node.id, attempts, error) from error

        raise ConfigurationError(f"Unknown fallback strategy: {strategy!r}")
