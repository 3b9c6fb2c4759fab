"""
Batch scheduling of node extraction.

The retained nodes are split into contiguous batches that run one after the
other, which bounds how much work is in flight at once. Inside a batch nodes
run either one at a time or in chunks of at most `max_workers` concurrent
extractions. A failing node never takes its batch or its chunk down with it.
"""

import asyncio
from typing import Any, List, Sequence, TypeVar

from design_extraction.config import ProcessingConfig, StreamingConfig
from design_extraction.models import PriorityNode
from design_extraction.monitoring.performance_monitor import PerformanceMonitor
from design_extraction.optimizer.processor import ExtractionFn, NodeProcessor
from design_extraction.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def create_batches(items: Sequence[T], batch_size: int) -> List[List[T]]:
    """Split `items` into contiguous batches of at most `batch_size`."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [list(items[i:i + batch_size]) for i in range(0, len(items), batch_size)]


class BatchScheduler:
    """Drive the node processor over the retained node set."""

    def __init__(
        self,
        streaming: StreamingConfig,
        processing: ProcessingConfig,
        processor: NodeProcessor,
        monitor: PerformanceMonitor,
    ) -> None:
        self.streaming = streaming
        self.processing = processing
        self.processor = processor
        self.monitor = monitor

    async def run(self, nodes: Sequence[PriorityNode], extraction_fn: ExtractionFn) -> List[Any]:
        """
        Process every node and collect the records.

        Args:
            nodes: Retained nodes in priority order
            extraction_fn: Async callable turning a node into a record

        Returns:
            Records in the order of their nodes. Skipped and failed nodes leave no entry.
        """
        if not nodes:
            return []

        if self.streaming.enabled:
            batches = create_batches(nodes, self.streaming.batch_size)
        else:
            batches = [list(nodes)]

        results: List[Any] = []
        for index, batch in enumerate(batches):
            with LogContext(batch=index + 1):
                logger.info(f"Processing batch {index + 1}/{len(batches)} ({len(batch)} nodes)")
                token = self.monitor.start_timer("batch_processing")

                if self.processing.parallel:
                    batch_results = await self._process_batch_parallel(batch, extraction_fn)
                else:
                    batch_results = await self._process_batch_sequential(batch, extraction_fn)

                self.monitor.end_timer(token)
                results.extend(batch_results)

            if self.streaming.enabled and self.streaming.delay > 0 and index < len(batches) - 1:
                await asyncio.sleep(self.streaming.delay)

        return results

    async def _process_batch_parallel(self, batch: List[PriorityNode], extraction_fn: ExtractionFn) -> List[Any]:
        """Run the batch in chunks of at most `max_workers` concurrent nodes."""
        width = min(self.processing.max_workers, len(batch))
        results: List[Any] = []

        for start in range(0, len(batch), width):
            chunk = batch[start:start + width]
            outcomes = await asyncio.gather(
                *(self.processor.process(p.node, extraction_fn) for p in chunk),
                return_exceptions=True,
            )

            # gather keeps input order, so outcome i belongs to chunk[i]
            for priority_node, outcome in zip(chunk, outcomes):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                if isinstance(outcome, BaseException):
                    logger.warning(f"Failed to process node {priority_node.node_id}: {outcome}")
                    continue
                if outcome is not None:
                    results.append(outcome)

        return results

    async def _process_batch_sequential(self, batch: List[PriorityNode], extraction_fn: ExtractionFn) -> List[Any]:
        results: List[Any] = []

        for priority_node in batch:
            try:
                outcome = await self.processor.process(priority_node.node, extraction_fn)
            except Exception as e:
                logger.warning(f"Failed to process node {priority_node.node_id}: {e}")
                continue
            if outcome is not None:
                results.append(outcome)

        return results
