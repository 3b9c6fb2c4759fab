"""
Budget filtering of prioritized nodes.

Keeps at most `max_nodes` nodes. Whole tiers are retained from critical down
to optional while they fit; the first tier that does not fit is thinned with
stratified sampling so that what survives still spans the tier's priority
range instead of only its top.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, TypeVar

from design_extraction.models import IMPORTANCE_ORDER, ImportanceLevel, PriorityNode
from design_extraction.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def stratified_sample(items: Sequence[T], count: int) -> List[T]:
    """
    Select `count` evenly spaced items, preserving their order.

    Args:
        items: Ordered collection to sample from
        count: Number of items wanted

    Returns:
        The sampled items; all of them if `count` covers the collection
    """
    if count <= 0:
        return []
    if count >= len(items):
        return list(items)

    step = len(items) / count
    return [items[int(i * step)] for i in range(count)]


@dataclass
class FilterResult:
    """Outcome of applying the node budget."""

    retained: List[PriorityNode]
    skipped_count: int
    tier_counts: Dict[ImportanceLevel, int] = field(default_factory=dict)


class BudgetFilter:
    """Enforce a maximum node count on a prioritized node list."""

    def __init__(self, max_nodes: int) -> None:
        if max_nodes <= 0:
            raise ValueError(f"max_nodes must be positive, got {max_nodes}")
        self.max_nodes = max_nodes

    def apply(self, prioritized: Sequence[PriorityNode]) -> FilterResult:
        """
        Filter nodes down to the budget.

        Args:
            prioritized: Nodes sorted by priority, highest first

        Returns:
            FilterResult with retained nodes still in priority order
        """
        if len(prioritized) <= self.max_nodes:
            return FilterResult(retained=list(prioritized), skipped_count=0)

        tiers: Dict[ImportanceLevel, List[PriorityNode]] = {level: [] for level in IMPORTANCE_ORDER}
        for priority_node in prioritized:
            tiers[priority_node.importance].append(priority_node)

        remaining = self.max_nodes
        retained: List[PriorityNode] = []
        tier_counts: Dict[ImportanceLevel, int] = {}

        for level in IMPORTANCE_ORDER:
            tier = tiers[level]
            if len(tier) <= remaining:
                kept = tier
            else:
                kept = stratified_sample(tier, remaining)
                if kept:
                    logger.debug(f"Sampled {len(kept)}/{len(tier)} {level.value} nodes")

            retained.extend(kept)
            tier_counts[level] = len(kept)
            remaining -= len(kept)

        skipped = len(prioritized) - len(retained)
        logger.info(
            f"Filtered {skipped} of {len(prioritized)} nodes to fit budget of {self.max_nodes}",
            extra={"tier_counts": {k.value: v for k, v in tier_counts.items()}},
        )
        return FilterResult(retained=retained, skipped_count=skipped, tier_counts=tier_counts)
