"""
Node prioritization.

Scores every node from a handful of independently normalized heuristics
(size, position, visibility, interaction and semantic cues in the layer
name) and assigns it to an importance tier.
"""

import math
from typing import Iterable, List

from design_extraction.config import PrioritizationConfig
from design_extraction.models import DesignNode, ImportanceLevel, NodeType, PriorityNode
from design_extraction.utils.logging import get_logger

logger = get_logger(__name__)

MAX_VISUAL_WEIGHT = 2.0
VISUAL_AREA_UNIT = 10_000.0


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    if not math.isfinite(value):
        return low
    return max(low, min(value, high))


class NodePrioritizer:
    """Compute priority scores and importance tiers for design nodes."""

    def __init__(self, config: PrioritizationConfig) -> None:
        self.config = config

    def prioritize(self, nodes: Iterable[DesignNode]) -> List[PriorityNode]:
        """
        Score and tier each node.

        Args:
            nodes: Flat list of design nodes

        Returns:
            Priority nodes sorted by priority, highest first. Ties keep input order.
        """
        prioritized = []
        for node in nodes:
            priority = self.calculate_priority(node)
            prioritized.append(
                PriorityNode(
                    node=node,
                    priority=priority,
                    visual_weight=self.calculate_visual_weight(node),
                    importance=self.categorize(priority),
                )
            )

        prioritized.sort(key=lambda p: p.priority, reverse=True)
        logger.debug(f"Prioritized {len(prioritized)} nodes")
        return prioritized

    def calculate_priority(self, node: DesignNode) -> float:
        """Weighted sum of the normalized factors, clamped to [0, 1]."""
        weights = self.config.weights
        score = 0.0

        bounds = node.bounds
        if bounds is not None:
            score += _clamp(bounds.area / self.config.size_cap) * weights.size

            distance = math.hypot(bounds.x, bounds.y)
            score += _clamp(1.0 - distance / self.config.position_range) * weights.position

        if node.visible:
            score += weights.visibility

        score += self.interaction_score(node) * weights.interaction
        score += self.semantic_score(node) * weights.semantic

        return _clamp(score)

    @staticmethod
    def interaction_score(node: DesignNode) -> float:
        """How likely the node is something a user interacts with."""
        name = node.name.lower()

        if "button" in name or "btn" in name:
            return 1.0
        if "input" in name or "field" in name:
            return 0.9
        if "link" in name or "nav" in name:
            return 0.8
        if "card" in name and "click" in name:
            return 0.7
        if node.is_component_like:
            return 0.6

        return 0.2

    @staticmethod
    def semantic_score(node: DesignNode) -> float:
        """How important the node's role in the page is likely to be."""
        name = node.name.lower()

        if "header" in name or "title" in name:
            return 1.0
        if "nav" in name or "menu" in name:
            return 0.9
        if "content" in name or "main" in name:
            return 0.8
        if "form" in name or "input" in name:
            return 0.7
        if "footer" in name or "aside" in name:
            return 0.5
        if node.type == NodeType.TEXT:
            return 0.6

        return 0.3

    @staticmethod
    def calculate_visual_weight(node: DesignNode) -> float:
        """Diagnostic score of visual prominence. Does not affect filtering."""
        weight = 0.0

        if node.bounds is not None:
            area = node.bounds.area
            if math.isfinite(area) and area > 0:
                weight += area / VISUAL_AREA_UNIT

        if node.fill_count > 0:
            weight += 0.2
        if node.stroke_count > 0:
            weight += 0.1
        if node.effect_count > 0:
            weight += 0.3
        if node.opacity < 1.0:
            weight += 0.1
        if node.is_component_like:
            weight += 0.5

        return min(weight, MAX_VISUAL_WEIGHT)

    def categorize(self, priority: float) -> ImportanceLevel:
        thresholds = self.config.thresholds

        if priority >= thresholds.critical:
            return ImportanceLevel.CRITICAL
        if priority >= thresholds.important:
            return ImportanceLevel.IMPORTANT
        if priority >= thresholds.standard:
            return ImportanceLevel.STANDARD
        return ImportanceLevel.OPTIONAL
