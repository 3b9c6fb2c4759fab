"""
Shared fixtures for the design extraction tests.
"""

from typing import Any, Dict, List, Optional

import pytest

from design_extraction.config import (
    CachingConfig,
    PerformanceOptimizationConfig,
    ProcessingConfig,
    StreamingConfig,
)
from design_extraction.models import BoundingBox, DesignNode, NodeType


def make_node(
    node_id: str,
    name: str = "Layer",
    node_type: NodeType = NodeType.RECTANGLE,
    x: float = 0.0,
    y: float = 0.0,
    width: float = 100.0,
    height: float = 100.0,
    visible: bool = True,
    children: Optional[List[DesignNode]] = None,
    **kwargs: Any,
) -> DesignNode:
    """Build a design node with sensible geometry defaults."""
    return DesignNode(
        id=node_id,
        name=name,
        type=node_type,
        bounds=BoundingBox(x=x, y=y, width=width, height=height),
        visible=visible,
        children=children or [],
        **kwargs,
    )


def fast_config(**processing: Any) -> PerformanceOptimizationConfig:
    """Configuration without delays so tests run quickly."""
    processing_options: Dict[str, Any] = {"timeout": 1.0, "retries": 2, "retry_base_delay": 0.0}
    processing_options.update(processing)
    return PerformanceOptimizationConfig(
        max_nodes=1000,
        streaming=StreamingConfig(enabled=True, batch_size=10, delay=0.0),
        caching=CachingConfig(enabled=True, ttl=60.0),
        processing=ProcessingConfig(**processing_options),
    )


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_nodes() -> List[DesignNode]:
    """A small page: header, navigation, content and decorative shapes."""
    return [
        make_node("1", "Page Header", NodeType.FRAME, width=1200, height=120),
        make_node("2", "Main Nav", NodeType.FRAME, y=120, width=1200, height=60),
        make_node("3", "Primary Button", NodeType.INSTANCE, x=40, y=300, width=160, height=48),
        make_node("4", "Body Text", NodeType.TEXT, x=40, y=400, width=600, height=200),
        make_node("5", "Decoration", NodeType.VECTOR, x=3000, y=3000, width=10, height=10, visible=False),
    ]


@pytest.fixture
def make_nodes():
    """Factory for n plain, identically shaped nodes."""

    def _make(count: int, prefix: str = "node") -> List[DesignNode]:
        return [make_node(f"{prefix}-{i}", f"Layer {i}") for i in range(count)]

    return _make
