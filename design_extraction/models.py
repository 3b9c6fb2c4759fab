"""
Core data models for the design extraction scheduler.

Design nodes and recommendations are Pydantic models so that trees loaded
from JSON are validated once on the way in. Per-run bookkeeping that is
mutated while a run is in flight (priority wrappers, counters) uses plain
dataclasses.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================


class NodeType(str, Enum):
    """Kinds of nodes found in a design document tree."""

    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    VECTOR = "VECTOR"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    STAR = "STAR"
    LINE = "LINE"
    ELLIPSE = "ELLIPSE"
    REGULAR_POLYGON = "REGULAR_POLYGON"
    RECTANGLE = "RECTANGLE"
    TEXT = "TEXT"
    SLICE = "SLICE"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"
    STICKY = "STICKY"
    SHAPE_WITH_TEXT = "SHAPE_WITH_TEXT"
    CONNECTOR = "CONNECTOR"
    WIDGET = "WIDGET"
    EMBED = "EMBED"
    LINK_UNFURL = "LINK_UNFURL"
    MEDIA = "MEDIA"
    SECTION = "SECTION"
    TABLE = "TABLE"
    TABLE_CELL = "TABLE_CELL"
    HIGHLIGHT = "HIGHLIGHT"
    WASHI_TAPE = "WASHI_TAPE"
    CODE_BLOCK = "CODE_BLOCK"
    STAMP = "STAMP"
    # Any kind not listed above
    UNKNOWN = "UNKNOWN"


class ImportanceLevel(str, Enum):
    """Priority tiers, from most to least important."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    STANDARD = "standard"
    OPTIONAL = "optional"


# Retention order used by the budget filter
IMPORTANCE_ORDER = (
    ImportanceLevel.CRITICAL,
    ImportanceLevel.IMPORTANT,
    ImportanceLevel.STANDARD,
    ImportanceLevel.OPTIONAL,
)


class FallbackStrategy(str, Enum):
    """What to do with a node whose extraction failed after all retries."""

    SKIP = "skip"
    SIMPLIFY = "simplify"
    USE_CACHE = "use_cache"
    PROPAGATE = "propagate"


class RecommendationType(str, Enum):
    """Area a performance recommendation is about."""

    OPTIMIZATION = "optimization"
    PERFORMANCE = "performance"
    CACHING = "caching"
    RELIABILITY = "reliability"
    MEMORY = "memory"


class RecommendationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EffortLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Design tree
# =============================================================================


class BoundingBox(BaseModel):
    """Absolute bounding box of a node in document coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def area(self) -> float:
        return self.width * self.height


class DesignNode(BaseModel):
    """
    One element of the design document tree.

    Decoration lists (fills, strokes, effects) are only ever counted, so a
    list given on input is reduced to its length. Children are owned
    exclusively by their parent; the document format guarantees there are no
    cycles.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Unique node identifier")
    name: str = Field("", description="Layer name")
    type: NodeType = Field(NodeType.FRAME, description="Node kind")
    bounds: Optional[BoundingBox] = Field(None, alias="absoluteBoundingBox")
    visible: bool = True
    fill_count: int = Field(0, ge=0, alias="fills")
    stroke_count: int = Field(0, ge=0, alias="strokes")
    effect_count: int = Field(0, ge=0, alias="effects")
    opacity: float = Field(1.0, ge=0.0, le=1.0)
    children: List["DesignNode"] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_unknown_type(cls, v: Any) -> Any:
        """Map node kinds this package does not know about to UNKNOWN."""
        if isinstance(v, str) and not isinstance(v, NodeType):
            try:
                return NodeType(v)
            except ValueError:
                return NodeType.UNKNOWN
        return v

    @field_validator("fill_count", "stroke_count", "effect_count", mode="before")
    @classmethod
    def count_decorations(cls, v: Any) -> Any:
        """Accept either a count or the raw decoration list."""
        if v is None:
            return 0
        if isinstance(v, (list, tuple)):
            return len(v)
        return v

    @property
    def is_component_like(self) -> bool:
        return self.type in (NodeType.COMPONENT, NodeType.INSTANCE)


DesignNode.model_rebuild()


# =============================================================================
# Prioritization
# =============================================================================


@dataclass(frozen=True)
class PriorityNode:
    """A design node annotated with its priority for the current run."""

    node: DesignNode
    priority: float  # 0-1
    visual_weight: float  # 0-2, diagnostic only
    importance: ImportanceLevel

    @property
    def node_id(self) -> str:
        return self.node.id


# =============================================================================
# Run statistics and results
# =============================================================================


@dataclass
class ProcessingStats:
    """Counters for one optimization run."""

    total_nodes: int = 0
    processed_nodes: int = 0  # attempted: success, cache hit or fallback
    skipped_nodes: int = 0  # dropped by the budget filter, never attempted
    cached_nodes: int = 0  # subset of processed served from cache
    error_count: int = 0  # subset of processed that exhausted retries
    processing_time_ms: float = 0.0
    average_node_time_ms: float = 0.0

    @property
    def skip_ratio(self) -> float:
        if self.total_nodes == 0:
            return 0.0
        return self.skipped_nodes / self.total_nodes

    @property
    def cache_hit_rate(self) -> float:
        if self.processed_nodes == 0:
            return 0.0
        return self.cached_nodes / self.processed_nodes

    @property
    def error_rate(self) -> float:
        if self.processed_nodes == 0:
            return 0.0
        return self.error_count / self.processed_nodes

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PerformanceRecommendation(BaseModel):
    """An actionable suggestion derived from run statistics."""

    model_config = ConfigDict(frozen=True)

    type: RecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    impact: str
    effort: EffortLevel


@dataclass
class OptimizationResult:
    """Everything one optimization run produces."""

    results: List[Any]
    performance: ProcessingStats
    recommendations: List[PerformanceRecommendation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": self.results,
            "performance": self.performance.to_dict(),
            "recommendations": [r.model_dump(mode="json") for r in self.recommendations],
        }


# =============================================================================
# Monitoring snapshot
# =============================================================================


class MemoryUsage(BaseModel):
    """Resident and virtual memory of the current process."""

    rss_bytes: int = 0
    vms_bytes: int = 0
    percent: float = 0.0


class PerformanceMetrics(BaseModel):
    """Aggregated view over the recent metric window."""

    timing: Dict[str, float] = Field(default_factory=dict, description="Average milliseconds per timed operation")
    memory: MemoryUsage = Field(default_factory=MemoryUsage)
    throughput: float = Field(0.0, description="Extraction-related metrics per minute")
    cache_hit_rate: float = Field(0.0, ge=0.0, le=1.0)
    error_rate: float = Field(0.0, ge=0.0)
    api_call_count: int = Field(0, ge=0)
    metric_count: int = Field(0, ge=0, description="Metrics inside the window")
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
