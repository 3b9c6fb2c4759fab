# Config
"""
Configuration for the design extraction scheduler.

`Settings` holds process-level knobs read from the environment (logging and
the defaults used by the CLI). `PerformanceOptimizationConfig` is the
validated, per-optimizer configuration: every field has an explicit default
and invalid values fail at construction time.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

from design_extraction.models import FallbackStrategy

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


# =============================================================================
# Optimization configuration
# =============================================================================


class PriorityWeights(BaseModel):
    """Weights applied to each normalized priority factor. They need not sum to 1."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    size: float = Field(0.3, ge=0.0)
    position: float = Field(0.2, ge=0.0)
    visibility: float = Field(0.2, ge=0.0)
    interaction: float = Field(0.2, ge=0.0)
    semantic: float = Field(0.1, ge=0.0)


class PriorityThresholds(BaseModel):
    """Lower bounds of the critical, important and standard tiers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    critical: float = Field(0.8, ge=0.0, le=1.0)
    important: float = Field(0.6, ge=0.0, le=1.0)
    standard: float = Field(0.4, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_ordering(self) -> "PriorityThresholds":
        """Tiers must form ordered, non-overlapping bands."""
        if not (self.standard <= self.important <= self.critical):
            raise ValueError(
                "thresholds must satisfy standard <= important <= critical "
                f"(got standard={self.standard}, important={self.important}, critical={self.critical})"
            )
        return self


class PrioritizationConfig(BaseModel):
    """How node priority scores are computed and tiered."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    weights: PriorityWeights = Field(default_factory=PriorityWeights)
    thresholds: PriorityThresholds = Field(default_factory=PriorityThresholds)
    size_cap: float = Field(100_000.0, gt=0.0, description="Area at which the size factor saturates")
    position_range: float = Field(1_000.0, gt=0.0, description="Distance from origin at which the position factor reaches 0")


class StreamingConfig(BaseModel):
    """Batching of the retained node set."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    batch_size: int = Field(50, gt=0)
    delay: float = Field(0.1, ge=0.0, description="Seconds to wait between batches")
    # Accepted for compatibility; no behavior is attached to it.
    progressive: bool = True


class CachingConfig(BaseModel):
    """Per-node result cache."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    ttl: Optional[float] = Field(3600.0, gt=0.0, description="Seconds before a cached record expires; None never expires")
    max_entries: Optional[int] = Field(10_000, gt=0, description="LRU bound; None means unbounded")


class ProcessingConfig(BaseModel):
    """Per-node execution policy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    parallel: bool = True
    max_workers: int = Field(4, gt=0)
    timeout: float = Field(30.0, gt=0.0, description="Seconds allowed per extraction attempt")
    retries: int = Field(3, ge=0, description="Additional attempts after the first failure")
    retry_base_delay: float = Field(0.1, ge=0.0, description="Backoff base in seconds; attempt n waits base * 2**n")
    fallback: FallbackStrategy = FallbackStrategy.SIMPLIFY


class RecommendationThresholds(BaseModel):
    """Trigger points for post-run recommendations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_skip_ratio: float = Field(0.3, ge=0.0, le=1.0)
    max_average_node_time_ms: float = Field(100.0, ge=0.0)
    min_cache_hit_rate: float = Field(0.1, ge=0.0, le=1.0)
    max_error_rate: float = Field(0.05, ge=0.0, le=1.0)


class PerformanceOptimizationConfig(BaseModel):
    """Complete configuration of one extraction optimizer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_nodes: int = Field(1000, gt=0)
    prioritization: PrioritizationConfig = Field(default_factory=PrioritizationConfig)
    streaming: StreamingConfig = Field(default_factory=StreamingConfig)
    caching: CachingConfig = Field(default_factory=CachingConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    recommendations: RecommendationThresholds = Field(default_factory=RecommendationThresholds)


# =============================================================================
# Process settings
# =============================================================================


class Settings(BaseModel):
    """Process-wide settings, read from the environment on construction."""

    # Logging
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file_path: Optional[Path] = Field(default_factory=lambda: _env_optional_path("LOG_FILE_PATH"))
    structured_logging: bool = Field(default_factory=lambda: _env_bool("STRUCTURED_LOGGING", True))
    dev_mode: bool = Field(default_factory=lambda: _env_bool("DEV_MODE", False))

    # Optimizer defaults
    max_nodes: int = Field(default_factory=lambda: int(os.getenv("MAX_NODES", "1000")), gt=0)
    max_workers: int = Field(default_factory=lambda: int(os.getenv("MAX_WORKERS", "4")), gt=0)
    cache_ttl: float = Field(default_factory=lambda: float(os.getenv("CACHE_TTL", "3600")), gt=0)

    def get_log_file_path(self) -> Optional[Path]:
        """Return the log file path, creating its directory if needed."""
        if self.log_file_path is None:
            return None
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        return self.log_file_path

    def build_optimization_config(self, **overrides) -> PerformanceOptimizationConfig:
        """
        Build an optimizer configuration seeded from these settings.

        Args:
            **overrides: Top-level PerformanceOptimizationConfig fields to replace

        Returns:
            Validated optimization configuration
        """
        base = PerformanceOptimizationConfig(
            max_nodes=self.max_nodes,
            caching=CachingConfig(ttl=self.cache_ttl),
            processing=ProcessingConfig(max_workers=self.max_workers),
        )
        if not overrides:
            return base
        return PerformanceOptimizationConfig.model_validate({**base.model_dump(), **overrides})


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
