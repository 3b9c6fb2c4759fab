"""
Tests for configuration module.
"""

import pytest
from pydantic import ValidationError

from design_extraction.config import (
    CachingConfig,
    PerformanceOptimizationConfig,
    PriorityThresholds,
    ProcessingConfig,
    Settings,
    StreamingConfig,
    get_settings,
    reset_settings,
)
from design_extraction.models import FallbackStrategy


class TestOptimizationConfig:
    """Test the validated optimizer configuration."""

    def test_defaults(self):
        """Test default configuration values."""
        config = PerformanceOptimizationConfig()

        assert config.max_nodes == 1000
        assert config.prioritization.weights.size == 0.3
        assert config.prioritization.thresholds.critical == 0.8
        assert config.streaming.batch_size == 50
        assert config.caching.enabled is True
        assert config.processing.max_workers == 4
        assert config.processing.retries == 3
        assert config.processing.fallback == FallbackStrategy.SIMPLIFY

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: PerformanceOptimizationConfig(max_nodes=0),
            lambda: ProcessingConfig(max_workers=0),
            lambda: ProcessingConfig(max_workers=-2),
            lambda: ProcessingConfig(timeout=0),
            lambda: ProcessingConfig(retries=-1),
            lambda: StreamingConfig(batch_size=0),
            lambda: StreamingConfig(delay=-0.5),
            lambda: CachingConfig(ttl=0),
        ],
    )
    def test_invalid_values_fail_at_construction(self, factory):
        """Test that invalid values are rejected eagerly."""
        with pytest.raises(ValidationError):
            factory()

    def test_threshold_ordering(self):
        """Test that tier thresholds must be ordered."""
        with pytest.raises(ValidationError, match="standard <= important <= critical"):
            PriorityThresholds(critical=0.5, important=0.6, standard=0.4)

    def test_fallback_from_string(self):
        """Test parsing the fallback strategy from its string value."""
        config = ProcessingConfig(fallback="use_cache")
        assert config.fallback is FallbackStrategy.USE_CACHE

        with pytest.raises(ValidationError):
            ProcessingConfig(fallback="retry-forever")

    def test_unknown_fields_rejected(self):
        """Test that typos in configuration keys are caught."""
        with pytest.raises(ValidationError):
            StreamingConfig(batchsize=10)

    def test_cache_without_expiry(self):
        """Test that the TTL and LRU bound can be disabled."""
        config = CachingConfig(ttl=None, max_entries=None)
        assert config.ttl is None
        assert config.max_entries is None


class TestSettings:
    """Test the Settings configuration class."""

    def test_default_settings(self, monkeypatch):
        """Test default settings initialization."""
        for name in ("LOG_LEVEL", "LOG_FILE_PATH", "MAX_NODES", "MAX_WORKERS", "CACHE_TTL", "DEV_MODE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.log_file_path is None
        assert settings.dev_mode is False
        assert settings.max_nodes == 1000
        assert settings.max_workers == 4
        assert settings.cache_ttl == 3600.0

    def test_settings_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("MAX_NODES", "250")
        monkeypatch.setenv("MAX_WORKERS", "8")
        monkeypatch.setenv("DEV_MODE", "true")

        settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.max_nodes == 250
        assert settings.max_workers == 8
        assert settings.dev_mode is True

    def test_build_optimization_config(self):
        """Test seeding the optimizer configuration from settings."""
        settings = Settings(max_nodes=300, max_workers=2, cache_ttl=120.0)

        config = settings.build_optimization_config()

        assert config.max_nodes == 300
        assert config.processing.max_workers == 2
        assert config.caching.ttl == 120.0

    def test_build_optimization_config_overrides(self):
        """Test that overrides replace whole sections and are validated."""
        settings = Settings(max_nodes=300)

        config = settings.build_optimization_config(
            processing=ProcessingConfig(parallel=False, retries=0),
        )
        assert config.max_nodes == 300
        assert config.processing.parallel is False
        assert config.processing.retries == 0

        with pytest.raises(ValidationError):
            settings.build_optimization_config(max_nodes=0)

    def test_log_file_path_creation(self, tmp_path):
        """Test log file path directory creation."""
        log_path = tmp_path / "logs" / "test.log"
        settings = Settings(log_file_path=log_path)

        assert not log_path.parent.exists()

        result = settings.get_log_file_path()

        assert result == log_path
        assert log_path.parent.exists()

    def test_get_settings_singleton(self):
        """Test that get_settings returns the same instance."""
        reset_settings()
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        reset_settings()
        assert get_settings() is not settings1
