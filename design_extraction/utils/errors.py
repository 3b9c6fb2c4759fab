"""
Custom exceptions for the design extraction scheduler.

This module defines the exceptions raised while prioritizing, filtering and
extracting design-tree nodes, so callers can tell configuration problems
apart from per-node extraction failures.
"""

from typing import Any, Optional


class DesignExtractionError(Exception):
    """Base exception for all design-extraction errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(DesignExtractionError):
    """Configuration error."""

    pass


# =============================================================================
# Node Processing Exceptions
# =============================================================================


class NodeProcessingError(DesignExtractionError):
    """Base exception for per-node processing errors."""

    def __init__(self, node_id: str, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, {"node_id": node_id, **(details or {})})
        self.node_id = node_id


class NodeExtractionTimeoutError(NodeProcessingError):
    """Extraction of a single node did not finish in time."""

    def __init__(self, node_id: str, timeout: float) -> None:
        """Initialize with timeout information."""
        message = f"Extraction of node '{node_id}' timed out after {timeout} seconds"
        super().__init__(node_id, message, {"timeout": timeout})
        self.timeout = timeout


class NodeExtractionFailedError(NodeProcessingError):
    """Extraction of a node failed after exhausting all retries."""

    def __init__(self, node_id: str, attempts: int, error: BaseException) -> None:
        """Initialize with attempt count and the last underlying error."""
        message = f"Extraction of node '{node_id}' failed after {attempts} attempt(s): {error}"
        super().__init__(
            node_id,
            message,
            {"attempts": attempts, "error_type": type(error).__name__},
        )
        self.attempts = attempts
        self.error = error


# =============================================================================
# Tree Loading Exceptions
# =============================================================================


class TreeLoadError(DesignExtractionError):
    """A design tree could not be read or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        """Initialize with the source path and failure reason."""
        message = f"Could not load design tree from '{source}': {reason}"
        super().__init__(message, {"source": source})
