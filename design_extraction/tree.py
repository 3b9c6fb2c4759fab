"""
Helpers for turning a nested design tree into the flat node list the
optimizer works on.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError

from design_extraction.models import DesignNode
from design_extraction.utils.errors import TreeLoadError
from design_extraction.utils.logging import get_logger

logger = get_logger(__name__)


def iter_nodes(
    roots: Iterable[DesignNode],
    include_hidden: bool = True,
    max_depth: Optional[int] = None,
) -> Iterator[DesignNode]:
    """
    Walk the trees under `roots` in pre-order.

    Uses an explicit stack so very deep trees do not hit the recursion limit.

    Args:
        roots: Top-level nodes
        include_hidden: When False, hidden nodes and their subtrees are skipped
        max_depth: Deepest level to yield, roots being depth 0; None for no limit
    """
    stack = [(root, 0) for root in reversed(list(roots))]
    while stack:
        node, depth = stack.pop()
        if not include_hidden and not node.visible:
            continue

        yield node

        if max_depth is None or depth < max_depth:
            stack.extend((child, depth + 1) for child in reversed(node.children))


def flatten_nodes(
    roots: Iterable[DesignNode],
    include_hidden: bool = True,
    max_depth: Optional[int] = None,
) -> List[DesignNode]:
    """Return every node under `roots` as a flat, pre-ordered list."""
    return list(iter_nodes(roots, include_hidden=include_hidden, max_depth=max_depth))


def count_nodes(roots: Iterable[DesignNode]) -> int:
    return sum(1 for _ in iter_nodes(roots))


def parse_nodes(payload: Any) -> List[DesignNode]:
    """
    Build design nodes from already-decoded JSON data.

    Accepts a list of node objects, ``{"nodes": [...]}``, ``{"document": {...}}``
    or a single node object.
    """
    if isinstance(payload, dict):
        if "nodes" in payload:
            payload = payload["nodes"]
        elif "document" in payload:
            payload = [payload["document"]]
        else:
            payload = [payload]

    if not isinstance(payload, list):
        raise ValueError(f"expected a list of nodes, got {type(payload).__name__}")

    return [DesignNode.model_validate(item) for item in payload]


def load_nodes(path: Union[str, Path]) -> List[DesignNode]:
    """
    Read design nodes from a JSON file.

    Args:
        path: JSON file holding nodes in any shape parse_nodes() accepts

    Returns:
        The root nodes, with their children attached

    Raises:
        TreeLoadError: If the file cannot be read, decoded or validated
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        roots = parse_nodes(payload)
    except OSError as e:
        raise TreeLoadError(str(path), f"cannot read file ({e})") from e
    except json.JSONDecodeError as e:
        raise TreeLoadError(str(path), f"invalid JSON ({e})") from e
    except (ValidationError, ValueError) as e:
        raise TreeLoadError(str(path), str(e)) from e

    logger.info(f"Loaded {len(roots)} root node(s) from {path}")
    return roots
