"""
Built-in extraction function.

Real deployments pass their own extraction callable to the optimizer; this
one summarizes a node from the data already on hand, which is enough to run
the whole pipeline locally.
"""

from typing import Any, Dict

from design_extraction.models import DesignNode


async def summarize_node(node: DesignNode) -> Dict[str, Any]:
    """Return a plain-dict record describing `node` without its subtree."""
    return {
        "id": node.id,
        "name": node.name,
        "type": node.type.value,
        "visible": node.visible,
        "bounds": node.bounds.model_dump() if node.bounds is not None else None,
        "fills": node.fill_count,
        "strokes": node.stroke_count,
        "effects": node.effect_count,
        "opacity": node.opacity,
        "child_count": len(node.children),
    }
