# schemagraph/graph_engine/overlay.py

from collections import defaultdict
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel

from schemagraph.graph_engine.models import GraphEdge, GraphNode


class NodeOverlay(BaseModel):
    """Transient per-node UI state, kept by the rendering layer and keyed by node id."""
    is_selected: bool = False
    is_active: bool = False


def connected_anchors(edges: List[GraphEdge]) -> Dict[str, Set[str]]:
    """Node id -> anchors that at least one edge attaches to."""
    anchors: Dict[str, Set[str]] = defaultdict(set)
    for edge in edges:
        anchors[edge.source].add(edge.source_anchor)
        anchors[edge.target].add(edge.target_anchor)
    return dict(anchors)


def select(overlays: Dict[str, NodeOverlay], node_id: Optional[str]) -> Dict[str, NodeOverlay]:
    """Marks `node_id` as the only selected node, leaving other flags alone."""
    updated = {
        key: overlay.model_copy(update={"is_selected": key == node_id})
        for key, overlay in overlays.items()
    }
    if node_id is not None and node_id not in updated:
        updated[node_id] = NodeOverlay(is_selected=True)
    return updated


def render_payload(nodes: List[GraphNode], edges: List[GraphEdge],
                   overlays: Optional[Dict[str, NodeOverlay]] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Merges engine output with UI overlays into plain dictionaries for a
    rendering surface. Columns are display-sorted; engine objects are not touched.
    """
    overlays = overlays or {}
    anchors = connected_anchors(edges)

    rendered_nodes = []
    for node in nodes:
        overlay = overlays.get(node.id, NodeOverlay())
        rendered_nodes.append({
            "id": node.id,
            "category": node.category.value,
            "position": node.position.model_dump(),
            "table": {
                "name": node.table.name,
                "columns": [column.model_dump() for column in node.table.display_columns()],
            },
            "connectedAnchors": sorted(anchors.get(node.id, set())),
            "isSelected": overlay.is_selected,
            "isActive": overlay.is_active,
        })

    rendered_edges = [
        {
            "id": edge.id,
            "source": edge.source,
            "target": edge.target,
            "sourceAnchor": edge.source_anchor,
            "targetAnchor": edge.target_anchor,
            "label": edge.label,
            "relationshipCategory": edge.relationship_category.value,
        }
        for edge in edges
    ]
    return {"nodes": rendered_nodes, "edges": rendered_edges}
