"""
Graph Normalizer - builds the node/link arena and adjacency index.

Runs on every change to the scoped graph. Links whose endpoints are not
nodes of the input are dropped silently; streaming ingestion routinely
produces them.
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from ..config import AttributeKeys, DEFAULT_KEYS
from ..domain.models import GraphLink, GraphNode, NormalizedGraph

logger = logging.getLogger(__name__)

DEFAULT_LINK_COLOR = "rgba(111, 127, 220, 0.48)"

# Raw keys that map onto GraphNode fields
_NODE_FIELDS = ("id", "label", "category", "val", "tags", "summary", "excerpt", "color")


def endpoint_id(endpoint: Any) -> Any:
    """Resolve a link endpoint given as a bare id or an object with an id."""
    if isinstance(endpoint, Mapping):
        return endpoint.get("id")
    return endpoint


def _as_weight(value: Any) -> float:
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return 1.0
    return weight if math.isfinite(weight) and weight >= 1 else 1.0


def _as_strength(value: Any) -> float:
    if value is None:
        return 1.0
    try:
        strength = float(value)
    except (TypeError, ValueError):
        return 1.0
    return max(strength, 0.0) if math.isfinite(strength) else 1.0


def _build_node(
    raw: Dict[str, Any],
    index: int,
    keys: AttributeKeys,
    team_colors: Mapping[str, str],
    user_names: Mapping[str, str],
) -> GraphNode:
    team_id = raw.get(keys.team)
    user_id = raw.get(keys.user)
    tags = raw.get("tags") or []

    display_color = team_colors.get(team_id) if team_id is not None else None
    display_name = user_names.get(user_id) if user_id is not None else None

    return GraphNode(
        id=raw["id"],
        index=index,
        label=str(raw.get("label") or ""),
        category=str(raw.get("category") or ""),
        val=_as_weight(raw.get("val", 1)),
        team_id=team_id,
        document_id=raw.get(keys.document),
        user_id=user_id,
        tags=[str(tag) for tag in tags],
        summary=raw.get("summary"),
        excerpt=raw.get("excerpt"),
        color=raw.get("color"),
        display_color=display_color or raw.get("color"),
        display_uploader_name=display_name or raw.get(keys.user_display_name),
        attrs={k: v for k, v in raw.items() if k not in _NODE_FIELDS},
    )


def normalize_graph(
    data: Optional[Mapping[str, Any]],
    keys: AttributeKeys = DEFAULT_KEYS,
    team_colors: Optional[Mapping[str, str]] = None,
    user_names: Optional[Mapping[str, str]] = None,
) -> NormalizedGraph:
    """
    Build a normalized graph from raw `{nodes, links}`.

    Args:
        data: Raw graph; missing collections are treated as empty
        keys: Raw keys for team/document/user attributes
        team_colors: team id -> display color
        user_names: user id -> display name

    Returns:
        NormalizedGraph with fresh adjacency; nodes with duplicate ids keep
        their first occurrence
    """
    data = data or {}
    team_colors = team_colors or {}
    user_names = user_names or {}

    graph = NormalizedGraph()

    for raw in data.get("nodes") or []:
        if not isinstance(raw, Mapping) or raw.get("id") is None:
            continue
        if raw["id"] in graph.index_by_id:
            continue
        node = _build_node(dict(raw), len(graph.nodes), keys, team_colors, user_names)
        graph.index_by_id[node.id] = node.index
        graph.nodes.append(node)

    dropped = 0
    for raw in data.get("links") or []:
        if not isinstance(raw, Mapping):
            dropped += 1
            continue
        source = endpoint_id(raw.get("source"))
        target = endpoint_id(raw.get("target"))
        src_idx = graph.index_by_id.get(source)
        dst_idx = graph.index_by_id.get(target)
        if src_idx is None or dst_idx is None:
            dropped += 1
            continue

        index = len(graph.links)
        link = GraphLink(
            id=str(raw.get("id") or f"link-{index}"),
            index=index,
            source=source,
            target=target,
            source_index=src_idx,
            target_index=dst_idx,
            relation=raw.get("relation"),
            strength=_as_strength(raw.get("strength")),
            color=raw.get("color") or DEFAULT_LINK_COLOR,
            attrs={
                k: v for k, v in raw.items()
                if k not in ("id", "source", "target", "relation", "strength", "color")
            },
        )
        graph.links.append(link)

        source_node = graph.nodes[src_idx]
        source_node.neighbors.append(dst_idx)
        source_node.incident_links.append(index)
        if dst_idx != src_idx:
            target_node = graph.nodes[dst_idx]
            target_node.neighbors.append(src_idx)
            target_node.incident_links.append(index)

    if dropped:
        logger.debug("Dropped %d links with missing endpoints", dropped)

    return graph
