"""
Data Merge Engine - upserts incremental patches into the raw graph.

Nodes are matched by id and links by (source, target, relation). Patch
fields overwrite base fields shallowly; the last writer wins.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .normalizer import endpoint_id

logger = logging.getLogger(__name__)

LinkKey = Tuple[Any, Any, Any]


def link_key(link: Mapping[str, Any]) -> LinkKey:
    """Identity of a raw link."""
    return (
        endpoint_id(link.get("source")),
        endpoint_id(link.get("target")),
        link.get("relation"),
    )


def _collection(data: Optional[Mapping[str, Any]], name: str) -> List[Mapping[str, Any]]:
    if not isinstance(data, Mapping):
        return []
    items = data.get(name)
    if not isinstance(items, (list, tuple)):
        return []
    return [item for item in items if isinstance(item, Mapping)]


def merge_graph(
    base: Optional[Mapping[str, Any]],
    patch: Optional[Mapping[str, Any]],
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Merge `patch` into `base` without mutating either.

    Existing entries keep their position; new ones are appended in patch
    order. Malformed patches contribute nothing.
    """
    nodes: List[Dict[str, Any]] = []
    node_pos: Dict[Any, int] = {}
    for node in _collection(base, "nodes"):
        node_id = node.get("id")
        if node_id in node_pos:
            nodes[node_pos[node_id]].update(node)
            continue
        node_pos[node_id] = len(nodes)
        nodes.append(dict(node))

    links: List[Dict[str, Any]] = []
    link_pos: Dict[LinkKey, int] = {}
    for link in _collection(base, "links"):
        key = link_key(link)
        if key in link_pos:
            links[link_pos[key]].update(link)
            continue
        link_pos[key] = len(links)
        links.append(dict(link))

    added_nodes = updated_nodes = 0
    for node in _collection(patch, "nodes"):
        node_id = node.get("id")
        if node_id is None:
            continue
        if node_id in node_pos:
            nodes[node_pos[node_id]].update(node)
            updated_nodes += 1
        else:
            node_pos[node_id] = len(nodes)
            nodes.append(dict(node))
            added_nodes += 1

    added_links = 0
    for link in _collection(patch, "links"):
        key = link_key(link)
        if key in link_pos:
            links[link_pos[key]].update(link)
        else:
            link_pos[key] = len(links)
            links.append(dict(link))
            added_links += 1

    logger.debug(
        "Merged patch: %d nodes added, %d updated, %d links added",
        added_nodes, updated_nodes, added_links,
    )
    return {"nodes": nodes, "links": links}
