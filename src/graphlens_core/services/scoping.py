"""
Scoping Pipeline - team and user filters over the raw graph.

Each filter is a pure function of (nodes, links, scope, hidden, policy).
Scoping runs team first, then user, so the user filter only ever sees
team-scoped nodes.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..config import AttributeKeys, DEFAULT_KEYS
from .normalizer import endpoint_id

logger = logging.getLogger(__name__)

RawNodes = List[Dict[str, Any]]
RawLinks = List[Dict[str, Any]]


def as_scope(ids: Optional[Iterable[str]]) -> Optional[Set[str]]:
    """Convert an iterable of ids into a scope set; None stays unrestricted."""
    if ids is None:
        return None
    if isinstance(ids, str):
        return {ids}
    return set(ids)


def _filter(
    nodes: Iterable[Mapping[str, Any]],
    links: Iterable[Mapping[str, Any]],
    key: str,
    scope: Optional[Set[str]],
    hidden: Set[str],
    show_cross_links: bool,
) -> Tuple[RawNodes, RawLinks]:
    nodes = list(nodes)
    links = list(links)

    if scope is None and not hidden and show_cross_links:
        return nodes, links

    kept: RawNodes = []
    attr_by_id: Dict[Any, Any] = {}
    for node in nodes:
        value = node.get(key)
        if value not in hidden and (scope is None or value in scope):
            kept.append(node)
            attr_by_id[node.get("id")] = value

    kept_links: RawLinks = []
    for link in links:
        source = endpoint_id(link.get("source"))
        target = endpoint_id(link.get("target"))
        if source not in attr_by_id or target not in attr_by_id:
            continue
        if not show_cross_links:
            if attr_by_id[source] != attr_by_id[target]:
                continue
        kept_links.append(link)

    return kept, kept_links


def filter_by_team(
    nodes: Iterable[Mapping[str, Any]],
    links: Iterable[Mapping[str, Any]],
    scope: Optional[Set[str]] = None,
    hidden: Optional[Set[str]] = None,
    show_cross_team_links: bool = True,
    key: str = DEFAULT_KEYS.team,
) -> Tuple[RawNodes, RawLinks]:
    """
    Keep nodes whose team is in scope and not hidden.

    Links survive when both endpoints survive and, unless cross-team links
    are shown, both endpoints belong to the same team.
    """
    return _filter(nodes, links, key, scope, hidden or set(), show_cross_team_links)


def filter_by_user(
    nodes: Iterable[Mapping[str, Any]],
    links: Iterable[Mapping[str, Any]],
    scope: Optional[Set[str]] = None,
    hidden: Optional[Set[str]] = None,
    key: str = DEFAULT_KEYS.user,
) -> Tuple[RawNodes, RawLinks]:
    """Keep nodes whose user is in scope and not hidden."""
    return _filter(nodes, links, key, scope, hidden or set(), True)


def apply_scopes(
    data: Optional[Mapping[str, Any]],
    team_scope: Optional[Set[str]] = None,
    user_scope: Optional[Set[str]] = None,
    hidden_team_ids: Optional[Set[str]] = None,
    hidden_user_ids: Optional[Set[str]] = None,
    show_cross_team_links: bool = True,
    keys: AttributeKeys = DEFAULT_KEYS,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Run the team filter, then the user filter.

    Returns:
        Scoped raw graph `{nodes, links}`; may be empty
    """
    data = data or {}
    nodes, links = filter_by_team(
        data.get("nodes") or [],
        data.get("links") or [],
        scope=team_scope,
        hidden=hidden_team_ids,
        show_cross_team_links=show_cross_team_links,
        key=keys.team,
    )
    nodes, links = filter_by_user(
        nodes,
        links,
        scope=user_scope,
        hidden=hidden_user_ids,
        key=keys.user,
    )
    logger.debug("Scoped graph: %d nodes, %d links", len(nodes), len(links))
    return {"nodes": nodes, "links": links}
