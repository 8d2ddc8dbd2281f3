"""
Search Service - substring query over node text fields.

Matching is case-insensitive and preserves graph order; there is no
ranking.
"""

from typing import List, Optional

from ..domain.models import GraphNode, NormalizedGraph

DEFAULT_SEARCH_LIMIT = 50


def searchable_text(node: GraphNode) -> str:
    """Lowercased text blob a query is matched against."""
    parts = [
        node.label,
        node.category,
        node.summary,
        node.team_id,
        node.document_id,
        node.user_id,
        node.display_uploader_name,
        *node.tags,
    ]
    return " ".join(str(part) for part in parts if part).lower()


class SearchService:
    """
    Service for searching a normalized graph.

    Blobs are built lazily and cached per graph instance; give the service
    a new graph with `set_graph` whenever the pipeline re-runs.
    """

    def __init__(self, graph: Optional[NormalizedGraph] = None):
        """
        Initialize the search service.

        Args:
            graph: Graph to search (empty if None)
        """
        self._graph = graph or NormalizedGraph()
        self._blobs: Optional[List[str]] = None

    def set_graph(self, graph: NormalizedGraph) -> None:
        self._graph = graph
        self._blobs = None

    def _text_index(self) -> List[str]:
        if self._blobs is None:
            self._blobs = [searchable_text(node) for node in self._graph.nodes]
        return self._blobs

    def search(self, query: str, limit: Optional[int] = DEFAULT_SEARCH_LIMIT) -> List[GraphNode]:
        """
        Find nodes whose text contains `query`.

        Args:
            query: Search query; blank queries match nothing
            limit: Maximum results (None for the default)

        Returns:
            Matching nodes in graph order
        """
        if limit is None:
            limit = DEFAULT_SEARCH_LIMIT
        needle = (query or "").strip().lower()
        if not needle or limit <= 0:
            return []

        results: List[GraphNode] = []
        for node, blob in zip(self._graph.nodes, self._text_index()):
            if needle in blob:
                results.append(node)
                if len(results) >= limit:
                    break
        return results
