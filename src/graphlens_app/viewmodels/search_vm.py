"""
Search ViewModel for the search panel.

Manages:
- Search query and results
- Result selection (selecting a row focuses that node)
"""

from dataclasses import dataclass, field
from typing import Optional, List
from PyQt6.QtCore import pyqtSignal

from .base import BaseViewModel
from .focus_vm import FocusVM
from graphlens_core.domain.models import GraphNode
from graphlens_core.services.search import DEFAULT_SEARCH_LIMIT


@dataclass
class SearchResultRow:
    """Pre-formatted search result row for display."""
    node_id: str
    label: str
    category: str
    team_id: Optional[str]
    document_id: Optional[str]
    uploader: Optional[str]
    excerpt: str                 # First 60 chars
    full_excerpt: Optional[str]  # Full text for tooltip
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_node(cls, node: GraphNode) -> "SearchResultRow":
        text = node.excerpt or node.summary or ""
        return cls(
            node_id=node.id,
            label=node.label or node.id,
            category=node.category,
            team_id=node.team_id,
            document_id=node.document_id,
            uploader=node.display_uploader_name or node.user_id,
            excerpt=text[:60],
            full_excerpt=text or None,
            tags=list(node.tags),
        )

    def format_tooltip(self) -> str:
        lines = [self.label]
        if self.document_id:
            lines.append(f"{self.team_id} · {self.document_id}")
        if self.uploader:
            lines.append(f"uploaded by {self.uploader}")
        if self.full_excerpt:
            lines.append(self.full_excerpt)
        return "\n".join(lines)


class SearchVM(BaseViewModel):
    """
    ViewModel for search functionality.

    Signals:
        results_changed: Emitted when search results change
        selection_changed(str): Emitted when the selected node changes ("" if none)

    State:
        query: Current search query
        results: List of SearchResultRow
        selected_node_id: Currently selected node (None if none)
    """

    # Signals
    results_changed = pyqtSignal()
    selection_changed = pyqtSignal(str)

    def __init__(self, focus_vm: FocusVM):
        """
        Initialize the ViewModel.

        Args:
            focus_vm: Controller that runs searches and focus requests
        """
        super().__init__()

        self._focus_vm = focus_vm

        # State
        self._query: str = ""
        self._results: List[SearchResultRow] = []
        self._selected_node_id: Optional[str] = None

        self._focus_vm.graph_changed.connect(self._on_graph_changed)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> List[SearchResultRow]:
        return self._results.copy()

    @property
    def result_count(self) -> int:
        return len(self._results)

    @property
    def selected_node_id(self) -> Optional[str]:
        return self._selected_node_id

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def search(self, query: str, limit: Optional[int] = DEFAULT_SEARCH_LIMIT, focus: bool = True) -> None:
        """
        Execute a search query.

        Args:
            query: The search query
            limit: Maximum number of results
            focus: Frame the results in the graph
        """
        self._query = query.strip()

        if not self._query:
            self.clear_results()
            return

        nodes = self._focus_vm.search(self._query, limit=limit, focus=focus)
        self._results = [SearchResultRow.from_node(node) for node in nodes]

        # Clear selection if no longer valid
        if self._selected_node_id is not None:
            if not any(r.node_id == self._selected_node_id for r in self._results):
                self._selected_node_id = None
                self.selection_changed.emit("")

        self.results_changed.emit()

    def clear_results(self) -> None:
        self._query = ""
        self._results = []
        self._selected_node_id = None
        self.results_changed.emit()
        self.selection_changed.emit("")

    def select_result(self, node_id: Optional[str]) -> bool:
        """
        Select a result and focus its node.

        Returns:
            True if the node was focused
        """
        if node_id is not None and not any(r.node_id == node_id for r in self._results):
            return False
        self._set_if_changed("_selected_node_id", node_id, self.selection_changed, node_id or "")
        if node_id is None:
            return False
        return self._focus_vm.focus_nodes([node_id])

    def get_result_ids(self) -> List[str]:
        return [r.node_id for r in self._results]

    def _on_graph_changed(self) -> None:
        """Drop rows whose nodes were scoped out."""
        graph = self._focus_vm.graph
        kept = [r for r in self._results if graph.has_node(r.node_id)]
        if len(kept) != len(self._results):
            self._results = kept
            if self._selected_node_id is not None and not graph.has_node(self._selected_node_id):
                self._selected_node_id = None
                self.selection_changed.emit("")
            self.results_changed.emit()
