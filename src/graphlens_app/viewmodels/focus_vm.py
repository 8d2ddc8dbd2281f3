"""
Focus ViewModel - the imperative control surface of the graph engine.

Manages:
- Raw graph data (post-merge) and the scoped, normalized graph
- Team/user scopes, hidden-id denylists and the cross-team link policy
- Active node ids and the current focus request
- Quality preset
- Camera pose, the in-flight camera animation and per-frame view snapshots
- Hover highlights

The host calls the commands synchronously; visual settling (layout
relaxation, camera flight) happens on later `advance_frame()` calls.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from .base import BaseViewModel
from graphlens_core.config import AttributeKeys, DEFAULT_KEYS
from graphlens_core.domain.enums import AnimationState, FocusKind, InitialFocusType
from graphlens_core.domain.models import (
    CameraPose,
    FocusRequest,
    GraphNode,
    GraphSnapshot,
    Group,
    NormalizedGraph,
    Vec3,
    ViewSnapshot,
)
from graphlens_core.ports.layout_port import LayoutPort
from graphlens_core.services.animation import CameraAnimator
from graphlens_core.services.framing import bounding_box, compute_framing
from graphlens_core.services.merge import merge_graph
from graphlens_core.services.normalizer import normalize_graph
from graphlens_core.services.quality import DensePolicy, QualityManager, QualityPreset
from graphlens_core.services.scoping import apply_scopes, as_scope
from graphlens_core.services.search import DEFAULT_SEARCH_LIMIT, SearchService

logger = logging.getLogger(__name__)


@dataclass
class CameraSettings:
    """Initial camera state."""
    position: Vec3 = (220.0, 100.0, 300.0)
    target: Vec3 = (0.0, 0.0, 0.0)
    fov: float = 52.0                 # Vertical, degrees
    viewport_width: int = 1280
    viewport_height: int = 720


@dataclass
class InitialFocus:
    """Focus applied on the first load that yields nodes."""
    type: InitialFocusType = InitialFocusType.ALL
    group_id: Optional[str] = None
    node_ids: Tuple[str, ...] = ()


@dataclass
class GraphSettings:
    """Behavior switches."""
    show_cross_team_links: bool = True
    auto_focus_on_node_click: bool = True
    dim_inactive: bool = True
    initial_focus: InitialFocus = field(default_factory=InitialFocus)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class FocusVM(BaseViewModel):
    """
    ViewModel coordinating scoping, search and camera focus.

    Signals:
        graph_changed: Emitted after the scoped graph is rebuilt
        focus_changed(dict): `{"type": kind, "nodeIds": [...]}` on every
            accepted focus change
        scopes_changed: Emitted when scopes, denylists or link policy change
        quality_changed(str): Emitted with the new preset name
        camera_changed: Emitted when the camera pose moves
        hover_changed: Emitted when hover highlights change

    State:
        graph: Current NormalizedGraph
        active_node_ids: Ids of the current focus set
        focus_request: Last accepted FocusRequest (None before the first)
        camera_pose: Current camera position and look target
    """

    # Signals
    graph_changed = pyqtSignal()
    focus_changed = pyqtSignal(dict)
    scopes_changed = pyqtSignal()
    quality_changed = pyqtSignal(str)
    camera_changed = pyqtSignal()
    hover_changed = pyqtSignal()

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        groups: Optional[Iterable[Mapping[str, Any]]] = None,
        layout: Optional[LayoutPort] = None,
        settings: Optional[GraphSettings] = None,
        camera: Optional[CameraSettings] = None,
        keys: AttributeKeys = DEFAULT_KEYS,
        team_colors: Optional[Mapping[str, str]] = None,
        user_profiles: Optional[Mapping[str, Mapping[str, Any]]] = None,
        quality_mode: str = "balanced",
        dense_policy: Optional[DensePolicy] = None,
        team_scope: Optional[Iterable[str]] = None,
        user_scope: Optional[Iterable[str]] = None,
        clock: Optional[Callable[[], float]] = None,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize the ViewModel.

        Args:
            data: Raw graph `{nodes, links}`
            groups: Named focus targets `{id, label?, nodeIds}`
            layout: Layout service owning node positions (optional; without
                one, finite raw x/y/z are used as static positions)
            settings: Behavior switches
            camera: Initial camera state
            keys: Raw keys for team/document/user attributes
            team_colors: team id -> display color
            user_profiles: user id -> {"name": ...}
            quality_mode: Initial preset name
            dense_policy: Dense-graph override
            team_scope: Initial team scope (None = unrestricted)
            user_scope: Initial user scope (None = unrestricted)
            clock: Returns the current time in ms
            parent: Optional parent QObject
        """
        super().__init__(parent)

        self._layout = layout
        self._settings = settings or GraphSettings()
        self._keys = keys
        self._clock = clock or _monotonic_ms
        self._team_colors: Dict[str, str] = dict(team_colors or {})
        self._user_names: Dict[str, str] = {
            user_id: profile.get("name")
            for user_id, profile in (user_profiles or {}).items()
            if profile.get("name")
        }

        # Data
        self._raw: Dict[str, List[Dict[str, Any]]] = merge_graph(None, data)
        self._groups: Dict[str, Group] = {}
        self._graph = NormalizedGraph()
        self._search = SearchService()

        # Scopes
        self._team_scope: Optional[Set[str]] = as_scope(team_scope)
        self._user_scope: Optional[Set[str]] = as_scope(user_scope)
        self._hidden_team_ids: Set[str] = set()
        self._hidden_user_ids: Set[str] = set()

        # Focus
        self._active_node_ids: Tuple[str, ...] = ()
        self._focus_request: Optional[FocusRequest] = None
        self._sequence = 0
        self._initial_focus_done = False

        # Hover
        self._hover_node_id: Optional[str] = None
        self._highlight_node_ids: Set[str] = set()
        self._highlight_link_ids: Set[str] = set()

        # Camera
        camera = camera or CameraSettings()
        self._camera = CameraPose(position=tuple(camera.position), target=tuple(camera.target))
        self._fov = camera.fov
        self._viewport = (camera.viewport_width, camera.viewport_height)
        self._animator = CameraAnimator()
        self._last_view: Optional[ViewSnapshot] = None

        self._quality = QualityManager(layout, quality_mode, dense_policy)

        self.set_groups(groups or [])
        self._rebuild()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> NormalizedGraph:
        """Get the scoped, normalized graph."""
        return self._graph

    @property
    def raw_data(self) -> Dict[str, List[Dict[str, Any]]]:
        """Get the merged raw graph (before scoping)."""
        return self._raw

    @property
    def settings(self) -> GraphSettings:
        return self._settings

    @property
    def groups(self) -> List[Group]:
        return list(self._groups.values())

    @property
    def active_node_ids(self) -> Tuple[str, ...]:
        return self._active_node_ids

    @property
    def focus_request(self) -> Optional[FocusRequest]:
        return self._focus_request

    @property
    def sequence(self) -> int:
        """Sequence number of the last accepted focus request."""
        return self._sequence

    @property
    def team_scope(self) -> Optional[Set[str]]:
        return set(self._team_scope) if self._team_scope is not None else None

    @property
    def user_scope(self) -> Optional[Set[str]]:
        return set(self._user_scope) if self._user_scope is not None else None

    @property
    def quality_mode(self) -> str:
        return self._quality.mode.value

    @property
    def quality_preset(self) -> QualityPreset:
        """Active preset after the dense-graph override."""
        return self._quality.effective_preset()

    @property
    def camera_pose(self) -> CameraPose:
        return self._camera

    @property
    def aspect(self) -> float:
        width, height = self._viewport
        return width / max(height, 1)

    @property
    def animation_state(self) -> AnimationState:
        return self._animator.state

    @property
    def last_view(self) -> Optional[ViewSnapshot]:
        return self._last_view

    @property
    def hover_node_id(self) -> Optional[str]:
        return self._hover_node_id

    @property
    def highlighted_node_ids(self) -> Set[str]:
        return self._highlight_node_ids.copy()

    @property
    def highlighted_link_ids(self) -> Set[str]:
        return self._highlight_link_ids.copy()

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _rebuild(self) -> None:
        """Re-run scoping and normalization, then prune stale focus state."""
        scoped = apply_scopes(
            self._raw,
            team_scope=self._team_scope,
            user_scope=self._user_scope,
            hidden_team_ids=self._hidden_team_ids,
            hidden_user_ids=self._hidden_user_ids,
            show_cross_team_links=self._settings.show_cross_team_links,
            keys=self._keys,
        )
        self._graph = normalize_graph(scoped, self._keys, self._team_colors, self._user_names)
        self._search.set_graph(self._graph)
        self._quality.node_count = len(self._graph)

        known = self._graph.index_by_id
        self._active_node_ids = tuple(i for i in self._active_node_ids if i in known)
        if self._focus_request is not None:
            self._focus_request = FocusRequest(
                node_ids=tuple(i for i in self._focus_request.node_ids if i in known),
                kind=self._focus_request.kind,
                sequence=self._focus_request.sequence,
            )
        if self._hover_node_id is not None and self._hover_node_id not in known:
            self._set_hover(None)

        if self._layout is not None:
            self._layout.set_graph(self._graph, self.quality_preset.simulation_params())

        logger.info(
            "Graph rebuilt: %d nodes, %d links%s",
            len(self._graph), len(self._graph.links),
            " (dense)" if self._quality.is_dense else "",
        )
        self.graph_changed.emit()

        if not self._initial_focus_done and not self._graph.is_empty:
            self._initial_focus_done = True
            self._apply_initial_focus()

    def _apply_initial_focus(self) -> None:
        initial = self._settings.initial_focus
        if initial.type == InitialFocusType.GROUP and initial.group_id:
            if self.focus_group(initial.group_id):
                return
        if initial.type == InitialFocusType.NODES and initial.node_ids:
            if self.focus_nodes(initial.node_ids):
                return
        self.focus_all()

    def sanitize_node_ids(self, node_ids: Iterable[str]) -> List[str]:
        """
        Deduplicate ids and drop those not in the current graph.

        Returns:
            Ids in first-seen order
        """
        if isinstance(node_ids, str):
            node_ids = [node_ids]
        known = self._graph.index_by_id
        seen: Set[str] = set()
        sanitized: List[str] = []
        for node_id in node_ids:
            if node_id in known and node_id not in seen:
                seen.add(node_id)
                sanitized.append(node_id)
        return sanitized

    # -------------------------------------------------------------------------
    # Data Commands
    # -------------------------------------------------------------------------

    def set_data(self, data: Optional[Mapping[str, Any]]) -> None:
        """Replace the raw graph."""
        self._raw = merge_graph(None, data)
        self._rebuild()

    def upsert_data(self, patch: Optional[Mapping[str, Any]]) -> None:
        """
        Merge an incremental patch into the raw graph.

        Args:
            patch: `{nodes, links}`; missing collections count as empty
        """
        before = len(self._raw["nodes"])
        self._raw = merge_graph(self._raw, patch)
        logger.info("Upserted patch: %d new nodes", len(self._raw["nodes"]) - before)
        self._rebuild()

    def set_groups(self, groups: Iterable[Mapping[str, Any]]) -> None:
        """Replace the named focus targets."""
        self._groups = {}
        for g in groups:
            group = g if isinstance(g, Group) else Group.from_dict(g)
            self._groups[group.id] = group

    # -------------------------------------------------------------------------
    # Scope Commands
    # -------------------------------------------------------------------------

    def _scopes_updated(self, focus: bool) -> None:
        self._rebuild()
        self.scopes_changed.emit()
        if focus:
            self._focus(self._graph.node_ids(), FocusKind.ALL)

    def set_team_scope(self, team_ids: Iterable[str], focus: bool = False) -> None:
        """
        Restrict the graph to the given teams.

        Args:
            team_ids: Teams to keep
            focus: Frame the newly visible nodes afterwards
        """
        self._team_scope = as_scope(team_ids)
        logger.info("Team scope set to %s", self._team_scope)
        self._scopes_updated(focus)

    def clear_team_scope(self, focus: bool = False) -> None:
        self._team_scope = None
        logger.info("Team scope cleared")
        self._scopes_updated(focus)

    def set_user_scope(self, user_ids: Iterable[str], focus: bool = False) -> None:
        """Restrict the (team-scoped) graph to the given users."""
        self._user_scope = as_scope(user_ids)
        logger.info("User scope set to %s", self._user_scope)
        self._scopes_updated(focus)

    def clear_user_scope(self, focus: bool = False) -> None:
        self._user_scope = None
        logger.info("User scope cleared")
        self._scopes_updated(focus)

    def set_hidden_team_ids(self, team_ids: Iterable[str]) -> None:
        """Teams that are always filtered out, regardless of scope."""
        self._hidden_team_ids = set(as_scope(team_ids) or ())
        self._scopes_updated(False)

    def set_hidden_user_ids(self, user_ids: Iterable[str]) -> None:
        """Users that are always filtered out, regardless of scope."""
        self._hidden_user_ids = set(as_scope(user_ids) or ())
        self._scopes_updated(False)

    def set_show_cross_team_links(self, show: bool) -> None:
        if self._settings.show_cross_team_links != show:
            self._settings.show_cross_team_links = show
            self._scopes_updated(False)

    # -------------------------------------------------------------------------
    # Focus Commands
    # -------------------------------------------------------------------------

    def _focus(self, node_ids: Iterable[str], kind: FocusKind) -> bool:
        """
        Record a focus request and start the camera flight.

        Returns:
            False (and no state change) if no known ids remain
        """
        sanitized = self.sanitize_node_ids(node_ids)
        if not sanitized:
            logger.warning("Ignoring %s focus: no known node ids", kind.value)
            return False

        self._sequence += 1
        request = FocusRequest(node_ids=tuple(sanitized), kind=kind, sequence=self._sequence)
        self._focus_request = request
        self._active_node_ids = request.node_ids
        self._start_flight(request)

        logger.info("Focus %s #%d on %d nodes", kind.value, request.sequence, len(sanitized))
        self.focus_changed.emit({"type": kind.value, "nodeIds": list(request.node_ids)})
        return True

    def _positions(self) -> Dict[str, Optional[Vec3]]:
        if self._layout is not None:
            return self._layout.positions()
        positions: Dict[str, Optional[Vec3]] = {}
        for node in self._graph.nodes:
            try:
                positions[node.id] = (
                    float(node.attrs["x"]), float(node.attrs["y"]), float(node.attrs["z"])
                )
            except (KeyError, TypeError, ValueError):
                positions[node.id] = None
        return positions

    def _start_flight(self, request: FocusRequest) -> None:
        positions = self._positions()
        if self._layout is not None:
            bbox = self._layout.get_bbox(request.node_ids)
        else:
            bbox = bounding_box(request.node_ids, positions)

        framing = compute_framing(
            focus_ids=request.node_ids,
            kind=request.kind,
            camera_position=self._camera.position,
            camera_target=self._camera.target,
            positions=positions,
            weights={node.id: node.val for node in self._graph.nodes},
            bbox=bbox,
            aspect=self.aspect,
            vertical_fov=self._fov,
        )
        if framing is None:
            # No geometry yet; still invalidate any older flight
            logger.debug("Focus #%d has no positioned nodes; camera holds", request.sequence)
            self._animator.supersede(request.sequence)
            return
        self._animator.start(request.sequence, self._camera, framing, self._clock())

    def focus_all(self) -> bool:
        """Frame every node in the scoped graph."""
        return self._focus(self._graph.node_ids(), FocusKind.ALL)

    def focus_nodes(self, node_ids: Iterable[str]) -> bool:
        """Frame the given nodes; unknown ids are ignored."""
        return self._focus(node_ids, FocusKind.DEFAULT)

    def focus_group(self, group_id: str) -> bool:
        """
        Frame a named group.

        Returns:
            False if the group is unknown or none of its members is visible
        """
        group = self._groups.get(group_id)
        if group is None:
            logger.warning("Unknown group %r", group_id)
            return False
        return self._focus(group.node_ids, FocusKind.AREA)

    def _focus_matching(self, attr: str, value: Any, kind: FocusKind) -> bool:
        ids = [node.id for node in self._graph.nodes if getattr(node, attr) == value]
        if not ids:
            logger.warning("No nodes with %s=%r", attr, value)
            return False
        return self._focus(ids, kind)

    def focus_team(self, team_id: str) -> bool:
        return self._focus_matching("team_id", team_id, FocusKind.AREA)

    def focus_user(self, user_id: str) -> bool:
        return self._focus_matching("user_id", user_id, FocusKind.AREA)

    def focus_document(self, document_id: str) -> bool:
        return self._focus_matching("document_id", document_id, FocusKind.DEFAULT)

    def node_clicked(self, node_id: str) -> bool:
        """
        Handle a click on a node.

        With auto-focus enabled, frames the node and its neighbors.

        Returns:
            True if a focus was issued
        """
        node = self._graph.get_node(node_id)
        if node is None or not self._settings.auto_focus_on_node_click:
            return False
        related = [node.id] + [n.id for n in self._graph.neighbors_of(node.id)]
        return self._focus(related, FocusKind.NODE)

    # -------------------------------------------------------------------------
    # Hover
    # -------------------------------------------------------------------------

    def _set_hover(self, node: Optional[GraphNode]) -> None:
        if node is None:
            self._hover_node_id = None
            self._highlight_node_ids = set()
            self._highlight_link_ids = set()
        else:
            self._hover_node_id = node.id
            self._highlight_node_ids = {node.id} | {
                n.id for n in self._graph.neighbors_of(node.id)
            }
            self._highlight_link_ids = {
                link.id for link in self._graph.incident_links_of(node.id)
            }
        self.hover_changed.emit()

    def hover_node(self, node_id: Optional[str]) -> None:
        """Highlight a node, its neighbors and its links; None clears."""
        node = self._graph.get_node(node_id) if node_id is not None else None
        if node is None and self._hover_node_id is None:
            return
        if node is not None and node.id == self._hover_node_id:
            return
        self._set_hover(node)

    # -------------------------------------------------------------------------
    # Quality & Search
    # -------------------------------------------------------------------------

    def set_quality(self, name: str) -> bool:
        """
        Switch the quality preset.

        Returns:
            False if `name` is not a registered preset
        """
        if not self._quality.set_quality(name):
            return False
        self.quality_changed.emit(self._quality.mode.value)
        return True

    def search(
        self,
        query: str,
        limit: Optional[int] = DEFAULT_SEARCH_LIMIT,
        focus: bool = False,
    ) -> List[GraphNode]:
        """
        Substring search over node text.

        Args:
            query: Search query (case-insensitive)
            limit: Maximum results
            focus: Frame the results with a `search` focus

        Returns:
            Matching nodes in graph order
        """
        results = self._search.search(query, limit)
        if focus and results:
            self._focus([node.id for node in results], FocusKind.SEARCH)
        return results

    # -------------------------------------------------------------------------
    # Camera & Frames
    # -------------------------------------------------------------------------

    def set_viewport(self, width: int, height: int) -> None:
        self._set_if_changed("_viewport", (int(width), int(height)), self.camera_changed)

    def set_fov(self, fov: float) -> None:
        """Vertical field of view in degrees."""
        self._set_if_changed("_fov", float(fov), self.camera_changed)

    def set_camera_pose(self, position: Vec3, target: Vec3) -> None:
        """Report a camera moved by the host's orbit controls."""
        self._camera = CameraPose(position=tuple(position), target=tuple(target))
        self.camera_changed.emit()

    def advance_frame(self, now: Optional[float] = None) -> Optional[CameraPose]:
        """
        Per-frame tick: step the layout and the camera flight.

        Args:
            now: Current time in ms (clock() if None)

        Returns:
            The camera pose applied this frame, or None if idle
        """
        now = self._clock() if now is None else now
        if self._layout is not None:
            self._layout.tick()

        pose = self._animator.advance(now)
        if pose is not None:
            self._camera = pose
            self.camera_changed.emit()

        width, height = self._viewport
        self._last_view = ViewSnapshot(
            camera=self._camera.position,
            target=self._camera.target,
            fov=self._fov,
            aspect=self.aspect,
            viewport_width=width,
            viewport_height=height,
        )
        return pose

    def get_snapshot(self) -> GraphSnapshot:
        """Introspection: quality, scopes, focus state and the last view."""
        request = self._focus_request
        return GraphSnapshot(
            quality=self._quality.mode.value,
            team_scope=tuple(sorted(self._team_scope, key=str)) if self._team_scope is not None else None,
            user_scope=tuple(sorted(self._user_scope, key=str)) if self._user_scope is not None else None,
            active_node_ids=self._active_node_ids,
            focus_node_ids=request.node_ids if request else (),
            focus_kind=request.kind if request else None,
            sequence=self._sequence,
            view=self._last_view,
        )
