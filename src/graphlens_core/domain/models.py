"""
Domain models (DTOs) for GraphLens.

These are pure data classes with no rendering or layout dependencies.
Adjacency is stored as index lists into the owning graph's node and link
arrays rather than as object references.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple, Iterator

from .enums import FocusKind

Vec3 = Tuple[float, float, float]


@dataclass
class GraphNode:
    """A node in a normalized graph."""
    id: str
    index: int                   # Position in NormalizedGraph.nodes
    label: str = ""
    category: str = ""
    val: float = 1.0             # Visual weight, always >= 1
    team_id: Optional[str] = None
    document_id: Optional[str] = None
    user_id: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    summary: Optional[str] = None
    excerpt: Optional[str] = None
    color: Optional[str] = None

    # Derived by the pipeline
    display_color: Optional[str] = None
    display_uploader_name: Optional[str] = None
    neighbors: List[int] = field(default_factory=list)       # node indices
    incident_links: List[int] = field(default_factory=list)  # link indices

    # Raw input fields (sourceType, confidence, x/y/z, ...)
    attrs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GraphLink:
    """An undirected link between two nodes of a normalized graph."""
    id: str
    index: int
    source: str
    target: str
    source_index: int
    target_index: int
    relation: Optional[str] = None
    strength: float = 1.0
    color: Optional[str] = None
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> Tuple[str, str, Optional[str]]:
        """Identity used by the merge engine."""
        return (self.source, self.target, self.relation)


@dataclass
class NormalizedGraph:
    """Arena of nodes and links with an id index."""
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)
    index_by_id: Dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def has_node(self, node_id: Any) -> bool:
        return node_id in self.index_by_id

    def get_node(self, node_id: Any) -> Optional[GraphNode]:
        idx = self.index_by_id.get(node_id)
        return self.nodes[idx] if idx is not None else None

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def neighbors_of(self, node_id: str) -> List[GraphNode]:
        """Neighbor nodes, one entry per incident link."""
        node = self.get_node(node_id)
        if node is None:
            return []
        return [self.nodes[i] for i in node.neighbors]

    def incident_links_of(self, node_id: str) -> List[GraphLink]:
        node = self.get_node(node_id)
        if node is None:
            return []
        return [self.links[i] for i in node.incident_links]


@dataclass(frozen=True)
class Group:
    """A named focus target ("area")."""
    id: str
    label: str = ""
    node_ids: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Group":
        """Create from an `{id, label?, nodeIds}` dict."""
        return cls(
            id=d["id"],
            label=d.get("label", ""),
            node_ids=tuple(d.get("nodeIds") or d.get("node_ids") or ()),
        )


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounds as (min, max) pairs per axis."""
    x: Tuple[float, float]
    y: Tuple[float, float]
    z: Tuple[float, float]

    @property
    def center(self) -> Vec3:
        return (
            (self.x[0] + self.x[1]) / 2,
            (self.y[0] + self.y[1]) / 2,
            (self.z[0] + self.z[1]) / 2,
        )

    @property
    def spans(self) -> Vec3:
        return (
            self.x[1] - self.x[0],
            self.y[1] - self.y[0],
            self.z[1] - self.z[0],
        )


@dataclass(frozen=True)
class CameraPose:
    """Camera position plus the point it looks at."""
    position: Vec3
    target: Vec3


@dataclass(frozen=True)
class FocusRequest:
    """
    An instruction to frame a node subset.

    A request with a higher sequence always supersedes earlier ones.
    """
    node_ids: Tuple[str, ...]
    kind: FocusKind
    sequence: int


@dataclass(frozen=True)
class ViewSnapshot:
    """Read-only camera sample published once per frame."""
    camera: Vec3
    target: Vec3
    fov: float
    aspect: float
    viewport_width: int
    viewport_height: int
    captured_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": {"x": self.camera[0], "y": self.camera[1], "z": self.camera[2]},
            "target": {"x": self.target[0], "y": self.target[1], "z": self.target[2]},
            "fov": self.fov,
            "aspect": self.aspect,
            "viewport": {"width": self.viewport_width, "height": self.viewport_height},
            "capturedAt": self.captured_at,
        }


@dataclass(frozen=True)
class GraphSnapshot:
    """Introspection payload returned by get_snapshot()."""
    quality: str
    team_scope: Optional[Tuple[str, ...]]
    user_scope: Optional[Tuple[str, ...]]
    active_node_ids: Tuple[str, ...]
    focus_node_ids: Tuple[str, ...]
    focus_kind: Optional[FocusKind]
    sequence: int
    view: Optional[ViewSnapshot]
