"""
Camera Framing - computes the camera pose that frames a node subset.

Pure geometry: identical inputs always give identical outputs. Node
positions are read from the layout service and never modified.

Steps:
1. Positioned focus nodes (finite x/y/z). With fewer than two, fall back
   to the layout's bounding box over the whole focus set.
2. Focus center: value-weighted centroid, or the bounding-box center.
3. Framing radius: farthest node distance plus its visual radius, or half
   the bounding-box diagonal.
4. Approach direction: away from the global centroid for area focus,
   otherwise a heuristic that stays on the camera's current side.
5. Fit distance from the limiting field of view, scaled per focus kind
   and clamped.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..domain.enums import FocusKind
from ..domain.models import BoundingBox, Vec3

MIN_AXIS_SPAN = 12.0
MIN_SPAN = 40.0
NODE_RADIUS_SCALE = 6.0
VIEWPORT_PADDING = 48.0
AREA_EXTRA_PADDING = 86.0
DEFAULT_DISTANCE_MULTIPLIER = 1.12
AREA_DISTANCE_MULTIPLIER = 1.32
MIN_DISTANCE = 120.0
MAX_DISTANCE = 1050.0
MIN_ASPECT = 0.2
MIN_HALF_FOV = 0.2              # radians
AREA_VERTICAL_BIAS = 2.2
FALLBACK_DIRECTION = (0.35, 0.3, 0.88)

# (id, position, weight)
WeightedPoint = Tuple[str, np.ndarray, float]


@dataclass(frozen=True)
class CameraFraming:
    """Result of framing a focus set."""
    position: Vec3
    target: Vec3
    direction: Vec3
    radius: float
    distance: float
    span: float                 # Largest focus extent, used to size the flight arc


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def is_finite_position(pos) -> bool:
    if pos is None:
        return False
    try:
        return len(pos) == 3 and all(math.isfinite(float(c)) for c in pos)
    except (TypeError, ValueError):
        return False


def visual_radius(val: float) -> float:
    """Rendered radius of a node of weight `val`."""
    return math.cbrt(max(val, 1.0)) * NODE_RADIUS_SCALE


def positioned_points(
    node_ids: Iterable[str],
    positions: Mapping[str, Optional[Vec3]],
    weights: Mapping[str, float],
) -> List[WeightedPoint]:
    """Nodes among `node_ids` that have a finite position."""
    points: List[WeightedPoint] = []
    for node_id in node_ids:
        pos = positions.get(node_id)
        if is_finite_position(pos):
            points.append((node_id, np.asarray(pos, dtype=float), weights.get(node_id, 1.0)))
    return points


def weighted_center(points: Sequence[WeightedPoint]) -> np.ndarray:
    """Centroid weighted by max(val, 1)."""
    w = np.array([max(val, 1.0) for _, _, val in points])
    xyz = np.array([pos for _, pos, _ in points])
    return (xyz * w[:, None]).sum(axis=0) / w.sum()


def framing_radius(points: Sequence[WeightedPoint], center: np.ndarray) -> float:
    """Smallest sphere around `center` containing every node's visual extent."""
    radius = 0.0
    for _, pos, val in points:
        radius = max(radius, float(np.linalg.norm(pos - center)) + visual_radius(val))
    return radius


def _axis_spans(points: Sequence[WeightedPoint]) -> np.ndarray:
    xyz = np.array([pos for _, pos, _ in points])
    return np.maximum(xyz.max(axis=0) - xyz.min(axis=0), MIN_AXIS_SPAN)


def _normalized(v: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(v)
    return v / length if length > 0 else v


def start_direction(camera_position: Vec3, camera_target: Vec3) -> np.ndarray:
    """Unit vector from the look target to the camera."""
    direction = np.asarray(camera_position, dtype=float) - np.asarray(camera_target, dtype=float)
    if direction.dot(direction) < 0.01:
        direction = np.array(FALLBACK_DIRECTION)
    return _normalized(direction)


def approach_direction(
    kind: FocusKind,
    focus_center: np.ndarray,
    spans: np.ndarray,
    from_target: np.ndarray,
    global_points: Sequence[WeightedPoint],
) -> np.ndarray:
    """
    Direction from the focus center towards the final camera position.

    Area focus looks at the region from outside the graph; every other kind
    keeps the camera on its current side and tilts towards the flattest axis.
    """
    if kind == FocusKind.AREA and len(global_points) >= 2:
        preferred = focus_center - weighted_center(global_points)
        if preferred.dot(preferred) < 0.01:
            preferred = from_target.copy()
        preferred[1] *= AREA_VERTICAL_BIAS
        return _normalized(preferred)

    x_span, y_span, z_span = spans
    return _normalized(np.array([
        (1 if from_target[0] >= 0 else -1) * (0.68 + x_span / (y_span + z_span + 1)),
        0.31 + y_span / (x_span + z_span + 1),
        (1 if from_target[2] >= 0 else -1) * (0.84 + z_span / (x_span + y_span + 1)),
    ]))


def fit_distance(radius: float, kind: FocusKind, aspect: float, vertical_fov: float) -> float:
    """
    Camera distance that fits a sphere of `radius` in view.

    Args:
        radius: Framing radius
        kind: Focus kind (area focus backs off further)
        aspect: Viewport width / height
        vertical_fov: Vertical field of view in degrees

    Returns:
        Distance clamped to [MIN_DISTANCE, MAX_DISTANCE]
    """
    v_fov = math.radians(vertical_fov)
    aspect = max(aspect, MIN_ASPECT)
    h_fov = 2 * math.atan(math.tan(v_fov / 2) * aspect)
    half_fov = max(min(v_fov, h_fov) / 2, MIN_HALF_FOV)
    distance = radius / math.sin(half_fov)

    if kind == FocusKind.AREA:
        distance = distance * AREA_DISTANCE_MULTIPLIER + VIEWPORT_PADDING + AREA_EXTRA_PADDING
    else:
        distance = distance * DEFAULT_DISTANCE_MULTIPLIER + VIEWPORT_PADDING
    return clamp(distance, MIN_DISTANCE, MAX_DISTANCE)


def compute_framing(
    focus_ids: Sequence[str],
    kind: FocusKind,
    camera_position: Vec3,
    camera_target: Vec3,
    positions: Mapping[str, Optional[Vec3]],
    weights: Mapping[str, float],
    bbox: Optional[BoundingBox],
    aspect: float,
    vertical_fov: float,
) -> Optional[CameraFraming]:
    """
    Compute the final camera pose for a focus request.

    Args:
        focus_ids: Sanitized focus node ids
        kind: Focus kind
        camera_position: Current camera position
        camera_target: Current look target
        positions: Position per node id for the whole graph
        weights: Visual weight per node id
        bbox: Layout bounding box over `focus_ids` (fallback geometry)
        aspect: Viewport aspect ratio
        vertical_fov: Vertical field of view in degrees

    Returns:
        CameraFraming, or None when no geometry is available yet
    """
    focus_points = positioned_points(focus_ids, positions, weights)
    use_nodes = len(focus_points) >= 2

    if use_nodes:
        center = weighted_center(focus_points)
        spans = _axis_spans(focus_points)
        radius = framing_radius(focus_points, center)
    elif bbox is not None:
        center = np.asarray(bbox.center, dtype=float)
        spans = np.maximum(np.asarray(bbox.spans, dtype=float), MIN_AXIS_SPAN)
        radius = float(np.linalg.norm(spans / 2))
    else:
        return None

    span = max(float(spans.max()), MIN_SPAN)
    from_target = start_direction(camera_position, camera_target)
    global_points = positioned_points(positions.keys(), positions, weights)
    direction = approach_direction(kind, center, spans, from_target, global_points)
    distance = fit_distance(radius, kind, aspect, vertical_fov)
    position = center + direction * distance

    return CameraFraming(
        position=tuple(float(c) for c in position),
        target=tuple(float(c) for c in center),
        direction=tuple(float(c) for c in direction),
        radius=radius,
        distance=distance,
        span=span,
    )


def bounding_box(
    node_ids: Iterable[str],
    positions: Mapping[str, Optional[Vec3]],
) -> Optional[BoundingBox]:
    """Axis-aligned bounds of the positioned nodes among `node_ids`."""
    xyz = [positions[i] for i in node_ids if is_finite_position(positions.get(i))]
    if not xyz:
        return None
    arr = np.asarray(xyz, dtype=float)
    low = arr.min(axis=0)
    high = arr.max(axis=0)
    return BoundingBox(
        x=(float(low[0]), float(high[0])),
        y=(float(low[1]), float(high[1])),
        z=(float(low[2]), float(high[2])),
    )
