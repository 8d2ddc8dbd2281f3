"""
ForceLayout3D - reference implementation of the layout port.

A small deterministic force simulation:
1. Charge repulsion between every pair within `charge_distance_max`
2. Link springs with rest length base + strength * scale
3. Centering on the origin

Alpha decays every tick; the simulation cools down after the configured
number of ticks or wall time, whichever comes first.
"""

import logging
import math
import time
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from ..domain.models import BoundingBox, NormalizedGraph, Vec3
from ..ports.layout_port import LayoutPort, SimulationParams

logger = logging.getLogger(__name__)

ALPHA_MIN = 0.001
ALPHA_DECAY = 1 - ALPHA_MIN ** (1 / 300)
VELOCITY_DECAY = 0.4
INITIAL_RADIUS = 10.0
GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def _seed_position(raw: dict) -> Optional[np.ndarray]:
    try:
        pos = np.array([float(raw["x"]), float(raw["y"]), float(raw["z"])])
    except (KeyError, TypeError, ValueError):
        return None
    return pos if np.all(np.isfinite(pos)) else None


class ForceLayout3D(LayoutPort):
    """
    In-process 3D force layout.

    Args:
        clock: Returns the current time in ms (monotonic by default)
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or _monotonic_ms
        self._params = SimulationParams()
        self._ids: List[str] = []
        self._pos = np.zeros((0, 3))
        self._vel = np.zeros((0, 3))
        self._placed = np.zeros(0, dtype=bool)
        self._src = np.zeros(0, dtype=int)
        self._dst = np.zeros(0, dtype=int)
        self._rest = np.zeros(0)
        self._link_k = np.zeros(0)
        self._bias = np.zeros(0)
        self._strengths = np.zeros(0)
        self._alpha = 1.0
        self._ticks = 0
        self._started_at = self._clock()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def params(self) -> SimulationParams:
        return self._params

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def tick_count(self) -> int:
        """Ticks since the last reheat."""
        return self._ticks

    @property
    def is_cooled(self) -> bool:
        if self._ticks >= self._params.cooldown_ticks:
            return True
        if self._clock() - self._started_at >= self._params.cooldown_time:
            return True
        return self._alpha < ALPHA_MIN

    # -------------------------------------------------------------------------
    # LayoutPort
    # -------------------------------------------------------------------------

    def set_graph(self, graph: NormalizedGraph, params: SimulationParams) -> None:
        previous = {
            node_id: (self._pos[i], self._vel[i])
            for i, node_id in enumerate(self._ids)
            if self._placed[i]
        }

        n = len(graph.nodes)
        self._ids = graph.node_ids()
        self._pos = np.zeros((n, 3))
        self._vel = np.zeros((n, 3))
        self._placed = np.zeros(n, dtype=bool)

        for node in graph.nodes:
            kept = previous.get(node.id)
            if kept is not None:
                self._pos[node.index], self._vel[node.index] = kept
                self._placed[node.index] = True
                continue
            seeded = _seed_position(node.attrs)
            if seeded is not None:
                self._pos[node.index] = seeded
                self._placed[node.index] = True

        self._src = np.array([link.source_index for link in graph.links], dtype=int)
        self._dst = np.array([link.target_index for link in graph.links], dtype=int)
        strengths = np.array([link.strength for link in graph.links], dtype=float)

        degree = np.zeros(n)
        np.add.at(degree, self._src, 1)
        np.add.at(degree, self._dst, 1)
        if len(self._src):
            deg_s = degree[self._src]
            deg_t = degree[self._dst]
            self._link_k = 1.0 / np.maximum(np.minimum(deg_s, deg_t), 1)
            self._bias = deg_s / np.maximum(deg_s + deg_t, 1)
        else:
            self._link_k = np.zeros(0)
            self._bias = np.zeros(0)
        self._strengths = strengths

        logger.debug("Layout graph set: %d nodes, %d links (%d kept positions)",
                     n, len(self._src), len(previous))
        self.reheat(params)

    def reheat(self, params: SimulationParams) -> None:
        self._params = params
        if len(self._src):
            self._rest = params.link_distance_base + self._strengths * params.link_distance_scale
        else:
            self._rest = np.zeros(0)
        self._alpha = 1.0
        self._ticks = 0
        self._started_at = self._clock()

    def tick(self) -> bool:
        if self.is_cooled or not self._ids:
            return False

        self._place_new_nodes()
        self._apply_charge()
        self._apply_links()

        self._vel *= 1 - VELOCITY_DECAY
        self._pos += self._vel
        self._pos -= self._pos.mean(axis=0)

        self._alpha += (0.0 - self._alpha) * ALPHA_DECAY
        self._ticks += 1
        return True

    def positions(self) -> Dict[str, Optional[Vec3]]:
        return {
            node_id: (
                (float(self._pos[i, 0]), float(self._pos[i, 1]), float(self._pos[i, 2]))
                if self._placed[i] else None
            )
            for i, node_id in enumerate(self._ids)
        }

    def get_bbox(self, node_ids: Iterable[str]) -> Optional[BoundingBox]:
        wanted = set(node_ids)
        rows = [i for i, node_id in enumerate(self._ids) if node_id in wanted and self._placed[i]]
        if not rows:
            return None
        xyz = self._pos[rows]
        low = xyz.min(axis=0)
        high = xyz.max(axis=0)
        return BoundingBox(
            x=(float(low[0]), float(high[0])),
            y=(float(low[1]), float(high[1])),
            z=(float(low[2]), float(high[2])),
        )

    # -------------------------------------------------------------------------
    # Forces
    # -------------------------------------------------------------------------

    def _place_new_nodes(self) -> None:
        """Spread unplaced nodes on a deterministic spiral."""
        for i in np.flatnonzero(~self._placed):
            radius = INITIAL_RADIUS * math.cbrt(0.5 + i)
            roll = i * GOLDEN_ANGLE
            yaw = i * math.pi * 20 / (9 + math.sqrt(221))
            self._pos[i] = (
                radius * math.sin(roll) * math.cos(yaw),
                radius * math.cos(roll),
                radius * math.sin(roll) * math.sin(yaw),
            )
            self._placed[i] = True

    def _apply_charge(self) -> None:
        diff = self._pos[None, :, :] - self._pos[:, None, :]   # i -> j
        dist2 = (diff ** 2).sum(axis=2)
        np.fill_diagonal(dist2, np.inf)
        dist2 = np.maximum(dist2, 1.0)
        in_range = dist2 < self._params.charge_distance_max ** 2
        weight = np.where(in_range, self._params.charge_strength * self._alpha / dist2, 0.0)
        # Negative strength pushes i away from j
        self._vel += (diff * weight[:, :, None]).sum(axis=1)

    def _apply_links(self) -> None:
        if not len(self._src):
            return
        vec = (self._pos[self._dst] + self._vel[self._dst]) - (self._pos[self._src] + self._vel[self._src])
        dist = np.maximum(np.linalg.norm(vec, axis=1), 1e-6)
        stretch = (dist - self._rest) / dist * self._alpha * self._link_k
        delta = vec * stretch[:, None]
        np.add.at(self._vel, self._dst, -delta * self._bias[:, None])
        np.add.at(self._vel, self._src, delta * (1 - self._bias)[:, None])
