"""
Layout port interface.

Defines the contract for the force-layout service that owns node
positions. GraphLens only reads positions; it never writes them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..domain.models import BoundingBox, NormalizedGraph, Vec3


@dataclass(frozen=True)
class SimulationParams:
    """Force parameters passed on reheat."""
    charge_strength: float = -80.0
    charge_distance_max: float = 420.0
    link_distance_base: float = 26.0
    link_distance_scale: float = 9.0
    cooldown_ticks: int = 160
    cooldown_time: int = 10000   # ms


class LayoutPort(ABC):
    """
    Abstract interface for the layout simulation.

    Positions may be missing or non-finite before the simulation settles.
    """

    @abstractmethod
    def set_graph(self, graph: NormalizedGraph, params: SimulationParams) -> None:
        """
        Replace the simulated graph and reheat.

        Args:
            graph: The normalized graph to lay out
            params: Force parameters to use
        """
        pass

    @abstractmethod
    def reheat(self, params: SimulationParams) -> None:
        """Restart the simulation with new parameters."""
        pass

    @abstractmethod
    def tick(self) -> bool:
        """
        Advance one simulation step.

        Returns:
            True if the simulation moved (not cooled down)
        """
        pass

    @abstractmethod
    def positions(self) -> Dict[str, Optional[Vec3]]:
        """Current position per node id (None if unset)."""
        pass

    @abstractmethod
    def get_bbox(self, node_ids: Iterable[str]) -> Optional[BoundingBox]:
        """
        Bounding region of the positioned nodes among `node_ids`.

        Returns:
            None if none of them has a finite position
        """
        pass
