"""
Ports (interfaces) for GraphLens.

These define the contracts that adapters must implement.
This enables dependency injection and testing with fakes.
"""

from .layout_port import LayoutPort, SimulationParams

__all__ = ["LayoutPort", "SimulationParams"]
