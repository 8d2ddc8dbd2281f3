"""
Graph visualization package.

Renderer-independent appearance rules for the 3D graph:
- Focus-aware node and link colors
- Visibility culling per quality preset
- Directional particle counts
"""

from .style_manager import StyleManager, GraphStyle, parse_color

__all__ = ["StyleManager", "GraphStyle", "parse_color"]
