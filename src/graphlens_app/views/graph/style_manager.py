"""
Style manager for graph visualization.

Centralizes node/link colors, widths, opacities, visibility culling and
directional particle counts. Rules depend on the focus set, hover
highlights and the active quality preset; the renderer only draws.
"""

from dataclasses import dataclass, field
from typing import Collection, Optional

from PyQt6.QtGui import QColor

from graphlens_core.domain.models import GraphLink, GraphNode
from graphlens_core.services.framing import visual_radius
from graphlens_core.services.quality import QualityPreset
from graphlens_app.viewmodels.focus_vm import GraphSettings


def parse_color(value: str) -> QColor:
    """Parse `#rrggbb`, named colors and CSS `rgba(r, g, b, a)` strings."""
    text = value.strip()
    if text.startswith("rgba(") and text.endswith(")"):
        r, g, b, a = (part.strip() for part in text[5:-1].split(","))
        color = QColor(int(r), int(g), int(b))
        color.setAlphaF(float(a))
        return color
    return QColor(text)


@dataclass
class GraphStyle:
    """All styling parameters for the graph."""

    background: QColor = field(default_factory=lambda: QColor("#07122e"))

    # Nodes
    node_color: QColor = field(default_factory=lambda: QColor("#8ad4ff"))
    hover_color: QColor = field(default_factory=lambda: QColor("#ffffff"))
    highlight_color: QColor = field(default_factory=lambda: QColor("#ffe082"))
    dimmed_node_color: QColor = field(default_factory=lambda: parse_color("rgba(109, 120, 157, 0.42)"))
    node_opacity_focused: float = 0.9
    node_opacity: float = 0.96

    # Links
    link_color: QColor = field(default_factory=lambda: parse_color("rgba(111, 127, 220, 0.48)"))
    active_link_color: QColor = field(default_factory=lambda: parse_color("rgba(175, 194, 255, 0.74)"))
    highlight_link_color: QColor = field(default_factory=lambda: QColor("#fff2a8"))
    dimmed_link_color: QColor = field(default_factory=lambda: parse_color("rgba(76, 86, 124, 0.2)"))
    particle_color: QColor = field(default_factory=lambda: parse_color("rgba(170, 184, 255, 0.78)"))
    link_opacity_focused: float = 0.55
    link_opacity: float = 0.62

    # Widths: base + strength * scale
    highlight_link_width: float = 4.0
    active_link_width: float = 1.1
    active_link_width_scale: float = 0.3
    dimmed_link_width: float = 0.25
    link_width: float = 0.7
    link_width_scale: float = 0.28

    particle_speed: float = 0.008
    particle_width: float = 2.0


class StyleManager:
    """
    Manages all styling for the graph visualization.

    Args:
        style: Colors and sizes
        dim_inactive: Dim nodes/links outside the focus set
    """

    def __init__(self, style: Optional[GraphStyle] = None, dim_inactive: bool = True):
        self.style = style or GraphStyle()
        self.dim_inactive = dim_inactive

    @classmethod
    def from_settings(cls, settings: GraphSettings, style: Optional[GraphStyle] = None) -> "StyleManager":
        """Build a style manager honoring the host's dimming switch."""
        return cls(style, dim_inactive=settings.dim_inactive)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def get_node_color(
        self,
        node: GraphNode,
        active_ids: Collection[str] = (),
        highlight_ids: Collection[str] = (),
        hover_id: Optional[str] = None,
    ) -> QColor:
        """Node color; hover beats highlight beats focus beats dimming."""
        if hover_id is not None and node.id == hover_id:
            return self.style.hover_color
        if highlight_ids and node.id in highlight_ids:
            return self.style.highlight_color
        base = parse_color(node.display_color) if node.display_color else self.style.node_color
        if active_ids and node.id in active_ids:
            return base
        if active_ids and self.dim_inactive:
            return self.style.dimmed_node_color
        return base

    def get_node_opacity(self, active_ids: Collection[str] = ()) -> float:
        return self.style.node_opacity_focused if active_ids else self.style.node_opacity

    def get_node_size(self, node: GraphNode) -> float:
        """Rendered radius for a node's weight."""
        return visual_radius(node.val)

    def is_node_visible(
        self,
        node: GraphNode,
        preset: QualityPreset,
        active_ids: Collection[str] = (),
    ) -> bool:
        """Presets with visibility culling hide nodes outside the focus set."""
        if not (preset.hide_inactive and active_ids):
            return True
        return node.id in active_ids

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    @staticmethod
    def _link_active(link: GraphLink, active_ids: Collection[str]) -> bool:
        return bool(active_ids) and link.source in active_ids and link.target in active_ids

    def get_link_color(
        self,
        link: GraphLink,
        active_ids: Collection[str] = (),
        highlight_link_ids: Collection[str] = (),
    ) -> QColor:
        if link.id in highlight_link_ids:
            return self.style.highlight_link_color
        if self._link_active(link, active_ids):
            return self.style.active_link_color
        if active_ids and self.dim_inactive:
            return self.style.dimmed_link_color
        return parse_color(link.color) if link.color else self.style.link_color

    def get_link_width(
        self,
        link: GraphLink,
        active_ids: Collection[str] = (),
        highlight_link_ids: Collection[str] = (),
    ) -> float:
        if link.id in highlight_link_ids:
            return self.style.highlight_link_width
        if self._link_active(link, active_ids):
            return self.style.active_link_width + link.strength * self.style.active_link_width_scale
        if active_ids and self.dim_inactive:
            return self.style.dimmed_link_width
        return self.style.link_width + link.strength * self.style.link_width_scale

    def get_link_opacity(self, active_ids: Collection[str] = ()) -> float:
        return self.style.link_opacity_focused if active_ids else self.style.link_opacity

    def is_link_visible(
        self,
        link: GraphLink,
        preset: QualityPreset,
        active_ids: Collection[str] = (),
    ) -> bool:
        if not (preset.hide_inactive and active_ids):
            return True
        return self._link_active(link, active_ids)

    def get_link_particles(
        self,
        link: GraphLink,
        preset: QualityPreset,
        highlight_link_ids: Collection[str] = (),
    ) -> int:
        """Directional particle count from the (dense-adjusted) preset."""
        if link.id in highlight_link_ids:
            return preset.directional_particles_highlight
        return preset.directional_particles_idle

    def get_particle_color(self, link: GraphLink, highlight_link_ids: Collection[str] = ()) -> QColor:
        if link.id in highlight_link_ids:
            return self.style.highlight_link_color
        return self.style.particle_color
