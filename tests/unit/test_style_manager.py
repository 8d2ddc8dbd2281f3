"""
Tests for StyleManager appearance rules.
"""

import pytest
from PyQt6.QtGui import QColor

from graphlens_core.domain.enums import QualityMode
from graphlens_core.services.framing import visual_radius
from graphlens_core.services.normalizer import normalize_graph
from graphlens_core.services.quality import QUALITY_PRESETS
from graphlens_app.viewmodels import GraphSettings
from graphlens_app.views.graph.style_manager import StyleManager, parse_color


@pytest.fixture()
def graph(team_data):
    return normalize_graph(team_data, team_colors={"t1": "#ff8a3d"})


class TestParseColor:
    """Test CSS color parsing."""

    def test_hex(self):
        assert parse_color("#ff8a3d") == QColor(255, 138, 61)

    def test_rgba(self):
        color = parse_color("rgba(111, 127, 220, 0.48)")

        assert (color.red(), color.green(), color.blue()) == (111, 127, 220)
        assert color.alphaF() == pytest.approx(0.48, abs=0.01)


class TestNodeStyle:
    """Test node color, size and culling."""

    def test_team_color_without_focus(self, graph):
        manager = StyleManager()
        assert manager.get_node_color(graph.get_node("A")) == QColor("#ff8a3d")

    def test_inactive_nodes_dimmed(self, graph):
        manager = StyleManager()

        color = manager.get_node_color(graph.get_node("D"), active_ids={"A"})

        assert color == manager.style.dimmed_node_color

    def test_dimming_disabled(self, graph):
        manager = StyleManager.from_settings(GraphSettings(dim_inactive=False))
        color = manager.get_node_color(graph.get_node("A"), active_ids={"D"})
        assert color == QColor("#ff8a3d")

    def test_hover_beats_highlight(self, graph):
        manager = StyleManager()
        node = graph.get_node("B")

        assert manager.get_node_color(node, highlight_ids={"B"}) == manager.style.highlight_color
        assert manager.get_node_color(node, highlight_ids={"B"}, hover_id="B") == manager.style.hover_color

    def test_node_size_tracks_weight(self, graph):
        manager = StyleManager()
        assert manager.get_node_size(graph.get_node("C")) == pytest.approx(6.0)
        assert manager.get_node_size(graph.get_node("D")) == pytest.approx(12.0)

    def test_node_size_matches_framing_radius(self, graph):
        """Verify drawn size and framing use the same visual radius."""
        manager = StyleManager()
        for node in graph.nodes:
            assert manager.get_node_size(node) == visual_radius(node.val)

    def test_culling_only_in_performance(self, graph):
        manager = StyleManager()
        node = graph.get_node("D")

        assert manager.is_node_visible(node, QUALITY_PRESETS[QualityMode.BALANCED], {"A"})
        assert not manager.is_node_visible(node, QUALITY_PRESETS[QualityMode.PERFORMANCE], {"A"})
        assert manager.is_node_visible(node, QUALITY_PRESETS[QualityMode.PERFORMANCE])


class TestLinkStyle:
    """Test link color, width and particles."""

    def test_active_link(self, graph):
        manager = StyleManager()
        link = graph.links[0]   # A-B, strength 2

        assert manager.get_link_color(link, {"A", "B"}) == manager.style.active_link_color
        assert manager.get_link_width(link, {"A", "B"}) == pytest.approx(1.1 + 2 * 0.3)

    def test_highlighted_link(self, graph):
        manager = StyleManager()
        link = graph.links[1]

        assert manager.get_link_width(link, highlight_link_ids={link.id}) == 4.0
        assert manager.get_particle_color(link, {link.id}) == manager.style.highlight_link_color

    def test_half_active_link_is_dimmed(self, graph):
        manager = StyleManager()
        link = graph.links[3]   # C-D

        assert manager.get_link_color(link, {"C"}) == manager.style.dimmed_link_color
        assert not manager.is_link_visible(link, QUALITY_PRESETS[QualityMode.PERFORMANCE], {"C"})

    def test_particles_follow_preset(self, graph):
        manager = StyleManager()
        link = graph.links[0]
        high = QUALITY_PRESETS[QualityMode.HIGH]
        performance = QUALITY_PRESETS[QualityMode.PERFORMANCE]

        assert manager.get_link_particles(link, high) == 2
        assert manager.get_link_particles(link, high, {link.id}) == 6
        assert manager.get_link_particles(link, performance) == 0

    def test_opacity_lowered_while_focused(self):
        manager = StyleManager()
        assert manager.get_node_opacity({"A"}) < manager.get_node_opacity()
        assert manager.get_link_opacity({"A"}) < manager.get_link_opacity()
