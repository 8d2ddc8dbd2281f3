"""
Tests for the in-process 3D force layout.
"""

import math

import pytest

from graphlens_core.adapters.force_layout import ForceLayout3D
from graphlens_core.ports.layout_port import SimulationParams
from graphlens_core.services.normalizer import normalize_graph


def _unpositioned(team_data):
    for node in team_data["nodes"]:
        for axis in ("x", "y", "z"):
            node.pop(axis)
    return team_data


def _finite(pos):
    return pos is not None and all(math.isfinite(c) for c in pos)


class TestForceLayout3D:
    """Test the simulation lifecycle."""

    def test_unseeded_nodes_have_no_position_until_ticked(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(_unpositioned(team_data)), SimulationParams())

        assert all(pos is None for pos in layout.positions().values())
        assert layout.get_bbox(["A", "B"]) is None

        assert layout.tick() is True
        assert all(_finite(pos) for pos in layout.positions().values())

    def test_seeded_positions_used_before_first_tick(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams())

        assert layout.positions()["D"] == (60.0, 5.0, -10.0)

    def test_positions_survive_graph_changes(self, team_data, clock):
        """Verify existing nodes keep their place when the graph grows."""
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams())
        for _ in range(5):
            layout.tick()
        before = layout.positions()["A"]

        team_data["nodes"].append({"id": "F", "teamId": "t1"})
        team_data["links"].append({"source": "A", "target": "F"})
        layout.set_graph(normalize_graph(team_data), SimulationParams())

        assert layout.positions()["A"] == before
        assert layout.positions()["F"] is None

    def test_cooldown_ticks(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams(cooldown_ticks=3))

        assert [layout.tick() for _ in range(4)] == [True, True, True, False]
        assert layout.is_cooled

    def test_cooldown_time(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams(cooldown_time=1000))

        assert layout.tick() is True
        clock.advance(1000)
        assert layout.tick() is False

    def test_reheat_restarts_simulation(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams(cooldown_ticks=2))
        layout.tick()
        layout.tick()
        assert layout.is_cooled

        params = SimulationParams(cooldown_ticks=50, charge_strength=-30)
        layout.reheat(params)

        assert layout.params == params
        assert layout.tick_count == 0
        assert layout.alpha == 1.0
        assert layout.tick() is True

    def test_alpha_decays(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams())

        layout.tick()
        first = layout.alpha
        layout.tick()

        assert 0 < layout.alpha < first < 1.0

    def test_charge_pushes_nodes_apart(self, clock):
        graph = normalize_graph({"nodes": [
            {"id": "p", "x": 0.0, "y": 0.0, "z": 0.0},
            {"id": "q", "x": 1.0, "y": 0.0, "z": 0.0},
        ]})
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(graph, SimulationParams())

        for _ in range(5):
            layout.tick()

        p, q = layout.positions()["p"], layout.positions()["q"]
        assert math.dist(p, q) > 1.0

    def test_layout_is_centered(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams())
        layout.tick()

        xs = [pos[0] for pos in layout.positions().values()]
        assert sum(xs) / len(xs) == pytest.approx(0.0, abs=1e-9)

    def test_bbox_over_subset(self, team_data, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(team_data), SimulationParams())

        bbox = layout.get_bbox(["D", "E", "unknown"])

        assert bbox.x == (60.0, 80.0)
        assert bbox.y == (-5.0, 5.0)
        assert bbox.z == (-10.0, 0.0)

    def test_empty_graph(self, clock):
        layout = ForceLayout3D(clock=clock)
        layout.set_graph(normalize_graph(None), SimulationParams())

        assert layout.tick() is False
        assert layout.positions() == {}
