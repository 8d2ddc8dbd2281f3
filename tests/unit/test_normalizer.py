"""
Tests for the graph normalizer.

Covers arena construction, adjacency, defaulting of weights and
strengths, and silent dropping of dangling links.
"""

import pytest

from graphlens_core.config import AttributeKeys
from graphlens_core.services.normalizer import (
    DEFAULT_LINK_COLOR,
    endpoint_id,
    normalize_graph,
)


class TestNormalizeGraph:
    """Test arena and adjacency construction."""

    def test_nodes_indexed_in_input_order(self, team_data):
        """Verify each node's index matches its position."""
        graph = normalize_graph(team_data)

        assert graph.node_ids() == ["A", "B", "C", "D", "E"]
        for i, node in enumerate(graph.nodes):
            assert node.index == i
            assert graph.index_by_id[node.id] == i

    def test_adjacency_is_symmetric(self, team_data):
        """Verify neighbors are recorded on both endpoints."""
        graph = normalize_graph(team_data)

        assert {n.id for n in graph.neighbors_of("B")} == {"A", "C"}
        assert {n.id for n in graph.neighbors_of("C")} == {"B", "D"}
        assert [n.id for n in graph.neighbors_of("E")] == ["D"]

    def test_incident_links(self, team_data):
        """Verify incident link lists reference the link arena."""
        graph = normalize_graph(team_data)

        links = graph.incident_links_of("D")
        assert {(l.source, l.target) for l in links} == {("D", "E"), ("C", "D")}

    def test_dangling_links_dropped(self, team_data):
        """Verify links to missing nodes are dropped silently."""
        team_data["links"].append({"source": "A", "target": "ghost"})
        team_data["links"].append({"source": "ghost", "target": "B"})

        graph = normalize_graph(team_data)

        assert len(graph.links) == 4
        assert all(graph.has_node(l.source) and graph.has_node(l.target) for l in graph.links)

    def test_duplicate_node_ids_keep_first(self):
        """Verify a repeated id does not create a second node."""
        graph = normalize_graph({"nodes": [
            {"id": "A", "label": "first"},
            {"id": "A", "label": "second"},
        ]})

        assert len(graph) == 1
        assert graph.get_node("A").label == "first"

    def test_nodes_without_id_skipped(self):
        """Verify nodes lacking an id are ignored."""
        graph = normalize_graph({"nodes": [{"label": "anon"}, {"id": "A"}]})
        assert graph.node_ids() == ["A"]

    def test_missing_collections(self):
        """Verify None and empty inputs produce an empty graph."""
        assert normalize_graph(None).is_empty
        assert normalize_graph({}).is_empty
        assert normalize_graph({"nodes": None, "links": None}).is_empty

    def test_self_loop_adjacency_recorded_once(self):
        """Verify a self-loop adds one neighbor entry."""
        graph = normalize_graph({
            "nodes": [{"id": "A"}],
            "links": [{"source": "A", "target": "A"}],
        })

        node = graph.get_node("A")
        assert node.neighbors == [0]
        assert node.incident_links == [0]


class TestNodeFields:
    """Test defaulting and decoration of node fields."""

    @pytest.mark.parametrize("raw_val, expected", [
        (None, 1.0),
        (0, 1.0),
        (0.5, 1.0),
        ("bad", 1.0),
        (float("inf"), 1.0),
        (float("-inf"), 1.0),
        (float("nan"), 1.0),
        (7, 7.0),
    ])
    def test_val_defaults_to_at_least_one(self, raw_val, expected):
        """Verify node weight is always >= 1."""
        graph = normalize_graph({"nodes": [{"id": "A", "val": raw_val}]})
        assert graph.get_node("A").val == expected

    def test_team_and_user_attributes(self, team_data):
        """Verify team/document/user ids are read from raw keys."""
        node = normalize_graph(team_data).get_node("D")

        assert node.team_id == "t2"
        assert node.document_id == "d3"
        assert node.user_id == "u3"

    def test_custom_attribute_keys(self):
        """Verify alternative raw key names are honored."""
        keys = AttributeKeys(team="workspace", document="doc", user="owner")
        graph = normalize_graph(
            {"nodes": [{"id": "A", "workspace": "w1", "doc": "x", "owner": "o"}]},
            keys=keys,
        )

        node = graph.get_node("A")
        assert (node.team_id, node.document_id, node.user_id) == ("w1", "x", "o")

    def test_display_color_prefers_team_color(self):
        """Verify team colors override the node's own color."""
        graph = normalize_graph(
            {"nodes": [
                {"id": "A", "teamId": "t1", "color": "#111111"},
                {"id": "B", "teamId": "t9", "color": "#222222"},
            ]},
            team_colors={"t1": "#ff8a3d"},
        )

        assert graph.get_node("A").display_color == "#ff8a3d"
        assert graph.get_node("B").display_color == "#222222"

    def test_display_uploader_name(self):
        """Verify profile names override the raw display name."""
        graph = normalize_graph(
            {"nodes": [
                {"id": "A", "userId": "u1", "uploadedByName": "raw name"},
                {"id": "B", "userId": "u2", "uploadedByName": "Fallback"},
            ]},
            user_names={"u1": "Avery Chen"},
        )

        assert graph.get_node("A").display_uploader_name == "Avery Chen"
        assert graph.get_node("B").display_uploader_name == "Fallback"

    def test_extra_fields_kept_in_attrs(self, team_data):
        """Verify unmodelled raw fields survive in attrs."""
        node = normalize_graph(team_data).get_node("A")
        assert node.attrs["x"] == -40.0
        assert "label" not in node.attrs


class TestLinkFields:
    """Test link ids, strengths and endpoints."""

    def test_generated_link_ids(self, team_data):
        """Verify links without ids get positional ids."""
        graph = normalize_graph(team_data)
        assert [l.id for l in graph.links] == ["link-0", "link-1", "link-2", "link-3"]

    def test_explicit_link_id_kept(self):
        """Verify a provided link id is used."""
        graph = normalize_graph({
            "nodes": [{"id": "A"}, {"id": "B"}],
            "links": [{"id": "ab", "source": "A", "target": "B"}],
        })
        assert graph.links[0].id == "ab"

    def test_strength_defaults(self):
        """Verify missing strength is 1 and negative strength clamps to 0."""
        graph = normalize_graph({
            "nodes": [{"id": "A"}, {"id": "B"}],
            "links": [
                {"source": "A", "target": "B", "relation": "r1"},
                {"source": "A", "target": "B", "relation": "r2", "strength": -3},
            ],
        })

        assert graph.links[0].strength == 1.0
        assert graph.links[1].strength == 0.0
        assert graph.links[0].color == DEFAULT_LINK_COLOR

    def test_non_finite_strength_defaults(self):
        """Verify infinite or NaN strengths fall back to 1."""
        graph = normalize_graph({
            "nodes": [{"id": "A"}, {"id": "B"}],
            "links": [
                {"source": "A", "target": "B", "relation": "r1", "strength": float("inf")},
                {"source": "A", "target": "B", "relation": "r2", "strength": float("nan")},
            ],
        })

        assert [l.strength for l in graph.links] == [1.0, 1.0]

    def test_object_endpoints(self):
        """Verify endpoints given as objects resolve to their ids."""
        graph = normalize_graph({
            "nodes": [{"id": "A"}, {"id": "B"}],
            "links": [{"source": {"id": "A"}, "target": {"id": "B", "x": 1}}],
        })

        link = graph.links[0]
        assert (link.source, link.target) == ("A", "B")
        assert (link.source_index, link.target_index) == (0, 1)

    def test_endpoint_id(self):
        """Verify endpoint_id accepts bare ids and mappings."""
        assert endpoint_id("A") == "A"
        assert endpoint_id({"id": "B"}) == "B"
        assert endpoint_id(None) is None
