"""
Tests for the data merge engine.

Nodes upsert by id, links by (source, target, relation); the patch side
wins field by field.
"""

import copy

import pytest

from graphlens_core.services.merge import link_key, merge_graph


@pytest.fixture()
def base():
    return {
        "nodes": [
            {"id": "A", "label": "x", "val": 5},
            {"id": "B", "label": "y", "val": 2},
        ],
        "links": [
            {"source": "A", "target": "B", "relation": "doc-sequence", "strength": 1},
        ],
    }


class TestMergeGraph:
    """Test node and link upserts."""

    def test_patch_fields_overwrite_shallowly(self, base):
        """Verify patched fields win and untouched fields survive."""
        merged = merge_graph(base, {"nodes": [{"id": "A", "val": 99}]})

        node_a = merged["nodes"][0]
        assert node_a == {"id": "A", "label": "x", "val": 99}

    def test_new_nodes_appended_in_patch_order(self, base):
        """Verify new nodes follow the existing ones."""
        merged = merge_graph(base, {"nodes": [{"id": "D"}, {"id": "C"}]})
        assert [n["id"] for n in merged["nodes"]] == ["A", "B", "D", "C"]

    def test_link_identity(self, base):
        """Verify links with the same key update, others append."""
        merged = merge_graph(base, {"links": [
            {"source": "A", "target": "B", "relation": "doc-sequence", "strength": 3},
            {"source": "A", "target": "B", "relation": "semantic-near"},
        ]})

        assert len(merged["links"]) == 2
        assert merged["links"][0]["strength"] == 3
        assert merged["links"][1]["relation"] == "semantic-near"

    def test_object_endpoints_match_bare_ids(self, base):
        """Verify endpoint objects and ids identify the same link."""
        merged = merge_graph(base, {"links": [
            {"source": {"id": "A"}, "target": {"id": "B"}, "relation": "doc-sequence", "strength": 4},
        ]})

        assert len(merged["links"]) == 1
        assert merged["links"][0]["strength"] == 4

    def test_merge_is_idempotent(self, base):
        """Verify merging the same patch twice changes nothing more."""
        patch = {
            "nodes": [{"id": "A", "val": 8}, {"id": "C", "label": "z"}],
            "links": [{"source": "B", "target": "C", "relation": "doc-sequence"}],
        }

        once = merge_graph(base, patch)
        twice = merge_graph(once, patch)

        assert twice == once

    def test_inputs_not_mutated(self, base):
        """Verify neither base nor patch is modified."""
        patch = {"nodes": [{"id": "A", "val": 1}]}
        base_before = copy.deepcopy(base)
        patch_before = copy.deepcopy(patch)

        merged = merge_graph(base, patch)
        merged["nodes"][0]["label"] = "changed"

        assert base == base_before
        assert patch == patch_before

    @pytest.mark.parametrize("patch", [
        None,
        {},
        {"nodes": "not-a-list"},
        {"nodes": [1, "x", None], "links": {"source": "A"}},
        ["not", "a", "mapping"],
    ])
    def test_malformed_patch_contributes_nothing(self, base, patch):
        """Verify malformed patches leave the graph as it was."""
        assert merge_graph(base, patch) == base

    def test_patch_nodes_without_id_ignored(self, base):
        """Verify id-less patch nodes are skipped."""
        merged = merge_graph(base, {"nodes": [{"label": "anon"}]})
        assert len(merged["nodes"]) == 2

    def test_merge_into_nothing(self):
        """Verify a None base starts from an empty graph."""
        merged = merge_graph(None, {"nodes": [{"id": "A"}]})
        assert merged == {"nodes": [{"id": "A"}], "links": []}


class TestLinkKey:
    """Test link identity."""

    def test_key_uses_relation(self):
        assert link_key({"source": "A", "target": "B"}) == ("A", "B", None)
        assert link_key({"source": "A", "target": "B", "relation": "r"}) == ("A", "B", "r")

    def test_key_is_directional(self):
        """Verify reversed endpoints are a different link."""
        forward = link_key({"source": "A", "target": "B"})
        backward = link_key({"source": "B", "target": "A"})
        assert forward != backward
