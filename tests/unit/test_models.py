"""
Tests for domain models.
"""

from graphlens_core.domain.models import BoundingBox, Group, ViewSnapshot


class TestGroup:
    """Test group parsing."""

    def test_from_camel_case(self):
        group = Group.from_dict({"id": "g1", "label": "Docs", "nodeIds": ["a", "b"]})
        assert group == Group(id="g1", label="Docs", node_ids=("a", "b"))

    def test_from_snake_case(self):
        group = Group.from_dict({"id": "g1", "node_ids": ["a"]})
        assert group.node_ids == ("a",)
        assert group.label == ""


class TestViewSnapshot:
    """Test snapshot serialization."""

    def test_to_dict(self):
        view = ViewSnapshot(
            camera=(1.0, 2.0, 3.0),
            target=(0.0, 0.0, 0.0),
            fov=52.0,
            aspect=1.5,
            viewport_width=300,
            viewport_height=200,
            captured_at="2026-01-01T00:00:00",
        )

        assert view.to_dict() == {
            "camera": {"x": 1.0, "y": 2.0, "z": 3.0},
            "target": {"x": 0.0, "y": 0.0, "z": 0.0},
            "fov": 52.0,
            "aspect": 1.5,
            "viewport": {"width": 300, "height": 200},
            "capturedAt": "2026-01-01T00:00:00",
        }


class TestBoundingBox:
    def test_center_and_spans(self):
        bbox = BoundingBox(x=(0.0, 10.0), y=(-2.0, 2.0), z=(5.0, 5.0))
        assert bbox.center == (5.0, 0.0, 5.0)
        assert bbox.spans == (10.0, 4.0, 0.0)
