"""Shared test fixtures for GraphLens tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def team_data():
    """Five positioned nodes across two teams, with one cross-team link."""
    return {
        "nodes": [
            {"id": "A", "label": "Alpha chunk", "teamId": "t1", "userId": "u1",
             "documentId": "d1", "val": 5, "x": -40.0, "y": 0.0, "z": 0.0},
            {"id": "B", "label": "Bravo chunk", "teamId": "t1", "userId": "u2",
             "documentId": "d1", "val": 3, "x": -20.0, "y": 10.0, "z": 5.0},
            {"id": "C", "label": "Charlie chunk", "teamId": "t1", "userId": "u1",
             "documentId": "d2", "val": 1, "x": -30.0, "y": -10.0, "z": 15.0},
            {"id": "D", "label": "Delta note", "teamId": "t2", "userId": "u3",
             "documentId": "d3", "val": 8, "x": 60.0, "y": 5.0, "z": -10.0},
            {"id": "E", "label": "Echo note", "teamId": "t2", "userId": "u3",
             "documentId": "d3", "val": 2, "x": 80.0, "y": -5.0, "z": 0.0},
        ],
        "links": [
            {"source": "A", "target": "B", "relation": "doc-sequence", "strength": 2},
            {"source": "B", "target": "C", "relation": "doc-sequence", "strength": 1},
            {"source": "D", "target": "E", "relation": "doc-sequence", "strength": 1},
            {"source": "C", "target": "D", "relation": "cross-team-near", "strength": 2},
        ],
    }


@pytest.fixture()
def team_groups():
    return [
        {"id": "g-early", "label": "Early chunks", "nodeIds": ["A", "B"]},
        {"id": "g-notes", "label": "Notes", "nodeIds": ["D", "E", "missing"]},
    ]


@pytest.fixture(scope="session")
def qapp():
    """A QCoreApplication for tests that need QTimer."""
    from PyQt6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
