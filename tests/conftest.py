"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from levelgraph.graph import Edge, GraphState, Node


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment overrides out of test runs."""
    monkeypatch.delenv("LEVELGRAPH_MINUTES_PER_EXP_UNIT", raising=False)
    monkeypatch.delenv("LEVELGRAPH_CONFIG", raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def coding_graph() -> GraphState:
    """Progression <- Intellect (0.5) <- Coding (0.8)."""
    return GraphState(
        nodes={
            "progression": Node(id="progression", label="Progression", type="characteristic"),
            "intellect": Node(id="intellect", label="Intellect", type="characteristic"),
            "coding": Node(id="coding", label="Coding", type="skill"),
        },
        edges={
            "progression->intellect": Edge.between("progression", "intellect", 0.5),
            "intellect->coding": Edge.between("intellect", "coding", 0.8),
        },
    )


@pytest.fixture
def diamond_graph() -> GraphState:
    """C fans out to B1 and B2, which both fan in to A (all weights 1.0)."""
    return GraphState(
        nodes={label: Node(id=label, label=label) for label in ("A", "B1", "B2", "C")},
        edges={
            edge.id: edge
            for edge in (
                Edge.between("C", "B1", 1.0),
                Edge.between("C", "B2", 1.0),
                Edge.between("B1", "A", 1.0),
                Edge.between("B2", "A", 1.0),
            )
        },
    )
