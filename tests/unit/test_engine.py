"""Tests for path-weighted cumulative averaging."""

from __future__ import annotations

import pytest

from levelgraph.graph import Edge, GraphState, Node
from levelgraph.progression import build_parent_map, propagate


def _graph(labels: list[str], edges: list[Edge]) -> GraphState:
    return GraphState(
        nodes={label: Node(id=label, label=label) for label in labels},
        edges={edge.id: edge for edge in edges},
    )


class TestBuildParentMap:
    """Tests for the child -> parents lookup."""

    def test_maps_children_to_weighted_parents(self, coding_graph: GraphState) -> None:
        assert build_parent_map(coding_graph.edges) == {
            "intellect": {"progression": 0.5},
            "coding": {"intellect": 0.8},
        }

    def test_fan_in(self) -> None:
        edges = {e.id: e for e in (Edge.between("p1", "c", 0.2), Edge.between("p2", "c"))}
        assert build_parent_map(edges) == {"c": {"p1": 0.2, "p2": 1.0}}


class TestPropagate:
    """Tests for propagation results."""

    def test_single_path_decays_by_edge_weight(self, coding_graph: GraphState) -> None:
        result = propagate(coding_graph.nodes, coding_graph.edges, {"Coding": 1.0})

        assert result == pytest.approx({"Coding": 1.0, "Intellect": 0.8, "Progression": 0.4})

    def test_diamond_averages_instead_of_summing(self, diamond_graph: GraphState) -> None:
        result = propagate(diamond_graph.nodes, diamond_graph.edges, {"A": 1.0})

        assert result == pytest.approx({"A": 1.0, "B1": 1.0, "B2": 1.0, "C": 1.0})

    def test_diamond_with_uneven_paths(self) -> None:
        graph = _graph(
            ["A", "B1", "B2", "C"],
            [
                Edge.between("C", "B1", 1.0),
                Edge.between("C", "B2", 0.5),
                Edge.between("B1", "A", 1.0),
                Edge.between("B2", "A", 1.0),
            ],
        )

        result = propagate(graph.nodes, graph.edges, {"A": 1.0})

        # Two paths reach C: 1.0 * 1.0 and 1.0 * 0.5, averaged over two hits.
        assert result["C"] == pytest.approx(0.75)

    def test_several_seeds_average_at_shared_parent(self) -> None:
        graph = _graph(["P", "X", "Y"], [Edge.between("P", "X", 1.0), Edge.between("P", "Y", 0.5)])

        result = propagate(graph.nodes, graph.edges, {"X": 1.0, "Y": 1.0})

        assert result == pytest.approx({"X": 1.0, "Y": 1.0, "P": 0.75})

    def test_seed_value_scales_contributions(self, coding_graph: GraphState) -> None:
        result = propagate(coding_graph.nodes, coding_graph.edges, {"Coding": 0.5})

        assert result == pytest.approx({"Coding": 0.5, "Intellect": 0.4, "Progression": 0.2})

    def test_seed_labels_match_case_insensitively(self, coding_graph: GraphState) -> None:
        result = propagate(coding_graph.nodes, coding_graph.edges, {"  coding ": 1.0})

        assert set(result) == {"Coding", "Intellect", "Progression"}

    def test_unknown_seed_contributes_to_itself(self, coding_graph: GraphState) -> None:
        result = propagate(coding_graph.nodes, coding_graph.edges, {"Juggling": 2.0})

        assert result == {"Juggling": 2.0}

    def test_unknown_seed_spelling_a_node_id_stays_a_leaf(self) -> None:
        """Seeds resolve by label only; a matching node id is not walked."""
        graph = GraphState(
            nodes={
                "coding": Node(id="coding", label="Software Coding"),
                "intellect": Node(id="intellect", label="Intellect"),
            },
            edges={"intellect->coding": Edge.between("intellect", "coding", 0.8)},
        )

        result = propagate(graph.nodes, graph.edges, {"coding": 1.0})

        assert result == {"coding": 1.0}

    def test_empty_seeds_yield_empty_result(self, coding_graph: GraphState) -> None:
        assert propagate(coding_graph.nodes, coding_graph.edges, {}) == {}

    def test_unrelated_nodes_are_not_visited(self, coding_graph: GraphState) -> None:
        result = propagate(coding_graph.nodes, coding_graph.edges, {"Intellect": 1.0})

        assert "Coding" not in result
        assert result == pytest.approx({"Intellect": 1.0, "Progression": 0.5})

    def test_values_are_not_rounded(self) -> None:
        graph = _graph(["P", "C"], [Edge.between("P", "C", 1 / 3)])

        result = propagate(graph.nodes, graph.edges, {"C": 1.0})

        assert result["P"] == 1 / 3


class TestCycleGuard:
    """Cyclic graphs terminate without changing acyclic results."""

    def test_two_node_cycle_terminates(self) -> None:
        graph = _graph(["A", "B"], [Edge.between("A", "B", 0.5), Edge.between("B", "A", 0.5)])

        result = propagate(graph.nodes, graph.edges, {"A": 1.0})

        assert result == pytest.approx({"A": 1.0, "B": 0.5})

    def test_self_loop_terminates(self) -> None:
        graph = _graph(["A"], [Edge.between("A", "A", 1.0)])

        assert propagate(graph.nodes, graph.edges, {"A": 1.0}) == {"A": 1.0}

    def test_cycle_above_a_leaf(self) -> None:
        graph = _graph(
            ["Leaf", "X", "Y"],
            [Edge.between("X", "Leaf"), Edge.between("Y", "X"), Edge.between("X", "Y")],
        )

        result = propagate(graph.nodes, graph.edges, {"Leaf": 1.0})

        assert result == pytest.approx({"Leaf": 1.0, "X": 1.0, "Y": 1.0})
