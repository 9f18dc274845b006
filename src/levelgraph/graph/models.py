"""Concept graph records.

The concept graph is a flat, normalized node/edge table. Edges point from
the more abstract node (``source``, the parent) to the more specific node
(``target``, the child):

    characteristic --> skill --> action

Every record is frozen. A ``GraphState`` is never patched in place; the merge
engine and fragment builders always return a fresh instance.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NodeType = Literal["action", "skill", "characteristic", "none"]

GRAPH_SCHEMA_VERSION = 2

PROGRESSION_ROOT_ID = "progression"
PROGRESSION_ROOT_LABEL = "Progression"

_WHITESPACE = re.compile(r"\s+")


def normalize_label(label: str) -> str:
    """Return the canonical comparison key for a label.

    Case, surrounding whitespace and internal whitespace runs are ignored, so
    ``"  Deep   Work"`` and ``"deep work"`` compare equal.
    """
    return _WHITESPACE.sub(" ", label.strip()).lower()


def make_node_id(label: str) -> str:
    """Derive a stable node id from a label (``"Deep Work"`` -> ``"deep-work"``)."""
    return normalize_label(label).replace(" ", "-")


def make_edge_id(source: str, target: str) -> str:
    """Derive the deterministic edge id for a parent/child pair."""
    return f"{source}->{target}"


class Node(BaseModel):
    """A concept in the graph."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    type: NodeType = "none"
    metadata: dict[str, Any] | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def key(self) -> str:
        """Normalized label used for deduplication."""
        return normalize_label(self.label)


class Edge(BaseModel):
    """A weighted parent -> child relationship.

    ``weight`` is the fraction of the child's contribution attributable to
    this parent. It is neither clamped nor validated.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    weight: float | None = None
    label: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def between(cls, source: str, target: str, weight: float | None = None) -> Edge:
        """Build an edge with its id derived from the endpoints."""
        return cls(id=make_edge_id(source, target), source=source, target=target, weight=weight)

    @property
    def effective_weight(self) -> float:
        """Weight used for propagation; a missing or zero weight counts as 1.0."""
        return self.weight or 1.0


class GraphState(BaseModel):
    """Complete graph snapshot: node and edge lookup tables plus schema version."""

    model_config = ConfigDict(frozen=True)

    nodes: dict[str, Node] = Field(default_factory=dict)
    edges: dict[str, Edge] = Field(default_factory=dict)
    version: int = GRAPH_SCHEMA_VERSION

    def find_node_by_label(self, label: str) -> Node | None:
        """Return the node whose normalized label matches ``label``, if any."""
        key = normalize_label(label)
        for node in self.nodes.values():
            if node.key == key:
                return node
        return None

    def label_index(self) -> dict[str, str]:
        """Map normalized label -> node id (first node wins on collisions)."""
        index: dict[str, str] = {}
        for node_id, node in self.nodes.items():
            index.setdefault(node.key, node_id)
        return index


def root_node(node_id: str = PROGRESSION_ROOT_ID, label: str = PROGRESSION_ROOT_LABEL) -> Node:
    """The top-level progression characteristic every graph starts with."""
    return Node(id=node_id, label=label, type="characteristic")


def empty_graph(
    root_id: str = PROGRESSION_ROOT_ID, root_label: str = PROGRESSION_ROOT_LABEL
) -> GraphState:
    """Create a graph holding only the progression root."""
    root = root_node(root_id, root_label)
    return GraphState(nodes={root.id: root})
