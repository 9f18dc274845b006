"""Build graph fragments from collaborator input.

Two sources produce fragments:

- ``fragment_from_analysis``: the structured entry analysis, yielding the
  full action -> skill -> characteristic hierarchy plus generalization links.
- ``fragment_from_actions``: a manual entry, yielding bare action nodes.

Both are pure; the result is meant to be folded in with ``merge_fragment``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from levelgraph.graph.models import (
    Edge,
    GraphState,
    Node,
    NodeType,
    make_node_id,
    normalize_label,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from levelgraph.models.analysis import EntryAnalysis, GeneralizationLink


class _FragmentBuilder:
    """Accumulates nodes and edges keyed by derived id."""

    def __init__(self, timestamp: str | None) -> None:
        self.timestamp = timestamp
        self.nodes: dict[str, Node] = {}
        self.edges: dict[str, Edge] = {}

    def node(self, label: str, node_type: NodeType) -> str:
        node_id = make_node_id(label)
        if node_id not in self.nodes:
            self.nodes[node_id] = Node(
                id=node_id,
                label=label.strip(),
                type=node_type,
                created_at=self.timestamp,
                updated_at=self.timestamp,
            )
        return node_id

    def link(self, link: GeneralizationLink, child_type: NodeType, parent_type: NodeType) -> None:
        child_id = self.node(link.child, child_type)
        parent_id = self.node(link.parent, parent_type)
        edge = Edge.between(parent_id, child_id, link.weight)
        if self.timestamp:
            edge = edge.model_copy(
                update={"created_at": self.timestamp, "updated_at": self.timestamp}
            )
        self.edges[edge.id] = edge

    def build(self) -> GraphState:
        return GraphState(nodes=self.nodes, edges=self.edges)


def fragment_from_analysis(
    analysis: EntryAnalysis,
    fallback_chain: Sequence[GeneralizationLink] = (),
    *,
    timestamp: str | None = None,
) -> GraphState:
    """Convert an entry analysis into a graph fragment.

    Layers are added in order, so a label first seen as an action keeps the
    ``action`` type even if it later shows up elsewhere:

    1. action nodes from ``weighted_actions``
    2. skill nodes and skill -> action edges from ``skill_mappings``
    3. characteristic nodes and characteristic -> skill edges
    4. generalization links (the analysis' own chain, or ``fallback_chain``
       when it has none), creating missing nodes with type ``none``

    Args:
        analysis: Structured analysis of one entry.
        fallback_chain: Links used when the analysis carries no chain.
        timestamp: Optional ISO8601 stamp written to new records.

    Returns:
        GraphState fragment.
    """
    builder = _FragmentBuilder(timestamp)

    for action in analysis.weighted_actions:
        builder.node(action.label, "action")
    for link in analysis.skill_mappings:
        builder.link(link, child_type="action", parent_type="skill")
    for link in analysis.characteristic_mappings:
        builder.link(link, child_type="skill", parent_type="characteristic")

    chain = analysis.generalization_chain or list(fallback_chain)
    for link in chain:
        builder.link(link, child_type="none", parent_type="none")

    return builder.build()


def fragment_from_actions(
    actions: Iterable[str],
    base: GraphState,
    *,
    timestamp: str | None = None,
) -> GraphState:
    """Build a fragment of standalone action nodes for a manual entry.

    Labels already present in ``base`` (by normalized label) are skipped.
    The fragment carries no edges.
    """
    known = {node.key for node in base.nodes.values()}
    builder = _FragmentBuilder(timestamp)
    for label in actions:
        if not label.strip() or normalize_label(label) in known:
            continue
        builder.node(label, "action")
    return builder.build()
