"""Graph package - the concept graph of characteristics, skills and actions.

Graph snapshots are immutable. Fragments produced by analysis or manual
entries are folded into the base graph with ``merge_fragment``.
"""

from levelgraph.graph.fragments import fragment_from_actions, fragment_from_analysis
from levelgraph.graph.merge import merge_fragment
from levelgraph.graph.models import (
    GRAPH_SCHEMA_VERSION,
    PROGRESSION_ROOT_ID,
    PROGRESSION_ROOT_LABEL,
    Edge,
    GraphState,
    Node,
    NodeType,
    empty_graph,
    make_edge_id,
    make_node_id,
    normalize_label,
    root_node,
)

__all__ = [
    "GRAPH_SCHEMA_VERSION",
    "PROGRESSION_ROOT_ID",
    "PROGRESSION_ROOT_LABEL",
    "Edge",
    "GraphState",
    "Node",
    "NodeType",
    "empty_graph",
    "fragment_from_actions",
    "fragment_from_analysis",
    "make_edge_id",
    "make_node_id",
    "merge_fragment",
    "normalize_label",
    "root_node",
]
