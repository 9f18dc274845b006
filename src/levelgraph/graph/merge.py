"""Fold a graph fragment into a base graph.

Conflict rules are deterministic and never raise:

- Nodes deduplicate on normalized label. The node already present wins and
  the fragment node is dropped (first writer wins).
- Edges upsert on edge id. An incoming edge replaces an existing one with
  the same id (last writer wins), so relationship weights can be refined
  entry by entry.

No cycle detection or weight validation happens here.
"""

from __future__ import annotations

from levelgraph.graph.models import Edge, GraphState, make_edge_id
from levelgraph.observability.logging import get_logger

log = get_logger(__name__)


def _repoint_edge(edge: Edge, remap: dict[str, str]) -> Edge:
    source = remap.get(edge.source, edge.source)
    target = remap.get(edge.target, edge.target)
    if source == edge.source and target == edge.target:
        return edge
    return edge.model_copy(
        update={"id": make_edge_id(source, target), "source": source, "target": target}
    )


def merge_fragment(base: GraphState, fragment: GraphState) -> GraphState:
    """Merge ``fragment`` into ``base`` and return a new graph.

    Fragment edges that reference a fragment node discarded in favour of an
    existing node are re-pointed at the surviving node, and their id is
    recomputed from the new endpoints.

    Args:
        base: Current graph snapshot. Not modified.
        fragment: Partial graph produced by analysis or manual edits.

    Returns:
        New GraphState. Equal to ``base`` when the fragment adds nothing.
    """
    nodes = dict(base.nodes)
    edges = dict(base.edges)
    index = base.label_index()
    remap: dict[str, str] = {}

    added = 0
    deduped = 0
    for node_id, node in fragment.nodes.items():
        # An id already in use always keeps its existing node.
        survivor = node_id if node_id in nodes else index.get(node.key)
        if survivor is not None:
            deduped += 1
            if survivor != node_id:
                remap[node_id] = survivor
            continue
        nodes[node_id] = node
        index[node.key] = node_id
        added += 1

    inserted = 0
    overwritten = 0
    for edge in fragment.edges.values():
        edge = _repoint_edge(edge, remap)
        if edge.id in edges:
            overwritten += 1
        else:
            inserted += 1
        edges[edge.id] = edge

    log.debug(
        "fragment_merged",
        nodes_added=added,
        nodes_deduped=deduped,
        edges_inserted=inserted,
        edges_overwritten=overwritten,
    )

    return GraphState(
        nodes=nodes,
        edges=edges,
        version=max(base.version, fragment.version),
    )
