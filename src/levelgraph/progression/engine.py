"""Progression engine: path-weighted cumulative averaging.

A single action can feed several branches of the concept graph. Summing
contributions at the upper levels would inflate broad characteristics in
proportion to graph density, so every seed is treated as one unit of effort
and each ancestor receives the *mean* intensity over all paths reaching it.

Algorithm:
    1. Build ``child -> {parent: weight}`` from the edge table.
    2. For each seed, walk breadth-first towards the roots. The path weight
       starts at 1.0 and is multiplied by each edge weight on the way up.
       Every visit adds ``seed * path_weight`` to the node's sum and counts
       one hit.
    3. Divide each node's sum by its hit count.

A parent already on the current path is not revisited. On acyclic graphs this
never triggers, so every path is still walked and counted; on cyclic graphs it
is what makes the walk terminate.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING

from levelgraph.graph.models import normalize_label
from levelgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from levelgraph.graph.models import Edge, Node

log = get_logger(__name__)


def build_parent_map(edges: Mapping[str, Edge]) -> dict[str, dict[str, float]]:
    """Map each child id to ``{parent_id: weight}``."""
    parents: dict[str, dict[str, float]] = defaultdict(dict)
    for edge in edges.values():
        parents[edge.target][edge.source] = edge.effective_weight
    return dict(parents)


def propagate(
    nodes: Mapping[str, Node],
    edges: Mapping[str, Edge],
    seeds: Mapping[str, float],
) -> dict[str, float]:
    """Propagate seed values up the graph.

    Seed labels are matched to nodes by normalized label. A label with no
    matching node still contributes to itself, as a leaf without parents.

    Args:
        nodes: Node table of the graph.
        edges: Edge table of the graph (``source`` is the parent).
        seeds: Seed value per action label.

    Returns:
        Mean propagated value per visited node, keyed by node label. Values
        are not rounded.
    """
    parent_map = build_parent_map(edges)
    index: dict[str, str] = {}
    for node_id, node in nodes.items():
        index.setdefault(node.key, node_id)

    sums: dict[str, float] = defaultdict(float)
    hits: dict[str, int] = defaultdict(int)
    phantoms: dict[str, float] = {}
    cycles_cut = 0

    for seed_label, seed_value in seeds.items():
        start = index.get(normalize_label(seed_label))
        if start is None:
            # Unknown label: a leaf of its own, even if it spells a node id.
            phantoms[seed_label] = seed_value
            continue
        queue: deque[tuple[str, float, frozenset[str]]] = deque(
            [(start, 1.0, frozenset({start}))]
        )

        while queue:
            node_id, path_weight, path = queue.popleft()
            sums[node_id] += seed_value * path_weight
            hits[node_id] += 1

            for parent_id, weight in parent_map.get(node_id, {}).items():
                if parent_id in path:
                    cycles_cut += 1
                    continue
                queue.append((parent_id, path_weight * weight, path | {parent_id}))

    if cycles_cut:
        log.warning("propagation_cycle_detected", edges_skipped=cycles_cut)

    result: dict[str, float] = {}
    for node_id, total in sums.items():
        # Edges may name ids with no node record; report those by id.
        label = nodes[node_id].label if node_id in nodes else node_id
        result[label] = total / hits[node_id]
    result.update(phantoms)

    log.debug("propagation_complete", seeds=len(seeds), visited=len(result))
    return result
