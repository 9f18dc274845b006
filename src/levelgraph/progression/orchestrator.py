"""Progression orchestrator - pure calculation pipelines.

Composes the engine, formulas and statistics mutations into the entry points
callers use. Everything here takes snapshots in and hands new snapshots out;
persisting them is the caller's business.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from levelgraph.graph.fragments import fragment_from_actions, fragment_from_analysis
from levelgraph.graph.merge import merge_fragment
from levelgraph.observability.logging import get_logger
from levelgraph.progression.constants import MINUTES_PER_EXP_UNIT
from levelgraph.progression.engine import propagate
from levelgraph.progression.formulas import (
    Duration,
    parse_duration_to_multiplier,
    scale_experience,
)
from levelgraph.progression.mutations import PlayerStatistics, apply_deltas

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from levelgraph.config import ProgressionConfig
    from levelgraph.graph.models import GraphState
    from levelgraph.models.analysis import EntryAnalysis, GeneralizationLink
    from levelgraph.progression.mutations import NodeStats

log = get_logger(__name__)


@dataclass(frozen=True)
class ProgressionResult:
    """Result of one progression pipeline run.

    Attributes:
        next_stats: Statistics snapshot after the entry.
        total_increase: Total EXP awarded, rounded.
        levels_gained: Levels gained across all concepts.
        node_increases: Exact EXP delta applied per node label.
    """

    next_stats: PlayerStatistics
    total_increase: float
    levels_gained: int
    node_increases: dict[str, float]


@dataclass(frozen=True)
class EntryOutcome:
    """Graph and statistics after processing one entry."""

    graph: GraphState
    result: ProgressionResult


def _minutes_per_unit(config: ProgressionConfig | None) -> int:
    return config.minutes_per_exp_unit if config is not None else MINUTES_PER_EXP_UNIT


def _apply(stats: Mapping[str, NodeStats], node_increases: dict[str, float]) -> ProgressionResult:
    update = apply_deltas(stats, node_increases)
    log.debug(
        "progression_applied",
        nodes=len(node_increases),
        total_increase=update.total_increase,
        levels_gained=update.levels_gained,
    )
    return ProgressionResult(
        next_stats=update.next_stats,
        total_increase=update.total_increase,
        levels_gained=update.levels_gained,
        node_increases=node_increases,
    )


def calculate_scaled_progression(
    topology: GraphState,
    stats: Mapping[str, NodeStats],
    action_weights: Mapping[str, float],
    duration: Duration = None,
    *,
    config: ProgressionConfig | None = None,
) -> ProgressionResult:
    """Propagate weighted action seeds and scale them by the entry duration.

    Used for analyzed entries and for duration-aware manual entries.

    Args:
        topology: Current graph.
        stats: Current statistics snapshot.
        action_weights: Seed weight per action label.
        duration: Minutes or free-text duration; defaults to multiplier 1.0.
        config: Optional configuration (EXP unit size).
    """
    propagated = propagate(topology.nodes, topology.edges, action_weights)
    multiplier = parse_duration_to_multiplier(duration, _minutes_per_unit(config))
    return _apply(stats, scale_experience(propagated, multiplier))


def calculate_direct_progression(
    topology: GraphState,
    stats: Mapping[str, NodeStats],
    actions: Sequence[str],
    exp: float = 1.0,
) -> ProgressionResult:
    """Inject a flat amount of EXP per action, without duration scaling.

    Meant for debugging and admin tooling. Each listed action is seeded at
    ``exp``; the rest of the pipeline matches the scaled variant.
    """
    seeds = dict.fromkeys(actions, exp)
    propagated = propagate(topology.nodes, topology.edges, seeds)
    return _apply(stats, scale_experience(propagated, 1.0))


def process_entry(
    graph: GraphState,
    stats: Mapping[str, NodeStats],
    fragment: GraphState,
    action_weights: Mapping[str, float],
    duration: Duration = None,
    *,
    config: ProgressionConfig | None = None,
) -> EntryOutcome:
    """Merge an entry's fragment into the graph, then award its EXP."""
    merged = merge_fragment(graph, fragment)
    result = calculate_scaled_progression(
        merged, stats, action_weights, duration, config=config
    )
    return EntryOutcome(graph=merged, result=result)


def process_analyzed_entry(
    graph: GraphState,
    stats: Mapping[str, NodeStats],
    analysis: EntryAnalysis,
    fallback_chain: Sequence[GeneralizationLink] = (),
    *,
    config: ProgressionConfig | None = None,
) -> EntryOutcome:
    """Process an entry decomposed by the analysis collaborator.

    The analysis' weighted actions seed propagation and its estimated
    duration scales the result.
    """
    fragment = fragment_from_analysis(analysis, fallback_chain)
    return process_entry(
        graph,
        stats,
        fragment,
        analysis.action_weights(),
        analysis.duration_minutes,
        config=config,
    )


def process_manual_entry(
    graph: GraphState,
    stats: Mapping[str, NodeStats],
    actions: Sequence[str],
    duration: Duration = None,
    *,
    config: ProgressionConfig | None = None,
) -> EntryOutcome:
    """Process a manual entry: a flat list of action labels and a duration.

    Unknown actions become standalone action nodes; every action is seeded
    at 1.0 before duration scaling.
    """
    fragment = fragment_from_actions(actions, graph)
    seeds = dict.fromkeys(actions, 1.0)
    return process_entry(graph, stats, fragment, seeds, duration, config=config)
