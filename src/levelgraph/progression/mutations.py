"""Player statistics mutations.

Pure functions that take the current statistics snapshot plus EXP deltas and
return the next snapshot. Level-ups are detected here and nowhere else, so
each processed entry must go through ``apply_deltas`` exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from levelgraph.graph.models import PROGRESSION_ROOT_LABEL, normalize_label
from levelgraph.progression.formulas import get_level_for_exp, round_exp

if TYPE_CHECKING:
    from collections.abc import Mapping


class NodeStats(BaseModel):
    """Experience and level of one concept."""

    model_config = ConfigDict(frozen=True)

    experience: float = Field(default=0.0, ge=0)
    level: int = Field(default=0, ge=0)


PlayerStatistics = dict[str, NodeStats]


def initial_statistics(root_label: str = PROGRESSION_ROOT_LABEL) -> PlayerStatistics:
    """Fresh statistics holding only the progression root at zero."""
    return {root_label: NodeStats()}


@dataclass(frozen=True)
class StatsUpdate:
    """Outcome of applying one entry's deltas.

    Attributes:
        next_stats: New statistics snapshot.
        total_increase: Sum of all applied (positive) deltas, rounded.
        levels_gained: Levels gained across all concepts.
    """

    next_stats: PlayerStatistics
    total_increase: float
    levels_gained: int


def apply_deltas(current: Mapping[str, NodeStats], deltas: Mapping[str, float]) -> StatsUpdate:
    """Add EXP deltas to a statistics snapshot and detect level-ups.

    Non-positive deltas are dropped entirely: they neither reduce experience
    nor count towards the total. Deltas are matched to existing entries by
    normalized label, so ``"coding"`` updates an existing ``"Coding"`` entry.
    Labels missing from ``current`` start at zero experience, level 0.

    Args:
        current: Current statistics. Not modified.
        deltas: EXP to add per label.

    Returns:
        StatsUpdate with the new snapshot and the aggregate gains.
    """
    next_stats: PlayerStatistics = dict(current)
    keys = {normalize_label(label): label for label in reversed(list(current))}
    total = 0.0
    levels_gained = 0

    for label, amount in deltas.items():
        if amount <= 0:
            continue
        total += amount

        label = keys.setdefault(normalize_label(label), label)
        previous = next_stats.get(label) or NodeStats()
        experience = round_exp(previous.experience + amount)
        level = get_level_for_exp(experience)
        if level > previous.level:
            levels_gained += level - previous.level

        next_stats[label] = NodeStats(experience=experience, level=level)

    return StatsUpdate(
        next_stats=next_stats,
        total_increase=round_exp(total),
        levels_gained=levels_gained,
    )
