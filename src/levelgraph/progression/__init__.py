"""Progression system - experience propagation, scaling and leveling.

Import from ``levelgraph.progression`` everywhere else.
"""

from levelgraph.progression.constants import (
    BASE_EXP_UNIT,
    EXP_PRECISION,
    MINUTES_PER_EXP_UNIT,
    PROGRESSION_ROOT_ID,
)
from levelgraph.progression.engine import build_parent_map, propagate
from levelgraph.progression.formulas import (
    MAX_LEVEL,
    get_exp_for_level,
    get_exp_progress,
    get_level_for_exp,
    parse_duration_to_multiplier,
    round_exp,
    scale_experience,
)
from levelgraph.progression.mutations import (
    NodeStats,
    PlayerStatistics,
    StatsUpdate,
    apply_deltas,
    initial_statistics,
)
from levelgraph.progression.orchestrator import (
    EntryOutcome,
    ProgressionResult,
    calculate_direct_progression,
    calculate_scaled_progression,
    process_analyzed_entry,
    process_entry,
    process_manual_entry,
)

__all__ = [
    "BASE_EXP_UNIT",
    "EXP_PRECISION",
    "MAX_LEVEL",
    "MINUTES_PER_EXP_UNIT",
    "PROGRESSION_ROOT_ID",
    "EntryOutcome",
    "NodeStats",
    "PlayerStatistics",
    "ProgressionResult",
    "StatsUpdate",
    "apply_deltas",
    "build_parent_map",
    "calculate_direct_progression",
    "calculate_scaled_progression",
    "get_exp_for_level",
    "get_exp_progress",
    "get_level_for_exp",
    "initial_statistics",
    "parse_duration_to_multiplier",
    "process_analyzed_entry",
    "process_entry",
    "process_manual_entry",
    "propagate",
    "round_exp",
    "scale_experience",
]
