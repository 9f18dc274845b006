"""Progression system constants.

Centralized tuning for the leveling and experience model.
"""

from __future__ import annotations

from levelgraph.graph.models import PROGRESSION_ROOT_ID

# 30 minutes of activity = 1.0 base EXP unit.
BASE_EXP_UNIT = 1.0
MINUTES_PER_EXP_UNIT = 30

# Decimal places kept for every stored EXP value.
EXP_PRECISION = 4

__all__ = [
    "BASE_EXP_UNIT",
    "EXP_PRECISION",
    "MINUTES_PER_EXP_UNIT",
    "PROGRESSION_ROOT_ID",
]
