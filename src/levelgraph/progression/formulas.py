"""Progression formulas: EXP rounding, scaling and the level curve.

Leveling curve is logarithmic: ``level = floor(log2(exp + 1))``. Level ``L``
needs ``2**L - 1`` cumulative EXP, so every level costs as much new EXP as all
previous levels combined.

All rounding in the pipeline goes through ``round_exp`` (duration multiplier,
scaled EXP, stored experience) so the stages cannot drift apart.
"""

from __future__ import annotations

import math
import re
import sys
from collections.abc import Mapping

from levelgraph.progression.constants import EXP_PRECISION, MINUTES_PER_EXP_UNIT

_HOURS = re.compile(r"(\d+)\s*h")
_MINUTES = re.compile(r"(\d+)\s*m")
_NON_DIGITS = re.compile(r"\D")

Duration = int | float | str | None

# Highest level whose EXP threshold is still a finite float.
MAX_LEVEL = sys.float_info.max_exp - 1


def round_exp(value: float, precision: int = EXP_PRECISION) -> float:
    """Round to ``precision`` decimal places, halves rounding up.

    Values too large to scale (and infinities) are returned unchanged.
    """
    scale = 10**precision
    scaled = value * scale
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / scale


def _duration_to_minutes(duration: str) -> float:
    lower = duration.lower()
    minutes = 0

    hours = _HOURS.search(lower)
    if hours:
        minutes += int(hours.group(1)) * 60
    mins = _MINUTES.search(lower)
    if mins:
        minutes += int(mins.group(1))

    if minutes == 0:
        digits = _NON_DIGITS.sub("", lower)
        if digits:
            minutes = int(digits)
    return float(minutes)


def parse_duration_to_multiplier(
    duration: Duration = None,
    minutes_per_unit: int = MINUTES_PER_EXP_UNIT,
) -> float:
    """Convert a duration into an EXP multiplier.

    Accepts numeric minutes or a free-text string such as ``"1h30m"``,
    ``"45m"`` or ``"90"``. Anything missing, zero, non-finite or unparseable
    (including numbers too large for a float) yields ``1.0``; this never
    raises. A negative number of minutes gives a negative multiplier, which
    the statistics mutator later ignores.

    Examples:
        >>> parse_duration_to_multiplier(60)
        2.0
        >>> parse_duration_to_multiplier("1h30m")
        3.0
        >>> parse_duration_to_multiplier(-30)
        -1.0
        >>> parse_duration_to_multiplier(None)
        1.0
    """
    if isinstance(duration, bool) or not duration:
        return 1.0

    try:
        if isinstance(duration, int | float):
            minutes = float(duration)
        elif isinstance(duration, str):
            minutes = _duration_to_minutes(duration)
        else:
            return 1.0
    except (OverflowError, ValueError):
        # Digit runs beyond the float range or int() digit limit.
        return 1.0

    if minutes == 0 or not math.isfinite(minutes):
        return 1.0
    return round_exp(minutes / minutes_per_unit)


def scale_experience(propagated: Mapping[str, float], multiplier: float) -> dict[str, float]:
    """Multiply every propagated value by ``multiplier``, rounding each result."""
    return {label: round_exp(amount * multiplier) for label, amount in propagated.items()}


def get_level_for_exp(total_exp: float) -> int:
    """Level reached with ``total_exp`` cumulative experience.

    Never negative, and capped at ``MAX_LEVEL`` so infinite experience still
    maps to a level.
    """
    if not total_exp > 0:
        return 0
    if total_exp == math.inf:
        return MAX_LEVEL
    return min(math.floor(math.log2(total_exp + 1)), MAX_LEVEL)


def get_exp_for_level(level: int) -> int:
    """Minimum cumulative EXP needed to reach ``level``."""
    return 2**level - 1


def get_exp_progress(total_exp: float) -> float:
    """Fraction of the way from the current level threshold to the next one.

    Useful for rendering EXP bars. Returns ``0.0`` on a zero-width bracket
    and for non-finite input.
    """
    if not math.isfinite(total_exp):
        return 0.0
    total_exp = max(total_exp, 0.0)
    level = get_level_for_exp(total_exp)
    current = get_exp_for_level(level)
    span = get_exp_for_level(level + 1) - current
    if span == 0:
        return 0.0
    return round_exp((total_exp - current) / span)
