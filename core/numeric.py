"""Rounding helpers.

Displayed totals depend on which rounding is used where: percentages and
aggregate base XP round half up, conversions from submitted values to XP floor.
Python's built-in ``round`` rounds half to even, so it is not used for either.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def floor_xp(value: float) -> int:
    return math.floor(value)


# Normalized score for a player attribute with nothing to compare against
NEUTRAL_SCORE = 0.5
