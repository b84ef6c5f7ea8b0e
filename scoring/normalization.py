"""Map raw player attributes onto a shared 0..1 scale.

Every normalizer falls back to ``NEUTRAL_SCORE`` when there is nothing to compare
against, so a player with missing data lands in the middle of the field instead
of at either end.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from typing import NamedTuple

import numpy as np

from core.numeric import NEUTRAL_SCORE

__all__ = ["NEUTRAL_SCORE", "NormalizedValue", "lookup_normalize", "percentile_normalize"]


class NormalizedValue(NamedTuple):
    score: float
    has_data: bool

    @classmethod
    def neutral(cls) -> NormalizedValue:
        return cls(NEUTRAL_SCORE, False)


def percentile_normalize(value: float | None, pool: Iterable[float | None]) -> NormalizedValue:
    """Fractional rank of a value within a pool of observations.

    The score is ``(number of pool values <= value) / (number of pool values)``,
    counting only non-missing pool entries.

    Args:
        value: The value to rank, or None when unknown
        pool: Every candidate's value for the same attribute; None entries are ignored

    Returns:
        The rank in [0, 1], or the neutral value when ``value`` is missing or the
        pool has no data
    """
    if value is None:
        return NormalizedValue.neutral()

    observed = np.sort(np.fromiter((v for v in pool if v is not None), dtype=float))
    if observed.size == 0:
        return NormalizedValue.neutral()

    at_or_below = int(np.searchsorted(observed, value, side="right"))
    return NormalizedValue(at_or_below / observed.size, True)


def lookup_normalize(key: Hashable | None, table: Mapping[Hashable, float]) -> NormalizedValue:
    """Score a categorical value from a fixed table; unknown keys are neutral."""
    if key is None or key not in table:
        return NormalizedValue.neutral()
    return NormalizedValue(table[key], True)
