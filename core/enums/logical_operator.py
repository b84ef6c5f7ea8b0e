from __future__ import annotations

from enum import Enum


class LogicalOperator(str, Enum):
    """How a goal group combines the completion of its children."""

    AND = "AND"
    OR = "OR"
