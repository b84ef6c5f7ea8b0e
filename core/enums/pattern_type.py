from __future__ import annotations

from enum import Enum


class PatternType(str, Enum):
    """Board patterns that can carry bonus experience."""

    ROW = "row"
    COLUMN = "column"
    MAIN_DIAGONAL = "main-diagonal"
    ANTI_DIAGONAL = "anti-diagonal"
    COMPLETE_BOARD = "complete-board"
