"""Core enums for bingo boards, goals and submissions."""

from .board_type import BoardType
from .logical_operator import LogicalOperator
from .pattern_type import PatternType
from .skill_level import SkillLevel
from .submission_status import SubmissionStatus

__all__ = [
    "BoardType",
    "LogicalOperator",
    "PatternType",
    "SkillLevel",
    "SubmissionStatus",
]
