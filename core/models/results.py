"""Result models returned by the completion and scoring engine."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from core.enums.logical_operator import LogicalOperator
from core.enums.pattern_type import PatternType


class GoalProgress(BaseModel):
    """Completion of a single goal for one team."""

    is_complete: bool
    current_value: float
    target_value: float
    percentage: float = Field(..., ge=0, le=100)


class GoalNodeEvaluation(BaseModel):
    """One evaluated node of a goal tree.

    ``completed_count``/``total_count`` tally leaf goals beneath the node (a leaf
    counts itself); they drive progress displays, not the logical result.
    """

    node_type: Literal["goal", "group"]
    id: str
    is_complete: bool
    operator: LogicalOperator | None = None
    min_required: int | None = None
    completed_count: int = 0
    total_count: int = 0
    percentage: float = 0.0
    children: list[GoalNodeEvaluation] = Field(default_factory=list)


class CompletedPattern(BaseModel):
    pattern_type: PatternType
    index: int | None = Field(default=None, description="Row or column index; None for other patterns")
    bonus_xp: int


class PatternCompletionResult(BaseModel):
    """Patterns a team has completed on one board, with the summed bonus."""

    completed_rows: list[CompletedPattern] = Field(default_factory=list)
    completed_columns: list[CompletedPattern] = Field(default_factory=list)
    main_diagonal: CompletedPattern | None = None
    anti_diagonal: CompletedPattern | None = None
    complete_board: CompletedPattern | None = None
    total_bonus_xp: int = 0

    def add(self, pattern: CompletedPattern) -> None:
        if pattern.pattern_type == PatternType.ROW:
            self.completed_rows.append(pattern)
        elif pattern.pattern_type == PatternType.COLUMN:
            self.completed_columns.append(pattern)
        elif pattern.pattern_type == PatternType.MAIN_DIAGONAL:
            self.main_diagonal = pattern
        elif pattern.pattern_type == PatternType.ANTI_DIAGONAL:
            self.anti_diagonal = pattern
        else:
            self.complete_board = pattern
        self.total_bonus_xp += pattern.bonus_xp

    def all_patterns(self) -> list[CompletedPattern]:
        patterns = [*self.completed_rows, *self.completed_columns]
        for single in (self.main_diagonal, self.anti_diagonal, self.complete_board):
            if single is not None:
                patterns.append(single)
        return patterns


class TeamPatternReport(BaseModel):
    team_id: str
    team_name: str
    patterns: PatternCompletionResult
    completion_percentage: int
    completed_tile_indices: list[int] = Field(default_factory=list)


class BoardPatternReport(BaseModel):
    board_id: str
    title: str
    rows: int
    columns: int
    total_possible_bonus_xp: int
    teams: list[TeamPatternReport] = Field(default_factory=list)


class EventPatternCompletion(BaseModel):
    boards: list[BoardPatternReport] = Field(default_factory=list)


class TeamBoardXP(BaseModel):
    """Base and bonus experience one team earned on one board."""

    board_id: str
    title: str
    base_xp: int = 0
    bonus_xp: int = 0

    @computed_field
    @property
    def xp(self) -> int:
        return self.base_xp + self.bonus_xp


class TeamStanding(BaseModel):
    team_id: str
    name: str
    base_xp: int = 0
    bonus_xp: int = 0
    total_xp: int = 0
    percentage_of_possible: float = 0.0
    boards: list[TeamBoardXP] = Field(default_factory=list)


class EventStandings(BaseModel):
    teams: list[TeamStanding] = Field(default_factory=list)
    total_possible_xp: int = 0


class DailyXPPoint(BaseModel):
    day: date
    xp: int


class UserContribution(BaseModel):
    """How much one team member contributed to their team's submissions."""

    user_id: str
    submission_count: int = 0
    approved_count: int = 0
    contribution_xp: float = 0.0
    value_total: int = 0
    contribution_percentage: float = 0.0


class TeamContributionReport(BaseModel):
    team_id: str
    total_submissions: int = 0
    approved_submissions: int = 0
    total_xp: float = 0.0
    users: list[UserContribution] = Field(default_factory=list)


GoalNodeEvaluation.model_rebuild()
