from __future__ import annotations

from pydantic import BaseModel, Field

from core.enums.logical_operator import LogicalOperator


class Goal(BaseModel):
    """A quantitative target belonging to a tile, optionally nested in a group.

    Completion is team-relative: a goal is complete for a team once that team's
    accumulated progress reaches ``target_value``.
    """

    id: str
    tile_id: str
    parent_group_id: str | None = None
    target_value: float
    order_index: int = 0
    description: str = ""

    model_config = {
        "frozen": True,
    }


class GoalGroup(BaseModel):
    """A logical container over goals and nested groups.

    - AND: every child must be complete
    - OR: at least ``min_required_goals`` children must be complete
    """

    id: str
    tile_id: str
    parent_group_id: str | None = None
    logical_operator: LogicalOperator = LogicalOperator.AND
    order_index: int = 0
    min_required_goals: int | None = Field(
        default=None,
        description="Only used by OR groups; absent or non-positive means 1.",
    )

    model_config = {
        "frozen": True,
    }

    @property
    def required_for_or(self) -> int:
        if self.min_required_goals is None or self.min_required_goals <= 0:
            return 1
        return self.min_required_goals


class TeamGoalProgress(BaseModel):
    """A team's accumulated value toward one goal."""

    team_id: str
    goal_id: str
    current_value: float = 0.0

    model_config = {
        "frozen": True,
    }
