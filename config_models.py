"""
Pydantic models for configuration management in the bingo scoring engine.

This module defines the data structures for reading JSON event snapshots
(boards, goals, submissions, teams and player metadata exported by the data
layer) together with the settings for a scoring pass and a team draft.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from core.errors import DraftPreconditionError
from core.models.board import Board, Tile
from core.models.goal import Goal, GoalGroup, TeamGoalProgress
from core.models.player import BalancingWeights, PlayerMetadata
from core.models.submission import TeamTileSubmission
from core.models.team import Participant, Team


class AnnealingConfiguration(BaseModel):
    """
    Schedule and objective weights for the simulated-annealing team generator.

    The temperature falls exponentially from ``initial_temperature`` to
    ``final_temperature`` over ``iterations`` steps. With a fixed ``seed`` the
    same input always yields the same teams.
    """

    iterations: int = Field(default=20000, ge=1, le=100000)
    initial_temperature: float = Field(default=1.0, gt=0)
    final_temperature: float = Field(default=0.0001, gt=0)
    swap_probability: float = Field(
        default=0.7, ge=0, le=1, description="Chance a step swaps two players instead of moving one"
    )
    stagnation_limit: int | None = Field(
        default=5000, ge=1, description="Stop after this many steps without a new best"
    )
    seed: int | None = None
    timezone_weight: float = Field(default=0.333, ge=0)
    ehp_weight: float = Field(default=0.167, ge=0)
    ehb_weight: float = Field(default=0.167, ge=0)
    daily_hours_weight: float = Field(default=0.167, ge=0)

    @model_validator(mode="after")
    def check_schedule(self) -> AnnealingConfiguration:
        if self.final_temperature >= self.initial_temperature:
            msg = "final_temperature must be lower than initial_temperature"
            raise ValueError(msg)
        if self.stagnation_limit is not None and self.stagnation_limit > self.iterations:
            msg = "stagnation_limit cannot exceed iterations"
            raise ValueError(msg)
        return self


class DraftConfiguration(BaseModel):
    """
    How to split the unassigned participants of an event into new teams.

    Either a fixed number of teams is created, or as many teams as it takes to
    keep each at ``team_size`` members. Players are dealt out by a snake draft
    over their composite scores, or placed by simulated annealing.
    """

    generation_method: Literal["team_count", "team_size"] = "team_count"
    team_count: int = Field(default=2, ge=1, description="Number of teams for the team_count method")
    team_size: int | None = Field(default=None, ge=1, description="Target members per team for the team_size method")
    team_name_prefix: str = Field(default="Team", min_length=1)
    weights: BalancingWeights = Field(default_factory=BalancingWeights)
    strategy: Literal["snake", "annealing"] = "snake"
    annealing: AnnealingConfiguration = Field(default_factory=AnnealingConfiguration)

    @model_validator(mode="after")
    def check_team_size(self) -> DraftConfiguration:
        if self.generation_method == "team_size" and self.team_size is None:
            msg = "team_size is required when generation_method is 'team_size'"
            raise ValueError(msg)
        return self

    def resolve_team_count(self, candidate_count: int) -> int:
        """Number of teams to create for ``candidate_count`` drafted players."""
        if self.generation_method == "team_size":
            count = math.ceil(candidate_count / self.team_size)
        else:
            count = self.team_count
        if count < 1:
            msg = f"Draft would create {count} teams for {candidate_count} candidates"
            raise DraftPreconditionError(msg)
        return count


class ScoringRunConfiguration(BaseModel):
    """Settings for one scoring pass over an event snapshot."""

    max_workers: int = Field(default=4, ge=1, description="Threads used to score board/team pairs")
    timeline_days: int = Field(default=14, ge=1, description="Days covered by the XP timeline")


class EventSnapshot(BaseModel):
    """
    One consistent set of input records for an event.

    Every scoring pass reads a single snapshot, so no evaluation ever mixes
    records from before and after an update.
    """

    event_id: str
    boards: list[Board] = Field(default_factory=list)
    goal_groups: list[GoalGroup] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    goal_progress: list[TeamGoalProgress] = Field(default_factory=list)
    teams: list[Team] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)
    tile_submissions: list[TeamTileSubmission] = Field(default_factory=list)
    player_metadata: list[PlayerMetadata] = Field(default_factory=list)
    draft: DraftConfiguration = Field(default_factory=DraftConfiguration)
    scoring: ScoringRunConfiguration = Field(default_factory=ScoringRunConfiguration)

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def check_board_layouts(self) -> EventSnapshot:
        for board in self.boards:
            board.validate_layout()
        return self

    def board(self, board_id: str) -> Board:
        for board in self.boards:
            if board.id == board_id:
                return board
        msg = f"Unknown board: {board_id}"
        raise KeyError(msg)

    def tiles_by_board(self) -> dict[str, list[Tile]]:
        return {board.id: list(board.tiles) for board in self.boards}

    def submissions_for_team(self, team_id: str) -> list[TeamTileSubmission]:
        return [sub for sub in self.tile_submissions if sub.team_id == team_id]

    def metadata_by_user(self) -> dict[str, PlayerMetadata]:
        return {metadata.user_id: metadata for metadata in self.player_metadata}


def load_event_snapshot(path: str | Path) -> EventSnapshot:
    """
    Load and validate an event snapshot from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the document does not describe a valid snapshot
    """
    with open(path) as f:
        data = json.load(f)
    return EventSnapshot(**data)
