from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from core.enums.submission_status import SubmissionStatus


class Submission(BaseModel):
    """One piece of proof (usually an image) uploaded by a team member."""

    id: str
    user_id: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    value: float | None = None
    goal_id: str | None = None
    submitted_at: datetime | None = None

    model_config = {
        "frozen": True,
    }


class TeamTileSubmission(BaseModel):
    """The review record of one team's claim on one tile."""

    id: str
    team_id: str
    tile_id: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    submissions: list[Submission] = Field(default_factory=list)
    reviewed_at: datetime | None = None

    model_config = {
        "frozen": True,
    }

    @property
    def is_approved(self) -> bool:
        return self.status == SubmissionStatus.APPROVED
