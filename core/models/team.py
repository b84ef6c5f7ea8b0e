from __future__ import annotations

from pydantic import BaseModel, Field


class Team(BaseModel):
    id: str
    name: str
    member_ids: list[str] = Field(default_factory=list)

    model_config = {
        "frozen": True,
    }


class Participant(BaseModel):
    """An event participant who may or may not be on a team yet."""

    user_id: str
    display_name: str | None = None

    model_config = {
        "frozen": True,
    }
