from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from core.enums.skill_level import SkillLevel


class PlayerMetadata(BaseModel):
    """Per-event player attributes used for team balancing.

    Every field except ``user_id`` is optional; missing values normalize to a
    neutral score rather than excluding the player. Skill tags outside
    ``SkillLevel`` are kept as given and score like a missing tag.
    """

    user_id: str
    ehp: float | None = Field(default=None, description="Efficient hours played")
    ehb: float | None = Field(default=None, description="Efficient hours bossed")
    timezone: str | None = Field(default=None, description="IANA identifier, e.g. Europe/London")
    daily_hours_available: float | None = None
    skill_level: SkillLevel | str | None = None
    combat_level: int | None = None
    total_level: int | None = None

    model_config = {
        "frozen": True,
    }

    @field_validator("skill_level", mode="before")
    @classmethod
    def _known_skill_level(cls, value: Any) -> Any:
        if value is None or isinstance(value, SkillLevel):
            return value
        try:
            return SkillLevel(value)
        except ValueError:
            return value


class BalancingWeights(BaseModel):
    """Relative importance of each normalized attribute in the composite score."""

    ehp: float = Field(default=0.25, ge=0)
    ehb: float = Field(default=0.25, ge=0)
    timezone: float = Field(default=0.15, ge=0)
    daily_hours: float = Field(default=0.2, ge=0)
    skill_level: float = Field(default=0.15, ge=0)

    model_config = {
        "frozen": True,
    }

    @property
    def total(self) -> float:
        return self.ehp + self.ehb + self.timezone + self.daily_hours + self.skill_level
