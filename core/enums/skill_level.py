from __future__ import annotations

from enum import Enum


class SkillLevel(str, Enum):
    """Self-reported skill tags an organizer can attach to a player.

    ``PVMGOD`` exists in stored data but sits outside the four-point scale used
    for balancing, so it normalizes like an unknown tag.
    """

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"
    PVMGOD = "pvmgod"
