"""Composite player score used to rank participants for team drafting."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from core.enums.skill_level import SkillLevel
from core.models.balancing import AttributeBreakdown, PlayerScore
from core.models.player import BalancingWeights, PlayerMetadata
from core.models.team import Participant
from scoring.normalization import NEUTRAL_SCORE, lookup_normalize, percentile_normalize

logger = logging.getLogger(__name__)

# Rough overlap of each zone's evenings with the busiest hours of play
TIMEZONE_SCORES: Mapping[str, float] = MappingProxyType(
    {
        "UTC": 0.9,
        "Europe/London": 1.0,
        "Europe/Dublin": 1.0,
        "Europe/Lisbon": 1.0,
        "Europe/Amsterdam": 0.95,
        "Europe/Berlin": 0.95,
        "Europe/Brussels": 0.95,
        "Europe/Copenhagen": 0.95,
        "Europe/Madrid": 0.95,
        "Europe/Oslo": 0.95,
        "Europe/Paris": 0.95,
        "Europe/Rome": 0.95,
        "Europe/Stockholm": 0.95,
        "Europe/Warsaw": 0.95,
        "Europe/Helsinki": 0.85,
        "Europe/Athens": 0.85,
        "Europe/Bucharest": 0.85,
        "Europe/Moscow": 0.75,
        "America/Halifax": 0.85,
        "America/New_York": 0.85,
        "America/Toronto": 0.85,
        "America/Chicago": 0.8,
        "America/Winnipeg": 0.8,
        "America/Mexico_City": 0.75,
        "America/Denver": 0.75,
        "America/Edmonton": 0.75,
        "America/Phoenix": 0.7,
        "America/Los_Angeles": 0.7,
        "America/Vancouver": 0.7,
        "America/Anchorage": 0.6,
        "Pacific/Honolulu": 0.55,
        "America/Sao_Paulo": 0.8,
        "America/Buenos_Aires": 0.8,
        "Africa/Johannesburg": 0.85,
        "Asia/Dubai": 0.6,
        "Asia/Kolkata": 0.5,
        "Asia/Singapore": 0.4,
        "Asia/Manila": 0.4,
        "Asia/Shanghai": 0.4,
        "Asia/Tokyo": 0.35,
        "Australia/Perth": 0.4,
        "Australia/Brisbane": 0.35,
        "Australia/Sydney": 0.35,
        "Australia/Melbourne": 0.35,
        "Pacific/Auckland": 0.3,
    }
)

SKILL_LEVEL_SCORES: Mapping[SkillLevel, float] = MappingProxyType(
    {
        SkillLevel.BEGINNER: 0.25,
        SkillLevel.INTERMEDIATE: 0.5,
        SkillLevel.ADVANCED: 0.75,
        SkillLevel.EXPERT: 1.0,
    }
)


class PlayerScorer:
    """Normalizes player attributes and combines them with balancing weights.

    The percentile attributes (``ehp``, ``ehb`` and daily hours) are ranked
    against a comparison pool; timezone and skill level come from lookup tables.
    """

    def __init__(
        self,
        timezone_scores: Mapping[str, float] | None = None,
        skill_scores: Mapping[SkillLevel, float] | None = None,
    ) -> None:
        self.timezone_scores = MappingProxyType(dict(timezone_scores)) if timezone_scores is not None else TIMEZONE_SCORES
        self.skill_scores = MappingProxyType(dict(skill_scores)) if skill_scores is not None else SKILL_LEVEL_SCORES

    def breakdown(self, metadata: PlayerMetadata, pool: Sequence[PlayerMetadata]) -> AttributeBreakdown:
        return AttributeBreakdown(
            ehp=percentile_normalize(metadata.ehp, (other.ehp for other in pool)).score,
            ehb=percentile_normalize(metadata.ehb, (other.ehb for other in pool)).score,
            timezone=lookup_normalize(metadata.timezone, self.timezone_scores).score,
            daily_hours=percentile_normalize(
                metadata.daily_hours_available, (other.daily_hours_available for other in pool)
            ).score,
            skill_level=lookup_normalize(metadata.skill_level, self.skill_scores).score,
        )

    def score(self, metadata: PlayerMetadata, pool: Sequence[PlayerMetadata], weights: BalancingWeights) -> PlayerScore:
        """Score one player against the metadata of the comparison pool.

        Args:
            metadata: The player's attributes
            pool: Metadata of every player the score is compared against
            weights: Relative importance of each attribute

        Returns:
            The weighted average of the normalized attributes with its breakdown
        """
        breakdown = self.breakdown(metadata, pool)
        return PlayerScore(
            user_id=metadata.user_id,
            score=self.combine(breakdown, weights),
            breakdown=breakdown,
        )

    @staticmethod
    def combine(breakdown: AttributeBreakdown, weights: BalancingWeights) -> float:
        total_weight = weights.total
        if total_weight == 0:
            logger.warning("All balancing weights are zero; using the neutral score")
            return NEUTRAL_SCORE
        weighted = (
            breakdown.ehp * weights.ehp
            + breakdown.ehb * weights.ehb
            + breakdown.timezone * weights.timezone
            + breakdown.daily_hours * weights.daily_hours
            + breakdown.skill_level * weights.skill_level
        )
        return weighted / total_weight

    def score_pool(
        self,
        participants: Sequence[Participant],
        metadata_by_user: Mapping[str, PlayerMetadata],
        weights: BalancingWeights,
    ) -> list[PlayerScore]:
        """Score every participant against the metadata of the participants given.

        Participants without metadata get the neutral breakdown and still appear
        in the result, in input order.
        """
        pool = [metadata_by_user[p.user_id] for p in participants if p.user_id in metadata_by_user]
        scores = []
        for participant in participants:
            metadata = metadata_by_user.get(participant.user_id)
            if metadata is None:
                scores.append(PlayerScore(user_id=participant.user_id, score=NEUTRAL_SCORE))
                continue
            scores.append(self.score(metadata, pool, weights))
        logger.debug("Scored %d participants (%d with metadata)", len(scores), len(pool))
        return scores
