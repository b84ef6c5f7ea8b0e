"""Composition, availability and balance statistics for an event's teams."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import numpy as np

from core.models.balancing import (
    BalanceMetrics,
    CoverageMetrics,
    EventTeamStatistics,
    SpecificCoverage,
    StandardDeviations,
    TeamBalanceEntry,
    TeamBalanceSummary,
    TeamStatistics,
    TimezoneCount,
)
from core.models.player import BalancingWeights, PlayerMetadata
from core.models.team import Participant, Team
from core.numeric import round_half_up
from scoring.normalization import NEUTRAL_SCORE
from scoring.player_scoring import PlayerScorer

logger = logging.getLogger(__name__)

BALANCED_GENERATION_MIN_COVERAGE = 50


def timezone_offset_hours(name: str, at: datetime) -> float:
    """UTC offset of an IANA timezone at a given instant, in hours.

    Unknown identifiers count as UTC.
    """
    try:
        zone = ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; treating it as UTC", name)
        return 0.0
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    offset = at.astimezone(zone).utcoffset()
    return offset.total_seconds() / 3600 if offset is not None else 0.0


def diversity_score(counts: Sequence[int]) -> float:
    """Shannon entropy of a distribution divided by its maximum, in [0, 1].

    A single category, or no data at all, scores 0.
    """
    total = sum(counts)
    if len(counts) <= 1 or total == 0:
        return 0.0
    entropy = 0.0
    for count in counts:
        if count > 0:
            p = count / total
            entropy -= p * math.log2(p)
    return entropy / math.log2(len(counts))


def timezone_hour_spread(timezones: Sequence[str], at: datetime) -> float:
    """Half the range of absolute UTC offsets, read as "plus or minus N hours"."""
    if len(timezones) <= 1:
        return 0.0
    offsets = [abs(timezone_offset_hours(name, at)) for name in timezones]
    return (max(offsets) - min(offsets)) / 2


def _mean_of_present(values: Sequence[float | None]) -> float | None:
    present = [value for value in values if value is not None]
    if not present:
        return None
    return sum(present) / len(present)


def team_statistics(team: Team, metadata_by_user: Mapping[str, PlayerMetadata], at: datetime) -> TeamStatistics:
    """Summarize one team's composition from its members' metadata.

    Averages only include members who have the field set.

    Args:
        team: The team to describe
        metadata_by_user: Player metadata keyed by user id
        at: Instant used to resolve daylight-saving timezone offsets

    Returns:
        Averages, total availability, timezone makeup and metadata coverage
    """
    members = [metadata_by_user[user_id] for user_id in team.member_ids if user_id in metadata_by_user]

    distribution: dict[str, int] = {}
    for metadata in members:
        if metadata.timezone:
            distribution[metadata.timezone] = distribution.get(metadata.timezone, 0) + 1

    daily_hours = [m.daily_hours_available for m in members if m.daily_hours_available is not None]
    member_count = len(team.member_ids)
    return TeamStatistics(
        team_id=team.id,
        team_name=team.name,
        member_count=member_count,
        average_ehp=_mean_of_present([m.ehp for m in members]),
        average_ehb=_mean_of_present([m.ehb for m in members]),
        average_combat_level=_mean_of_present([m.combat_level for m in members]),
        average_total_level=_mean_of_present([m.total_level for m in members]),
        total_daily_hours=sum(daily_hours) if daily_hours else None,
        timezone_distribution=[TimezoneCount(timezone=name, count=count) for name, count in distribution.items()],
        timezone_diversity_score=diversity_score(list(distribution.values())),
        timezone_hour_spread=timezone_hour_spread(list(distribution), at),
        metadata_coverage=100 * len(members) / member_count if member_count else 0.0,
        members_with_metadata=len(members),
    )


def _normalized_variance(values: Sequence[float]) -> float:
    """Coefficient of variation clamped to [0, 1]."""
    mean = float(np.mean(values))
    if mean == 0:
        return 0.0
    return min(1.0, float(np.std(values)) / abs(mean))


def balance_metrics(stats: Sequence[TeamStatistics]) -> BalanceMetrics:
    """Spread of team averages across the event, and an overall 0-100 balance score.

    Variances are population variances over the teams that have data for the
    field; fewer than two such teams means no spread.
    """
    ehp = [t.average_ehp for t in stats if t.average_ehp is not None]
    ehb = [t.average_ehb for t in stats if t.average_ehb is not None]
    hours = [t.total_daily_hours for t in stats if t.total_daily_hours is not None]
    diversity = [t.timezone_diversity_score for t in stats]

    def variance(values: list[float]) -> float:
        return float(np.var(values)) if len(values) > 1 else 0.0

    def normalized(values: list[float]) -> float:
        return _normalized_variance(values) if len(values) > 1 else 0.0

    ehp_variance = variance(ehp)
    ehb_variance = variance(ehb)
    hours_variance = variance(hours)
    timezone_variance = variance(diversity)

    spread = (normalized(ehp) + normalized(ehb) + normalized(hours) + timezone_variance) / 4
    return BalanceMetrics(
        ehp_variance=ehp_variance,
        ehb_variance=ehb_variance,
        timezone_variance=timezone_variance,
        daily_hours_variance=hours_variance,
        overall_balance_score=round_half_up(max(0.0, min(1.0, 1 - spread)) * 100),
        standard_deviations=StandardDeviations(
            ehp=math.sqrt(ehp_variance),
            ehb=math.sqrt(ehb_variance),
            daily_hours=math.sqrt(hours_variance),
        ),
    )


def coverage_metrics(teams: Sequence[Team], metadata_by_user: Mapping[str, PlayerMetadata]) -> CoverageMetrics:
    """Share of rostered players with metadata, overall and per balancing field."""
    user_ids = [user_id for team in teams for user_id in team.member_ids]
    total = len(user_ids)
    known = [metadata_by_user[user_id] for user_id in user_ids if user_id in metadata_by_user]

    def percent(count: int) -> float:
        return 100 * count / total if total else 0.0

    return CoverageMetrics(
        total_players=total,
        players_with_metadata=len(known),
        coverage_percentage=percent(len(known)),
        specific_coverage=SpecificCoverage(
            ehp=percent(sum(1 for m in known if m.ehp is not None)),
            ehb=percent(sum(1 for m in known if m.ehb is not None)),
            timezone=percent(sum(1 for m in known if m.timezone is not None)),
            daily_hours=percent(sum(1 for m in known if m.daily_hours_available is not None)),
        ),
    )


def event_team_statistics(
    teams: Sequence[Team], metadata_by_user: Mapping[str, PlayerMetadata], at: datetime
) -> EventTeamStatistics:
    stats = [team_statistics(team, metadata_by_user, at) for team in teams]
    return EventTeamStatistics(
        teams=stats,
        balance=balance_metrics(stats),
        coverage=coverage_metrics(teams, metadata_by_user),
    )


def metadata_coverage(participants: Sequence[Participant], metadata_by_user: Mapping[str, PlayerMetadata]) -> int:
    """Rounded percentage of participants who have a metadata record."""
    if not participants:
        return 0
    known = sum(1 for participant in participants if participant.user_id in metadata_by_user)
    return round_half_up(100 * known / len(participants))


def can_use_balanced_generation(
    participants: Sequence[Participant], metadata_by_user: Mapping[str, PlayerMetadata]
) -> bool:
    return metadata_coverage(participants, metadata_by_user) >= BALANCED_GENERATION_MIN_COVERAGE


def team_balance_summary(
    teams: Sequence[Team],
    metadata_by_user: Mapping[str, PlayerMetadata],
    weights: BalancingWeights | None = None,
    scorer: PlayerScorer | None = None,
) -> TeamBalanceSummary | None:
    """Average composite score per existing team and the spread between teams.

    Every rostered player with metadata forms the comparison pool; members
    without metadata score neutral. Returns None when there are no teams.
    """
    if not teams:
        return None

    weights = weights or BalancingWeights()
    scorer = scorer or PlayerScorer()
    pool = [metadata_by_user[user_id] for team in teams for user_id in team.member_ids if user_id in metadata_by_user]

    entries = []
    for team in teams:
        scores = [
            scorer.score(metadata_by_user[user_id], pool, weights).score
            if user_id in metadata_by_user
            else NEUTRAL_SCORE
            for user_id in team.member_ids
        ]
        entries.append(
            TeamBalanceEntry(
                team_id=team.id,
                team_name=team.name,
                member_count=len(team.member_ids),
                average_score=sum(scores) / len(scores) if scores else 0.0,
            )
        )

    averages = [entry.average_score for entry in entries]
    variance = float(np.var(averages))
    return TeamBalanceSummary(
        teams=entries,
        overall_average=float(np.mean(averages)),
        variance=variance,
        standard_deviation=math.sqrt(variance),
    )
