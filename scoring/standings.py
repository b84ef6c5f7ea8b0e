"""Event leaderboard and per-team XP timeline."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from core.enums.board_type import BoardType
from core.models.board import Board
from core.models.results import DailyXPPoint, EventStandings, TeamStanding
from core.models.submission import TeamTileSubmission
from core.models.team import Team
from core.numeric import round_half_up
from scoring.bonus_aggregator import max_possible_bonus, team_event_totals

logger = logging.getLogger(__name__)


def total_possible_xp(boards: Sequence[Board]) -> int:
    """Every tile weight plus every bonus a team could collect across the event."""
    total = 0
    for board in boards:
        total += round_half_up(sum(tile.weight for tile in board.tiles))
        if board.board_type == BoardType.STANDARD:
            total += max_possible_bonus(board)
    return total


def event_standings(
    boards: Sequence[Board],
    teams: Sequence[Team],
    tile_submissions: Iterable[TeamTileSubmission],
) -> EventStandings:
    """Rank teams by total XP across every board of the event.

    Teams with equal totals keep the order they were given in.

    Args:
        boards: All boards of the event
        teams: All teams of the event
        tile_submissions: Team-tile review records for the event

    Returns:
        Teams sorted by total XP descending, with the share of the possible total
        each has reached
    """
    submissions = list(tile_submissions)
    possible = total_possible_xp(boards)

    standings: list[TeamStanding] = []
    for team in teams:
        totals = team_event_totals(boards, team, submissions)
        percentage = round_half_up(1000 * totals.total_xp / possible) / 10 if possible else 0.0
        standings.append(totals.model_copy(update={"percentage_of_possible": percentage}))

    standings.sort(key=lambda standing: standing.total_xp, reverse=True)
    logger.debug("Ranked %d teams against %d possible XP", len(standings), possible)
    return EventStandings(teams=standings, total_possible_xp=possible)


def xp_over_time(
    board: Board,
    team_id: str,
    tile_submissions: Iterable[TeamTileSubmission],
    end: date,
    days: int = 14,
) -> list[DailyXPPoint]:
    """Cumulative tile XP a team earned on a board, one point per day.

    The window covers ``days`` days ending on ``end``. Approved tiles count on
    the day they were reviewed; days without activity repeat the previous total.
    """
    if days <= 0:
        return []
    start = end - timedelta(days=days - 1)
    weights = {tile.id: tile.weight for tile in board.tiles}

    earned_by_day: dict[date, int] = defaultdict(int)
    for sub in tile_submissions:
        if sub.team_id != team_id or not sub.is_approved or sub.tile_id not in weights:
            continue
        if sub.reviewed_at is None:
            logger.debug("Approved submission %s has no review time; left off the timeline", sub.id)
            continue
        day = sub.reviewed_at.date()
        if start <= day <= end:
            earned_by_day[day] += weights[sub.tile_id]

    points = []
    cumulative = 0
    for offset in range(days):
        day = start + timedelta(days=offset)
        cumulative += earned_by_day.get(day, 0)
        points.append(DailyXPPoint(day=day, xp=cumulative))
    return points
