"""Cross-board aggregation of pattern bonuses and base experience for an event."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence

from core.enums.board_type import BoardType
from core.models.board import Board
from core.models.results import (
    BoardPatternReport,
    EventPatternCompletion,
    PatternCompletionResult,
    TeamBoardXP,
    TeamPatternReport,
    TeamStanding,
)
from core.models.submission import TeamTileSubmission
from core.models.team import Team
from core.numeric import round_half_up
from scoring.pattern_completion import approved_tile_ids_for_team, evaluate_patterns

logger = logging.getLogger(__name__)


def max_possible_bonus(board: Board) -> int:
    """Sum every configured bonus a team could earn on a board.

    Row and column bonuses only count for indices that exist on the board, and
    diagonal bonuses only count on square boards.
    """
    bonuses = board.bonuses
    total = sum(bonus for row, bonus in bonuses.row_bonuses.items() if 0 <= row < board.rows)
    total += sum(bonus for col, bonus in bonuses.column_bonuses.items() if 0 <= col < board.columns)
    if board.is_square:
        total += bonuses.main_diagonal_bonus + bonuses.anti_diagonal_bonus
    total += bonuses.complete_board_bonus
    return total


def completion_percentage(achieved: int, possible: int) -> int:
    if possible == 0:
        return 0
    return round_half_up(100 * achieved / possible)


def base_xp(board: Board, approved_tile_ids: Collection[str]) -> int:
    """Rounded sum of tile weights the team has approved on the board."""
    return round_half_up(sum(tile.weight for tile in board.tiles if tile.id in approved_tile_ids))


def completed_tile_indices(board: Board, approved_tile_ids: Collection[str]) -> list[int]:
    return sorted(tile.index for tile in board.tiles if tile.id in approved_tile_ids)


def team_pattern_report(
    board: Board, team: Team, approved_tile_ids: Collection[str], possible_bonus: int
) -> TeamPatternReport:
    patterns = evaluate_patterns(board, approved_tile_ids)
    return TeamPatternReport(
        team_id=team.id,
        team_name=team.name,
        patterns=patterns,
        completion_percentage=completion_percentage(patterns.total_bonus_xp, possible_bonus),
        completed_tile_indices=completed_tile_indices(board, approved_tile_ids),
    )


def aggregate_event_patterns(
    boards: Sequence[Board],
    teams: Sequence[Team],
    tile_submissions: Iterable[TeamTileSubmission],
) -> EventPatternCompletion:
    """Pattern completion for every team on every bonus-carrying board of an event.

    Progression boards and boards without any configured bonus are left out of
    the report.
    """
    submissions = list(tile_submissions)
    approved_by_team = {team.id: approved_tile_ids_for_team(submissions, team.id) for team in teams}

    reports = []
    for board in boards:
        if board.board_type != BoardType.STANDARD:
            continue
        possible = max_possible_bonus(board)
        if possible == 0:
            logger.debug("Board %s has no pattern bonuses configured; skipping", board.id)
            continue
        reports.append(
            BoardPatternReport(
                board_id=board.id,
                title=board.title,
                rows=board.rows,
                columns=board.columns,
                total_possible_bonus_xp=possible,
                teams=[team_pattern_report(board, team, approved_by_team[team.id], possible) for team in teams],
            )
        )
    return EventPatternCompletion(boards=reports)


def team_board_xp(board: Board, approved_tile_ids: Collection[str]) -> TeamBoardXP:
    patterns = (
        evaluate_patterns(board, approved_tile_ids)
        if board.board_type == BoardType.STANDARD
        else PatternCompletionResult()
    )
    return TeamBoardXP(
        board_id=board.id,
        title=board.title,
        base_xp=base_xp(board, approved_tile_ids),
        bonus_xp=patterns.total_bonus_xp,
    )


def team_event_totals(
    boards: Sequence[Board],
    team: Team,
    tile_submissions: Iterable[TeamTileSubmission],
) -> TeamStanding:
    """Sum a team's base and bonus XP across every board of an event."""
    approved = approved_tile_ids_for_team(tile_submissions, team.id)
    per_board = [team_board_xp(board, approved) for board in boards]
    base = sum(entry.base_xp for entry in per_board)
    bonus = sum(entry.bonus_xp for entry in per_board)
    return TeamStanding(
        team_id=team.id,
        name=team.name,
        base_xp=base,
        bonus_xp=bonus,
        total_xp=base + bonus,
        boards=per_board,
    )
