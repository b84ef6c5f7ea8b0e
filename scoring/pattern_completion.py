"""Row, column, diagonal and full-board completion for one team on one board."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping

from core.enums.board_type import BoardType
from core.enums.pattern_type import PatternType
from core.models.board import Board, Tile
from core.models.results import CompletedPattern, PatternCompletionResult
from core.models.submission import TeamTileSubmission
from scoring.grid_patterns import all_indices, column_indices, diagonal_indices_for, row_indices

logger = logging.getLogger(__name__)


def approved_tile_ids_for_team(tile_submissions: Iterable[TeamTileSubmission], team_id: str) -> set[str]:
    return {sub.tile_id for sub in tile_submissions if sub.team_id == team_id and sub.is_approved}


def is_pattern_complete(indices: list[int], board: Board, approved_tile_ids: Collection[str]) -> bool:
    """Check that every index has a tile and every such tile is approved.

    An empty index list never completes, and neither does a pattern that points
    at an index the board has no tile for.
    """
    return _pattern_complete(indices, board.tiles_by_index(), approved_tile_ids)


def _pattern_complete(indices: list[int], tiles: Mapping[int, Tile], approved_tile_ids: Collection[str]) -> bool:
    if not indices:
        return False
    for index in indices:
        tile = tiles.get(index)
        if tile is None or tile.id not in approved_tile_ids:
            return False
    return True


def evaluate_patterns(board: Board, approved_tile_ids: Collection[str]) -> PatternCompletionResult:
    """Get all completed patterns and their bonuses for a team on a board.

    Only standard boards award pattern bonuses. Patterns without a positive
    bonus configured are skipped entirely.

    Args:
        board: The board with its tiles and bonus configuration
        approved_tile_ids: Ids of tiles the team has an approved submission for

    Returns:
        Completed rows and columns, optional diagonals and full board, and the
        summed bonus XP
    """
    result = PatternCompletionResult()
    if board.board_type != BoardType.STANDARD:
        return result

    bonuses = board.bonuses
    total_tiles = len(board.tiles)
    tiles = board.tiles_by_index()

    for row in range(board.rows):
        bonus = bonuses.row_bonus(row)
        if bonus > 0 and _pattern_complete(row_indices(row, board.columns, total_tiles), tiles, approved_tile_ids):
            result.add(CompletedPattern(pattern_type=PatternType.ROW, index=row, bonus_xp=bonus))

    for col in range(board.columns):
        bonus = bonuses.column_bonus(col)
        if bonus > 0 and _pattern_complete(column_indices(col, board.rows, board.columns), tiles, approved_tile_ids):
            result.add(CompletedPattern(pattern_type=PatternType.COLUMN, index=col, bonus_xp=bonus))

    diagonals = diagonal_indices_for(board.rows, board.columns)
    if diagonals is not None:
        main, anti = diagonals
        if bonuses.main_diagonal_bonus > 0 and _pattern_complete(main, tiles, approved_tile_ids):
            result.add(CompletedPattern(pattern_type=PatternType.MAIN_DIAGONAL, bonus_xp=bonuses.main_diagonal_bonus))
        if bonuses.anti_diagonal_bonus > 0 and _pattern_complete(anti, tiles, approved_tile_ids):
            result.add(CompletedPattern(pattern_type=PatternType.ANTI_DIAGONAL, bonus_xp=bonuses.anti_diagonal_bonus))

    if bonuses.complete_board_bonus > 0 and _pattern_complete(
        all_indices(board.rows, board.columns), tiles, approved_tile_ids
    ):
        result.add(CompletedPattern(pattern_type=PatternType.COMPLETE_BOARD, bonus_xp=bonuses.complete_board_bonus))

    logger.debug(
        "Board %s: %d patterns complete, %d bonus XP",
        board.id,
        len(result.all_patterns()),
        result.total_bonus_xp,
    )
    return result
