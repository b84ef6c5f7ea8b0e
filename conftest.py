from __future__ import annotations

import pytest

from core.enums.board_type import BoardType
from core.enums.submission_status import SubmissionStatus
from core.models.board import Board, PatternBonusConfig, Tile
from core.models.submission import TeamTileSubmission


def _build_board(
    rows: int,
    columns: int,
    *,
    board_id: str = "b1",
    weight: int = 10,
    bonuses: PatternBonusConfig | None = None,
    board_type: BoardType = BoardType.STANDARD,
    tile_count: int | None = None,
) -> Board:
    count = rows * columns if tile_count is None else tile_count
    tiles = [Tile(id=f"{board_id}-t{i}", board_id=board_id, index=i, weight=weight) for i in range(count)]
    return Board(
        id=board_id,
        title=f"Board {board_id}",
        rows=rows,
        columns=columns,
        board_type=board_type,
        tiles=tiles,
        bonuses=bonuses or PatternBonusConfig(),
    )


def _approve(board: Board, indices, team_id: str = "team-a", status: SubmissionStatus = SubmissionStatus.APPROVED):
    tiles = board.tiles_by_index()
    return [
        TeamTileSubmission(id=f"{team_id}-{board.id}-{i}", team_id=team_id, tile_id=tiles[i].id, status=status)
        for i in indices
    ]


@pytest.fixture
def make_board():
    return _build_board


@pytest.fixture
def approve():
    return _approve
