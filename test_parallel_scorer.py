import json

import pytest
from pydantic import ValidationError

from config_models import EventSnapshot, ScoringRunConfiguration, load_event_snapshot
from core.enums.board_type import BoardType
from core.models.board import PatternBonusConfig
from core.models.team import Team
from parallel_scorer import score_event
from scoring.bonus_aggregator import aggregate_event_patterns


@pytest.fixture
def snapshot(make_board, approve):
    bonuses = PatternBonusConfig(
        row_bonuses={0: 10, 1: 10, 2: 10},
        column_bonuses={0: 5, 1: 5, 2: 5},
        main_diagonal_bonus=15,
        anti_diagonal_bonus=15,
        complete_board_bonus=50,
    )
    boards = [
        make_board(3, 3, board_id="main", bonuses=bonuses),
        make_board(2, 2, board_id="ladder", bonuses=bonuses, board_type=BoardType.PROGRESSION),
        make_board(2, 4, board_id="wide", bonuses=PatternBonusConfig(row_bonuses={1: 20})),
    ]
    teams = [Team(id=f"team-{i}", name=f"Team {i + 1}") for i in range(5)]
    submissions = []
    for i, team in enumerate(teams):
        submissions += approve(boards[0], range(0, 9, i + 1), team_id=team.id)
        submissions += approve(boards[2], range(4, 4 + i), team_id=team.id)
    return EventSnapshot(event_id="e1", boards=boards, teams=teams, tile_submissions=submissions)


@pytest.mark.parametrize("workers", [1, 3, 8])
def test_parallel_matches_sequential(snapshot, workers):
    sequential = aggregate_event_patterns(snapshot.boards, snapshot.teams, snapshot.tile_submissions)
    assert score_event(snapshot, workers) == sequential


def test_report_order_is_board_then_team(snapshot):
    report = score_event(snapshot, 4)
    assert [board.board_id for board in report.boards] == ["main", "wide"]
    for board in report.boards:
        assert [team.team_id for team in board.teams] == [f"team-{i}" for i in range(5)]
    first_team = report.boards[0].teams[0]
    assert first_team.patterns.complete_board is not None
    assert first_team.patterns.total_bonus_xp == 3 * 10 + 3 * 5 + 15 + 15 + 50


def test_snapshot_round_trip_through_json(snapshot, tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(snapshot.model_dump_json())
    loaded = load_event_snapshot(path)
    assert loaded == snapshot
    assert loaded.scoring == ScoringRunConfiguration()
    assert set(loaded.tiles_by_board()) == {"main", "ladder", "wide"}
    assert all(sub.team_id == "team-1" for sub in loaded.submissions_for_team("team-1"))
    assert loaded.board("wide").columns == 4
    with pytest.raises(KeyError):
        loaded.board("missing")


def test_snapshot_rejects_malformed_documents(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"event_id": "e1", "boards": [{"id": "b", "rows": 0, "columns": 3}]}))
    with pytest.raises(ValidationError):
        load_event_snapshot(path)


def test_snapshot_rejects_boards_with_missing_tiles(make_board):
    with pytest.raises(ValidationError, match="declares 2x2"):
        EventSnapshot(event_id="e1", boards=[make_board(2, 2, tile_count=3)])
