import pytest

from core.enums.submission_status import ALL_STATUSES, SubmissionStatus
from core.models.board import Tile
from core.models.submission import Submission, TeamTileSubmission
from core.models.team import Team
from scoring.contribution import score_contributions, tile_contribution_shares

TEAM = Team(id="team-a", name="Alpha", member_ids=["alice", "bob", "cara"])
APPROVED = SubmissionStatus.APPROVED


def proof(proof_id, user_id, status=APPROVED, value=None):
    return Submission(id=proof_id, user_id=user_id, status=status, value=value)


def record(tile_id, proofs, status=APPROVED, team_id="team-a"):
    return TeamTileSubmission(id=f"{team_id}-{tile_id}", team_id=team_id, tile_id=tile_id, status=status, submissions=proofs)


def test_tile_split_by_submission_count():
    tile = Tile(id="t1", board_id="b1", index=0, weight=90)
    sub = record("t1", [proof("1", "alice"), proof("2", "alice"), proof("3", "alice"), proof("4", "bob")])
    assert tile_contribution_shares(tile, sub) == {"alice": 67.5, "bob": 22.5}


def test_tile_without_proofs_has_no_shares():
    tile = Tile(id="t1", board_id="b1", index=0, weight=90)
    assert tile_contribution_shares(tile, record("t1", [])) == {}


def test_team_report():
    tiles = [
        Tile(id="t1", board_id="b1", index=0, weight=90),
        Tile(id="t2", board_id="b1", index=1, weight=40),
        Tile(id="t3", board_id="b1", index=2, weight=50),
    ]
    submissions = [
        record(
            "t1",
            [
                proof("1", "alice", value=2.9),
                proof("2", "alice"),
                proof("3", "alice", status=SubmissionStatus.DECLINED, value=5),
                proof("4", "bob", value=1.5),
            ],
        ),
        record("t2", [proof("5", "cara"), proof("6", "bob", status=SubmissionStatus.PENDING)]),
        record("t3", [proof("7", "cara")], status=SubmissionStatus.PENDING),
        record("t1", [proof("8", "dave")], team_id="team-b"),
    ]

    report = score_contributions(TEAM, tiles, submissions)
    assert report.total_submissions == 7
    assert report.approved_submissions == 5
    assert report.total_xp == pytest.approx(130)

    by_user = {user.user_id: user for user in report.users}
    assert [user.user_id for user in report.users] == ["alice", "bob", "cara"]
    assert by_user["alice"].contribution_xp == pytest.approx(67.5)
    assert by_user["bob"].contribution_xp == pytest.approx(22.5 + 20)
    assert by_user["cara"].contribution_xp == pytest.approx(20)
    assert by_user["alice"].submission_count == 3
    assert by_user["alice"].approved_count == 2
    assert by_user["alice"].value_total == 2
    assert by_user["bob"].value_total == 1
    assert by_user["alice"].contribution_percentage == pytest.approx(40)
    assert by_user["cara"].contribution_percentage == pytest.approx(40)


def test_ties_keep_first_seen_order():
    tiles = [Tile(id="t1", board_id="b1", index=0, weight=10)]
    submissions = [record("t1", [proof("1", "cara"), proof("2", "alice")])]
    report = score_contributions(TEAM, tiles, submissions)
    assert [user.user_id for user in report.users] == ["cara", "alice"]


def test_no_submissions():
    report = score_contributions(TEAM, [Tile(id="t1", board_id="b1", index=0, weight=10)], [])
    assert report.users == []
    assert report.total_xp == 0


@pytest.mark.parametrize("status", ALL_STATUSES)
def test_every_proof_counts_toward_submission_count(status):
    tiles = [Tile(id="t1", board_id="b1", index=0, weight=10)]
    report = score_contributions(TEAM, tiles, [record("t1", [proof("1", "alice", status=status)])])
    [alice] = report.users
    assert alice.submission_count == 1
    assert alice.approved_count == (1 if status == SubmissionStatus.APPROVED else 0)
    assert alice.contribution_xp == 10
