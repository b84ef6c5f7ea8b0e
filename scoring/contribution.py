"""Per-member contribution to a team's tile submissions."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from core.enums.submission_status import SubmissionStatus
from core.models.board import Tile
from core.models.results import TeamContributionReport, UserContribution
from core.models.submission import TeamTileSubmission
from core.models.team import Team
from core.numeric import floor_xp

logger = logging.getLogger(__name__)


def tile_contribution_shares(tile: Tile, submission: TeamTileSubmission) -> dict[str, float]:
    """Split a tile's weight between the users who submitted proof for it.

    Each user receives ``weight * own_submissions / all_submissions``. Every
    individual submission counts, whatever its review status.

    Args:
        tile: The tile being split
        submission: The team's review record for that tile

    Returns:
        XP share keyed by user id, in the order users first submitted
    """
    total = len(submission.submissions)
    if total == 0:
        return {}

    counts: dict[str, int] = {}
    for proof in submission.submissions:
        counts[proof.user_id] = counts.get(proof.user_id, 0) + 1
    return {user_id: tile.weight * count / total for user_id, count in counts.items()}


def score_contributions(
    team: Team,
    board_tiles: Sequence[Tile],
    tile_submissions: Iterable[TeamTileSubmission],
) -> TeamContributionReport:
    """Summarize how much each team member contributed on a board.

    Only tiles the team has an approved review record for award XP. Users are
    listed by contribution XP, highest first; equal scores keep the order in
    which the users first appear in the submissions.
    """
    tiles = {tile.id: tile for tile in board_tiles}
    users: dict[str, UserContribution] = {}
    total_submissions = 0
    approved_submissions = 0
    total_xp = 0.0

    for record in tile_submissions:
        if record.team_id != team.id or record.tile_id not in tiles:
            continue

        for proof in record.submissions:
            entry = users.setdefault(proof.user_id, UserContribution(user_id=proof.user_id))
            entry.submission_count += 1
            total_submissions += 1
            if proof.status == SubmissionStatus.APPROVED:
                entry.approved_count += 1
                approved_submissions += 1
                if proof.value is not None:
                    entry.value_total += floor_xp(proof.value)

        if not record.is_approved:
            continue
        for user_id, share in tile_contribution_shares(tiles[record.tile_id], record).items():
            users[user_id].contribution_xp += share
            total_xp += share

    for entry in users.values():
        if approved_submissions:
            entry.contribution_percentage = 100 * entry.approved_count / approved_submissions

    ranked = sorted(users.values(), key=lambda entry: entry.contribution_xp, reverse=True)
    logger.debug(
        "Team %s: %d contributors, %d submissions (%d approved)",
        team.id,
        len(ranked),
        total_submissions,
        approved_submissions,
    )
    return TeamContributionReport(
        team_id=team.id,
        total_submissions=total_submissions,
        approved_submissions=approved_submissions,
        total_xp=total_xp,
        users=ranked,
    )
