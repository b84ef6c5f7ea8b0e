"""Serpentine allocation of ranked participants into new teams."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

from config_models import DraftConfiguration
from core.errors import DraftPreconditionError
from core.models.balancing import DraftResult, DraftTeam
from core.models.player import PlayerMetadata
from core.models.team import Participant, Team
from scoring.player_scoring import PlayerScorer

logger = logging.getLogger(__name__)


def snake_order(n_players: int, n_teams: int) -> Iterator[int]:
    """Yield the team index for each successive pick.

    The pointer walks 0, 1, ..., k-1 then back k-1, ..., 0 and repeats, so the
    first and last teams pick twice in a row at each turn.
    """
    if n_teams < 1:
        msg = f"Cannot draft into {n_teams} teams"
        raise DraftPreconditionError(msg)

    current = 0
    step = 1
    for _ in range(n_players):
        yield current
        if n_teams == 1:
            continue
        next_team = current + step
        if 0 <= next_team < n_teams:
            current = next_team
        else:
            step = -step


def unassigned_participants(participants: Sequence[Participant], existing_teams: Sequence[Team]) -> list[Participant]:
    assigned = {user_id for team in existing_teams for user_id in team.member_ids}
    return [participant for participant in participants if participant.user_id not in assigned]


def allocate_teams(
    participants: Sequence[Participant],
    metadata_by_user: Mapping[str, PlayerMetadata],
    existing_teams: Sequence[Team],
    config: DraftConfiguration,
    scorer: PlayerScorer | None = None,
) -> DraftResult:
    """Draft every participant not yet on a team into new, balanced teams.

    Candidates are scored against each other only, ranked by score (equal scores
    keep their input order) and dealt out in snake order.

    Args:
        participants: Everyone registered for the event
        metadata_by_user: Player metadata keyed by user id
        existing_teams: Teams that already exist; their members are not drafted
        config: Team count or size, name prefix and balancing weights
        scorer: Scorer to rank candidates with; defaults to the built-in tables

    Returns:
        The new teams with their members in pick order

    Raises:
        DraftPreconditionError: If there is no one left to draft
    """
    candidates = unassigned_participants(participants, existing_teams)
    if not candidates:
        msg = "No unassigned participants to draft into teams"
        raise DraftPreconditionError(msg)

    scorer = scorer or PlayerScorer()
    scores = scorer.score_pool(candidates, metadata_by_user, config.weights)
    ranked = sorted(scores, key=lambda player: player.score, reverse=True)

    team_count = config.resolve_team_count(len(ranked))
    offset = len(existing_teams)
    teams = [DraftTeam(name=f"{config.team_name_prefix} {offset + i + 1}") for i in range(team_count)]

    for player, team_index in zip(ranked, snake_order(len(ranked), team_count)):
        teams[team_index].member_ids.append(player.user_id)
        teams[team_index].member_scores.append(player.score)
        logger.debug("Pick %s (%.3f) -> %s", player.user_id, player.score, teams[team_index].name)

    mean_score = sum(player.score for player in ranked) / len(ranked)
    logger.debug("Drafted %d participants into %d teams", len(ranked), team_count)
    return DraftResult(
        teams_created=team_count,
        participants_assigned=len(ranked),
        mean_score=mean_score,
        teams=teams,
    )
