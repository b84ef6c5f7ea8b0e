"""Build new teams from the unassigned participants with the configured strategy."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

from config_models import DraftConfiguration
from core.models.balancing import DraftResult
from core.models.player import PlayerMetadata
from core.models.team import Participant, Team
from scoring.annealing import anneal_teams
from scoring.player_scoring import PlayerScorer
from scoring.snake_draft import allocate_teams


def generate_teams(
    participants: Sequence[Participant],
    metadata_by_user: Mapping[str, PlayerMetadata],
    existing_teams: Sequence[Team],
    config: DraftConfiguration,
    scorer: PlayerScorer | None = None,
    at: datetime | None = None,
) -> DraftResult:
    """Snake draft by default; simulated annealing when ``config.strategy`` asks for it.

    ``at`` fixes the instant used to resolve timezone offsets for annealing.
    """
    if config.strategy == "annealing":
        return anneal_teams(participants, metadata_by_user, existing_teams, config, scorer, at)
    return allocate_teams(participants, metadata_by_user, existing_teams, config, scorer)
