"""Team generation by simulated annealing over activity and timezone balance.

Candidates start dealt round-robin in input order. Each step either swaps two
players between teams or moves one player across, and the change is kept by the
Metropolis rule under an exponentially cooling temperature. The best assignment
seen during the run is the result.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import NamedTuple

import numpy as np

from config_models import AnnealingConfiguration, DraftConfiguration
from core.errors import DraftPreconditionError
from core.models.balancing import DraftResult, DraftTeam
from core.models.player import PlayerMetadata
from core.models.team import Participant, Team
from scoring.player_scoring import PlayerScorer
from scoring.snake_draft import unassigned_participants
from scoring.team_statistics import timezone_offset_hours

logger = logging.getLogger(__name__)

# Assignments whose team-size variance exceeds this share of the squared mean size are rejected
MAX_SIZE_VARIANCE_RATIO = 0.25
SIZE_VARIANCE_PENALTY = 0.1

Assignment = list[list[int]]


class PlayerFeatures(NamedTuple):
    """Candidate attributes as arrays aligned with ``user_ids``."""

    user_ids: list[str]
    timezone_angles: np.ndarray
    ehp: np.ndarray
    ehb: np.ndarray
    daily_hours: np.ndarray


class AnnealingOutcome(NamedTuple):
    assignment: Assignment
    objective: float
    iterations: int


def timezone_angle(offset_hours: float) -> float:
    """Position of a UTC offset on the 24-hour clock, in radians."""
    return offset_hours / 24 * 2 * math.pi


def circular_variance(angles: Sequence[float] | np.ndarray) -> float:
    """``1 - R`` where R is the length of the mean unit vector of the angles.

    0 means every angle is the same, 1 means they are spread evenly around the
    circle. Fewer than two angles have no spread.
    """
    angles = np.asarray(angles, dtype=float)
    if angles.size < 2:
        return 0.0
    return float(1.0 - np.hypot(np.sin(angles).mean(), np.cos(angles).mean()))


def _imputed(values: Sequence[float | None]) -> np.ndarray:
    observed = [value for value in values if value is not None]
    fill = float(np.mean(observed)) if observed else 0.0
    return np.array([fill if value is None else value for value in values], dtype=float)


def player_features(
    candidates: Sequence[Participant], metadata_by_user: Mapping[str, PlayerMetadata], at: datetime
) -> PlayerFeatures:
    """Collect candidate attributes; missing numbers take the candidates' mean, missing timezones sit at UTC."""
    metadata = [metadata_by_user.get(candidate.user_id) for candidate in candidates]

    def column(name: str) -> list[float | None]:
        return [getattr(entry, name) if entry is not None else None for entry in metadata]

    angles = [
        timezone_angle(timezone_offset_hours(entry.timezone, at)) if entry is not None and entry.timezone else 0.0
        for entry in metadata
    ]
    return PlayerFeatures(
        user_ids=[candidate.user_id for candidate in candidates],
        timezone_angles=np.array(angles, dtype=float),
        ehp=_imputed(column("ehp")),
        ehb=_imputed(column("ehb")),
        daily_hours=_imputed(column("daily_hours_available")),
    )


class BalanceObjective:
    """Weighted spread between teams; lower is better balanced.

    Team averages of ehp, ehb and daily hours are turned into z-scores against
    the whole candidate pool and their variance across teams is weighted.
    Timezone enters as the variance of each team's circular variance. Uneven
    team sizes add a small penalty and are rejected outright past a limit.
    """

    def __init__(self, features: PlayerFeatures, config: AnnealingConfiguration) -> None:
        self.features = features
        self.timezone_weight = config.timezone_weight
        self._columns = [
            (values, weight, float(values.mean()), float(values.std()))
            for values, weight in (
                (features.ehp, config.ehp_weight),
                (features.ehb, config.ehb_weight),
                (features.daily_hours, config.daily_hours_weight),
            )
        ]

    def __call__(self, assignment: Assignment) -> float:
        sizes = np.array([len(team) for team in assignment], dtype=float)
        size_variance = float(sizes.var())
        target = float(sizes.mean())
        if size_variance > target * target * MAX_SIZE_VARIANCE_RATIO:
            return math.inf

        total = 0.0
        for values, weight, mean, std in self._columns:
            if std == 0:
                continue
            averages = np.array([values[team].mean() if team else 0.0 for team in assignment])
            total += weight * float(((averages - mean) / std).var())

        spreads = np.array([circular_variance(self.features.timezone_angles[team]) for team in assignment])
        total += self.timezone_weight * float(spreads.var())
        return total + SIZE_VARIANCE_PENALTY * size_variance


def neighbor(assignment: Assignment, rng: np.random.Generator, swap_probability: float) -> Assignment:
    """A copy of ``assignment`` with two players swapped or one player moved.

    A move never empties a team. With a single team nothing changes.
    """
    result = [list(team) for team in assignment]
    if len(result) < 2:
        return result

    swap = rng.random() < swap_probability
    first, second = (int(i) for i in rng.choice(len(result), size=2, replace=False))
    source, target = result[first], result[second]
    if swap:
        if source and target:
            i = int(rng.integers(len(source)))
            j = int(rng.integers(len(target)))
            source[i], target[j] = target[j], source[i]
    elif len(source) > 1:
        target.append(source.pop(int(rng.integers(len(source)))))
    return result


def anneal(
    objective: BalanceObjective,
    n_players: int,
    n_teams: int,
    config: AnnealingConfiguration,
    rng: np.random.Generator,
) -> AnnealingOutcome:
    """Search for a low-objective assignment of ``n_players`` into ``n_teams``.

    Args:
        objective: Scores an assignment; lower is better
        n_players: Number of candidates, identified by position
        n_teams: Number of teams to fill
        config: Temperature schedule, step budget and move mix
        rng: Source of every random choice, so a seeded generator repeats the run

    Returns:
        The best assignment seen, its objective and the number of steps taken
    """
    if n_teams < 1:
        msg = f"Cannot anneal into {n_teams} teams"
        raise DraftPreconditionError(msg)

    current: Assignment = [list(range(team, n_players, n_teams)) for team in range(n_teams)]
    current_score = objective(current)
    best, best_score = current, current_score
    ratio = config.final_temperature / config.initial_temperature

    stale = 0
    steps = 0
    for iteration in range(config.iterations):
        steps = iteration + 1
        temperature = config.initial_temperature * ratio ** (iteration / config.iterations)
        candidate = neighbor(current, rng, config.swap_probability)
        candidate_score = objective(candidate)

        # equal scores include two rejected (infinite) assignments
        delta = 0.0 if candidate_score == current_score else candidate_score - current_score
        if delta <= 0 or rng.random() < math.exp(-delta / temperature):
            current, current_score = candidate, candidate_score
            if current_score < best_score:
                best, best_score = current, current_score
                stale = 0
            else:
                stale += 1
        else:
            stale += 1

        if config.stagnation_limit is not None and stale >= config.stagnation_limit:
            logger.info("Annealing stopped at step %d after %d steps without improvement", steps, stale)
            break

    logger.debug("Annealing finished after %d steps with objective %.4f", steps, best_score)
    return AnnealingOutcome(assignment=best, objective=best_score, iterations=steps)


def anneal_teams(
    participants: Sequence[Participant],
    metadata_by_user: Mapping[str, PlayerMetadata],
    existing_teams: Sequence[Team],
    config: DraftConfiguration,
    scorer: PlayerScorer | None = None,
    at: datetime | None = None,
) -> DraftResult:
    """Place every participant not yet on a team into new teams by simulated annealing.

    Member scores are the same composite scores the snake draft ranks by, so the
    two strategies report comparable team totals.

    Raises:
        DraftPreconditionError: If there is no one left to place
    """
    candidates = unassigned_participants(participants, existing_teams)
    if not candidates:
        msg = "No unassigned participants to draft into teams"
        raise DraftPreconditionError(msg)

    team_count = config.resolve_team_count(len(candidates))
    features = player_features(candidates, metadata_by_user, at or datetime.now(timezone.utc))
    rng = np.random.default_rng(config.annealing.seed)
    logger.debug(
        "Annealing %d candidates into %d teams (seed %s)", len(candidates), team_count, config.annealing.seed
    )
    outcome = anneal(BalanceObjective(features, config.annealing), len(candidates), team_count, config.annealing, rng)

    scorer = scorer or PlayerScorer()
    scored = scorer.score_pool(candidates, metadata_by_user, config.weights)
    offset = len(existing_teams)
    teams = []
    for i, members in enumerate(outcome.assignment):
        teams.append(
            DraftTeam(
                name=f"{config.team_name_prefix} {offset + i + 1}",
                member_ids=[features.user_ids[member] for member in members],
                member_scores=[scored[member].score for member in members],
            )
        )

    return DraftResult(
        teams_created=team_count,
        participants_assigned=len(candidates),
        mean_score=sum(player.score for player in scored) / len(scored),
        teams=teams,
        strategy="annealing",
        objective=outcome.objective,
    )
