import logging
import math
from datetime import datetime, timezone

import numpy as np
import pytest
from pydantic import ValidationError

from config_models import AnnealingConfiguration, DraftConfiguration
from core.errors import DraftPreconditionError
from core.models.player import PlayerMetadata
from core.models.team import Participant, Team
from scoring.annealing import (
    BalanceObjective,
    anneal,
    anneal_teams,
    circular_variance,
    neighbor,
    player_features,
    timezone_angle,
)
from scoring.team_generation import generate_teams

WINTER = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)

# Dealt round-robin, the two strong players start on the same team
METADATA = {
    "a": PlayerMetadata(user_id="a", ehp=100, timezone="Europe/London"),
    "c": PlayerMetadata(user_id="c", ehp=0, timezone="Europe/London"),
    "b": PlayerMetadata(user_id="b", ehp=100, timezone="Europe/London"),
    "d": PlayerMetadata(user_id="d", ehp=0, timezone="Europe/London"),
}


def participants(*user_ids):
    return [Participant(user_id=user_id) for user_id in user_ids]


def annealing_config(**overrides):
    settings = {"iterations": 2000, "stagnation_limit": 500, "seed": 7}
    settings.update(overrides)
    return DraftConfiguration(team_count=2, strategy="annealing", annealing=AnnealingConfiguration(**settings))


def test_timezone_angle():
    assert timezone_angle(0) == 0
    assert timezone_angle(6) == pytest.approx(math.pi / 2)
    assert timezone_angle(-12) == pytest.approx(-math.pi)


@pytest.mark.parametrize(
    "angles, expected",
    [
        ([], 0.0),
        ([1.2], 0.0),
        ([0.5, 0.5, 0.5], 0.0),
        ([0.0, math.pi], 1.0),
        ([0.0, math.pi / 2, math.pi, 3 * math.pi / 2], 1.0),
    ],
)
def test_circular_variance(angles, expected):
    assert circular_variance(angles) == pytest.approx(expected, abs=1e-12)


def test_circular_variance_wraps_around_midnight():
    # UTC+11 and UTC-11 are two hours apart, not twenty-two
    close = circular_variance([timezone_angle(11), timezone_angle(-11)])
    far = circular_variance([timezone_angle(0), timezone_angle(11)])
    assert close < far


def test_missing_values_take_the_candidate_mean():
    metadata = {
        "x": PlayerMetadata(user_id="x", ehp=10, timezone="Asia/Tokyo"),
        "y": PlayerMetadata(user_id="y", ehp=30),
    }
    features = player_features(participants("x", "y", "ghost"), metadata, WINTER)
    assert features.user_ids == ["x", "y", "ghost"]
    assert features.ehp.tolist() == [10, 30, 20]
    assert features.ehb.tolist() == [0, 0, 0]
    assert features.timezone_angles[0] == pytest.approx(timezone_angle(9))
    assert features.timezone_angles[1:].tolist() == [0, 0]


def test_objective_rejects_lopsided_team_sizes():
    features = player_features(participants(*METADATA), METADATA, WINTER)
    objective = BalanceObjective(features, AnnealingConfiguration())
    assert objective([[0, 3], [1, 2]]) == pytest.approx(0)
    assert objective([[0, 2], [1, 3]]) > 0
    assert objective([[0, 1, 2, 3], []]) == math.inf


def test_neighbor_keeps_every_player_once_and_never_empties_a_team():
    rng = np.random.default_rng(3)
    assignment = [[0], [1, 2], [3, 4, 5]]
    for swap_probability in (0.0, 1.0, 0.5):
        for _ in range(200):
            assignment = neighbor(assignment, rng, swap_probability)
            assert sorted(member for team in assignment for member in team) == list(range(6))
            assert all(assignment)


def test_single_team_stops_on_stagnation(caplog):
    features = player_features(participants(*METADATA), METADATA, WINTER)
    config = AnnealingConfiguration(iterations=1000, stagnation_limit=10)
    with caplog.at_level(logging.INFO):
        outcome = anneal(BalanceObjective(features, config), 4, 1, config, np.random.default_rng(0))
    assert outcome.assignment == [[0, 1, 2, 3]]
    assert outcome.iterations == 10
    assert "without improvement" in caplog.text


def test_anneal_needs_a_team():
    features = player_features(participants("a"), METADATA, WINTER)
    config = AnnealingConfiguration()
    with pytest.raises(DraftPreconditionError):
        anneal(BalanceObjective(features, config), 1, 0, config, np.random.default_rng(0))


def test_annealing_balances_the_round_robin_start():
    config = annealing_config()
    result = anneal_teams(participants(*METADATA), METADATA, [], config, at=WINTER)

    features = player_features(participants(*METADATA), METADATA, WINTER)
    start = BalanceObjective(features, config.annealing)([[0, 2], [1, 3]])
    assert start > 0
    assert result.objective == pytest.approx(0)
    assert result.strategy == "annealing"
    assert result.teams_created == 2
    assert result.participants_assigned == 4
    for team in result.teams:
        assert len(team.member_ids) == 2
        assert len({"a", "b"} & set(team.member_ids)) == 1


def test_fixed_seed_repeats_the_same_teams():
    people = participants(*(f"p{i}" for i in range(12)))
    zones = ["Europe/London", "America/New_York", "Asia/Tokyo", "Australia/Sydney"]
    metadata = {
        p.user_id: PlayerMetadata(
            user_id=p.user_id, ehp=17 * i % 50, ehb=11 * i % 30, daily_hours_available=i % 5, timezone=zones[i % 4]
        )
        for i, p in enumerate(people)
    }
    config = annealing_config(seed=2024).model_copy(update={"team_count": 3})

    first = anneal_teams(people, metadata, [], config, at=WINTER)
    second = anneal_teams(people, metadata, [], config, at=WINTER)
    assert first == second
    assigned = [user_id for team in first.teams for user_id in team.member_ids]
    assert sorted(assigned) == sorted(p.user_id for p in people)

    start = BalanceObjective(player_features(people, metadata, WINTER), config.annealing)(
        [list(range(t, 12, 3)) for t in range(3)]
    )
    assert first.objective <= start


def test_existing_members_are_left_out_and_names_continue():
    existing = [Team(id="t1", name="Team 1", member_ids=["a"])]
    result = anneal_teams(participants(*METADATA), METADATA, existing, annealing_config(), at=WINTER)
    assigned = sorted(user_id for team in result.teams for user_id in team.member_ids)
    assert assigned == ["b", "c", "d"]
    assert [team.name for team in result.teams] == ["Team 2", "Team 3"]


def test_member_scores_match_the_snake_draft_scores():
    result = anneal_teams(participants(*METADATA), METADATA, [], annealing_config(), at=WINTER)
    snake = generate_teams(participants(*METADATA), METADATA, [], DraftConfiguration(team_count=2))
    annealed = {u: s for team in result.teams for u, s in zip(team.member_ids, team.member_scores)}
    drafted = {u: s for team in snake.teams for u, s in zip(team.member_ids, team.member_scores)}
    assert annealed == drafted
    assert result.mean_score == pytest.approx(snake.mean_score)


def test_generate_teams_defaults_to_snake_draft():
    result = generate_teams(participants(*METADATA), METADATA, [], DraftConfiguration(team_count=2))
    assert result.strategy == "snake"
    assert result.objective is None
    annealed = generate_teams(participants(*METADATA), METADATA, [], annealing_config(), at=WINTER)
    assert annealed.strategy == "annealing"
    assert annealed.objective is not None


def test_no_candidates_is_an_error():
    existing = [Team(id="t1", name="Team 1", member_ids=list(METADATA))]
    with pytest.raises(DraftPreconditionError):
        anneal_teams(participants(*METADATA), METADATA, existing, annealing_config(), at=WINTER)


@pytest.mark.parametrize(
    "settings",
    [
        {"initial_temperature": 1.0, "final_temperature": 1.0},
        {"iterations": 100, "stagnation_limit": 200},
        {"swap_probability": 1.5},
        {"iterations": 0},
    ],
)
def test_invalid_annealing_settings(settings):
    with pytest.raises(ValidationError):
        AnnealingConfiguration(**settings)


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValidationError):
        DraftConfiguration(strategy="genetic")
