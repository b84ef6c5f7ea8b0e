"""Completion, bonus, contribution and team-balancing calculations."""

from .annealing import anneal_teams
from .bonus_aggregator import aggregate_event_patterns, max_possible_bonus, team_event_totals
from .contribution import score_contributions, tile_contribution_shares
from .goal_evaluator import GoalTree, evaluate_goal, evaluate_tile_completion, goal_tree_with_progress
from .pattern_completion import evaluate_patterns
from .player_scoring import PlayerScorer
from .snake_draft import allocate_teams, snake_order
from .standings import event_standings, xp_over_time
from .team_generation import generate_teams
from .team_statistics import event_team_statistics, team_balance_summary

__all__ = [
    "GoalTree",
    "PlayerScorer",
    "aggregate_event_patterns",
    "allocate_teams",
    "anneal_teams",
    "evaluate_goal",
    "evaluate_patterns",
    "evaluate_tile_completion",
    "event_standings",
    "event_team_statistics",
    "generate_teams",
    "goal_tree_with_progress",
    "max_possible_bonus",
    "score_contributions",
    "snake_order",
    "team_balance_summary",
    "team_event_totals",
    "tile_contribution_shares",
    "xp_over_time",
]
