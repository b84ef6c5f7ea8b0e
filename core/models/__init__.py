"""Pydantic models for bingo boards, goals, submissions and scoring results."""

from .balancing import (
    AttributeBreakdown,
    BalanceMetrics,
    CoverageMetrics,
    DraftResult,
    DraftTeam,
    EventTeamStatistics,
    PlayerScore,
    TeamBalanceEntry,
    TeamBalanceSummary,
    TeamStatistics,
)
from .board import Board, PatternBonusConfig, Tile
from .goal import Goal, GoalGroup, TeamGoalProgress
from .player import BalancingWeights, PlayerMetadata
from .results import (
    BoardPatternReport,
    CompletedPattern,
    DailyXPPoint,
    EventPatternCompletion,
    EventStandings,
    GoalNodeEvaluation,
    GoalProgress,
    PatternCompletionResult,
    TeamBoardXP,
    TeamContributionReport,
    TeamPatternReport,
    TeamStanding,
    UserContribution,
)
from .submission import Submission, TeamTileSubmission
from .team import Participant, Team

__all__ = [
    "AttributeBreakdown",
    "BalanceMetrics",
    "BalancingWeights",
    "Board",
    "BoardPatternReport",
    "CompletedPattern",
    "CoverageMetrics",
    "DailyXPPoint",
    "DraftResult",
    "DraftTeam",
    "EventPatternCompletion",
    "EventStandings",
    "EventTeamStatistics",
    "Goal",
    "GoalGroup",
    "GoalNodeEvaluation",
    "GoalProgress",
    "Participant",
    "PatternBonusConfig",
    "PatternCompletionResult",
    "PlayerMetadata",
    "PlayerScore",
    "Submission",
    "Team",
    "TeamBalanceEntry",
    "TeamBalanceSummary",
    "TeamBoardXP",
    "TeamContributionReport",
    "TeamGoalProgress",
    "TeamPatternReport",
    "TeamStanding",
    "TeamStatistics",
    "TeamTileSubmission",
    "Tile",
    "UserContribution",
]
