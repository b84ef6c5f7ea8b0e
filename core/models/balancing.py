"""Result models for player scoring, team drafting and team statistics."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from core.numeric import NEUTRAL_SCORE


class AttributeBreakdown(BaseModel):
    """Normalized 0..1 value of each balancing attribute."""

    ehp: float = NEUTRAL_SCORE
    ehb: float = NEUTRAL_SCORE
    timezone: float = NEUTRAL_SCORE
    daily_hours: float = NEUTRAL_SCORE
    skill_level: float = NEUTRAL_SCORE


class PlayerScore(BaseModel):
    user_id: str
    score: float
    breakdown: AttributeBreakdown = Field(default_factory=AttributeBreakdown)


class DraftTeam(BaseModel):
    name: str
    member_ids: list[str] = Field(default_factory=list)
    member_scores: list[float] = Field(default_factory=list)

    @computed_field
    @property
    def total_score(self) -> float:
        return sum(self.member_scores)

    @computed_field
    @property
    def average_score(self) -> float:
        if not self.member_scores:
            return 0.0
        return self.total_score / len(self.member_scores)


class DraftResult(BaseModel):
    teams_created: int
    participants_assigned: int
    mean_score: float
    teams: list[DraftTeam] = Field(default_factory=list)
    strategy: str = "snake"
    objective: float | None = Field(default=None, description="Final annealing objective; lower is better balanced")


class TimezoneCount(BaseModel):
    timezone: str
    count: int


class TeamStatistics(BaseModel):
    team_id: str
    team_name: str
    member_count: int
    average_ehp: float | None = None
    average_ehb: float | None = None
    average_combat_level: float | None = None
    average_total_level: float | None = None
    total_daily_hours: float | None = None
    timezone_distribution: list[TimezoneCount] = Field(default_factory=list)
    timezone_diversity_score: float = 0.0
    timezone_hour_spread: float = 0.0
    metadata_coverage: float = 0.0
    members_with_metadata: int = 0


class StandardDeviations(BaseModel):
    ehp: float = 0.0
    ehb: float = 0.0
    daily_hours: float = 0.0


class BalanceMetrics(BaseModel):
    ehp_variance: float = 0.0
    ehb_variance: float = 0.0
    timezone_variance: float = 0.0
    daily_hours_variance: float = 0.0
    overall_balance_score: int = 100
    standard_deviations: StandardDeviations = Field(default_factory=StandardDeviations)


class SpecificCoverage(BaseModel):
    ehp: float = 0.0
    ehb: float = 0.0
    timezone: float = 0.0
    daily_hours: float = 0.0


class CoverageMetrics(BaseModel):
    total_players: int = 0
    players_with_metadata: int = 0
    coverage_percentage: float = 0.0
    specific_coverage: SpecificCoverage = Field(default_factory=SpecificCoverage)


class EventTeamStatistics(BaseModel):
    teams: list[TeamStatistics] = Field(default_factory=list)
    balance: BalanceMetrics = Field(default_factory=BalanceMetrics)
    coverage: CoverageMetrics = Field(default_factory=CoverageMetrics)

    @computed_field
    @property
    def total_teams(self) -> int:
        return len(self.teams)


class TeamBalanceEntry(BaseModel):
    team_id: str
    team_name: str
    member_count: int
    average_score: float


class TeamBalanceSummary(BaseModel):
    teams: list[TeamBalanceEntry] = Field(default_factory=list)
    overall_average: float = 0.0
    variance: float = 0.0
    standard_deviation: float = 0.0
