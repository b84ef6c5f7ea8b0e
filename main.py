#!/usr/bin/env python3
"""
Bingo Scoring Runner

This script loads an event snapshot and runs one of the scoring reports on it:
pattern bonuses, standings, member contributions, goal trees, team statistics
or a draft of the unassigned participants into new teams.
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date, datetime, timezone

from config_models import EventSnapshot, load_event_snapshot
from core.errors import ScoringError
from parallel_scorer import print_pattern_report, score_event
from scoring.contribution import score_contributions
from scoring.goal_evaluator import GoalTree, evaluate_tile_completion, progress_by_goal
from scoring.standings import event_standings, xp_over_time
from scoring.team_generation import generate_teams
from scoring.team_statistics import can_use_balanced_generation, event_team_statistics, metadata_coverage


def print_banner():
    """Print welcome banner."""
    print("=" * 60)
    print(" 🎯 BINGO SCORING - Event Report Runner")
    print("=" * 60)
    print()


def run_score(snapshot: EventSnapshot, args) -> bool:
    """Print pattern bonuses for every team on every board."""
    report = score_event(snapshot, args.workers)
    if args.json:
        print(report.model_dump_json(indent=2))
        return True
    print("\n🧩 Pattern Completion")
    print_pattern_report(report)
    return True


def run_standings(snapshot: EventSnapshot, args) -> bool:
    """Print the event leaderboard and each team's recent XP timeline."""
    standings = event_standings(snapshot.boards, snapshot.teams, snapshot.tile_submissions)
    if args.json:
        print(standings.model_dump_json(indent=2))
        return True

    print("\n🏆 Standings")
    print("─" * 60)
    print(f"Total possible XP: {standings.total_possible_xp}")
    for rank, team in enumerate(standings.teams, start=1):
        print(
            f"{rank:>3}. {team.name:<24} {team.total_xp:>6} XP"
            f"  (base {team.base_xp}, bonus {team.bonus_xp})  {team.percentage_of_possible:.1f}%"
        )

    end = args.end or date.today()
    days = snapshot.scoring.timeline_days
    for board in snapshot.boards:
        print(f"\n📈 {board.title or board.id}: last {days} days")
        for team in snapshot.teams:
            points = xp_over_time(board, team.id, snapshot.tile_submissions, end, days)
            print(f"  {team.name:<24} " + " ".join(str(point.xp) for point in points))
    return True


def run_contributions(snapshot: EventSnapshot, args) -> bool:
    """Print each member's share of their team's XP on every board."""
    reports = [
        (board, score_contributions(team, board.tiles, snapshot.tile_submissions))
        for board in snapshot.boards
        for team in snapshot.teams
    ]
    if args.json:
        print("[" + ",".join(report.model_dump_json() for _, report in reports) + "]")
        return True

    for board, report in reports:
        print(f"\n👥 {board.title or board.id} / team {report.team_id}")
        print(f"   Submissions: {report.total_submissions} ({report.approved_submissions} approved)")
        for user in report.users:
            print(
                f"   {user.user_id:<20} {user.contribution_xp:>8.1f} XP"
                f"  {user.approved_count}/{user.submission_count} approved  {user.contribution_percentage:.1f}%"
            )
    return True


def run_goals(snapshot: EventSnapshot, args) -> bool:
    """Print which goal-tracked tiles each team has completed."""
    goal_tiles = sorted({goal.tile_id for goal in snapshot.goals} | {group.tile_id for group in snapshot.goal_groups})
    results = {}
    for tile_id in goal_tiles:
        tree = GoalTree.for_tile(snapshot.goal_groups, snapshot.goals, tile_id)
        results[tile_id] = {
            team.id: evaluate_tile_completion(tree, progress_by_goal(snapshot.goal_progress, team.id))
            for team in snapshot.teams
        }

    if args.json:
        print(json.dumps(results, indent=2))
        return True

    print("\n🎯 Goal Completion")
    print("─" * 60)
    for tile_id, by_team in results.items():
        done = [team.name for team in snapshot.teams if by_team[team.id]]
        print(f"  Tile {tile_id}: {', '.join(done) if done else 'no team yet'}")
    return True


def run_stats(snapshot: EventSnapshot, args) -> bool:
    """Print team composition and balance statistics."""
    stats = event_team_statistics(snapshot.teams, snapshot.metadata_by_user(), datetime.now(timezone.utc))
    if args.json:
        print(stats.model_dump_json(indent=2))
        return True

    print("\n📊 Team Statistics")
    print("─" * 60)
    for team in stats.teams:
        print(
            f"  {team.team_name:<24} members={team.member_count}"
            f"  metadata={team.metadata_coverage:.0f}%"
            f"  tz diversity={team.timezone_diversity_score:.2f}  ±{team.timezone_hour_spread:.1f}h"
        )
    print(f"\nOverall balance score: {stats.balance.overall_balance_score}/100")
    print(f"Metadata coverage: {stats.coverage.coverage_percentage:.0f}%")
    return True


def run_draft(snapshot: EventSnapshot, args) -> bool:
    """Draft unassigned participants into new teams."""
    metadata = snapshot.metadata_by_user()
    coverage = metadata_coverage(snapshot.participants, metadata)
    if not can_use_balanced_generation(snapshot.participants, metadata):
        print(f"⚠️  Only {coverage}% of participants have metadata; most scores will be neutral")

    config = snapshot.draft
    if args.strategy is not None or args.seed is not None:
        overrides = {"strategy": args.strategy or config.strategy}
        if args.seed is not None:
            overrides["annealing"] = config.annealing.model_copy(update={"seed": args.seed})
        config = config.model_copy(update=overrides)

    result = generate_teams(snapshot.participants, metadata, snapshot.teams, config, at=datetime.now(timezone.utc))
    if args.json:
        print(result.model_dump_json(indent=2))
        return True

    title = "🔥 Annealed Teams" if result.strategy == "annealing" else "🐍 Snake Draft"
    print(f"\n{title}")
    print("─" * 60)
    print(f"Teams created: {result.teams_created}")
    print(f"Participants assigned: {result.participants_assigned}")
    print(f"Mean score: {result.mean_score:.3f}")
    if result.objective is not None:
        print(f"Balance objective: {result.objective:.4f}")
    for team in result.teams:
        print(f"  {team.name:<16} avg {team.average_score:.3f}  {', '.join(team.member_ids)}")
    return True


REPORTS = {
    "score": run_score,
    "standings": run_standings,
    "contributions": run_contributions,
    "goals": run_goals,
    "stats": run_stats,
    "draft": run_draft,
}


def main():
    """Main runner function."""
    parser = argparse.ArgumentParser(description="Bingo Scoring Runner")
    parser.add_argument("report", choices=sorted(REPORTS), help="Report to run")
    parser.add_argument("json_file", help="Path to JSON file containing the event snapshot")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Scoring threads for the score report")
    parser.add_argument("--end", type=date.fromisoformat, default=None, help="Last day of the XP timeline (YYYY-MM-DD)")
    parser.add_argument(
        "--strategy", choices=["snake", "annealing"], default=None, help="Team generation strategy for the draft report"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for annealed team generation")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.json:
        print_banner()

    try:
        snapshot = load_event_snapshot(args.json_file)
        ok = REPORTS[args.report](snapshot, args)
    except ScoringError as e:
        print(f"❌ {e}")
        exit(1)
    except Exception as e:
        print(f"❌ Fatal error: {e}")
        exit(1)

    exit(0 if ok else 1)


if __name__ == "__main__":
    main()
