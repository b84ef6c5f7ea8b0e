#!/usr/bin/env python3
"""
Parallel pattern scoring for a bingo event snapshot.

Every (board, team) pair is independent and reads only the frozen snapshot, so
the pairs are evaluated on a thread pool and reassembled in board order, then
team order. The result is identical to a sequential pass.

Usage:
    python parallel_scorer.py snapshot.json -w 8
    python parallel_scorer.py snapshot.json --json
"""

from __future__ import annotations

import concurrent.futures
import logging
import time
from datetime import datetime

from config_models import EventSnapshot, load_event_snapshot
from core.enums.board_type import BoardType
from core.models.results import BoardPatternReport, EventPatternCompletion, TeamPatternReport
from scoring.bonus_aggregator import max_possible_bonus, team_pattern_report
from scoring.pattern_completion import approved_tile_ids_for_team

logger = logging.getLogger(__name__)


def score_event(snapshot: EventSnapshot, max_workers: int | None = None) -> EventPatternCompletion:
    """
    Evaluate pattern completion for every team on every bonus-carrying board.

    Args:
        snapshot: The event records to score
        max_workers: Thread count; defaults to the snapshot's scoring settings

    Returns:
        The same report ``aggregate_event_patterns`` builds sequentially
    """
    max_workers = max_workers or snapshot.scoring.max_workers
    approved_by_team = {
        team.id: approved_tile_ids_for_team(snapshot.tile_submissions, team.id) for team in snapshot.teams
    }

    scored_boards = []
    for board in snapshot.boards:
        if board.board_type != BoardType.STANDARD:
            continue
        possible = max_possible_bonus(board)
        if possible == 0:
            logger.debug("Board %s has no pattern bonuses configured; skipping", board.id)
            continue
        scored_boards.append((board, possible))

    reports: dict[tuple[int, int], TeamPatternReport] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_pair = {
            executor.submit(team_pattern_report, board, team, approved_by_team[team.id], possible): (
                board_index,
                team_index,
            )
            for board_index, (board, possible) in enumerate(scored_boards)
            for team_index, team in enumerate(snapshot.teams)
        }

        # Collect results as they complete
        for future in concurrent.futures.as_completed(future_to_pair):
            board_index, team_index = future_to_pair[future]
            reports[(board_index, team_index)] = future.result()
            logger.debug("Scored board #%d for team #%d", board_index + 1, team_index + 1)

    return EventPatternCompletion(
        boards=[
            BoardPatternReport(
                board_id=board.id,
                title=board.title,
                rows=board.rows,
                columns=board.columns,
                total_possible_bonus_xp=possible,
                teams=[reports[(board_index, team_index)] for team_index in range(len(snapshot.teams))],
            )
            for board_index, (board, possible) in enumerate(scored_boards)
        ]
    )


def print_pattern_report(report: EventPatternCompletion) -> None:
    """Print a per-board summary of each team's bonus progress."""
    for board in report.boards:
        print(f"\n{'=' * 80}")
        print(f"BOARD: {board.title or board.id} ({board.rows}x{board.columns})")
        print(f"Possible bonus XP: {board.total_possible_bonus_xp}")
        print(f"{'=' * 80}")
        for team in board.teams:
            patterns = team.patterns
            print(
                f"  {team.team_name:<24} {patterns.total_bonus_xp:>6} XP  {team.completion_percentage:>3}%"
                f"  rows={len(patterns.completed_rows)} cols={len(patterns.completed_columns)}"
                f"  diag={'main ' if patterns.main_diagonal else ''}{'anti' if patterns.anti_diagonal else ''}"
                f"  board={'yes' if patterns.complete_board else 'no'}"
            )


def main():
    """Main entry point for parallel scoring."""
    import argparse

    parser = argparse.ArgumentParser(description="Score bingo pattern bonuses for an event snapshot in parallel")
    parser.add_argument("json_file", help="Path to JSON file containing the event snapshot")
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of scoring threads (default: the snapshot's scoring.max_workers)",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        snapshot = load_event_snapshot(args.json_file)
        if args.json:
            print(score_event(snapshot, args.workers).model_dump_json(indent=2))
            exit(0)

        print(f"Loaded {len(snapshot.boards)} boards and {len(snapshot.teams)} teams from {args.json_file}")
        print(f"Starting parallel scoring at {datetime.now()}")

        start_time = time.time()
        report = score_event(snapshot, args.workers)
        elapsed = time.time() - start_time

        print_pattern_report(report)
        print(f"\n✅ Scored {len(report.boards)} boards in {elapsed:.2f}s")
        exit(0)

    except Exception as e:
        print(f"❌ Fatal error: {e}")
        exit(1)


if __name__ == "__main__":
    main()
