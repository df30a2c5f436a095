"""
Estimathon Leaderboard Refresh

Runs one full refresh: read the submission sheet, keep each team's latest
submission per problem, score every team against the current answer key and
rank them. The previous rank snapshot is an argument and the new one is part
of the result, so the caller decides where it lives between refreshes.

Usage:
    python -m estimathon.leaderboard --csv responses.csv --answers data/answer_key.csv
    OR
    from estimathon.leaderboard import refresh_leaderboard
    result = refresh_leaderboard(url, answer_key, previous_ranks)
"""

import argparse
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from estimathon.config import TOTAL_PROBLEMS, ANSWER_KEY_FILE
from estimathon.ingestion.answer_key import load_answer_key, answered_problems
from estimathon.ingestion.csv_reader import (
    IngestionError,
    NoDataError,
    group_by_team,
    parse_submissions_text,
    read_submissions,
)
from estimathon.scoring.engine import score_teams
from estimathon.scoring.ranking import RankedTeam, rank_teams, leaderboard_to_frame
from estimathon.utils import setup_logging, atomic_write_csv

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class LeaderboardResult:
    """Outcome of one refresh, to be swapped in as a whole by the caller."""

    teams: list[RankedTeam]
    snapshot: dict[str, int]
    updated_at: datetime = field(default_factory=datetime.now)
    submission_count: int = 0


def compute_leaderboard(submissions, answer_key, previous_ranks=None, total_problems=TOTAL_PROBLEMS):
    """
    Score and rank already-decoded submissions.

    Args:
        submissions: List of Submission for all teams
        answer_key: Problem number -> correct-answer text
        previous_ranks: Snapshot returned by the previous refresh (or None)
        total_problems: Number of problems in the competition

    Returns:
        LeaderboardResult
    """
    # Work on a copy so an organizer edit mid-refresh is either fully seen or not at all
    answer_key = dict(answer_key or {})
    submissions = list(submissions)

    by_team = group_by_team(submissions)
    records = score_teams(by_team, answer_key, total_problems)
    teams, snapshot = rank_teams(records, previous_ranks)

    logger.info(
        f"Ranked {len(teams)} teams from {len(submissions)} submissions "
        f"({len(answered_problems(answer_key))}/{total_problems} answers set)"
    )
    return LeaderboardResult(teams=teams, snapshot=snapshot, submission_count=len(submissions))


def refresh_leaderboard(source, answer_key, previous_ranks=None, *, is_text=False,
                        total_problems=TOTAL_PROBLEMS):
    """
    Read the submission sheet and compute a fresh leaderboard.

    Args:
        source: CSV path or URL, or the CSV text itself when is_text=True
        answer_key: Problem number -> correct-answer text
        previous_ranks: Snapshot returned by the previous refresh (or None)
        is_text: Treat source as raw CSV text

    Returns:
        LeaderboardResult

    Raises:
        NoDataError: If the sheet has no submissions yet; callers should keep
            their current leaderboard and snapshot
        IngestionError: If the sheet cannot be read
    """
    if is_text:
        submissions = parse_submissions_text(source, total_problems)
    else:
        submissions = read_submissions(source, total_problems)
    return compute_leaderboard(submissions, answer_key, previous_ranks, total_problems)


def main(argv=None):
    """CLI interface: print the current leaderboard once."""
    parser = argparse.ArgumentParser(description="Compute the Estimathon leaderboard from a submission sheet.")
    parser.add_argument("--csv", required=True, help="Submission sheet CSV path or URL")
    parser.add_argument("--answers", type=Path, default=ANSWER_KEY_FILE, help="Answer key CSV")
    parser.add_argument("--output", type=Path, default=None, help="Write the leaderboard to this CSV")
    args = parser.parse_args(argv)

    try:
        answer_key = load_answer_key(args.answers)
        result = refresh_leaderboard(args.csv, answer_key)
    except NoDataError as e:
        print(f"\nNO DATA YET: {e}")
        return 1
    except IngestionError as e:
        print(f"\nINGESTION ERROR: {e}")
        return 1
    except ValueError as e:
        print(f"\nINPUT ERROR: {e}")
        return 1

    df = leaderboard_to_frame(result.teams)
    print("=" * 60)
    print("Estimathon Leaderboard - Lowest Score Wins!")
    print("=" * 60)
    print(df[['rank', 'team_name', 'score_display', 'wrong_count', 'total_submissions']].to_string(index=False))

    if args.output is not None:
        atomic_write_csv(df, args.output, index=False)
        logger.info(f"Exported leaderboard to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
