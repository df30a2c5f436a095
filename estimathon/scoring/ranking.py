"""
Leaderboard Ranking

Orders scored teams (lowest score wins), assigns ranks and compares them
with the ranking from the previous refresh.

The previous ranking is passed in and the new one is returned; callers keep
the snapshot between refreshes.
"""

import math
from dataclasses import dataclass

import pandas as pd

from estimathon.config import (
    RANK_UP,
    RANK_DOWN,
    RANK_SAME,
    EXPONENTIAL_THRESHOLD,
    MILLIONS_THRESHOLD,
    THOUSANDS_THRESHOLD,
)
from estimathon.scoring.engine import TeamScoreRecord

LEADERBOARD_COLUMNS = [
    'rank', 'team_name', 'score', 'score_display', 'wrong_count',
    'correct_count', 'total_submissions', 'rank_change',
]


@dataclass(frozen=True)
class RankedTeam:
    """A scored team with its position on the leaderboard."""

    record: TeamScoreRecord
    rank: int
    rank_change: str | None = None  # None for teams missing from the previous ranking

    @property
    def team_name(self) -> str:
        return self.record.team_name

    @property
    def score(self) -> float:
        return self.record.score


def get_rank_change(previous_rank, current_rank):
    """
    Classify movement between two rankings. Lower rank numbers are better.

    Returns:
        "up", "down", "same", or None when there is no previous rank
    """
    if previous_rank is None:
        return None
    if previous_rank == current_rank:
        return RANK_SAME
    if previous_rank > current_rank:
        return RANK_UP
    return RANK_DOWN


def rank_teams(records, previous_ranks=None):
    """
    Rank teams by ascending score.

    Python's sort is stable, so teams with equal scores keep their input order
    and the first one gets the better rank. Ranks are never shared.

    Args:
        records: List of TeamScoreRecord
        previous_ranks: Team name -> rank from the last refresh (or None)

    Returns:
        Tuple of (list of RankedTeam sorted by rank, new team name -> rank snapshot)
    """
    previous_ranks = previous_ranks or {}
    # NaN scores sort last instead of breaking the ordering of everyone else
    ordered = sorted(records, key=lambda r: (math.isnan(r.score), r.score))

    ranked = []
    snapshot = {}
    for position, record in enumerate(ordered, start=1):
        change = get_rank_change(previous_ranks.get(record.team_name), position)
        ranked.append(RankedTeam(record=record, rank=position, rank_change=change))
        snapshot[record.team_name] = position

    return ranked, snapshot


def format_score(score: float) -> str:
    """Human-readable score: 1.23e+9, 4.56M, 7.89K or 12.34."""
    if math.isinf(score):
        return "inf"
    if score >= EXPONENTIAL_THRESHOLD:
        mantissa, exponent = f"{score:.2e}".split("e")
        return f"{mantissa}e{int(exponent):+d}"
    if score >= MILLIONS_THRESHOLD:
        return f"{score / 1e6:.2f}M"
    if score >= THOUSANDS_THRESHOLD:
        return f"{score / 1e3:.2f}K"
    return f"{score:.2f}"


def leaderboard_to_frame(ranked_teams) -> pd.DataFrame:
    """
    Flatten a ranked leaderboard into a DataFrame for display or CSV export.

    Args:
        ranked_teams: List of RankedTeam in rank order

    Returns:
        DataFrame with LEADERBOARD_COLUMNS
    """
    rows = [
        {
            'rank': team.rank,
            'team_name': team.team_name,
            'score': team.score,
            'score_display': format_score(team.score),
            'wrong_count': team.record.wrong_count,
            'correct_count': team.record.correct_count,
            'total_submissions': team.record.total_submissions,
            'rank_change': team.rank_change,
        }
        for team in ranked_teams
    ]
    return pd.DataFrame(rows, columns=LEADERBOARD_COLUMNS)
