"""
Estimathon Scoring Engine

This module turns a team's raw submissions into a score under Estimathon rules:
- Only the latest submission per problem counts
- A correct interval multiplies the score by its width (max - min)
- Every wrong or blank problem doubles the score
- Lowest score wins

Usage:
    from estimathon.scoring.engine import score_team
    record = score_team("Team A", submissions, {1: "3500", 2: "4.2e10"})
"""

from dataclasses import dataclass
from datetime import datetime

from estimathon.config import (
    TOTAL_PROBLEMS,
    STATUS_CORRECT,
    STATUS_WRONG,
    STATUS_BLANK,
)
from estimathon.scoring.numbers import parse_number
from estimathon.utils import setup_logging, validate_total_problems

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class Submission:
    """One form response: a team's interval guess for one problem."""

    team_name: str
    problem_number: int
    min_text: str
    max_text: str
    timestamp: datetime | None  # None when the sheet timestamp was unparseable


@dataclass(frozen=True)
class ProblemDetail:
    """Outcome of one problem for one team."""

    problem_number: int
    status: str
    width: float | None = None
    submitted_min: float | None = None
    submitted_max: float | None = None


@dataclass(frozen=True)
class TeamScoreRecord:
    """A team's score with one ProblemDetail per problem, ordered by problem number."""

    team_name: str
    score: float
    wrong_count: int
    details: tuple[ProblemDetail, ...]
    total_submissions: int

    @property
    def correct_count(self) -> int:
        return sum(1 for d in self.details if d.status == STATUS_CORRECT)


def _is_later(candidate: datetime | None, current: datetime | None) -> bool:
    """
    Decide whether candidate supersedes current during the reduction.

    Equal timestamps return True so the last submission encountered wins.
    An unparseable (None) timestamp never beats a valid one, and two
    unparseable timestamps count as equal.
    """
    if candidate is None:
        return current is None
    if current is None:
        return True
    try:
        return candidate >= current
    except TypeError:
        # e.g. tz-aware vs tz-naive timestamps from a hand-edited sheet
        return False


def latest_per_problem(submissions) -> dict[int, Submission]:
    """
    Select the most recent submission for each problem number.

    Args:
        submissions: Iterable of Submission for a single team

    Returns:
        Dict mapping problem number to its authoritative Submission
    """
    latest = {}
    for sub in submissions:
        current = latest.get(sub.problem_number)
        if current is None or _is_later(sub.timestamp, current.timestamp):
            latest[sub.problem_number] = sub
    return latest


def _answer_text(answer_key, problem_number):
    """Answer key entry for a problem, or None if it is absent or blank."""
    answer = answer_key.get(problem_number)
    if answer is None:
        return None
    answer = str(answer)
    return answer if answer.strip() else None


def score_problem(problem_number: int, submission: Submission | None, answer) -> ProblemDetail:
    """
    Classify one problem as correct, wrong or blank.

    Args:
        problem_number: Problem being scored
        submission: Latest submission for the problem, or None
        answer: Correct-answer text, or None if not yet verified

    Returns:
        ProblemDetail for the problem
    """
    if submission is None or answer is None:
        return ProblemDetail(problem_number, STATUS_BLANK)

    low = parse_number(submission.min_text)
    high = parse_number(submission.max_text)
    correct = parse_number(answer)

    if low is None or high is None or correct is None:
        return ProblemDetail(problem_number, STATUS_WRONG, submitted_min=low, submitted_max=high)

    # Reversed bounds are accepted as the same interval
    lo, hi = min(low, high), max(low, high)
    if lo <= correct <= hi:
        return ProblemDetail(
            problem_number, STATUS_CORRECT, width=hi - lo, submitted_min=low, submitted_max=high
        )
    return ProblemDetail(problem_number, STATUS_WRONG, submitted_min=low, submitted_max=high)


def score_team(team_name, submissions, answer_key, total_problems=TOTAL_PROBLEMS) -> TeamScoreRecord:
    """
    Compute a team's Estimathon score.

    Score = product of correct interval widths * 2 ** (wrong + blank problems).
    Malformed values never raise; they only downgrade the affected problem.

    Args:
        team_name: Team the submissions belong to
        submissions: All of the team's submissions, in sheet order
        answer_key: Mapping of problem number to correct-answer text (may be sparse)
        total_problems: Number of problems in the competition

    Returns:
        TeamScoreRecord with exactly total_problems details
    """
    validate_total_problems(total_problems)
    submissions = list(submissions)
    latest = latest_per_problem(submissions)

    wrong_count = 0
    widths = []
    details = []

    for problem_number in range(1, total_problems + 1):
        detail = score_problem(
            problem_number,
            latest.get(problem_number),
            _answer_text(answer_key, problem_number),
        )
        if detail.status == STATUS_CORRECT:
            widths.append(detail.width)
        else:
            wrong_count += 1
        details.append(detail)

    # Any zero width makes the product 0, even if other widths overflow to inf
    if 0 in widths:
        score = 0.0
    else:
        score = 1.0
        for width in widths:
            score *= width
        score *= 2 ** wrong_count

    logger.debug(
        f"Scored {team_name}: {score:g} "
        f"({total_problems - wrong_count} correct, {wrong_count} wrong/blank)"
    )

    return TeamScoreRecord(
        team_name=team_name,
        score=score,
        wrong_count=wrong_count,
        details=tuple(details),
        total_submissions=len(submissions),
    )


def score_teams(submissions_by_team, answer_key, total_problems=TOTAL_PROBLEMS) -> list[TeamScoreRecord]:
    """
    Score every team, preserving the order in which teams were first seen.

    Args:
        submissions_by_team: Mapping of team name to its list of Submission
        answer_key: Mapping of problem number to correct-answer text

    Returns:
        List of TeamScoreRecord in input order
    """
    return [
        score_team(team_name, submissions, answer_key, total_problems)
        for team_name, submissions in submissions_by_team.items()
    ]
