"""
Submission Sheet Ingestion

This module reads the form-response sheet (CSV with a header row) and decodes
each row into a typed Submission. Columns are taken by position:
timestamp, team name, problem number, minimum value, maximum value.

Rows that cannot become a Submission (empty team name, bad problem number)
are dropped. An empty or header-only sheet, or one where every row is
malformed, raises NoDataError so the caller can keep showing its previous
leaderboard.

Usage:
    from estimathon.ingestion.csv_reader import read_submissions
    submissions = read_submissions("https://docs.google.com/spreadsheets/d/e/.../pub?output=csv")
"""

import http.client
import io
import math

import pandas as pd

from estimathon.config import (
    TOTAL_PROBLEMS,
    SUBMISSION_COLUMNS,
    MAX_INPUT_SIZE,
)
from estimathon.scoring.engine import Submission
from estimathon.utils import setup_logging, validate_input_size

# --- Module Logger ---
logger = setup_logging(__name__)


class IngestionError(Exception):
    """Custom exception for ingestion errors"""
    pass


class NoDataError(IngestionError):
    """Raised when the sheet has no submission rows yet"""
    pass


def parse_problem_number(value) -> int | None:
    """
    Parse a problem number cell.

    Accepts "7" as well as "7.0" (spreadsheets sometimes export numbers as floats).

    Returns:
        The positive integer, or None if the cell is not a positive whole number
    """
    text = str(value).strip()
    if not text:
        return None
    try:
        number = int(text)
    except ValueError:
        try:
            as_float = float(text)
        except ValueError:
            return None
        if not math.isfinite(as_float) or not as_float.is_integer():
            return None
        number = int(as_float)
    return number if number > 0 else None


def parse_timestamp(value):
    """Parse a timestamp cell; unparseable cells become None."""
    ts = pd.to_datetime(str(value).strip(), errors="coerce")
    return None if pd.isna(ts) else ts.to_pydatetime()


def _read_frame(source) -> pd.DataFrame:
    """Read a sheet into an all-string DataFrame with positional column names."""
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
            index_col=False,
            on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError:
        raise NoDataError("Submission sheet is empty")
    except pd.errors.ParserError as e:
        raise IngestionError(f"Could not parse submission sheet: {e}") from e

    if df.empty:
        raise NoDataError("Submission sheet has a header but no rows yet")

    # Missing trailing columns are treated as empty cells
    df = df.iloc[:, :len(SUBMISSION_COLUMNS)].copy()
    for i in range(df.shape[1], len(SUBMISSION_COLUMNS)):
        df[f"_missing_{i}"] = ""
    df.columns = list(SUBMISSION_COLUMNS)
    return df.fillna("")


def frame_to_submissions(df: pd.DataFrame, total_problems: int = TOTAL_PROBLEMS) -> list[Submission]:
    """
    Decode sheet rows into Submissions, dropping malformed rows.

    Args:
        df: DataFrame with SUBMISSION_COLUMNS as string columns
        total_problems: Highest valid problem number

    Returns:
        List of Submission in sheet order

    Raises:
        NoDataError: If no row decodes into a Submission
    """
    submissions = []
    dropped = 0

    for row in df.itertuples(index=False):
        team_name = str(row.team_name).strip()
        problem_number = parse_problem_number(row.problem_number)

        if not team_name or problem_number is None or problem_number > total_problems:
            dropped += 1
            logger.debug(f"Dropped malformed row: team={team_name!r} problem={row.problem_number!r}")
            continue

        submissions.append(Submission(
            team_name=team_name,
            problem_number=problem_number,
            min_text=str(row.min_value).strip(),
            max_text=str(row.max_value).strip(),
            timestamp=parse_timestamp(row.timestamp),
        ))

    if dropped:
        logger.warning(f"Dropped {dropped} malformed row(s) out of {len(df)}")

    if not submissions:
        raise NoDataError(f"None of the {len(df)} sheet rows is a valid submission")

    return submissions


def parse_submissions_text(text: str, total_problems: int = TOTAL_PROBLEMS) -> list[Submission]:
    """
    Parse raw CSV text (header row + submissions).

    Raises:
        NoDataError: If the text has no valid submission rows
        ValueError: If the text exceeds MAX_INPUT_SIZE
    """
    validate_input_size(text, MAX_INPUT_SIZE)
    if not text.strip():
        raise NoDataError("Submission sheet is empty")
    df = _read_frame(io.StringIO(text))
    return frame_to_submissions(df, total_problems)


def read_submissions(source, total_problems: int = TOTAL_PROBLEMS) -> list[Submission]:
    """
    Read submissions from a CSV path or URL (e.g. a published Google Sheet).

    Raises:
        NoDataError: If the sheet has no valid submission rows
        IngestionError: If the source cannot be read or parsed
    """
    logger.info(f"Loading submissions from {source}")
    try:
        df = _read_frame(source)
    except IngestionError:
        raise
    except (OSError, UnicodeDecodeError, http.client.HTTPException) as e:
        raise IngestionError(f"Could not read submissions from {source}: {e}") from e

    submissions = frame_to_submissions(df, total_problems)
    logger.info(f"  Loaded {len(submissions)} submissions from {len(df)} rows")
    return submissions


def group_by_team(submissions) -> dict[str, list[Submission]]:
    """Group submissions by team name, keeping teams in first-seen order."""
    teams = {}
    for sub in submissions:
        teams.setdefault(sub.team_name, []).append(sub)
    return teams
