"""
Answer Key Storage

The organizer enters correct answers during the competition as they are
verified. This module normalizes those entries and persists them as a small
two-column CSV so a restarted dashboard does not lose them.
"""

from pathlib import Path

import pandas as pd

from estimathon.config import TOTAL_PROBLEMS, ANSWER_KEY_COLUMNS
from estimathon.utils import setup_logging, atomic_write_csv

# --- Module Logger ---
logger = setup_logging(__name__)


def normalize_answer_key(mapping, total_problems: int = TOTAL_PROBLEMS) -> dict[int, str]:
    """
    Clean up organizer-entered answers.

    Keys may be ints or numeric strings. Entries outside 1..total_problems
    and blank answers are dropped; answers are stripped but otherwise kept
    as text (they are parsed at scoring time).

    Args:
        mapping: Problem number -> answer text

    Returns:
        Dict of problem number -> answer text, sorted by problem number
    """
    answer_key = {}
    for key, value in (mapping or {}).items():
        try:
            problem_number = int(str(key).strip())
        except ValueError:
            logger.warning(f"Ignoring answer for invalid problem number {key!r}")
            continue
        if not 1 <= problem_number <= total_problems:
            logger.warning(f"Ignoring answer for out-of-range problem {problem_number}")
            continue
        if value is None or pd.isna(value):
            continue
        answer = str(value).strip()
        if answer:
            answer_key[problem_number] = answer
    return dict(sorted(answer_key.items()))


def answered_problems(answer_key) -> list[int]:
    """Problem numbers that currently have a non-blank answer."""
    return sorted(p for p, answer in answer_key.items() if answer is not None and str(answer).strip())


def load_answer_key(path: Path, total_problems: int = TOTAL_PROBLEMS) -> dict[int, str]:
    """
    Load a saved answer key.

    Args:
        path: CSV with columns problem_number, answer

    Returns:
        Normalized answer key (empty if the file does not exist)
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"No answer key at {path}, starting empty")
        return {}

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in ANSWER_KEY_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Answer key {path} is missing columns: {', '.join(missing)}")

    answer_key = normalize_answer_key(
        dict(zip(df['problem_number'], df['answer'])), total_problems
    )
    logger.info(f"Loaded {len(answer_key)} answers from {path}")
    return answer_key


def save_answer_key(answer_key, path: Path, total_problems: int = TOTAL_PROBLEMS) -> Path:
    """
    Save the answer key atomically.

    Returns:
        Path the key was written to
    """
    path = Path(path)
    normalized = normalize_answer_key(answer_key, total_problems)
    df = pd.DataFrame(list(normalized.items()), columns=list(ANSWER_KEY_COLUMNS))
    atomic_write_csv(df, path, index=False)
    logger.info(f"Saved {len(normalized)} answers to {path}")
    return path
