"""
Central configuration for the Estimathon leaderboard.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
ANSWER_KEY_FILE = DATA_FOLDER / "answer_key.csv"

# --- Competition Configuration ---
TOTAL_PROBLEMS = 13  # Fixed problem count, never derived from submissions
REFRESH_INTERVAL_SECONDS = 30  # Dashboard auto-refresh period

# Submission table columns, by position (header names in the sheet are ignored)
SUBMISSION_COLUMNS = ("timestamp", "team_name", "problem_number", "min_value", "max_value")

# Answer key CSV columns
ANSWER_KEY_COLUMNS = ("problem_number", "answer")

# --- Problem Statuses ---
STATUS_CORRECT = "correct"
STATUS_WRONG = "wrong"
STATUS_BLANK = "blank"

# --- Rank Change Labels ---
RANK_UP = "up"
RANK_DOWN = "down"
RANK_SAME = "same"

# --- Score Display Thresholds ---
EXPONENTIAL_THRESHOLD = 1e9
MILLIONS_THRESHOLD = 1e6
THOUSANDS_THRESHOLD = 1e3

# --- Input Validation ---
MAX_INPUT_SIZE = 5_000_000  # Maximum submission table size in bytes (~5MB)
