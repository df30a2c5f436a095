"""
Estimathon Scoring

Modules:
- numbers: Numeric parsing of submitted bounds and answers
- engine: Latest-submission selection and per-team scoring
- ranking: Leaderboard ordering, rank changes and score display
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "parse_number":
        from estimathon.scoring.numbers import parse_number
        return parse_number
    if name == "latest_per_problem":
        from estimathon.scoring.engine import latest_per_problem
        return latest_per_problem
    if name == "score_team":
        from estimathon.scoring.engine import score_team
        return score_team
    if name == "score_teams":
        from estimathon.scoring.engine import score_teams
        return score_teams
    if name == "rank_teams":
        from estimathon.scoring.ranking import rank_teams
        return rank_teams
    if name == "format_score":
        from estimathon.scoring.ranking import format_score
        return format_score
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
