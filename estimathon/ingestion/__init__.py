"""
Data Ingestion

Modules:
- csv_reader: Decode the form-response sheet into Submissions
- answer_key: Normalize, load and save the organizer's answer key
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "read_submissions":
        from estimathon.ingestion.csv_reader import read_submissions
        return read_submissions
    if name == "parse_submissions_text":
        from estimathon.ingestion.csv_reader import parse_submissions_text
        return parse_submissions_text
    if name == "group_by_team":
        from estimathon.ingestion.csv_reader import group_by_team
        return group_by_team
    if name == "load_answer_key":
        from estimathon.ingestion.answer_key import load_answer_key
        return load_answer_key
    if name == "save_answer_key":
        from estimathon.ingestion.answer_key import save_answer_key
        return save_answer_key
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
