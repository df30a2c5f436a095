"""
Tests for latest-submission selection and Estimathon scoring.
"""

import math
from datetime import datetime, timezone

import pytest

from estimathon.config import STATUS_CORRECT, STATUS_WRONG, STATUS_BLANK, TOTAL_PROBLEMS
from estimathon.scoring.engine import (
    Submission,
    latest_per_problem,
    score_problem,
    score_team,
    score_teams,
)


def make_sub(problem, low, high, minute=0, team="X"):
    """Submission at 2026-10-19 10:<minute>."""
    return Submission(
        team_name=team,
        problem_number=problem,
        min_text=str(low),
        max_text=str(high),
        timestamp=datetime(2026, 10, 19, 10, minute),
    )


class TestLatestPerProblem:
    """Tests for latest_per_problem function."""

    def test_later_submission_wins(self):
        early = make_sub(1, 10, 20, minute=1)
        late = make_sub(1, 12, 18, minute=5)
        assert latest_per_problem([early, late])[1] is late

    def test_order_independent(self):
        early = make_sub(1, 10, 20, minute=1)
        late = make_sub(1, 12, 18, minute=5)
        assert latest_per_problem([late, early])[1] is late

    def test_groups_by_problem(self):
        subs = [make_sub(1, 1, 2), make_sub(2, 3, 4), make_sub(3, 5, 6, minute=2)]
        assert sorted(latest_per_problem(subs)) == [1, 2, 3]

    def test_equal_timestamps_last_encountered_wins(self):
        first = make_sub(1, 10, 20, minute=3)
        second = make_sub(1, 30, 40, minute=3)
        assert latest_per_problem([first, second])[1] is second

    def test_invalid_timestamp_never_beats_valid(self):
        valid = make_sub(1, 10, 20)
        invalid = Submission("X", 1, "0", "1", None)
        assert latest_per_problem([valid, invalid])[1] is valid
        assert latest_per_problem([invalid, valid])[1] is valid

    def test_mixed_timezones_do_not_crash(self):
        naive = make_sub(1, 10, 20)
        aware = Submission("X", 1, "0", "1", datetime(2026, 10, 19, 11, 0, tzinfo=timezone.utc))
        # Incomparable timestamps keep the current pick
        assert latest_per_problem([naive, aware])[1] is naive

    def test_empty(self):
        assert latest_per_problem([]) == {}


class TestScoreProblem:
    """Tests for classifying a single problem."""

    def test_missing_submission_is_blank(self):
        detail = score_problem(1, None, "15")
        assert detail.status == STATUS_BLANK
        assert detail.width is None

    def test_missing_answer_is_blank(self):
        detail = score_problem(1, make_sub(1, 10, 20), None)
        assert detail.status == STATUS_BLANK

    def test_inclusive_lower_bound(self):
        assert score_problem(1, make_sub(1, 10, 20), "10").status == STATUS_CORRECT

    def test_inclusive_upper_bound(self):
        assert score_problem(1, make_sub(1, 10, 20), "20").status == STATUS_CORRECT

    def test_reversed_bounds(self):
        detail = score_problem(1, make_sub(1, 20, 10), "15")
        assert detail.status == STATUS_CORRECT
        assert detail.width == 10

    def test_outside_interval_records_bounds(self):
        detail = score_problem(2, make_sub(2, 1, 1), "5")
        assert detail.status == STATUS_WRONG
        assert detail.width is None
        assert detail.submitted_min == 1
        assert detail.submitted_max == 1

    def test_unparseable_bound_is_wrong(self):
        detail = score_problem(1, make_sub(1, "lots", 20), "15")
        assert detail.status == STATUS_WRONG
        assert detail.width is None

    def test_unparseable_answer_is_wrong(self):
        assert score_problem(1, make_sub(1, 10, 20), "fifteen").status == STATUS_WRONG

    def test_scientific_notation_interval(self):
        detail = score_problem(1, make_sub(1, "1e6", "3e6"), "2.5E6")
        assert detail.status == STATUS_CORRECT
        assert detail.width == pytest.approx(2e6)


class TestScoreTeam:
    """Tests for score_team function."""

    def test_mixed_correct_and_wrong(self):
        subs = [make_sub(1, 10, 20), make_sub(2, 1, 1)]
        record = score_team("X", subs, {1: "15", 2: "5"}, total_problems=2)

        assert record.details[0].status == STATUS_CORRECT
        assert record.details[0].width == 10
        assert record.details[1].status == STATUS_WRONG
        assert record.wrong_count == 1
        assert record.score == 20

    def test_no_submissions(self):
        record = score_team("Y", [], {1: "15", 2: "5"}, total_problems=2)

        assert [d.status for d in record.details] == [STATUS_BLANK, STATUS_BLANK]
        assert record.wrong_count == 2
        assert record.score == 4
        assert record.total_submissions == 0

    def test_always_one_detail_per_problem(self):
        subs = [make_sub(3, 1, 2), make_sub(3, 1, 5, minute=1), make_sub(7, 0, 9)]
        record = score_team("X", subs, {3: "4", 7: "8"})

        assert len(record.details) == TOTAL_PROBLEMS
        assert [d.problem_number for d in record.details] == list(range(1, TOTAL_PROBLEMS + 1))
        assert record.total_submissions == 3

    def test_blank_answer_text_counts_as_missing(self):
        record = score_team("X", [make_sub(1, 10, 20)], {1: "   "}, total_problems=1)
        assert record.details[0].status == STATUS_BLANK

    def test_uses_latest_submission(self):
        subs = [make_sub(1, 100, 200, minute=9), make_sub(1, 10, 20, minute=1)]
        record = score_team("X", subs, {1: "150"}, total_problems=1)
        assert record.score == 100

    def test_zero_width_interval_scores_zero(self):
        record = score_team("X", [make_sub(1, 5, 5)], {1: "5"}, total_problems=1)
        assert record.score == 0
        assert record.wrong_count == 0

    def test_zero_width_beats_overflowing_widths(self):
        # 1e200 * 1e200 overflows to inf before the zero width is reached
        subs = [make_sub(1, 0, 1e200), make_sub(2, 0, 1e200), make_sub(3, 5, 5)]
        record = score_team("X", subs, {1: "1", 2: "1", 3: "5"}, total_problems=3)
        assert record.score == 0
        assert not math.isnan(record.score)

    def test_invalid_total_problems(self):
        with pytest.raises(ValueError):
            score_team("X", [], {}, total_problems=0)


class TestScoreProperties:
    """Invariants that hold for any team."""

    @pytest.fixture
    def record(self):
        subs = [
            make_sub(1, 10, 20),
            make_sub(2, "2e3", "5e3"),
            make_sub(3, 0, 1),
            make_sub(4, "bad", 3),
            make_sub(5, 7, 3),
        ]
        answers = {1: "11", 2: "4000", 3: "2", 4: "1", 5: "4", 6: "9"}
        return score_team("Z", subs, answers, total_problems=6)

    def test_score_formula(self, record):
        widths = [d.width for d in record.details if d.status == STATUS_CORRECT]
        assert record.score == math.prod(widths) * 2 ** record.wrong_count

    def test_wrong_count_matches_details(self, record):
        assert record.wrong_count == sum(1 for d in record.details if d.status != STATUS_CORRECT)
        assert record.wrong_count + record.correct_count == 6

    def test_idempotent(self, record):
        subs = [
            make_sub(1, 10, 20),
            make_sub(2, "2e3", "5e3"),
            make_sub(3, 0, 1),
            make_sub(4, "bad", 3),
            make_sub(5, 7, 3),
        ]
        answers = {1: "11", 2: "4000", 3: "2", 4: "1", 5: "4", 6: "9"}
        assert score_team("Z", subs, answers, total_problems=6) == record


class TestScoreTeams:
    """Tests for score_teams function."""

    def test_preserves_team_order(self):
        by_team = {
            "B": [make_sub(1, 10, 20, team="B")],
            "A": [make_sub(1, 14, 16, team="A")],
        }
        records = score_teams(by_team, {1: "15"}, total_problems=1)
        assert [r.team_name for r in records] == ["B", "A"]
        assert [r.score for r in records] == [10, 2]
