"""Tests for report rendering and JSON output."""

from datetime import timedelta

import pytest

from github_credit.exceptions import DecodeError
from github_credit.models.statistics import ResponseTimes, Statistics
from github_credit.output.json_writer import dump_json, load_statistics
from github_credit.output.report import percent, render_report


@pytest.fixture
def stats():
    return Statistics(
        commentors={"alice": 7, "bob": 12, "carol": 1},
        code_contributors={"alice": 3},
        contributor_commits={"alice": 9},
        all_issues=4,
        all_closed_issues=1,
        issues_with_responses=3,
        issues_with_official_responses=2,
        issue_first_resp_time=ResponseTimes(
            median=timedelta(minutes=30), mean=timedelta(hours=5)
        ),
        issue_official_first_resp_time=None,
        all_prs=2,
        prs_with_responses=2,
        prs_with_official_responses=1,
        prs_merged=1,
        prs_closed_without_merging=1,
        pr_merge_time=ResponseTimes(median=timedelta(days=3), mean=timedelta(days=3)),
    )


class TestPercent:
    """Tests for percent."""

    def test_percent(self):
        """Test a plain ratio."""
        assert percent(1, 4) == 25.0

    def test_zero_total(self):
        """Test that an empty total doesn't divide by zero."""
        assert percent(0, 0) == 0.0


class TestRenderReport:
    """Tests for the markdown report."""

    def test_sections(self, stats):
        """Test that every section is rendered."""
        report = render_report(stats, "o/one, o/two")

        assert report.startswith("# Project Report for o/one, o/two")
        assert "4 issues found, 1 of which are now closed (25.0%)." in report
        assert "- 3 (75.0%) of these received a response." in report
        assert "2 Pull Requests found, 1 of which are now merged (50.0%)." in report
        assert "1 have been closed without merging (50.0%)." in report

    def test_response_times(self, stats):
        """Test human-friendly durations and absent distributions."""
        report = render_report(stats, "o/r")

        assert "- Median: 30 minutes\n- Average: 5 hours" in report
        assert "Response Times (official):\n- Median: None\n- Average: None" in report
        assert "Time-to-Merge:\n- Median: 3 days" in report

    def test_rankings(self, stats):
        """Test the contributor rankings are sorted by count."""
        report = render_report(stats, "o/r")

        assert " 1. bob: 12\n 2. alice: 7\n 3. carol: 1" in report
        assert " 1. alice: 3" in report
        assert "commits-in-merged-PRs" not in report

    def test_commits_ranking(self, stats):
        """Test the optional commits ranking."""
        report = render_report(stats, "o/r", commits=True)

        assert "Top 10 Code Contributors (by commits-in-merged-PRs):\n 1. alice: 9" in report

    def test_empty(self):
        """Test a report of a repository with no activity."""
        report = render_report(Statistics(), "o/quiet")

        assert "No issues found." in report
        assert "No Pull Requests found." in report

    def test_top_ten_only(self):
        """Test that rankings stop at ten users."""
        stats = Statistics(commentors={f"user{i}": i for i in range(1, 21)})

        report = render_report(stats, "o/r")

        assert "10. user11: 11" in report
        assert "user10:" not in report


class TestJson:
    """Tests for the JSON form of reports."""

    def test_load_round_trip(self, stats):
        """Test that written statistics load back unchanged."""
        assert load_statistics(dump_json(stats, indent=2)) == stats

    def test_load_invalid(self):
        """Test that a file that isn't statistics is rejected."""
        with pytest.raises(DecodeError, match="Not a saved statistics file"):
            load_statistics('{"all_issues": "many"}')

    def test_load_not_json(self):
        """Test that non-JSON input is rejected."""
        with pytest.raises(DecodeError):
            load_statistics("# Project Report")
