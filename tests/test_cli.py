"""Tests for the command line interface."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from github_credit.cli import app, parse_date
from github_credit.exceptions import GitHubNotFoundError, NoResultsError, RepositoryFailure
from github_credit.models.github import RateLimit, Repository
from github_credit.models.statistics import Statistics
from github_credit.models.users import RankedUser, UserRanking
from github_credit.sdk import Analysis

runner = CliRunner()

STATS = Statistics(commentors={"alice": 2}, all_issues=3, all_closed_issues=3)


def quota(remaining: int = 5000) -> RateLimit:
    return RateLimit(
        limit=5000,
        remaining=remaining,
        reset_at=datetime.now(timezone.utc) + timedelta(minutes=30),
    )


@pytest.fixture
def client():
    """Patch the SDK client used by the CLI and return the mock instance."""
    with patch("github_credit.cli.CreditClient") as MockClient:
        instance = MagicMock()
        instance.rate_limit = AsyncMock(return_value=quota())
        instance.analyze = AsyncMock(
            return_value=Analysis(statistics=STATS, repositories=["o/one"])
        )
        MockClient.return_value.__aenter__.return_value = instance
        yield instance


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        """Test that the version is printed."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "github-credit version" in result.stdout


class TestParseDate:
    """Tests for date options."""

    def test_start_of_day(self):
        """Test that a start date begins at midnight UTC."""
        assert parse_date("2024-02-01") == datetime(2024, 2, 1, tzinfo=timezone.utc)

    def test_end_of_day(self):
        """Test that an end date covers the whole day."""
        moment = parse_date("2024-02-01", end_of_day=True)

        assert moment.date().isoformat() == "2024-02-01"
        assert moment.hour == 23 and moment.minute == 59

    def test_none(self):
        """Test that a missing option stays missing."""
        assert parse_date(None) is None


class TestRepoCommand:
    """Tests for credit repo."""

    def test_report(self, client):
        """Test printing a markdown report."""
        result = runner.invoke(app, ["repo", "o/one", "--start", "2024-01-01"])

        assert result.exit_code == 0
        assert "# Project Report for o/one" in result.stdout
        assert "3 issues found" in result.stdout
        repositories = client.analyze.call_args.args[0]
        assert repositories == ["o/one"]
        assert client.analyze.call_args.kwargs["start"] == datetime(
            2024, 1, 1, tzinfo=timezone.utc
        )

    def test_json(self, client):
        """Test printing statistics as JSON."""
        result = runner.invoke(app, ["repo", "o/one", "--json"])

        assert result.exit_code == 0
        assert Statistics.model_validate(json.loads(result.stdout)) == STATS

    @pytest.mark.parametrize("args, disabled", [([], False), (["--quiet"], True), (["-q"], True)])
    def test_quiet(self, client, args, disabled):
        """Test that quiet mode disables the progress display only."""
        result = runner.invoke(app, ["repo", "o/one", *args])

        assert result.exit_code == 0
        assert "# Project Report for o/one" in result.stdout
        assert client.analyze.call_args.kwargs["progress"].disable is disabled

    def test_owner(self, client):
        """Test expanding an owner into its repositories."""
        client.owner_repositories = AsyncMock(
            return_value=[
                Repository(name="one", full_name="o/one"),
                Repository(name="two", full_name="o/two"),
            ]
        )

        result = runner.invoke(app, ["repo", "o/one", "--owner", "o"])

        assert result.exit_code == 0
        assert client.analyze.call_args.args[0] == ["o/one", "o/two"]

    def test_partial_failure(self, client):
        """Test that failures are reported next to the results."""
        client.analyze.return_value = Analysis(
            statistics=STATS,
            repositories=["o/one"],
            failures=[RepositoryFailure("o/gone", GitHubNotFoundError("Repository not found"))],
        )

        result = runner.invoke(app, ["repo", "o/one", "o/gone"])

        assert result.exit_code == 0
        assert "o/gone: Repository not found" in result.output
        assert "# Project Report for o/one" in result.output

    def test_no_results(self, client):
        """Test that nothing to show exits with an error."""
        client.analyze.side_effect = NoResultsError(
            [RepositoryFailure("o/gone", GitHubNotFoundError("Repository not found"))]
        )

        result = runner.invoke(app, ["repo", "o/gone"])

        assert result.exit_code == 1
        assert "No results to show!" in result.output

    def test_quota_exhausted(self, client):
        """Test that nothing is fetched without quota."""
        client.rate_limit.return_value = quota(remaining=0)

        result = runner.invoke(app, ["repo", "o/one"])

        assert result.exit_code == 1
        client.analyze.assert_not_called()

    def test_no_repositories(self):
        """Test that at least one repository is required."""
        result = runner.invoke(app, ["repo"])

        assert result.exit_code == 1
        assert "at least one" in result.output

    def test_invalid_date(self):
        """Test that malformed dates are rejected."""
        result = runner.invoke(app, ["repo", "o/one", "--start", "01/02/2024"])

        assert result.exit_code == 2
        assert "Invalid date format" in result.output


class TestOtherCommands:
    """Tests for credit limit, users and render."""

    def test_limit(self, client):
        """Test printing the remaining quota."""
        result = runner.invoke(app, ["limit"])

        assert result.exit_code == 0
        assert "5000" in result.stdout

    def test_users_json(self, client):
        """Test printing a user ranking as JSON."""
        client.rank_users = AsyncMock(
            return_value=UserRanking(
                total_users=42,
                contributions=[RankedUser(login="alice", public_contributions=900)],
            )
        )

        result = runner.invoke(app, ["users", "Iceland", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_users"] == 42
        assert data["contributions"][0]["login"] == "alice"
        assert client.rank_users.call_args.args[0] == "Iceland"

    def test_render_file(self, tmp_path):
        """Test rendering saved statistics from a file."""
        saved = tmp_path / "stats.json"
        saved.write_text(STATS.model_dump_json())

        result = runner.invoke(app, ["render", str(saved), "--name", "o/one"])

        assert result.exit_code == 0
        assert "# Project Report for o/one" in result.stdout
        assert "3 issues found, 3 of which are now closed (100.0%)." in result.stdout

    def test_render_stdin(self):
        """Test rendering saved statistics from stdin."""
        result = runner.invoke(app, ["render"], input=STATS.model_dump_json())

        assert result.exit_code == 0
        assert "alice: 2" in result.stdout

    def test_render_invalid(self):
        """Test that a file that isn't statistics fails cleanly."""
        result = runner.invoke(app, ["render"], input="not json")

        assert result.exit_code == 1
        assert "Error" in result.output
