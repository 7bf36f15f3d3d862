"""Tests for CreditClient SDK class."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from github_credit import CreditClient
from github_credit.exceptions import CreditError, GitHubNotFoundError, NoResultsError
from github_credit.models.thread import Issue, Postings
from github_credit.sdk import split_repository

from tests.payloads import comment, connection, thread_node


def github(repositories: dict[str, dict[str, list]]):
    """A transport serving the Issues/PRs of ``repositories``, keyed by ``owner/name``.

    Unknown repositories answer with a null ``repository``, as GitHub does.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        variables = payload.get("variables", {})
        if "rateLimit" in payload["query"]:
            return httpx.Response(
                200,
                json={
                    "data": {
                        "rateLimit": {
                            "limit": 5000,
                            "remaining": 5000,
                            "resetAt": "2024-01-01T00:00:00Z",
                        }
                    }
                },
            )

        name = f"{variables['owner']}/{variables['name']}"
        if name not in repositories:
            return httpx.Response(200, json={"data": {"repository": None}})

        key = "issues" if "issues(first" in payload["query"] else "pullRequests"
        nodes = repositories[name][key]
        return httpx.Response(
            200, json={"data": {"repository": {key: connection(nodes)}}}
        )

    return httpx.MockTransport(handler)


REPOSITORIES = {
    "o/one": {
        "issues": [
            thread_node(
                "alice",
                "2024-01-01T00:00:00Z",
                comments=[comment("bob", "MEMBER", "2024-01-01T00:02:00Z")],
            )
        ],
        "pullRequests": [
            thread_node(
                "carol",
                "2024-01-01T00:00:00Z",
                closed_at="2024-01-01T01:00:00Z",
                merged_at="2024-01-01T01:00:00Z",
            )
        ],
    },
    "o/two": {
        "issues": [thread_node("dave", "2024-01-03T00:00:00Z")],
        "pullRequests": [],
    },
}


class TestCreditClientInit:
    """Tests for SDK initialization."""

    def test_init_with_token(self):
        """Test initialization with a token."""
        client = CreditClient(token="ghp_test_token")
        assert client.is_authenticated is True

    def test_init_without_token(self):
        """Test initialization without a token."""
        assert CreditClient().is_authenticated is False

    def test_init_custom_urls(self):
        """Test initialization with custom API URLs."""
        client = CreditClient(
            token="ghp_test",
            api_url="https://github.example.com/api/v3",
            graphql_url="https://github.example.com/api/graphql",
        )
        assert client.config.github_api_url == "https://github.example.com/api/v3"
        assert client.config.github_graphql_url == "https://github.example.com/api/graphql"

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test that the context manager opens and closes the clients."""
        client = CreditClient(token="ghp_test")
        async with client:
            assert client._initialized is True
            assert client._graphql_client is not None
            assert client._rest_client is not None
        assert client._initialized is False

    @pytest.mark.asyncio
    async def test_not_initialized(self):
        """Test that calling methods without initialization raises error."""
        with pytest.raises(CreditError, match="Client not initialized"):
            await CreditClient(token="ghp_test").analyze(["o/one"])


class TestSplitRepository:
    """Tests for owner/name parsing."""

    def test_valid(self):
        """Test a well-formed repository name."""
        assert split_repository("rust-lang/cargo") == ("rust-lang", "cargo")

    @pytest.mark.parametrize("name", ["cargo", "/cargo", "rust-lang/", "a/b/c"])
    def test_invalid(self, name):
        """Test malformed repository names."""
        with pytest.raises(ValueError):
            split_repository(name)


class TestAnalyze:
    """Tests for analyzing several repositories."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("serial", [False, True])
    async def test_combines_repositories(self, test_config, serial):
        """Test that statistics cover every repository."""
        async with CreditClient(config=test_config, transport=github(REPOSITORIES)) as client:
            analysis = await client.analyze(["o/one", "o/two"], serial=serial)

        stats = analysis.statistics
        assert analysis.repositories == ["o/one", "o/two"]
        assert analysis.failures == []
        assert stats.all_issues == 2
        assert stats.all_prs == 1
        assert stats.prs_merged == 1
        assert stats.issues_with_official_responses == 1
        assert stats.commentors == {"bob": 1}
        assert stats.code_contributors == {"carol": 1}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("serial", [False, True])
    async def test_partial_failure(self, test_config, serial):
        """Test that failed repositories are reported alongside the results."""
        async with CreditClient(config=test_config, transport=github(REPOSITORIES)) as client:
            analysis = await client.analyze(["o/one", "o/missing", "bad-name"], serial=serial)

        assert analysis.repositories == ["o/one"]
        assert [f.repository for f in analysis.failures] == ["o/missing", "bad-name"]
        assert isinstance(analysis.failures[0].error, GitHubNotFoundError)
        assert isinstance(analysis.failures[1].error, ValueError)
        assert analysis.statistics.all_issues == 1

    @pytest.mark.asyncio
    async def test_all_failed(self, test_config):
        """Test that nothing to show is an error carrying every failure."""
        async with CreditClient(config=test_config, transport=github(REPOSITORIES)) as client:
            with pytest.raises(NoResultsError) as exc_info:
                await client.analyze(["o/missing", "o/gone"])

        assert len(exc_info.value.failures) == 2
        assert "o/missing" in str(exc_info.value)
        assert "o/gone" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, test_config):
        """Test that programming errors aren't recorded as repository failures."""
        with patch("github_credit.sdk.ThreadCollector") as MockCollector:
            MockCollector.return_value.collect_postings = AsyncMock(
                side_effect=RuntimeError("bug")
            )

            async with CreditClient(config=test_config) as client:
                with pytest.raises(RuntimeError, match="bug"):
                    await client.analyze(["o/one"])

    @pytest.mark.asyncio
    async def test_postings(self, test_config):
        """Test fetching the postings of a single repository."""
        expected = Postings(issues=[Issue(author="a", posted="2024-01-01T00:00:00Z")])

        with patch("github_credit.sdk.ThreadCollector") as MockCollector:
            MockCollector.return_value.collect_postings = AsyncMock(return_value=expected)

            async with CreditClient(config=test_config) as client:
                result = await client.postings("o/one", commits=True)

        assert result == expected
        call = MockCollector.return_value.collect_postings.call_args
        assert call.args == ("o", "one")
        assert call.kwargs["commits"] is True


class TestOtherQueries:
    """Tests for repository listing, user ranking and quota."""

    @pytest.mark.asyncio
    async def test_rate_limit(self, test_config):
        """Test reading the remaining quota."""
        async with CreditClient(config=test_config, transport=github({})) as client:
            limit = await client.rate_limit()

        assert limit.limit == 5000

    @pytest.mark.asyncio
    async def test_owner_repositories(self, test_config):
        """Test listing an owner's repositories."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/users/o/repos"
            return httpx.Response(
                200, json=[{"name": "one", "full_name": "o/one", "fork": False}]
            )

        async with CreditClient(
            config=test_config, transport=httpx.MockTransport(handler)
        ) as client:
            repos = await client.owner_repositories("o")

        assert [r.full_name for r in repos] == ["o/one"]
