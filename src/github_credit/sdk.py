"""GitHub Credit SDK - High-level API for crediting repository contributors."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime

import httpx
from rich.progress import Progress

from github_credit.config import Config
from github_credit.exceptions import CreditError, NoResultsError, RepositoryFailure
from github_credit.models.github import RateLimit, Repository
from github_credit.models.statistics import Statistics
from github_credit.models.thread import Postings
from github_credit.models.users import UserRanking
from github_credit.services.github_graphql_client import GitHubGraphQLClient
from github_credit.services.github_rest_client import GitHubRestClient
from github_credit.services.repo_collector import RepoCollector
from github_credit.services.thread_collector import ThreadCollector
from github_credit.services.user_collector import UserCollector

logger = logging.getLogger(__name__)


@dataclass
class Analysis:
    """Statistics over the repositories that could be fetched."""

    statistics: Statistics
    repositories: list[str]
    failures: list[RepositoryFailure] = field(default_factory=list)


class CreditClient:
    """High-level SDK for compiling contribution statistics.

    Example usage:
        ```python
        from github_credit import CreditClient

        async with CreditClient(token="ghp_xxx") as client:
            analysis = await client.analyze(["rust-lang/rust", "rust-lang/cargo"])
            print(analysis.statistics.all_issues)
        ```

    Args:
        token: GitHub personal access token. Required, the GraphQL API
            rejects anonymous requests.
        api_url: GitHub API base URL (default: https://api.github.com)
        graphql_url: GitHub GraphQL API URL (default: https://api.github.com/graphql)
        config: Full configuration; overrides the other arguments
        transport: httpx transport for both clients, mostly for tests
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        graphql_url: str = "https://api.github.com/graphql",
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config or Config(
            github_token=token,
            github_api_url=api_url,
            github_graphql_url=graphql_url,
        )
        self._transport = transport
        self._rest_client: GitHubRestClient | None = None
        self._graphql_client: GitHubGraphQLClient | None = None
        self._initialized = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def is_authenticated(self) -> bool:
        """Check if a token is configured."""
        return self._config.is_authenticated

    async def __aenter__(self) -> "CreditClient":
        """Async context manager entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _initialize(self) -> None:
        """Initialize clients."""
        if self._initialized:
            return

        self._rest_client = GitHubRestClient(config=self._config, transport=self._transport)
        self._graphql_client = GitHubGraphQLClient(
            config=self._config, transport=self._transport
        )

        self._initialized = True
        logger.debug("CreditClient initialized (authenticated=%s)", self.is_authenticated)

    async def close(self) -> None:
        """Close all HTTP connections."""
        if self._rest_client:
            await self._rest_client.close()
        if self._graphql_client:
            await self._graphql_client.close()
        self._initialized = False
        logger.debug("CreditClient closed")

    def _ensure_initialized(self) -> None:
        """Ensure the client is initialized."""
        if not self._initialized:
            raise CreditError(
                "Client not initialized. Use 'async with CreditClient(...) as client:'"
            )

    async def postings(
        self,
        repository: str,
        start: datetime | None = None,
        end: datetime | None = None,
        commits: bool = False,
        serial: bool = False,
        progress: Progress | None = None,
        limiter: asyncio.Semaphore | None = None,
    ) -> Postings:
        """Get every Issue and Pull Request of one repository.

        Args:
            repository: ``owner/name``
            start: Only threads opened at or after this moment
            end: Only threads opened at or before this moment
            commits: Whether to count the commits of each PR
            serial: Fetch Issues then PRs instead of both at once
            progress: Display to report fetched pages on
            limiter: Shared bound on simultaneous collections

        Raises:
            ValueError: If ``repository`` isn't of the form ``owner/name``
        """
        self._ensure_initialized()
        owner, repo = split_repository(repository)

        collector = ThreadCollector(self._graphql_client, self._config)
        return await collector.collect_postings(
            owner,
            repo,
            start=start,
            end=end,
            commits=commits,
            serial=serial,
            progress=progress,
            limiter=limiter,
        )

    async def analyze(
        self,
        repositories: list[str],
        start: datetime | None = None,
        end: datetime | None = None,
        commits: bool = False,
        serial: bool = False,
        progress: Progress | None = None,
    ) -> Analysis:
        """Compile statistics over several repositories at once.

        A repository that fails doesn't stop the others; its error is
        recorded in ``Analysis.failures``.

        Args:
            repositories: ``owner/name`` strings
            start: Only threads opened at or after this moment
            end: Only threads opened at or before this moment
            commits: Whether to count the commits of each PR
            serial: Fetch one collection at a time
            progress: Display to report fetched pages on

        Returns:
            Statistics over every repository that succeeded

        Raises:
            NoResultsError: If no repository could be fetched
        """
        self._ensure_initialized()
        logger.info("Analyzing %d repositories", len(repositories))

        if serial:
            results: list[Postings | BaseException] = []
            for repository in repositories:
                try:
                    results.append(
                        await self.postings(
                            repository, start, end, commits, serial=True, progress=progress
                        )
                    )
                except (CreditError, httpx.HTTPError, ValueError) as e:
                    results.append(e)
        else:
            limiter = asyncio.Semaphore(self._config.max_workers)
            results = await asyncio.gather(
                *(
                    self.postings(
                        repository, start, end, commits, progress=progress, limiter=limiter
                    )
                    for repository in repositories
                ),
                return_exceptions=True,
            )

        combined = Postings()
        succeeded: list[str] = []
        failures: list[RepositoryFailure] = []

        for repository, result in zip(repositories, results):
            if isinstance(result, Postings):
                combined = combined.combine(result)
                succeeded.append(repository)
            elif isinstance(result, (CreditError, httpx.HTTPError, ValueError)):
                logger.warning("Failed to fetch %s: %s", repository, result)
                failures.append(RepositoryFailure(repository, result))
            else:
                raise result

        if not succeeded:
            raise NoResultsError(failures)

        logger.info(
            "Collected %d issues and %d pull requests from %d repositories",
            len(combined.issues),
            len(combined.prs),
            len(succeeded),
        )

        return Analysis(
            statistics=combined.statistics(),
            repositories=succeeded,
            failures=failures,
        )

    async def owner_repositories(self, owner: str, include_forks: bool = False) -> list[Repository]:
        """Get the active public repositories of a user or organization."""
        self._ensure_initialized()
        logger.info("Fetching repositories for %s", owner)

        collector = RepoCollector(self._rest_client)
        return await collector.collect_repos(owner, include_forks=include_forks)

    async def rank_users(self, location: str, progress: Progress | None = None) -> UserRanking:
        """Get the top users of a location by public contributions."""
        self._ensure_initialized()
        logger.info("Ranking users in %s", location)

        collector = UserCollector(self._graphql_client, self._config)
        return await collector.rank_users(location, progress)

    async def rate_limit(self) -> RateLimit:
        """Get the remaining GraphQL quota of the configured token."""
        self._ensure_initialized()
        return await self._graphql_client.get_rate_limit()


def split_repository(repository: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts."""
    owner, sep, repo = repository.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ValueError(f"Repository must be of the form owner/name, got {repository!r}")
    return owner, repo
