"""Issue and Pull Request collector service."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from rich.progress import Progress

from github_credit.config import Config
from github_credit.exceptions import DecodeError, GitHubNotFoundError
from github_credit.models.github import RawThread, ThreadConnection
from github_credit.models.thread import Issue, Postings, PullRequest
from github_credit.services.github_graphql_client import GitHubGraphQLClient
from github_credit.services.queries import Mode, issues_query
from github_credit.utils.pagination import Page, paginate
from github_credit.utils.progress import PageTicker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ThreadCollector:
    """Collects every Issue and Pull Request thread of a repository via GraphQL."""

    def __init__(self, graphql_client: GitHubGraphQLClient, config: Optional[Config] = None):
        self.graphql_client = graphql_client
        self.config = config or graphql_client.config

    async def collect_raw(
        self,
        mode: Mode,
        owner: str,
        repo: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        on_page: Optional[Callable[[], None]] = None,
    ) -> list[RawThread]:
        """Fetch all Issues or Pull Requests of a repository, depending on ``mode``.

        Args:
            mode: Which collection to fetch
            owner: Repository owner
            repo: Repository name
            start: Only threads opened at or after this moment
            end: Only threads opened at or before this moment. Threads come
                oldest first, so paging stops once a page passes ``end``.
            on_page: Called once per fetched page

        Returns:
            The threads opened within ``[start, end]``, oldest first
        """

        async def fetch(cursor: Optional[str]) -> Page[RawThread]:
            payload = issues_query(
                mode, owner, repo, cursor, page_size=self.config.issue_page_size
            )
            return await self.graphql_client.query(
                payload, lambda data: _thread_page(data, mode, owner, repo)
            )

        stop_early = (lambda t: t.created_at > end) if end else None

        logger.debug("Fetching %s for %s/%s", mode.connection, owner, repo)
        threads = await paginate(fetch, stop_early=stop_early, on_page=on_page)
        logger.debug("Found %d %s in %s/%s", len(threads), mode.connection, owner, repo)

        return [t for t in threads if _within(t.created_at, start, end)]

    async def collect_issues(
        self,
        owner: str,
        repo: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        on_page: Optional[Callable[[], None]] = None,
    ) -> list[Issue]:
        """Collect and classify every Issue of a repository."""
        raw = await self.collect_raw(Mode.ISSUES, owner, repo, start, end, on_page)
        return [Issue.from_raw(r) for r in raw]

    async def collect_prs(
        self,
        owner: str,
        repo: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        commits: bool = False,
        on_page: Optional[Callable[[], None]] = None,
    ) -> list[PullRequest]:
        """Collect and classify every Pull Request of a repository.

        Commit counts are only requested when ``commits`` is set; otherwise
        every PR reports 0 commits.
        """
        mode = Mode.PULL_REQUESTS_WITH_COMMITS if commits else Mode.PULL_REQUESTS
        raw = await self.collect_raw(mode, owner, repo, start, end, on_page)
        return [PullRequest.from_raw(r) for r in raw]

    async def collect_postings(
        self,
        owner: str,
        repo: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        commits: bool = False,
        serial: bool = False,
        progress: Optional[Progress] = None,
        limiter: Optional[asyncio.Semaphore] = None,
    ) -> Postings:
        """Collect the Issue and Pull Request threads of one repository.

        Args:
            owner: Repository owner
            repo: Repository name
            start: Only threads opened at or after this moment
            end: Only threads opened at or before this moment
            commits: Whether to count the commits of each PR
            serial: Fetch Issues then PRs instead of both at once
            progress: Display to report fetched pages on
            limiter: Bounds how many collections are fetched at the same time

        Returns:
            Postings for this repository alone
        """
        name = f"{owner}/{repo}"

        async def issues() -> list[Issue]:
            with PageTicker(progress, f"Fetching Issues for {name}...") as ticker:
                return await self.collect_issues(owner, repo, start, end, on_page=ticker)

        async def prs() -> list[PullRequest]:
            with PageTicker(progress, f"Fetching Pull Requests for {name}...") as ticker:
                return await self.collect_prs(
                    owner, repo, start, end, commits=commits, on_page=ticker
                )

        if serial:
            found_issues = await _bounded(issues, limiter)
            found_prs = await _bounded(prs, limiter)
        else:
            tasks = [
                asyncio.ensure_future(_bounded(issues, limiter)),
                asyncio.ensure_future(_bounded(prs, limiter)),
            ]
            try:
                found_issues, found_prs = await asyncio.gather(*tasks)
            finally:
                # A failed collection mustn't leave its sibling fetching
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(
            "%s: %d issues, %d pull requests", name, len(found_issues), len(found_prs)
        )
        return Postings(issues=found_issues, prs=found_prs)


async def _bounded(
    work: Callable[[], Awaitable[T]],
    limiter: Optional[asyncio.Semaphore],
) -> T:
    if limiter is None:
        return await work()
    async with limiter:
        return await work()


def _thread_page(data: dict[str, Any], mode: Mode, owner: str, repo: str) -> Page[RawThread]:
    repository = data["repository"]
    if repository is None:
        raise GitHubNotFoundError(f"Repository not found: {owner}/{repo}")

    connection = ThreadConnection.from_repository(repository)
    if connection.kind.value != mode.connection:
        raise DecodeError(
            f"Asked for {mode.connection} of {owner}/{repo} but got {connection.kind.value}"
        )
    return connection.page


def _within(moment: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    after = start is None or moment >= start
    before = end is None or moment <= end
    return after and before
