"""Repository listing service."""

import logging

from github_credit.models.github import Repository
from github_credit.services.github_rest_client import GitHubRestClient

logger = logging.getLogger(__name__)


class RepoCollector:
    """Lists the repositories of an owner via the REST API."""

    def __init__(self, rest_client: GitHubRestClient):
        self.rest_client = rest_client

    async def collect_repos(self, owner: str, include_forks: bool = False) -> list[Repository]:
        """Collect an owner's public repositories.

        Archived repositories are always skipped. Forks are skipped
        unless ``include_forks`` is set.

        Args:
            owner: GitHub user or organization

        Returns:
            Repositories sorted by full name
        """
        logger.debug("Fetching repositories for %s", owner)

        repos_data = await self.rest_client.get_owner_repos(owner)
        repos = [Repository.from_api(r) for r in repos_data]
        kept = [
            r for r in repos if not r.is_archived and (include_forks or not r.is_fork)
        ]

        logger.debug("Found %d repositories, keeping %d", len(repos), len(kept))

        return sorted(kept, key=lambda r: r.full_name)
