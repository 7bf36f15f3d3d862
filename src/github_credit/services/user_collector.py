"""Location-based user search collector service."""

import logging
from typing import Optional

from rich.progress import Progress

from github_credit.config import Config
from github_credit.models.github import UserContributions
from github_credit.models.users import UserRanking
from github_credit.services.github_graphql_client import GitHubGraphQLClient
from github_credit.services.queries import user_count_query, users_query
from github_credit.utils.pagination import Page, paginate
from github_credit.utils.progress import PageTicker

logger = logging.getLogger(__name__)


class UserCollector:
    """Collects users of a location and their contribution counts via GraphQL."""

    def __init__(self, graphql_client: GitHubGraphQLClient, config: Optional[Config] = None):
        self.graphql_client = graphql_client
        self.config = config or graphql_client.config

    async def user_count(self, location: str) -> int:
        """Count every user who lists ``location`` on their profile."""
        return await self.graphql_client.query(
            user_count_query(location),
            lambda data: data["search"]["userCount"],
        )

    async def collect_users(
        self,
        location: str,
        progress: Optional[Progress] = None,
    ) -> list[UserContributions]:
        """Collect users of a location, most followed first.

        Search results are unbounded, so at most ``config.max_user_pages``
        pages are fetched. Paging also stops at the first page that ends
        with a user nobody follows.
        """

        async def fetch(cursor: Optional[str]) -> Page[UserContributions]:
            payload = users_query(location, cursor, page_size=self.config.user_page_size)
            return await self.graphql_client.query(
                payload,
                lambda data: Page.from_connection(
                    data["search"], UserContributions.from_graphql
                ),
            )

        logger.debug("Searching users in %s", location)

        with PageTicker(
            progress,
            "Fetching User contributions...",
            total=self.config.max_user_pages,
        ) as ticker:
            users = await paginate(
                fetch,
                stop_early=lambda user: user.followers == 0,
                max_pages=self.config.max_user_pages,
                on_page=ticker,
            )

        logger.debug("Found %d users in %s", len(users), location)
        return users

    async def rank_users(
        self,
        location: str,
        progress: Optional[Progress] = None,
    ) -> UserRanking:
        """The top 100 users in ``location`` by public contributions."""
        total_users = await self.user_count(location)
        users = await self.collect_users(location, progress)
        return UserRanking.from_search(total_users, users)
