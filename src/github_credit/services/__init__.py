"""Services for GitHub data collection."""

from github_credit.services.github_graphql_client import GitHubGraphQLClient
from github_credit.services.github_rest_client import GitHubRestClient
from github_credit.services.repo_collector import RepoCollector
from github_credit.services.thread_collector import ThreadCollector
from github_credit.services.user_collector import UserCollector

__all__ = [
    "GitHubRestClient",
    "GitHubGraphQLClient",
    "ThreadCollector",
    "UserCollector",
    "RepoCollector",
]
