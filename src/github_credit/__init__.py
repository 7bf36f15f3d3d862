"""GitHub Credit - Measure the community health of GitHub repositories.

Collects every Issue and Pull Request of a set of repositories and compiles:
- Response times to Issues and PRs, by anyone and by the maintainers
- Merge rates and time-to-merge of PRs
- The most active commentors and code contributors

Example usage:
    ```python
    from github_credit import CreditClient

    async with CreditClient(token="ghp_xxx") as client:
        analysis = await client.analyze(["rust-lang/cargo"])
        print(f"Merged PRs: {analysis.statistics.prs_merged}")
    ```
"""

from importlib.metadata import PackageNotFoundError, version

from github_credit.config import Config
from github_credit.exceptions import (
    AuthenticationError,
    CreditError,
    DecodeError,
    GitHubAPIError,
    GitHubGraphQLError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    NoResultsError,
    RepositoryFailure,
)
from github_credit.models import (
    Issue,
    Postings,
    PullRequest,
    RateLimit,
    Repository,
    ResponseTimes,
    Statistics,
    Thread,
    UserRanking,
)
from github_credit.sdk import Analysis, CreditClient

try:
    __version__ = version("github-credit")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

__all__ = [
    # Main SDK class
    "CreditClient",
    "Analysis",
    # Configuration
    "Config",
    # Exceptions
    "CreditError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "GitHubGraphQLError",
    "DecodeError",
    "AuthenticationError",
    "NoResultsError",
    "RepositoryFailure",
    # Models - Threads
    "Thread",
    "Issue",
    "PullRequest",
    "Postings",
    # Models - Statistics
    "ResponseTimes",
    "Statistics",
    # Models - Other
    "RateLimit",
    "Repository",
    "UserRanking",
]
