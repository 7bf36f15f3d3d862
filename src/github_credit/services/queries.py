"""GraphQL request bodies.

Every builder here is pure: it returns a ``{"query": ..., "variables": ...}``
payload that the GraphQL client posts unmodified.
"""

from enum import Enum
from typing import Any, Optional

# The maximum number of Issues/PRs per page (the API's own maximum).
ISSUE_PAGE_SIZE = 100

# The maximum number of users per page when searching by location.
USER_PAGE_SIZE = 10

# Comments per thread. Later comments are never fetched.
COMMENT_PAGE_SIZE = 100


class Mode(str, Enum):
    """Which collection of a repository to query."""

    ISSUES = "issues"
    PULL_REQUESTS = "pull_requests"
    PULL_REQUESTS_WITH_COMMITS = "pull_requests_with_commits"

    @property
    def connection(self) -> str:
        """The GraphQL field of ``Repository`` to page through."""
        return "issues" if self is Mode.ISSUES else "pullRequests"

    @property
    def merged_field(self) -> str:
        return "" if self is Mode.ISSUES else "mergedAt"

    @property
    def commits_field(self) -> str:
        return "commits { totalCount }" if self is Mode.PULL_REQUESTS_WITH_COMMITS else ""


def issues_query(
    mode: Mode,
    owner: str,
    repo: str,
    cursor: Optional[str] = None,
    page_size: int = ISSUE_PAGE_SIZE,
) -> dict[str, Any]:
    """Build the query for one page of a repository's Issues or PRs."""
    query = f"""
query($owner: String!, $name: String!, $first: Int!, $after: String) {{
  repository(owner: $owner, name: $name) {{
    {mode.connection}(first: $first, after: $after) {{
      pageInfo {{
        hasNextPage
        endCursor
      }}
      edges {{
        node {{
          author {{
            login
          }}
          createdAt
          closedAt
          {mode.merged_field}
          {mode.commits_field}
          comments(first: {COMMENT_PAGE_SIZE}) {{
            edges {{
              node {{
                author {{
                  login
                }}
                authorAssociation
                createdAt
              }}
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""
    return {
        "query": query,
        "variables": {"owner": owner, "name": repo, "first": page_size, "after": cursor},
    }


USERS_QUERY = """
query($query: String!, $first: Int!, $after: String) {
  search(type: USER, query: $query, first: $first, after: $after) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      node {
        ... on User {
          login
          name
          followers {
            totalCount
          }
          contributionsCollection {
            contributionCalendar {
              totalContributions
            }
            restrictedContributionsCount
          }
        }
      }
    }
  }
}
"""

USER_COUNT_QUERY = """
query($query: String!) {
  search(type: USER, query: $query, first: 1) {
    userCount
  }
}
"""

RATE_LIMIT_QUERY = """
query {
  rateLimit {
    limit
    remaining
    resetAt
  }
}
"""


def user_search(location: str) -> str:
    """The search string for users in ``location``, most followed first."""
    return f"type:user location:{location} sort:followers-desc"


def users_query(
    location: str,
    cursor: Optional[str] = None,
    page_size: int = USER_PAGE_SIZE,
) -> dict[str, Any]:
    """Build the query for one page of users in a location."""
    return {
        "query": USERS_QUERY,
        "variables": {"query": user_search(location), "first": page_size, "after": cursor},
    }


def user_count_query(location: str) -> dict[str, Any]:
    """Build the query for the number of users in a location."""
    return {"query": USER_COUNT_QUERY, "variables": {"query": user_search(location)}}


def rate_limit_query() -> dict[str, Any]:
    """Build the query for the token's remaining quota."""
    return {"query": RATE_LIMIT_QUERY}
