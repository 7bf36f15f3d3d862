"""GitHub API payloads in reduced forms."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from github_credit.exceptions import DecodeError
from github_credit.utils.pagination import Page

logger = logging.getLogger(__name__)

GHOST = "@ghost"


class Association(str, Enum):
    """A commenter's relationship to the repository."""

    OWNER = "OWNER"
    MEMBER = "MEMBER"
    COLLABORATOR = "COLLABORATOR"
    CONTRIBUTOR = "CONTRIBUTOR"
    AUTHOR = "AUTHOR"
    NONE = "NONE"

    @classmethod
    def _missing_(cls, value: object) -> "Association":
        # FIRST_TIMER, FIRST_TIME_CONTRIBUTOR, MANNEQUIN, ...
        logger.debug("Treating author association %r as NONE", value)
        return cls.NONE

    @property
    def is_official(self) -> bool:
        """Owners, organization Members and invited Collaborators."""
        return self in (Association.OWNER, Association.MEMBER, Association.COLLABORATOR)

    @property
    def is_author(self) -> bool:
        """The commenter opened the thread."""
        return self is Association.AUTHOR


class Comment(BaseModel):
    """A comment on an Issue or Pull Request."""

    author: str | None = None  # None for deleted accounts
    association: Association = Association.NONE
    created_at: datetime

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "Comment":
        """Create from a GraphQL ``IssueComment`` node."""
        author = data.get("author")
        return cls(
            author=author.get("login") if author else None,
            association=Association(data.get("authorAssociation") or "NONE"),
            created_at=_require_datetime(data, "createdAt"),
        )


class RawThread(BaseModel):
    """Either an ``issues`` node or a ``pullRequests`` node, as fetched."""

    author: str | None = None
    created_at: datetime
    closed_at: datetime | None = None
    merged_at: datetime | None = None
    comments: list[Comment] = Field(default_factory=list)
    commits: int | None = None

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "RawThread":
        """Create from a GraphQL Issue or PullRequest node."""
        author = data.get("author")
        commits = data.get("commits")
        return cls(
            author=author.get("login") if author else None,
            created_at=_require_datetime(data, "createdAt"),
            closed_at=_parse_datetime(data.get("closedAt")),
            merged_at=_parse_datetime(data.get("mergedAt")),
            comments=[
                Comment.from_graphql(edge["node"])
                for edge in data.get("comments", {}).get("edges", [])
            ],
            commits=commits.get("totalCount") if commits else None,
        )


class ThreadKind(str, Enum):
    """Which connection a repository query answered with."""

    ISSUES = "issues"
    PULL_REQUESTS = "pullRequests"


@dataclass
class ThreadConnection:
    """One page of Issues or Pull Requests, tagged with which it is."""

    kind: ThreadKind
    page: Page[RawThread]

    @classmethod
    def from_repository(cls, repository: dict[str, Any]) -> "ThreadConnection":
        """Decode the ``repository`` object of an issues/PRs query.

        Exactly one of ``issues`` and ``pullRequests`` must be present.
        """
        present = [kind for kind in ThreadKind if kind.value in repository]
        if len(present) != 1:
            raise DecodeError(
                "Expected exactly one of 'issues' or 'pullRequests' in repository, "
                f"found {[kind.value for kind in present]}"
            )

        kind = present[0]
        page = Page.from_connection(repository[kind.value], RawThread.from_graphql)
        return cls(kind=kind, page=page)


class UserContributions(BaseModel):
    """A user found through search, with their yearly contribution counts."""

    login: str
    name: str | None = None
    followers: int = 0
    total_contributions: int = 0
    restricted_contributions: int = 0  # Private contributions (count only)

    @property
    def contributions(self) -> int:
        """Public contributions only."""
        return self.total_contributions - self.restricted_contributions

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "UserContributions":
        """Create from a GraphQL ``User`` search node."""
        collection = data["contributionsCollection"]
        return cls(
            login=data["login"],
            name=data.get("name"),
            followers=data["followers"]["totalCount"],
            total_contributions=collection["contributionCalendar"]["totalContributions"],
            restricted_contributions=collection["restrictedContributionsCount"],
        )


class RateLimit(BaseModel):
    """Remaining GraphQL quota for a token."""

    limit: int
    remaining: int
    reset_at: datetime

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "RateLimit":
        """Create from the GraphQL ``rateLimit`` object."""
        return cls(
            limit=data["limit"],
            remaining=data["remaining"],
            reset_at=_require_datetime(data, "resetAt"),
        )


class Repository(BaseModel):
    """GitHub repository data, as listed by the REST API."""

    name: str
    full_name: str
    is_fork: bool = False
    is_archived: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        """Create from GitHub REST API response."""
        return cls(
            name=data["name"],
            full_name=data["full_name"],
            is_fork=data.get("fork", False),
            is_archived=data.get("archived", False),
        )


def _parse_datetime(value: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _require_datetime(data: dict[str, Any], key: str) -> datetime:
    parsed = _parse_datetime(data.get(key))
    if parsed is None:
        raise ValueError(f"Missing required timestamp '{key}'")
    return parsed
