"""Issue and Pull Request conversation threads."""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from github_credit.models.github import GHOST, RawThread

if TYPE_CHECKING:
    from github_credit.models.statistics import Statistics


class Thread(BaseModel):
    """A thread of conversation on GitHub.

    This could either be associated with an Issue or a PR. Only the first
    100 comments of a thread are ever fetched, so very busy threads are
    undercounted.
    """

    author: str
    posted: datetime
    closed: datetime | None = None
    first_responder: str | None = None
    first_response: datetime | None = None
    first_official_response: datetime | None = None
    comments: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: RawThread) -> "Thread":
        """Classify the comments of a fetched Issue or PR.

        - The first response is the first comment GitHub doesn't mark as
          written by the opener, since the opener often comments before
          anybody else does.
        - The first official response is searched for from the start again,
          independently of the first response. A maintainer who opened the
          thread and answers it themselves is marked OWNER or MEMBER rather
          than AUTHOR, so that comment counts as both.
        - Every comment is tallied under its author, deleted accounts
          under the ghost.
        """
        first = next((c for c in raw.comments if not c.association.is_author), None)
        official = next((c for c in raw.comments if c.association.is_official), None)

        counts: dict[str, int] = {}
        for comment in raw.comments:
            login = comment.author or GHOST
            counts[login] = counts.get(login, 0) + 1

        return cls(
            author=raw.author or GHOST,
            posted=raw.created_at,
            closed=raw.closed_at,
            first_responder=(first.author or GHOST) if first else None,
            first_response=first.created_at if first else None,
            first_official_response=official.created_at if official else None,
            comments=counts,
        )


class Issue(Thread):
    """A GitHub Issue."""


class PullRequest(Thread):
    """A GitHub Pull Request."""

    merged: datetime | None = None
    commits: int = 0

    @classmethod
    def from_raw(cls, raw: RawThread) -> "PullRequest":
        """Classify a fetched PR, keeping its merge time and commit count."""
        thread = Thread.from_raw(raw)
        return cls(
            **thread.model_dump(),
            merged=raw.merged_at,
            commits=raw.commits or 0,
        )

    @property
    def is_merged(self) -> bool:
        """Was this Pull Request merged?"""
        return self.merged is not None

    @property
    def is_closed_not_merged(self) -> bool:
        """Was this Pull Request closed without merging?"""
        return self.closed is not None and not self.is_merged


class Postings(BaseModel):
    """A collection of Issue and Pull Request threads."""

    issues: list[Issue] = Field(default_factory=list)
    prs: list[PullRequest] = Field(default_factory=list)

    def combine(self, other: "Postings") -> "Postings":
        """Combine the results of two repository lookups."""
        return Postings(issues=self.issues + other.issues, prs=self.prs + other.prs)

    def statistics(self) -> "Statistics":
        """Form all the statistics."""
        from github_credit.models.statistics import Statistics

        return Statistics.from_postings(self)
