"""Compiled contribution statistics."""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Iterable, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from github_credit.models.thread import Postings, Thread

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Thread)

RankedTable = Literal["commentors", "code_contributors", "contributor_commits"]


class ResponseTimes(BaseModel):
    """Median and mean of a set of response durations."""

    model_config = ConfigDict(frozen=True)

    median: timedelta
    mean: timedelta

    @field_serializer("median", "mean", when_used="json")
    def _as_seconds(self, value: timedelta) -> float:
        return value.total_seconds()

    def median_time(self) -> str:
        """A human-friendly report of the median response time."""
        return period(self.median)

    def average_time(self) -> str:
        """A human-friendly report of the average response time."""
        return period(self.mean)


def period(duration: timedelta) -> str:
    """Render a duration in the coarsest sensible unit."""
    seconds = int(duration.total_seconds())
    hours = seconds // 3600
    if hours > 48:
        return f"{hours // 24} days"
    elif hours > 1:
        return f"{hours} hours"
    elif hours == 1:
        return "1 hour"
    return f"{seconds // 60} minutes"


def response_times(
    threads: Iterable[T],
    event: Callable[[T], datetime | None],
) -> ResponseTimes | None:
    """Gather the median/mean time from posting to ``event`` over ``threads``.

    Threads where the event never happened are skipped. The median is the
    element at ``len // 2`` of the sorted durations, so for an even count
    it is the upper of the two middle values.

    Returns:
        None when no thread had the event
    """
    durations = sorted(
        moment - thread.posted
        for thread in threads
        if (moment := event(thread)) is not None
    )

    if not durations:
        return None

    if durations[0] < timedelta(0):
        # Clock skew. Kept in the arithmetic.
        negatives = sum(1 for d in durations if d < timedelta(0))
        logger.warning("Found %d negative response time(s)", negatives)

    median = durations[len(durations) // 2]
    total_seconds = sum(int(d.total_seconds()) for d in durations)
    mean = timedelta(seconds=total_seconds // len(durations))

    return ResponseTimes(median=median, mean=mean)


class Statistics(BaseModel):
    """Various compiled statistics regarding contributions to GitHub repositories.

    For the relevant fields below, an "official" response is any made by a
    repository Owner, an organization Member, or an invited Collaborator.
    """

    model_config = ConfigDict(frozen=True)

    commentors: dict[str, int] = Field(default_factory=dict)  # all Issue/PR commentors
    code_contributors: dict[str, int] = Field(default_factory=dict)  # merged PRs per user
    contributor_commits: dict[str, int] = Field(default_factory=dict)  # commits in merged PRs
    all_issues: int = 0
    all_closed_issues: int = 0
    issues_with_responses: int = 0
    issues_with_official_responses: int = 0
    issue_first_resp_time: ResponseTimes | None = None
    issue_official_first_resp_time: ResponseTimes | None = None
    all_prs: int = 0
    prs_with_responses: int = 0
    prs_with_official_responses: int = 0
    pr_first_resp_time: ResponseTimes | None = None
    pr_official_first_resp_time: ResponseTimes | None = None
    prs_merged: int = 0
    prs_closed_without_merging: int = 0
    pr_merge_time: ResponseTimes | None = None

    @classmethod
    def from_postings(cls, postings: Postings) -> "Statistics":
        """Compile statistics from every Issue and PR in ``postings``."""
        issues = postings.issues
        prs = postings.prs
        merged = [p for p in prs if p.is_merged]

        contributor_commits: Counter[str] = Counter()
        for pr in merged:
            contributor_commits[pr.author] += pr.commits

        issue_commentors: Counter[str] = Counter()
        for issue in issues:
            issue_commentors.update(issue.comments)

        pr_commentors: Counter[str] = Counter()
        for pr in prs:
            pr_commentors.update(pr.comments)

        return cls(
            commentors=dict(issue_commentors + pr_commentors),
            code_contributors=dict(Counter(p.author for p in merged)),
            contributor_commits=dict(contributor_commits),
            all_issues=len(issues),
            all_closed_issues=sum(1 for i in issues if i.closed is not None),
            issues_with_responses=sum(1 for i in issues if i.first_response is not None),
            issues_with_official_responses=sum(
                1 for i in issues if i.first_official_response is not None
            ),
            issue_first_resp_time=response_times(issues, lambda i: i.first_response),
            issue_official_first_resp_time=response_times(
                issues, lambda i: i.first_official_response
            ),
            all_prs=len(prs),
            prs_with_responses=sum(1 for p in prs if p.first_response is not None),
            prs_with_official_responses=sum(
                1 for p in prs if p.first_official_response is not None
            ),
            pr_first_resp_time=response_times(prs, lambda p: p.first_response),
            pr_official_first_resp_time=response_times(
                prs, lambda p: p.first_official_response
            ),
            prs_merged=len(merged),
            prs_closed_without_merging=sum(1 for p in prs if p.is_closed_not_merged),
            pr_merge_time=response_times(prs, lambda p: p.merged),
        )

    def top(self, table: RankedTable, n: int = 10) -> list[tuple[str, int]]:
        """The ``n`` users with the highest counts in ``table``."""
        counts: dict[str, int] = getattr(self, table)
        return sorted(counts.items(), key=lambda x: x[1], reverse=True)[:n]
