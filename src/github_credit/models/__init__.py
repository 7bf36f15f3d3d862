"""Data models for GitHub Credit."""

from github_credit.models.github import (
    GHOST,
    Association,
    Comment,
    RateLimit,
    RawThread,
    Repository,
    ThreadConnection,
    ThreadKind,
    UserContributions,
)
from github_credit.models.statistics import ResponseTimes, Statistics, response_times
from github_credit.models.thread import Issue, Postings, PullRequest, Thread
from github_credit.models.users import RankedUser, UserRanking

__all__ = [
    "GHOST",
    "Association",
    "Comment",
    "RawThread",
    "ThreadKind",
    "ThreadConnection",
    "UserContributions",
    "RateLimit",
    "Repository",
    "Thread",
    "Issue",
    "PullRequest",
    "Postings",
    "ResponseTimes",
    "Statistics",
    "response_times",
    "RankedUser",
    "UserRanking",
]
