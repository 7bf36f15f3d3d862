"""Exceptions for GitHub Credit.

Exception Hierarchy:
    CreditError (base)
    ├── GitHubAPIError (HTTP API errors with status codes)
    │   ├── GitHubRateLimitError (403/429 rate limit from API response)
    │   └── GitHubNotFoundError (404 not found)
    ├── GitHubGraphQLError (GraphQL "errors" in an otherwise successful response)
    ├── DecodeError (response body doesn't have the expected shape)
    ├── AuthenticationError (token required but missing)
    └── NoResultsError (every requested repository failed)

Retry policy:
    - GitHubAPIError and transport failures are retried with a fixed delay.
    - DecodeError and GitHubGraphQLError are not; a malformed payload stays
      malformed no matter how often it is requested.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "CreditError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "GitHubGraphQLError",
    "DecodeError",
    "AuthenticationError",
    "NoResultsError",
    "RepositoryFailure",
]


class CreditError(Exception):
    """Base exception for all GitHub Credit errors."""

    pass


class GitHubAPIError(CreditError):
    """Base exception for GitHub API errors (HTTP responses with error status codes)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub API returns a rate limit error (HTTP 403 or 429)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        response_body: dict | None = None,
        reset_time: float | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.reset_time = reset_time


class GitHubNotFoundError(GitHubAPIError):
    """Raised when a GitHub resource is not found (HTTP 404)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 404,
        response_body: dict | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)


class GitHubGraphQLError(CreditError):
    """Exception for GraphQL API errors."""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class DecodeError(CreditError):
    """Raised when a response body can't be decoded into the expected shape.

    The offending body is kept on the exception and included in the message.
    """

    def __init__(self, message: str, body: str = ""):
        super().__init__(f"{message}\n{body}" if body else message)
        self.body = body


class AuthenticationError(CreditError):
    """Raised when authentication fails or a token is required but missing."""

    pass


@dataclass
class RepositoryFailure:
    """A repository whose fetch failed, and why."""

    repository: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.repository}: {self.error}"


class NoResultsError(CreditError):
    """Raised when no requested repository could be fetched."""

    def __init__(self, failures: list[RepositoryFailure] | None = None):
        self.failures = failures or []
        if self.failures:
            details = "; ".join(str(f) for f in self.failures)
            message = f"No results to show! {details}"
        else:
            message = "No results to show!"
        super().__init__(message)
