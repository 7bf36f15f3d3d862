"""Retry policy for single page fetches."""

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from github_credit.config import Config
from github_credit.exceptions import GitHubAPIError, GitHubNotFoundError

logger = logging.getLogger(__name__)

# Decode, GraphQL-level and 404 errors are never retried.
RETRYABLE_ERRORS = (httpx.TransportError, GitHubAPIError)


def page_retrying(config: Config) -> AsyncRetrying:
    """Build the fixed-delay retry loop used around one request.

    After ``config.retry_attempts`` failures the last error is re-raised.
    """
    return AsyncRetrying(
        retry=(
            retry_if_exception_type(RETRYABLE_ERRORS)
            & retry_if_not_exception_type(GitHubNotFoundError)
        ),
        stop=stop_after_attempt(config.retry_attempts),
        wait=wait_fixed(config.retry_delay),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
