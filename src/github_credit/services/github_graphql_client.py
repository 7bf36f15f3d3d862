"""GitHub GraphQL API client."""

import logging
from typing import Any, Callable, Optional, TypeVar

import httpx

from github_credit.config import Config, get_config
from github_credit.exceptions import (
    AuthenticationError,
    DecodeError,
    GitHubAPIError,
    GitHubGraphQLError,
    GitHubRateLimitError,
)
from github_credit.models.github import RateLimit
from github_credit.services.queries import rate_limit_query
from github_credit.utils.retry import page_retrying

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GitHubGraphQLClient:
    """Async client for GitHub GraphQL API."""

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_config()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        if not self.config.github_token:
            raise AuthenticationError(
                "GitHub token is required for GraphQL API. "
                "Set GITHUB_TOKEN environment variable or pass --token."
            )

        return {
            "Authorization": f"Bearer {self.config.github_token}",
            "Content-Type": "application/json",
            "User-Agent": "github-credit",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubGraphQLClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Execute a GraphQL query, retrying transport failures.

        Args:
            payload: Request body from :mod:`github_credit.services.queries`

        Returns:
            The ``data`` object of the response

        Raises:
            GitHubAPIError: If the request still fails after all retries
            GitHubGraphQLError: If the response carries GraphQL errors
            DecodeError: If the body isn't JSON or has no ``data``
        """
        data, _ = await self._execute(payload)
        return data

    async def _execute(self, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        async for attempt in page_retrying(self.config):
            with attempt:
                return await self._post(payload)
        raise AssertionError("unreachable")

    async def _post(self, payload: dict[str, Any]) -> tuple[dict[str, Any], str]:
        """Post once, returning the ``data`` object and the raw body."""
        client = await self._get_client()
        response = await client.post(self.config.github_graphql_url, json=payload)

        if response.status_code == 401:
            raise AuthenticationError("GitHub rejected the token (HTTP 401)")
        elif response.status_code in (403, 429) and "rate limit" in response.text.lower():
            reset = response.headers.get("x-ratelimit-reset")
            raise GitHubRateLimitError(
                "Rate limit exceeded",
                status_code=response.status_code,
                reset_time=float(reset) if reset else None,
            )
        elif response.status_code >= 400:
            raise GitHubAPIError(
                f"GraphQL request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise DecodeError("The response couldn't be decoded into JSON:", response.text) from e

        if result.get("errors"):
            error_messages = [e.get("message", "Unknown error") for e in result["errors"]]
            raise GitHubGraphQLError(
                f"GraphQL errors: {'; '.join(error_messages)}",
                errors=result["errors"],
            )

        data = result.get("data")
        if not isinstance(data, dict):
            raise DecodeError("The response has no 'data' object:", response.text)

        return data, response.text

    async def query(
        self,
        payload: dict[str, Any],
        parse: Callable[[dict[str, Any]], T],
    ) -> T:
        """Execute a query and decode its ``data`` with ``parse``.

        Raises:
            DecodeError: If ``parse`` finds an unexpected shape; the raw
                response body is included in the message
        """
        data, body = await self._execute(payload)
        try:
            return parse(data)
        except DecodeError as e:
            if e.body:
                raise
            raise DecodeError(str(e), body) from e
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(
                f"The response didn't have the expected shape ({e!r}):", body
            ) from e

    async def get_rate_limit(self) -> RateLimit:
        """Discover the remaining API quota for the configured token."""
        return await self.query(
            rate_limit_query(),
            lambda data: RateLimit.from_graphql(data["rateLimit"]),
        )
