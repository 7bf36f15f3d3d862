"""GitHub REST API client."""

import logging
from typing import Any, Callable, Optional

import httpx

from github_credit.config import Config, get_config
from github_credit.exceptions import (
    DecodeError,
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from github_credit.utils.pagination import Page, get_next_page_url, paginate
from github_credit.utils.retry import page_retrying

logger = logging.getLogger(__name__)


class GitHubRestClient:
    """Async client for GitHub REST API."""

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
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "github-credit",
        }
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.github_api_url,
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubRestClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Make an API request, retrying transport failures."""
        async for attempt in page_retrying(self.config):
            with attempt:
                return await self._request_once(method, endpoint, **kwargs)
        raise AssertionError("unreachable")

    async def _request_once(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        client = await self._get_client()
        response = await client.request(method, endpoint, **kwargs)

        if response.status_code < 400:
            return response

        body = _json_or_empty(response)
        message = body.get("message", "Unknown error")

        if response.status_code == 404:
            raise GitHubNotFoundError(
                f"Resource not found: {endpoint}",
                response_body=body,
            )
        elif response.status_code in (403, 429) and "rate limit" in message.lower():
            reset = response.headers.get("x-ratelimit-reset")
            raise GitHubRateLimitError(
                "Rate limit exceeded",
                status_code=response.status_code,
                response_body=body,
                reset_time=float(reset) if reset else None,
            )
        elif response.status_code >= 500:
            raise GitHubAPIError(
                f"Server error: {response.status_code}",
                status_code=response.status_code,
            )
        raise GitHubAPIError(
            f"API error: {message}",
            status_code=response.status_code,
            response_body=body,
        )

    async def get_paginated(
        self,
        endpoint: str,
        max_pages: Optional[int] = None,
        per_page: int = 100,
        on_page: Optional[Callable[[], None]] = None,
    ) -> list[dict[str, Any]]:
        """Fetch all pages of a paginated endpoint by following Link headers.

        Args:
            endpoint: API endpoint (will append pagination params)
            max_pages: Maximum number of pages to fetch (None for all)
            per_page: Items per page (max 100)
            on_page: Called once per fetched page

        Returns:
            List of all items across all pages
        """
        separator = "&" if "?" in endpoint else "?"
        first_url = f"{endpoint}{separator}per_page={per_page}"

        async def fetch(next_url: Optional[str]) -> Page[dict[str, Any]]:
            url = next_url or first_url
            response = await self._request("GET", url)
            try:
                items = response.json()
            except ValueError as e:
                raise DecodeError(f"{url} didn't return JSON:", response.text) from e
            if not isinstance(items, list):
                raise DecodeError(f"{url} didn't return a list:", response.text)

            next_page = get_next_page_url(response.headers.get("Link"))
            return Page(items=items, next_cursor=next_page, has_more=next_page is not None)

        return await paginate(fetch, max_pages=max_pages, on_page=on_page)

    async def get_owner_repos(self, owner: str) -> list[dict[str, Any]]:
        """Get the public repositories of a user or organization."""
        return await self.get_paginated(f"/users/{owner}/repos?type=owner&sort=full_name")


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
