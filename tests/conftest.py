"""Pytest configuration and fixtures."""

import pytest

from github_credit.config import Config, set_config


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global state after each test."""
    yield
    set_config(None)


@pytest.fixture
def test_config():
    """Create a test configuration that doesn't wait between retries."""
    config = Config(
        github_token="test_token",
        github_api_url="https://api.github.com",
        github_graphql_url="https://api.github.com/graphql",
        retry_attempts=3,
        retry_delay=0,
    )
    set_config(config)
    return config

