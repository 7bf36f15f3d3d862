"""Utility modules for GitHub Credit."""

from github_credit.utils.pagination import (
    Page,
    get_next_page_url,
    paginate,
    parse_link_header,
)
from github_credit.utils.retry import page_retrying

__all__ = [
    "Page",
    "paginate",
    "page_retrying",
    "parse_link_header",
    "get_next_page_url",
]
