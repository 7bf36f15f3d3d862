"""Helpers for reporting GitHub API quota."""

import time
from datetime import datetime

from rich.console import Console

from github_credit.models.github import RateLimit

console = Console(stderr=True)

# Warn when fewer requests than this remain.
LOW_REMAINING_THRESHOLD = 10


def format_time_remaining(seconds: float) -> str:
    """Format seconds into a human-friendly string."""
    if seconds <= 0:
        return "now"

    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        if secs > 0:
            return f"{minutes} min {secs} sec"
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        if minutes > 0:
            return f"{hours} hr {minutes} min"
        return f"{hours} hour{'s' if hours != 1 else ''}"


def format_reset_time(reset_timestamp: float) -> str:
    """Format reset timestamp to a human-readable local time."""
    reset_dt = datetime.fromtimestamp(reset_timestamp)
    return reset_dt.strftime("%H:%M:%S")


def check_and_report_rate_limit(rate_limit: RateLimit) -> bool:
    """Report the quota state to the user.

    Args:
        rate_limit: Quota as returned by the GraphQL ``rateLimit`` query

    Returns:
        True if OK to proceed, False if the quota is exhausted
    """
    reset_time = rate_limit.reset_at.timestamp()

    if rate_limit.remaining == 0:
        human_time = format_time_remaining(reset_time - time.time())
        reset_at = format_reset_time(reset_time)

        console.print(
            f"\n[red]Rate limit exhausted[/red] (0/{rate_limit.limit} points remaining)"
        )
        console.print(f"[yellow]  Resets in: {human_time} (at {reset_at})[/yellow]")
        console.print()
        return False

    if rate_limit.remaining < LOW_REMAINING_THRESHOLD:
        console.print(
            f"[yellow]Warning: Only {rate_limit.remaining}/{rate_limit.limit} "
            "API points remaining[/yellow]"
        )

    return True
