"""Markdown project reports."""

from github_credit.models.statistics import RankedTable, ResponseTimes, Statistics

NONE = "None"


def percent(part: int, whole: int) -> float:
    """``part`` as a percentage of ``whole`` (0 when ``whole`` is 0)."""
    if whole == 0:
        return 0.0
    return 100.0 * part / whole


def _times(times: ResponseTimes | None) -> tuple[str, str]:
    if times is None:
        return NONE, NONE
    return times.median_time(), times.average_time()


def _ranking(stats: Statistics, table: RankedTable, n: int = 10) -> str:
    return "\n".join(
        f"{i:2}. {login}: {count}"
        for i, (login, count) in enumerate(stats.top(table, n), start=1)
    )


def issues_section(stats: Statistics) -> str:
    """The Issues part of a report."""
    if stats.all_issues == 0:
        return "No issues found."

    any_median, any_mean = _times(stats.issue_first_resp_time)
    official_median, official_mean = _times(stats.issue_official_first_resp_time)

    return f"""
{stats.all_issues} issues found, {stats.all_closed_issues} of which are now closed ({percent(stats.all_closed_issues, stats.all_issues):.1f}%).

- {stats.issues_with_responses} ({percent(stats.issues_with_responses, stats.all_issues):.1f}%) of these received a response.
- {stats.issues_with_official_responses} ({percent(stats.issues_with_official_responses, stats.all_issues):.1f}%) have an official response from a repo Owner or organization Member.

Response Times (any):
- Median: {any_median}
- Average: {any_mean}

Response Times (official):
- Median: {official_median}
- Average: {official_mean}"""


def prs_section(stats: Statistics) -> str:
    """The Pull Requests part of a report."""
    if stats.all_prs == 0:
        return "No Pull Requests found."

    any_median, any_mean = _times(stats.pr_first_resp_time)
    official_median, official_mean = _times(stats.pr_official_first_resp_time)
    merge_median, merge_mean = _times(stats.pr_merge_time)

    return f"""
{stats.all_prs} Pull Requests found, {stats.prs_merged} of which are now merged ({percent(stats.prs_merged, stats.all_prs):.1f}%).
{stats.prs_closed_without_merging} have been closed without merging ({percent(stats.prs_closed_without_merging, stats.all_prs):.1f}%).

- {stats.prs_with_responses} ({percent(stats.prs_with_responses, stats.all_prs):.1f}%) of these received a response.
- {stats.prs_with_official_responses} ({percent(stats.prs_with_official_responses, stats.all_prs):.1f}%) have an official response from a repo Owner or organization Member.

Response Times (any):
- Median: {any_median}
- Average: {any_mean}

Response Times (official):
- Median: {official_median}
- Average: {official_mean}

Time-to-Merge:
- Median: {merge_median}
- Average: {merge_mean}"""


def render_report(stats: Statistics, repo: str, commits: bool = False) -> str:
    """Render statistics as a markdown report.

    Args:
        stats: Compiled statistics
        repo: Display name, e.g. a comma-separated list of repositories
        commits: Whether to add the commits-in-merged-PRs ranking

    Returns:
        The report text
    """
    contributors = f"""
Top 10 Commentors (Issues and PRs):
{_ranking(stats, "commentors")}

Top 10 Code Contributors (by merged PRs):
{_ranking(stats, "code_contributors")}
"""

    contributor_commits = ""
    if commits:
        contributor_commits = f"""
Top 10 Code Contributors (by commits-in-merged-PRs):
{_ranking(stats, "contributor_commits")}
"""

    return f"""# Project Report for {repo}

## Issues
{issues_section(stats)}

## Pull Requests
{prs_section(stats)}

## Contributors
{contributors}{contributor_commits}"""
