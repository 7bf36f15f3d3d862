"""CLI interface for GitHub Credit."""

import asyncio
import logging
import sys
from dataclasses import replace
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from github_credit import __version__
from github_credit.config import Config, get_config
from github_credit.exceptions import CreditError
from github_credit.output.console import Console as OutputConsole
from github_credit.output.json_writer import dump_json, load_statistics
from github_credit.output.report import render_report
from github_credit.sdk import CreditClient
from github_credit.utils.rate_limit import check_and_report_rate_limit

app = typer.Typer(
    name="credit",
    help="Measure community health and contributor activity of GitHub repositories",
    add_completion=False,
)

console = Console(stderr=True)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"github-credit version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
):
    """GitHub Credit - Measure the community health of GitHub repositories."""
    setup_logging(verbose)


def parse_date(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """Parse a ``YYYY-MM-DD`` option as a UTC moment.

    Raises:
        typer.BadParameter: If the value isn't a date
    """
    if value is None:
        return None
    try:
        day = date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format: {value}. Use YYYY-MM-DD")
    moment = time.max if end_of_day else time.min
    return datetime.combine(day, moment, tzinfo=timezone.utc)


def _config(token: Optional[str]) -> Config:
    config = get_config()
    if token:
        config = replace(config, github_token=token)
    return config


def _run(coro, output: OutputConsole) -> None:
    """Run a command's coroutine, turning failures into exit code 1."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        output.print_warning("Cancelled")
        raise typer.Exit(1)
    except (CreditError, httpx.HTTPError) as e:
        output.print_error(str(e))
        raise typer.Exit(1)


TOKEN_OPTION = typer.Option(
    None,
    "--token",
    "-t",
    help="GitHub personal access token (default: GITHUB_CREDIT_TOKEN or GITHUB_TOKEN)",
)

QUIET_OPTION = typer.Option(
    False,
    "--quiet",
    "-q",
    help="Minimal output: no progress display",
)


@app.command()
def repo(
    repositories: Optional[list[str]] = typer.Argument(
        None, help="Repositories to analyze, as owner/name"
    ),
    owner: Optional[str] = typer.Option(
        None,
        "--owner",
        help="Also analyze every active public repository of this user or organization",
    ),
    start: Optional[str] = typer.Option(
        None,
        "--start",
        help="Only count Issues and PRs opened on or after this date (YYYY-MM-DD)",
    ),
    end: Optional[str] = typer.Option(
        None,
        "--end",
        help="Only count Issues and PRs opened on or before this date (YYYY-MM-DD)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the statistics as JSON instead of a report",
    ),
    serial: bool = typer.Option(
        False,
        "--serial",
        help="Fetch one collection at a time",
    ),
    commits: bool = typer.Option(
        False,
        "--commits",
        help="Also rank contributors by commits in merged PRs (slower)",
    ),
    quiet: bool = QUIET_OPTION,
    token: Optional[str] = TOKEN_OPTION,
):
    """Analyze the Issues and Pull Requests of one or more repositories.

    Examples:
        credit repo rust-lang/cargo
        credit repo rust-lang/cargo rust-lang/rustup --start 2024-01-01
        credit repo --owner rust-lang --json > rust-lang.json
    """
    output = OutputConsole(quiet=quiet)
    names = list(repositories or [])

    if not names and not owner:
        output.print_error("Give at least one owner/name repository or --owner")
        raise typer.Exit(1)

    start_at = parse_date(start)
    end_at = parse_date(end, end_of_day=True)

    _run(
        _run_repo(
            config=_config(token),
            repositories=names,
            owner=owner,
            start=start_at,
            end=end_at,
            json_output=json_output,
            serial=serial,
            commits=commits,
            output=output,
        ),
        output,
    )


async def _run_repo(
    config: Config,
    repositories: list[str],
    owner: Optional[str],
    start: Optional[datetime],
    end: Optional[datetime],
    json_output: bool,
    serial: bool,
    commits: bool,
    output: OutputConsole,
):
    """Run the analysis asynchronously."""
    async with CreditClient(config=config) as client:
        if not check_and_report_rate_limit(await client.rate_limit()):
            raise typer.Exit(1)

        if owner:
            owned = await client.owner_repositories(owner)
            repositories = repositories + [
                r.full_name for r in owned if r.full_name not in repositories
            ]
            if not repositories:
                output.print_error(f"{owner} has no active public repositories")
                raise typer.Exit(1)

        with output.create_progress() as progress:
            analysis = await client.analyze(
                repositories,
                start=start,
                end=end,
                commits=commits,
                serial=serial,
                progress=progress,
            )

    output.print_failures(analysis.failures)

    if json_output:
        typer.echo(dump_json(analysis.statistics))
    else:
        typer.echo(
            render_report(analysis.statistics, ", ".join(analysis.repositories), commits)
        )


@app.command()
def limit(token: Optional[str] = TOKEN_OPTION):
    """Show the remaining GraphQL API quota of your token."""
    output = OutputConsole()

    async def run():
        async with CreditClient(config=_config(token)) as client:
            output.print_rate_limit(await client.rate_limit())

    _run(run(), output)


@app.command()
def users(
    location: str = typer.Argument(..., help="Location users list on their profile"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the ranking as JSON instead of a table",
    ),
    quiet: bool = QUIET_OPTION,
    token: Optional[str] = TOKEN_OPTION,
):
    """Rank the users of a location by their public contributions this year.

    Examples:
        credit users Iceland
        credit users "New Zealand" --json
    """
    output = OutputConsole(quiet=quiet)

    async def run():
        async with CreditClient(config=_config(token)) as client:
            with output.create_progress() as progress:
                ranking = await client.rank_users(location, progress)

        if json_output:
            typer.echo(dump_json(ranking))
        else:
            output.print_ranking(ranking, location)

    _run(run(), output)


@app.command()
def render(
    file: Optional[Path] = typer.Argument(
        None,
        exists=True,
        dir_okay=False,
        help="Statistics saved by 'credit repo --json' (default: stdin)",
    ),
    name: str = typer.Option(
        "Saved Statistics",
        "--name",
        "-n",
        help="Project name to put in the report title",
    ),
    commits: bool = typer.Option(
        False,
        "--commits",
        help="Include the commits-in-merged-PRs ranking",
    ),
):
    """Render saved JSON statistics as a report, without fetching anything.

    Examples:
        credit repo rust-lang/cargo --json > cargo.json
        credit render cargo.json --name rust-lang/cargo
    """
    output = OutputConsole()
    text = file.read_text(encoding="utf-8") if file else sys.stdin.read()

    try:
        stats = load_statistics(text)
    except CreditError as e:
        output.print_error(str(e))
        raise typer.Exit(1)

    typer.echo(render_report(stats, name, commits))


if __name__ == "__main__":
    app()
