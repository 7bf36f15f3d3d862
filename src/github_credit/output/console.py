"""Rich console output for progress, errors, rankings and quota."""

import time

from rich.console import Console as RichConsole
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from github_credit.exceptions import RepositoryFailure
from github_credit.models.github import RateLimit
from github_credit.models.users import UserRanking
from github_credit.utils.rate_limit import format_reset_time, format_time_remaining


class Console:
    """Wrapper for rich console output.

    Everything but results goes to stderr so reports and JSON can be piped.
    """

    def __init__(self, quiet: bool = False):
        self.console = RichConsole()
        self.err = RichConsole(stderr=True)
        self.quiet = quiet

    def print_error(self, message: str):
        """Print error message."""
        self.err.print(f"[red]Error:[/red] {message}", highlight=False)

    def print_warning(self, message: str):
        """Print warning message."""
        self.err.print(f"[yellow]Warning:[/yellow] {message}", highlight=False)

    def print_failures(self, failures: list[RepositoryFailure]):
        """Report repositories that couldn't be fetched."""
        if not failures:
            return
        self.err.print("[yellow]There were some errors:[/yellow]")
        for failure in failures:
            self.err.print(f"  {failure}", markup=False, highlight=False)

    def create_progress(self) -> Progress:
        """Create a progress bar context, disabled when quiet."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.err,
            transient=True,
            disable=self.quiet,
        )

    def print_ranking(self, ranking: UserRanking, location: str):
        """Print the top users of a location."""
        table = Table(
            title=f"Top Users in {location} ({ranking.total_users} users total)",
            expand=False,
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Login")
        table.add_column("Name")
        table.add_column("Contributions", justify="right")

        for i, user in enumerate(ranking.contributions, start=1):
            table.add_row(str(i), user.login, user.name or "-", str(user.public_contributions))

        self.console.print(table)

    def print_rate_limit(self, rate_limit: RateLimit):
        """Print remaining API quota."""
        reset = rate_limit.reset_at.timestamp()

        table = Table(title="GraphQL API Quota", show_header=False, expand=False)
        table.add_column("Field", style="dim")
        table.add_column("Value")

        table.add_row("Limit", str(rate_limit.limit))
        table.add_row("Remaining", str(rate_limit.remaining))
        table.add_row(
            "Resets",
            f"{format_reset_time(reset)} (in {format_time_remaining(reset - time.time())})",
        )

        self.console.print(table)