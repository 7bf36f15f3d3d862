"""Output handlers for GitHub Credit."""

from github_credit.output.console import Console
from github_credit.output.json_writer import dump_json, load_statistics
from github_credit.output.report import render_report

__all__ = [
    "Console",
    "dump_json",
    "load_statistics",
    "render_report",
]
