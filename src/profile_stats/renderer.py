"""Rich-based terminal summary renderer with JSON and step-summary output."""

from __future__ import annotations

import json
import re
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ProfileReport

# Internal bookkeeping that is not part of the snapshot document
_JSON_EXCLUDED = ("failedRepos",)

_CAMEL_RE = re.compile(r"_([a-z0-9])")


def _camel(key: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), key)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def _format_number(n: int) -> str:
    return f"{n:,}"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def format_bytes(size: float) -> str:
    """Human readable byte size: ``512 B``, ``1.5 KB``, ``2.0 GB``."""
    if size < 1024:
        return f"{int(size)} B"
    for unit in ("KB", "MB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} GB"


def format_number(n: int) -> str:
    """Compact count: ``999``, ``1.5K``, ``10.0M``."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1000:
        return f"{n / 1000:.1f}K"
    return str(n)


def report_to_dict(report: ProfileReport) -> dict[str, Any]:
    """The snapshot document: the report with camelCase keys."""
    data = _camelize(asdict(report))
    for key in _JSON_EXCLUDED:
        data.pop(key, None)
    return data


def render_json(report: ProfileReport, output_file: str) -> None:
    content = json.dumps(report_to_dict(report), indent=4, ensure_ascii=False)
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
        f.write("\n")


def build_summary_rows(report: ProfileReport) -> list[tuple[str, str]]:
    """Metric/value pairs shared by the console table and the CI step summary."""
    stats = report.contribution_stats
    computed = report.computed_stats
    growth = computed.growth.year_over_year_growth
    best_month = computed.growth.most_productive_month
    fetched = datetime.fromtimestamp(report.fetched_at / 1000, tz=timezone.utc)
    return [
        ("Name", report.name),
        ("Username", report.username),
        ("Repository Views", _format_number(report.repo_views)),
        ("Lines of Code Changed", _format_number(report.lines_of_code_changed)),
        ("Lines Added", _format_number(report.lines_added)),
        ("Lines Deleted", _format_number(report.lines_deleted)),
        ("Lines Changed", _format_number(report.lines_changed)),
        ("Commit Count", _format_number(report.commit_count)),
        ("Total Commits", _format_number(report.total_commits)),
        ("Total Pull Requests", _format_number(report.total_pull_requests)),
        ("Total Pull Request Reviews", _format_number(report.total_pull_request_reviews)),
        ("Code Byte Total", format_bytes(report.code_byte_total)),
        ("Top Languages", ", ".join(lang.language_name for lang in report.top_languages[:5]) or "-"),
        ("Fork Count", _format_number(report.fork_count)),
        ("Star Count", _format_number(report.star_count)),
        ("Stars Given", _format_number(report.stars_given)),
        ("Followers", _format_number(report.followers)),
        ("Total Contributions", _format_number(report.total_contributions)),
        ("Longest Streak", f"{stats.longest_streak} days"),
        ("Current Streak", f"{stats.current_streak} days"),
        ("Most Active Day", stats.most_active_day),
        ("Average Per Day", f"{stats.average_per_day}"),
        ("Repositories", _format_number(computed.repos.total_repos)),
        ("Primary Language", computed.languages.primary_language or "-"),
        ("Year-over-Year Growth", "N/A" if growth is None else f"{growth}%"),
        ("Most Productive Month", f"{best_month.month} ({best_month.contributions})" if best_month else "-"),
        ("Closed Issues", _format_number(report.closed_issues)),
        ("Open Issues", _format_number(report.open_issues)),
        ("Fetched At", fetched.strftime("%Y-%m-%d %H:%M:%S UTC")),
    ]


def render_summary(report: ProfileReport, console: Console | None = None) -> None:
    """Render a ProfileReport summary to the terminal using rich."""
    console = console or Console()

    console.print(Panel(
        Text(f"profile-stats: {report.username}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    if report.failed_repos:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to collect stats for "
            f"{len(report.failed_repos)} repo(s): {', '.join(report.failed_repos)}"
        )
        console.print()

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    for label, value in build_summary_rows(report):
        summary.add_row(label, value)
    console.print(summary)
    console.print()

    if report.top_languages:
        console.print("[bold]Language Distribution[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        lang_table.add_column("Bytes", justify="right")

        for lang in report.top_languages[:15]:
            lang_table.add_row(
                lang.language_name,
                _make_bar(lang.percentage),
                f"{lang.percentage}%",
                format_bytes(lang.total_bytes),
            )
        console.print(lang_table)
        console.print()

    if report.top_repos:
        console.print("[bold]Top Repositories[/bold]")
        repo_table = Table(show_header=True, header_style="bold")
        repo_table.add_column("Repo")
        repo_table.add_column("Stars", justify="right")
        repo_table.add_column("Forks", justify="right")
        repo_table.add_column("Language")
        for repo in report.top_repos:
            repo_table.add_row(
                repo.name,
                format_number(repo.stars),
                format_number(repo.forks),
                repo.primary_language or "-",
            )
        console.print(repo_table)
        console.print()


def render_step_summary(report: ProfileReport, path: str) -> None:
    """Append the summary rows as a Markdown table to a GitHub Actions step summary file."""
    lines = ["## Profile Stats", "", "| Name | Value |", "| --- | --- |"]
    for label, value in build_summary_rows(report):
        escaped = value.replace("|", r"\|")
        lines.append(f"| {label} | {escaped} |")
    with open(path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
