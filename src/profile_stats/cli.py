"""Command-line entry point for profile-stats."""

from __future__ import annotations

import asyncio
import logging

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .batch import DEFAULT_BATCH_SIZE
from .exceptions import ProfileStatsError
from .github.fetchers import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from .languages import DEFAULT_TOP_TOPICS, NOT_LANGUAGES
from .orchestrator import DEFAULT_OUTPUT_FILE, run

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbosity, logging.DEBUG),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbosity > 1 else logging.WARNING)


@click.command()
@click.option("--token", envvar="GITHUB_TOKEN", default=None, help="GitHub token (or set GITHUB_TOKEN).")
@click.option("--user", "username", default=None, help="Collect stats for this login instead of the token's owner.")
@click.option(
    "--output", "-o", "output_file", default=DEFAULT_OUTPUT_FILE, show_default=True,
    type=click.Path(dir_okay=False), help="Where to write the JSON snapshot.",
)
@click.option("--batch-size", default=DEFAULT_BATCH_SIZE, show_default=True, type=click.IntRange(min=1),
              help="Per-repository requests in flight at once.")
@click.option("--max-attempts", default=DEFAULT_MAX_ATTEMPTS, show_default=True, type=click.IntRange(min=1),
              help="Attempts per repository while GitHub computes contributor stats.")
@click.option("--retry-delay", default=DEFAULT_RETRY_DELAY, show_default=True, type=click.FloatRange(min=0),
              help="Seconds between contributor stats attempts.")
@click.option("--top-topics", default=DEFAULT_TOP_TOPICS, show_default=True, type=click.IntRange(min=0),
              help="Number of topics kept in the frequency table.")
@click.option("--exclude-language", "excluded_languages", multiple=True,
              help="Language to leave out of the breakdown (repeatable). Replaces the default list.")
@click.option("--summary/--no-summary", "show_summary", default=True, help="Print a summary table.")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv).")
@click.version_option(version=__version__)
def main(
    token: str | None,
    username: str | None,
    output_file: str,
    batch_size: int,
    max_attempts: int,
    retry_delay: float,
    top_topics: int,
    excluded_languages: tuple[str, ...],
    show_summary: bool,
    verbose: int,
) -> None:
    """Collect GitHub profile statistics into a JSON snapshot."""
    _configure_logging(verbose)

    try:
        asyncio.run(
            run(
                token=token,
                output_file=output_file,
                show_summary=show_summary,
                username=username,
                batch_size=batch_size,
                max_attempts=max_attempts,
                retry_delay=retry_delay,
                top_topics=top_topics,
                excluded_languages=excluded_languages or NOT_LANGUAGES,
            )
        )
    except ProfileStatsError as e:
        raise click.ClickException(str(e)) from e


def cli() -> None:
    load_dotenv()
    main()


if __name__ == "__main__":
    cli()
