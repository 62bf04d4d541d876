"""Cross-cutting metrics derived from repositories, languages and contributions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from .contributions import parse_timestamp
from .languages import DEFAULT_TOP_TOPICS, aggregate_languages, aggregate_topics
from .models import (
    ComputedStats,
    ContributionGrowth,
    ContributionStats,
    LanguageBreakdown,
    LanguageSummary,
    RepoCounts,
    RepoInfo,
)
from .utils import percentage, round_half_up


def _in_year(timestamp: str | None, year: int) -> bool:
    if not timestamp:
        return False
    return parse_timestamp(timestamp).year == year


def _repo_counts(repos: Sequence[RepoInfo], year: int) -> RepoCounts:
    total = len(repos)
    forked = sum(1 for r in repos if r.is_fork)
    private = sum(1 for r in repos if r.is_private)
    total_stars = sum(r.stars for r in repos)
    return RepoCounts(
        total_repos=total,
        public_repos=total - private,
        private_repos=private,
        archived_repos=sum(1 for r in repos if r.is_archived),
        forked_repos=forked,
        original_repos=total - forked,
        active_repos_this_year=sum(1 for r in repos if _in_year(r.updated_at, year)),
        repos_with_stars=sum(1 for r in repos if r.stars > 0),
        repos_created_this_year=sum(1 for r in repos if _in_year(r.created_at, year)),
        total_stars=total_stars,
        average_stars_per_repo=round_half_up(total_stars / total) if total else 0,
    )


def _growth(contribution_stats: ContributionStats, year: int) -> ContributionGrowth:
    this_prefix, last_prefix = f"{year}-", f"{year - 1}-"
    this_year = last_year = 0
    for entry in contribution_stats.monthly_breakdown:
        if entry.month.startswith(this_prefix):
            this_year += entry.contributions
        elif entry.month.startswith(last_prefix):
            last_year += entry.contributions

    growth = percentage(this_year - last_year, last_year) if last_year > 0 else None

    best = None
    for entry in contribution_stats.monthly_breakdown:
        if best is None or entry.contributions > best.contributions:
            best = entry

    return ContributionGrowth(
        contributions_this_year=this_year,
        contributions_last_year=last_year,
        year_over_year_growth=growth,
        most_productive_month=best,
    )


def calculate_computed_stats(
    repos: Sequence[RepoInfo],
    languages: LanguageBreakdown,
    contribution_stats: ContributionStats,
    *,
    top_topics: int = DEFAULT_TOP_TOPICS,
    excluded_languages: Iterable[str] = (),
    now: datetime | None = None,
) -> ComputedStats:
    """Derive repository counts, language and topic summaries, and growth.

    Pure function of its inputs; ``now`` decides what "this year" means.
    """
    now = now or datetime.now(timezone.utc)
    year = now.year

    active = [r for r in repos if _in_year(r.updated_at, year)]
    this_year_languages = aggregate_languages(active, excluded_languages)

    language_summary = LanguageSummary(
        total_languages=len(languages.languages),
        primary_language=languages.languages[0].language_name if languages.languages else None,
        languages_this_year=len(this_year_languages.languages),
        primary_language_this_year=(
            this_year_languages.languages[0].language_name if this_year_languages.languages else None
        ),
    )

    return ComputedStats(
        repos=_repo_counts(repos, year),
        languages=language_summary,
        topics=aggregate_topics(repos, top_topics),
        growth=_growth(contribution_stats, year),
    )
