"""Multi-year contribution collection and calendar analytics."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from datetime import date, datetime, timezone

from .batch import DEFAULT_BATCH_SIZE, process_batched
from .exceptions import NoContributionDataError
from .github.client import GitHubClient
from .github.fetchers import get_contribution_year
from .models import (
    ContributionCalendar,
    ContributionStats,
    ContributionsCollection,
    ContributionWeek,
    MonthlyContribution,
)
from .utils import round_half_up

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_COUNTERS = (
    "total_commit_contributions",
    "total_issue_contributions",
    "total_pull_request_contributions",
    "total_pull_request_review_contributions",
    "total_repository_contributions",
    "restricted_contributions_count",
)


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp (``...Z``) into an aware datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def contribution_windows(created_at: datetime, now: datetime) -> Iterator[tuple[int, str, str]]:
    """Yield ``(year, from, to)`` windows of at most one calendar year.

    The first window opens at ``created_at`` and the last one closes at
    ``now``; the ones in between cover whole calendar years.
    """
    for year in range(created_at.year, now.year + 1):
        start = _iso(created_at) if year == created_at.year else f"{year}-01-01T00:00:00Z"
        end = _iso(now) if year == now.year else f"{year + 1}-01-01T00:00:00Z"
        yield year, start, end


def merge_contribution_collections(collections: Sequence[ContributionsCollection]) -> ContributionsCollection:
    """Combine per-year collections, given in ascending year order, into one.

    Counters and calendar totals are summed; week sequences are
    concatenated so the merged calendar stays chronological. The inputs are
    left untouched.
    """
    if not collections:
        raise NoContributionDataError()

    merged = ContributionsCollection(contribution_calendar=ContributionCalendar())
    for collection in collections:
        for counter in _COUNTERS:
            setattr(merged, counter, getattr(merged, counter) + getattr(collection, counter))
        calendar = collection.contribution_calendar
        merged.contribution_calendar.total_contributions += calendar.total_contributions
        merged.contribution_calendar.weeks.extend(
            ContributionWeek(contribution_days=list(week.contribution_days)) for week in calendar.weeks
        )
    return merged


async def fetch_contribution_collection(
    client: GitHubClient,
    login: str,
    created_at: datetime,
    now: datetime | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> ContributionsCollection:
    """Fetch every year since ``created_at`` and merge the ones that succeeded."""
    now = now or datetime.now(timezone.utc)
    windows = list(contribution_windows(created_at, now))

    async def fetch(window: tuple[int, str, str]) -> ContributionsCollection:
        _, start, end = window
        return await get_contribution_year(client, login, start, end)

    results = await process_batched(windows, batch_size, fetch)

    collections = []
    for result in results:
        year = result.item[0]
        if result.failed:
            logger.warning("Skipping contributions for %d: %s", year, result.error)
            continue
        collections.append(result.value)

    if not collections:
        raise NoContributionDataError(
            f"Failed to fetch contribution data for any year ({windows[0][0]}-{windows[-1][0]})"
            if windows
            else "No contribution years to fetch"
        )
    logger.info("Merged contributions for %d of %d years", len(collections), len(windows))
    return merge_contribution_collections(collections)


def _monthly_breakdown(days) -> list[MonthlyContribution]:
    months: dict[str, int] = {}
    for day in days:
        key = day.date[:7]
        months[key] = months.get(key, 0) + day.contribution_count
    return [MonthlyContribution(month=m, contributions=months[m]) for m in sorted(months)]


def _most_active_day(days) -> str:
    # dict preserves first-encounter order, and max() keeps the first of equal keys
    totals: dict[str, int] = {}
    for day in days:
        name = WEEKDAYS[date.fromisoformat(day.date).weekday()]
        totals[name] = totals.get(name, 0) + day.contribution_count
    if not totals:
        return "N/A"
    return max(totals, key=totals.__getitem__)


def _longest_streak(days) -> int:
    longest = current = 0
    for day in days:
        if day.contribution_count > 0:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _current_streak(days, today: date) -> int:
    streak = 0
    today_iso = today.isoformat()
    for index in range(len(days) - 1, -1, -1):
        day = days[index]
        if day.contribution_count > 0:
            streak += 1
        elif index == len(days) - 1 and day.date == today_iso:
            # today may still be in progress
            continue
        else:
            break
    return streak


def calculate_contribution_stats(
    collection: ContributionsCollection,
    today: date | None = None,
) -> ContributionStats:
    """Streaks, most active weekday, monthly breakdown and averages for a merged calendar."""
    today = today or date.today()
    days = collection.days()

    total = sum(day.contribution_count for day in days)
    average_per_day = total / max(len(days), 1)

    return ContributionStats(
        longest_streak=_longest_streak(days),
        current_streak=_current_streak(days, today),
        most_active_day=_most_active_day(days),
        average_per_day=round_half_up(average_per_day),
        average_per_week=round_half_up(average_per_day * 7),
        average_per_month=round_half_up(average_per_day * 30),
        monthly_breakdown=_monthly_breakdown(days),
    )
