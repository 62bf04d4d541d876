"""Profile statistics aggregation logic."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from datetime import date, datetime, timezone

from .batch import DEFAULT_BATCH_SIZE, process_batched
from .computed import calculate_computed_stats
from .contributions import calculate_contribution_stats, fetch_contribution_collection, parse_timestamp
from .github.client import GitHubClient
from .github.fetchers import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    get_authenticated_user,
    get_contributed_repos,
    get_contributor_stats,
    get_owned_repos,
    get_stars_given,
    get_total_commits,
    get_user,
    get_user_activity,
    get_view_count,
)
from .languages import DEFAULT_TOP_TOPICS, NOT_LANGUAGES, aggregate_languages
from .models import ProfileReport, RepoInfo
from .repos import build_repo_info, select_top_repos, sum_line_churn

logger = logging.getLogger(__name__)


async def aggregate_profile(
    client: GitHubClient,
    *,
    username: str | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    top_topics: int = DEFAULT_TOP_TOPICS,
    excluded_languages: Iterable[str] = NOT_LANGUAGES,
    now: datetime | None = None,
    today: date | None = None,
) -> ProfileReport:
    """Collect and aggregate statistics for ``username`` (default: the token's owner)."""
    fetched_at = int(time.time() * 1000)
    now = now or datetime.now(timezone.utc)
    excluded_languages = tuple(excluded_languages)

    profile = await (get_user(client, username) if username else get_authenticated_user(client))
    login = profile["login"]
    created_at = parse_timestamp(profile["created_at"])
    logger.info("Collecting statistics for %s (account created %s)", login, profile["created_at"])

    activity, owned_nodes, contributed_nodes, total_commits, collection, stars_given = await asyncio.gather(
        get_user_activity(client, login),
        get_owned_repos(client, login),
        get_contributed_repos(client, login),
        get_total_commits(client, login),
        fetch_contribution_collection(client, login, created_at, now, batch_size=batch_size),
        get_stars_given(client, login),
    )

    repos = [build_repo_info(node, login) for node in owned_nodes + contributed_nodes]
    owned = [r for r in repos if r.is_owner]
    logger.info("Found %d owned and %d contributed-to repositories", len(owned), len(repos) - len(owned))

    async def contributor_stats(repo: RepoInfo):
        return await get_contributor_stats(
            client, repo.owner, repo.name, max_attempts=max_attempts, delay=retry_delay
        )

    async def views(repo: RepoInfo) -> int:
        return await get_view_count(client, repo.owner, repo.name)

    stats_results = await process_batched(repos, batch_size, contributor_stats)
    view_results = await process_batched(owned, batch_size, views)

    failed_repos: list[str] = []
    for result in stats_results + view_results:
        if result.failed:
            logger.warning("Failed to collect stats for %s: %s", result.item.full_name, result.error)
            if result.item.full_name not in failed_repos:
                failed_repos.append(result.item.full_name)

    churn = sum_line_churn((r.value for r in stats_results if r.ok), login)
    repo_views = sum(r.value for r in view_results if r.ok)

    languages = aggregate_languages(repos, excluded_languages)
    contribution_stats = calculate_contribution_stats(collection, today)
    computed = calculate_computed_stats(
        owned,
        languages,
        contribution_stats,
        top_topics=top_topics,
        excluded_languages=excluded_languages,
        now=now,
    )

    return ProfileReport(
        name=profile.get("name") or "",
        username=login or "",
        avatar_url=profile.get("avatar_url") or None,
        bio=profile.get("bio") or None,
        company=profile.get("company") or None,
        location=profile.get("location") or None,
        email=profile.get("email") or None,
        twitter_username=profile.get("twitter_username") or None,
        website_url=profile.get("blog") or None,
        created_at=profile.get("created_at") or None,
        repo_views=repo_views,
        lines_of_code_changed=churn.total,
        lines_added=churn.added,
        lines_deleted=churn.deleted,
        lines_changed=churn.commits,
        commit_count=churn.commits,
        total_commits=total_commits,
        total_pull_requests=activity["total_pull_requests"],
        total_pull_request_reviews=collection.total_pull_request_review_contributions,
        open_issues=activity["open_issues"],
        closed_issues=activity["closed_issues"],
        followers=activity["followers"],
        following=activity["following"],
        star_count=sum(r.stars for r in owned),
        stars_given=stars_given,
        fork_count=sum(r.forks for r in owned),
        repositories_contributed_to=activity["repositories_contributed_to"],
        discussions_started=activity["discussions_started"],
        discussions_answered=activity["discussions_answered"],
        total_contributions=collection.contribution_calendar.total_contributions,
        code_byte_total=languages.code_byte_total,
        top_languages=languages.languages,
        contribution_stats=contribution_stats,
        computed_stats=computed,
        top_repos=select_top_repos(owned),
        contributions_collection=collection,
        failed_repos=failed_repos,
        fetched_at=fetched_at,
    )
