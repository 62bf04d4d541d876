"""Single-call fetch primitives over :class:`GitHubClient`.

Each function issues one logical request (or one paginated GraphQL query)
and returns plain data. Only :func:`get_contributor_stats` swallows errors;
everything else propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

import httpx

from ..exceptions import GitHubAPIError
from ..models import ContributionCalendar, ContributionDay, ContributionsCollection, ContributionWeek
from . import queries
from .client import GitHubClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_RETRY_DELAY = 2.0

_LAST_PAGE_RE = re.compile(r'[&?]page=(\d+)>; rel="last"')


async def get_authenticated_user(client: GitHubClient) -> dict[str, Any]:
    resp = await client.rest("/user")
    return resp.data


async def get_user(client: GitHubClient, login: str) -> dict[str, Any]:
    resp = await client.rest(f"/users/{login}")
    return resp.data


async def get_user_activity(client: GitHubClient, login: str) -> dict[str, Any]:
    """PR/issue/follower/discussion counters for ``login`` as a flat dict of ints."""
    data = await client.graphql(queries.USER_ACTIVITY, {"login": login})
    user = data.get("user") or {}

    def total(key: str) -> int:
        return int((user.get(key) or {}).get("totalCount") or 0)

    return {
        "total_pull_requests": total("pullRequests"),
        "repositories_contributed_to": total("repositoriesContributedTo"),
        "open_issues": total("openIssues"),
        "closed_issues": total("closedIssues"),
        "followers": total("followers"),
        "following": total("following"),
        "discussions_started": total("repositoryDiscussions"),
        "discussions_answered": total("repositoryDiscussionComments"),
    }


async def get_owned_repos(client: GitHubClient, login: str) -> list[dict[str, Any]]:
    return await client.graphql_paginate(queries.OWNED_REPOS, {"login": login}, ("user", "repositories"))


async def get_contributed_repos(client: GitHubClient, login: str) -> list[dict[str, Any]]:
    return await client.graphql_paginate(
        queries.CONTRIBUTED_REPOS, {"login": login}, ("user", "repositoriesContributedTo")
    )


def parse_contributions_collection(raw: dict[str, Any]) -> ContributionsCollection:
    calendar = raw.get("contributionCalendar") or {}
    weeks = [
        ContributionWeek(
            contribution_days=[
                ContributionDay(date=d["date"], contribution_count=int(d.get("contributionCount") or 0))
                for d in week.get("contributionDays") or []
            ]
        )
        for week in calendar.get("weeks") or []
    ]
    return ContributionsCollection(
        total_commit_contributions=int(raw.get("totalCommitContributions") or 0),
        total_issue_contributions=int(raw.get("totalIssueContributions") or 0),
        total_pull_request_contributions=int(raw.get("totalPullRequestContributions") or 0),
        total_pull_request_review_contributions=int(raw.get("totalPullRequestReviewContributions") or 0),
        total_repository_contributions=int(raw.get("totalRepositoryContributions") or 0),
        restricted_contributions_count=int(raw.get("restrictedContributionsCount") or 0),
        contribution_calendar=ContributionCalendar(
            total_contributions=int(calendar.get("totalContributions") or 0),
            weeks=weeks,
        ),
    )


async def get_contribution_year(client: GitHubClient, login: str, start: str, end: str) -> ContributionsCollection:
    data = await client.graphql(queries.CONTRIBUTION_YEAR, {"login": login, "from": start, "to": end})
    raw = (data.get("user") or {}).get("contributionsCollection")
    if raw is None:
        raise GitHubAPIError(f"No contributionsCollection returned for {start} - {end}")
    return parse_contributions_collection(raw)


async def get_total_commits(client: GitHubClient, login: str) -> int:
    resp = await client.rest("/search/commits", params={"q": f"author:{login}", "per_page": 1})
    return int((resp.data or {}).get("total_count") or 0)


async def get_stars_given(client: GitHubClient, login: str) -> int:
    """Number of repositories ``login`` has starred.

    Requests one item per page so the ``rel="last"`` page number in the
    ``Link`` header is the total.
    """
    resp = await client.rest(f"/users/{login}/starred", params={"per_page": 1})
    link = resp.headers.get("link") or resp.headers.get("Link") or ""
    match = _LAST_PAGE_RE.search(link)
    if match:
        return int(match.group(1))
    return len(resp.data or [])


async def get_view_count(client: GitHubClient, owner: str, repo: str) -> int:
    resp = await client.rest(f"/repos/{owner}/{repo}/traffic/views", params={"per": "week"})
    return int((resp.data or {}).get("count") or 0)


async def get_contributor_stats(
    client: GitHubClient,
    owner: str,
    repo: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay: float = DEFAULT_RETRY_DELAY,
) -> list[dict[str, Any]] | None:
    """Contributor statistics for ``owner/repo``, or None when unavailable.

    GitHub answers 202 while it computes these stats in the background; the
    request is repeated every ``delay`` seconds, ``max_attempts`` times at
    most. Errors are logged and turned into None so one repository cannot
    fail the run.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            resp = await client.rest(f"/repos/{owner}/{repo}/stats/contributors")
        except (GitHubAPIError, httpx.HTTPError) as e:
            logger.warning("Contributor stats for %s/%s unavailable: %s", owner, repo, e)
            return None

        if resp.status != 202:
            return resp.data if isinstance(resp.data, list) else None

        logger.info(
            "Contributor stats for %s/%s still computing (attempt %d/%d)",
            owner,
            repo,
            attempt,
            max_attempts,
        )
        if attempt < max_attempts:
            await asyncio.sleep(delay)

    logger.warning("Gave up on contributor stats for %s/%s after %d attempts", owner, repo, max_attempts)
    return None
