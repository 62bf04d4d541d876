"""Tests for the fetch primitives and the contributor stats retrier."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from profile_stats.exceptions import GitHubAPIError
from profile_stats.github.client import GitHubClient, RestResponse
from profile_stats.github.fetchers import (
    get_contribution_year,
    get_contributor_stats,
    get_stars_given,
    get_total_commits,
    get_user_activity,
    get_view_count,
    parse_contributions_collection,
)

_STATS = [{"author": {"login": "octo"}, "total": 3, "weeks": [{"w": 0, "a": 10, "d": 2, "c": 3}]}]


@pytest.fixture
def client():
    return AsyncMock(spec=GitHubClient)


@pytest.mark.asyncio
async def test_contributor_stats_returned_directly(client):
    client.rest.return_value = RestResponse(status=200, data=_STATS)
    result = await get_contributor_stats(client, "octo", "repo", delay=0)
    assert result == _STATS
    client.rest.assert_awaited_once_with("/repos/octo/repo/stats/contributors")


@pytest.mark.asyncio
async def test_contributor_stats_retries_202_then_succeeds(client):
    client.rest.side_effect = [
        RestResponse(status=202, data=None),
        RestResponse(status=202, data=None),
        RestResponse(status=200, data=_STATS),
    ]
    with patch("profile_stats.github.fetchers.asyncio.sleep", new=AsyncMock()) as sleep:
        result = await get_contributor_stats(client, "octo", "repo", max_attempts=5, delay=1.5)

    assert result == _STATS
    assert client.rest.await_count == 3
    assert sleep.await_count == 2
    sleep.assert_awaited_with(1.5)


@pytest.mark.asyncio
async def test_contributor_stats_gives_up_after_cap(client):
    client.rest.return_value = RestResponse(status=202, data=None)
    with patch("profile_stats.github.fetchers.asyncio.sleep", new=AsyncMock()):
        result = await get_contributor_stats(client, "octo", "repo", max_attempts=4, delay=2)

    assert result is None
    assert client.rest.await_count == 4


@pytest.mark.asyncio
async def test_contributor_stats_swallows_api_errors(client):
    client.rest.side_effect = GitHubAPIError("HTTP 500", status=500)
    assert await get_contributor_stats(client, "octo", "repo", delay=0) is None


@pytest.mark.asyncio
async def test_contributor_stats_non_list_body_is_no_data(client):
    client.rest.return_value = RestResponse(status=204, data=None)
    assert await get_contributor_stats(client, "octo", "empty-repo", delay=0) is None


@pytest.mark.asyncio
async def test_stars_given_reads_last_page_from_link(client):
    link = (
        '<https://api.github.com/user/1/starred?per_page=1&page=2>; rel="next", '
        '<https://api.github.com/user/1/starred?per_page=1&page=137>; rel="last"'
    )
    client.rest.return_value = RestResponse(status=200, data=[{}], headers={"link": link})
    assert await get_stars_given(client, "octo") == 137


@pytest.mark.asyncio
async def test_stars_given_without_link_counts_body(client):
    client.rest.return_value = RestResponse(status=200, data=[{}], headers={})
    assert await get_stars_given(client, "octo") == 1
    client.rest.return_value = RestResponse(status=200, data=[], headers={})
    assert await get_stars_given(client, "octo") == 0


@pytest.mark.asyncio
async def test_total_commits_and_views(client):
    client.rest.return_value = RestResponse(status=200, data={"total_count": 321, "count": 12})
    assert await get_total_commits(client, "octo") == 321
    assert await get_view_count(client, "octo", "repo") == 12
    assert client.rest.await_args_list[1].args[0] == "/repos/octo/repo/traffic/views"


@pytest.mark.asyncio
async def test_user_activity_flattens_counts(client):
    client.graphql.return_value = {
        "user": {
            "pullRequests": {"totalCount": 12},
            "repositoriesContributedTo": {"totalCount": 4},
            "openIssues": {"totalCount": 1},
            "closedIssues": {"totalCount": 9},
            "followers": {"totalCount": 30},
            "following": {"totalCount": 2},
            "repositoryDiscussions": {"totalCount": 0},
            "repositoryDiscussionComments": None,
        }
    }
    activity = await get_user_activity(client, "octo")
    assert activity["total_pull_requests"] == 12
    assert activity["closed_issues"] == 9
    assert activity["followers"] == 30
    assert activity["discussions_answered"] == 0


def test_parse_contributions_collection():
    raw = {
        "totalCommitContributions": 7,
        "restrictedContributionsCount": 1,
        "totalIssueContributions": 2,
        "totalRepositoryContributions": 1,
        "totalPullRequestContributions": 3,
        "totalPullRequestReviewContributions": 4,
        "contributionCalendar": {
            "totalContributions": 5,
            "weeks": [
                {"contributionDays": [{"date": "2024-01-01", "contributionCount": 2}]},
                {"contributionDays": [{"date": "2024-01-08", "contributionCount": 3}]},
            ],
        },
    }
    collection = parse_contributions_collection(raw)
    assert collection.total_commit_contributions == 7
    assert collection.total_pull_request_review_contributions == 4
    assert collection.contribution_calendar.total_contributions == 5
    assert [d.date for d in collection.days()] == ["2024-01-01", "2024-01-08"]


@pytest.mark.asyncio
async def test_contribution_year_missing_collection_raises(client):
    client.graphql.return_value = {"user": None}
    with pytest.raises(GitHubAPIError):
        await get_contribution_year(client, "octo", "2024-01-01T00:00:00Z", "2025-01-01T00:00:00Z")
