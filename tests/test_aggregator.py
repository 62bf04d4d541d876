"""Tests for the aggregator module."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from profile_stats.aggregator import aggregate_profile
from profile_stats.exceptions import GitHubAPIError, GraphQLError, NoContributionDataError
from profile_stats.github import queries
from profile_stats.github.client import GitHubClient, RestResponse
from profile_stats.renderer import report_to_dict

NOW = datetime(2024, 6, 15, 18, 0, tzinfo=timezone.utc)
TODAY = date(2024, 6, 15)

PROFILE = {
    "login": "octo",
    "name": "Octo Cat",
    "avatar_url": "https://avatars.example/octo",
    "bio": "",
    "company": None,
    "location": "Earth",
    "email": None,
    "twitter_username": None,
    "blog": "https://octo.example",
    "created_at": "2023-03-01T10:00:00Z",
}


def _repo_node(name, owner, *, stars=0, forks=0, archived=False, updated="2024-05-01T00:00:00Z",
               created="2023-04-01T00:00:00Z", languages=(), topics=()):
    return {
        "name": name,
        "owner": {"login": owner},
        "description": f"{name} description" if owner == "octo" else None,
        "stargazerCount": stars,
        "forkCount": forks,
        "isArchived": archived,
        "isFork": False,
        "isPrivate": False,
        "createdAt": created,
        "updatedAt": updated,
        "primaryLanguage": {"name": languages[0][0]} if languages else None,
        "repositoryTopics": {"nodes": [{"topic": {"name": t}} for t in topics]},
        "languages": {"edges": [{"size": s, "node": {"name": n, "color": c}} for n, s, c in languages]},
    }


OWNED = [
    _repo_node("alpha", "octo", stars=10, forks=2,
               languages=[("Python", 3000, "#3572A5"), ("HTML", 1000, "#e34c26")], topics=["cli", "github"]),
    _repo_node("beta", "octo", forks=1, archived=True, updated="2023-08-01T00:00:00Z",
               languages=[("Go", 1000, "#00ADD8")], topics=["cli"]),
]
CONTRIBUTED = [
    _repo_node("lib", "other", stars=500, forks=50,
               languages=[("TypeScript", 2000, "#3178c6"), ("Python", 1000, "#000000")], topics=["web"]),
]

ACTIVITY = {
    "user": {
        "pullRequests": {"totalCount": 12},
        "repositoriesContributedTo": {"totalCount": 3},
        "openIssues": {"totalCount": 2},
        "closedIssues": {"totalCount": 8},
        "followers": {"totalCount": 40},
        "following": {"totalCount": 5},
        "repositoryDiscussions": {"totalCount": 1},
        "repositoryDiscussionComments": {"totalCount": 4},
    }
}

YEARS = {
    "2023": {
        "totalCommitContributions": 10,
        "restrictedContributionsCount": 0,
        "totalIssueContributions": 1,
        "totalRepositoryContributions": 1,
        "totalPullRequestContributions": 2,
        "totalPullRequestReviewContributions": 3,
        "contributionCalendar": {
            "totalContributions": 1,
            "weeks": [{"contributionDays": [
                {"date": "2023-12-30", "contributionCount": 1},
                {"date": "2023-12-31", "contributionCount": 0},
            ]}],
        },
    },
    "2024": {
        "totalCommitContributions": 5,
        "restrictedContributionsCount": 2,
        "totalIssueContributions": 0,
        "totalRepositoryContributions": 0,
        "totalPullRequestContributions": 1,
        "totalPullRequestReviewContributions": 1,
        "contributionCalendar": {
            "totalContributions": 9,
            "weeks": [{"contributionDays": [
                {"date": "2024-06-13", "contributionCount": 4},
                {"date": "2024-06-14", "contributionCount": 5},
                {"date": "2024-06-15", "contributionCount": 0},
            ]}],
        },
    },
}

CONTRIBUTOR_STATS = {
    "alpha": [
        {"author": {"login": "octo"}, "weeks": [{"w": 1, "a": 100, "d": 20, "c": 3}, {"w": 2, "a": 5, "d": 5, "c": 1}]},
        {"author": {"login": "someone"}, "weeks": [{"w": 1, "a": 999, "d": 999, "c": 99}]},
    ],
    "lib": [{"author": {"login": "Octo"}, "weeks": [{"w": 1, "a": 50, "d": 0, "c": 2}]}],
}

STARRED_LINK = '<https://api.github.com/user/1/starred?per_page=1&page=7>; rel="last"'


def _rest(path, params=None):
    if path in ("/user", "/users/octo"):
        return RestResponse(200, PROFILE)
    if path == "/search/commits":
        return RestResponse(200, {"total_count": 42})
    if path == "/users/octo/starred":
        return RestResponse(200, [{}], {"link": STARRED_LINK})
    if path.endswith("/stats/contributors"):
        name = path.split("/")[3]
        if name in CONTRIBUTOR_STATS:
            return RestResponse(200, CONTRIBUTOR_STATS[name])
        return RestResponse(202, None)
    if path == "/repos/octo/alpha/traffic/views":
        return RestResponse(200, {"count": 5, "uniques": 2})
    if path == "/repos/octo/beta/traffic/views":
        raise GitHubAPIError("Must have push access", status=403)
    raise AssertionError(f"unexpected REST call {path}")


def _graphql(query, variables=None):
    if query == queries.USER_ACTIVITY:
        return ACTIVITY
    if query == queries.CONTRIBUTION_YEAR:
        return {"user": {"contributionsCollection": YEARS[variables["from"][:4]]}}
    raise AssertionError("unexpected GraphQL query")


def _paginate(query, variables, connection_path):
    return {queries.OWNED_REPOS: OWNED, queries.CONTRIBUTED_REPOS: CONTRIBUTED}[query]


@pytest.fixture
def mock_client():
    client = AsyncMock(spec=GitHubClient)
    client.rest.side_effect = _rest
    client.graphql.side_effect = _graphql
    client.graphql_paginate.side_effect = _paginate
    return client


async def _aggregate(client, **kwargs):
    kwargs.setdefault("now", NOW)
    kwargs.setdefault("today", TODAY)
    with patch("profile_stats.github.fetchers.asyncio.sleep", new=AsyncMock()):
        return await aggregate_profile(client, max_attempts=2, retry_delay=0, **kwargs)


@pytest.mark.asyncio
async def test_aggregate_profile(mock_client):
    report = await _aggregate(mock_client)

    assert report.name == "Octo Cat"
    assert report.username == "octo"
    assert report.website_url == "https://octo.example"
    assert report.created_at == "2023-03-01T10:00:00Z"
    assert report.total_commits == 42
    assert report.stars_given == 7
    assert report.total_pull_requests == 12
    assert report.closed_issues == 8
    assert report.followers == 40
    assert report.discussions_answered == 4


@pytest.mark.asyncio
async def test_string_fields_default_to_none(mock_client):
    report = await _aggregate(mock_client)
    assert report.bio is None
    assert report.company is None
    assert report.email is None
    assert report.twitter_username is None


@pytest.mark.asyncio
async def test_missing_name_defaults_to_empty_string(mock_client):
    profile = {**PROFILE, "name": None}
    mock_client.rest.side_effect = lambda path, params=None: (
        RestResponse(200, profile) if path == "/user" else _rest(path, params)
    )
    report = await _aggregate(mock_client)
    assert report.name == ""


@pytest.mark.asyncio
async def test_line_churn_from_contributor_stats(mock_client):
    report = await _aggregate(mock_client)
    # beta never finishes computing and contributes nothing
    assert report.lines_added == 155
    assert report.lines_deleted == 25
    assert report.lines_changed == 6
    assert report.lines_of_code_changed == 155 + 25 + 6
    assert report.commit_count == 6

    data = report_to_dict(report)
    assert data["linesChanged"] == 6
    assert data["linesOfCodeChanged"] == 186


@pytest.mark.asyncio
async def test_stars_forks_views_only_count_owned_repos(mock_client):
    report = await _aggregate(mock_client)
    assert report.star_count == 10
    assert report.fork_count == 3
    assert report.repo_views == 5
    assert report.failed_repos == ["octo/beta"]
    view_paths = [c.args[0] for c in mock_client.rest.await_args_list if c.args[0].endswith("/traffic/views")]
    assert "/repos/other/lib/traffic/views" not in view_paths


@pytest.mark.asyncio
async def test_languages_cover_all_repos(mock_client):
    report = await _aggregate(mock_client)
    names = [(lang.language_name, lang.total_bytes, lang.percentage) for lang in report.top_languages]
    assert names == [
        ("Python", 4000, 57.14),
        ("TypeScript", 2000, 28.57),
        ("Go", 1000, 14.29),
    ]
    assert report.top_languages[0].color == "#3572A5"
    assert report.code_byte_total == 7000


@pytest.mark.asyncio
async def test_contributions_merged_and_analyzed(mock_client):
    report = await _aggregate(mock_client)
    collection = report.contributions_collection

    assert collection.total_commit_contributions == 15
    assert collection.restricted_contributions_count == 2
    assert collection.contribution_calendar.total_contributions == 10
    assert [d.date for d in collection.days()][0] == "2023-12-30"
    assert report.total_contributions == 10
    assert report.total_pull_request_reviews == 4

    stats = report.contribution_stats
    assert stats.current_streak == 2
    assert stats.longest_streak == 2
    assert stats.average_per_day == 2


@pytest.mark.asyncio
async def test_computed_stats_and_top_repos(mock_client):
    report = await _aggregate(mock_client)
    computed = report.computed_stats

    assert computed.repos.total_repos == 2
    assert computed.repos.archived_repos == 1
    assert computed.repos.active_repos_this_year == 1
    assert computed.languages.primary_language == "Python"
    assert computed.languages.primary_language_this_year == "Python"
    assert [(t.topic, t.count) for t in computed.topics.top_topics] == [("cli", 2), ("github", 1)]
    assert computed.growth.contributions_this_year == 9
    assert computed.growth.contributions_last_year == 1
    assert computed.growth.year_over_year_growth == 800
    assert computed.growth.most_productive_month.month == "2024-06"

    assert [r.name for r in report.top_repos] == ["alpha"]
    assert report.top_repos[0].topics == ["cli", "github"]


@pytest.mark.asyncio
async def test_username_uses_public_profile(mock_client):
    await _aggregate(mock_client, username="octo")
    paths = [c.args[0] for c in mock_client.rest.await_args_list]
    assert "/users/octo" in paths
    assert "/user" not in paths


@pytest.mark.asyncio
async def test_failed_contribution_year_is_skipped(mock_client):
    def graphql(query, variables=None):
        if query == queries.CONTRIBUTION_YEAR and variables["from"].startswith("2023"):
            raise GraphQLError([{"message": "Something went wrong"}])
        return _graphql(query, variables)

    mock_client.graphql.side_effect = graphql
    report = await _aggregate(mock_client)
    assert report.total_contributions == 9
    assert report.contributions_collection.total_commit_contributions == 5


@pytest.mark.asyncio
async def test_all_contribution_years_failing_is_fatal(mock_client):
    def graphql(query, variables=None):
        if query == queries.CONTRIBUTION_YEAR:
            raise GraphQLError([{"message": "Something went wrong"}])
        return _graphql(query, variables)

    mock_client.graphql.side_effect = graphql
    with pytest.raises(NoContributionDataError):
        await _aggregate(mock_client)


@pytest.mark.asyncio
async def test_aggregation_is_idempotent(mock_client):
    with patch("profile_stats.aggregator.time.time", return_value=1718474400.0):
        first = await _aggregate(mock_client)
        second = await _aggregate(mock_client)

    assert first.fetched_at == 1718474400000
    assert json.dumps(report_to_dict(first)) == json.dumps(report_to_dict(second))
