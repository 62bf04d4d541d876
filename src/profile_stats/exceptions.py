"""Exceptions raised by profile-stats."""

from __future__ import annotations


class ProfileStatsError(Exception):
    """Base class for errors that abort a run."""


class MissingTokenError(ProfileStatsError):
    def __init__(self) -> None:
        super().__init__("GitHub token is required. Use --token or set GITHUB_TOKEN.")


class NoContributionDataError(ProfileStatsError):
    def __init__(self, message: str = "Failed to fetch contribution data for any year") -> None:
        super().__init__(message)


class GitHubAPIError(ProfileStatsError):
    """A request to the GitHub API failed.

    ``status`` is 0 when no HTTP response was received.
    """

    def __init__(self, message: str, status: int = 0, url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class GraphQLError(GitHubAPIError):
    def __init__(self, errors: list[dict], url: str | None = None) -> None:
        messages = "; ".join(e.get("message", "Unknown error") for e in errors) or "Unknown error"
        super().__init__(f"GraphQL query failed: {messages}", status=200, url=url)
        self.errors = errors
