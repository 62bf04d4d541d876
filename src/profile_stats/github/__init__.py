"""GitHub API access: transport client, query text and fetch primitives."""

from .client import GitHubClient, RestResponse

__all__ = ["GitHubClient", "RestResponse"]
