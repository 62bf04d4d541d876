"""Repository records: construction from GraphQL nodes, ranking and line churn."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .models import LanguageEdge, RepoDetails, RepoInfo

TOP_REPOS_LIMIT = 10


@dataclass
class LineChurn:
    added: int = 0
    deleted: int = 0
    commits: int = 0

    @property
    def total(self) -> int:
        return self.added + self.deleted + self.commits


def build_repo_info(node: dict[str, Any], login: str) -> RepoInfo:
    owner = ((node.get("owner") or {}).get("login")) or login
    topics: dict[str, None] = {}
    for topic_node in (node.get("repositoryTopics") or {}).get("nodes") or []:
        name = ((topic_node or {}).get("topic") or {}).get("name")
        if name:
            topics[name] = None

    languages = [
        LanguageEdge(
            name=edge["node"]["name"],
            size=int(edge.get("size") or 0),
            color=edge["node"].get("color"),
        )
        for edge in (node.get("languages") or {}).get("edges") or []
        if edge and edge.get("node")
    ]

    return RepoInfo(
        owner=owner,
        name=node["name"],
        is_owner=owner.lower() == login.lower(),
        stars=int(node.get("stargazerCount") or 0),
        forks=int(node.get("forkCount") or 0),
        description=node.get("description") or None,
        is_archived=bool(node.get("isArchived")),
        is_fork=bool(node.get("isFork")),
        is_private=bool(node.get("isPrivate")),
        primary_language=(node.get("primaryLanguage") or {}).get("name"),
        topics=tuple(topics),
        updated_at=node.get("updatedAt"),
        created_at=node.get("createdAt"),
        languages=languages,
    )


def select_top_repos(repos: Sequence[RepoInfo], limit: int = TOP_REPOS_LIMIT) -> list[RepoDetails]:
    """The most-starred owned, non-archived repositories."""
    candidates = [r for r in repos if r.is_owner and not r.is_archived]
    ranked = sorted(candidates, key=lambda r: r.stars, reverse=True)
    return [
        RepoDetails(
            name=r.name,
            description=r.description,
            stars=r.stars,
            forks=r.forks,
            is_archived=r.is_archived,
            is_fork=r.is_fork,
            is_private=r.is_private,
            primary_language=r.primary_language,
            topics=list(r.topics),
            updated_at=r.updated_at,
            created_at=r.created_at,
        )
        for r in ranked[:limit]
    ]


def sum_line_churn(contributor_stats: Iterable[list[dict[str, Any]] | None], login: str) -> LineChurn:
    """Total the weekly additions/deletions/commits of ``login`` across repositories.

    ``None`` entries stand for repositories whose stats could not be fetched.
    """
    churn = LineChurn()
    for entries in contributor_stats:
        if not entries:
            continue
        mine = next(
            (e for e in entries if (((e or {}).get("author") or {}).get("login") or "").lower() == login.lower()),
            None,
        )
        if mine is None:
            continue
        for week in mine.get("weeks") or []:
            churn.added += int(week.get("a") or 0)
            churn.deleted += int(week.get("d") or 0)
            churn.commits += int(week.get("c") or 0)
    return churn
