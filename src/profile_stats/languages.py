"""Language byte and topic frequency aggregation across repositories."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import LanguageBreakdown, LanguageStats, RepoInfo, TopicCount, TopicSummary
from .utils import percentage

# Markup, config and tooling languages left out of the language breakdown by default
NOT_LANGUAGES = (
    "html",
    "markdown",
    "dockerfile",
    "roff",
    "rich text format",
    "powershell",
    "css",
    "php",
)

DEFAULT_TOP_TOPICS = 20


def aggregate_languages(repos: Sequence[RepoInfo], excluded: Iterable[str] = ()) -> LanguageBreakdown:
    """Sum language bytes over ``repos`` into a percentage-weighted breakdown.

    The first repository that mentions a language decides its colour.
    Entries are ordered by bytes, descending; equal sizes keep first-seen
    order.
    """
    skip = {name.lower() for name in excluded}
    sizes: dict[str, int] = {}
    colors: dict[str, str | None] = {}

    for repo in repos:
        for edge in repo.languages:
            if edge.name.lower() in skip:
                continue
            if edge.name not in sizes:
                sizes[edge.name] = 0
                colors[edge.name] = edge.color
            sizes[edge.name] += edge.size

    code_byte_total = sum(sizes.values())
    ordered = sorted(sizes.items(), key=lambda item: item[1], reverse=True)
    languages = [
        LanguageStats(
            language_name=name,
            color=colors[name],
            total_bytes=size,
            percentage=percentage(size, code_byte_total),
        )
        for name, size in ordered
    ]
    return LanguageBreakdown(languages=languages, code_byte_total=code_byte_total)


def aggregate_topics(repos: Sequence[RepoInfo], top_n: int = DEFAULT_TOP_TOPICS) -> TopicSummary:
    counts: dict[str, int] = {}
    for repo in repos:
        for topic in repo.topics:
            counts[topic] = counts.get(topic, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return TopicSummary(
        total_topics=len(counts),
        top_topics=[TopicCount(topic=t, count=c) for t, c in ranked[:top_n]],
        all_topics=sorted(counts),
    )
