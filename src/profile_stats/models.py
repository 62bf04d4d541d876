"""Data models for profile-stats."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LanguageEdge:
    name: str
    size: int
    color: str | None = None


@dataclass
class LanguageStats:
    language_name: str
    color: str | None
    total_bytes: int
    percentage: float


@dataclass
class LanguageBreakdown:
    languages: list[LanguageStats] = field(default_factory=list)
    code_byte_total: int = 0


@dataclass
class ContributionDay:
    date: str
    contribution_count: int


@dataclass
class ContributionWeek:
    contribution_days: list[ContributionDay] = field(default_factory=list)


@dataclass
class ContributionCalendar:
    total_contributions: int = 0
    weeks: list[ContributionWeek] = field(default_factory=list)


@dataclass
class ContributionsCollection:
    total_commit_contributions: int = 0
    total_issue_contributions: int = 0
    total_pull_request_contributions: int = 0
    total_pull_request_review_contributions: int = 0
    total_repository_contributions: int = 0
    restricted_contributions_count: int = 0
    contribution_calendar: ContributionCalendar = field(default_factory=ContributionCalendar)

    def days(self) -> list[ContributionDay]:
        """All calendar days, flattened in week order."""
        return [day for week in self.contribution_calendar.weeks for day in week.contribution_days]


@dataclass
class MonthlyContribution:
    month: str
    contributions: int


@dataclass
class ContributionStats:
    longest_streak: int = 0
    current_streak: int = 0
    most_active_day: str = "N/A"
    average_per_day: float = 0.0
    average_per_week: float = 0.0
    average_per_month: float = 0.0
    monthly_breakdown: list[MonthlyContribution] = field(default_factory=list)


@dataclass
class RepoInfo:
    """Working record for one repository, built from a GraphQL node."""

    owner: str
    name: str
    is_owner: bool
    stars: int = 0
    forks: int = 0
    description: str | None = None
    is_archived: bool = False
    is_fork: bool = False
    is_private: bool = False
    primary_language: str | None = None
    topics: tuple[str, ...] = ()
    updated_at: str | None = None
    created_at: str | None = None
    languages: list[LanguageEdge] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RepoDetails:
    name: str
    description: str | None
    stars: int
    forks: int
    is_archived: bool
    is_fork: bool
    is_private: bool
    primary_language: str | None
    topics: list[str] = field(default_factory=list)
    updated_at: str | None = None
    created_at: str | None = None


@dataclass
class TopicCount:
    topic: str
    count: int


@dataclass
class RepoCounts:
    total_repos: int = 0
    public_repos: int = 0
    private_repos: int = 0
    archived_repos: int = 0
    forked_repos: int = 0
    original_repos: int = 0
    active_repos_this_year: int = 0
    repos_with_stars: int = 0
    repos_created_this_year: int = 0
    total_stars: int = 0
    average_stars_per_repo: float = 0.0


@dataclass
class LanguageSummary:
    total_languages: int = 0
    primary_language: str | None = None
    languages_this_year: int = 0
    primary_language_this_year: str | None = None


@dataclass
class TopicSummary:
    total_topics: int = 0
    top_topics: list[TopicCount] = field(default_factory=list)
    all_topics: list[str] = field(default_factory=list)


@dataclass
class ContributionGrowth:
    contributions_this_year: int = 0
    contributions_last_year: int = 0
    # None when last year had no contributions
    year_over_year_growth: float | None = None
    most_productive_month: MonthlyContribution | None = None


@dataclass
class ComputedStats:
    repos: RepoCounts = field(default_factory=RepoCounts)
    languages: LanguageSummary = field(default_factory=LanguageSummary)
    topics: TopicSummary = field(default_factory=TopicSummary)
    growth: ContributionGrowth = field(default_factory=ContributionGrowth)


@dataclass
class ProfileReport:
    name: str
    username: str
    avatar_url: str | None = None
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    email: str | None = None
    twitter_username: str | None = None
    website_url: str | None = None
    created_at: str | None = None
    repo_views: int = 0
    lines_of_code_changed: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    lines_changed: int = 0
    commit_count: int = 0
    total_commits: int = 0
    total_pull_requests: int = 0
    total_pull_request_reviews: int = 0
    open_issues: int = 0
    closed_issues: int = 0
    followers: int = 0
    following: int = 0
    star_count: int = 0
    stars_given: int = 0
    fork_count: int = 0
    repositories_contributed_to: int = 0
    discussions_started: int = 0
    discussions_answered: int = 0
    total_contributions: int = 0
    code_byte_total: int = 0
    top_languages: list[LanguageStats] = field(default_factory=list)
    contribution_stats: ContributionStats = field(default_factory=ContributionStats)
    computed_stats: ComputedStats = field(default_factory=ComputedStats)
    top_repos: list[RepoDetails] = field(default_factory=list)
    contributions_collection: ContributionsCollection = field(default_factory=ContributionsCollection)
    failed_repos: list[str] = field(default_factory=list)
    fetched_at: int = 0
