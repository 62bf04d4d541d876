"""GraphQL query text used by the fetch primitives."""

USER_ACTIVITY = """
query userActivity($login: String!) {
  user(login: $login) {
    pullRequests(first: 1) {
      totalCount
    }
    repositoriesContributedTo(first: 1, contributionTypes: [COMMIT, ISSUE, PULL_REQUEST, REPOSITORY]) {
      totalCount
    }
    openIssues: issues(states: OPEN) {
      totalCount
    }
    closedIssues: issues(states: CLOSED) {
      totalCount
    }
    followers {
      totalCount
    }
    following {
      totalCount
    }
    repositoryDiscussions {
      totalCount
    }
    repositoryDiscussionComments(onlyAnswers: true) {
      totalCount
    }
  }
}
"""

_REPO_FIELDS = """
      nodes {
        name
        owner {
          login
        }
        description
        stargazerCount
        forkCount
        isArchived
        isFork
        isPrivate
        createdAt
        updatedAt
        primaryLanguage {
          name
        }
        repositoryTopics(first: 20) {
          nodes {
            topic {
              name
            }
          }
        }
        languages(first: 10, orderBy: {field: SIZE, direction: DESC}) {
          edges {
            size
            node {
              name
              color
            }
          }
        }
      }
      pageInfo {
        endCursor
        hasNextPage
      }
"""

OWNED_REPOS = (
    """
query ownedRepos($login: String!, $cursor: String) {
  user(login: $login) {
    repositories(
      orderBy: {field: STARGAZERS, direction: DESC}
      ownerAffiliations: OWNER
      first: 100
      after: $cursor
    ) {"""
    + _REPO_FIELDS
    + """
    }
  }
}
"""
)

CONTRIBUTED_REPOS = (
    """
query contributedRepos($login: String!, $cursor: String) {
  user(login: $login) {
    repositoriesContributedTo(
      includeUserRepositories: false
      contributionTypes: [COMMIT, PULL_REQUEST, REPOSITORY, PULL_REQUEST_REVIEW]
      orderBy: {field: STARGAZERS, direction: DESC}
      first: 100
      after: $cursor
    ) {"""
    + _REPO_FIELDS
    + """
    }
  }
}
"""
)

CONTRIBUTION_YEAR = """
query contributionYear($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      totalCommitContributions
      restrictedContributionsCount
      totalIssueContributions
      totalRepositoryContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
          }
        }
      }
    }
  }
}
"""
