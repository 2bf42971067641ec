from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional

from github_portfolio.domain.interfaces import IGitHubClient
from github_portfolio.domain.models import (
    CommitSummary,
    PullRequestSummary,
    RepositorySummary,
    UserEvent,
)


def make_summary(repo_id: int, name: str = None, owner: str = "octocat", stars: int = 0) -> RepositorySummary:
    name = name or f"repo-{repo_id}"
    return RepositorySummary(
        id=repo_id,
        name=name,
        owner=owner,
        description=f"{name} description",
        url=f"https://github.com/{owner}/{name}",
        stars=stars,
    )


def make_commit(sha: str = "abc123", message: str = "Initial commit", author: str = "Mona") -> CommitSummary:
    return CommitSummary(
        sha=sha,
        message=message,
        author=author,
        date=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


class FakeGitHubClient(IGitHubClient):
    """
    In-memory stand-in for the GitHub API.

    Per-repository results are keyed by repository name; a value that is an
    exception instance is raised instead of returned.
    """

    def __init__(
        self,
        repositories=None,
        search_results=None,
        languages: Optional[Dict[str, object]] = None,
        commits: Optional[Dict[str, object]] = None,
        pull_requests: Optional[Dict[str, object]] = None,
        events=None,
    ) -> None:
        self.repositories = repositories if repositories is not None else []
        self.search_results = search_results if search_results is not None else []
        self.languages = languages or {}
        self.commits = commits or {}
        self.pull_requests = pull_requests or {}
        self.events = events if events is not None else []
        self.calls: Counter = Counter()
        self.search_calls: List[tuple] = []
        self.commit_since: List[datetime] = []
        self.closed = False

    @staticmethod
    def _resolve(value):
        if isinstance(value, BaseException):
            raise value
        return value

    async def list_repositories_for_user(self, username: str) -> List[RepositorySummary]:
        self.calls["list"] += 1
        return self._resolve(self.repositories)

    async def search_repositories(self, query, sort, order, per_page) -> List[RepositorySummary]:
        self.calls["search"] += 1
        self.search_calls.append((query, sort, order, per_page))
        return self._resolve(self.search_results)

    async def get_languages(self, owner, repo):
        self.calls["languages"] += 1
        return self._resolve(self.languages.get(repo, {"Python": 1000}))

    async def get_commits(self, owner, repo, since=None) -> List[CommitSummary]:
        self.calls["commits"] += 1
        self.commit_since.append(since)
        return self._resolve(self.commits.get(repo, [make_commit()]))

    async def get_pull_requests(self, owner, repo) -> List[PullRequestSummary]:
        self.calls["pulls"] += 1
        return self._resolve(self.pull_requests.get(repo, []))

    async def get_user_events(self, username) -> List[UserEvent]:
        self.calls["events"] += 1
        return self._resolve(self.events)

    async def close(self) -> None:
        self.closed = True
