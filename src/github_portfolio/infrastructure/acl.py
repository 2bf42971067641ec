from datetime import datetime
from typing import Any, Dict, Optional

from github_portfolio.domain.models import (
    CommitSummary,
    PullRequestSummary,
    RepositorySummary,
    UserEvent,
)


def _parse_timestamp(raw_date: Optional[str]) -> Optional[datetime]:
    if not raw_date:
        return None
    return datetime.fromisoformat(raw_date.replace("Z", "+00:00"))


class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub REST JSON payloads into domain models.
    """

    @staticmethod
    def to_repository(raw_repo: Dict[str, Any]) -> RepositorySummary:
        """
        Transforms a repository object (from /users/{user}/repos or /search/repositories)
        into a RepositorySummary.

        Args:
            raw_repo (Dict[str, Any]): The raw JSON repository object.

        Returns:
            RepositorySummary: The domain model for the repository.
        """
        if raw_repo.get('id') is None:
            raise ValueError("id is required to build RepositorySummary.")

        owner_data = raw_repo.get('owner') or {}

        return RepositorySummary(
            id=raw_repo['id'],
            name=raw_repo.get('name', ''),
            owner=owner_data.get('login', ''),
            description=raw_repo.get('description'),
            url=raw_repo.get('html_url', ''),
            stars=raw_repo.get('stargazers_count', 0),
        )

    @staticmethod
    def to_commit(raw_commit: Dict[str, Any]) -> CommitSummary:
        """
        Transforms an item of /repos/{owner}/{repo}/commits into a CommitSummary.
        Author name and date come from the git commit, not the GitHub account.
        """
        commit_data = raw_commit.get('commit') or {}
        author_data = commit_data.get('author') or {}

        return CommitSummary(
            sha=raw_commit.get('sha', ''),
            message=commit_data.get('message'),
            author=author_data.get('name'),
            date=_parse_timestamp(author_data.get('date')),
        )

    @staticmethod
    def to_pull_request(raw_pull: Dict[str, Any]) -> PullRequestSummary:
        return PullRequestSummary(
            number=raw_pull.get('number', 0),
            title=raw_pull.get('title') or '',
            state=raw_pull.get('state') or 'open',
        )

    @staticmethod
    def to_event(raw_event: Dict[str, Any]) -> UserEvent:
        created_at = _parse_timestamp(raw_event.get('created_at'))
        if created_at is None:
            raise ValueError("created_at is required to build UserEvent.")

        return UserEvent(
            id=str(raw_event.get('id', '')),
            type=raw_event.get('type', ''),
            created_at=created_at,
        )
