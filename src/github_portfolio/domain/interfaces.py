"""Ports the application layer depends on.

The infrastructure layer provides the implementations; tests provide fakes.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, List, Optional, Tuple

from github_portfolio.domain.models import (
    CommitSummary,
    LanguageMap,
    PullRequestSummary,
    RepositorySummary,
    UserEvent,
)


class IGitHubClient(ABC):
    """Abstract interface for the GitHub operations the aggregator needs."""

    @abstractmethod
    async def list_repositories_for_user(self, username: str) -> List[RepositorySummary]:
        pass

    @abstractmethod
    async def search_repositories(
        self, query: str, sort: str, order: str, per_page: int
    ) -> List[RepositorySummary]:
        pass

    @abstractmethod
    async def get_languages(self, owner: str, repo: str) -> LanguageMap:
        pass

    @abstractmethod
    async def get_commits(
        self, owner: str, repo: str, since: Optional[datetime] = None
    ) -> List[CommitSummary]:
        """Commits on the default branch, most recent first."""
        pass

    @abstractmethod
    async def get_pull_requests(self, owner: str, repo: str) -> List[PullRequestSummary]:
        pass

    @abstractmethod
    async def get_user_events(self, username: str) -> List[UserEvent]:
        """Public events performed by the user, most recent first."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass


class ICacheStore(ABC):
    """Key -> value store with a per-entry absolute expiry."""

    @abstractmethod
    def try_get(self, key: str) -> Tuple[Optional[Any], bool]:
        """
        Returns (value, True) for a live entry, (None, False) for an absent or expired one.
        Never raises.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass
