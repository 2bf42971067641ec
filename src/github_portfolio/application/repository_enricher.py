import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Iterable, List, Optional, Set, TypeVar

from github_portfolio.domain.interfaces import IGitHubClient
from github_portfolio.domain.models import CommitSummary, RepositoryRecord, RepositorySummary

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Only commits authored within this window are considered for "last commit".
COMMIT_WINDOW = timedelta(days=365)

UNKNOWN_LANGUAGES = "Unknown"
UNKNOWN_AUTHOR = "Unknown"
COMMIT_ERROR_MESSAGE = "Error retrieving commit information"
# Substituted when the commits call fails; distinct from None, which means "no commits in window".
COMMIT_ERROR = CommitSummary(sha="", message=COMMIT_ERROR_MESSAGE, author=UNKNOWN_AUTHOR, date=None)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RepositoryEnricher:
    """
    Augments bare repository summaries with languages, last commit and pull request count.

    The three lookups for one repository run concurrently and fail independently: a failed
    lookup is logged and replaced by its sentinel value, leaving the other fields intact.

    With max_concurrency=None every repository of a batch is enriched at the same time
    (no backpressure besides the HTTP connector limit). Pass a number to bound it.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        max_concurrency: Optional[int] = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        self._github_client = github_client
        self._now = now
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def enrich_all(self, summaries: Iterable[RepositorySummary]) -> List[RepositoryRecord]:
        """
        Enriches every summary concurrently and waits for all of them.

        The result holds exactly one record per distinct repository id, in input order,
        including degraded records for repositories whose lookups failed.
        """
        unique: List[RepositorySummary] = []
        seen: Set[int] = set()
        for summary in summaries:
            if summary.id in seen:
                logger.warning(f"Skipping duplicate repository {summary.full_name} (id {summary.id}).")
                continue
            seen.add(summary.id)
            unique.append(summary)

        records = await asyncio.gather(*(self._enrich_isolated(summary) for summary in unique))
        return list(records)

    async def enrich(self, summary: RepositorySummary) -> RepositoryRecord:
        languages, last_commit, pull_request_count = await asyncio.gather(
            self._guarded(self._fetch_languages(summary), UNKNOWN_LANGUAGES, "languages", summary),
            self._guarded(self._fetch_last_commit(summary), COMMIT_ERROR, "last commit", summary),
            self._guarded(self._fetch_pull_request_count(summary), 0, "pull requests", summary),
        )

        return RepositoryRecord(
            id=summary.id,
            name=summary.name,
            description=summary.description,
            url=summary.url,
            stars=summary.stars,
            languages=languages,
            last_commit_date=last_commit.date if last_commit else None,
            last_commit_message=last_commit.message if last_commit else None,
            last_commit_author=last_commit.author if last_commit else None,
            pull_request_count=pull_request_count,
        )

    async def _enrich_isolated(self, summary: RepositorySummary) -> RepositoryRecord:
        try:
            if self._semaphore is None:
                return await self.enrich(summary)
            async with self._semaphore:
                return await self.enrich(summary)
        except Exception as e:
            logger.error(f"Error getting details for repository {summary.full_name}: {e}")
            return degraded_record(summary)

    async def _guarded(
        self, call: Awaitable[T], fallback: T, what: str, summary: RepositorySummary
    ) -> T:
        try:
            return await call
        except Exception as e:
            logger.error(f"Error retrieving {what} for repository {summary.full_name}: {e}")
            return fallback

    async def _fetch_languages(self, summary: RepositorySummary) -> str:
        languages = await self._github_client.get_languages(summary.owner, summary.name)
        return ", ".join(languages)

    async def _fetch_last_commit(self, summary: RepositorySummary) -> Optional[CommitSummary]:
        since = self._now() - COMMIT_WINDOW
        commits = await self._github_client.get_commits(summary.owner, summary.name, since=since)
        return commits[0] if commits else None

    async def _fetch_pull_request_count(self, summary: RepositorySummary) -> int:
        pull_requests = await self._github_client.get_pull_requests(summary.owner, summary.name)
        return len(pull_requests)


def degraded_record(summary: RepositorySummary) -> RepositoryRecord:
    """Record carrying the summary fields and every enrichment sentinel."""
    return RepositoryRecord(
        id=summary.id,
        name=summary.name,
        description=summary.description,
        url=summary.url,
        stars=summary.stars,
        languages=UNKNOWN_LANGUAGES,
        last_commit_date=None,
        last_commit_message=COMMIT_ERROR_MESSAGE,
        last_commit_author=UNKNOWN_AUTHOR,
        pull_request_count=0,
    )
