import aiohttp
import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from github_portfolio.domain.exceptions import GitHubApiException, RateLimitExceededException
from github_portfolio.domain.interfaces import IGitHubClient
from github_portfolio.domain.models import (
    CommitSummary,
    LanguageMap,
    PullRequestSummary,
    RepositorySummary,
    UserEvent,
)
from github_portfolio.infrastructure.acl import GitHubTranslator

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
# Only the first page is ever requested; 100 is the REST maximum.
MAX_PAGE_SIZE = 100
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=60, connect=10)
MAX_RETRIES = 5
# Limit concurrent connections to avoid overwhelming GitHub's servers
CONNECTOR_LIMIT = 20
RETRYABLE_STATUSES = {500, 502, 503, 504}
DEFAULT_RETRY_AFTER = 60


def _format_since(since: datetime) -> str:
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return since.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_retry_after(raw_retry_after: Optional[str]) -> int:
    # Retry-After may also be an HTTP date; fall back to the default wait for anything but seconds
    try:
        return int(raw_retry_after)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER


def _format_reset(raw_reset: Optional[str]) -> Optional[str]:
    if not raw_reset:
        return None
    try:
        return datetime.fromtimestamp(int(raw_reset), tz=timezone.utc).isoformat()
    except ValueError:
        return raw_reset


class GitHubRestClient(IGitHubClient):
    """
    Client for the GitHub REST API.
    Handles authentication, transient-fault retries, and rate limit detection.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        api_url: str = API_URL,
    ):
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "github-portfolio",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        self.api_url = api_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(limit=CONNECTOR_LIMIT),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Performs a GET request and returns the decoded JSON body.

        Retries server errors, network errors and secondary rate limits (Retry-After, else 60s).
        Raises RateLimitExceededException when the primary quota is exhausted and
        GitHubApiException for any other non-success status.
        """
        url = f"{self.api_url}{path}"
        session = self._get_session()

        for attempt in range(MAX_RETRIES):
            try:
                async with session.get(url, params=params, headers=self.headers, timeout=REQUEST_TIMEOUT) as response:
                    if response.status in (403, 429):
                        retry_after = response.headers.get('Retry-After')
                        if response.headers.get('X-RateLimit-Remaining') == '0' and not retry_after:
                            raise RateLimitExceededException(
                                reset_at=_format_reset(response.headers.get('X-RateLimit-Reset'))
                            )
                        # Secondary rate limit (abuse detection)
                        sleep_time = _parse_retry_after(retry_after)
                        logger.warning(f"Secondary rate limit ({response.status}) on {path}. Sleeping {sleep_time}s...")
                        await asyncio.sleep(sleep_time)
                        continue

                    if response.status in RETRYABLE_STATUSES:
                        sleep_time = (2 ** attempt) + random.uniform(0, 1)
                        logger.warning(
                            f"Server error ({response.status}) on {path}, "
                            f"retrying in {sleep_time:.1f}s (attempt {attempt + 1}/{MAX_RETRIES})..."
                        )
                        await asyncio.sleep(sleep_time)
                        continue

                    if response.status >= 400:
                        raise GitHubApiException(status=response.status, url=url)

                    return await response.json()

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                sleep_time = (2 ** attempt) + random.uniform(0, 1)
                logger.warning(
                    f"Request to {path} failed (attempt {attempt + 1}/{MAX_RETRIES}): {e}. "
                    f"Retrying in {sleep_time:.1f}s..."
                )
                await asyncio.sleep(sleep_time)

        raise GitHubApiException(status=0, url=url, message=f"Request failed after {MAX_RETRIES} attempts.")

    async def list_repositories_for_user(self, username: str) -> List[RepositorySummary]:
        raw_repos = await self._get_json(
            f"/users/{username}/repos",
            params={"type": "owner", "per_page": MAX_PAGE_SIZE},
        )
        return [GitHubTranslator.to_repository(repo) for repo in raw_repos if repo]

    async def search_repositories(
        self, query: str, sort: str = "stars", order: str = "desc", per_page: int = 20
    ) -> List[RepositorySummary]:
        data = await self._get_json(
            "/search/repositories",
            params={"q": query, "sort": sort, "order": order, "per_page": per_page},
        )
        items = data.get('items', []) if data else []
        return [GitHubTranslator.to_repository(repo) for repo in items if repo]

    async def get_languages(self, owner: str, repo: str) -> LanguageMap:
        data = await self._get_json(f"/repos/{owner}/{repo}/languages")
        return dict(data or {})

    async def get_commits(
        self, owner: str, repo: str, since: Optional[datetime] = None
    ) -> List[CommitSummary]:
        params: Dict[str, Any] = {}
        if since is not None:
            params["since"] = _format_since(since)
        try:
            raw_commits = await self._get_json(f"/repos/{owner}/{repo}/commits", params=params or None)
        except GitHubApiException as e:
            # GitHub answers 409 Conflict for a repository without any commits
            if e.status == 409:
                return []
            raise
        return [GitHubTranslator.to_commit(commit) for commit in raw_commits if commit]

    async def get_pull_requests(self, owner: str, repo: str) -> List[PullRequestSummary]:
        raw_pulls = await self._get_json(
            f"/repos/{owner}/{repo}/pulls",
            params={"state": "open", "per_page": MAX_PAGE_SIZE},
        )
        return [GitHubTranslator.to_pull_request(pull) for pull in raw_pulls if pull]

    async def get_user_events(self, username: str) -> List[UserEvent]:
        raw_events = await self._get_json(
            f"/users/{username}/events",
            params={"per_page": MAX_PAGE_SIZE},
        )
        return [GitHubTranslator.to_event(event) for event in raw_events if event]
