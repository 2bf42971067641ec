import logging
from datetime import timedelta
from typing import List, Optional

from github_portfolio.application.query_builder import build_search_query
from github_portfolio.application.repository_enricher import RepositoryEnricher
from github_portfolio.domain.exceptions import AggregationException
from github_portfolio.domain.interfaces import ICacheStore, IGitHubClient
from github_portfolio.domain.models import RepositoryRecord, SearchFilter

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = timedelta(minutes=30)
SEARCH_PAGE_SIZE = 20
SEARCH_SORT = "stars"
SEARCH_ORDER = "desc"


class PortfolioService:
    """
    Application service that builds enriched repository lists.

    The portfolio of the configured user is cached as a whole; searches always go upstream.
    Failures of the listing or search call itself are raised as AggregationException,
    while failures enriching a single repository only degrade that repository's record.
    """

    def __init__(
            self,
            github_client: IGitHubClient,
            cache: ICacheStore,
            username: str,
            enricher: Optional[RepositoryEnricher] = None,
            cache_ttl: timedelta = DEFAULT_CACHE_TTL,
    ):
        self.github_client = github_client
        self.cache = cache
        self.username = username
        self.enricher = enricher or RepositoryEnricher(github_client)
        self.cache_ttl = cache_ttl

    @property
    def cache_key(self) -> str:
        return f"portfolio_{self.username}"

    async def get_portfolio(self) -> List[RepositoryRecord]:
        """
        Returns every repository of the configured user, enriched.

        Served from cache while the previous result is younger than the cache TTL.
        """
        cached, found = self.cache.try_get(self.cache_key)
        if found:
            logger.info(f"Retrieved portfolio from cache for user {self.username}.")
            return list(cached)

        try:
            summaries = await self.github_client.list_repositories_for_user(self.username)
        except Exception as e:
            logger.error(f"Error retrieving portfolio for user {self.username}: {e}")
            raise AggregationException(context=f"user={self.username}") from e

        records = await self.enricher.enrich_all(summaries)

        # Cached as a tuple so callers mutating their list cannot alter the cache
        self.cache.set(self.cache_key, tuple(records), self.cache_ttl)
        logger.info(f"Retrieved portfolio of {len(records)} repositories from GitHub API for user {self.username}.")
        return records

    def invalidate_portfolio(self) -> None:
        """Drops the cached portfolio so the next call goes upstream."""
        self.cache.remove(self.cache_key)
        logger.info(f"Invalidated cached portfolio for user {self.username}.")

    async def search_repositories(self, search_filter: SearchFilter) -> List[RepositoryRecord]:
        """
        Searches GitHub for repositories matching the filter, most starred first.

        An empty filter returns an empty list without contacting GitHub.
        Only the first page of SEARCH_PAGE_SIZE results is fetched.
        """
        if search_filter.is_empty:
            return []

        query = build_search_query(search_filter)

        try:
            summaries = await self.github_client.search_repositories(
                query, sort=SEARCH_SORT, order=SEARCH_ORDER, per_page=SEARCH_PAGE_SIZE
            )
        except Exception as e:
            logger.error(f"Error searching repositories for query '{query}': {e}")
            raise AggregationException(context=f"query={query}") from e

        records = await self.enricher.enrich_all(summaries)

        logger.info(f"Search '{query}' returned {len(records)} repositories.")
        return records
