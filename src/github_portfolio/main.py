import logging
import sys
from datetime import timedelta

import uvicorn

from github_portfolio.api.app import create_app
from github_portfolio.application.activity_checker import ActivityChecker
from github_portfolio.application.portfolio_service import PortfolioService
from github_portfolio.application.repository_enricher import RepositoryEnricher
from github_portfolio.config import Settings, load_settings
from github_portfolio.domain.exceptions import ConfigurationException
from github_portfolio.infrastructure.cache import InMemoryCacheStore
from github_portfolio.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_app(settings: Settings):
    """Wires the GitHub client, cache and services into a FastAPI application."""
    github_client = GitHubRestClient(token=settings.github_token)
    cache = InMemoryCacheStore()

    enricher = RepositoryEnricher(
        github_client=github_client,
        max_concurrency=settings.max_concurrent_enrichments,
    )
    portfolio_service = PortfolioService(
        github_client=github_client,
        cache=cache,
        username=settings.github_username,
        enricher=enricher,
        cache_ttl=timedelta(minutes=settings.cache_ttl_minutes),
    )
    activity_checker = ActivityChecker(github_client=github_client, username=settings.github_username)

    return create_app(
        portfolio_service,
        activity_checker,
        github_client=github_client,
        enable_docs=settings.docs_enabled,
    )


def main():
    configure_logging()

    try:
        settings = load_settings()
    except ConfigurationException as e:
        logger.error(str(e))
        sys.exit(1)

    if not settings.github_token:
        logger.warning("GITHUB_TOKEN is not set; GitHub requests will be unauthenticated and heavily rate limited.")

    app = build_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
