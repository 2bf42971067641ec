import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from github_portfolio.api.routes import router
from github_portfolio.application.activity_checker import ActivityChecker
from github_portfolio.application.portfolio_service import PortfolioService
from github_portfolio.domain.interfaces import IGitHubClient

logger = logging.getLogger(__name__)


def create_app(
    portfolio_service: PortfolioService,
    activity_checker: ActivityChecker,
    github_client: Optional[IGitHubClient] = None,
    enable_docs: bool = False,
) -> FastAPI:
    """
    Builds the FastAPI application around already constructed services.

    When github_client is given, its connections are closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Serving GitHub portfolio of user {portfolio_service.username}.")
        yield
        if github_client is not None:
            await github_client.close()

    app = FastAPI(
        title="GitHub Portfolio API",
        version="1.0.0",
        description="API for retrieving GitHub portfolio information",
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.portfolio_service = portfolio_service
    app.state.activity_checker = activity_checker
    app.include_router(router)

    return app
