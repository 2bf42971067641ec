"""HTTP routes: thin controllers that delegate to the application services."""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from github_portfolio.application.activity_checker import ActivityChecker
from github_portfolio.application.portfolio_service import PortfolioService
from github_portfolio.domain.models import RepositoryRecord, SearchFilter

logger = logging.getLogger(__name__)

router = APIRouter()


class ActivityResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_activity: bool


def get_portfolio_service(request: Request) -> PortfolioService:
    return request.app.state.portfolio_service


def get_activity_checker(request: Request) -> ActivityChecker:
    return request.app.state.activity_checker


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get(
    "/portfolio",
    response_model=List[RepositoryRecord],
    responses={500: {"description": "Repositories of the configured user could not be listed"}},
)
async def get_portfolio(service: PortfolioService = Depends(get_portfolio_service)):
    """Enriched repositories of the configured GitHub user."""
    try:
        return await service.get_portfolio()
    except Exception:
        logger.exception("Error getting portfolio")
        raise HTTPException(status_code=500, detail="An error occurred while getting the portfolio")


@router.get(
    "/search",
    response_model=List[RepositoryRecord],
    responses={500: {"description": "The GitHub search call failed"}},
)
async def search_repositories(
    repository_name: Optional[str] = Query(default=None, alias="repositoryName", max_length=256),
    language: Optional[str] = Query(default=None, max_length=64),
    username: Optional[str] = Query(default=None, max_length=39),
    # Validated but not forwarded: the search always returns the first page of 20 results.
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=30, ge=1, le=100, alias="perPage"),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Searches GitHub repositories by name fragment, language and owner, most starred first."""
    search_filter = SearchFilter(repository_name=repository_name, language=language, username=username)
    try:
        return await service.search_repositories(search_filter)
    except Exception:
        logger.exception("Error searching repositories")
        raise HTTPException(status_code=500, detail="An error occurred while searching repositories")


@router.get("/activity", response_model=ActivityResponse)
async def get_activity(
    since: datetime = Query(..., description="ISO-8601 instant; naive values are taken as UTC"),
    checker: ActivityChecker = Depends(get_activity_checker),
):
    """Whether the configured user produced any GitHub event after `since`."""
    has_activity = await checker.has_activity_since(since)
    return ActivityResponse(has_activity=has_activity)
