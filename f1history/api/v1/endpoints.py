"""
API v1 endpoints for the F1 history API.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Path, Request

from f1history.api.v1.schemas import ErrorResponse, HealthResponse, SeasonsResponse
from f1history.core.config import settings
from f1history.models.domain import Season, Weekend
from f1history.services.history_service import HistoryService

logger = structlog.get_logger()

router = APIRouter()

ERROR_RESPONSES = {
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_history_service(request: Request) -> HistoryService:
    """Dependency to get the application's history service."""
    return request.app.state.history_service


@router.get("/health", response_model=HealthResponse)
async def health_check() -> Any:
    """Health check endpoint."""
    return {"status": "healthy", "service": "f1-history-api"}


@router.get("/seasons", response_model=SeasonsResponse)
async def list_seasons(
    history_service: HistoryService = Depends(get_history_service),
) -> Any:
    """List every season covered by the provider."""
    return {"seasons": history_service.get_available_seasons()}


@router.get("/seasons/{year}", response_model=Season, responses=ERROR_RESPONSES)
async def get_season(
    year: int = Path(..., ge=settings.earliest_season, description="F1 season year"),
    history_service: HistoryService = Depends(get_history_service),
) -> Any:
    """Get every weekend of a season with qualifying and race standings."""
    logger.info("Fetching season", year=year)
    season = await history_service.get_season(year)
    logger.info("Season fetched", year=year, weekends=len(season.weekends))
    return season


@router.get(
    "/seasons/{year}/rounds/{round}",
    response_model=Weekend,
    responses=ERROR_RESPONSES,
)
async def get_weekend(
    year: int = Path(..., ge=settings.earliest_season, description="F1 season year"),
    round: int = Path(..., ge=1, description="Round number within the season"),
    history_service: HistoryService = Depends(get_history_service),
) -> Any:
    """Get one weekend with qualifying and race standings."""
    logger.info("Fetching weekend", year=year, round=round)
    return await history_service.get_weekend(year, round)
