"""
History service for historical F1 data.

This module provides the public entry points that turn a year, or a year and
round, into fully converted domain objects.
"""

from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import AsyncIterator, List, Optional

import structlog
from async_lru import alru_cache

from f1history.core.config import settings
from f1history.external.ergast_client import ErgastClient
from f1history.models.domain import Season, Weekend
from f1history.services import historical
from f1history.services.conversion import weekend_from_provider

logger = structlog.get_logger()


def get_available_seasons(today: Optional[date] = None) -> List[int]:
    """
    List every season the provider covers, newest first.

    Args:
        today: Reference date, defaults to the current UTC date

    Returns:
        Years from the current one down to the earliest season
    """
    current_year = (today or datetime.now(timezone.utc).date()).year
    return list(range(current_year, settings.earliest_season - 1, -1))


@asynccontextmanager
async def _client_scope(client: Optional[ErgastClient]) -> AsyncIterator[ErgastClient]:
    if client is not None:
        yield client
        return
    async with ErgastClient() as scoped:
        yield scoped


async def fetch_weekend(
    year: int, round: int, client: Optional[ErgastClient] = None
) -> Weekend:
    """
    Fetch one weekend with its qualifying and race sessions.

    Args:
        year: Season year
        round: Round number
        client: Client to use; a temporary one is opened when omitted

    Returns:
        Converted weekend

    Raises:
        ApiNotReachableError: If the round identity cannot be fetched
        JsonDeserializationError: If the round identity is malformed
    """
    async with _client_scope(client) as active:
        weekend = await historical.ErgastWeekend.load(active, year, round)
        return await weekend_from_provider(weekend)


async def fetch_season(year: int, client: Optional[ErgastClient] = None) -> Season:
    """
    Fetch every weekend of a season.

    Rounds are loaded sequentially and a failing round aborts the season.

    Args:
        year: Season year
        client: Client to use; a temporary one is opened when omitted

    Returns:
        Season with weekends ordered by round

    Raises:
        ApiNotReachableError: If the index or a round identity cannot be fetched
        JsonDeserializationError: If a payload is malformed
    """
    async with _client_scope(client) as active:
        provider_weekends = await historical.get_season(active, year)
        provider_weekends.sort(key=lambda w: w.round)

        weekends = []
        for provider_weekend in provider_weekends:
            weekends.append(await weekend_from_provider(provider_weekend))

    logger.info("Fetched season", year=year, weekends=len(weekends))
    return Season(year=year, weekends=tuple(weekends))


class HistoryService:
    """Service class memoizing converted seasons and weekends over one client."""

    def __init__(self, client: Optional[ErgastClient] = None):
        """Initialize the history service with its Ergast client."""
        self.client = client if client is not None else ErgastClient()

    async def close(self) -> None:
        await self.client.close()

    def get_available_seasons(self) -> List[int]:
        return get_available_seasons()

    @alru_cache(maxsize=settings.season_cache_size)
    async def get_season(self, year: int) -> Season:
        """
        Get a converted season.

        Args:
            year: Season year

        Returns:
            Season with all weekends
        """
        logger.info("Fetching season", year=year)
        return await fetch_season(year, self.client)

    @alru_cache(maxsize=settings.season_cache_size * 4)
    async def get_weekend(self, year: int, round: int) -> Weekend:
        """
        Get a converted weekend.

        Args:
            year: Season year
            round: Round number

        Returns:
            Weekend with qualifying and race sessions
        """
        logger.info("Fetching weekend", year=year, round=round)
        return await fetch_weekend(year, round, self.client)
