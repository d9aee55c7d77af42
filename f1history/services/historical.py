"""
Provider-level weekends and season index.

An ``ErgastWeekend`` is a round whose identity (name and circuit) has been
loaded. Its results are fetched on demand; identity must load or the weekend
cannot be built at all.
"""

from typing import List, Optional

import structlog

from f1history.core.exceptions import JsonDeserializationError, RoundNotFoundError
from f1history.external.ergast_client import ErgastClient
from f1history.external.schemas import ErgastCircuit, ErgastRace, QualiResult, RaceResult

logger = structlog.get_logger()


class ErgastWeekend:
    """One round of a season as described by the provider."""

    def __init__(
        self,
        client: ErgastClient,
        year: int,
        round: int,
        name: str,
        circuit: ErgastCircuit,
    ):
        self.client = client
        self.year = year
        self.round = round
        self.name = name
        self.circuit = circuit

    @classmethod
    async def load(cls, client: ErgastClient, year: int, round: int) -> "ErgastWeekend":
        """
        Load the identity of a round.

        Args:
            client: Ergast client
            year: Season year
            round: Round number within the season

        Returns:
            Provider weekend with name and circuit

        Raises:
            ApiNotReachableError: If the request fails
            ResourceNotFoundError: If the provider has no such resource
            RoundNotFoundError: If the provider lists no race for the round
            JsonDeserializationError: If the round is malformed
        """
        path = f"{year}/{round}"
        race = await _first_race(client, path)
        if race is None:
            raise RoundNotFoundError(year, round)
        if race.circuit is None:
            raise JsonDeserializationError(f"No circuit listed for {path}")

        return cls(client, year, round, race.name, race.circuit)

    async def race_results(self) -> List[RaceResult]:
        """Fetch the race classification, empty when the provider lists none."""
        race = await _first_race(self.client, f"{self.year}/{self.round}/results")
        return race.results if race is not None else []

    async def qualifying_results(self) -> List[QualiResult]:
        """Fetch the qualifying classification, empty when the provider lists none."""
        race = await _first_race(self.client, f"{self.year}/{self.round}/qualifying")
        return race.qualifying_results if race is not None else []

    def __repr__(self) -> str:
        return f"ErgastWeekend(year={self.year}, round={self.round}, name={self.name!r})"


async def _first_race(client: ErgastClient, path: str) -> Optional[ErgastRace]:
    races = (await client.get_payload(path)).race_table.races
    return races[0] if races else None


async def get_season(client: ErgastClient, year: int) -> List[ErgastWeekend]:
    """
    Load every round of a season, one after another.

    Any round failing to load aborts the whole season.

    Args:
        client: Ergast client
        year: Season year

    Returns:
        Provider weekends in the order the provider lists them

    Raises:
        ApiNotReachableError: If a request fails
        JsonDeserializationError: If a payload is malformed
    """
    payload = await client.get_payload(str(year))
    races = payload.race_table.races
    logger.info("Loading season rounds", year=year, rounds=len(races))

    weekends = []
    for race in races:
        weekends.append(await ErgastWeekend.load(client, race.season, race.round))
    return weekends
