"""
Conversion of Ergast provider records into the domain model.

Every mapping here is total: unreadable numbers become zero and unusable
times become midnight, so one bad field never discards a whole standing.
"""

from typing import Iterable

import structlog

from f1history.core.exceptions import F1HistoryError
from f1history.external.schemas import (
    ErgastCircuit,
    ErgastConstructor,
    ErgastDriver,
    QualiResult,
    RaceResult,
)
from f1history.models.domain import (
    Circuit,
    Constructor,
    Driver,
    Session,
    SessionType,
    Standing,
    Weekend,
)
from f1history.services.historical import ErgastWeekend
from f1history.services.time_parser import lap_time_or_midnight, select_qualifying_time

logger = structlog.get_logger()


def parse_position(raw: str) -> int:
    """Read a provider position, 0 when it is not an unsigned integer."""
    if not raw.isdecimal():
        return 0
    try:
        return int(raw)
    except ValueError:
        return 0


def parse_coordinate(raw: str) -> float:
    """Read a provider latitude or longitude, 0.0 when it is not a number."""
    try:
        return float(raw)
    except ValueError:
        return 0.0


def driver_from_record(driver: ErgastDriver) -> Driver:
    return Driver(
        id=driver.driver_id,
        first_name=driver.given_name,
        last_name=driver.family_name,
        screen_name=driver.code,
    )


def constructor_from_record(constructor: ErgastConstructor) -> Constructor:
    return Constructor(id=constructor.constructor_id, name=constructor.name)


def circuit_from_record(circuit: ErgastCircuit) -> Circuit:
    return Circuit(
        id=circuit.id,
        name=circuit.name,
        latitude=parse_coordinate(circuit.location.lat),
        longitude=parse_coordinate(circuit.location.long),
        locality=circuit.location.locality,
        country=circuit.location.country,
    )


def standing_from_race_result(result: RaceResult) -> Standing:
    """A race standing carries the driver's fastest lap of the race."""
    return Standing(
        driver=driver_from_record(result.driver),
        constructor=constructor_from_record(result.constructor),
        position=parse_position(result.position),
        lap_time=lap_time_or_midnight(result.fastest_lap.time.time),
    )


def standing_from_quali_result(result: QualiResult) -> Standing:
    """A qualifying standing carries the best-available segment time."""
    q_time = select_qualifying_time(result.q1_time, result.q2_time, result.q3_time)
    return Standing(
        driver=driver_from_record(result.driver),
        constructor=constructor_from_record(result.constructor),
        position=parse_position(result.position),
        lap_time=lap_time_or_midnight(q_time),
    )


def race_session(results: Iterable[RaceResult]) -> Session:
    # Historical data is always complete.
    return Session(
        type=SessionType.Race,
        finished=True,
        standings=tuple(standing_from_race_result(r) for r in results),
    )


def qualifying_session(results: Iterable[QualiResult]) -> Session:
    return Session(
        type=SessionType.Qualifying,
        finished=True,
        standings=tuple(standing_from_quali_result(r) for r in results),
    )


async def weekend_from_provider(weekend: ErgastWeekend) -> Weekend:
    """
    Build a domain weekend with its qualifying and race sessions.

    A weekend without results is still informative, so a failed qualifying or
    race fetch yields an empty session instead of an error.

    Args:
        weekend: Provider weekend whose identity has already been loaded

    Returns:
        Weekend with exactly two sessions, qualifying then race
    """
    try:
        quali_results = await weekend.qualifying_results()
    except F1HistoryError as e:
        logger.warning(
            "Qualifying results unavailable, using empty session",
            year=weekend.year,
            round=weekend.round,
            error=e.message,
            code=e.code,
        )
        quali_results = []

    try:
        race_results = await weekend.race_results()
    except F1HistoryError as e:
        logger.warning(
            "Race results unavailable, using empty session",
            year=weekend.year,
            round=weekend.round,
            error=e.message,
            code=e.code,
        )
        race_results = []

    return Weekend(
        name=weekend.name,
        circuit=circuit_from_record(weekend.circuit),
        sessions=(qualifying_session(quali_results), race_session(race_results)),
    )
