"""
Pydantic models mirroring the Ergast response schema.

Field names follow Python conventions; aliases carry the provider's names.
Everything below the ``MRData`` envelope is decoded in one pass with
``ErgastPayload.model_validate``.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ErgastRecord(BaseModel):
    """Base for provider records: populated by alias, extra keys ignored."""

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class ErgastDriver(ErgastRecord):
    driver_id: str = Field(..., alias="driverId")
    permanent_number: str = Field(default="", alias="permanentNumber")
    code: str = Field(default="")
    given_name: str = Field(..., alias="givenName")
    family_name: str = Field(..., alias="familyName")
    date_of_birth: str = Field(default="", alias="dateOfBirth")
    nationality: str = Field(default="")


class ErgastConstructor(ErgastRecord):
    constructor_id: str = Field(..., alias="constructorId")
    name: str
    nationality: str = Field(default="")


class ErgastLocation(ErgastRecord):
    lat: str
    long: str
    locality: str
    country: str


class ErgastCircuit(ErgastRecord):
    id: str = Field(..., alias="circuitId")
    name: str = Field(..., alias="circuitName")
    location: ErgastLocation = Field(..., alias="Location")


class LapTime(ErgastRecord):
    time: str = ""


class FastestLap(ErgastRecord):
    time: LapTime = Field(default_factory=LapTime, alias="Time")


class QualiResult(ErgastRecord):
    """One row of a qualifying classification."""

    number: str
    position: str
    driver: ErgastDriver = Field(..., alias="Driver")
    constructor: ErgastConstructor = Field(..., alias="Constructor")
    q1_time: str = Field(default="", alias="Q1")
    q2_time: str = Field(default="", alias="Q2")
    q3_time: str = Field(default="", alias="Q3")


class RaceResult(ErgastRecord):
    """One row of a race classification."""

    number: str
    position: str
    driver: ErgastDriver = Field(..., alias="Driver")
    constructor: ErgastConstructor = Field(..., alias="Constructor")
    fastest_lap: FastestLap = Field(default_factory=FastestLap, alias="FastestLap")


class ErgastRace(ErgastRecord):
    season: int
    round: int
    name: str = Field(..., alias="raceName")
    circuit: Optional[ErgastCircuit] = Field(default=None, alias="Circuit")
    results: List[RaceResult] = Field(default_factory=list, alias="Results")
    qualifying_results: List[QualiResult] = Field(
        default_factory=list, alias="QualifyingResults"
    )


class RaceTable(ErgastRecord):
    races: List[ErgastRace] = Field(default_factory=list, alias="Races")


class ErgastPayload(ErgastRecord):
    """The object found under the ``MRData`` envelope key."""

    race_table: RaceTable = Field(..., alias="RaceTable")
