"""
Domain model for historical F1 data.

Season -> Weekend -> Session -> Standing. Every entity is frozen once built;
sequences are stored as tuples.
"""

from datetime import time
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, Field, field_serializer

MIDNIGHT = time(0, 0, 0)


class SessionType(str, Enum):
    """Kind of on-track activity within a weekend."""

    Practice1 = "Practice1"
    Practice2 = "Practice2"
    Practice3 = "Practice3"
    Qualifying = "Qualifying"
    Sprint = "Sprint"
    Race = "Race"

    def __str__(self) -> str:
        return self.name


class DomainModel(BaseModel):
    model_config = {"frozen": True}


class Driver(DomainModel):
    id: str = Field(..., description="Provider's stable driver identifier")
    first_name: str
    last_name: str
    screen_name: str = Field(..., description="Three-letter timing screen code")


class Constructor(DomainModel):
    id: str
    name: str


class Circuit(DomainModel):
    id: str
    name: str
    latitude: float = 0.0
    longitude: float = 0.0
    locality: str
    country: str


class Standing(DomainModel):
    """One competitor's classification within a session.

    ``position`` is 0 when the provider value could not be read and
    ``lap_time`` is midnight when no usable time exists.
    """

    driver: Driver
    constructor: Constructor
    position: int = Field(..., ge=0)
    lap_time: time = MIDNIGHT

    @field_serializer("lap_time", when_used="json")
    def serialize_lap_time(self, value: time) -> str:
        return value.isoformat(timespec="milliseconds")


class Session(DomainModel):
    type: SessionType
    finished: bool = False
    standings: Tuple[Standing, ...] = ()


class Weekend(DomainModel):
    name: str
    circuit: Circuit
    sessions: Tuple[Session, ...] = ()


class Season(DomainModel):
    year: int
    weekends: Tuple[Weekend, ...] = ()
