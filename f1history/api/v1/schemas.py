"""
Pydantic schemas for API responses.

Seasons and weekends are returned as the domain models themselves; the
schemas here cover the remaining envelopes.
"""

from typing import List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response schema for the health check."""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")


class SeasonsResponse(BaseModel):
    """Response schema for the list of available seasons."""

    seasons: List[int] = Field(..., description="Season years, newest first")

    model_config = {
        "json_schema_extra": {
            "example": {"seasons": [2026, 2025, 2024]},
        }
    }


class ErrorResponse(BaseModel):
    """Response schema for handled errors."""

    detail: str = Field(..., description="Human readable error")
    code: str = Field(..., description="Machine readable error code")

    model_config = {
        "json_schema_extra": {
            "example": {
                "detail": "Historical F1 data service temporarily unavailable",
                "code": "UPSTREAM_UNREACHABLE",
            }
        }
    }
