"""API routes for weather endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from loguru import logger

from ..models.weather import ForecastResponse
from ..services.weather import WeatherOrchestrator
from .dependencies import get_orchestrator

router = APIRouter()


@router.get(
    "/forecast",
    response_model=ForecastResponse,
    summary="Get current weather and daily forecast for an address",
    description="Geocode a free-text address and return current conditions plus a daily forecast",
    responses={
        200: {
            "description": "Current conditions and forecast",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "data": {
                            "current": {"temperature": 22.5, "humidity": 65, "description": "clear sky"},
                            "forecast": {"location": {"name": "New York"}, "dailyForecasts": []},
                            "cached": False,
                            "location": {"latitude": 40.7128, "longitude": -74.006},
                        },
                        "meta": {
                            "address": "New York, NY",
                            "units": "metric",
                            "cached": False,
                            "timestamp": "2026-01-11T10:12:54Z",
                        },
                    }
                }
            },
        },
        400: {
            "description": "Missing or invalid parameters, or address not found",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": "Address parameter is required",
                        "timestamp": "2026-01-11T10:12:54Z",
                    }
                }
            },
        },
        500: {
            "description": "Geocoding or weather provider failure",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": "Unable to retrieve weather data: Network error: connection refused",
                        "timestamp": "2026-01-11T10:12:54Z",
                    }
                }
            },
        },
    },
)
async def get_forecast(
    orchestrator: Annotated[WeatherOrchestrator, Depends(get_orchestrator)],
    address: Annotated[
        str | None,
        Query(
            description="Free-text address, e.g. 'New York, NY'",
            examples=["New York, NY"],
        ),
    ] = None,
    units: Annotated[
        str | None,
        Query(
            description="Unit system: metric (default), imperial or kelvin",
            examples=["metric"],
        ),
    ] = None,
) -> ForecastResponse:
    """Get weather for an address.

    Parameters are validated by the orchestrator rather than FastAPI, so
    failures use the same error body as every other lookup failure.

    Raises:
        LookupFailure: Rendered as 400 or 500 by the application's handler

    Example:
        >>> # GET /forecast?address=New%20York,%20NY&units=metric
        >>> # Returns: {"success": true, "data": {...}, "meta": {...}}
    """
    # Address is not logged, it may identify the user
    logger.info("Forecast request received", units=units)

    return await orchestrator.get_forecast(address, units)
