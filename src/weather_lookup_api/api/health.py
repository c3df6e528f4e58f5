"""Health check endpoints."""

import random
import time
from datetime import datetime, timezone
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from ..core.errors import WeatherUpstreamError
from .dependencies import Services, get_services

router = APIRouter()

# Reference location used to probe the weather provider
PROBE_ADDRESS = "New York, NY"
PROBE_LATITUDE = 40.7128
PROBE_LONGITUDE = -74.0060

ServiceState = Literal["up", "down"]


class ServiceStatuses(BaseModel):
    geocoding: ServiceState
    weather_api: ServiceState
    cache: ServiceState


class HealthResponse(BaseModel):
    """Dependency health report.

    Example:
        >>> response = HealthResponse(
        ...     status="healthy",
        ...     services=ServiceStatuses(geocoding="up", weather_api="up", cache="up"),
        ...     timestamp=datetime(2026, 1, 11, tzinfo=timezone.utc),
        ... )
        >>> response.status
        'healthy'
    """

    status: Literal["healthy", "unhealthy"]
    services: ServiceStatuses
    timestamp: datetime


class HealthErrorResponse(BaseModel):
    status: Literal["unhealthy"] = "unhealthy"
    error: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    status: str


async def _check_weather(services: Services) -> bool:
    try:
        await services.weather.current_conditions(PROBE_LATITUDE, PROBE_LONGITUDE, "metric")
    except WeatherUpstreamError as e:
        logger.warning("Weather provider health check failed", error=e.message)
        return False
    except Exception as e:
        logger.warning("Weather provider health check raised", error=str(e))
        return False
    return True


async def _check_cache(services: Services) -> bool:
    key = f"health_check:{int(time.time())}"
    value = f"test_{random.randint(0, 999)}".encode()
    try:
        await services.cache.write(key, value, 60)
        return await services.cache.read(key) == value
    except Exception as e:
        logger.warning("Cache health check failed", error=str(e))
        return False


def _state(up: bool) -> ServiceState:
    return "up" if up else "down"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Dependency health",
    description="Check geocoding, weather provider and cache health",
    responses={
        200: {
            "description": "Health report (status may be healthy or unhealthy)",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "services": {"geocoding": "up", "weather_api": "up", "cache": "up"},
                        "timestamp": "2026-01-11T10:12:54Z",
                    }
                }
            },
        },
        503: {
            "description": "The checks themselves failed",
            "model": HealthErrorResponse,
        },
    },
)
async def health_check(
    services: Annotated[Services, Depends(get_services)],
):
    """Report whether each dependency is usable.

    The weather check performs a real (cached) current-conditions lookup
    for New York; the geocoding check only validates a known address
    locally. A check that raises marks only its own dependency down; an
    exception outside the individual checks yields 503.

    Example:
        >>> # GET /health
        >>> # Returns: {"status": "healthy", "services": {...}, "timestamp": "..."}
    """
    try:
        geocoding_up = services.geocoder.is_valid_address(PROBE_ADDRESS)
        weather_up = await _check_weather(services)
        cache_up = await _check_cache(services)
    except Exception as e:
        logger.exception("Health check failed")
        body = HealthErrorResponse(error=str(e), timestamp=datetime.now(timezone.utc))
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))

    healthy = geocoding_up and weather_up and cache_up
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        services=ServiceStatuses(
            geocoding=_state(geocoding_up),
            weather_api=_state(weather_up),
            cache=_state(cache_up),
        ),
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Check if the application is ready to serve requests",
    responses={
        200: {
            "description": "Application is ready",
            "content": {"application/json": {"example": {"status": "ok"}}},
        },
        503: {
            "description": "Services not initialized yet",
            "content": {"application/json": {"example": {"status": "starting"}}},
        },
    },
)
async def readiness_check(request: Request):
    """Readiness probe for Kubernetes.

    Returns 200 once the service graph has been built during startup.
    Does NOT probe upstream APIs, to avoid cascading failures.
    """
    if getattr(request.app.state, "services", None) is None:
        return JSONResponse(status_code=503, content={"status": "starting"})
    return ReadinessResponse(status="ok")
