"""Service wiring and FastAPI dependencies."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from ..core.cache import CacheStore
from ..core.config import Settings
from ..services.demo import DemoWeatherClient
from ..services.geocoding import GeocodingClient, NominatimProvider
from ..services.openweather import OpenWeatherClient
from ..services.provider import WeatherProvider
from ..services.weather import WeatherOrchestrator


@dataclass
class Services:
    """Per-process service graph sharing one CacheStore."""

    cache: CacheStore
    geocoder: GeocodingClient
    weather: WeatherProvider
    orchestrator: WeatherOrchestrator

    async def aclose(self) -> None:
        await self.geocoder.provider.aclose()
        await self.weather.aclose()


def create_weather_provider(settings: Settings, cache: CacheStore) -> WeatherProvider:
    """Instantiate the weather provider selected by WEATHER_PROVIDER.

    Example:
        >>> from weather_lookup_api.core.config import Settings
        >>> provider = create_weather_provider(Settings(WEATHER_PROVIDER="demo"), CacheStore())
        >>> provider.key_prefix
        'demo_weather'
    """
    if settings.WEATHER_PROVIDER == "demo":
        return DemoWeatherClient(cache, cache_ttl=settings.cache_ttl_seconds)

    return OpenWeatherClient(
        cache,
        api_key=settings.OPENWEATHER_API_KEY,
        base_url=settings.OPENWEATHER_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT,
        cache_ttl=settings.cache_ttl_seconds,
    )


def build_services(settings: Settings) -> Services:
    """Build the service graph from settings.

    The cache is created here and passed explicitly to every client.
    """
    cache = CacheStore(max_size=settings.CACHE_MAX_SIZE)
    geocoder = GeocodingClient(
        NominatimProvider(
            base_url=settings.GEOCODING_BASE_URL,
            user_agent=settings.GEOCODING_USER_AGENT,
            timeout=settings.UPSTREAM_TIMEOUT,
        ),
        cache,
        cache_ttl=settings.GEOCODING_CACHE_TTL,
    )
    weather = create_weather_provider(settings, cache)
    return Services(
        cache=cache,
        geocoder=geocoder,
        weather=weather,
        orchestrator=WeatherOrchestrator(geocoder, weather, cache),
    )


def get_services(request: Request) -> Services:
    """Return the service graph created during application startup.

    Raises:
        HTTPException: 503 if startup has not completed
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=503,
            detail={"error": "Service not initialized"},
        )
    return services


def get_orchestrator(
    services: Annotated[Services, Depends(get_services)],
) -> WeatherOrchestrator:
    return services.orchestrator
