"""Weather provider interface with per-request caching."""

from abc import ABC, abstractmethod
from typing import Literal

from ..core.cache import CacheStore
from ..models.weather import (
    DEFAULT_UNITS,
    CurrentConditions,
    ForecastBundle,
    WeatherData,
)

# Default weather cache TTL, 30 minutes
WEATHER_CACHE_TTL = 30 * 60

CacheKind = Literal["current", "forecast"]


class WeatherProvider(ABC):
    """Source of current conditions and forecasts.

    Subclasses implement the two loaders; this class caches their results
    independently. Cache keys use the postal code when one is known and
    fall back to the raw coordinates, because repeated geocoding of the
    same address can return slightly different coordinates.
    """

    key_prefix = "weather"

    def __init__(self, cache: CacheStore, cache_ttl: int = WEATHER_CACHE_TTL):
        self._cache = cache
        self._cache_ttl = cache_ttl

    def cache_key(
        self,
        kind: CacheKind,
        latitude: float,
        longitude: float,
        units: str = DEFAULT_UNITS,
        postal_code: str | None = None,
    ) -> str:
        """Build the cache key for a current/forecast lookup.

        Example:
            >>> from weather_lookup_api.services.demo import DemoWeatherClient
            >>> provider = DemoWeatherClient(cache=None)
            >>> provider.cache_key("current", 40.7128, -74.006, "metric")
            'demo_weather:current:40.7128:-74.006:metric'
            >>> provider.cache_key("forecast", 40.7128, -74.006, "metric", "10001")
            'demo_weather:forecast:10001:metric'
        """
        identifier = postal_code or f"{latitude}:{longitude}"
        return f"{self.key_prefix}:{kind}:{identifier}:{units}"

    async def current_conditions(
        self,
        latitude: float,
        longitude: float,
        units: str = DEFAULT_UNITS,
        postal_code: str | None = None,
    ) -> CurrentConditions:
        """Current conditions, served from cache when fresh."""
        key = self.cache_key("current", latitude, longitude, units, postal_code)

        async def compute() -> bytes:
            current = await self._load_current(latitude, longitude, units)
            return current.model_dump_json().encode()

        raw = await self._cache.fetch_or_compute(key, self._cache_ttl, compute)
        return CurrentConditions.model_validate_json(raw)

    async def forecast(
        self,
        latitude: float,
        longitude: float,
        units: str = DEFAULT_UNITS,
        postal_code: str | None = None,
    ) -> ForecastBundle:
        """Daily forecast, served from cache when fresh."""
        key = self.cache_key("forecast", latitude, longitude, units, postal_code)

        async def compute() -> bytes:
            bundle = await self._load_forecast(latitude, longitude, units)
            return bundle.model_dump_json().encode()

        raw = await self._cache.fetch_or_compute(key, self._cache_ttl, compute)
        return ForecastBundle.model_validate_json(raw)

    async def weather_data(
        self,
        latitude: float,
        longitude: float,
        units: str = DEFAULT_UNITS,
        postal_code: str | None = None,
    ) -> WeatherData:
        """Current conditions and forecast together.

        cached is always False: this method cannot tell whether its two
        lookups hit the cache.
        """
        return WeatherData(
            current=await self.current_conditions(latitude, longitude, units, postal_code),
            forecast=await self.forecast(latitude, longitude, units, postal_code),
            cached=False,
        )

    async def aclose(self) -> None:
        """Release provider resources."""
        return None

    @abstractmethod
    async def _load_current(
        self, latitude: float, longitude: float, units: str
    ) -> CurrentConditions:
        ...

    @abstractmethod
    async def _load_forecast(
        self, latitude: float, longitude: float, units: str
    ) -> ForecastBundle:
        ...
