"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from weather_lookup_api.api.dependencies import Services, get_services
from weather_lookup_api.app import app
from weather_lookup_api.core.cache import CacheStore
from weather_lookup_api.core.errors import WeatherUpstreamError
from weather_lookup_api.models.location import GeocodeResult
from weather_lookup_api.models.weather import (
    CurrentConditions,
    DailyForecast,
    ForecastBundle,
    ProviderLocation,
)
from weather_lookup_api.services.geocoding import (
    GeocoderServiceError,
    GeocodingClient,
    GeocodingProvider,
)
from weather_lookup_api.services.provider import WeatherProvider
from weather_lookup_api.services.weather import WeatherOrchestrator

NEW_YORK = GeocodeResult(
    latitude=40.7128,
    longitude=-74.0060,
    address="New York, NY, USA",
    city="New York",
    state="NY",
    country="US",
    postalCode="10001",
)


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGeocodingProvider(GeocodingProvider):
    """Geocoding provider returning canned results and recording queries."""

    def __init__(self, results=None, error: str | None = None):
        self.results = [NEW_YORK] if results is None else results
        self.error = error
        self.calls = []

    async def search(self, query):
        self.calls.append(query)
        if self.error:
            raise GeocoderServiceError(self.error)
        return list(self.results)


class FakeWeatherProvider(WeatherProvider):
    """Weather provider with canned payloads; caching comes from the base class."""

    def __init__(self, cache, temperature: float = 22.5, error: str | None = None):
        super().__init__(cache, cache_ttl=1800)
        self.temperature = temperature
        self.error = error
        self.current_calls = 0
        self.forecast_calls = 0

    async def _load_current(self, latitude, longitude, units):
        self.current_calls += 1
        if self.error:
            raise WeatherUpstreamError(f"Network error: {self.error}")
        return CurrentConditions(
            temperature=self.temperature,
            feelsLike=24.0,
            humidity=65,
            pressure=1013,
            description="clear sky",
            icon="01d",
            windSpeed=3.5,
            windDirection=180,
            visibility=10000,
            observedAt=datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc),
            location=ProviderLocation(name="New York", country="US", lat=latitude, lon=longitude),
        )

    async def _load_forecast(self, latitude, longitude, units):
        self.forecast_calls += 1
        if self.error:
            raise WeatherUpstreamError(f"Network error: {self.error}")
        return ForecastBundle(
            location=ProviderLocation(name="New York", country="US", lat=latitude, lon=longitude),
            dailyForecasts=[
                DailyForecast(
                    date=datetime(2026, 1, 20).date(),
                    high=25.0,
                    low=18.2,
                    description="clear sky",
                    icon="01d",
                    humidity=60,
                    windSpeed=3.2,
                )
            ],
        )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(clock):
    return CacheStore(max_size=100, clock=clock)


@pytest.fixture
def geocoding_provider():
    return FakeGeocodingProvider()


@pytest.fixture
def geocoder(geocoding_provider, cache_store):
    return GeocodingClient(geocoding_provider, cache_store)


@pytest.fixture
def weather_provider(cache_store):
    return FakeWeatherProvider(cache_store)


@pytest.fixture
def orchestrator(geocoder, weather_provider, cache_store):
    return WeatherOrchestrator(geocoder, weather_provider, cache_store)


@pytest.fixture
def services(cache_store, geocoder, weather_provider, orchestrator):
    return Services(
        cache=cache_store,
        geocoder=geocoder,
        weather=weather_provider,
        orchestrator=orchestrator,
    )


@pytest.fixture(scope="function")
def client(services):
    """Create a test client wired to fake upstream providers."""
    app.dependency_overrides[get_services] = lambda: services
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
