"""Demo weather provider generating plausible data without an API key."""

import random
from datetime import date, datetime, timedelta, timezone

from ..core.cache import CacheStore
from ..models.weather import (
    CurrentConditions,
    DailyForecast,
    ForecastBundle,
    ProviderLocation,
)
from .provider import WEATHER_CACHE_TTL, WeatherProvider

BASE_TEMPERATURES = {
    "metric": 22.0,
    "imperial": 71.6,
    "kelvin": 295.15,
}

FORECAST_DAYS = 5

# (name, latitude range, longitude range)
DEMO_CITIES = [
    ("New York", (40.0, 42.0), (-75.0, -73.0)),
    ("Los Angeles", (33.0, 35.0), (-119.0, -117.0)),
    ("Chicago", (41.0, 43.0), (-88.0, -86.0)),
    ("Houston", (29.0, 31.0), (-96.0, -94.0)),
    ("Miami", (25.0, 27.0), (-81.0, -79.0)),
]


def demo_location_name(latitude: float, longitude: float) -> str:
    """Pick a city name for coordinates.

    Example:
        >>> demo_location_name(40.7128, -74.006)
        'New York'
        >>> demo_location_name(51.5, -0.12)
        'Demo City'
    """
    for name, (lat_min, lat_max), (lon_min, lon_max) in DEMO_CITIES:
        if lat_min <= latitude <= lat_max and lon_min <= longitude <= lon_max:
            return name
    return "Demo City"


class DemoWeatherClient(WeatherProvider):
    """Weather provider that makes up values around a per-unit base temperature.

    Selected with WEATHER_PROVIDER=demo. Results are cached like real ones,
    under a separate "demo_weather" key prefix.
    """

    key_prefix = "demo_weather"

    def __init__(
        self,
        cache: CacheStore,
        cache_ttl: int = WEATHER_CACHE_TTL,
        rng: random.Random | None = None,
        today: date | None = None,
    ):
        super().__init__(cache, cache_ttl)
        self._rng = rng or random.Random()
        self._today = today

    def _location(self, latitude: float, longitude: float) -> ProviderLocation:
        return ProviderLocation(
            name=demo_location_name(latitude, longitude),
            country="US",
            lat=latitude,
            lon=longitude,
        )

    async def _load_current(
        self, latitude: float, longitude: float, units: str
    ) -> CurrentConditions:
        rng = self._rng
        base = BASE_TEMPERATURES.get(units, BASE_TEMPERATURES["metric"])
        return CurrentConditions(
            temperature=round(base + rng.uniform(-5.0, 5.0), 1),
            feelsLike=round(base + rng.uniform(-3.0, 3.0), 1),
            humidity=rng.randint(40, 80),
            pressure=rng.randint(1000, 1020),
            description=rng.choice(["clear sky", "partly cloudy", "cloudy", "sunny", "overcast"]),
            icon=rng.choice(["01d", "02d", "03d", "04d", "50d"]),
            windSpeed=round(rng.uniform(1.0, 8.0), 1),
            windDirection=rng.randint(0, 360),
            visibility=rng.randint(8000, 12000),
            observedAt=datetime.now(timezone.utc),
            location=self._location(latitude, longitude),
        )

    async def _load_forecast(
        self, latitude: float, longitude: float, units: str
    ) -> ForecastBundle:
        rng = self._rng
        base = BASE_TEMPERATURES.get(units, BASE_TEMPERATURES["metric"])
        start = self._today or date.today()

        days = [
            DailyForecast(
                date=start + timedelta(days=offset),
                high=round(base + rng.uniform(2.0, 8.0), 1),
                low=round(base - rng.uniform(2.0, 6.0), 1),
                description=rng.choice(["sunny", "partly cloudy", "cloudy", "clear sky"]),
                icon=rng.choice(["01d", "02d", "03d", "04d"]),
                humidity=rng.randint(50, 85),
                windSpeed=round(rng.uniform(2.0, 6.0), 1),
            )
            for offset in range(FORECAST_DAYS)
        ]
        return ForecastBundle(location=self._location(latitude, longitude), dailyForecasts=days)
