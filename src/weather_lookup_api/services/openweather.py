"""OpenWeatherMap API client service."""

from datetime import datetime, timezone
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from ..core.cache import CacheStore
from ..core.errors import WeatherUpstreamError
from ..models.weather import (
    CurrentConditions,
    ForecastBundle,
    ForecastSample,
    OpenWeatherCurrentResponse,
    OpenWeatherForecastResponse,
    ProviderLocation,
)
from .forecast import bucket_by_day
from .provider import WEATHER_CACHE_TTL, WeatherProvider

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class OpenWeatherClient(WeatherProvider):
    """Client for the OpenWeatherMap 2.5 "weather" and "forecast" endpoints.

    Uses httpx for async HTTP requests with a bounded timeout. No retries:
    any failure surfaces immediately as WeatherUpstreamError.

    Example:
        >>> async def example(cache):
        ...     client = OpenWeatherClient(cache, api_key="secret")
        ...     current = await client.current_conditions(40.7128, -74.006, "metric")
        ...     await client.aclose()
        ...     return current.temperature
    """

    def __init__(
        self,
        cache: CacheStore,
        api_key: str | None = None,
        base_url: str = OPENWEATHER_BASE_URL,
        timeout: float = 10.0,
        cache_ttl: int = WEATHER_CACHE_TTL,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(cache, cache_ttl)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _load_current(
        self, latitude: float, longitude: float, units: str
    ) -> CurrentConditions:
        payload = await self._request("weather", latitude, longitude, units)
        try:
            data = OpenWeatherCurrentResponse.model_validate(payload)
        except ValidationError as e:
            logger.warning("Unexpected current weather payload", error=str(e))
            raise WeatherUpstreamError("Weather API error: unexpected response format") from e
        return self._parse_current(data)

    async def _load_forecast(
        self, latitude: float, longitude: float, units: str
    ) -> ForecastBundle:
        payload = await self._request("forecast", latitude, longitude, units)
        try:
            data = OpenWeatherForecastResponse.model_validate(payload)
        except ValidationError as e:
            logger.warning("Unexpected forecast payload", error=str(e))
            raise WeatherUpstreamError("Weather API error: unexpected response format") from e
        return self._parse_forecast(data)

    async def _request(
        self,
        endpoint: str,
        latitude: float,
        longitude: float,
        units: str,
    ) -> Any:
        """Issue one GET to the provider and return the decoded JSON body.

        Raises:
            WeatherUpstreamError: On non-2xx status, network faults, timeouts
                or a body that is not JSON
        """
        params: dict[str, float | str] = {
            "lat": latitude,
            "lon": longitude,
            "units": units,
        }
        # Add API key if configured
        if self._api_key:
            params["appid"] = self._api_key

        url = f"{self._base_url}/{endpoint}"
        logger.debug("Fetching weather from OpenWeatherMap", endpoint=endpoint, units=units)

        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("OpenWeatherMap request timed out", endpoint=endpoint)
            raise WeatherUpstreamError("Network error: upstream request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("OpenWeatherMap request failed", endpoint=endpoint, error=str(e))
            raise WeatherUpstreamError(f"Network error: {e}") from e

        if not response.is_success:
            message = self._error_message(response)
            logger.warning(
                "OpenWeatherMap returned error",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise WeatherUpstreamError(
                f"Weather API error: {message} (Status: {response.status_code})"
            )

        try:
            return response.json()
        except ValueError as e:
            raise WeatherUpstreamError("Weather API error: invalid JSON response") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return "Unknown API error"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return "Unknown API error"

    @staticmethod
    def _parse_current(data: OpenWeatherCurrentResponse) -> CurrentConditions:
        """Normalize a current-weather payload.

        Example:
            >>> data = OpenWeatherCurrentResponse(
            ...     main={"temp": 22.5, "feels_like": 24.0, "humidity": 65, "pressure": 1013},
            ...     weather=[{"description": "clear sky", "icon": "01d"}],
            ...     wind={"speed": 3.5, "deg": 180}, visibility=10000, dt=1640995200,
            ...     name="New York", sys={"country": "US"}, coord={"lat": 40.7128, "lon": -74.006},
            ... )
            >>> current = OpenWeatherClient._parse_current(data)
            >>> (current.temperature, current.description, current.location.name)
            (22.5, 'clear sky', 'New York')
        """
        condition = data.weather[0] if data.weather else None
        return CurrentConditions(
            temperature=data.main.temp,
            feelsLike=data.main.feels_like,
            humidity=data.main.humidity,
            pressure=data.main.pressure,
            description=condition.description if condition else None,
            icon=condition.icon if condition else None,
            windSpeed=data.wind.speed if data.wind else None,
            windDirection=data.wind.deg if data.wind else None,
            visibility=data.visibility,
            observedAt=datetime.fromtimestamp(data.dt, tz=timezone.utc),
            location=ProviderLocation(
                name=data.name,
                country=data.sys.country,
                lat=data.coord.lat if data.coord else None,
                lon=data.coord.lon if data.coord else None,
            ),
        )

    @staticmethod
    def _parse_forecast(data: OpenWeatherForecastResponse) -> ForecastBundle:
        samples = []
        for item in data.items:
            condition = item.weather[0] if item.weather else None
            samples.append(
                ForecastSample(
                    # Server-local calendar day, no timezone normalization
                    timestamp=datetime.fromtimestamp(item.dt),
                    temp=item.main.temp,
                    description=condition.description if condition else None,
                    icon=condition.icon if condition else None,
                    humidity=item.main.humidity,
                    windSpeed=item.wind.speed,
                )
            )

        city = data.city
        return ForecastBundle(
            location=ProviderLocation(
                name=city.name,
                country=city.country,
                lat=city.coord.lat if city.coord else None,
                lon=city.coord.lon if city.coord else None,
            ),
            dailyForecasts=bucket_by_day(samples),
        )
