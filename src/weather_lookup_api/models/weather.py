"""Weather data models for request/response handling."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .location import LocationInfo

Units = Literal["metric", "imperial", "kelvin"]

SUPPORTED_UNITS: tuple[str, ...] = ("metric", "imperial", "kelvin")
DEFAULT_UNITS: Units = "metric"


class ProviderLocation(BaseModel):
    """Location as reported by the weather provider.

    Example:
        >>> loc = ProviderLocation(name="New York", country="US", lat=40.7128, lon=-74.006)
        >>> loc.name
        'New York'
    """

    name: str | None = None
    country: str | None = None
    lat: float | None = None
    lon: float | None = None


class CurrentConditions(BaseModel):
    """Current weather conditions in the requested unit system.

    Values are passed through from the provider without conversion.
    """

    temperature: float | None = Field(..., description="Air temperature")
    feelsLike: float | None = Field(default=None, description="Perceived temperature")
    humidity: int | None = Field(default=None, description="Relative humidity in percent")
    pressure: int | None = Field(default=None, description="Pressure in hPa")
    description: str | None = None
    icon: str | None = None
    windSpeed: float | None = None
    windDirection: int | None = Field(default=None, description="Wind direction in degrees")
    visibility: int | None = Field(default=None, description="Visibility in meters")
    observedAt: datetime = Field(..., description="Observation time (UTC)")
    location: ProviderLocation


class ForecastSample(BaseModel):
    """One raw forecast sample (typically 3-hourly)."""

    timestamp: datetime
    temp: float
    description: str | None = None
    icon: str | None = None
    humidity: int
    windSpeed: float


class DailyForecast(BaseModel):
    """Day-level summary of forecast samples.

    high >= low is not enforced; values come straight from the samples.

    Example:
        >>> day = DailyForecast(date=date(2026, 1, 20), high=5.2, low=-1.0,
        ...                     description="snow", icon="13d", humidity=80, windSpeed=3.4)
        >>> day.high
        5.2
    """

    date: date
    high: float
    low: float
    description: str | None = None
    icon: str | None = None
    humidity: int
    windSpeed: float


class ForecastBundle(BaseModel):
    """Forecast for a location, ordered ascending by date."""

    location: ProviderLocation
    dailyForecasts: list[DailyForecast] = Field(default_factory=list)


class WeatherData(BaseModel):
    """Current conditions plus forecast as composed by a weather provider.

    cached is always False here; cache-hit status is decided by the orchestrator.
    """

    current: CurrentConditions
    forecast: ForecastBundle
    cached: bool = False


class WeatherEnvelope(BaseModel):
    """Unified payload returned for a forecast lookup."""

    current: CurrentConditions
    forecast: ForecastBundle
    cached: bool
    location: LocationInfo


class ResponseMeta(BaseModel):
    """Request metadata echoed back to the client."""

    address: str = Field(..., description="Address exactly as supplied")
    units: Units
    cached: bool
    timestamp: datetime


class ForecastResponse(BaseModel):
    """Successful response for GET /forecast."""

    success: Literal[True] = True
    data: WeatherEnvelope
    meta: ResponseMeta


class ErrorResponse(BaseModel):
    """Error response body.

    Example:
        >>> from datetime import timezone
        >>> ErrorResponse(error="Address parameter is required",
        ...               timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc)).success
        False
    """

    success: Literal[False] = False
    error: str
    timestamp: datetime


# OpenWeatherMap 2.5 payloads


class OpenWeatherCondition(BaseModel):
    description: str | None = None
    icon: str | None = None


class OpenWeatherWind(BaseModel):
    speed: float
    deg: int | None = None


class OpenWeatherCoord(BaseModel):
    lat: float
    lon: float


class OpenWeatherMain(BaseModel):
    temp: float
    feels_like: float | None = None
    humidity: int | None = None
    pressure: int | None = None


class OpenWeatherSys(BaseModel):
    country: str | None = None


class OpenWeatherCurrentResponse(BaseModel):
    """Response from GET {base}/weather.

    Example:
        >>> response = OpenWeatherCurrentResponse(
        ...     main={"temp": 22.5, "feels_like": 24.0, "humidity": 65, "pressure": 1013},
        ...     weather=[{"description": "clear sky", "icon": "01d"}],
        ...     wind={"speed": 3.5, "deg": 180},
        ...     visibility=10000,
        ...     dt=1640995200,
        ...     name="New York",
        ...     sys={"country": "US"},
        ...     coord={"lat": 40.7128, "lon": -74.006},
        ... )
        >>> response.main.temp
        22.5
    """

    model_config = ConfigDict(extra="ignore")

    main: OpenWeatherMain
    weather: list[OpenWeatherCondition] = Field(default_factory=list)
    wind: OpenWeatherWind | None = None
    visibility: int | None = None
    dt: int
    name: str | None = None
    sys: OpenWeatherSys = Field(default_factory=OpenWeatherSys)
    coord: OpenWeatherCoord | None = None


class OpenWeatherForecastMain(BaseModel):
    temp: float
    humidity: int


class OpenWeatherForecastItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dt: int
    main: OpenWeatherForecastMain
    weather: list[OpenWeatherCondition] = Field(default_factory=list)
    wind: OpenWeatherWind


class OpenWeatherCity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    country: str | None = None
    coord: OpenWeatherCoord | None = None


class OpenWeatherForecastResponse(BaseModel):
    """Response from GET {base}/forecast."""

    model_config = ConfigDict(extra="ignore")

    city: OpenWeatherCity
    items: list[OpenWeatherForecastItem] = Field(default_factory=list, alias="list")
