"""Forecast lookup orchestration: validate, geocode, fetch, assemble."""

from datetime import datetime, timezone
from enum import Enum

from loguru import logger
from opentelemetry import metrics

from ..core.cache import CacheStore
from ..core.errors import (
    AddressValidationError,
    ErrorKind,
    GeocodingNotFoundError,
    GeocodingUpstreamError,
    InvalidCoordinatesError,
    LookupFailure,
    WeatherUpstreamError,
)
from ..models.location import LocationInfo
from ..models.weather import (
    DEFAULT_UNITS,
    SUPPORTED_UNITS,
    ForecastResponse,
    ResponseMeta,
    WeatherEnvelope,
)
from .geocoding import GeocodingClient
from .provider import WeatherProvider

meter = metrics.get_meter("weather_lookup_api")
lookup_counter = meter.create_counter(
    "weather_lookups",
    description="Successful forecast lookups by cache status and units",
)


class LookupStage(str, Enum):
    """Stages a forecast lookup moves through, strictly in order."""

    RECEIVED = "received"
    VALIDATING = "validating"
    GEOCODING = "geocoding"
    FETCHING_WEATHER = "fetching_weather"
    ASSEMBLING = "assembling"
    DONE = "done"


class WeatherOrchestrator:
    """Coordinates a single forecast lookup.

    The lookup is linear and has no retries: a failure at any stage aborts
    the request with a LookupFailure tagged with its kind and stage.

    Example:
        >>> async def example(orchestrator):
        ...     response = await orchestrator.get_forecast("New York, NY", "metric")
        ...     return response.data.current.temperature
    """

    def __init__(
        self,
        geocoder: GeocodingClient,
        weather: WeatherProvider,
        cache: CacheStore,
    ):
        self._geocoder = geocoder
        self._weather = weather
        self._cache = cache

    def validate(self, address: str | None, units: str | None) -> str:
        """Validate request parameters and return the effective units.

        Raises:
            LookupFailure: MissingParameter, InvalidParameter or InvalidAddressFormat
        """
        stage = LookupStage.VALIDATING.value
        if not address or not address.strip():
            raise LookupFailure(
                ErrorKind.MISSING_PARAMETER, "Address parameter is required", stage
            )

        if units is None:
            units = DEFAULT_UNITS
        if units not in SUPPORTED_UNITS:
            raise LookupFailure(
                ErrorKind.INVALID_PARAMETER,
                "Invalid units. Must be metric, imperial, or kelvin",
                stage,
            )

        if not self._geocoder.is_valid_address(address):
            raise LookupFailure(ErrorKind.INVALID_ADDRESS_FORMAT, "Invalid address format", stage)

        return units

    async def is_cached(self, location: LocationInfo, units: str) -> bool:
        """Probe whether both weather entries for this location are cached.

        This is an existence check on the keys the provider uses, not a
        flag from the fetch path. An entry expiring right after the probe
        makes the answer briefly stale.
        """
        keys = [
            self._weather.cache_key(
                kind, location.latitude, location.longitude, units, location.postalCode
            )
            for kind in ("current", "forecast")
        ]
        for key in keys:
            if not await self._cache.exists(key):
                return False
        return True

    async def get_forecast(self, address: str | None, units: str | None) -> ForecastResponse:
        """Run a full lookup for an address.

        Args:
            address: Free-text address as supplied by the client
            units: metric, imperial or kelvin; metric when None

        Returns:
            Envelope with current conditions, daily forecast, location and
            request metadata

        Raises:
            LookupFailure: On any validation, geocoding or weather failure
        """
        stage = LookupStage.RECEIVED
        logger.debug("Forecast lookup received", stage=stage.value)

        stage = LookupStage.VALIDATING
        units = self.validate(address, units)

        stage = LookupStage.GEOCODING
        try:
            location = await self._geocoder.resolve(address)
        except (
            AddressValidationError,
            GeocodingNotFoundError,
            InvalidCoordinatesError,
        ) as e:
            logger.info("Geocoding rejected address", kind=e.kind.value)
            raise LookupFailure(e.kind, e.message, stage.value) from e
        except GeocodingUpstreamError as e:
            logger.warning("Geocoding provider failed", error=e.message)
            raise LookupFailure(e.kind, e.message, stage.value) from e

        stage = LookupStage.FETCHING_WEATHER
        # Probed before the fetches rather than after them: a post-fetch probe would
        # always see the entries this request just wrote. True means both fetches
        # below are served from cache.
        cached = await self.is_cached(location, units)
        try:
            current = await self._weather.current_conditions(
                location.latitude, location.longitude, units, location.postalCode
            )
            forecast = await self._weather.forecast(
                location.latitude, location.longitude, units, location.postalCode
            )
        except WeatherUpstreamError as e:
            logger.warning("Weather provider failed", error=e.message)
            raise LookupFailure(
                e.kind, f"Unable to retrieve weather data: {e.message}", stage.value
            ) from e

        stage = LookupStage.ASSEMBLING
        envelope = WeatherEnvelope(
            current=current,
            forecast=forecast,
            cached=cached,
            location=location,
        )
        response = ForecastResponse(
            data=envelope,
            meta=ResponseMeta(
                address=address,
                units=units,
                cached=cached,
                timestamp=datetime.now(timezone.utc),
            ),
        )

        stage = LookupStage.DONE
        lookup_counter.add(1, {"cached": cached, "units": units})
        logger.info("Forecast lookup completed", stage=stage.value, cached=cached, units=units)
        return response
