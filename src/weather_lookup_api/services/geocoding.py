"""Geocoding client with caching, plus the Nominatim provider it talks to."""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from ..core.cache import CacheStore
from ..core.errors import (
    AddressValidationError,
    GeocodingNotFoundError,
    GeocodingUpstreamError,
    InvalidCoordinatesError,
)
from ..models.location import Coordinate, GeocodeResult, LocationInfo
from .normalizer import normalize_address

# Addresses rarely move; 24 hours
GEOCODING_CACHE_TTL = 24 * 60 * 60

MIN_ADDRESS_LENGTH = 3


class GeocoderServiceError(Exception):
    """Raised by a geocoding provider on transport or protocol failures."""

    pass


class GeocodingProvider(ABC):
    """External geocoding service.

    search() takes either an address string or a (latitude, longitude)
    pair and returns hits best-first. An empty list means not found.
    """

    @abstractmethod
    async def search(self, query: str | tuple[float, float]) -> list[GeocodeResult]:
        ...

    async def aclose(self) -> None:
        """Release provider resources."""
        return None


class NominatimProvider(GeocodingProvider):
    """OpenStreetMap Nominatim geocoder over httpx.

    Example:
        >>> async def example():
        ...     provider = NominatimProvider()
        ...     results = await provider.search("new york, ny")
        ...     await provider.aclose()
        ...     return results[0].city
    """

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "weather-lookup-api/0.1.0",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def search(self, query: str | tuple[float, float]) -> list[GeocodeResult]:
        if isinstance(query, str):
            payload = await self._get(
                "search",
                {"q": query, "format": "jsonv2", "addressdetails": 1, "limit": 1},
            )
            places = payload if isinstance(payload, list) else []
        else:
            latitude, longitude = query
            payload = await self._get(
                "reverse",
                {"lat": latitude, "lon": longitude, "format": "jsonv2", "addressdetails": 1},
            )
            # Reverse lookups return one object, or {"error": ...} when nothing matches
            places = [payload] if isinstance(payload, dict) and "error" not in payload else []

        return [self._to_result(place) for place in places]

    async def _get(self, endpoint: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}/{endpoint}"
        logger.debug("Querying geocoding provider", url=url)

        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("Geocoding request timed out")
            raise GeocoderServiceError("request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("Geocoding request failed", error=str(e))
            raise GeocoderServiceError(str(e)) from e

        if response.status_code >= 400:
            logger.warning("Geocoding provider returned error", status_code=response.status_code)
            raise GeocoderServiceError(
                f"provider returned {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise GeocoderServiceError("provider returned invalid JSON") from e

    @staticmethod
    def _to_result(place: dict[str, Any]) -> GeocodeResult:
        details = place.get("address") or {}
        city = (
            details.get("city")
            or details.get("town")
            or details.get("village")
            or details.get("hamlet")
            or details.get("municipality")
        )
        try:
            return GeocodeResult(
                latitude=float(place["lat"]),
                longitude=float(place["lon"]),
                address=place.get("display_name"),
                city=city,
                state=details.get("state"),
                country=details.get("country"),
                postalCode=details.get("postcode"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GeocoderServiceError("provider returned malformed result") from e


class GeocodingClient:
    """Resolves addresses to locations and back, caching results.

    Each lookup is cached under its own key for cache_ttl seconds
    (24 hours by default): "geocode:<normalized address>" for forward
    lookups, "reverse_geocode:<lat>:<lon>" for reverse ones.
    """

    def __init__(
        self,
        provider: GeocodingProvider,
        cache: CacheStore,
        cache_ttl: int = GEOCODING_CACHE_TTL,
    ):
        self._provider = provider
        self._cache = cache
        self._cache_ttl = cache_ttl

    @property
    def provider(self) -> GeocodingProvider:
        return self._provider

    def is_valid_address(self, address: str | None) -> bool:
        """Cheap syntactic check, no network.

        Rejects obvious garbage, not places that do not exist.

        Example:
            >>> client = GeocodingClient(provider=None, cache=None)
            >>> client.is_valid_address("New York, NY")
            True
            >>> client.is_valid_address("123")
            False
        """
        if not address or not address.strip():
            return False
        return len(address.strip()) >= MIN_ADDRESS_LENGTH and any(
            ch.isalpha() for ch in address
        )

    async def resolve(self, address: str | None) -> LocationInfo:
        """Geocode an address.

        Raises:
            AddressValidationError: If the address is blank (no provider call)
            GeocodingNotFoundError: If the provider has no match
            GeocodingUpstreamError: If the provider fails
        """
        if not address or not address.strip():
            raise AddressValidationError("Address cannot be blank")

        normalized = normalize_address(address)
        cache_key = f"geocode:{normalized}"

        async def compute() -> bytes:
            results = await self._search(normalized, "Geocoding error")
            if not results:
                raise GeocodingNotFoundError(f"No results found for address: {normalized}")
            location = self._build_location(results[0], "Geocoding error")
            logger.debug("Address geocoded", postal_code=location.postalCode)
            return location.model_dump_json().encode()

        raw = await self._cache.fetch_or_compute(cache_key, self._cache_ttl, compute)
        return LocationInfo.model_validate_json(raw)

    async def reverse_resolve(self, latitude: float, longitude: float) -> LocationInfo:
        """Find the address at a coordinate.

        The returned location keeps the requested coordinates.

        Raises:
            InvalidCoordinatesError: If the pair is out of range (no provider call)
            GeocodingNotFoundError: If the provider has no match
            GeocodingUpstreamError: If the provider fails
        """
        try:
            Coordinate(latitude=latitude, longitude=longitude)
        except ValidationError as e:
            raise InvalidCoordinatesError("Invalid coordinates") from e

        cache_key = f"reverse_geocode:{latitude}:{longitude}"

        async def compute() -> bytes:
            results = await self._search((latitude, longitude), "Reverse geocoding error")
            if not results:
                raise GeocodingNotFoundError(
                    f"No results found for coordinates: {latitude}, {longitude}"
                )
            location = self._build_location(
                results[0], "Reverse geocoding error", latitude, longitude
            )
            return location.model_dump_json().encode()

        raw = await self._cache.fetch_or_compute(cache_key, self._cache_ttl, compute)
        return LocationInfo.model_validate_json(raw)

    async def _search(
        self, query: str | tuple[float, float], error_prefix: str
    ) -> list[GeocodeResult]:
        try:
            return await self._provider.search(query)
        except GeocoderServiceError as e:
            raise GeocodingUpstreamError(f"{error_prefix}: {e}") from e

    @staticmethod
    def _build_location(
        result: GeocodeResult,
        error_prefix: str,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> LocationInfo:
        try:
            return LocationInfo.from_result(result, latitude, longitude)
        except ValidationError as e:
            raise GeocodingUpstreamError(
                f"{error_prefix}: provider returned invalid coordinates"
            ) from e
