"""Tests for the geocoding client."""

import pytest
from conftest import NEW_YORK, FakeGeocodingProvider

from weather_lookup_api.core.errors import (
    AddressValidationError,
    ErrorKind,
    GeocodingNotFoundError,
    GeocodingUpstreamError,
    InvalidCoordinatesError,
)
from weather_lookup_api.models.location import GeocodeResult
from weather_lookup_api.services.geocoding import GEOCODING_CACHE_TTL, GeocodingClient


class TestAddressValidation:
    """Test the syntactic address check."""

    @pytest.mark.parametrize(
        "address",
        ["New York, NY", "Paris", "東京都", "São Paulo", "10001 New York"],
    )
    def test_valid_addresses(self, geocoder, address):
        assert geocoder.is_valid_address(address) is True

    @pytest.mark.parametrize("address", [None, "", "   ", "ab", "123", "12345", "!!!"])
    def test_invalid_addresses(self, geocoder, address):
        assert geocoder.is_valid_address(address) is False


class TestResolve:
    """Test forward geocoding."""

    @pytest.mark.asyncio
    async def test_resolve_builds_location(self, geocoder, geocoding_provider):
        location = await geocoder.resolve("  New York, NY ")

        assert location.latitude == 40.7128
        assert location.longitude == -74.006
        assert location.postalCode == "10001"
        assert location.formattedAddress == "New York, NY, US"
        assert geocoding_provider.calls == ["new york, ny"]

    @pytest.mark.asyncio
    async def test_resolve_applies_alias_corrections(self, geocoder, geocoding_provider):
        await geocoder.resolve("Bombay")

        assert geocoding_provider.calls == ["mumbai"]

    @pytest.mark.asyncio
    async def test_blank_address_skips_provider(self, geocoder, geocoding_provider):
        with pytest.raises(AddressValidationError) as exc_info:
            await geocoder.resolve("   ")

        assert exc_info.value.kind == ErrorKind.INVALID_ADDRESS_FORMAT
        assert geocoding_provider.calls == []

    @pytest.mark.asyncio
    async def test_result_cached_for_a_day(self, geocoder, geocoding_provider, cache_store, clock):
        """Test that repeated lookups of the same address hit the cache."""
        await geocoder.resolve("New York, NY")
        await geocoder.resolve("new york, ny")

        assert len(geocoding_provider.calls) == 1
        assert await cache_store.exists("geocode:new york, ny") is True

        clock.advance(GEOCODING_CACHE_TTL - 1)
        assert await cache_store.exists("geocode:new york, ny") is True
        clock.advance(1)
        assert await cache_store.exists("geocode:new york, ny") is False

        await geocoder.resolve("New York, NY")
        assert len(geocoding_provider.calls) == 2

    @pytest.mark.asyncio
    async def test_no_results(self, cache_store):
        provider = FakeGeocodingProvider(results=[])
        geocoder = GeocodingClient(provider, cache_store)

        with pytest.raises(GeocodingNotFoundError) as exc_info:
            await geocoder.resolve("Atlantis")

        assert exc_info.value.message == "No results found for address: atlantis"
        assert exc_info.value.status_code == 400
        assert await cache_store.exists("geocode:atlantis") is False

    @pytest.mark.asyncio
    async def test_provider_failure(self, cache_store):
        provider = FakeGeocodingProvider(error="connection refused")
        geocoder = GeocodingClient(provider, cache_store)

        with pytest.raises(GeocodingUpstreamError) as exc_info:
            await geocoder.resolve("New York, NY")

        assert exc_info.value.message == "Geocoding error: connection refused"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_invalid_provider_coordinates(self, cache_store):
        provider = FakeGeocodingProvider(results=[GeocodeResult(latitude=95.0, longitude=0.0)])
        geocoder = GeocodingClient(provider, cache_store)

        with pytest.raises(GeocodingUpstreamError, match="invalid coordinates"):
            await geocoder.resolve("Nowhere")


class TestReverseResolve:
    """Test reverse geocoding."""

    @pytest.mark.asyncio
    async def test_keeps_requested_coordinates(self, cache_store):
        provider = FakeGeocodingProvider(
            results=[NEW_YORK.model_copy(update={"latitude": 40.71, "longitude": -74.0})]
        )
        geocoder = GeocodingClient(provider, cache_store)

        location = await geocoder.reverse_resolve(40.7128, -74.006)

        assert (location.latitude, location.longitude) == (40.7128, -74.006)
        assert location.city == "New York"
        assert provider.calls == [(40.7128, -74.006)]
        assert await cache_store.exists("reverse_geocode:40.7128:-74.006") is True

    @pytest.mark.asyncio
    async def test_out_of_range_skips_provider(self, geocoder, geocoding_provider):
        with pytest.raises(InvalidCoordinatesError) as exc_info:
            await geocoder.reverse_resolve(200.0, 200.0)

        assert exc_info.value.message == "Invalid coordinates"
        assert geocoding_provider.calls == []

    @pytest.mark.asyncio
    async def test_provider_failure(self, cache_store):
        geocoder = GeocodingClient(FakeGeocodingProvider(error="boom"), cache_store)

        with pytest.raises(GeocodingUpstreamError) as exc_info:
            await geocoder.reverse_resolve(0.0, 0.0)

        assert exc_info.value.message == "Reverse geocoding error: boom"

    @pytest.mark.asyncio
    async def test_no_results(self, cache_store):
        geocoder = GeocodingClient(FakeGeocodingProvider(results=[]), cache_store)

        with pytest.raises(GeocodingNotFoundError):
            await geocoder.reverse_resolve(0.0, 0.0)
