"""Tests for the error taxonomy."""

import pytest

from weather_lookup_api.core.errors import (
    ErrorKind,
    GeocodingNotFoundError,
    LookupFailure,
    WeatherLookupError,
    WeatherUpstreamError,
    status_code_for,
)


class TestErrorKinds:
    """Test kinds and status codes."""

    @pytest.mark.parametrize(
        "kind, status_code",
        [
            (ErrorKind.MISSING_PARAMETER, 400),
            (ErrorKind.INVALID_PARAMETER, 400),
            (ErrorKind.INVALID_ADDRESS_FORMAT, 400),
            (ErrorKind.GEOCODING_NOT_FOUND, 400),
            (ErrorKind.INVALID_COORDINATES, 400),
            (ErrorKind.GEOCODING_UPSTREAM_ERROR, 500),
            (ErrorKind.WEATHER_UPSTREAM_ERROR, 500),
        ],
    )
    def test_status_codes(self, kind, status_code):
        assert status_code_for(kind) == status_code

    def test_subclass_kind(self):
        error = WeatherUpstreamError("Network error: reset")

        assert error.kind == ErrorKind.WEATHER_UPSTREAM_ERROR
        assert error.status_code == 500

    def test_base_class_requires_kind(self):
        with pytest.raises(TypeError, match="requires an error kind"):
            WeatherLookupError("something failed")

    def test_base_class_with_explicit_kind(self):
        error = WeatherLookupError("Address parameter is required", ErrorKind.MISSING_PARAMETER)

        assert error.kind == ErrorKind.MISSING_PARAMETER
        assert error.status_code == 400

    def test_lookup_failure_carries_stage(self):
        failure = LookupFailure(ErrorKind.GEOCODING_NOT_FOUND, "No results", "geocoding")

        assert failure.kind == ErrorKind.GEOCODING_NOT_FOUND
        assert failure.stage == "geocoding"
        assert failure.message == "No results"
        assert isinstance(GeocodingNotFoundError("x"), WeatherLookupError)
