"""Error taxonomy shared by the geocoding, weather and orchestration layers."""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable, client-facing failure categories."""

    MISSING_PARAMETER = "MissingParameter"
    INVALID_PARAMETER = "InvalidParameter"
    INVALID_ADDRESS_FORMAT = "InvalidAddressFormat"
    GEOCODING_NOT_FOUND = "GeocodingNotFound"
    GEOCODING_UPSTREAM_ERROR = "GeocodingUpstreamError"
    WEATHER_UPSTREAM_ERROR = "WeatherUpstreamError"
    INVALID_COORDINATES = "InvalidCoordinates"


# Dependency failures; everything else is caused by bad input
SERVER_ERROR_KINDS = frozenset(
    {ErrorKind.GEOCODING_UPSTREAM_ERROR, ErrorKind.WEATHER_UPSTREAM_ERROR}
)


def status_code_for(kind: ErrorKind) -> int:
    """Map an error kind to the HTTP status code used at the boundary.

    Example:
        >>> status_code_for(ErrorKind.MISSING_PARAMETER)
        400
        >>> status_code_for(ErrorKind.WEATHER_UPSTREAM_ERROR)
        500
    """
    return 500 if kind in SERVER_ERROR_KINDS else 400


class WeatherLookupError(Exception):
    """Base exception for all expected lookup failures.

    Subclasses fix kind as a class attribute; the base class has none and
    must be given one explicitly.
    """

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        elif not hasattr(self, "kind"):
            raise TypeError(f"{type(self).__name__} requires an error kind")
        self.message = message

    @property
    def status_code(self) -> int:
        return status_code_for(self.kind)


class AddressValidationError(WeatherLookupError):
    """Raised when an address is blank before any geocoding happens."""

    kind = ErrorKind.INVALID_ADDRESS_FORMAT


class InvalidCoordinatesError(WeatherLookupError):
    """Raised when a latitude/longitude pair is out of range or not numeric."""

    kind = ErrorKind.INVALID_COORDINATES


class GeocodingNotFoundError(WeatherLookupError):
    """Raised when the geocoding provider returns no results."""

    kind = ErrorKind.GEOCODING_NOT_FOUND


class GeocodingUpstreamError(WeatherLookupError):
    """Raised when the geocoding provider fails (transport or bad payload)."""

    kind = ErrorKind.GEOCODING_UPSTREAM_ERROR


class WeatherUpstreamError(WeatherLookupError):
    """Raised when the weather provider fails (non-2xx, network, bad payload)."""

    kind = ErrorKind.WEATHER_UPSTREAM_ERROR


class LookupFailure(WeatherLookupError):
    """Terminal failure of a forecast lookup, tagged with kind and stage.

    The HTTP layer renders it as an error response; it never carries a
    partial result.
    """

    def __init__(self, kind: ErrorKind, message: str, stage: str):
        super().__init__(message, kind)
        self.stage = stage

    def __repr__(self) -> str:
        return f"LookupFailure(kind={self.kind.value!r}, stage={self.stage!r}, message={self.message!r})"
