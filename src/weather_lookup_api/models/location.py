"""Location models produced by geocoding."""

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """Latitude/longitude pair. Out-of-range values are rejected, never clamped.

    Example:
        >>> Coordinate(latitude=40.7128, longitude=-74.006).latitude
        40.7128
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(
        ...,
        description="Latitude in decimal degrees",
        ge=-90.0,
        le=90.0,
        allow_inf_nan=False,
    )
    longitude: float = Field(
        ...,
        description="Longitude in decimal degrees",
        ge=-180.0,
        le=180.0,
        allow_inf_nan=False,
    )


class GeocodeResult(BaseModel):
    """A single hit returned by a geocoding provider."""

    latitude: float
    longitude: float
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postalCode: str | None = None


def format_address(
    city: str | None,
    state: str | None,
    country: str | None,
    address: str | None,
) -> str | None:
    """Build the display address from its components.

    Example:
        >>> format_address("New York", "NY", "US", "New York, NY, USA")
        'New York, NY, US'
        >>> format_address(None, " ", None, "New York, NY, USA")
        'New York, NY, USA'
    """
    parts = [part for part in (city, state, country) if part and part.strip()]
    if parts:
        return ", ".join(parts)
    return address


class LocationInfo(Coordinate):
    """Resolved place. Immutable once produced by the geocoding client."""

    address: str | None = Field(default=None, description="Raw address from the provider")
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postalCode: str | None = Field(
        default=None,
        description="Postal code, preferred over coordinates as a weather cache key",
    )
    formattedAddress: str | None = Field(
        default=None,
        description="city, state, country joined by commas, or the raw address",
    )

    @classmethod
    def from_result(
        cls,
        result: GeocodeResult,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> "LocationInfo":
        """Build a LocationInfo from a provider hit.

        Explicit coordinates override the hit's own (reverse lookups keep
        the requested point).
        """
        return cls(
            latitude=result.latitude if latitude is None else latitude,
            longitude=result.longitude if longitude is None else longitude,
            address=result.address,
            city=result.city,
            state=result.state,
            country=result.country,
            postalCode=result.postalCode,
            formattedAddress=format_address(
                result.city, result.state, result.country, result.address
            ),
        )
