"""Aggregation of raw forecast samples into daily summaries."""

from collections.abc import Hashable, Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from ..models.weather import DailyForecast, ForecastSample

T = TypeVar("T", bound=Hashable)


def most_common(values: Iterable[T]) -> T | None:
    """Return the most frequent value.

    Ties go to the value that first reaches the winning count while
    scanning left to right.

    Example:
        >>> most_common(["sunny", "cloudy", "sunny"])
        'sunny'
        >>> most_common(["rain", "snow", "snow", "rain"])
        'snow'
        >>> most_common([]) is None
        True
    """
    counts: dict[T, int] = {}
    best: T | None = None
    best_count = 0
    for value in values:
        counts[value] = counts.get(value, 0) + 1
        if counts[value] > best_count:
            best, best_count = value, counts[value]
    return best


def round_half_up(value: float, places: int = 0) -> float | int:
    """Round halves away from zero instead of to even.

    Example:
        >>> round_half_up(2.25, 1)
        2.3
        >>> round_half_up(72.5)
        73
        >>> round_half_up(-0.25, 1)
        -0.3
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    return float(rounded) if places else int(rounded)


def _summarize(day: date, samples: Sequence[ForecastSample]) -> DailyForecast:
    temperatures = [s.temp for s in samples]
    humidity = [s.humidity for s in samples]
    wind_speed = [s.windSpeed for s in samples]

    return DailyForecast(
        date=day,
        high=round_half_up(max(temperatures), 1),
        low=round_half_up(min(temperatures), 1),
        description=most_common(s.description for s in samples),
        icon=most_common(s.icon for s in samples),
        humidity=round_half_up(sum(humidity) / len(humidity)),
        windSpeed=round_half_up(sum(wind_speed) / len(wind_speed), 1),
    )


def bucket_by_day(samples: Iterable[ForecastSample]) -> list[DailyForecast]:
    """Group samples by calendar date and summarize each day.

    The date is taken from each sample's timestamp as-is; no timezone
    conversion happens here. Days are returned in ascending order and only
    dates present in the samples appear.

    Args:
        samples: Raw forecast samples in provider order

    Returns:
        One DailyForecast per distinct date

    Example:
        >>> from datetime import datetime
        >>> days = bucket_by_day([
        ...     ForecastSample(timestamp=datetime(2026, 1, 20, 9), temp=1.04,
        ...                    description="snow", icon="13d", humidity=80, windSpeed=3.0),
        ...     ForecastSample(timestamp=datetime(2026, 1, 20, 15), temp=4.26,
        ...                    description="snow", icon="13d", humidity=70, windSpeed=4.0),
        ... ])
        >>> (days[0].high, days[0].low, days[0].humidity)
        (4.3, 1.0, 75)
    """
    groups: dict[date, list[ForecastSample]] = {}
    for sample in samples:
        groups.setdefault(sample.timestamp.date(), []).append(sample)

    return [_summarize(day, groups[day]) for day in sorted(groups)]
