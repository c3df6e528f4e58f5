"""Tests for daily forecast aggregation."""

from datetime import date, datetime

import pytest

from weather_lookup_api.models.weather import ForecastSample
from weather_lookup_api.services.forecast import bucket_by_day, most_common, round_half_up


def sample(timestamp, temp, description="clear sky", icon="01d", humidity=50, wind=2.0):
    return ForecastSample(
        timestamp=timestamp,
        temp=temp,
        description=description,
        icon=icon,
        humidity=humidity,
        windSpeed=wind,
    )


class TestMostCommon:
    """Test mode selection."""

    def test_majority_wins(self):
        assert most_common(["sunny", "cloudy", "sunny", "rainy", "sunny"]) == "sunny"

    def test_tie_goes_to_first_to_reach_max(self):
        assert most_common(["sunny", "cloudy", "sunny"]) == "sunny"
        assert most_common(["rain", "snow", "snow", "rain"]) == "snow"
        assert most_common(["a", "b"]) == "a"

    def test_empty(self):
        assert most_common([]) is None


class TestBucketByDay:
    """Test grouping samples into days."""

    def test_empty_input(self):
        assert bucket_by_day([]) == []

    def test_single_sample(self):
        days = bucket_by_day([sample(datetime(2026, 1, 20, 12), 7.25, humidity=81, wind=4.44)])

        assert len(days) == 1
        day = days[0]
        assert day.date == date(2026, 1, 20)
        assert day.high == day.low == 7.3
        assert day.description == "clear sky"
        assert day.humidity == 81
        assert day.windSpeed == 4.4

    def test_one_date_summary(self):
        samples = [
            sample(datetime(2026, 1, 20, 0), 10.04, "cloudy", "04n", humidity=60, wind=2.0),
            sample(datetime(2026, 1, 20, 3), 8.96, "clear sky", "01n", humidity=70, wind=3.0),
            sample(datetime(2026, 1, 20, 6), 12.5, "cloudy", "04d", humidity=71, wind=4.5),
        ]

        days = bucket_by_day(samples)

        assert len(days) == 1
        day = days[0]
        assert day.high == 12.5
        assert day.low == 9.0
        assert day.description == "cloudy"
        assert day.icon == "04n"
        assert day.humidity == 67
        assert day.windSpeed == 3.2

    def test_days_sorted_ascending(self):
        samples = [
            sample(datetime(2026, 1, 22, 9), 3.0),
            sample(datetime(2026, 1, 20, 9), 1.0),
            sample(datetime(2026, 1, 21, 9), 2.0),
            sample(datetime(2026, 1, 20, 21), -1.0),
        ]

        days = bucket_by_day(samples)

        assert [d.date for d in days] == [date(2026, 1, 20), date(2026, 1, 21), date(2026, 1, 22)]
        assert (days[0].high, days[0].low) == (1.0, -1.0)

    def test_day_count_follows_samples(self):
        """Test that six distinct dates yield six days, not a fixed five."""
        samples = [sample(datetime(2026, 1, 20 + offset, 12), 5.0) for offset in range(6)]

        assert len(bucket_by_day(samples)) == 6

    def test_halves_round_away_from_zero(self):
        samples = [
            sample(datetime(2026, 1, 20, 9), 2.25, humidity=72, wind=3.0),
            sample(datetime(2026, 1, 20, 12), 1.0, humidity=73, wind=3.5),
        ]

        day = bucket_by_day(samples)[0]

        assert (day.high, day.low, day.humidity, day.windSpeed) == (2.3, 1.0, 73, 3.3)

    def test_negative_halves(self):
        samples = [
            sample(datetime(2026, 1, 20, 3), -4.35),
            sample(datetime(2026, 1, 20, 6), -0.25),
        ]

        day = bucket_by_day(samples)[0]

        assert (day.high, day.low) == (-0.3, -4.4)


class TestRoundHalfUp:
    """Test half-up rounding."""

    @pytest.mark.parametrize(
        "value, places, expected",
        [(7.25, 1, 7.3), (3.25, 1, 3.3), (0.05, 1, 0.1), (72.5, 0, 73), (67.4, 0, 67), (-1.5, 0, -2)],
    )
    def test_round_half_up(self, value, places, expected):
        assert round_half_up(value, places) == expected
