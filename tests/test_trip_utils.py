"""
Unit tests for utils/trip_utils.py and utils/itinerary_utils.py
"""
from datetime import date, datetime

import pytest

from utils.itinerary_utils import calculate_days, format_itinerary_date
from utils.trip_utils import get_trip_status, get_trips_with_current_status

TRIP = {"startDate": "2025-06-15", "endDate": "2025-06-25"}


class TestGetTripStatus:

    @pytest.mark.parametrize("today, expected", [
        (date(2025, 6, 1), "upcoming"),
        (date(2025, 6, 14), "upcoming"),
        (date(2025, 6, 15), "ongoing"),
        (date(2025, 6, 20), "ongoing"),
        (date(2025, 6, 25), "ongoing"),
        (date(2025, 6, 26), "completed"),
        (date(2025, 7, 1), "completed"),
    ])
    def test_status_by_day(self, today, expected):
        assert get_trip_status(TRIP, today=today) == expected

    def test_accepts_datetime_late_on_end_day(self):
        assert get_trip_status(TRIP, today=datetime(2025, 6, 25, 23, 59)) == "ongoing"

    def test_single_day_trip(self):
        trip = {"startDate": "2025-06-15", "endDate": "2025-06-15"}
        assert get_trip_status(trip, today=date(2025, 6, 15)) == "ongoing"
        assert get_trip_status(trip, today=date(2025, 6, 16)) == "completed"

    def test_iso_timestamps_are_normalized_to_days(self):
        trip = {"startDate": "2025-06-15T18:30:00Z", "endDate": "2025-06-25T08:00:00Z"}
        assert get_trip_status(trip, today=date(2025, 6, 15)) == "ongoing"

    def test_defaults_to_today(self):
        trip = {"startDate": "2999-01-01", "endDate": "2999-01-10"}
        assert get_trip_status(trip) == "upcoming"


class TestTripsWithCurrentStatus:

    def test_stored_status_is_replaced(self):
        trips = [{**TRIP, "id": "1", "status": "upcoming"}]
        result = get_trips_with_current_status(trips, today=date(2025, 7, 1))
        assert result[0]["status"] == "completed"
        assert trips[0]["status"] == "upcoming"


class TestItineraryDates:

    def test_calculate_days_is_inclusive(self):
        assert calculate_days("2025-06-15", "2025-06-25") == 11
        assert calculate_days("2025-06-15", "2025-06-15") == 1

    def test_calculate_days_ignores_order(self):
        assert calculate_days("2025-06-25", "2025-06-15") == 11

    def test_format_itinerary_date(self):
        assert format_itinerary_date("2025-06-15", 0) == "June 15, 2025"
        assert format_itinerary_date("2025-06-30", 2) == "July 2, 2025"
