# utils/trip_utils.py

import datetime

from utils.itinerary_utils import parse_date

UPCOMING = "upcoming"
ONGOING = "ongoing"
COMPLETED = "completed"


def get_trip_status(trip, today=None):
    """
    Calculate the current status of a trip based on its dates.

    Dates are compared at day granularity, so a trip is 'ongoing' on both
    its start and its end day.
    """
    if today is None:
        today = datetime.date.today()
    elif isinstance(today, datetime.datetime):
        today = today.date()

    start = parse_date(trip['startDate'])
    end = parse_date(trip['endDate'])

    if today < start:
        return UPCOMING
    elif start <= today <= end:
        return ONGOING
    return COMPLETED


def get_trips_with_current_status(trips, today=None):
    """Returns copies of the trips with 'status' recomputed from their dates."""
    return [{**trip, "status": get_trip_status(trip, today)} for trip in trips]
