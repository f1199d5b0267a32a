# utils/itinerary_utils.py

from datetime import timedelta

import dateutil.parser


def parse_date(value):
    """Parses 'YYYY-MM-DD' (or a full ISO timestamp) into a date."""
    return dateutil.parser.isoparse(value).date()


def calculate_days(start_date, end_date):
    """
    Number of days covered by a trip, counting both the start and end day.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    return abs((end - start).days) + 1


def format_itinerary_date(start_date, day_offset):
    """Formats start_date + day_offset as e.g. 'June 15, 2025'."""
    day = parse_date(start_date) + timedelta(days=day_offset)
    return f"{day.strftime('%B')} {day.day}, {day.year}"
