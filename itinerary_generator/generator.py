# itinerary_generator/generator.py
import os
import logging

from itinerary_generator.schemas import GeneratedItinerary
from utils.gemini_client import DEFAULT_ITINERARY_MODEL, call_predict_with_schema
from utils.itinerary_utils import calculate_days, format_itinerary_date

logger = logging.getLogger(__name__)


def build_itinerary_prompt(details, days):
    preferences = details.get('preferences')
    preferences_line = f"\n      - Preferences: {preferences}" if preferences else ""
    return f"""Create a detailed day-by-day itinerary for a {days}-day trip to {details['destination']}.

      Trip Details:
      - Destination: {details['destination']}
      - Duration: {days} days ({details['startDate']} to {details['endDate']})
      - Number of travelers: {details['travelers']}
      - Total budget: ${details['budget']}{preferences_line}

      Requirements:
      - Include a mix of attractions, dining, and rest time
      - Consider realistic travel times between locations
      - Include breakfast, lunch, and dinner suggestions
      - Balance popular tourist spots with local experiences
      - Provide practical timing (e.g., 09:00 AM, 02:30 PM)
      - Include estimated costs that fit within the budget
      - Make it engaging and well-paced
      - Consider the number of travelers when suggesting activities

      Create a memorable and practical itinerary that maximizes the experience while being realistic about time, energy, and budget.

      IMPORTANT: Keep responses concise. Limit to {days} days only."""


def normalize_itinerary(generated, start_date, days):
    """
    Renumbers the model's days 1..N, dates them from start_date and gives
    every activity an id of the form '<day>-<n>'. Days past the trip length are dropped.
    """
    itinerary = []
    for index, day in enumerate(generated.days[:days]):
        day_number = index + 1
        itinerary.append({
            "day": day_number,
            "date": format_itinerary_date(start_date, index),
            "theme": day.theme,
            "activities": [
                {
                    "id": f"{day_number}-{act_index + 1}",
                    "time": activity.time,
                    "title": activity.title,
                    "location": activity.location,
                    "description": activity.description,
                    "duration": activity.duration,
                    "type": activity.type,
                    "estimatedCost": activity.estimatedCost,
                }
                for act_index, activity in enumerate(day.activities)
            ],
        })
    return itinerary


def generate_itinerary(details):
    """
    details: destination, startDate, endDate, travelers, budget and optional preferences.
    Returns (days, tips).
    """
    days = calculate_days(details['startDate'], details['endDate'])
    model = os.environ.get('GEMINI_ITINERARY_MODEL', DEFAULT_ITINERARY_MODEL)

    generated = call_predict_with_schema(build_itinerary_prompt(details, days), GeneratedItinerary, model)
    itinerary = normalize_itinerary(generated, details['startDate'], days)
    logger.info(f"Generated {len(itinerary)}-day itinerary for {details['destination']}.")
    return itinerary, list(generated.tips)
