# discovery_apis/timing.py
"""
Heuristic "is this a good time to go" analysis for a trip.

Weather comes from the Open-Meteo daily forecast for the destination's
coordinates (geocoded with Nominatim). Pricing and crowd levels are
estimated from the month the trip starts in.
"""
import logging

import requests
from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from utils.itinerary_utils import parse_date

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
USER_AGENT = "NewLifeTravelApp/1.0"
REQUEST_TIMEOUT = 10

PEAK = "peak"
SHOULDER = "shoulder"
OFF_PEAK = "off_peak"


def get_coordinates(destination):
    """(lat, lon) for a destination, or None."""
    try:
        geolocator = Nominatim(user_agent=USER_AGENT)
        location = geolocator.geocode(destination, exactly_one=True)
    except GeopyError as e:
        logger.error(f"Error getting coordinates for {destination}: {e}")
        return None
    if not location:
        return None
    return location.latitude, location.longitude


def fallback_weather(destination):
    return {
        "score": 75,
        "description": f"Weather data for {destination}",
        "temp": "Check forecast closer to date",
        "rainfall": "Varies by season",
        "avgTemp": 20,
        "conditions": "Variable",
    }


def score_weather(max_temps, rainfall):
    """
    Weather score out of 100 from daily max temperatures and precipitation sums.
    Returns (score, average temperature, total rain, conditions).
    """
    avg_temp = round(sum(max_temps) / len(max_temps))
    total_rain = sum(rainfall)

    score = 100
    if avg_temp < 10 or avg_temp > 35:
        score -= 20
    if total_rain > 50:
        score -= 20
    if total_rain > 100:
        score -= 10

    if total_rain > 50:
        conditions = "Rainy"
    elif total_rain > 20:
        conditions = "Partly Cloudy"
    else:
        conditions = "Mostly Sunny"
    return max(0, score), avg_temp, total_rain, conditions


def get_weather_data(destination, start_date, end_date):
    coords = get_coordinates(destination)
    if not coords:
        return fallback_weather(destination)

    params = {
        "latitude": coords[0],
        "longitude": coords[1],
        "daily": "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode",
        "timezone": "auto",
        "start_date": start_date,
        "end_date": end_date,
    }
    try:
        response = requests.get(OPEN_METEO_URL, params=params, timeout=REQUEST_TIMEOUT)
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Error fetching weather data for {destination}: {e}")
        return fallback_weather(destination)

    daily = data.get("daily") or {}
    temps = [t for t in daily.get("temperature_2m_max") or [] if t is not None]
    rainfall = [r for r in daily.get("precipitation_sum") or [] if r is not None]
    if not temps:
        return fallback_weather(destination)

    score, avg_temp, total_rain, conditions = score_weather(temps, rainfall)
    return {
        "score": score,
        "description": f"{conditions} conditions expected in {destination}",
        "temp": f"{round(temps[0])}°C - {round(temps[-1])}°C",
        "rainfall": f"{round(total_rain)}mm total",
        "avgTemp": avg_temp,
        "conditions": conditions,
    }


def season_for(start_date):
    """Peak: June to August and December. Shoulder: March to May and September to November."""
    month = parse_date(start_date).month
    if 6 <= month <= 8 or month == 12:
        return PEAK
    if 3 <= month <= 5 or 9 <= month <= 11:
        return SHOULDER
    return OFF_PEAK


def get_pricing_data(start_date):
    season = season_for(start_date)
    if season == PEAK:
        return {"score": 40, "description": "Peak season - Higher prices expected",
                "flightTrend": "increasing", "hotelTrend": "increasing"}
    if season == SHOULDER:
        return {"score": 70, "description": "Shoulder season - Moderate prices",
                "flightTrend": "stable", "hotelTrend": "stable"}
    return {"score": 85, "description": "Off-peak season - Best prices available",
            "flightTrend": "decreasing", "hotelTrend": "decreasing"}


def get_crowd_data(start_date):
    season = season_for(start_date)
    if season == PEAK:
        return {"score": 35, "description": "Peak tourist season - Expect large crowds", "level": "High"}
    if season == SHOULDER:
        return {"score": 65, "description": "Moderate tourist activity", "level": "Medium"}
    return {"score": 85, "description": "Off-season - Fewer tourists, more peaceful", "level": "Low"}


def get_travel_data(destination, start_date, end_date):
    return {
        "weather": get_weather_data(destination, start_date, end_date),
        "pricing": get_pricing_data(start_date),
        "crowds": get_crowd_data(start_date),
    }
