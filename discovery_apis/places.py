# discovery_apis/places.py

import os
import logging

from googlemaps.exceptions import ApiError, TransportError, Timeout

from shared_globals import bounded_cache_put, construct_photo_url, get_gmaps_client, get_places_api_key
from utils.place_info import map_price_level

logger = logging.getLogger(__name__)

# Coordinates for destinations already geocoded in this process, bounded by LOCATION_CACHE_SIZE.
_location_cache = {}


def get_coordinates_for_location(location):
    """lat/lng for a location via the Google Geocoding API (cached). None when not found."""
    if location in _location_cache:
        return _location_cache[location]

    try:
        results = get_gmaps_client().geocode(location)
    except (ApiError, TransportError, Timeout) as e:
        logger.error(f"Geocoding failed for {location}: {e}")
        return None

    if not results:
        return None
    loc = results[0]["geometry"]["location"]
    coords = {"lat": loc["lat"], "lng": loc["lng"]}
    bounded_cache_put(_location_cache, location, coords, int(os.environ.get('LOCATION_CACHE_SIZE', 500)))
    return coords


def to_place_summary(place, api_key):
    photo_reference = None
    if place.get("photos"):
        photo_reference = place["photos"][0].get("photo_reference")
    price_info = map_price_level(place.get("price_level"))

    return {
        "placeId": place.get("place_id"),
        "name": place.get("name"),
        "rating": place.get("rating"),
        "reviews": place.get("user_ratings_total") or 0,
        "types": place.get("types", []),
        "address": place.get("vicinity") or place.get("formatted_address"),
        "location": place.get("geometry", {}).get("location"),
        "photoUrl": construct_photo_url(photo_reference, api_key, max_width=800),
        "priceCategory": price_info["category"],
    }


def fetch_nearby_places(coords, radius=5000, keyword="tourist attractions", place_type=None, max_results=20):
    """Nearby search around coords ({'lat', 'lng'}); returns place summaries, [] on failure."""
    client = get_gmaps_client()
    api_key = get_places_api_key()

    try:
        response = client.places_nearby(
            location=(coords["lat"], coords["lng"]),
            radius=radius,
            keyword=keyword,
            type=place_type,
        )
    except (ApiError, TransportError, Timeout) as e:
        logger.error(f"Nearby search failed around {coords}: {e}")
        return []

    results = []
    seen_place_ids = set()
    for place in response.get("results", []):
        if place.get("place_id") in seen_place_ids:
            continue
        seen_place_ids.add(place.get("place_id"))
        results.append(to_place_summary(place, api_key))

    return results[:max_results]
