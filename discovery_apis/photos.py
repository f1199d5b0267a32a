# discovery_apis/photos.py
"""
Picks a representative photo for a destination from Google Places text search.

Every candidate that carries photos is scored by
rating * log10(reviews + 10) * min(photo_count, 10), boosted for landmark and
natural-feature types and for names containing the destination itself.
"""
import math
import logging

from googlemaps.exceptions import ApiError, TransportError, Timeout

from shared_globals import (
    photo_cache, cache_photo, construct_photo_url, get_gmaps_client, get_places_api_key
)
from utils.place_info import primary_name

logger = logging.getLogger(__name__)

SEARCH_SUFFIXES = ["", " landmark", " temple", " viewpoint", " tourist attraction", " historic site"]

LANDMARK_TYPES = {"tourist_attraction", "museum", "church", "hindu_temple", "place_of_worship", "landmark"}
NATURAL_FEATURE_TYPES = {"natural_feature", "park", "campground"}

LANDMARK_BOOST = 1.5
NATURAL_FEATURE_BOOST = 1.3
NAME_MATCH_BOOST = 1.2
MAX_COUNTED_PHOTOS = 10


def build_queries(destination):
    return [f"{destination}{suffix}" for suffix in SEARCH_SUFFIXES]


def score_place(place, destination=""):
    """Score of a Places search result; 0 for results without photos."""
    photos = place.get("photos") or []
    if not photos:
        return 0.0

    rating = place.get("rating") or 0
    reviews = place.get("user_ratings_total") or 0
    score = rating * math.log10(reviews + 10) * min(len(photos), MAX_COUNTED_PHOTOS)

    types = set(place.get("types") or [])
    if types & LANDMARK_TYPES:
        score *= LANDMARK_BOOST
    if types & NATURAL_FEATURE_TYPES:
        score *= NATURAL_FEATURE_BOOST

    name = primary_name(destination)
    if name and name in (place.get("name") or "").lower():
        score *= NAME_MATCH_BOOST
    return score


def select_best_place(candidates, destination=""):
    """Highest-scoring candidate with a positive score, or None."""
    best_place = None
    best_score = 0.0
    for place in candidates:
        score = score_place(place, destination)
        if score > best_score:
            best_score = score
            best_place = place
    return best_place


def search_candidates(destination):
    """Runs every text-search query and collects unique results."""
    client = get_gmaps_client()
    candidates = []
    seen_place_ids = set()
    for query in build_queries(destination):
        try:
            response = client.places(query=query)
        except (ApiError, TransportError, Timeout) as e:
            logger.warning(f"Places text search failed for '{query}': {e}")
            continue
        if response.get("status") != "OK":
            continue
        for place in response.get("results", []):
            place_id = place.get("place_id")
            if place_id in seen_place_ids:
                continue
            seen_place_ids.add(place_id)
            candidates.append(place)
    return candidates


def get_destination_photo(destination):
    """
    Photo URL for the destination, or None when no candidate has photos.
    Raises RuntimeError when the Places API key is not configured.
    """
    cache_key = destination.lower()
    if cache_key in photo_cache:
        return photo_cache[cache_key]

    best_place = select_best_place(search_candidates(destination), destination)
    if not best_place:
        logger.info(f"No photos available for {destination}")
        return None

    photo_reference = best_place["photos"][0].get("photo_reference")
    image_url = construct_photo_url(photo_reference, get_places_api_key())
    if image_url:
        cache_photo(cache_key, image_url)
    return image_url
