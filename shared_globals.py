# shared_globals.py
import os
import threading

import googlemaps

# --- Global Variables ---
# Destination photo lookups, keyed by lower-cased destination.
photo_cache = {}

_gmaps_client = None
_cache_lock = threading.Lock()

# --- Helper Functions ---
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
DEFAULT_TRIP_IMAGE = "/trips/tokyo-skyline.jpg"
PLACES_PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"


def get_places_api_key():
    """Reads the Google Places key from the environment at call time."""
    return os.environ.get('GOOGLE_PLACES_API_KEY')


def get_gmaps_client():
    """
    Returns a shared googlemaps client, created on first use.
    Raises RuntimeError when GOOGLE_PLACES_API_KEY is not configured.
    """
    global _gmaps_client
    if _gmaps_client is None:
        api_key = get_places_api_key()
        if not api_key:
            raise RuntimeError("GOOGLE_PLACES_API_KEY not configured")
        _gmaps_client = googlemaps.Client(key=api_key)
    return _gmaps_client


def allowed_file(filename):
    """Checks if a file's extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def construct_photo_url(photo_reference, api_key, max_width=1200):
    """Build a photo URL from a Google Places photo_reference."""
    if not photo_reference:
        return None
    return f"{PLACES_PHOTO_URL}?maxwidth={max_width}&photoreference={photo_reference}&key={api_key}"


def bounded_cache_put(cache, key, value, max_size):
    """Stores key in cache, dropping the oldest entries once max_size is reached."""
    with _cache_lock:
        cache.pop(key, None)
        while cache and len(cache) >= max_size:
            cache.pop(next(iter(cache)), None)
        cache[key] = value


def cache_photo(destination_key, image_url):
    """Stores a photo URL, bounded by PHOTO_CACHE_SIZE."""
    bounded_cache_put(photo_cache, destination_key, image_url, int(os.environ.get('PHOTO_CACHE_SIZE', 500)))
