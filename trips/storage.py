# trips/storage.py
import datetime
import logging
import uuid

from shared_globals import DEFAULT_TRIP_IMAGE
from utils.trip_utils import get_trip_status, get_trips_with_current_status

logger = logging.getLogger(__name__)

TRIPS_COLLECTION = 'trips'
ITINERARIES_COLLECTION = 'itineraries'

TRIP_FIELDS = ['name', 'destination', 'startDate', 'endDate', 'travelers', 'budget', 'imageUrl', 'preferences']


def _trip_from_doc(doc):
    return {"id": doc.id, **doc.to_dict()}


def get_trips(db, user_id):
    """All trips owned by user_id, soonest first, with status recomputed. [] on failure."""
    try:
        docs = db.collection(TRIPS_COLLECTION).where('userId', '==', user_id).stream()
        trips = [_trip_from_doc(doc) for doc in docs]
        trips.sort(key=lambda trip: trip.get('startDate') or '')
        return get_trips_with_current_status(trips)
    except Exception as e:
        logger.error(f"Error fetching trips for user {user_id}: {e}")
        return []


def get_trip_by_id(db, trip_id, user_id):
    """
    Returns the trip or None.
    An empty user_id is a public (share link) read; otherwise only the owner sees the trip.
    """
    try:
        doc = db.collection(TRIPS_COLLECTION).document(trip_id).get()
        if not doc.exists:
            return None
        trip = _trip_from_doc(doc)
        if user_id and trip.get('userId') != user_id:
            logger.warning(f"User {user_id} attempted to read trip {trip_id} owned by {trip.get('userId')}")
            return None
        trip['status'] = get_trip_status(trip)
        return trip
    except Exception as e:
        logger.error(f"Error fetching trip {trip_id}: {e}")
        return None


def create_trip(db, user_id, trip_data):
    """Stores a new trip for user_id and returns it. Raises on storage failure."""
    now = datetime.datetime.now(datetime.timezone.utc)
    trip_id = str(uuid.uuid4())
    trip = {field: trip_data[field] for field in TRIP_FIELDS if field in trip_data}
    trip.update({
        "userId": user_id,
        "imageUrl": trip_data.get('imageUrl') or DEFAULT_TRIP_IMAGE,
        "createdAt": now,
        "updatedAt": now,
    })
    trip['status'] = get_trip_status(trip)

    try:
        db.collection(TRIPS_COLLECTION).document(trip_id).set(trip)
    except Exception as e:
        logger.error(f"Error creating trip for user {user_id}: {e}")
        raise
    logger.info(f"Trip {trip_id} created for user {user_id}.")
    return {"id": trip_id, **trip}


def update_trip(db, trip_id, user_id, updates):
    """
    Merges the allowed fields of `updates` into the trip.
    Returns False without writing when the trip is missing or not owned by user_id.
    """
    try:
        trip_ref = db.collection(TRIPS_COLLECTION).document(trip_id)
        doc = trip_ref.get()
        if not doc.exists:
            return False
        existing = doc.to_dict()
        if existing.get('userId') != user_id:
            logger.warning(f"User {user_id} attempted to update trip {trip_id} owned by {existing.get('userId')}")
            return False

        changes = {field: updates[field] for field in TRIP_FIELDS if field in updates}
        merged = {**existing, **changes}
        changes['status'] = get_trip_status(merged)
        changes['updatedAt'] = datetime.datetime.now(datetime.timezone.utc)
        trip_ref.update(changes)
        return True
    except Exception as e:
        logger.error(f"Error updating trip {trip_id}: {e}")
        return False


def delete_trip(db, trip_id, user_id):
    """
    Deletes the trip if user_id owns it, then its itinerary (best effort).
    Returns False when the trip is missing or owned by someone else.
    """
    try:
        trip_ref = db.collection(TRIPS_COLLECTION).document(trip_id)
        doc = trip_ref.get()
        if not doc.exists:
            return False
        if doc.to_dict().get('userId') != user_id:
            logger.warning(f"User {user_id} attempted to delete trip {trip_id}")
            return False
        trip_ref.delete()
    except Exception as e:
        logger.error(f"Error deleting trip {trip_id}: {e}")
        return False

    try:
        db.collection(ITINERARIES_COLLECTION).document(trip_id).delete()
    except Exception as e:
        logger.error(f"Trip {trip_id} deleted but its itinerary could not be removed: {e}")
    return True
