# itinerary_generator/storage.py
import logging

from firebase_admin import firestore

logger = logging.getLogger(__name__)

ITINERARIES_COLLECTION = 'itineraries'


def get_itinerary(db, trip_id, user_id):
    """
    Days of the trip's itinerary, or [] when there is none.
    An empty user_id is a public read; a non-owner gets [].
    """
    try:
        doc = db.collection(ITINERARIES_COLLECTION).document(trip_id).get()
        if not doc.exists:
            return []
        data = doc.to_dict()
        if user_id and data.get('userId') != user_id:
            logger.warning(f"User {user_id} is not the owner of itinerary {trip_id}")
            return []
        return data.get('days') or []
    except Exception as e:
        logger.error(f"Error fetching itinerary {trip_id}: {e}")
        return []


def save_itinerary(db, trip_id, user_id, days):
    """Creates the itinerary, or replaces its days when user_id owns it. Returns True on success."""
    try:
        itinerary_ref = db.collection(ITINERARIES_COLLECTION).document(trip_id)
        doc = itinerary_ref.get()
        if doc.exists:
            owner = doc.to_dict().get('userId')
            if owner != user_id:
                logger.warning(f"User {user_id} attempted to overwrite itinerary {trip_id} owned by {owner}")
                return False
            itinerary_ref.update({
                "days": days,
                "userId": user_id,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        else:
            itinerary_ref.set({
                "tripId": trip_id,
                "userId": user_id,
                "days": days,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        logger.info(f"Itinerary {trip_id} saved with {len(days)} days.")
        return True
    except Exception as e:
        logger.error(f"Error saving itinerary {trip_id}: {e}")
        return False


def add_activity(db, trip_id, user_id, day_number, activity):
    """Appends an activity to an existing day. False when the day does not exist."""
    days = get_itinerary(db, trip_id, user_id)
    for day in days:
        if day.get('day') == day_number:
            day.setdefault('activities', []).append(activity)
            return save_itinerary(db, trip_id, user_id, days)
    return False
