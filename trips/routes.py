# trips/routes.py
from flask import Blueprint, request, jsonify, session, current_app

from discovery_apis.photos import get_destination_photo
from itinerary_generator.storage import get_itinerary
from shared_globals import get_places_api_key
from trips.storage import get_trips, get_trip_by_id, create_trip, update_trip, delete_trip
from user_auth.utils import login_required_user
from utils.itinerary_utils import parse_date


def _validate_trip(data, partial=False):
    """Returns an error message, or None when the payload is acceptable."""
    if not partial:
        for field in ['name', 'destination', 'startDate', 'endDate', 'travelers', 'budget']:
            if field not in data or data[field] in (None, ''):
                return f"Missing required field: {field}"

    if 'travelers' in data:
        travelers = data['travelers']
        if isinstance(travelers, bool) or not isinstance(travelers, int) or travelers <= 0:
            return "travelers must be a positive integer."
    if 'budget' in data:
        budget = data['budget']
        if isinstance(budget, bool) or not isinstance(budget, (int, float)) or budget < 0:
            return "budget must be a non-negative number."

    try:
        start = parse_date(data['startDate']) if 'startDate' in data else None
        end = parse_date(data['endDate']) if 'endDate' in data else None
    except (TypeError, ValueError):
        return "startDate and endDate must be valid ISO dates (YYYY-MM-DD)."
    if start and end and end < start:
        return "endDate cannot be before startDate."
    return None


def _lookup_trip_image(destination):
    if not get_places_api_key():
        return None
    try:
        return get_destination_photo(destination)
    except Exception as e:
        current_app.logger.warning(f"Could not look up a photo for {destination}: {e}")
        return None


def create_trips_bp(db_instance):
    trips_bp = Blueprint('trips_bp', __name__, url_prefix='/trips')

    @trips_bp.route('', methods=['GET'])
    @login_required_user
    def list_trips():
        user_uid = session.get('user_uid')
        return jsonify({"trips": get_trips(db_instance, user_uid)}), 200

    @trips_bp.route('', methods=['POST'])
    @login_required_user
    def create_trip_route():
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"error": "Missing request body."}), 400

        error = _validate_trip(data)
        if error:
            return jsonify({"error": error}), 400

        if not data.get('imageUrl'):
            data['imageUrl'] = _lookup_trip_image(data['destination'])

        try:
            trip = create_trip(db_instance, user_uid, data)
        except Exception as e:
            current_app.logger.error(f"Error creating trip for user {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to create trip."}), 500
        return jsonify({"message": "Trip created successfully", "trip": trip}), 201

    @trips_bp.route('/<trip_id>', methods=['GET'])
    @login_required_user
    def get_trip_route(trip_id):
        user_uid = session.get('user_uid')
        trip = get_trip_by_id(db_instance, trip_id, user_uid)
        if not trip:
            return jsonify({"error": "Trip not found."}), 404
        return jsonify({"trip": trip}), 200

    @trips_bp.route('/<trip_id>', methods=['PATCH'])
    @login_required_user
    def update_trip_route(trip_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}

        error = _validate_trip(data, partial=True)
        if error:
            return jsonify({"error": error}), 400

        if 'startDate' in data or 'endDate' in data:
            current = get_trip_by_id(db_instance, trip_id, user_uid)
            if not current:
                return jsonify({"error": "Trip not found."}), 404
            error = _validate_trip({
                "startDate": data.get('startDate', current['startDate']),
                "endDate": data.get('endDate', current['endDate']),
            }, partial=True)
            if error:
                return jsonify({"error": error}), 400

        if not update_trip(db_instance, trip_id, user_uid, data):
            return jsonify({"error": "Trip not found."}), 404
        return jsonify({"message": "Trip updated successfully", "trip": get_trip_by_id(db_instance, trip_id, user_uid)}), 200

    @trips_bp.route('/<trip_id>/image', methods=['PATCH'])
    @login_required_user
    def update_trip_image(trip_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}
        image_url = data.get('imageUrl')
        if not image_url:
            return jsonify({"error": "imageUrl is required"}), 400

        current_app.logger.info(f"Updating trip {trip_id} with imageUrl: {image_url}")
        if not update_trip(db_instance, trip_id, user_uid, {"imageUrl": image_url}):
            return jsonify({"error": "Failed to update trip"}), 404
        return jsonify({"success": True, "imageUrl": image_url}), 200

    @trips_bp.route('/<trip_id>', methods=['DELETE'])
    @login_required_user
    def delete_trip_route(trip_id):
        user_uid = session.get('user_uid')
        if not delete_trip(db_instance, trip_id, user_uid):
            return jsonify({"error": "Trip not found."}), 404
        return jsonify({"message": "Trip deleted successfully"}), 200

    @trips_bp.route('/<trip_id>/share', methods=['GET'])
    @login_required_user
    def share_trip(trip_id):
        user_uid = session.get('user_uid')
        if not get_trip_by_id(db_instance, trip_id, user_uid):
            return jsonify({"error": "Trip not found."}), 404
        share_url = f"{request.host_url.rstrip('/')}/trips/public/{trip_id}"
        return jsonify({"shareUrl": share_url}), 200

    @trips_bp.route('/public/<trip_id>', methods=['GET'])
    def public_trip(trip_id):
        trip = get_trip_by_id(db_instance, trip_id, '')
        if not trip:
            return jsonify({"error": "Trip not found."}), 404
        return jsonify({"trip": trip, "itinerary": get_itinerary(db_instance, trip_id, '')}), 200

    return trips_bp
