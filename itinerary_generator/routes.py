# itinerary_generator/routes.py
import uuid

from flask import Blueprint, request, jsonify, session, current_app

from itinerary_generator.generator import generate_itinerary
from itinerary_generator.storage import get_itinerary, save_itinerary, add_activity
from trips.storage import get_trip_by_id
from user_auth.utils import login_required_user
from utils.itinerary_utils import parse_date

ACTIVITY_TYPES = ['attraction', 'food', 'transport', 'accommodation']


def create_itinerary_bp(db_instance):
    itinerary_bp = Blueprint('itinerary_bp', __name__, url_prefix='/itinerary')

    @itinerary_bp.route('/generate', methods=['POST'])
    @login_required_user
    def generate_itinerary_route():
        user_uid = session.get('user_uid')

        data = request.get_json(silent=True)
        if not data:
            return jsonify({"error": "Missing request body for itinerary generation."}), 400

        required_fields = ['destination', 'startDate', 'endDate', 'travelers', 'budget']
        for field in required_fields:
            if field not in data:
                return jsonify({"error": f"Missing required field: {field}"}), 400

        travelers = data['travelers']
        if isinstance(travelers, bool) or not isinstance(travelers, int) or travelers <= 0:
            return jsonify({"error": "travelers must be a positive integer."}), 400
        budget = data['budget']
        if isinstance(budget, bool) or not isinstance(budget, (int, float)) or budget < 0:
            return jsonify({"error": "budget must be a non-negative number."}), 400

        try:
            start_date = parse_date(data['startDate'])
            end_date = parse_date(data['endDate'])
        except (TypeError, ValueError):
            return jsonify({"error": "startDate and endDate must be valid ISO dates (YYYY-MM-DD)."}), 400
        if end_date < start_date:
            return jsonify({"error": "endDate cannot be before startDate."}), 400

        trip_id = data.get('tripId')
        if trip_id and not get_trip_by_id(db_instance, trip_id, user_uid):
            return jsonify({"error": "Trip not found."}), 404

        try:
            current_app.logger.info(f"Generating itinerary to {data['destination']} for user {user_uid}...")
            itinerary, tips = generate_itinerary(data)
        except Exception as e:
            current_app.logger.error(f"Error generating itinerary for user {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to generate itinerary.", "details": str(e)}), 500

        saved = False
        if trip_id:
            saved = save_itinerary(db_instance, trip_id, user_uid, itinerary)

        return jsonify({"itinerary": itinerary, "tips": tips, "saved": saved}), 200

    @itinerary_bp.route('/<trip_id>', methods=['GET'])
    @login_required_user
    def get_itinerary_route(trip_id):
        user_uid = session.get('user_uid')
        days = get_itinerary(db_instance, trip_id, user_uid)
        return jsonify({"tripId": trip_id, "days": days}), 200

    @itinerary_bp.route('/<trip_id>', methods=['PUT'])
    @login_required_user
    def save_itinerary_route(trip_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}
        days = data.get('days')
        if not isinstance(days, list):
            return jsonify({"error": "days must be a list."}), 400

        if not get_trip_by_id(db_instance, trip_id, user_uid):
            return jsonify({"error": "Trip not found."}), 404

        if not save_itinerary(db_instance, trip_id, user_uid, days):
            return jsonify({"error": "Failed to save itinerary."}), 500
        return jsonify({"message": "Itinerary saved successfully", "tripId": trip_id}), 200

    @itinerary_bp.route('/<trip_id>/days/<int:day_number>/activities', methods=['POST'])
    @login_required_user
    def add_activity_route(trip_id, day_number):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}

        for field in ['time', 'title', 'location']:
            if not data.get(field):
                return jsonify({"error": f"Missing required field: {field}"}), 400
        activity_type = data.get('type', 'attraction')
        if activity_type not in ACTIVITY_TYPES:
            return jsonify({"error": f"type must be one of {', '.join(ACTIVITY_TYPES)}."}), 400

        activity = {
            "id": data.get('id') or str(uuid.uuid4()),
            "time": data['time'],
            "title": data['title'],
            "location": data['location'],
            "description": data.get('description', ''),
            "duration": data.get('duration', ''),
            "type": activity_type,
        }

        if not add_activity(db_instance, trip_id, user_uid, day_number, activity):
            return jsonify({"error": "Itinerary day not found."}), 404
        return jsonify({"message": "Activity added", "activity": activity}), 201

    return itinerary_bp
