# discovery_apis/routes.py
from flask import Blueprint, request, jsonify, current_app

from discovery_apis.photos import get_destination_photo
from discovery_apis.places import fetch_nearby_places, get_coordinates_for_location
from discovery_apis.recommendations import get_recommendations
from discovery_apis.timing import get_travel_data
from shared_globals import get_places_api_key
from utils.itinerary_utils import parse_date


def create_discovery_bp():
    discovery_bp = Blueprint('discovery_bp', __name__, url_prefix='/discover')

    @discovery_bp.route('/destination-photo', methods=['GET'])
    def destination_photo():
        destination = request.args.get('destination', '').strip()
        if not destination:
            return jsonify({"error": "Destination is required"}), 400
        if not get_places_api_key():
            return jsonify({"error": "GOOGLE_PLACES_API_KEY not configured"}), 500

        try:
            image_url = get_destination_photo(destination)
        except Exception as e:
            current_app.logger.error(f"Error fetching destination photo for {destination}: {e}", exc_info=True)
            return jsonify({"error": "Failed to fetch destination photo"}), 500

        if not image_url:
            return jsonify({"error": f"No photos available for {destination}"}), 404
        return jsonify({"imageUrl": image_url}), 200

    @discovery_bp.route('/nearby', methods=['GET'])
    def nearby_places():
        destination = request.args.get('destination', '').strip()
        lat = request.args.get('lat', type=float)
        lng = request.args.get('lng', type=float)
        radius = request.args.get('radius', default=5000, type=int)
        keyword = request.args.get('keyword', 'tourist attractions')
        place_type = request.args.get('type')

        if lat is None or lng is None:
            if not destination:
                return jsonify({"error": "Provide either destination or lat and lng"}), 400
        if not 0 < radius <= 50000:
            return jsonify({"error": "radius must be between 1 and 50000 meters"}), 400
        if not get_places_api_key():
            return jsonify({"error": "GOOGLE_PLACES_API_KEY not configured"}), 500

        try:
            if lat is not None and lng is not None:
                coords = {"lat": lat, "lng": lng}
            else:
                coords = get_coordinates_for_location(destination)
                if not coords:
                    return jsonify({"error": f"Could not locate {destination}"}), 404
            places = fetch_nearby_places(coords, radius=radius, keyword=keyword, place_type=place_type)
        except Exception as e:
            current_app.logger.error(f"Error fetching nearby places: {e}", exc_info=True)
            return jsonify({"error": "Failed to fetch nearby places"}), 500

        return jsonify({"center": coords, "places": places}), 200

    @discovery_bp.route('/timing', methods=['GET'])
    def optimal_timing():
        destination = request.args.get('destination', '').strip()
        start_date = request.args.get('startDate', '')
        end_date = request.args.get('endDate', '')
        if not destination or not start_date or not end_date:
            return jsonify({"error": "destination, startDate and endDate are required"}), 400
        try:
            parse_date(start_date)
            parse_date(end_date)
        except ValueError:
            return jsonify({"error": "startDate and endDate must be valid ISO dates (YYYY-MM-DD)."}), 400

        return jsonify(get_travel_data(destination, start_date, end_date)), 200

    @discovery_bp.route('/recommendations', methods=['POST'])
    def recommendations():
        data = request.get_json(silent=True) or {}
        prompt = (data.get('prompt') or '').strip()
        if not prompt:
            return jsonify({"error": "Prompt is required"}), 400

        try:
            result = get_recommendations(prompt)
        except Exception as e:
            current_app.logger.error(f"Error generating recommendations: {e}", exc_info=True)
            return jsonify({"error": "Failed to generate recommendations", "details": str(e)}), 500
        return jsonify({"recommendations": result}), 200

    return discovery_bp
