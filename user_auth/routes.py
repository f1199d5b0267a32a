# user_auth/routes.py
from collections import Counter

from firebase_admin import auth
from flask import Blueprint, request, jsonify, session, current_app

from community_feed.storage import get_user_posts
from trips.storage import get_trips
from user_auth.identity import (
    IdentityError, create_account, sign_in_with_password, sign_in_with_oauth,
    send_password_reset, verify_reset_code, confirm_password_reset
)
from user_auth.profile_storage import (
    PROFILE_FIELDS, get_user_profile, save_user_profile, default_profile_fields
)
from user_auth.utils import login_required_user

MIN_PASSWORD_LENGTH = 6


def create_user_bp(db_instance):
    user_bp = Blueprint('user_bp', __name__, url_prefix='/user')

    @user_bp.route('/profile', methods=['GET'])
    @login_required_user
    def get_profile():
        user_uid = session.get('user_uid')
        profile = get_user_profile(db_instance, user_uid)
        if profile:
            return jsonify({"profile": profile}), 200

        try:
            firebase_user = auth.get_user(user_uid)
        except auth.UserNotFoundError:
            return jsonify({"error": "User not found."}), 404
        except Exception as e:
            current_app.logger.error(f"Error fetching Firebase Auth user {user_uid}: {e}")
            return jsonify({"error": "Could not retrieve basic user info."}), 500

        basic_profile = default_profile_fields(firebase_user.email, firebase_user.display_name,
                                               photo_url=firebase_user.photo_url)
        basic_profile['userId'] = user_uid
        return jsonify({"profile": basic_profile, "message": "User profile not fully set up."}), 200

    @user_bp.route('/profile', methods=['POST'])
    @login_required_user
    def update_profile():
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}

        updates = {field: data[field] for field in PROFILE_FIELDS if field in data}
        for field, value in updates.items():
            if value is not None and not isinstance(value, str):
                return jsonify({"error": f"{field} must be a string."}), 400
        if 'username' in updates and not (updates['username'] or '').strip():
            return jsonify({"error": "username cannot be empty."}), 400

        if not save_user_profile(db_instance, user_uid, updates):
            return jsonify({"error": "Failed to update user profile"}), 500
        return jsonify({"message": "User profile updated successfully"}), 200

    @user_bp.route('/stats', methods=['GET'])
    @login_required_user
    def get_stats():
        user_uid = session.get('user_uid')
        trips = get_trips(db_instance, user_uid)
        counts = Counter(trip['status'] for trip in trips)
        return jsonify({
            "trips": trips,
            "tripCounts": {status: counts.get(status, 0) for status in ('upcoming', 'ongoing', 'completed')},
            "postCount": len(get_user_posts(db_instance, user_uid)),
        }), 200

    return user_bp


def _identity_error_response(e):
    status = e.status_code if 400 <= e.status_code < 600 else 400
    return jsonify({"error": e.code}), status


def create_auth_bp(db_instance):
    auth_bp = Blueprint('auth_bp', __name__, url_prefix='/auth')

    @auth_bp.route('/signup', methods=['POST'])
    def signup():
        data = request.get_json(silent=True) or {}
        email = (data.get('email') or '').strip()
        password = data.get('password') or ''
        if not email or not password:
            return jsonify({"error": "email and password are required."}), 400
        if len(password) < MIN_PASSWORD_LENGTH:
            return jsonify({"error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."}), 400

        try:
            uid = create_account(email, password, data.get('displayName'))
        except IdentityError as e:
            return _identity_error_response(e)
        except Exception as e:
            current_app.logger.error(f"Error creating account for {email}: {e}", exc_info=True)
            return jsonify({"error": "Failed to create account."}), 500

        profile = default_profile_fields(email, data.get('displayName'), data.get('username'))
        if not save_user_profile(db_instance, uid, profile):
            current_app.logger.error(f"Account {uid} created but its profile could not be saved.")
        return jsonify({"message": "Account created", "uid": uid}), 201

    @auth_bp.route('/login', methods=['POST'])
    def login():
        data = request.get_json(silent=True) or {}
        if not data.get('email') or not data.get('password'):
            return jsonify({"error": "email and password are required."}), 400
        try:
            return jsonify(sign_in_with_password(data['email'], data['password'])), 200
        except IdentityError as e:
            return _identity_error_response(e)

    @auth_bp.route('/oauth', methods=['POST'])
    def oauth_login():
        data = request.get_json(silent=True) or {}
        id_token = data.get('idToken')
        provider_id = data.get('providerId', 'google.com')
        if not id_token:
            return jsonify({"error": "idToken is required."}), 400
        try:
            result = sign_in_with_oauth(provider_id, id_token)
        except IdentityError as e:
            return _identity_error_response(e)

        if not get_user_profile(db_instance, result['uid']):
            profile = default_profile_fields(result.get('email'), result.get('displayName'),
                                             photo_url=result.get('photoURL'))
            save_user_profile(db_instance, result['uid'], profile)
        return jsonify(result), 200

    @auth_bp.route('/forgot-password', methods=['POST'])
    def forgot_password():
        data = request.get_json(silent=True) or {}
        email = (data.get('email') or '').strip()
        if not email:
            return jsonify({"error": "email is required."}), 400
        try:
            send_password_reset(email)
        except IdentityError as e:
            return _identity_error_response(e)
        return jsonify({"message": "Password reset email sent"}), 200

    @auth_bp.route('/reset-password', methods=['GET'])
    def check_reset_code():
        oob_code = request.args.get('oobCode')
        if not oob_code:
            return jsonify({"error": "oobCode is required."}), 400
        try:
            return jsonify({"email": verify_reset_code(oob_code)}), 200
        except IdentityError as e:
            return _identity_error_response(e)

    @auth_bp.route('/reset-password', methods=['POST'])
    def reset_password():
        data = request.get_json(silent=True) or {}
        oob_code = data.get('oobCode')
        new_password = data.get('newPassword') or ''
        if not oob_code:
            return jsonify({"error": "oobCode is required."}), 400
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return jsonify({"error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters."}), 400
        try:
            email = confirm_password_reset(oob_code, new_password)
        except IdentityError as e:
            return _identity_error_response(e)
        return jsonify({"message": "Password has been reset", "email": email}), 200

    return auth_bp
