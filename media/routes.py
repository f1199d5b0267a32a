# media/routes.py
from flask import Blueprint, request, jsonify, session, current_app

from media.uploader import upload_image
from user_auth.utils import login_required_user


def create_media_bp():
    media_bp = Blueprint('media_bp', __name__, url_prefix='/media')

    @media_bp.route('/upload', methods=['POST'])
    @login_required_user
    def upload():
        user_uid = session.get('user_uid')
        if "file" not in request.files:
            return jsonify({"error": "No file part in request"}), 400

        try:
            url = upload_image(request.files["file"])
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except RuntimeError as e:
            current_app.logger.error(f"Image upload unavailable: {e}")
            return jsonify({"error": "Image upload is not configured."}), 500

        if not url:
            return jsonify({"error": "Failed to upload image"}), 502
        current_app.logger.info(f"User {user_uid} uploaded {url}")
        return jsonify({"url": url}), 201

    return media_bp
