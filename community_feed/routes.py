# community_feed/routes.py
from flask import Blueprint, request, jsonify, session, current_app

from community_feed.storage import (
    create_post, get_all_posts, get_user_posts, get_saved_posts, toggle_like, toggle_save,
    update_post, delete_post, add_comment, get_comments, delete_comment
)
from user_auth.profile_storage import get_user_profile
from user_auth.utils import login_required_user

MAX_IMAGES_PER_POST = 10


def _author_for(db_instance, user_uid, data):
    """Author name, username and photo from the stored profile, falling back to the request body."""
    profile = get_user_profile(db_instance, user_uid) or {}
    name = profile.get('displayName') or data.get('authorName') or 'Traveler'
    username = profile.get('username') or data.get('authorUsername') or user_uid
    return name, username, profile.get('photoURL')


def _non_string_field(data, fields):
    """First of `fields` present in data with a value that is not a string, or None."""
    for field in fields:
        if data.get(field) is not None and not isinstance(data[field], str):
            return field
    return None


def create_community_bp(db_instance):
    community_bp = Blueprint('community_bp', __name__, url_prefix='/community')

    @community_bp.route('/feed', methods=['GET'])
    def get_community_feed():
        return jsonify({"posts": get_all_posts(db_instance)}), 200

    @community_bp.route('/saved', methods=['GET'])
    @login_required_user
    def get_saved_feed():
        user_uid = session.get('user_uid')
        return jsonify({"posts": get_saved_posts(db_instance, user_uid)}), 200

    @community_bp.route('/users/<user_id>/posts', methods=['GET'])
    def get_posts_by_user(user_id):
        return jsonify({"userId": user_id, "posts": get_user_posts(db_instance, user_id)}), 200

    @community_bp.route('/posts', methods=['POST'])
    @login_required_user
    def create_community_post():
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}
        field = _non_string_field(data, ('content', 'location'))
        if field:
            return jsonify({"error": f"{field} must be a string."}), 400

        content = (data.get('content') or '').strip()
        location = (data.get('location') or '').strip()
        images = data.get('images') or []
        if not content:
            return jsonify({"error": "Post content is required."}), 400
        if not isinstance(images, list) or not all(isinstance(url, str) for url in images):
            return jsonify({"error": "images must be a list of URLs."}), 400
        if len(images) > MAX_IMAGES_PER_POST:
            return jsonify({"error": f"A post can have at most {MAX_IMAGES_PER_POST} images."}), 400

        name, username, _ = _author_for(db_instance, user_uid, data)
        try:
            post_id = create_post(db_instance, user_uid, name, username, content, location, images)
        except Exception as e:
            current_app.logger.error(f"Error creating community post for user {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to create post."}), 500
        return jsonify({"message": "Post created successfully!", "post_id": post_id}), 201

    @community_bp.route('/posts/<post_id>', methods=['PATCH'])
    @login_required_user
    def edit_post(post_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}
        field = _non_string_field(data, ('content', 'location'))
        if field:
            return jsonify({"error": f"{field} must be a string."}), 400
        if 'content' in data and not (data['content'] or '').strip():
            return jsonify({"error": "Post content cannot be empty."}), 400

        if not update_post(db_instance, post_id, user_uid, data):
            return jsonify({"error": "Post not found."}), 404
        return jsonify({"message": "Post updated"}), 200

    @community_bp.route('/posts/<post_id>', methods=['DELETE'])
    @login_required_user
    def remove_post(post_id):
        user_uid = session.get('user_uid')
        if not delete_post(db_instance, post_id, user_uid):
            return jsonify({"error": "Post not found."}), 404
        return jsonify({"message": "Post deleted"}), 200

    @community_bp.route('/posts/<post_id>/like', methods=['POST'])
    @login_required_user
    def like_post(post_id):
        user_uid = session.get('user_uid')
        if not toggle_like(db_instance, post_id, user_uid):
            return jsonify({"error": "Post not found."}), 404
        return jsonify({"message": "Like toggled"}), 200

    @community_bp.route('/posts/<post_id>/save', methods=['POST'])
    @login_required_user
    def save_post(post_id):
        user_uid = session.get('user_uid')
        if not toggle_save(db_instance, post_id, user_uid):
            return jsonify({"error": "Post not found."}), 404
        return jsonify({"message": "Save toggled"}), 200

    @community_bp.route('/posts/<post_id>/comments', methods=['GET'])
    def list_comments(post_id):
        return jsonify({"postId": post_id, "comments": get_comments(db_instance, post_id)}), 200

    @community_bp.route('/posts/<post_id>/comments', methods=['POST'])
    @login_required_user
    def create_comment(post_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}
        if _non_string_field(data, ('content',)):
            return jsonify({"error": "content must be a string."}), 400
        content = (data.get('content') or '').strip()
        if not content:
            return jsonify({"error": "Comment content is required."}), 400

        name, username, photo_url = _author_for(db_instance, user_uid, data)
        comment_id = add_comment(db_instance, post_id, user_uid, name, username, content, photo_url)
        if not comment_id:
            return jsonify({"error": "Post not found."}), 404
        return jsonify({"message": "Comment added", "comment_id": comment_id}), 201

    @community_bp.route('/posts/<post_id>/comments/<comment_id>', methods=['DELETE'])
    @login_required_user
    def remove_comment(post_id, comment_id):
        user_uid = session.get('user_uid')
        if not delete_comment(db_instance, comment_id, user_uid, post_id):
            return jsonify({"error": "Comment not found."}), 404
        return jsonify({"message": "Comment deleted"}), 200

    return community_bp
