# community_feed/storage.py
import datetime
import logging

from firebase_admin import firestore

from user_auth.profile_storage import USER_PROFILES_COLLECTION

logger = logging.getLogger(__name__)

POSTS_COLLECTION = 'posts'
COMMENTS_COLLECTION = 'comments'


def avatar_initials(name):
    """'Jane Doe' -> 'JD'."""
    return ''.join(part[0] for part in (name or '').split() if part).upper()


def _now():
    return datetime.datetime.now(datetime.timezone.utc)


def _enrich_author(db, record, profiles):
    """Overlays the author's current profile (display name, username, photo) on a post or comment."""
    user_id = record.get('userId')
    if not user_id:
        return record
    try:
        if user_id not in profiles:
            doc = db.collection(USER_PROFILES_COLLECTION).document(user_id).get()
            profiles[user_id] = doc.to_dict() if doc.exists else None
    except Exception as e:
        logger.error(f"Error fetching user profile {user_id}: {e}")
        return record

    profile = profiles[user_id]
    if not profile:
        return record
    author = dict(record.get('author') or {})
    author['name'] = profile.get('displayName') or author.get('name')
    author['username'] = profile.get('username') or author.get('username')
    if profile.get('photoURL'):
        author['photoURL'] = profile['photoURL']
    return {**record, "author": author}


def _posts_from_query(db, query, enrich=True):
    posts = [{"id": doc.id, **doc.to_dict()} for doc in query.stream()]
    if not enrich:
        return posts
    profiles = {}
    return [_enrich_author(db, post, profiles) for post in posts]


def create_post(db, user_id, author_name, author_username, content, location, images=None):
    """Stores a post and returns its id. Raises on failure."""
    now = _now()
    post_data = {
        "userId": user_id,
        "author": {
            "name": author_name,
            "avatar": avatar_initials(author_name),
            "username": author_username,
        },
        "content": content,
        "location": location,
        "images": images or [],
        "likes": 0,
        "comments": 0,
        "likedBy": [],
        "savedBy": [],
        "timestamp": now,
        "createdAt": now,
    }
    try:
        _, doc_ref = db.collection(POSTS_COLLECTION).add(post_data)
    except Exception as e:
        logger.error(f"Error creating post for user {user_id}: {e}")
        raise
    return doc_ref.id


def get_all_posts(db):
    """Every post, newest first, with author details from current profiles."""
    try:
        query = db.collection(POSTS_COLLECTION).order_by('timestamp', direction=firestore.Query.DESCENDING)
        return _posts_from_query(db, query)
    except Exception as e:
        logger.error(f"Error getting posts: {e}")
        return []


def get_user_posts(db, user_id):
    try:
        query = (db.collection(POSTS_COLLECTION)
                 .where('userId', '==', user_id)
                 .order_by('timestamp', direction=firestore.Query.DESCENDING))
        return _posts_from_query(db, query, enrich=False)
    except Exception as e:
        logger.error(f"Error getting posts of user {user_id}: {e}")
        return []


def get_saved_posts(db, user_id):
    try:
        query = (db.collection(POSTS_COLLECTION)
                 .where('savedBy', 'array_contains', user_id)
                 .order_by('timestamp', direction=firestore.Query.DESCENDING))
        return _posts_from_query(db, query)
    except Exception as e:
        logger.error(f"Error getting saved posts of user {user_id}: {e}")
        return []


def _toggle_membership(db, post_id, user_id, field, counter=None):
    post_ref = db.collection(POSTS_COLLECTION).document(post_id)
    doc = post_ref.get()
    if not doc.exists:
        return False

    members = doc.to_dict().get(field) or []
    if user_id in members:
        updates = {field: firestore.ArrayRemove([user_id])}
        step = -1
    else:
        updates = {field: firestore.ArrayUnion([user_id])}
        step = 1
    if counter:
        updates[counter] = firestore.Increment(step)
    post_ref.update(updates)
    return True


def toggle_like(db, post_id, user_id):
    try:
        return _toggle_membership(db, post_id, user_id, 'likedBy', counter='likes')
    except Exception as e:
        logger.error(f"Error toggling like on post {post_id}: {e}")
        return False


def toggle_save(db, post_id, user_id):
    try:
        return _toggle_membership(db, post_id, user_id, 'savedBy')
    except Exception as e:
        logger.error(f"Error toggling save on post {post_id}: {e}")
        return False


def _owned_post_ref(db, post_id, user_id):
    post_ref = db.collection(POSTS_COLLECTION).document(post_id)
    doc = post_ref.get()
    if not doc.exists:
        return None
    if doc.to_dict().get('userId') != user_id:
        logger.error(f"User {user_id} does not own post {post_id}")
        return None
    return post_ref


def update_post(db, post_id, user_id, updates):
    """Edits content and/or location of the user's own post."""
    try:
        post_ref = _owned_post_ref(db, post_id, user_id)
        if post_ref is None:
            return False
        changes = {field: updates[field] for field in ('content', 'location')
                   if isinstance(updates.get(field), str)}
        if changes:
            post_ref.update(changes)
        return True
    except Exception as e:
        logger.error(f"Error updating post {post_id}: {e}")
        return False


def delete_post(db, post_id, user_id):
    try:
        post_ref = _owned_post_ref(db, post_id, user_id)
        if post_ref is None:
            return False
        post_ref.delete()
        return True
    except Exception as e:
        logger.error(f"Error deleting post {post_id}: {e}")
        return False


def add_comment(db, post_id, user_id, author_name, author_username, content, photo_url=None):
    """Adds a comment and bumps the post's comment count. Returns the comment id, or None."""
    comment_data = {
        "postId": post_id,
        "userId": user_id,
        "author": {"name": author_name, "username": author_username},
        "content": content,
        "timestamp": _now(),
    }
    if photo_url:
        comment_data['author']['photoURL'] = photo_url

    try:
        post_ref = db.collection(POSTS_COLLECTION).document(post_id)
        if not post_ref.get().exists:
            return None
        _, comment_ref = db.collection(COMMENTS_COLLECTION).add(comment_data)
        post_ref.update({"comments": firestore.Increment(1)})
        return comment_ref.id
    except Exception as e:
        logger.error(f"Error adding comment to post {post_id}: {e}")
        return None


def get_comments(db, post_id):
    """Comments on a post, oldest first, with author details from current profiles."""
    try:
        query = (db.collection(COMMENTS_COLLECTION)
                 .where('postId', '==', post_id)
                 .order_by('timestamp'))
        comments = [{"id": doc.id, **doc.to_dict()} for doc in query.stream()]
        profiles = {}
        return [_enrich_author(db, comment, profiles) for comment in comments]
    except Exception as e:
        logger.error(f"Error getting comments for post {post_id}: {e}")
        return []


def delete_comment(db, comment_id, user_id, post_id):
    try:
        comment_ref = db.collection(COMMENTS_COLLECTION).document(comment_id)
        doc = comment_ref.get()
        if not doc.exists:
            return False
        comment = doc.to_dict()
        if comment.get('postId') != post_id:
            return False
        if comment.get('userId') != user_id:
            logger.error(f"User {user_id} does not own comment {comment_id}")
            return False

        comment_ref.delete()
    except Exception as e:
        logger.error(f"Error deleting comment {comment_id}: {e}")
        return False

    try:
        db.collection(POSTS_COLLECTION).document(post_id).update({"comments": firestore.Increment(-1)})
    except Exception as e:
        logger.error(f"Comment {comment_id} deleted but the count of post {post_id} was not updated: {e}")
    return True
