# user_auth/profile_storage.py
import logging

from firebase_admin import firestore

logger = logging.getLogger(__name__)

USER_PROFILES_COLLECTION = 'userProfiles'

PROFILE_FIELDS = ['email', 'displayName', 'username', 'bio', 'location', 'website', 'photoURL']


def get_user_profile(db, user_id):
    """Returns the stored profile dict, or None when it does not exist or the read fails."""
    try:
        doc = db.collection(USER_PROFILES_COLLECTION).document(user_id).get()
        if doc.exists:
            return doc.to_dict()
        return None
    except Exception as e:
        logger.error(f"Error getting user profile {user_id}: {e}")
        return None


def save_user_profile(db, user_id, data):
    """
    Creates the profile on first save, updates it afterwards.
    Only PROFILE_FIELDS are written; returns True on success.
    """
    updates = {field: data[field] for field in PROFILE_FIELDS if field in data}
    try:
        profile_ref = db.collection(USER_PROFILES_COLLECTION).document(user_id)
        if profile_ref.get().exists:
            updates['updatedAt'] = firestore.SERVER_TIMESTAMP
            profile_ref.update(updates)
        else:
            profile_ref.set({
                "userId": user_id,
                **updates,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        return True
    except Exception as e:
        logger.error(f"Error saving user profile {user_id}: {e}")
        return False


def default_profile_fields(email, display_name=None, username=None, photo_url=None):
    """Initial profile values for a freshly registered account."""
    email_name = email.split('@')[0] if email else 'user'
    profile = {
        "email": email or '',
        "displayName": display_name or email_name or 'User',
        "username": username or email_name.lower(),
    }
    if photo_url:
        profile["photoURL"] = photo_url
    return profile
