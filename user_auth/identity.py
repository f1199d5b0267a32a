# user_auth/identity.py
"""
Thin wrappers around Firebase Authentication.

Account creation goes through the Admin SDK; password sign-in, OAuth
credential exchange and the password-reset code flow go through the
Identity Toolkit REST API, which needs the project's web API key
(FIREBASE_WEB_API_KEY).
"""
import os
import logging

import requests
from firebase_admin import auth

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts:{method}"
REQUEST_TIMEOUT = 15


class IdentityError(Exception):
    """Raised when the identity provider rejects a request. `code` is the provider's error code."""

    def __init__(self, code, status_code=400):
        super().__init__(code)
        self.code = code
        self.status_code = status_code


def _web_api_key():
    api_key = os.environ.get('FIREBASE_WEB_API_KEY')
    if not api_key:
        raise RuntimeError("FIREBASE_WEB_API_KEY not configured")
    return api_key


def _call_identity_toolkit(method, payload):
    url = IDENTITY_TOOLKIT_URL.format(method=method)
    try:
        response = requests.post(url, params={"key": _web_api_key()}, json=payload, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        logger.error(f"Identity Toolkit {method} request failed: {e}")
        raise IdentityError("IDENTITY_PROVIDER_UNAVAILABLE", status_code=503) from e

    try:
        data = response.json() if response.content else {}
    except ValueError as e:
        logger.error(f"Identity Toolkit {method} returned a non-JSON response ({response.status_code})")
        raise IdentityError("IDENTITY_PROVIDER_UNAVAILABLE", status_code=502) from e
    if response.status_code != 200:
        code = (data.get("error") or {}).get("message", "UNKNOWN_ERROR")
        logger.warning(f"Identity Toolkit {method} rejected: {code}")
        raise IdentityError(code, status_code=response.status_code)
    return data


def _session_from(data):
    return {
        "uid": data.get("localId"),
        "email": data.get("email"),
        "displayName": data.get("displayName"),
        "photoURL": data.get("photoUrl"),
        "idToken": data.get("idToken"),
        "refreshToken": data.get("refreshToken"),
        "expiresIn": data.get("expiresIn"),
    }


def create_account(email, password, display_name=None):
    """Creates the Firebase user and returns its uid."""
    try:
        user = auth.create_user(email=email, password=password, display_name=display_name)
    except auth.EmailAlreadyExistsError as e:
        raise IdentityError("EMAIL_EXISTS") from e
    except ValueError as e:
        raise IdentityError(f"INVALID_ARGUMENT: {e}") from e
    return user.uid


def sign_in_with_password(email, password):
    data = _call_identity_toolkit("signInWithPassword", {
        "email": email,
        "password": password,
        "returnSecureToken": True,
    })
    return _session_from(data)


def sign_in_with_oauth(provider_id, id_token, request_uri="http://localhost"):
    """Exchanges an OAuth provider ID token (e.g. google.com) for a Firebase session."""
    data = _call_identity_toolkit("signInWithIdp", {
        "postBody": f"id_token={id_token}&providerId={provider_id}",
        "requestUri": request_uri,
        "returnIdpCredential": True,
        "returnSecureToken": True,
    })
    session_data = _session_from(data)
    session_data["isNewUser"] = bool(data.get("isNewUser"))
    return session_data


def send_password_reset(email):
    """Asks the provider to email a one-time reset code to the user."""
    _call_identity_toolkit("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
    return True


def verify_reset_code(oob_code):
    """Returns the email the reset code was issued for."""
    data = _call_identity_toolkit("resetPassword", {"oobCode": oob_code})
    return data.get("email")


def confirm_password_reset(oob_code, new_password):
    data = _call_identity_toolkit("resetPassword", {"oobCode": oob_code, "newPassword": new_password})
    return data.get("email")
