"""
Tests for user_auth/: Identity Toolkit wrappers, profile storage and the /auth and /user endpoints.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests
from firebase_admin import auth

from community_feed.storage import create_post
from conftest import OWNER_UID
from trips.storage import create_trip
from user_auth import identity
from user_auth.profile_storage import default_profile_fields, get_user_profile, save_user_profile


def _response(status_code, body):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}"
    response.json.return_value = body
    return response


@pytest.fixture
def web_api_key(monkeypatch):
    monkeypatch.setenv("FIREBASE_WEB_API_KEY", "web-key")


class TestIdentity:

    def test_password_sign_in(self, web_api_key):
        body = {"localId": "uid-1", "email": "a@b.com", "idToken": "tok", "refreshToken": "ref",
                "expiresIn": "3600", "displayName": "A"}
        with patch("user_auth.identity.requests.post", return_value=_response(200, body)) as mock_post:
            result = identity.sign_in_with_password("a@b.com", "secret")

        assert mock_post.call_args.args[0].endswith("accounts:signInWithPassword")
        assert mock_post.call_args.kwargs["params"] == {"key": "web-key"}
        assert result["uid"] == "uid-1"
        assert result["idToken"] == "tok"

    def test_provider_error_code_is_raised(self, web_api_key):
        body = {"error": {"message": "INVALID_PASSWORD"}}
        with patch("user_auth.identity.requests.post", return_value=_response(400, body)):
            with pytest.raises(identity.IdentityError) as excinfo:
                identity.sign_in_with_password("a@b.com", "wrong")
        assert excinfo.value.code == "INVALID_PASSWORD"

    def test_network_failure(self, web_api_key):
        with patch("user_auth.identity.requests.post", side_effect=requests.ConnectionError("down")):
            with pytest.raises(identity.IdentityError) as excinfo:
                identity.send_password_reset("a@b.com")
        assert excinfo.value.status_code == 503

    def test_non_json_error_page(self, web_api_key):
        response = _response(502, None)
        response.content = b"<html>Bad Gateway</html>"
        response.json.side_effect = ValueError("Expecting value")
        with patch("user_auth.identity.requests.post", return_value=response):
            with pytest.raises(identity.IdentityError) as excinfo:
                identity.sign_in_with_password("a@b.com", "secret")
        assert excinfo.value.status_code == 502
        assert excinfo.value.code == "IDENTITY_PROVIDER_UNAVAILABLE"

    def test_missing_web_api_key(self, monkeypatch):
        monkeypatch.delenv("FIREBASE_WEB_API_KEY", raising=False)
        with pytest.raises(RuntimeError):
            identity.send_password_reset("a@b.com")

    def test_oauth_marks_new_users(self, web_api_key):
        body = {"localId": "uid-2", "email": "g@b.com", "isNewUser": True}
        with patch("user_auth.identity.requests.post", return_value=_response(200, body)) as mock_post:
            result = identity.sign_in_with_oauth("google.com", "google-id-token")

        assert "id_token=google-id-token&providerId=google.com" in mock_post.call_args.kwargs["json"]["postBody"]
        assert result["isNewUser"] is True

    def test_reset_code_flow(self, web_api_key):
        with patch("user_auth.identity.requests.post", return_value=_response(200, {"email": "a@b.com"})) as mock_post:
            assert identity.verify_reset_code("code") == "a@b.com"
            assert identity.confirm_password_reset("code", "newpass") == "a@b.com"
        assert mock_post.call_args.kwargs["json"] == {"oobCode": "code", "newPassword": "newpass"}

    def test_create_account_existing_email(self):
        with patch("user_auth.identity.auth.create_user", side_effect=auth.EmailAlreadyExistsError("exists", None, None)):
            with pytest.raises(identity.IdentityError) as excinfo:
                identity.create_account("a@b.com", "secret")
        assert excinfo.value.code == "EMAIL_EXISTS"


class TestProfileStorage:

    def test_default_profile_from_email(self):
        assert default_profile_fields("Jane.Doe@example.com") == {
            "email": "Jane.Doe@example.com",
            "displayName": "Jane.Doe",
            "username": "jane.doe",
        }

    def test_create_then_update(self, db):
        assert save_user_profile(db, OWNER_UID, {"displayName": "Jane", "isAdmin": True}) is True
        profile = get_user_profile(db, OWNER_UID)
        assert profile["userId"] == OWNER_UID
        assert "isAdmin" not in profile

        save_user_profile(db, OWNER_UID, {"bio": "Traveler"})
        profile = get_user_profile(db, OWNER_UID)
        assert (profile["displayName"], profile["bio"]) == ("Jane", "Traveler")

    def test_missing_profile(self, db):
        assert get_user_profile(db, "nobody") is None


class TestAuthRoutes:

    def test_signup_creates_profile(self, client, db):
        with patch("user_auth.routes.create_account", return_value="new-uid"):
            response = client.post("/auth/signup", json={"email": "sam@example.com", "password": "secret1",
                                                         "displayName": "Sam"})

        assert response.status_code == 201
        assert response.get_json()["uid"] == "new-uid"
        assert get_user_profile(db, "new-uid")["username"] == "sam"

    @pytest.mark.parametrize("payload", [
        {"email": "sam@example.com"},
        {"email": "sam@example.com", "password": "123"},
    ])
    def test_signup_validation(self, client, payload):
        assert client.post("/auth/signup", json=payload).status_code == 400

    def test_signup_existing_email(self, client):
        with patch("user_auth.routes.create_account", side_effect=identity.IdentityError("EMAIL_EXISTS")):
            response = client.post("/auth/signup", json={"email": "sam@example.com", "password": "secret1"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "EMAIL_EXISTS"

    def test_login_error_passthrough(self, client):
        with patch("user_auth.routes.sign_in_with_password",
                   side_effect=identity.IdentityError("INVALID_LOGIN_CREDENTIALS")):
            response = client.post("/auth/login", json={"email": "a@b.com", "password": "x"})
        assert response.status_code == 400

    def test_oauth_creates_missing_profile(self, client, db):
        result = {"uid": "g-uid", "email": "g@example.com", "displayName": "Gee", "photoURL": "https://p"}
        with patch("user_auth.routes.sign_in_with_oauth", return_value=result):
            response = client.post("/auth/oauth", json={"idToken": "google-token"})

        assert response.status_code == 200
        assert get_user_profile(db, "g-uid")["photoURL"] == "https://p"

    def test_reset_password_requires_long_password(self, client):
        response = client.post("/auth/reset-password", json={"oobCode": "c", "newPassword": "1"})
        assert response.status_code == 400

    def test_forgot_password(self, client):
        with patch("user_auth.routes.send_password_reset", return_value=True) as mock_send:
            response = client.post("/auth/forgot-password", json={"email": "a@b.com"})
        assert response.status_code == 200
        mock_send.assert_called_once_with("a@b.com")


class TestUserRoutes:

    def test_profile_round_trip(self, client, owner_headers):
        response = client.post("/user/profile", json={"displayName": "Jane", "bio": "Hi"}, headers=owner_headers)
        assert response.status_code == 200

        profile = client.get("/user/profile", headers=owner_headers).get_json()["profile"]
        assert profile["displayName"] == "Jane"

    def test_profile_rejects_non_string_and_empty_username(self, client, owner_headers):
        assert client.post("/user/profile", json={"bio": 5}, headers=owner_headers).status_code == 400
        assert client.post("/user/profile", json={"username": " "}, headers=owner_headers).status_code == 400

    def test_profile_falls_back_to_auth_record(self, client, owner_headers):
        firebase_user = MagicMock(email="jane@example.com", display_name=None, photo_url=None)
        with patch("user_auth.routes.auth.get_user", return_value=firebase_user):
            body = client.get("/user/profile", headers=owner_headers).get_json()
        assert body["profile"]["username"] == "jane"
        assert body["profile"]["userId"] == OWNER_UID

    def test_stats(self, client, db, owner_headers, trip_payload):
        create_trip(db, OWNER_UID, trip_payload)
        create_trip(db, OWNER_UID, {**trip_payload, "startDate": "2020-01-01", "endDate": "2020-01-03"})
        create_post(db, OWNER_UID, "Jane", "jane", "Hello", "")

        body = client.get("/user/stats", headers=owner_headers).get_json()
        assert body["tripCounts"] == {"upcoming": 1, "ongoing": 0, "completed": 1}
        assert body["postCount"] == 1
