import os
import sys
from datetime import date, timedelta

import pytest
from unittest.mock import patch

# Project root, so app.py and the top-level packages import by name.
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_tests_dir = os.path.dirname(os.path.abspath(__file__))
for _p in (_root, _tests_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

from fake_firestore import FakeFirestore
import shared_globals

OWNER_UID = "user-owner"
OTHER_UID = "user-other"

TOKENS = {
    "owner-token": OWNER_UID,
    "other-token": OTHER_UID,
}


def _fake_verify_id_token(token):
    if token not in TOKENS:
        raise ValueError("Invalid token")
    return {"uid": TOKENS[token]}


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture(autouse=True)
def clear_photo_cache():
    shared_globals.photo_cache.clear()
    yield
    shared_globals.photo_cache.clear()


@pytest.fixture
def app(db):
    from app import create_app

    flask_app = create_app(db_instance=db)
    flask_app.config.update(TESTING=True)
    with patch("user_auth.utils.auth.verify_id_token", side_effect=_fake_verify_id_token):
        yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def owner_headers():
    return {"Authorization": "Bearer owner-token"}


@pytest.fixture
def other_headers():
    return {"Authorization": "Bearer other-token"}


@pytest.fixture
def trip_payload():
    start = date.today() + timedelta(days=30)
    return {
        "name": "Tokyo Adventure",
        "destination": "Tokyo, Japan",
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=10)).isoformat(),
        "travelers": 2,
        "budget": 5000,
        "imageUrl": "https://example.com/tokyo.jpg",
    }
