"""
Tests for trips/storage.py and the /trips endpoints.
"""
from unittest.mock import patch

from conftest import OWNER_UID, OTHER_UID
from shared_globals import DEFAULT_TRIP_IMAGE
from trips.storage import create_trip, get_trip_by_id, get_trips, update_trip, delete_trip


class TestTripStorage:

    def test_create_and_read_back(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)

        stored = get_trip_by_id(db, trip["id"], OWNER_UID)
        assert stored["name"] == "Tokyo Adventure"
        assert stored["userId"] == OWNER_UID
        assert stored["status"] == "upcoming"

    def test_unknown_fields_are_not_stored(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, {**trip_payload, "userId": OTHER_UID, "admin": True})
        assert trip["userId"] == OWNER_UID
        assert "admin" not in db.documents("trips")[trip["id"]]

    def test_default_image(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, {**trip_payload, "imageUrl": None})
        assert trip["imageUrl"] == DEFAULT_TRIP_IMAGE

    def test_get_trips_only_returns_own_trips_sorted(self, db, trip_payload):
        later = create_trip(db, OWNER_UID, {**trip_payload, "startDate": "2999-02-01", "endDate": "2999-02-05"})
        sooner = create_trip(db, OWNER_UID, {**trip_payload, "startDate": "2999-01-01", "endDate": "2999-01-05"})
        create_trip(db, OTHER_UID, trip_payload)

        trips = get_trips(db, OWNER_UID)
        assert [t["id"] for t in trips] == [sooner["id"], later["id"]]

    def test_get_trips_recomputes_status(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, {**trip_payload, "startDate": "2020-01-01", "endDate": "2020-01-05"})
        db.collection("trips").document(trip["id"]).update({"status": "upcoming"})
        assert get_trips(db, OWNER_UID)[0]["status"] == "completed"

    def test_non_owner_cannot_read(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        assert get_trip_by_id(db, trip["id"], OTHER_UID) is None

    def test_empty_user_id_is_public_read(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        assert get_trip_by_id(db, trip["id"], "")["id"] == trip["id"]

    def test_update_by_owner(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        assert update_trip(db, trip["id"], OWNER_UID, {"name": "Kyoto", "userId": OTHER_UID}) is True

        stored = db.documents("trips")[trip["id"]]
        assert stored["name"] == "Kyoto"
        assert stored["userId"] == OWNER_UID

    def test_update_by_non_owner_is_a_noop(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        assert update_trip(db, trip["id"], OTHER_UID, {"name": "Hijacked"}) is False
        assert db.documents("trips")[trip["id"]]["name"] == "Tokyo Adventure"

    def test_update_missing_trip(self, db):
        assert update_trip(db, "missing", OWNER_UID, {"name": "x"}) is False

    def test_delete_by_non_owner_is_a_noop(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        assert delete_trip(db, trip["id"], OTHER_UID) is False
        assert trip["id"] in db.documents("trips")

    def test_delete_cascades_to_itinerary(self, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        db.collection("itineraries").document(trip["id"]).set({"userId": OWNER_UID, "days": []})

        assert delete_trip(db, trip["id"], OWNER_UID) is True
        assert trip["id"] not in db.documents("trips")
        assert trip["id"] not in db.documents("itineraries")


class TestTripRoutes:

    def test_requires_token(self, client):
        response = client.get("/trips")
        assert response.status_code == 401

    def test_rejects_invalid_token(self, client):
        response = client.get("/trips", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_create_and_list(self, client, owner_headers, trip_payload):
        response = client.post("/trips", json=trip_payload, headers=owner_headers)
        assert response.status_code == 201
        trip_id = response.get_json()["trip"]["id"]

        listed = client.get("/trips", headers=owner_headers).get_json()["trips"]
        assert [t["id"] for t in listed] == [trip_id]

    def test_create_validates_fields(self, client, owner_headers, trip_payload):
        missing = {k: v for k, v in trip_payload.items() if k != "destination"}
        assert client.post("/trips", json=missing, headers=owner_headers).status_code == 400

        bad_travelers = {**trip_payload, "travelers": 0}
        assert client.post("/trips", json=bad_travelers, headers=owner_headers).status_code == 400

        reversed_dates = {**trip_payload, "startDate": "2025-06-25", "endDate": "2025-06-15"}
        assert client.post("/trips", json=reversed_dates, headers=owner_headers).status_code == 400

    def test_create_looks_up_destination_photo(self, client, owner_headers, trip_payload, monkeypatch):
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "test-key")
        payload = {k: v for k, v in trip_payload.items() if k != "imageUrl"}

        with patch("trips.routes.get_destination_photo", return_value="https://photos/tokyo") as mock_photo:
            response = client.post("/trips", json=payload, headers=owner_headers)

        mock_photo.assert_called_once_with("Tokyo, Japan")
        assert response.get_json()["trip"]["imageUrl"] == "https://photos/tokyo"

    def test_create_without_places_key_uses_default_image(self, client, owner_headers, trip_payload, monkeypatch):
        monkeypatch.delenv("GOOGLE_PLACES_API_KEY", raising=False)
        payload = {k: v for k, v in trip_payload.items() if k != "imageUrl"}

        response = client.post("/trips", json=payload, headers=owner_headers)
        assert response.get_json()["trip"]["imageUrl"] == DEFAULT_TRIP_IMAGE

    def test_other_user_gets_404(self, client, db, owner_headers, other_headers, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)

        assert client.get(f"/trips/{trip['id']}", headers=other_headers).status_code == 404
        assert client.patch(f"/trips/{trip['id']}", json={"name": "x"}, headers=other_headers).status_code == 404
        assert client.delete(f"/trips/{trip['id']}", headers=other_headers).status_code == 404
        assert client.get(f"/trips/{trip['id']}", headers=owner_headers).status_code == 200

    def test_patch_rejects_end_before_existing_start(self, client, db, owner_headers, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        response = client.patch(f"/trips/{trip['id']}", json={"endDate": "2000-01-01"}, headers=owner_headers)
        assert response.status_code == 400

    def test_update_image(self, client, db, owner_headers, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)

        assert client.patch(f"/trips/{trip['id']}/image", json={}, headers=owner_headers).status_code == 400
        response = client.patch(f"/trips/{trip['id']}/image", json={"imageUrl": "https://new"}, headers=owner_headers)
        assert response.get_json() == {"success": True, "imageUrl": "https://new"}
        assert db.documents("trips")[trip["id"]]["imageUrl"] == "https://new"

    def test_public_trip_includes_itinerary(self, client, db, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        db.collection("itineraries").document(trip["id"]).set({"userId": OWNER_UID, "days": [{"day": 1}]})

        response = client.get(f"/trips/public/{trip['id']}")
        assert response.status_code == 200
        assert response.get_json()["itinerary"] == [{"day": 1}]

    def test_share_url(self, client, db, owner_headers, trip_payload):
        trip = create_trip(db, OWNER_UID, trip_payload)
        response = client.get(f"/trips/{trip['id']}/share", headers=owner_headers)
        assert response.get_json()["shareUrl"].endswith(f"/trips/public/{trip['id']}")
