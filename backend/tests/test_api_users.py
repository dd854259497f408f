import pytest
from datetime import timedelta
from fastapi.testclient import TestClient

from luxuryhomes.main import app
from luxuryhomes.api.dependencies import get_favorite_reconciler, get_property_collection
from luxuryhomes.core.auth import create_access_token, decode_user_id
from luxuryhomes.modules.properties.slug import build_slug
from luxuryhomes.modules.users.favorites import FavoriteReconciler
from conftest import FakeFavoriteStore, OCEAN_DRIVE_ID, BEACH_TOWER_ID


@pytest.fixture
def store():
    return FakeFavoriteStore({"user-1": {BEACH_TOWER_ID}})


@pytest.fixture
def client(store, collection):
    reconciler = FavoriteReconciler(store)
    app.dependency_overrides[get_favorite_reconciler] = lambda: reconciler
    app.dependency_overrides[get_property_collection] = lambda: collection
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def bearer(user_id: str, **kwargs):
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id}, **kwargs)}"}


class TestFavoritesAPI:
    """Test cases for favorite listings"""

    def test_list_favorites(self, client):
        response = client.get("/api/v1/users/me/favorites", headers=bearer("user-1"))

        assert response.status_code == 200
        assert response.json() == {"user_id": "user-1", "property_ids": [BEACH_TOWER_ID]}

    def test_list_requires_sign_in(self, client):
        response = client.get("/api/v1/users/me/favorites")
        assert response.status_code == 401

    def test_toggle(self, client, store):
        url = f"/api/v1/users/me/favorites/{OCEAN_DRIVE_ID}/toggle"

        response = client.post(url, headers=bearer("user-1"))
        assert response.status_code == 200
        assert response.json() == {"property_id": OCEAN_DRIVE_ID, "is_favorite": True}
        assert store.favorites["user-1"] == {OCEAN_DRIVE_ID, BEACH_TOWER_ID}

        response = client.post(url, headers=bearer("user-1"))
        assert response.json()["is_favorite"] is False

    def test_toggle_by_slug(self, client):
        slug = build_slug(BEACH_TOWER_ID, "Beach Tower Penthouse")

        response = client.post(f"/api/v1/users/me/favorites/{slug}/toggle", headers=bearer("user-1"))

        assert response.json() == {"property_id": BEACH_TOWER_ID, "is_favorite": False}

    def test_toggle_requires_sign_in(self, client, store):
        response = client.post(f"/api/v1/users/me/favorites/{OCEAN_DRIVE_ID}/toggle")

        assert response.status_code == 401
        assert response.json()["detail"] == "Please sign in to save favorites"
        assert store.calls == []

    def test_expired_token_is_anonymous(self, client):
        headers = bearer("user-1", expires_delta=timedelta(minutes=-1))

        response = client.post(f"/api/v1/users/me/favorites/{OCEAN_DRIVE_ID}/toggle", headers=headers)

        assert response.status_code == 401

    def test_toggle_unknown_reference(self, client):
        response = client.post("/api/v1/users/me/favorites/not-a-listing/toggle", headers=bearer("user-1"))
        assert response.status_code == 404

    def test_toggle_missing_listing(self, client, store):
        missing_id = "ffffffff-ffff-ffff-ffff-ffffffffffff"

        response = client.post(f"/api/v1/users/me/favorites/{missing_id}/toggle", headers=bearer("user-1"))

        assert response.status_code == 404
        assert response.json()["detail"] == "Property not found"
        assert store.calls == []

    def test_toggle_store_failure(self, client, store):
        store.fail_writes = True

        response = client.post(
            f"/api/v1/users/me/favorites/{OCEAN_DRIVE_ID}/toggle", headers=bearer("user-1")
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to update favorites"

        favorites = client.get("/api/v1/users/me/favorites", headers=bearer("user-1")).json()
        assert favorites["property_ids"] == [BEACH_TOWER_ID]


class TestAccessTokens:
    """Test cases for reading identity from bearer tokens"""

    def test_round_trip(self):
        assert decode_user_id(create_access_token({"sub": "user-7"})) == "user-7"

    def test_garbage(self):
        assert decode_user_id("not.a.token") is None

    def test_missing_subject(self):
        assert decode_user_id(create_access_token({"role": "buyer"})) is None
