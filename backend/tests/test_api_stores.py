import pytest

from models.store import Store


@pytest.fixture
def store_id(client, admin, owner, auth):
    response = client.post("/stores", json={"name": "Corner Shop", "address": "1 Main St", "ownerId": owner.id},
                           headers=auth(admin))
    assert response.status_code == 201
    return response.json()["id"]


def test_normal_user_cannot_create_store(client, db, alice, owner, auth):
    response = client.post("/stores", json={"name": "Corner Shop", "address": "1 Main St", "ownerId": owner.id},
                           headers=auth(alice))
    assert response.status_code == 403
    assert db.query(Store).count() == 0


def test_create_store_validation(client, admin, owner, auth):
    too_long = client.post("/stores", json={"name": "x" * 256, "address": "1 Main St", "ownerId": owner.id},
                           headers=auth(admin))
    assert too_long.status_code == 422

    missing_owner = client.post("/stores", json={"name": "Shop", "address": "1 Main St", "ownerId": "missing"},
                                headers=auth(admin))
    assert missing_owner.status_code == 404


def test_create_store_response(client, admin, owner, auth):
    response = client.post("/stores", json={"name": "Corner Shop", "address": "1 Main St", "ownerId": owner.id},
                           headers=auth(admin))
    body = response.json()
    assert body["ownerId"] == owner.id
    assert body["owner"]["email"] == owner.email
    assert body["ratingCount"] == 0
    assert body["averageRating"] is None


def test_list_stores_for_any_role(client, store_id, alice, auth):
    response = client.get("/stores", params={"name": "corner"}, headers=auth(alice))
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [store_id]

    assert client.get("/stores", params={"name": "bakery"}, headers=auth(alice)).json() == []
    assert client.get("/stores").status_code == 401


def test_store_detail_and_average(client, store_id, alice, bob, auth):
    client.post("/ratings", json={"storeId": store_id, "ratingValue": 5}, headers=auth(alice))
    client.post("/ratings", json={"storeId": store_id, "ratingValue": 3}, headers=auth(bob))

    detail = client.get(f"/stores/{store_id}", headers=auth(alice)).json()
    assert detail["ratingCount"] == 2
    assert detail["averageRating"] == 4.0
    assert {r["user"]["email"] for r in detail["ratings"]} == {alice.email, bob.email}

    average = client.get(f"/stores/{store_id}/average-rating", headers=auth(alice)).json()
    assert average == {"averageRating": 4.0, "totalRatings": 2}

    assert client.get("/stores/missing", headers=auth(alice)).status_code == 404


def test_my_stores(client, store_id, owner, alice, auth):
    response = client.get("/stores/my-stores", headers=auth(owner))
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [store_id]

    assert client.get("/stores/my-stores", headers=auth(alice)).status_code == 403


def test_update_and_delete_store(client, db, store_id, admin, alice, auth):
    assert client.patch(f"/stores/{store_id}", json={"name": "Renamed"}, headers=auth(alice)).status_code == 403

    updated = client.patch(f"/stores/{store_id}", json={"name": "Renamed"}, headers=auth(admin))
    assert updated.status_code == 200
    assert updated.json()["name"] == "Renamed"

    assert client.patch("/stores/missing", json={"name": "X"}, headers=auth(admin)).status_code == 404

    assert client.delete(f"/stores/{store_id}", headers=auth(alice)).status_code == 403
    assert client.delete(f"/stores/{store_id}", headers=auth(admin)).status_code == 200
    assert db.query(Store).count() == 0
    assert client.delete(f"/stores/{store_id}", headers=auth(admin)).status_code == 404
