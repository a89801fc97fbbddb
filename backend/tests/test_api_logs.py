def test_auth_events_are_audited(client, admin, alice, auth):
    client.post("/auth/login", json={"email": alice.email, "password": "Passw0rd!"})
    client.post("/auth/login", json={"email": alice.email, "password": "Wrong000!"})

    response = client.get("/logs", params={"action": "LOGIN"}, headers=auth(admin))
    assert response.status_code == 200
    page = response.json()
    assert page["total"] == 2
    assert {item["status"] for item in page["items"]} == {"SUCCESS", "FAIL"}

    failed = client.get("/logs", params={"action": "LOGIN", "status": "fail"}, headers=auth(admin)).json()
    assert failed["total"] == 1


def test_admin_mutations_are_audited(client, admin, owner, auth):
    client.post("/stores", json={"name": "Corner Shop", "address": "1 Main St", "ownerId": owner.id},
                headers=auth(admin))
    page = client.get("/logs", params={"resource": "stores"}, headers=auth(admin)).json()
    assert [item["action"] for item in page["items"]] == ["STORE_CREATE"]
    assert page["items"][0]["user_id"] == admin.id


def test_logs_are_admin_only(client, alice, auth):
    assert client.get("/logs", headers=auth(alice)).status_code == 403
