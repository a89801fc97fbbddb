from models.users import User, UserRole

SIGNUP = {
    "name": "Jane Thirty Characters Long Name",
    "email": "jane@x.com",
    "address": "1 Rd",
    "password": "Passw0rd!",
}


def test_signup_returns_token_and_normal_user(client, db):
    response = client.post("/auth/signup", json={**SIGNUP, "role": "ADMIN"})
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["role"] == "NORMAL_USER"
    assert "passwordHash" not in body["user"] and "password_hash" not in body["user"]

    profile = client.get("/auth/profile", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert profile.status_code == 200
    assert profile.json()["email"] == "jane@x.com"


def test_signup_duplicate_email(client):
    assert client.post("/auth/signup", json=SIGNUP).status_code == 201
    response = client.post("/auth/signup", json={**SIGNUP, "name": "Somebody Else With Long Name"})
    assert response.status_code == 409


def test_signup_field_rules(client, db):
    cases = [
        {**SIGNUP, "name": "Too Short"},
        {**SIGNUP, "name": "x" * 61},
        {**SIGNUP, "address": "a" * 401},
        {**SIGNUP, "email": "not-an-email"},
        {**SIGNUP, "password": "password1!"},
        {**SIGNUP, "password": "Password1"},
        {**SIGNUP, "password": "Pa1!"},
        {**SIGNUP, "password": "Password!Password!"},
    ]
    for payload in cases:
        response = client.post("/auth/signup", json=payload)
        assert response.status_code == 422, payload
    assert db.query(User).count() == 0


def test_login(client):
    client.post("/auth/signup", json=SIGNUP)

    ok = client.post("/auth/login", json={"email": "JANE@x.com", "password": "Passw0rd!"})
    assert ok.status_code == 200
    assert ok.json()["user"]["email"] == "jane@x.com"

    bad = client.post("/auth/login", json={"email": "jane@x.com", "password": "Wrong000!"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid credentials"


def test_profile_requires_token(client):
    assert client.get("/auth/profile").status_code == 401
    response = client.get("/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_token_of_deleted_user_is_rejected(client, db, alice, auth):
    headers = auth(alice)
    db.query(User).filter(User.id == alice.id).delete()
    db.commit()
    assert client.get("/auth/profile", headers=headers).status_code == 401


def test_change_password(client, alice, auth):
    headers = auth(alice)

    wrong = client.post("/auth/change-password", headers=headers,
                        json={"oldPassword": "Wrong000!", "newPassword": "NewPassw0rd!"})
    assert wrong.status_code == 422
    assert wrong.json()["detail"][0]["loc"] == ["body", "oldPassword"]

    weak = client.post("/auth/change-password", headers=headers,
                       json={"oldPassword": "Passw0rd!", "newPassword": "weak"})
    assert weak.status_code == 422

    ok = client.post("/auth/change-password", headers=headers,
                     json={"oldPassword": "Passw0rd!", "newPassword": "NewPassw0rd!"})
    assert ok.status_code == 200

    login = client.post("/auth/login", json={"email": alice.email, "password": "NewPassw0rd!"})
    assert login.status_code == 200


def test_role_change_applies_to_existing_token(client, db, alice, auth):
    headers = auth(alice)
    assert client.get("/users", headers=headers).status_code == 403

    db.query(User).filter(User.id == alice.id).update({"role": UserRole.ADMIN})
    db.commit()
    assert client.get("/users", headers=headers).status_code == 200
