import bcrypt

import main
from conftest import PASSWORD


def _register(client, **overrides):
    body = {"username": "bob", "email": "bob@example.com", "password": PASSWORD}
    body.update(overrides)
    return client.post("/users", json=body)


def test_root_welcome(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text.startswith("Welcome to YusMov API")


def test_register_returns_user_without_password(client):
    response = _register(client, birthday="1985-02-03")
    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "bob"
    assert body["email"] == "bob@example.com"
    assert body["favorites"] == []
    assert body["birthday"].startswith("1985-02-03")
    assert "password" not in body
    assert "id" in body


def test_register_stores_bcrypt_hash(client, db):
    _register(client)
    stored = db["user"].find_one({"username": "bob"})
    assert stored["password"] != PASSWORD
    assert bcrypt.checkpw(PASSWORD.encode(), stored["password"].encode())


def test_register_normalizes_email(client):
    response = _register(client, email="Bob@Example.COM")
    assert response.json()["email"] == "bob@example.com"


def test_register_password_without_uppercase(client):
    response = _register(client, password="lowercase1")
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert [e["field"] for e in errors] == ["password"]
    assert "uppercase" in errors[0]["msg"]


def test_register_lists_all_field_errors(client):
    response = _register(client, username="x", email="nope", password="short")
    assert response.status_code == 422
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"username", "email", "password"}


def test_register_bad_birthday(client):
    response = _register(client, birthday="yesterday")
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "birthday"


def test_register_missing_fields(client):
    response = client.post("/users", json={"username": "bob"})
    assert response.status_code == 400


def test_register_without_body(client):
    response = client.post("/users")
    assert response.status_code == 400


def test_register_duplicate_username(client):
    assert _register(client).status_code == 201
    response = _register(client, email="other@example.com")
    assert response.status_code == 409
    assert response.json()["detail"] == "Username already exists"


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201
    response = _register(client, username="robert", email="BOB@example.com")
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"


def test_update_user(client, user, auth_headers):
    response = client.put(
        "/users/alice",
        json={"newEmail": "Alice.New@Example.com", "newBirthday": "1991-01-01"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "alice.new@example.com"
    assert body["birthday"].startswith("1991-01-01")
    assert "password" not in body


def test_update_username_then_lookup(client, user, auth_headers, db):
    response = client.put("/users/alice", json={"newUsername": "alicia"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["username"] == "alicia"
    assert db["user"].find_one({"username": "alice"}) is None


def test_update_password_is_hashed(client, user, auth_headers, db):
    response = client.put("/users/alice", json={"newPassword": "Different9"}, headers=auth_headers)
    assert response.status_code == 200
    stored = db["user"].find_one({"username": "alice"})
    assert bcrypt.checkpw(b"Different9", stored["password"].encode())

    login = client.post("/login", json={"username": "alice", "password": "Different9"})
    assert login.status_code == 200


def test_update_without_fields(client, user, auth_headers):
    response = client.put("/users/alice", json={"favorites": []}, headers=auth_headers)
    assert response.status_code == 400


def test_update_invalid_email(client, user, auth_headers):
    response = client.put("/users/alice", json={"newEmail": "broken"}, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "newEmail"
    assert "newEmail" in response.json()["errors"][0]["msg"]


def test_update_unknown_user(client, user, auth_headers):
    response = client.put("/users/nobody", json={"newEmail": "x@example.com"}, headers=auth_headers)
    assert response.status_code == 404


def test_update_to_taken_username(client, user, auth_headers):
    _register(client)
    response = client.put("/users/alice", json={"newUsername": "bob"}, headers=auth_headers)
    assert response.status_code == 409


def test_deregister(client, user, auth_headers, db):
    response = client.delete("/users/alice", headers=auth_headers)
    assert response.status_code == 200
    assert response.text == "User alice deregistered"
    assert db["user"].count_documents({}) == 0


def test_deregister_unknown_user(client, user, auth_headers):
    response = client.delete("/users/ghost", headers=auth_headers)
    assert response.status_code == 404


def test_user_fields_are_camel_case(client, db):
    body = _register(client).json()
    assert {"createdAt", "updatedAt"} <= set(body)
    stored = db["user"].find_one({"username": "bob"})
    assert "created_at" not in stored


def test_update_returns_updated_at(client, user, auth_headers):
    response = client.put("/users/alice", json={"newBirthday": "1991-01-01"}, headers=auth_headers)
    assert response.json()["updatedAt"] is not None
    assert "updated_at" not in response.json()


def test_register_race_hits_unique_index(client, monkeypatch):
    monkeypatch.setattr(main, "_ensure_unique", lambda *args, **kwargs: None)
    assert _register(client).status_code == 201
    response = _register(client, email="other@example.com")
    assert response.status_code == 409
    assert response.json()["detail"] == "Username or email already exists"


def test_update_race_hits_unique_index(client, user, auth_headers, monkeypatch):
    assert _register(client).status_code == 201
    monkeypatch.setattr(main, "_ensure_unique", lambda *args, **kwargs: None)
    response = client.put("/users/alice", json={"newUsername": "bob"}, headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "Username or email already exists"
