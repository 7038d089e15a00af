import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import ensure_indexes
from main import create_app
from seed import seed_movies

PASSWORD = "Sup3rSecret"


@pytest.fixture
def settings():
    return Settings(
        mongo_uri="mongodb://localhost:27017/yusmov_test",
        database_name="yusmov_test",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings, client=mongomock.MongoClient())
    ensure_indexes(app.state.db)
    return app


@pytest.fixture
def db(app):
    return app.state.db


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def movies(db):
    seed_movies(db)
    return {m["title"]: m for m in db["movie"].find()}


@pytest.fixture
def user(client):
    response = client.post(
        "/users",
        json={"username": "alice", "email": "alice@example.com", "password": PASSWORD},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def token(client, user):
    response = client.post("/login", json={"username": "alice", "password": PASSWORD})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
