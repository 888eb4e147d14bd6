"""Shared fixtures: an app on in-memory SQLite with the memory email backend."""

from decimal import Decimal

import pytest

from api import create_app
from models import storage

PASSWORD = "Passw0rd!"


@pytest.fixture
def app():
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    yield app
    storage.close()
    storage.drop_all()
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions["services"]


@pytest.fixture
def outbox(services):
    services.mailer.clear()
    return services.mailer.outbox


@pytest.fixture
def make_user(services):
    counter = {"n": 0}

    def _make(role="learner", email=None, password=PASSWORD, **extra):
        counter["n"] += 1
        data = {
            "first_name": extra.pop("first_name", "Test"),
            "last_name": extra.pop("last_name", f"User{counter['n']}"),
            "email": email or f"{role}{counter['n']}@example.com",
            "password": password,
            "role": role,
        }
        data.update(extra)
        return services.users.create(data)

    return _make


@pytest.fixture
def auth_headers(client):
    def _headers(user, password=PASSWORD):
        res = client.post("/api/v1/auth/login", json={"email": user.email, "password": password})
        assert res.status_code == 200, res.get_json()
        token = res.get_json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def trainer(make_user):
    return make_user("trainer")


@pytest.fixture
def learner(make_user):
    return make_user("learner")


@pytest.fixture
def course(services):
    return services.courses.create({
        "title": "Intro to Python",
        "description": "Basics of the language",
        "level": "beginner",
        "price": Decimal("49.99"),
    })
