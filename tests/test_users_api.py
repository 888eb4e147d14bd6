from models.user import User


def test_admin_creates_trainer(client, admin, auth_headers):
    payload = {
        "email": "new.trainer@example.com",
        "password": "Passw0rd!",
        "first_name": "New",
        "last_name": "Trainer",
        "role": "trainer",
    }
    res = client.post("/api/v1/users", json=payload, headers=auth_headers(admin))
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["role"] == "trainer"
    assert "password" not in data and "password_hash" not in data


def test_learner_cannot_create_users(client, learner, auth_headers):
    res = client.post("/api/v1/users", json={}, headers=auth_headers(learner))
    assert res.status_code == 403
    assert res.get_json()["message"] == "Insufficient role"


def test_create_user_duplicate_email(client, admin, learner, auth_headers):
    payload = {
        "email": learner.email,
        "password": "Passw0rd!",
        "first_name": "Dup",
        "last_name": "User",
    }
    res = client.post("/api/v1/users", json=payload, headers=auth_headers(admin))
    assert res.status_code == 409


def test_list_users_filters_by_role_and_paginates(client, admin, make_user, auth_headers):
    for _ in range(3):
        make_user("learner")
    make_user("trainer")

    res = client.get("/api/v1/users?role=learner&limit=2", headers=auth_headers(admin))
    assert res.status_code == 200
    body = res.get_json()
    assert body["meta"] == {"page": 1, "limit": 2, "total": 3}
    assert len(body["data"]) == 2
    assert {u["role"] for u in body["data"]} == {"learner"}


def test_list_users_rejects_unknown_role(client, admin, auth_headers):
    res = client.get("/api/v1/users?role=owner", headers=auth_headers(admin))
    assert res.status_code == 400


def test_learner_cannot_list_users(client, learner, auth_headers):
    assert client.get("/api/v1/users", headers=auth_headers(learner)).status_code == 403


def test_trainer_can_list_users(client, trainer, auth_headers):
    assert client.get("/api/v1/users", headers=auth_headers(trainer)).status_code == 200


def test_profile_read_and_update(client, learner, auth_headers):
    headers = auth_headers(learner)
    res = client.get("/api/v1/users/me", headers=headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["email"] == learner.email

    res = client.patch("/api/v1/users/me", json={"bio": "Learning Flask"}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["bio"] == "Learning Flask"


def test_profile_update_cannot_change_role(client, learner, auth_headers):
    res = client.patch("/api/v1/users/me", json={"role": "admin"}, headers=auth_headers(learner))
    assert res.status_code == 422


def test_profile_password_change_is_hashed(client, services, learner, auth_headers):
    headers = auth_headers(learner)
    res = client.patch("/api/v1/users/me", json={"password": "Changed0ne!"}, headers=headers)
    assert res.status_code == 200
    assert services.auth.login(learner.email, "Changed0ne!")["access_token"]


def test_admin_changes_role(client, admin, learner, auth_headers):
    res = client.patch(f"/api/v1/users/{learner.id}", json={"role": "trainer"}, headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.get_json()["data"]["role"] == "trainer"


def test_get_missing_user(client, learner, auth_headers):
    res = client.get("/api/v1/users/9999", headers=auth_headers(learner))
    assert res.status_code == 404
    assert res.get_json()["message"] == "User not found"


def test_admin_deletes_user(client, services, admin, make_user, auth_headers):
    doomed = make_user("learner")
    doomed_id = doomed.id
    res = client.delete(f"/api/v1/users/{doomed_id}", headers=auth_headers(admin))
    assert res.status_code == 204
    assert services.users.session.get(User, doomed_id) is None


def test_user_stats(client, admin, make_user, auth_headers):
    make_user("trainer")
    make_user("learner")
    make_user("learner")
    res = client.get("/api/v1/users/stats", headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.get_json()["data"] == {
        "total": 4,
        "by_role": {"admin": 1, "trainer": 1, "learner": 2},
    }
