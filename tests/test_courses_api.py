from decimal import Decimal

import pytest

from services.courses import slugify

COURSE = {
    "title": "Data Science 101",
    "description": "Pandas, plots and a little statistics",
    "level": "beginner",
    "price": "19.90",
}


@pytest.mark.parametrize("title, slug", [
    ("Intro to Python", "intro-to-python"),
    ("  C++ & Rust: Systems!  ", "c-rust-systems"),
    ("Data---Science 101", "data-science-101"),
])
def test_slugify(title, slug):
    assert slugify(title) == slug


def test_trainer_creates_course_with_slug(client, trainer, auth_headers):
    res = client.post("/api/v1/courses", json=COURSE, headers=auth_headers(trainer))
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["slug"] == "data-science-101"
    assert data["price"] == "19.90"


def test_learner_cannot_create_course(client, learner, auth_headers):
    res = client.post("/api/v1/courses", json=COURSE, headers=auth_headers(learner))
    assert res.status_code == 403


def test_same_slug_conflicts(client, admin, auth_headers):
    headers = auth_headers(admin)
    assert client.post("/api/v1/courses", json=COURSE, headers=headers).status_code == 201
    res = client.post("/api/v1/courses", json={**COURSE, "title": "data science -- 101"}, headers=headers)
    assert res.status_code == 409
    assert res.get_json()["message"] == "A course with this title already exists"


def test_negative_price_rejected(client, admin, auth_headers):
    res = client.post("/api/v1/courses", json={**COURSE, "price": "-1"}, headers=auth_headers(admin))
    assert res.status_code == 422
    assert "price" in res.get_json()["details"]


def test_unknown_level_rejected(client, admin, auth_headers):
    res = client.post("/api/v1/courses", json={**COURSE, "level": "expert"}, headers=auth_headers(admin))
    assert res.status_code == 422


def test_search_is_case_insensitive(client, services, course, learner, auth_headers):
    services.courses.create({"title": "Cooking Basics", "level": "beginner", "price": 0})
    headers = auth_headers(learner)

    res = client.get("/api/v1/courses?search=PYTHON", headers=headers)
    assert [c["title"] for c in res.get_json()["data"]] == ["Intro to Python"]

    res = client.get("/api/v1/courses?search=language", headers=headers)
    assert res.get_json()["meta"]["total"] == 1


def test_filter_by_level(client, services, course, learner, auth_headers):
    services.courses.create({"title": "Deep Internals", "level": "advanced", "price": 10})
    res = client.get("/api/v1/courses?level=advanced", headers=auth_headers(learner))
    assert [c["slug"] for c in res.get_json()["data"]] == ["deep-internals"]


def test_get_by_id_and_slug(client, course, learner, auth_headers):
    headers = auth_headers(learner)
    by_id = client.get(f"/api/v1/courses/{course.id}", headers=headers)
    by_slug = client.get("/api/v1/courses/slug/intro-to-python", headers=headers)
    assert by_id.status_code == by_slug.status_code == 200
    assert by_id.get_json()["data"]["id"] == by_slug.get_json()["data"]["id"] == course.id
    assert by_id.get_json()["data"]["contents"] == []
    assert by_id.get_json()["data"]["sessions"] == []


def test_missing_slug(client, learner, auth_headers):
    res = client.get("/api/v1/courses/slug/nope", headers=auth_headers(learner))
    assert res.status_code == 404
    assert res.get_json()["message"] == "Course not found"


def test_retitle_changes_slug(client, course, trainer, auth_headers):
    res = client.patch(
        f"/api/v1/courses/{course.id}", json={"title": "Python for Everyone"}, headers=auth_headers(trainer)
    )
    assert res.status_code == 200
    assert res.get_json()["data"]["slug"] == "python-for-everyone"


def test_only_admin_deletes(client, course, trainer, admin, auth_headers):
    assert client.delete(f"/api/v1/courses/{course.id}", headers=auth_headers(trainer)).status_code == 403
    assert client.delete(f"/api/v1/courses/{course.id}", headers=auth_headers(admin)).status_code == 204
    assert client.get(f"/api/v1/courses/{course.id}", headers=auth_headers(admin)).status_code == 404


def test_course_stats(client, services, course, admin, auth_headers):
    services.courses.create({"title": "Deep Internals", "level": "advanced", "price": Decimal("100.01")})
    res = client.get("/api/v1/courses/stats", headers=auth_headers(admin))
    assert res.get_json()["data"] == {
        "total": 2,
        "by_level": {"beginner": 1, "intermediate": 0, "advanced": 1},
        "total_revenue": "150.00",
    }
