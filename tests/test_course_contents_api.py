import pytest


@pytest.fixture
def contents(services, course):
    return [
        services.contents.create({"course_id": course.id, "type": kind, "title": title, "order_index": index})
        for index, (kind, title) in enumerate(
            [("video", "Welcome"), ("pdf", "Syntax cheat sheet"), ("quiz", "Checkpoint")], start=1
        )
    ]


def test_create_content(client, course, trainer, auth_headers):
    payload = {
        "course_id": course.id,
        "type": "video",
        "title": "Installing Python",
        "content_url": "https://example.com/v/1",
        "order_index": 1,
    }
    res = client.post("/api/v1/course-contents", json=payload, headers=auth_headers(trainer))
    assert res.status_code == 201
    assert res.get_json()["data"]["order_index"] == 1


def test_duplicate_order_index_conflicts(client, contents, course, trainer, auth_headers):
    payload = {"course_id": course.id, "type": "text", "title": "Extra", "order_index": 2}
    res = client.post("/api/v1/course-contents", json=payload, headers=auth_headers(trainer))
    assert res.status_code == 409
    assert res.get_json()["message"] == "Content with this order index already exists for this course"


def test_order_index_must_be_positive(client, course, trainer, auth_headers):
    payload = {"course_id": course.id, "type": "text", "title": "Zero", "order_index": 0}
    res = client.post("/api/v1/course-contents", json=payload, headers=auth_headers(trainer))
    assert res.status_code == 422


def test_content_for_missing_course(client, trainer, auth_headers):
    payload = {"course_id": 777, "type": "text", "title": "Orphan", "order_index": 1}
    res = client.post("/api/v1/course-contents", json=payload, headers=auth_headers(trainer))
    assert res.status_code == 404


def test_course_contents_in_order(client, contents, course, learner, auth_headers):
    res = client.get(f"/api/v1/course-contents/course/{course.id}", headers=auth_headers(learner))
    assert res.status_code == 200
    assert [c["title"] for c in res.get_json()["data"]] == ["Welcome", "Syntax cheat sheet", "Checkpoint"]


def test_list_filters_by_type(client, contents, learner, auth_headers):
    res = client.get("/api/v1/course-contents?type=quiz", headers=auth_headers(learner))
    assert [c["title"] for c in res.get_json()["data"]] == ["Checkpoint"]


def test_reorder_swaps_positions(client, contents, course, trainer, auth_headers):
    first, second, third = contents
    body = {"content_orders": [
        {"id": first.id, "order_index": 3},
        {"id": third.id, "order_index": 1},
    ]}
    res = client.patch(f"/api/v1/course-contents/reorder/{course.id}", json=body, headers=auth_headers(trainer))
    assert res.status_code == 200
    assert [(c["id"], c["order_index"]) for c in res.get_json()["data"]] == [
        (third.id, 1),
        (second.id, 2),
        (first.id, 3),
    ]


def test_reorder_rejects_foreign_content(client, services, contents, course, trainer, auth_headers):
    other = services.courses.create({"title": "Other course", "level": "beginner", "price": 0})
    stray = services.contents.create({"course_id": other.id, "type": "text", "title": "Stray", "order_index": 1})
    body = {"content_orders": [
        {"id": contents[0].id, "order_index": 2},
        {"id": stray.id, "order_index": 1},
    ]}
    res = client.patch(f"/api/v1/course-contents/reorder/{course.id}", json=body, headers=auth_headers(trainer))
    assert res.status_code == 400
    assert res.get_json()["details"] == {"content_ids": [stray.id]}

    unchanged = client.get(f"/api/v1/course-contents/course/{course.id}", headers=auth_headers(trainer))
    assert [c["order_index"] for c in unchanged.get_json()["data"]] == [1, 2, 3]


def test_reorder_rejects_duplicate_targets(client, contents, course, trainer, auth_headers):
    body = {"content_orders": [
        {"id": contents[0].id, "order_index": 2},
        {"id": contents[1].id, "order_index": 2},
    ]}
    res = client.patch(f"/api/v1/course-contents/reorder/{course.id}", json=body, headers=auth_headers(trainer))
    assert res.status_code == 422


def test_reorder_into_taken_slot_conflicts(client, contents, course, trainer, auth_headers):
    body = {"content_orders": [{"id": contents[0].id, "order_index": 2}]}
    res = client.patch(f"/api/v1/course-contents/reorder/{course.id}", json=body, headers=auth_headers(trainer))
    assert res.status_code == 409


def test_update_and_delete(client, contents, trainer, learner, auth_headers):
    url = f"/api/v1/course-contents/{contents[0].id}"
    res = client.patch(url, json={"title": "Hello"}, headers=auth_headers(trainer))
    assert res.status_code == 200
    assert res.get_json()["data"]["title"] == "Hello"

    assert client.delete(url, headers=auth_headers(learner)).status_code == 403
    assert client.delete(url, headers=auth_headers(trainer)).status_code == 204
    assert client.get(url, headers=auth_headers(trainer)).status_code == 404


def test_content_stats(client, contents, admin, auth_headers):
    res = client.get("/api/v1/course-contents/stats", headers=auth_headers(admin))
    assert res.get_json()["data"] == {
        "total": 3,
        "by_type": {"pdf": 1, "video": 1, "quiz": 1, "url": 0, "text": 0},
    }
