from datetime import datetime

import pytest

from models.notification import Notification


@pytest.fixture
def course_session(services, course, trainer):
    return services.sessions.create({
        "course_id": course.id,
        "trainer_id": trainer.id,
        "start_date": datetime(2026, 5, 4, 9),
        "end_date": datetime(2026, 5, 8, 17),
        "location": "Lisbon",
    })


@pytest.fixture
def enrollment(services, course_session, learner):
    return services.enrollments.create(learner.id, course_session.id)


def test_enroll_sends_confirmation_email(client, course_session, learner, outbox, auth_headers):
    headers = auth_headers(learner)
    res = client.post("/api/v1/enrollments", json={"session_id": course_session.id}, headers=headers)
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["status"] == "pending"
    assert data["user_id"] == learner.id
    assert data["session"]["course"]["title"] == "Intro to Python"

    assert len(outbox) == 1
    mail = outbox[0]
    assert mail["to"] == learner.email
    assert mail["subject"] == "Enrollment Confirmed: Intro to Python"
    assert "2026-05-04" in mail["html"] and "Lisbon" in mail["html"]


def test_enroll_twice_conflicts(client, enrollment, course_session, learner, auth_headers):
    res = client.post("/api/v1/enrollments", json={"session_id": course_session.id}, headers=auth_headers(learner))
    assert res.status_code == 409
    assert res.get_json()["message"] == "Already enrolled in this session"


def test_enroll_unknown_session(client, learner, auth_headers):
    res = client.post("/api/v1/enrollments", json={"session_id": 555}, headers=auth_headers(learner))
    assert res.status_code == 404
    assert res.get_json()["message"] == "Session not found"


def test_email_failure_keeps_enrollment(client, services, course_session, learner, auth_headers):
    headers = auth_headers(learner)
    services.mailer.fail = True
    res = client.post("/api/v1/enrollments", json={"session_id": course_session.id}, headers=headers)
    assert res.status_code == 201


def test_my_enrollments(client, enrollment, learner, make_user, auth_headers):
    res = client.get("/api/v1/enrollments/my-enrollments", headers=auth_headers(learner))
    assert [e["id"] for e in res.get_json()["data"]] == [enrollment.id]

    stranger = make_user("learner")
    res = client.get("/api/v1/enrollments/my-enrollments", headers=auth_headers(stranger))
    assert res.get_json()["data"] == []


def test_only_staff_list_all(client, enrollment, learner, trainer, auth_headers):
    assert client.get("/api/v1/enrollments", headers=auth_headers(learner)).status_code == 403
    res = client.get("/api/v1/enrollments?status=pending", headers=auth_headers(trainer))
    assert res.get_json()["meta"]["total"] == 1


def test_other_learner_cannot_view(client, enrollment, make_user, trainer, auth_headers):
    url = f"/api/v1/enrollments/{enrollment.id}"
    assert client.get(url, headers=auth_headers(make_user("learner"))).status_code == 403
    assert client.get(url, headers=auth_headers(trainer)).status_code == 200


def test_confirm_notifies_learner(client, services, enrollment, learner, trainer, auth_headers):
    res = client.patch(f"/api/v1/enrollments/{enrollment.id}/confirm", headers=auth_headers(trainer))
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "confirmed"

    notes = services.notifications.session.query(Notification).filter_by(user_id=learner.id).all()
    assert [(n.title, n.message) for n in notes] == [
        ("Enrollment Confirmed", 'Your enrollment in "Intro to Python" has been confirmed!'),
    ]
    assert notes[0].is_read is False


def test_learner_cannot_confirm(client, enrollment, learner, auth_headers):
    res = client.patch(f"/api/v1/enrollments/{enrollment.id}/confirm", headers=auth_headers(learner))
    assert res.status_code == 403


def test_owner_cancels(client, enrollment, learner, auth_headers):
    res = client.patch(f"/api/v1/enrollments/{enrollment.id}/cancel", headers=auth_headers(learner))
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "canceled"


def test_stranger_cannot_cancel(client, enrollment, make_user, auth_headers):
    res = client.patch(f"/api/v1/enrollments/{enrollment.id}/cancel", headers=auth_headers(make_user("learner")))
    assert res.status_code == 403


def test_staff_sets_status(client, enrollment, admin, auth_headers):
    url = f"/api/v1/enrollments/{enrollment.id}"
    res = client.patch(url, json={"status": "canceled"}, headers=auth_headers(admin))
    assert res.get_json()["data"]["status"] == "canceled"
    assert client.patch(url, json={"status": "done"}, headers=auth_headers(admin)).status_code == 422


def test_stats_and_delete(client, enrollment, admin, auth_headers):
    headers = auth_headers(admin)
    res = client.get("/api/v1/enrollments/stats", headers=headers)
    assert res.get_json()["data"] == {
        "total": 1,
        "by_status": {"pending": 1, "confirmed": 0, "canceled": 0},
    }
    assert client.delete(f"/api/v1/enrollments/{enrollment.id}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/enrollments/{enrollment.id}", headers=headers).status_code == 404
