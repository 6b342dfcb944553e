from conftest import at
from tutor_scheduler.models import LessonStatus


def test_list_lessons_in_start_order(api, auth_headers, teacher, student, make_lesson):
    later = make_lesson(teacher, student, at(1, 10))
    earlier = make_lesson(teacher, student, at(0, 10))

    response = api.get("/lessons/", headers=auth_headers)
    assert response.status_code == 200
    assert [lesson["id"] for lesson in response.json()] == [earlier.id, later.id]
    assert response.json()[0]["clientName"] == "Anna Petrova"


def test_list_lessons_filtered_by_status(api, auth_headers, teacher, student, make_lesson):
    make_lesson(teacher, student, at(0, 10))
    done = make_lesson(teacher, student, at(0, 12), status=LessonStatus.DONE)

    response = api.get("/lessons/", params={"status": "DONE"}, headers=auth_headers)
    assert [lesson["id"] for lesson in response.json()] == [done.id]


def test_list_lessons_hides_other_teachers(api, auth_headers, other_teacher, make_client, make_lesson):
    make_lesson(other_teacher, make_client(other_teacher, "Someone Else"), at(0, 10))
    assert api.get("/lessons/", headers=auth_headers).json() == []


def test_lesson_stats(api, auth_headers, teacher, student, make_lesson):
    make_lesson(teacher, student, at(0, 10))
    make_lesson(teacher, student, at(0, 12))
    make_lesson(teacher, student, at(1, 10), status=LessonStatus.DONE)
    make_lesson(teacher, student, at(2, 10), status=LessonStatus.CANCELLED)

    response = api.get("/lessons/stats", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"planned": 2, "done": 1, "cancelled": 1, "total": 4}


def test_mark_lesson_done_frees_the_slot(api, auth_headers, teacher, student, make_lesson):
    lesson = make_lesson(teacher, student, at(0, 10))

    response = api.patch(f"/lessons/{lesson.id}/status", json={"status": "DONE"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "DONE"

    body = api.post(
        "/slot-ranking/rank",
        json={"clientId": student.id, "proposedSlots": [{"from": at(0, 10).isoformat(), "to": at(0, 11).isoformat()}]},
        headers=auth_headers,
    ).json()
    assert body["rankedSlots"][0]["hasConflict"] is False


def test_lessons_cannot_be_replanned(api, auth_headers, teacher, student, make_lesson):
    lesson = make_lesson(teacher, student, at(0, 10), status=LessonStatus.CANCELLED)
    response = api.patch(f"/lessons/{lesson.id}/status", json={"status": "PLANNED"}, headers=auth_headers)
    assert response.status_code == 400


def test_finished_lesson_status_is_final(api, auth_headers, teacher, student, make_lesson):
    lesson = make_lesson(teacher, student, at(0, 10), status=LessonStatus.DONE)
    response = api.patch(f"/lessons/{lesson.id}/status", json={"status": "CANCELLED"}, headers=auth_headers)
    assert response.status_code == 400


def test_status_of_foreign_lesson_is_not_found(api, auth_headers, other_teacher, make_client, make_lesson):
    lesson = make_lesson(other_teacher, make_client(other_teacher, "Someone Else"), at(0, 10))
    response = api.patch(f"/lessons/{lesson.id}/status", json={"status": "DONE"}, headers=auth_headers)
    assert response.status_code == 404
