def register_user(client, *, name: str, email: str, role: str) -> tuple[dict, str]:
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": "password123", "role": role},
    )
    assert response.status_code == 201
    login = client.post("/api/auth/login", json={"email": email, "password": "password123"})
    return {"Authorization": f"Bearer {login.json()['access_token']}"}, response.json()["id"]


def test_lecture_summary_flow(client):
    hod, _ = register_user(client, name="HOD", email="hod@example.com", role="HOD")
    faculty, faculty_id = register_user(client, name="Dr. Rao", email="rao@example.com", role="Faculty")
    other, _ = register_user(client, name="Dr. Iyer", email="iyer@example.com", role="Faculty")
    student, student_id = register_user(client, name="Asha", email="asha@example.com", role="Student")

    group = client.post("/api/groups/", json={"title": "CSE A"}, headers=hod).json()
    client.post(f"/api/groups/{group['id']}/members", json={"user_id": student_id}, headers=hod)
    client.post(f"/api/groups/{group['id']}/members", json={"user_id": faculty_id}, headers=hod)
    lecture = client.post("/api/timetables/slot-types", json={"name": "Lecture"}, headers=hod).json()
    timetable = client.post("/api/timetables/", json={"name": "Semester 4"}, headers=hod).json()
    client.post(f"/api/timetables/{timetable['id']}/groups", json={"group_id": group["id"]}, headers=hod)
    slot = client.post(
        f"/api/timetables/{timetable['id']}/slots",
        json={
            "day": "Monday",
            "start_time": "09:00",
            "end_time": "10:00",
            "slot_type_id": lecture["id"],
            "subject_name": "Compilers",
            "faculty_id": faculty_id,
        },
        headers=hod,
    ).json()
    payload = {"slot_id": slot["id"], "date": "2026-03-09", "content": "Parsing basics"}

    assert client.put("/api/lecture-summaries", json=payload, headers=other).status_code == 403
    assert client.put("/api/lecture-summaries", json=payload, headers=student).status_code == 403

    created = client.put("/api/lecture-summaries", json=payload, headers=faculty)
    assert created.status_code == 200
    summary = created.json()

    rewritten = client.put("/api/lecture-summaries", json={**payload, "content": "LL(1) parsing"}, headers=faculty)
    assert rewritten.json()["id"] == summary["id"]

    fetched = client.get(f"/api/lecture-summaries/{slot['id']}/2026-03-09", headers=student)
    assert fetched.status_code == 200
    assert fetched.json()["content"] == "LL(1) parsing"
    assert client.get(f"/api/lecture-summaries/{slot['id']}/2026-03-09", headers=other).status_code == 403
    assert client.get(f"/api/lecture-summaries/{slot['id']}/2026-03-10", headers=student).status_code == 404

    schedule = client.get("/api/schedule/me", params={"today": "2026-03-15"}, headers=student).json()
    assert schedule["slot_summaries"] == {slot["id"]: ["2026-03-09"]}

    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=student).status_code == 403
    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=faculty).status_code == 200
    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=faculty).status_code == 404


def test_day_lecture_summaries(client):
    hod, _ = register_user(client, name="HOD", email="hod@example.com", role="HOD")
    faculty, faculty_id = register_user(client, name="Dr. Rao", email="rao@example.com", role="Faculty")
    student, student_id = register_user(client, name="Asha", email="asha@example.com", role="Student")

    group = client.post("/api/groups/", json={"title": "CSE A"}, headers=hod).json()
    for user_id in (faculty_id, student_id):
        client.post(f"/api/groups/{group['id']}/members", json={"user_id": user_id}, headers=hod)
    lecture = client.post("/api/timetables/slot-types", json={"name": "Lecture"}, headers=hod).json()
    timetable = client.post("/api/timetables/", json={"name": "Semester 4"}, headers=hod).json()
    client.post(f"/api/timetables/{timetable['id']}/groups", json={"group_id": group["id"]}, headers=hod)
    url = f"/api/timetables/{timetable['id']}/slots"

    def add_slot(day: str, start: str, end: str, subject: str) -> dict:
        return client.post(
            url,
            json={
                "day": day,
                "start_time": start,
                "end_time": end,
                "slot_type_id": lecture["id"],
                "subject_name": subject,
                "faculty_id": faculty_id,
            },
            headers=hod,
        ).json()

    compilers = add_slot("Monday", "11:00", "12:00", "Compilers")
    networks = add_slot("Monday", "09:00", "10:00", "Networks")
    add_slot("Tuesday", "09:00", "10:00", "Databases")
    client.put(
        "/api/lecture-summaries",
        json={"slot_id": compilers["id"], "date": "2026-03-09", "content": "Parsing basics"},
        headers=faculty,
    )

    as_student = client.get("/api/lecture-summaries/day/2026-03-09", headers=student)
    assert as_student.status_code == 200
    body = as_student.json()
    assert (body["day"], body["date"], body["user_role"], body["can_edit"]) == ("Monday", "2026-03-09", "Student", False)
    assert [slot["id"] for slot in body["slots"]] == [networks["id"], compilers["id"]]
    first, second = body["slots"]
    assert (first["has_summary"], first["summary"], first["can_edit"]) == (False, None, False)
    assert second["has_summary"] is True
    assert second["summary"]["content"] == "Parsing basics"

    as_faculty = client.get("/api/lecture-summaries/day/2026-03-09", headers=faculty).json()
    assert (as_faculty["user_role"], as_faculty["can_edit"]) == ("Faculty", True)
    assert all(slot["can_edit"] for slot in as_faculty["slots"])

    next_week = client.get("/api/lecture-summaries/day/2026-03-16", headers=student).json()
    assert [slot["summary"] for slot in next_week["slots"]] == [None, None]

    sunday = client.get("/api/lecture-summaries/day/2026-03-15", headers=student).json()
    assert (sunday["day"], sunday["slots"]) == ("Sunday", [])
