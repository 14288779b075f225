def register_user(client, *, name: str, email: str, role: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": "password123", "role": role},
    )
    assert response.status_code == 201
    login = client.post("/api/auth/login", json={"email": email, "password": "password123"})
    assert login.status_code == 200
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


def test_event_type_crud_and_reference_guard(client):
    hod = register_user(client, name="HOD", email="hod@example.com", role="HOD")

    created = client.post("/api/event-types/", json={"name": "  Exam  ", "description": "Assessments"}, headers=hod)
    assert created.status_code == 201
    exam = created.json()
    assert exam["name"] == "Exam"

    duplicate = client.post("/api/event-types/", json={"name": "Exam"}, headers=hod)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Event type name already exists"

    calendar = client.post("/api/calendars/", json={"name": "Academic 2026"}, headers=hod).json()
    for day in ("2026-03-02", "2026-03-03", "2026-03-04"):
        response = client.post(
            f"/api/calendars/{calendar['id']}/events",
            json={"title": "Quiz", "start_date": day, "event_type_id": exam["id"]},
            headers=hod,
        )
        assert response.status_code == 201

    blocked = client.delete(f"/api/event-types/{exam['id']}", headers=hod)
    assert blocked.status_code == 409
    body = blocked.json()
    assert body["code"] == "conflict"
    assert body["message"] == "Cannot delete: 3 event(s) are using this type"
    assert body["details"] == {"event_count": 3}

    holiday = client.post("/api/event-types/", json={"name": "Holiday"}, headers=hod).json()
    renamed = client.put(f"/api/event-types/{holiday['id']}", json={"name": "Exam"}, headers=hod)
    assert renamed.status_code == 409

    assert client.delete(f"/api/event-types/{holiday['id']}", headers=hod).status_code == 200
    names = [item["name"] for item in client.get("/api/event-types/", headers=hod).json()]
    assert names == ["Exam"]


def test_event_type_name_validation_and_roles(client):
    hod = register_user(client, name="HOD", email="hod@example.com", role="HOD")
    faculty = register_user(client, name="Faculty", email="faculty@example.com", role="Faculty")

    too_long = client.post("/api/event-types/", json={"name": "x" * 51}, headers=hod)
    assert too_long.status_code == 422

    forbidden = client.post("/api/event-types/", json={"name": "Seminar"}, headers=faculty)
    assert forbidden.status_code == 403

    assert client.get("/api/event-types/", headers=faculty).status_code == 200
    missing = client.delete("/api/event-types/nope", headers=hod)
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"
