def test_register_login_me(client):
    register_payload = {
        "name": "Head of Department",
        "email": "HOD@Example.com",
        "password": "password123",
        "role": "HOD",
    }

    register_response = client.post("/api/auth/register", json=register_payload)
    assert register_response.status_code == 201
    data = register_response.json()
    assert data["email"] == "hod@example.com"
    assert data["role"] == "HOD"

    login_response = client.post(
        "/api/auth/login",
        json={"email": "hod@example.com", "password": "password123"},
    )
    assert login_response.status_code == 200
    login_data = login_response.json()
    assert login_data["token_type"] == "bearer"
    assert login_data["user"]["id"] == data["id"]

    token = login_data["access_token"]
    me_response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me_response.status_code == 200
    assert me_response.json()["email"] == "hod@example.com"


def test_register_rejects_duplicate_email(client):
    payload = {"name": "Student", "email": "student@example.com", "password": "password123", "role": "Student"}
    assert client.post("/api/auth/register", json=payload).status_code == 201

    duplicate = client.post("/api/auth/register", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Email already registered"


def test_login_with_wrong_password(client):
    client.post(
        "/api/auth/register",
        json={"name": "Faculty", "email": "faculty@example.com", "password": "password123", "role": "Faculty"},
    )

    response = client.post("/api/auth/login", json={"email": "faculty@example.com", "password": "wrong-password"})
    assert response.status_code == 401


def test_protected_routes_require_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/calendars/").status_code == 401
    bad = client.get("/api/schedule/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401
