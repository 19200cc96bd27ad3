from uuid import uuid4


def test_register_and_login(client):
    email = f"user_{uuid4().hex}@example.com"
    password = "Password123!"

    register_response = client.post(
        "/auth/register",
        json={"email": email, "password": password, "full_name": "New Pharmacist"},
    )
    assert register_response.status_code == 200
    assert "access_token" in register_response.json()

    login_response = client.post("/auth/login", data={"username": email, "password": password})
    assert login_response.status_code == 200
    token = login_response.json()["access_token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    body = me.json()
    assert body["email"] == email
    assert body["full_name"] == "New Pharmacist"
    assert body["roles"] == []
    assert body["primary_role"] is None
    assert body["role_label"] == "No role"


def test_register_duplicate_email_fails(client):
    payload = {"email": f"dup_{uuid4().hex}@example.com", "password": "Password123!"}
    assert client.post("/auth/register", json=payload).status_code == 200
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_login_with_wrong_password(client, make_user):
    user = make_user()
    response = client.post("/auth/login", data={"username": user.email, "password": "wrong-password"})
    assert response.status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_new_user_without_role_cannot_open_dashboard(client):
    token = client.post(
        "/auth/register",
        json={"email": f"norole_{uuid4().hex}@example.com", "password": "Password123!"},
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/dashboard/summary", headers=headers).status_code == 403
    assert client.get("/users/me/navigation", headers=headers).json() == []
