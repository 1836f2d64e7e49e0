from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


def _auth_headers(employee_id: int, role: str = "EMPLOYEE") -> dict:
    resp = client.post("/auth/token", json={"employee_id": employee_id, "role": role})
    assert resp.status_code == 200, f"token request failed: {resp.status_code} {resp.text}"
    data = resp.json()
    assert isinstance(data, dict), f"token response not a JSON object: {data}"
    assert "access_token" in data, f"token response missing access_token: {data}"
    return {"Authorization": f"Bearer {data['access_token']}"}


def test_admin_creates_lists_and_gets_employee():
    admin = _auth_headers(1, role="ADMIN")

    create = client.post(
        "/employees",
        headers=admin,
        json={"name": "Kasun", "email": "Kasun@Example.com"},
    )
    assert create.status_code == 200, create.text
    created = create.json()
    employee_id = created["id"]
    assert created["name"] == "Kasun"
    assert created["email"] == "kasun@example.com"
    assert created["role"] == "EMPLOYEE"
    assert created["is_active"] is True

    listing = client.get("/employees", headers=admin)
    assert listing.status_code == 200
    assert any(row["id"] == employee_id for row in listing.json())

    get_one = client.get(f"/employees/{employee_id}", headers=_auth_headers(employee_id))
    assert get_one.status_code == 200
    assert get_one.json()["id"] == employee_id


def test_duplicate_email_is_conflict():
    admin = _auth_headers(1, role="ADMIN")
    payload = {"name": "Ruwan", "email": "ruwan@example.com"}

    assert client.post("/employees", headers=admin, json=payload).status_code == 200
    assert client.post("/employees", headers=admin, json=payload).status_code == 409


def test_employee_role_cannot_create_employees():
    resp = client.post(
        "/employees",
        headers=_auth_headers(5),
        json={"name": "Sneaky", "email": "sneaky@example.com"},
    )
    assert resp.status_code == 403


def test_invalid_role_is_rejected():
    resp = client.post(
        "/employees",
        headers=_auth_headers(1, role="ADMIN"),
        json={"name": "Chief", "email": "chief@example.com", "role": "OWNER"},
    )
    assert resp.status_code == 400


def test_missing_employee_is_404():
    resp = client.get("/employees/424242", headers=_auth_headers(1, role="ADMIN"))
    assert resp.status_code == 404


def test_missing_authorization_header_401():
    assert client.get("/employees").status_code == 401


def test_wrong_scheme_401():
    token = _auth_headers(1)["Authorization"].split(" ", 1)[1]
    resp = client.get("/employees", headers={"Authorization": f"Basic {token}"})
    assert resp.status_code == 401


def test_garbled_bearer_token_401():
    resp = client.get("/employees", headers={"Authorization": "Bearer not-a-real-token"})
    assert resp.status_code == 401


def test_token_with_unknown_role_is_rejected():
    resp = client.post("/auth/token", json={"employee_id": 3, "role": "OWNER"})
    assert resp.status_code == 400
    assert "Invalid role" in resp.json()["detail"]
