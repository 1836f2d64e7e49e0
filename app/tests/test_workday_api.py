from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


def _auth_headers(employee_id: int, role: str = "EMPLOYEE") -> dict:
    resp = client.post("/auth/token", json={"employee_id": employee_id, "role": role})
    assert resp.status_code == 200, f"token request failed: {resp.status_code} {resp.text}"
    data = resp.json()
    assert "access_token" in data, f"token response missing access_token: {data}"
    return {"Authorization": f"Bearer {data['access_token']}"}


def _create_job_card(employee_ids, location="Depot") -> dict:
    resp = client.post(
        "/job_cards",
        headers=_auth_headers(1, role="ADMIN"),
        json={
            "job_type": "SERVICE",
            "generator_name": "Perkins 100kVA",
            "employee_ids": employee_ids,
            "location": location,
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def _patch_status(task_id: str, employee_id: int, status: str, **extra):
    return client.patch(
        f"/mini_job_cards/{task_id}/status",
        headers=_auth_headers(employee_id),
        json={"status": status, **extra},
    )


def test_full_workday_through_the_api(employee_factory, api_clock):
    employee = employee_factory()
    job_card = _create_job_card([employee.id])
    task = job_card["mini_job_cards"][0]
    assert task["status"] == "PENDING"
    assert task["work_date"] == "2026-03-10"

    assert _patch_status(task["id"], employee.id, "ASSIGNED").status_code == 200

    api_clock.advance(30)
    resp = _patch_status(task["id"], employee.id, "IN_PROGRESS")
    assert resp.status_code == 200, resp.text
    assert resp.json()["assigned_minutes"] == 30

    api_clock.advance(90)
    resp = _patch_status(task["id"], employee.id, "COMPLETED")
    body = resp.json()
    assert body["in_progress_minutes"] == 90
    assert body["spent_on_in_progress"] == "01:30"
    assert body["allowed_next_statuses"] == ["ON_HOLD"]

    api_clock.advance(30)
    end = client.post(
        "/sessions/end",
        headers=_auth_headers(employee.id),
        json={"employee_id": employee.id, "end_location": "Home"},
    )
    assert end.status_code == 200, end.text
    ledger = end.json()
    assert ledger["current_status"] == "END_JOB_CARD"
    assert ledger["assigned_time"] == "01:00"
    assert ledger["in_progress_time"] == "01:30"
    assert ledger["on_hold_time"] == "00:00"
    assert ledger["first_location"] == "Depot"
    assert ledger["last_location"] == "Home"
    assert ledger["total_ot"] == "00:00"

    fetched = client.get(f"/sessions/{employee.id}/2026-03-10", headers=_auth_headers(employee.id))
    assert fetched.status_code == 200
    assert fetched.json()["last_time"] == "11:30:00"

    blocked = _patch_status(task["id"], employee.id, "ON_HOLD")
    assert blocked.status_code == 403

    eligibility = client.get(
        "/mini_job_cards/eligibility",
        headers=_auth_headers(employee.id),
        params={"employee_id": employee.id},
    )
    assert eligibility.json()["can_edit"] is False


def test_status_update_errors(employee_factory, api_clock):
    employee = employee_factory()
    other = employee_factory()
    task = _create_job_card([employee.id])["mini_job_cards"][0]

    assert _patch_status(task["id"], employee.id, "PAUSED").status_code == 400
    assert _patch_status("missing-task", employee.id, "ASSIGNED").status_code == 404
    assert _patch_status(task["id"], other.id, "ASSIGNED").status_code == 403

    stale = _patch_status(task["id"], employee.id, "ASSIGNED", occurred_at="2026-03-10T08:00:00")
    assert stale.status_code == 400


def test_list_and_eligibility_show_active_task(employee_factory, api_clock):
    employee = employee_factory()
    first = _create_job_card([employee.id])["mini_job_cards"][0]
    second = _create_job_card([employee.id])["mini_job_cards"][0]

    api_clock.advance(5)
    assert _patch_status(first["id"], employee.id, "ASSIGNED").status_code == 200

    listing = client.get(
        "/mini_job_cards",
        headers=_auth_headers(employee.id),
        params={"employee_id": employee.id},
    )
    assert listing.status_code == 200
    assert {row["id"] for row in listing.json()} == {first["id"], second["id"]}

    eligibility = client.get(
        "/mini_job_cards/eligibility",
        headers=_auth_headers(employee.id),
        params={"employee_id": employee.id},
    ).json()
    assert eligibility["can_edit"] is True
    assert eligibility["editable_task_ids"] == [first["id"]]

    assert _patch_status(second["id"], employee.id, "ASSIGNED").status_code == 403


def test_job_card_admin_only_and_delete(employee_factory, api_clock):
    employee = employee_factory()

    forbidden = client.post(
        "/job_cards",
        headers=_auth_headers(employee.id),
        json={"job_type": "SERVICE", "generator_name": "Perkins", "employee_ids": [employee.id]},
    )
    assert forbidden.status_code == 403

    job_card = _create_job_card([employee.id])
    extra = employee_factory()
    added = client.post(
        f"/job_cards/{job_card['id']}/employees",
        headers=_auth_headers(1, role="ADMIN"),
        json={"employee_id": extra.id},
    )
    assert added.status_code == 200
    assert added.json()["employee_id"] == extra.id

    deleted = client.delete(f"/job_cards/{job_card['id']}", headers=_auth_headers(1, role="ADMIN"))
    assert deleted.status_code == 200
    assert deleted.json()["mini_job_cards_removed"] == 2


def test_end_session_without_activity_is_404(employee_factory, api_clock):
    employee = employee_factory()

    resp = client.post(
        "/sessions/end",
        headers=_auth_headers(employee.id),
        json={"employee_id": employee.id},
    )
    assert resp.status_code == 404
    assert "No active session" in resp.json()["detail"]


def test_reports_through_the_api(employee_factory, api_clock):
    employee = employee_factory()
    task = _create_job_card([employee.id])["mini_job_cards"][0]
    _patch_status(task["id"], employee.id, "ASSIGNED")
    api_clock.advance(45)
    _patch_status(task["id"], employee.id, "IN_PROGRESS")

    task_report = client.post(
        "/reports/task_time",
        headers=_auth_headers(employee.id),
        json={"employee_id": employee.id, "start_date": "2026-03-10", "end_date": "2026-03-10"},
    )
    assert task_report.status_code == 200, task_report.text
    assert task_report.json()["totals"]["assigned_time"] == "00:45"

    ot_report = client.post(
        "/reports/overtime",
        headers=_auth_headers(employee.id),
        json={"employee_id": employee.id, "start_date": "2026-03-01", "end_date": "2026-03-10"},
    )
    assert ot_report.status_code == 200
    assert len(ot_report.json()["records"]) == 1

    future = client.post(
        "/reports/task_time",
        headers=_auth_headers(employee.id),
        json={"employee_id": employee.id, "start_date": "2026-03-10", "end_date": "2026-03-12"},
    )
    assert future.status_code == 400

    other = employee_factory()
    forbidden = client.post(
        "/reports/overtime",
        headers=_auth_headers(other.id),
        json={"employee_id": employee.id, "start_date": "2026-03-01", "end_date": "2026-03-10"},
    )
    assert forbidden.status_code == 403


def test_mini_job_card_listings_by_job_card_and_status(employee_factory, api_clock):
    employee = employee_factory()
    colleague = employee_factory()
    shared = _create_job_card([employee.id, colleague.id])
    solo = _create_job_card([employee.id])

    own_task = next(t for t in shared["mini_job_cards"] if t["employee_id"] == employee.id)
    assert _patch_status(own_task["id"], employee.id, "ASSIGNED").status_code == 200

    admin = _auth_headers(1, role="ADMIN")
    by_card = client.get(f"/mini_job_cards/job_card/{shared['id']}", headers=admin)
    assert by_card.status_code == 200
    assert {row["employee_id"] for row in by_card.json()} == {employee.id, colleague.id}

    own_view = client.get(f"/mini_job_cards/job_card/{shared['id']}", headers=_auth_headers(colleague.id))
    assert [row["employee_id"] for row in own_view.json()] == [colleague.id]

    missing = client.get("/mini_job_cards/job_card/no-such-card", headers=admin)
    assert missing.status_code == 404

    assigned = client.get("/mini_job_cards/status/assigned", headers=_auth_headers(employee.id))
    assert assigned.status_code == 200
    assert [row["id"] for row in assigned.json()] == [own_task["id"]]

    pending = client.get("/mini_job_cards/status/PENDING", headers=admin)
    assert {row["job_card_id"] for row in pending.json()} == {shared["id"], solo["id"]}
    assert len(pending.json()) == 2

    assert client.get("/mini_job_cards/status/ASSIGNED", headers=_auth_headers(colleague.id)).json() == []
    assert client.get("/mini_job_cards/status/PAUSED", headers=admin).status_code == 400
