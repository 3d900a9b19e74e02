from __future__ import annotations

from placement_portal.database import SessionLocal
from placement_portal.models.application import Application


def _register(client, *, username: str, role: str, password: str = "SecretPass123") -> dict:
    payload = {
        "username": username,
        "password": password,
        "role": role,
        "name": username.title(),
        "email": f"{username}@example.com",
    }
    if role == "student":
        payload["student_details"] = {"department": "CS", "cgpa": "3.5", "graduation_year": 2025}
    if role == "employer":
        payload["employer_details"] = {"company_name": f"{username} Inc", "industry": "Software"}
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 201
    token = r.cookies.get("placement_session")
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def _login(client, *, username: str, password: str = "SecretPass123") -> dict:
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200
    token = r.cookies.get("placement_session")
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def _post_job(client, headers: dict, title: str = "Dev") -> int:
    r = client.post(
        "/api/jobs",
        json={"title": title, "description": "Build things", "requirements": "Python", "location": "Remote", "salary": "$60k"},
        headers=headers,
    )
    assert r.status_code == 201
    return r.json()["id"]


def _apply(client, headers: dict, job_id: int) -> int:
    r = client.post("/api/applications", json={"job_id": job_id}, headers=headers)
    assert r.status_code == 201
    return r.json()["id"]


def test_end_to_end_application_flow(client) -> None:
    _register(client, username="techcorp", role="employer", password="emp123")
    employer = _login(client, username="techcorp", password="emp123")
    r = client.post(
        "/api/jobs",
        json={"title": "Dev", "description": "Frontend work", "requirements": "React", "location": "Remote", "salary": "$60k"},
        headers=employer,
    )
    assert r.status_code == 201
    job = r.json()

    _register(client, username="alice", role="student", password="student123")
    student = _login(client, username="alice", password="student123")
    r = client.post("/api/applications", json={"job_id": job["id"]}, headers=student)
    assert r.status_code == 201
    application = r.json()
    assert application["status"] == "applied"
    assert application["job_id"] == job["id"]

    again = client.post("/api/applications", json={"job_id": job["id"]}, headers=student)
    assert again.status_code == 400
    assert again.json()["kind"] == "conflict"

    r = client.patch(f"/api/applications/{application['id']}/status", json={"status": "accepted"}, headers=employer)
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"

    mine = client.get("/api/applications", headers=student).json()
    assert [(a["id"], a["status"]) for a in mine] == [(application["id"], "accepted")]


def test_application_listing_is_scoped_by_role(client) -> None:
    s1 = _register(client, username="student1", role="student")
    s2 = _register(client, username="student2", role="student")
    e1 = _register(client, username="employer1", role="employer")
    e2 = _register(client, username="employer2", role="employer")
    admin = _register(client, username="admin1", role="admin")
    officer = _register(client, username="officer1", role="officer")

    j1 = _post_job(client, e1, "J1")
    j2 = _post_job(client, e2, "J2")
    a1 = _apply(client, s1, j1)
    a2 = _apply(client, s2, j2)

    def ids(headers: dict) -> list[int]:
        r = client.get("/api/applications", headers=headers)
        assert r.status_code == 200
        return [a["id"] for a in r.json()]

    assert ids(s1) == [a1]
    assert ids(s2) == [a2]
    assert ids(e1) == [a1]
    assert ids(e2) == [a2]
    assert ids(admin) == [a1, a2]
    assert ids(officer) == [a1, a2]


def test_employer_listing_groups_by_job_then_insertion(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    s1 = _register(client, username="student1", role="student")
    s2 = _register(client, username="student2", role="student")
    j1 = _post_job(client, employer, "J1")
    j2 = _post_job(client, employer, "J2")

    x = _apply(client, s1, j2)
    y = _apply(client, s1, j1)
    z = _apply(client, s2, j2)

    r = client.get("/api/applications", headers=employer)
    assert [a["id"] for a in r.json()] == [y, x, z]


def test_only_students_can_apply(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    job_id = _post_job(client, employer)
    for headers in (employer, _register(client, username="officer1", role="officer")):
        r = client.post("/api/applications", json={"job_id": job_id}, headers=headers)
        assert r.status_code == 403


def test_apply_to_missing_job_returns_404(client) -> None:
    student = _register(client, username="student1", role="student")
    r = client.post("/api/applications", json={"job_id": 4242}, headers=student)
    assert r.status_code == 404
    with SessionLocal() as db:
        assert db.query(Application).count() == 0


def test_student_cannot_change_status(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    student = _register(client, username="student1", role="student")
    app_id = _apply(client, student, _post_job(client, employer))

    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "accepted"}, headers=student)
    assert r.status_code == 403
    with SessionLocal() as db:
        assert db.get(Application, app_id).status.value == "applied"


def test_officer_and_admin_can_change_any_status(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    student = _register(client, username="student1", role="student")
    officer = _register(client, username="officer1", role="officer")
    admin = _register(client, username="admin1", role="admin")
    job_id = _post_job(client, employer)
    app_id = _apply(client, student, job_id)

    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "reviewing"}, headers=officer)
    assert r.status_code == 200
    assert r.json()["status"] == "reviewing"
    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "rejected"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["status"] == "rejected"


def test_employer_cannot_touch_other_employers_applications(client) -> None:
    owner = _register(client, username="employer1", role="employer")
    other = _register(client, username="employer2", role="employer")
    student = _register(client, username="student1", role="student")
    app_id = _apply(client, student, _post_job(client, owner))

    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "rejected"}, headers=other)
    assert r.status_code == 404
    missing = client.patch("/api/applications/9999/status", json={"status": "rejected"}, headers=other)
    assert missing.status_code == 404
    assert r.json() == missing.json()


def test_terminal_statuses_are_locked(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    student = _register(client, username="student1", role="student")
    app_id = _apply(client, student, _post_job(client, employer))
    url = f"/api/applications/{app_id}/status"

    assert client.patch(url, json={"status": "reviewing"}, headers=employer).status_code == 200
    assert client.patch(url, json={"status": "applied"}, headers=employer).status_code == 400
    assert client.patch(url, json={"status": "rejected"}, headers=employer).status_code == 200
    # Re-sending the current status is accepted as a no-op.
    assert client.patch(url, json={"status": "rejected"}, headers=employer).status_code == 200
    r = client.patch(url, json={"status": "accepted"}, headers=employer)
    assert r.status_code == 400
    assert r.json()["detail"] == "Application is already rejected"


def test_unknown_status_is_a_validation_error(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    student = _register(client, username="student1", role="student")
    app_id = _apply(client, student, _post_job(client, employer))
    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "hired"}, headers=employer)
    assert r.status_code == 400
    assert r.json()["kind"] == "validation_error"


def test_applications_require_authentication(client) -> None:
    assert client.get("/api/applications").status_code == 401
    assert client.post("/api/applications", json={"job_id": 1}).status_code == 401


def test_ids_beyond_integer_range_are_rejected(client) -> None:
    employer = _register(client, username="employer1", role="employer")
    student = _register(client, username="student1", role="student")

    r = client.post("/api/applications", json={"job_id": 2**64}, headers=student)
    assert r.status_code == 400
    assert r.json()["kind"] == "validation_error"

    r = client.patch(f"/api/applications/{2**64}/status", json={"status": "reviewing"}, headers=employer)
    assert r.status_code == 400
    assert r.json()["kind"] == "validation_error"

    with SessionLocal() as db:
        assert db.query(Application).count() == 0
