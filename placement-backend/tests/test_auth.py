from __future__ import annotations

from placement_portal.config import settings
from placement_portal.database import SessionLocal
from placement_portal.models.employer_profile import EmployerProfile
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import User
from placement_portal.utils import password_hash


COOKIE = "placement_session"


def _student_payload(username: str = "alice", password: str = "student123") -> dict:
    return {
        "username": username,
        "password": password,
        "role": "student",
        "name": "Alice Smith",
        "email": "alice@student.edu",
        "student_details": {
            "department": "Computer Science",
            "cgpa": "3.8",
            "graduation_year": 2024,
            "resume_url": "https://example.com/resume.pdf",
        },
    }


def _employer_payload(username: str = "techcorp", password: str = "emp123") -> dict:
    return {
        "username": username,
        "password": password,
        "role": "employer",
        "name": "Tech Corp HR",
        "email": "hr@techcorp.com",
        "employer_details": {"company_name": "Tech Corp", "industry": "Software", "website": "https://techcorp.com"},
    }


def test_register_login_and_me_flow(client) -> None:
    register_response = client.post("/api/auth/register", json=_student_payload())
    assert register_response.status_code == 201
    created = register_response.json()
    assert created["username"] == "alice"
    assert created["role"] == "student"
    assert "password" not in created
    assert register_response.cookies.get(COOKIE)

    # Registration opens a session straight away.
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == created["id"]

    client.cookies.clear()
    assert client.get("/api/auth/me").status_code == 401

    login_response = client.post("/api/auth/login", json={"username": "alice", "password": "student123"})
    assert login_response.status_code == 200
    assert login_response.json()["id"] == created["id"]
    token = login_response.cookies.get(COOKIE)
    assert token

    client.cookies.clear()
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "alice"


def test_register_creates_role_profile(client) -> None:
    student = client.post("/api/auth/register", json=_student_payload()).json()
    employer = client.post("/api/auth/register", json=_employer_payload()).json()

    with SessionLocal() as db:
        profile = db.query(StudentProfile).filter(StudentProfile.user_id == student["id"]).one()
        assert profile.department == "Computer Science"
        assert profile.graduation_year == 2024
        company = db.query(EmployerProfile).filter(EmployerProfile.user_id == employer["id"]).one()
        assert company.company_name == "Tech Corp"
        assert company.is_approved is True


def test_password_is_stored_hashed(client) -> None:
    client.post("/api/auth/register", json=_student_payload(password="student123"))
    with SessionLocal() as db:
        user = db.query(User).filter(User.username == "alice").one()
        assert user.password != "student123"
        assert "student123" not in user.password


def test_duplicate_username_rejected_for_any_role(client) -> None:
    assert client.post("/api/auth/register", json=_student_payload(username="dup")).status_code == 201

    for payload in (
        _student_payload(username="dup", password="different"),
        _employer_payload(username="dup"),
        {"username": "DUP ", "password": "admin123", "role": "admin", "name": "Admin", "email": "a@college.edu"},
    ):
        r = client.post("/api/auth/register", json=payload)
        assert r.status_code == 400
        assert r.json()["kind"] == "duplicate_username"

    with SessionLocal() as db:
        assert db.query(User).count() == 1


def test_register_requires_role_details(client) -> None:
    payload = _student_payload()
    payload.pop("student_details")
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert body["kind"] == "validation_error"
    assert "student_details" in body["detail"]

    payload = _employer_payload()
    payload["employer_details"] = None
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 400

    with SessionLocal() as db:
        assert db.query(User).count() == 0


def test_register_reports_first_invalid_field(client) -> None:
    payload = _student_payload()
    payload["email"] = "not-an-email"
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 400
    assert r.json()["detail"] == "email: email must contain '@'"

    payload = _student_payload()
    payload["role"] = "superuser"
    assert client.post("/api/auth/register", json=payload).status_code == 400


def test_officer_registration_ignores_profile_details(client) -> None:
    payload = _student_payload(username="officer1")
    payload["role"] = "officer"
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 201
    with SessionLocal() as db:
        assert db.query(StudentProfile).count() == 0


def test_staff_registration_can_be_disabled(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "allow_staff_registration", False)
    r = client.post(
        "/api/auth/register",
        json={"username": "root", "password": "admin123", "role": "admin", "name": "Admin", "email": "a@college.edu"},
    )
    assert r.status_code == 403
    assert client.post("/api/auth/register", json=_student_payload()).status_code == 201


def test_login_failures_are_indistinguishable(client) -> None:
    client.post("/api/auth/register", json=_student_payload())
    client.cookies.clear()

    wrong_password = client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    unknown_user = client.post("/api/auth/login", json={"username": "mallory", "password": "student123"})

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert COOKIE not in wrong_password.cookies


def test_login_username_is_case_insensitive(client) -> None:
    client.post("/api/auth/register", json=_student_payload())
    r = client.post("/api/auth/login", json={"username": "  Alice ", "password": "student123"})
    assert r.status_code == 200


def test_logout_invalidates_session_and_is_idempotent(client) -> None:
    token = client.post("/api/auth/register", json=_student_payload()).cookies.get(COOKIE)
    headers = {"Authorization": f"Bearer {token}"}

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    client.cookies.clear()
    assert client.get("/api/auth/me", headers=headers).status_code == 401

    # Already logged out, no session at all, garbage token: all succeed.
    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.post("/api/auth/logout").status_code == 200
    assert client.post("/api/auth/logout", headers={"Authorization": "Bearer garbage"}).status_code == 200


def test_session_for_deleted_user_is_rejected(client) -> None:
    r = client.post("/api/auth/register", json=_student_payload())
    token = r.cookies.get(COOKIE)
    client.cookies.clear()

    with SessionLocal() as db:
        db.query(StudentProfile).delete()
        db.query(User).delete()
        db.commit()

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 401
    assert me.json()["kind"] == "not_authenticated"


def test_invalid_token_is_rejected(client) -> None:
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-real-token"})
    assert r.status_code == 401


def test_unknown_user_login_derives_a_key_like_wrong_password(client, monkeypatch) -> None:
    client.post("/api/auth/register", json=_student_payload())
    client.cookies.clear()

    calls: list[str] = []
    real_derive = password_hash._derive

    def counting_derive(password: str, salt: str) -> bytes:
        calls.append(password)
        return real_derive(password, salt)

    monkeypatch.setattr(password_hash, "_derive", counting_derive)

    client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    known_user = len(calls)
    calls.clear()
    client.post("/api/auth/login", json={"username": "mallory", "password": "nope-nope"})
    unknown_user = len(calls)

    assert known_user == unknown_user == 1
