import pytest
from fastapi.testclient import TestClient

from attendance_tracker.api.deps import (
    create_access_token,
    get_attendance_ledger,
    get_session_registry,
    get_student_directory,
)
from attendance_tracker.main import app


@pytest.fixture
def client(registry, ledger, directory):
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_attendance_ledger] = lambda: ledger
    app.dependency_overrides[get_student_directory] = lambda: directory
    # No context manager: the MongoDB lifespan stays out of the picture.
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth(user_id, role):
    return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}


ADMIN = _auth("admin", "admin")


def _issue(client, section="A", name="Math"):
    resp = client.post("/api/admin/generate-token", params={"section": section, "sessionName": name}, headers=ADMIN)
    assert resp.status_code == 200
    return resp.json()


def test_generate_token(client, ledger):
    body = _issue(client)

    assert body["ttlMinutes"] == 5
    assert len(ledger.records_for(body["token"])) == 3


def test_check_in_flow(client, directory, ledger):
    token = _issue(client)["token"]
    student = directory.in_section("A")[0]
    headers = _auth(student.id, "student")

    first = client.post("/api/attendance/check-in", json={"token": token}, headers=headers)
    assert first.status_code == 200
    assert first.json() == {"message": "Attendance recorded successfully for Math", "status": "OK"}

    again = client.post("/api/attendance/check-in", json={"token": token}, headers=headers)
    assert again.status_code == 409
    assert again.json()["status"] == "CONFLICT"

    records = client.get(f"/api/admin/attendance/{token}", headers=ADMIN).json()
    assert [r["userId"] for r in records] == [student.id]


def test_check_in_unknown_token(client, directory):
    student = directory.in_section("A")[0]
    resp = client.post("/api/attendance/check-in", json={"token": "bogus"}, headers=_auth(student.id, "student"))
    assert resp.status_code == 404
    assert resp.json() == {"message": "Invalid or unknown session token.", "status": "NOT_FOUND"}


def test_check_in_not_eligible(client, directory):
    token = _issue(client, section="A")["token"]
    outsider = directory.in_section("B")[0]
    resp = client.post("/api/attendance/check-in", json={"token": token}, headers=_auth(outsider.id, "student"))
    assert resp.status_code == 404
    assert resp.json()["message"] == "No attendance record found for this session."


def test_check_in_requires_login(client):
    resp = client.post("/api/attendance/check-in", json={"token": "x"})
    assert resp.status_code == 401


def test_students_cannot_issue_tokens(client, directory):
    student = directory.in_section("A")[0]
    resp = client.post(
        "/api/admin/generate-token",
        params={"section": "A", "sessionName": "Math"},
        headers=_auth(student.id, "student"),
    )
    assert resp.status_code == 403


def test_generate_token_requires_section(client):
    resp = client.post("/api/admin/generate-token", params={"sessionName": "Math"}, headers=ADMIN)
    assert resp.status_code == 422


@pytest.mark.parametrize("params", [{"section": "   ", "sessionName": "Math"}, {"section": "A", "sessionName": " "}])
def test_generate_token_rejects_blank_fields(client, registry, ledger, params):
    resp = client.post("/api/admin/generate-token", params=params, headers=ADMIN)

    assert resp.status_code == 400
    assert registry.by_token == {}
    assert ledger.entries == {}


def test_list_sessions_and_all_attendance(client, directory):
    token = _issue(client)["token"]
    student = directory.in_section("A")[1]
    client.post("/api/attendance/check-in", json={"token": token}, headers=_auth(student.id, "student"))

    sessions = client.get("/api/admin/sessions", headers=ADMIN).json()
    assert sessions[0]["sessionToken"] == token
    assert sessions[0]["sessionName"] == "Math"
    assert sessions[0]["active"] is True

    rows = client.get("/api/admin/attendance", headers=ADMIN).json()
    assert rows == [
        {
            "sessionToken": token,
            "sessionName": "Math",
            "userId": student.id,
            "checkInTime": rows[0]["checkInTime"],
        }
    ]
    assert rows[0]["checkInTime"] is not None


def test_retry_fan_out_endpoint(client, directory):
    token = _issue(client)["token"]
    directory.add(full_name="Eli", section="A")

    resp = client.post(f"/api/admin/sessions/{token}/fan-out", headers=ADMIN)

    assert resp.status_code == 200
    assert resp.json() == {"token": token, "created": 1}
    assert client.post("/api/admin/sessions/missing/fan-out", headers=ADMIN).status_code == 404


def test_report_download(client):
    token = _issue(client)["token"]

    resp = client.get(f"/api/admin/attendance/{token}/report", params={"format": "csv"}, headers=ADMIN)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert resp.text.splitlines()[0] == "Session,Section,Student ID,Student Name,Present,Join Time"
    assert len(resp.text.splitlines()) == 4


def test_sections_and_assignment(client, directory):
    groups = client.get("/api/students/sections", headers=ADMIN).json()
    assert [g["section"] for g in groups] == ["A", "B"]

    dara = directory.in_section("B")[0]
    moved = client.put(f"/api/students/assign/{dara.id}", json={"newSection": "A"}, headers=ADMIN)
    assert moved.status_code == 200
    assert moved.json()["section"] == "A"

    blank = client.put(f"/api/students/assign/{dara.id}", json={"newSection": "  "}, headers=ADMIN)
    assert blank.status_code == 400

    missing = client.put("/api/students/assign/nobody", json={"newSection": "A"}, headers=ADMIN)
    assert missing.status_code == 404


def test_create_student(client):
    payload = {"full_name": "Faye", "email": "faye@school.edu"}
    created = client.post("/api/students/", json=payload, headers=ADMIN)
    assert created.status_code == 201
    assert created.json()["section"] == "A"

    duplicate = client.post("/api/students/", json=payload, headers=ADMIN)
    assert duplicate.status_code == 400


def test_create_student_duplicate_after_lookup(client, directory, monkeypatch):
    # Another request registers the email between the lookup and the insert.
    directory.add(full_name="Gus", section="A", email="gus@school.edu")

    async def not_found(email):
        return None

    monkeypatch.setattr(directory, "find_by_email", not_found)

    resp = client.post("/api/students/", json={"full_name": "Gus", "email": "gus@school.edu"}, headers=ADMIN)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already in use."


def test_my_attendance(client, directory):
    token = _issue(client)["token"]
    student = directory.in_section("A")[0]
    headers = _auth(student.id, "student")
    client.post("/api/attendance/check-in", json={"token": token}, headers=headers)

    history = client.get("/api/students/me/attendance", headers=headers).json()

    assert len(history) == 1
    assert history[0]["sessionId"] == token
    assert history[0]["present"] is True


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
