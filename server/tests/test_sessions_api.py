from __future__ import annotations


def _create_session(client, session_date: str, session_time: str, location: str) -> int:
    resp = client.post(
        "/api/sessions",
        json={"session_date": session_date, "session_time": session_time, "location": location},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["session_id"]


def test_admin_creates_session_and_players_cannot(client, authorize, admin_user, player_user):
    authorize(admin_user)
    session_id = _create_session(client, "2025-01-10", "18:00", "Court 1")
    assert session_id > 0

    authorize(player_user)
    resp = client.post(
        "/api/sessions",
        json={"session_date": "2025-01-11", "session_time": "18:00", "location": "Court 2"},
    )
    assert resp.status_code == 403


def test_create_session_requires_all_fields(client, authorize, admin_user):
    authorize(admin_user)
    missing_location = client.post("/api/sessions", json={"session_date": "2025-01-10", "session_time": "18:00"})
    assert missing_location.status_code == 400

    blank_location = client.post(
        "/api/sessions",
        json={"session_date": "2025-01-10", "session_time": "18:00", "location": "   "},
    )
    assert blank_location.status_code == 400


def test_list_sessions_newest_first_with_counts(client, authorize, admin_user, player_user):
    authorize(admin_user)
    older = _create_session(client, "2025-01-03", "18:00", "Court 1")
    newer_late = _create_session(client, "2025-01-10", "20:00", "Court 2")
    newer_early = _create_session(client, "2025-01-10", "18:00", "Court 3")

    authorize(player_user)
    client.post("/api/attendance/check-in", json={"session_id": older, "is_self_checkin": True})
    client.post("/api/attendance/check-in", json={"session_id": older, "guest_name": "Bob"})

    resp = client.get("/api/sessions")
    assert resp.status_code == 200
    body = resp.json()
    assert [item["id"] for item in body] == [newer_late, newer_early, older]
    counts = {item["id"]: item["attendance_count"] for item in body}
    assert counts == {newer_late: 0, newer_early: 0, older: 2}
    assert body[0]["created_by_name"] == "Club Admin"


def test_session_detail_lists_attendance(client, authorize, play_session, player_user):
    authorize(player_user)
    client.post("/api/attendance/check-in", json={"session_id": play_session.id, "is_self_checkin": True})

    resp = client.get(f"/api/sessions/{play_session.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["location"] == "Court 1"
    assert len(body["attendance"]) == 1
    row = body["attendance"][0]
    assert row["name"] == "Lin Dan"
    assert len(row["formatted_check_in_time"]) == len("2025-01-10 18:00:00")


def test_session_detail_not_found(client, authorize, player_user):
    authorize(player_user)
    resp = client.get("/api/sessions/404")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Session not found"}


def test_register_login_and_self_check_in_end_to_end(client, authorize, admin_user):
    register = client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "pw123456", "full_name": "Alice A"},
    )
    assert register.status_code == 201
    alice_id = register.json()["user_id"]
    token = client.post("/api/auth/login", json={"username": "alice", "password": "pw123456"}).json()["token"]

    authorize(admin_user)
    session_id = _create_session(client, "2025-01-10", "18:00", "Court 1")

    client.headers["Authorization"] = f"Bearer {token}"
    check_in = client.post("/api/attendance/check-in", json={"session_id": session_id, "is_self_checkin": True})
    assert check_in.status_code == 201, check_in.text

    detail = client.get(f"/api/sessions/{session_id}").json()
    assert len(detail["attendance"]) == 1
    assert detail["attendance"][0]["user_id"] == alice_id
    assert detail["attendance"][0]["is_guest"] is False
