from __future__ import annotations


def test_dashboard_rollup(client, authorize, admin_user, player_user, other_player, play_session):
    authorize(player_user)
    client.post("/api/attendance/check-in", json={"session_id": play_session.id, "guest_name": "Bob"})
    client.post("/api/attendance/check-in", json={"session_id": play_session.id, "guest_name": "Bob"})
    client.post("/api/attendance/check-in", json={"session_id": play_session.id, "guest_name": "Carol"})

    authorize(admin_user)
    income_id = client.post(
        "/api/finance/income", json={"contributor_id": player_user.id, "amount": 200}
    ).json()["income_id"]
    client.post(f"/api/finance/income/{income_id}/toggle-paid")
    client.post("/api/finance/income", json={"contributor_name": "Bob", "is_guest": True, "amount": 75})
    expense_id = client.post(
        "/api/finance/expenses", json={"description": "Court hire", "amount": 50, "category": "venue"}
    ).json()["expense_id"]
    client.post(f"/api/finance/expenses/{expense_id}/toggle-paid")

    resp = client.get("/api/dashboard")
    assert resp.status_code == 200
    body = resp.json()
    assert body["player_count"] == 2
    assert body["guest_count"] == 2
    assert body["total_donations"] == 200
    assert body["total_expenses"] == 50
    assert body["remaining_fund"] == 150
    assert len(body["recent_donations"]) == 2
    assert body["recent_expenses"][0]["description"] == "Court hire"
    assert body["recent_sessions"][0]["attendance_count"] == 3


def test_dashboard_limits_recent_items(client, authorize, admin_user):
    authorize(admin_user)
    for day in range(1, 8):
        client.post(
            "/api/sessions",
            json={"session_date": f"2025-03-0{day}", "session_time": "19:00", "location": f"Court {day}"},
        )
    sessions = client.get("/api/dashboard").json()["recent_sessions"]
    assert len(sessions) == 5
    assert sessions[0]["session_date"] == "2025-03-07"
