from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from badsession.models.finance import Donation, Expense
from badsession.services import finance as finance_service


def test_record_player_and_guest_income(client, authorize, admin_user, player_user):
    authorize(admin_user)
    player_resp = client.post(
        "/api/finance/donations",
        json={"contributor_id": player_user.id, "contributor_name": "ignored", "amount": 100, "notes": "March"},
    )
    assert player_resp.status_code == 201, player_resp.text
    assert "donation_id" in player_resp.json()

    guest_resp = client.post(
        "/api/finance/income",
        json={"contributor_name": "Bob", "is_guest": True, "amount": "25.50"},
    )
    assert guest_resp.status_code == 201, guest_resp.text
    assert "income_id" in guest_resp.json()

    rows = {row["id"]: row for row in client.get("/api/finance/income").json()}
    player_row = rows[player_resp.json()["donation_id"]]
    assert player_row["contributor_name"] is None
    assert player_row["contributor_full_name"] == "Lin Dan"
    guest_row = rows[guest_resp.json()["income_id"]]
    assert guest_row["contributor_id"] is None
    assert guest_row["contributor_full_name"] == "Bob"
    assert guest_row["amount"] == 25.5


def test_income_validation(client, authorize, admin_user):
    authorize(admin_user)
    assert client.post("/api/finance/donations", json={"contributor_name": "Bob", "is_guest": True}).status_code == 400
    assert (
        client.post("/api/finance/donations", json={"contributor_name": "Bob", "is_guest": True, "amount": 0}).status_code
        == 400
    )
    assert client.post("/api/finance/donations", json={"is_guest": True, "amount": 10}).status_code == 400
    assert client.post("/api/finance/donations", json={"amount": 10}).status_code == 400
    assert client.post("/api/finance/donations", json={"contributor_id": 999, "amount": 10}).status_code == 404


def test_finance_mutations_require_admin(client, authorize, player_user):
    authorize(player_user)
    assert client.post("/api/finance/donations", json={"contributor_name": "Bob", "is_guest": True, "amount": 5}).status_code == 403
    assert client.post("/api/finance/expenses", json={"description": "Shuttles", "amount": 5}).status_code == 403
    assert client.post("/api/finance/settings", json={"guest_daily_rate": 5}).status_code == 403
    assert client.get("/api/finance/summary").status_code == 200


def test_toggle_paid_flips_back_and_forth(client, authorize, admin_user):
    authorize(admin_user)
    donation_id = client.post(
        "/api/finance/donations", json={"contributor_name": "Bob", "is_guest": True, "amount": 10}
    ).json()["donation_id"]

    first = client.post(f"/api/finance/donations/{donation_id}/toggle-paid")
    assert first.status_code == 200
    assert first.json()["is_paid"] is True
    second = client.post(f"/api/finance/income/{donation_id}/toggle-paid")
    assert second.json()["is_paid"] is False

    expense_id = client.post(
        "/api/finance/expenses", json={"description": "Shuttles", "amount": 30}
    ).json()["expense_id"]
    assert client.post(f"/api/finance/expenses/{expense_id}/toggle-paid").json()["is_paid"] is True
    assert client.post(f"/api/finance/expenses/{expense_id}/toggle-paid").json()["is_paid"] is False

    assert client.post("/api/finance/expenses/999/toggle-paid").status_code == 404


def test_mark_income_paid_is_not_a_flip(client, authorize, admin_user):
    authorize(admin_user)
    donation_id = client.post(
        "/api/finance/income", json={"contributor_name": "Bob", "is_guest": True, "amount": 10}
    ).json()["income_id"]
    assert client.post(f"/api/finance/income/{donation_id}/paid").status_code == 200
    assert client.post(f"/api/finance/income/{donation_id}/paid").status_code == 200
    assert client.get("/api/finance/income").json()[0]["is_paid"] is True


def test_summary_counts_only_paid_rows(client, authorize, admin_user, db_session):
    authorize(admin_user)
    now = datetime.utcnow()
    db_session.add_all(
        [
            Donation(contributor_name="Bob", is_guest=True, amount=100, is_paid=True, donated_at=now),
            Donation(contributor_name="Ann", is_guest=True, amount=50, is_paid=True, donated_at=now - timedelta(days=60)),
            Donation(contributor_name="Cid", is_guest=True, amount=999, is_paid=False, donated_at=now),
            Expense(description="Court hire", amount=40, category="venue", is_paid=True, recorded_at=now),
            Expense(description="Old net", amount=5, category="equipment", is_paid=False, recorded_at=now),
        ]
    )
    db_session.commit()

    summary = client.get("/api/finance/summary").json()
    assert summary == {
        "total_donations": 150,
        "total_expenses": 40,
        "remaining_fund": 110,
        "donations_30_days": 100,
        "expenses_30_days": 40,
    }


def test_update_and_delete_income(client, authorize, admin_user, player_user):
    authorize(admin_user)
    donation_id = client.post(
        "/api/finance/income", json={"contributor_name": "Bob", "is_guest": True, "amount": 10}
    ).json()["income_id"]

    assert client.put(f"/api/finance/income/{donation_id}", json={"amount": 0}).status_code == 400
    resp = client.put(
        f"/api/finance/donations/{donation_id}",
        json={"amount": 20, "is_guest": False, "contributor_id": player_user.id, "notes": "moved"},
    )
    assert resp.status_code == 200, resp.text
    row = client.get("/api/finance/donations").json()[0]
    assert row["amount"] == 20
    assert row["is_guest"] is False
    assert row["contributor_name"] is None
    assert row["contributor_full_name"] == "Lin Dan"

    assert client.delete(f"/api/finance/income/{donation_id}").status_code == 200
    missing = client.delete(f"/api/finance/donations/{donation_id}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Income record not found"}


def test_expense_crud(client, authorize, admin_user):
    authorize(admin_user)
    assert client.post("/api/finance/expenses", json={"amount": 10}).status_code == 400
    assert client.post("/api/finance/expenses", json={"description": "X", "amount": 5, "category": "food"}).status_code == 400

    expense_id = client.post(
        "/api/finance/expenses",
        json={"description": "Shuttlecocks", "amount": "120.00", "category": "equipment"},
    ).json()["expense_id"]
    listed = client.get("/api/finance/expenses").json()
    assert listed[0]["full_name"] == "Club Admin"
    assert listed[0]["category"] == "equipment"

    no_category = client.put(f"/api/finance/expenses/{expense_id}", json={"amount": 10, "description": "Nets"})
    assert no_category.status_code == 400
    ok = client.put(
        f"/api/finance/expenses/{expense_id}",
        json={"amount": 90, "description": "Nets", "category": "maintenance"},
    )
    assert ok.status_code == 200
    assert client.get("/api/finance/expenses").json()[0]["description"] == "Nets"

    assert client.delete(f"/api/finance/expenses/{expense_id}").status_code == 200
    assert client.delete(f"/api/finance/expenses/{expense_id}").status_code == 404


def test_top_contributors_grouped_and_sorted(client, authorize, admin_user, player_user):
    authorize(admin_user)
    for amount in (10, 15):
        client.post("/api/finance/income", json={"contributor_id": player_user.id, "amount": amount})
    client.post("/api/finance/income", json={"contributor_name": "Bob", "is_guest": True, "amount": 100})

    top = client.get("/api/finance/donations/top/contributors").json()
    assert top == [
        {"name": "Bob", "total_donated": 100, "donation_count": 1},
        {"name": "Lin Dan", "total_donated": 25, "donation_count": 2},
    ]


def test_search_players_and_guests(client, authorize, admin_user, player_user, play_session):
    authorize(player_user)
    client.post("/api/attendance/check-in", json={"session_id": play_session.id, "guest_name": "Bobby Tables"})

    players = client.get("/api/finance/search", params={"type": "player", "query": "lin"}).json()
    assert [item["id"] for item in players] == [player_user.id]

    guests = client.get("/api/finance/search", params={"type": "guest", "query": "bob"}).json()
    assert guests == [
        {"id": "Bobby Tables", "full_name": "Bobby Tables", "name": "Bobby Tables", "username": None, "role": None}
    ]

    assert client.get("/api/finance/search", params={"type": "player"}).status_code == 400
    assert client.get("/api/finance/search", params={"type": "coach", "query": "x"}).json() == []


def test_settings_defaults_and_partial_update(client, authorize, admin_user):
    authorize(admin_user)
    defaults = client.get("/api/finance/settings").json()
    assert defaults["player_monthly_rate"] == 0
    assert defaults["guest_daily_rate"] == 0

    client.post("/api/finance/settings", json={"guest_daily_rate": 30})
    resp = client.post("/api/finance/settings", json={"player_monthly_rate": 80})
    assert resp.status_code == 200
    assert resp.json()["created_count"] == 0

    settings = client.get("/api/finance/settings").json()
    assert settings["guest_daily_rate"] == 30
    assert settings["player_monthly_rate"] == 80


def test_settings_with_full_month_bills_every_player_once(client, authorize, admin_user, player_user, other_player):
    authorize(admin_user)
    payload = {"player_monthly_rate": 100000, "player_monthly_year": 2025, "player_monthly_month": 2}
    first = client.post("/api/finance/settings", json=payload)
    assert first.json()["created_count"] == 2

    second = client.post("/api/finance/settings", json=payload)
    assert second.json()["created_count"] == 0

    rows = client.get("/api/finance/income").json()
    assert sorted(row["contributor_id"] for row in rows) == sorted([player_user.id, other_player.id])
    assert all(row["notes"] == "Monthly income for 2025-02" for row in rows)
    assert all(row["donated_at"].startswith("2025-02-01") for row in rows)


def test_apply_player_income_is_idempotent(client, authorize, admin_user, player_user, other_player, make_user):
    newcomer = make_user("tai", "Tai Tzu Ying")
    authorize(admin_user)
    payload = {"player_ids": [player_user.id, other_player.id], "amount": 100000, "year": 2025, "month": 2}

    first = client.post("/api/finance/apply-player-income", json=payload)
    assert first.status_code == 200, first.text
    assert first.json()["created_count"] == 2
    assert first.json()["skipped_player_ids"] == []
    rows = client.get("/api/finance/income").json()
    assert sorted(row["contributor_id"] for row in rows) == sorted([player_user.id, other_player.id])
    assert all(row["amount"] == 100000 for row in rows)

    repeat = client.post("/api/finance/apply-player-income", json=payload)
    assert repeat.status_code == 200, repeat.text
    assert repeat.json()["created_count"] == 0
    assert sorted(repeat.json()["skipped_player_ids"]) == sorted([player_user.id, other_player.id])
    assert len(client.get("/api/finance/income").json()) == 2

    widened = client.post(
        "/api/finance/apply-player-income",
        json={**payload, "player_ids": [player_user.id, other_player.id, newcomer.id]},
    )
    assert widened.json()["created_count"] == 1
    assert len(client.get("/api/finance/income").json()) == 3


def test_apply_player_income_validation(client, authorize, admin_user, player_user):
    authorize(admin_user)
    missing = client.post("/api/finance/apply-player-income", json={"player_ids": [player_user.id], "amount": 10})
    assert missing.status_code == 400

    unknown = client.post(
        "/api/finance/apply-player-income",
        json={"player_ids": [player_user.id, 999], "amount": 10, "year": 2025, "month": 3},
    )
    assert unknown.status_code == 404
    assert client.get("/api/finance/income").json() == []


def test_amounts_beyond_two_decimal_places_are_rejected(client, authorize, admin_user, player_user):
    authorize(admin_user)
    income = client.post(
        "/api/finance/income", json={"contributor_name": "Bob", "is_guest": True, "amount": "100.005"}
    )
    assert income.status_code == 400
    expense = client.post("/api/finance/expenses", json={"description": "Shuttles", "amount": "9.999"})
    assert expense.status_code == 400
    settings = client.post("/api/finance/settings", json={"guest_daily_rate": "0.125"})
    assert settings.status_code == 400
    billing = client.post(
        "/api/finance/apply-player-income",
        json={"player_ids": [player_user.id], "amount": "100.005", "year": 2025, "month": 2},
    )
    assert billing.status_code == 400
    assert client.get("/api/finance/income").json() == []


def test_fractional_monthly_rate_is_billed_once(client, authorize, admin_user, player_user):
    authorize(admin_user)
    payload = {"player_ids": [player_user.id], "amount": "100.50", "year": 2025, "month": 4}
    assert client.post("/api/finance/apply-player-income", json=payload).json()["created_count"] == 1
    assert client.post("/api/finance/apply-player-income", json=payload).json()["created_count"] == 0
    rows = client.get("/api/finance/income").json()
    assert [row["amount"] for row in rows] == [100.5]


def test_failed_monthly_billing_rolls_back_settings(client, authorize, admin_user, player_user, monkeypatch):
    authorize(admin_user)

    def _fail(*args, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(finance_service, "_apply_monthly_income", _fail)
    resp = client.post(
        "/api/finance/settings",
        json={"player_monthly_rate": 80, "player_monthly_year": 2025, "player_monthly_month": 5, "guest_daily_rate": 20},
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error occurred"}

    settings = client.get("/api/finance/settings").json()
    assert settings["player_monthly_rate"] == 0
    assert settings["guest_daily_rate"] == 0
    assert settings["player_monthly_year"] is None
    assert client.get("/api/finance/income").json() == []
