from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from sqlalchemy import case, func
from sqlalchemy.orm import Session, selectinload

from badsession.config import (
    EXPENSE_CATEGORIES,
    ROLE_PLAYER,
    SEARCH_RESULTS_LIMIT,
    SUMMARY_WINDOW_DAYS,
    TOP_CONTRIBUTORS_LIMIT,
)
from badsession.core.errors import NotFoundError, ValidationError
from badsession.models.attendance import Attendance
from badsession.models.finance import Donation, Expense, FinanceSettings
from badsession.models.user import User
from badsession.schemas.finance import (
    DonationCreate,
    DonationOut,
    DonationUpdate,
    ExpenseCreate,
    ExpenseOut,
    ExpenseUpdate,
    FinanceSettingsOut,
    FinanceSettingsUpdate,
    FinanceSummary,
    SearchResult,
    TopContributor,
)

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


# -- settings ---------------------------------------------------------------


def get_finance_settings(db: Session) -> FinanceSettings | None:
    return db.get(FinanceSettings, SETTINGS_ROW_ID)


def ensure_finance_settings(db: Session) -> FinanceSettings:
    """Return the singleton settings row, adding it to the session when missing."""
    row = get_finance_settings(db)
    if row is None:
        row = FinanceSettings(id=SETTINGS_ROW_ID, player_monthly_rate=0, guest_daily_rate=0)
        db.add(row)
        db.flush()
    return row


def read_settings(db: Session) -> FinanceSettingsOut:
    row = get_finance_settings(db)
    if row is None:
        return FinanceSettingsOut()
    return FinanceSettingsOut(
        id=row.id,
        player_monthly_rate=float(row.player_monthly_rate or 0),
        player_monthly_year=row.player_monthly_year,
        player_monthly_month=row.player_monthly_month,
        guest_daily_rate=float(row.guest_daily_rate or 0),
    )


def update_settings(db: Session, payload: FinanceSettingsUpdate) -> int:
    """Store the supplied rates and, for a full monthly rate, bill every player.

    Returns the number of income rows created by the monthly apply.
    """
    row = ensure_finance_settings(db)
    for field in payload.model_fields_set:
        value = getattr(payload, field)
        if value is None and field in ("player_monthly_rate", "guest_daily_rate"):
            value = 0
        setattr(row, field, value)

    created_count = 0
    rate = payload.player_monthly_rate
    year = payload.player_monthly_year
    month = payload.player_monthly_month
    if rate and year and month:
        players = db.query(User).filter(User.role == ROLE_PLAYER).order_by(User.full_name.asc()).all()
        created, _ = _apply_monthly_income(db, players, rate, year, month)
        created_count = len(created)

    db.commit()
    logger.info(
        "finance_settings_updated",
        extra={"fields": sorted(payload.model_fields_set), "monthly_income_created": created_count},
    )
    return created_count


# -- monthly player income --------------------------------------------------


def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def _apply_monthly_income(
    db: Session,
    players: Iterable[User],
    amount: Decimal,
    year: int,
    month: int,
) -> tuple[list[Donation], list[int]]:
    """Add one income row per player unless that player already has one for the month.

    The caller owns the transaction; nothing is committed here.
    """
    players = list(players)
    if not players:
        return [], []
    start, end = _month_bounds(year, month)
    already_billed = {
        contributor_id
        for (contributor_id,) in db.query(Donation.contributor_id)
        .filter(
            Donation.is_guest.is_(False),
            Donation.contributor_id.in_([player.id for player in players]),
            Donation.donated_at >= start,
            Donation.donated_at < end,
            Donation.amount == amount,
        )
        .all()
    }

    created: list[Donation] = []
    skipped: list[int] = []
    note = f"Monthly income for {year}-{month:02d}"
    for player in players:
        if player.id in already_billed:
            skipped.append(player.id)
            continue
        donation = Donation(
            contributor_id=player.id,
            contributor_name=None,
            is_guest=False,
            amount=amount,
            notes=note,
            donated_at=start,
        )
        db.add(donation)
        created.append(donation)
    db.flush()
    return created, skipped


def apply_player_income(
    db: Session,
    player_ids: list[int],
    amount: Decimal | None,
    year: int | None,
    month: int | None,
) -> tuple[int, list[int]]:
    if not player_ids or not amount or amount <= 0 or not year or not month:
        raise ValidationError("Missing required fields: player_ids, amount, year, month")
    unique_ids = sorted(set(player_ids))
    players = db.query(User).filter(User.id.in_(unique_ids)).all()
    missing = set(unique_ids) - {player.id for player in players}
    if missing:
        raise NotFoundError(f"Player {', '.join(str(pid) for pid in sorted(missing))}")

    created, skipped = _apply_monthly_income(db, players, amount, year, month)
    db.commit()
    logger.info(
        "player_income_applied",
        extra={"year": year, "month": month, "created_count": len(created), "skipped": skipped},
    )
    return len(created), skipped


# -- donations / income -----------------------------------------------------


def _require_positive(amount: Decimal | None, message: str) -> Decimal:
    if amount is None or amount <= 0:
        raise ValidationError(message)
    return amount


def _ensure_contributor(db: Session, contributor_id: int) -> None:
    if db.get(User, contributor_id) is None:
        raise NotFoundError("Contributor")


def _assign_contributor(
    db: Session,
    donation: Donation,
    *,
    is_guest: bool,
    contributor_id: int | None,
    contributor_name: str | None,
) -> None:
    name = (contributor_name or "").strip()
    if is_guest:
        if not name:
            raise ValidationError("Guest income requires a contributor name")
        donation.contributor_id = None
        donation.contributor_name = name
    else:
        if not contributor_id:
            raise ValidationError("Player income requires a contributor id")
        _ensure_contributor(db, contributor_id)
        donation.contributor_id = contributor_id
        donation.contributor_name = None
    donation.is_guest = is_guest


def record_donation(db: Session, payload: DonationCreate) -> Donation:
    amount = _require_positive(payload.amount, "Missing required fields")
    donation = Donation(amount=amount, notes=payload.notes or None)
    _assign_contributor(
        db,
        donation,
        is_guest=payload.is_guest,
        contributor_id=payload.contributor_id,
        contributor_name=payload.contributor_name,
    )
    db.add(donation)
    db.commit()
    db.refresh(donation)
    logger.info("donation_recorded", extra={"donation_id": donation.id, "is_guest": donation.is_guest})
    return donation


def serialize_donation(donation: Donation) -> DonationOut:
    return DonationOut(
        id=donation.id,
        contributor_id=donation.contributor_id,
        contributor_name=donation.contributor_name,
        is_guest=donation.is_guest,
        amount=float(donation.amount),
        notes=donation.notes,
        is_paid=donation.is_paid,
        donated_at=donation.donated_at,
        contributor_full_name=donation.contributor_full_name,
    )


def _get_donation(db: Session, donation_id: int) -> Donation:
    donation = db.get(Donation, donation_id)
    if not donation:
        raise NotFoundError("Income record")
    return donation


def update_donation(db: Session, donation_id: int, payload: DonationUpdate) -> Donation:
    amount = _require_positive(payload.amount, "Amount must be greater than 0")
    donation = _get_donation(db, donation_id)
    fields = payload.model_fields_set

    donation.amount = amount
    if "notes" in fields:
        donation.notes = payload.notes or None
    if fields & {"is_guest", "contributor_id", "contributor_name"}:
        is_guest = payload.is_guest if payload.is_guest is not None else donation.is_guest
        _assign_contributor(
            db,
            donation,
            is_guest=is_guest,
            contributor_id=payload.contributor_id if "contributor_id" in fields else donation.contributor_id,
            contributor_name=payload.contributor_name if "contributor_name" in fields else donation.contributor_name,
        )
    db.commit()
    db.refresh(donation)
    return donation


def delete_donation(db: Session, donation_id: int) -> None:
    donation = _get_donation(db, donation_id)
    db.delete(donation)
    db.commit()


def toggle_donation_paid(db: Session, donation_id: int) -> bool:
    donation = _get_donation(db, donation_id)
    donation.is_paid = not donation.is_paid
    db.commit()
    return donation.is_paid


def mark_donation_paid(db: Session, donation_id: int) -> None:
    donation = _get_donation(db, donation_id)
    donation.is_paid = True
    db.commit()


def list_donations(db: Session, *, limit: int | None = None) -> list[DonationOut]:
    query = (
        db.query(Donation)
        .options(selectinload(Donation.contributor))
        .order_by(Donation.donated_at.desc(), Donation.id.desc())
    )
    if limit:
        query = query.limit(limit)
    return [serialize_donation(item) for item in query.all()]


# -- expenses ---------------------------------------------------------------


def _validate_category(category: str | None) -> str | None:
    if category is None:
        return None
    cleaned = category.strip().lower()
    if not cleaned:
        return None
    if cleaned not in EXPENSE_CATEGORIES:
        raise ValidationError(f"Invalid category. Use one of: {', '.join(EXPENSE_CATEGORIES)}")
    return cleaned


def _serialize_expense(expense: Expense) -> ExpenseOut:
    return ExpenseOut(
        id=expense.id,
        description=expense.description,
        amount=float(expense.amount),
        category=expense.category,
        notes=expense.notes,
        recorded_by=expense.recorded_by,
        full_name=expense.recorder.full_name if expense.recorder else None,
        recorded_at=expense.recorded_at,
        is_paid=expense.is_paid,
    )


def record_expense(db: Session, payload: ExpenseCreate, actor: User) -> Expense:
    description = (payload.description or "").strip()
    if not description or payload.amount is None or payload.amount <= 0:
        raise ValidationError("Description and amount required")
    expense = Expense(
        description=description,
        amount=payload.amount,
        category=_validate_category(payload.category),
        notes=payload.notes or None,
        recorded_by=actor.id,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("expense_recorded", extra={"expense_id": expense.id, "actor_id": actor.id})
    return expense


def _get_expense(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if not expense:
        raise NotFoundError("Expense record")
    return expense


def update_expense(db: Session, expense_id: int, payload: ExpenseUpdate) -> Expense:
    amount = _require_positive(payload.amount, "Amount must be greater than 0")
    description = (payload.description or "").strip()
    if not description:
        raise ValidationError("Description is required")
    category = _validate_category(payload.category)
    if not category:
        raise ValidationError("Category is required")

    expense = _get_expense(db, expense_id)
    expense.amount = amount
    expense.description = description
    expense.category = category
    if "notes" in payload.model_fields_set:
        expense.notes = payload.notes or None
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: int) -> None:
    expense = _get_expense(db, expense_id)
    db.delete(expense)
    db.commit()


def toggle_expense_paid(db: Session, expense_id: int) -> bool:
    expense = _get_expense(db, expense_id)
    expense.is_paid = not expense.is_paid
    db.commit()
    return expense.is_paid


def list_expenses(db: Session, *, limit: int | None = None) -> list[ExpenseOut]:
    query = (
        db.query(Expense)
        .options(selectinload(Expense.recorder))
        .order_by(Expense.recorded_at.desc(), Expense.id.desc())
    )
    if limit:
        query = query.limit(limit)
    return [_serialize_expense(item) for item in query.all()]


# -- reporting --------------------------------------------------------------


def _paid_total(db: Session, amount_column, paid_column, date_column=None, since: datetime | None = None) -> float:
    query = db.query(func.coalesce(func.sum(amount_column), 0)).filter(paid_column.is_(True))
    if since is not None:
        query = query.filter(date_column >= since)
    return float(query.scalar() or 0)


def summarize(db: Session) -> FinanceSummary:
    since = datetime.utcnow() - timedelta(days=SUMMARY_WINDOW_DAYS)
    total_donations = _paid_total(db, Donation.amount, Donation.is_paid)
    total_expenses = _paid_total(db, Expense.amount, Expense.is_paid)
    return FinanceSummary(
        total_donations=total_donations,
        total_expenses=total_expenses,
        remaining_fund=total_donations - total_expenses,
        donations_30_days=_paid_total(db, Donation.amount, Donation.is_paid, Donation.donated_at, since),
        expenses_30_days=_paid_total(db, Expense.amount, Expense.is_paid, Expense.recorded_at, since),
    )


def top_contributors(db: Session) -> list[TopContributor]:
    name_expr = case((Donation.is_guest.is_(True), Donation.contributor_name), else_=User.full_name)
    total_expr = func.sum(Donation.amount)
    rows = (
        db.query(
            name_expr.label("name"),
            total_expr.label("total_donated"),
            func.count(Donation.id).label("donation_count"),
        )
        .outerjoin(User, Donation.contributor_id == User.id)
        .group_by(Donation.contributor_id, Donation.contributor_name, Donation.is_guest, User.full_name)
        .order_by(total_expr.desc())
        .limit(TOP_CONTRIBUTORS_LIMIT)
        .all()
    )
    return [
        TopContributor(name=row.name, total_donated=float(row.total_donated or 0), donation_count=row.donation_count)
        for row in rows
    ]


def search(db: Session, search_type: str | None, term: str | None) -> list[SearchResult]:
    if not search_type or not term:
        raise ValidationError("Type and query parameters required")
    pattern = f"%{term}%"
    if search_type == "player":
        users = (
            db.query(User)
            .filter(User.full_name.ilike(pattern) | User.username.ilike(pattern))
            .order_by(User.full_name.asc())
            .limit(SEARCH_RESULTS_LIMIT)
            .all()
        )
        return [
            SearchResult(id=user.id, full_name=user.full_name, username=user.username, role=user.role)
            for user in users
        ]
    if search_type == "guest":
        names = (
            db.query(Attendance.guest_name)
            .filter(Attendance.is_guest.is_(True), Attendance.guest_name.ilike(pattern))
            .distinct()
            .order_by(Attendance.guest_name.asc())
            .limit(SEARCH_RESULTS_LIMIT)
            .all()
        )
        return [SearchResult(id=name, full_name=name, name=name) for (name,) in names]
    return []
