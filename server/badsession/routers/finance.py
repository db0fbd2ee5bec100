from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user, require_roles
from badsession.config import ROLE_ADMIN
from badsession.core.db import get_db
from badsession.models.user import User
from badsession.schemas.common import MessageResponse
from badsession.schemas.finance import (
    ApplyPlayerIncomeRequest,
    ApplyPlayerIncomeResponse,
    DonationCreate,
    DonationCreatedResponse,
    DonationOut,
    DonationUpdate,
    ExpenseCreate,
    ExpenseCreatedResponse,
    ExpenseOut,
    ExpenseUpdate,
    FinanceSettingsOut,
    FinanceSettingsUpdate,
    FinanceSummary,
    IncomeCreatedResponse,
    SearchResult,
    SettingsUpdateResponse,
    TogglePaidResponse,
    TopContributor,
)
from badsession.services import finance as finance_service

router = APIRouter(prefix="/finance", tags=["finance"])

admin_only = require_roles(ROLE_ADMIN)


def _paid_message(is_paid: bool) -> str:
    return f"Marked as {'paid' if is_paid else 'unpaid'}"


# Income and donations share one ledger; both path families are served.


@router.get("/donations", response_model=list[DonationOut])
@router.get("/income", response_model=list[DonationOut])
def list_donations(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[DonationOut]:
    return finance_service.list_donations(db)


@router.post("/donations", response_model=DonationCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_donation(
    payload: DonationCreate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> DonationCreatedResponse:
    donation = finance_service.record_donation(db, payload)
    return DonationCreatedResponse(message="Donation recorded successfully", donation_id=donation.id)


@router.post("/income", response_model=IncomeCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_income(
    payload: DonationCreate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> IncomeCreatedResponse:
    donation = finance_service.record_donation(db, payload)
    return IncomeCreatedResponse(message="Income recorded successfully", income_id=donation.id)


@router.put("/donations/{donation_id:int}", response_model=MessageResponse)
@router.put("/income/{donation_id:int}", response_model=MessageResponse)
def update_donation(
    donation_id: int,
    payload: DonationUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> MessageResponse:
    finance_service.update_donation(db, donation_id, payload)
    return MessageResponse(message="Income record updated successfully")


@router.delete("/donations/{donation_id:int}", response_model=MessageResponse)
@router.delete("/income/{donation_id:int}", response_model=MessageResponse)
def delete_donation(
    donation_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> MessageResponse:
    finance_service.delete_donation(db, donation_id)
    return MessageResponse(message="Income record deleted successfully")


@router.post("/donations/{donation_id:int}/toggle-paid", response_model=TogglePaidResponse)
@router.post("/income/{donation_id:int}/toggle-paid", response_model=TogglePaidResponse)
def toggle_donation_paid(
    donation_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> TogglePaidResponse:
    is_paid = finance_service.toggle_donation_paid(db, donation_id)
    return TogglePaidResponse(message=_paid_message(is_paid), is_paid=is_paid)


@router.post("/income/{donation_id:int}/paid", response_model=MessageResponse)
def mark_income_paid(
    donation_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> MessageResponse:
    finance_service.mark_donation_paid(db, donation_id)
    return MessageResponse(message="Income marked as paid")


@router.get("/donations/top/contributors", response_model=list[TopContributor])
def top_contributors(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[TopContributor]:
    return finance_service.top_contributors(db)


@router.get("/expenses", response_model=list[ExpenseOut])
def list_expenses(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[ExpenseOut]:
    return finance_service.list_expenses(db)


@router.post("/expenses", response_model=ExpenseCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
) -> ExpenseCreatedResponse:
    expense = finance_service.record_expense(db, payload, current_user)
    return ExpenseCreatedResponse(message="Expense recorded successfully", expense_id=expense.id)


@router.put("/expenses/{expense_id:int}", response_model=MessageResponse)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> MessageResponse:
    finance_service.update_expense(db, expense_id, payload)
    return MessageResponse(message="Expense record updated successfully")


@router.delete("/expenses/{expense_id:int}", response_model=MessageResponse)
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> MessageResponse:
    finance_service.delete_expense(db, expense_id)
    return MessageResponse(message="Expense record deleted successfully")


@router.post("/expenses/{expense_id:int}/toggle-paid", response_model=TogglePaidResponse)
def toggle_expense_paid(
    expense_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> TogglePaidResponse:
    is_paid = finance_service.toggle_expense_paid(db, expense_id)
    return TogglePaidResponse(message=_paid_message(is_paid), is_paid=is_paid)


@router.get("/summary", response_model=FinanceSummary)
def summary(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> FinanceSummary:
    return finance_service.summarize(db)


@router.get("/search", response_model=list[SearchResult])
def search(
    type: str | None = Query(default=None),
    query: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[SearchResult]:
    return finance_service.search(db, type, query)


@router.get("/settings", response_model=FinanceSettingsOut)
def read_settings(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> FinanceSettingsOut:
    return finance_service.read_settings(db)


@router.post("/settings", response_model=SettingsUpdateResponse)
def update_settings(
    payload: FinanceSettingsUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> SettingsUpdateResponse:
    created_count = finance_service.update_settings(db, payload)
    return SettingsUpdateResponse(message="Finance settings updated successfully", created_count=created_count)


@router.post("/apply-player-income", response_model=ApplyPlayerIncomeResponse)
def apply_player_income(
    payload: ApplyPlayerIncomeRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
) -> ApplyPlayerIncomeResponse:
    created_count, skipped = finance_service.apply_player_income(
        db, payload.player_ids, payload.amount, payload.year, payload.month
    )
    return ApplyPlayerIncomeResponse(
        message=f"Applied monthly income to {created_count} player(s)",
        created_count=created_count,
        skipped_player_ids=skipped,
    )
