from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class DonationCreate(BaseModel):
    contributor_id: int | None = None
    contributor_name: str | None = Field(default=None, max_length=100)
    is_guest: bool = False
    amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    notes: str | None = None


class DonationUpdate(BaseModel):
    amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    notes: str | None = None
    contributor_id: int | None = None
    contributor_name: str | None = Field(default=None, max_length=100)
    is_guest: bool | None = None


class DonationOut(BaseModel):
    id: int
    contributor_id: int | None = None
    contributor_name: str | None = None
    is_guest: bool
    amount: float
    notes: str | None = None
    is_paid: bool
    donated_at: datetime
    contributor_full_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class DonationCreatedResponse(BaseModel):
    message: str
    donation_id: int


class IncomeCreatedResponse(BaseModel):
    message: str
    income_id: int


class ExpenseCreate(BaseModel):
    description: str | None = Field(default=None, max_length=255)
    amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    category: str | None = None
    notes: str | None = None


class ExpenseUpdate(BaseModel):
    amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    description: str | None = Field(default=None, max_length=255)
    category: str | None = None
    notes: str | None = None


class ExpenseOut(BaseModel):
    id: int
    description: str
    amount: float
    category: str | None = None
    notes: str | None = None
    recorded_by: int | None = None
    full_name: str | None = None
    recorded_at: datetime
    is_paid: bool


class ExpenseCreatedResponse(BaseModel):
    message: str
    expense_id: int


class TogglePaidResponse(BaseModel):
    message: str
    is_paid: bool


class FinanceSummary(BaseModel):
    total_donations: float
    total_expenses: float
    remaining_fund: float
    donations_30_days: float
    expenses_30_days: float


class TopContributor(BaseModel):
    name: str | None = None
    total_donated: float
    donation_count: int


class SearchResult(BaseModel):
    id: int | str
    full_name: str
    name: str | None = None
    username: str | None = None
    role: str | None = None


class FinanceSettingsOut(BaseModel):
    id: int = 1
    player_monthly_rate: float = 0
    player_monthly_year: int | None = None
    player_monthly_month: int | None = None
    guest_daily_rate: float = 0


class FinanceSettingsUpdate(BaseModel):
    player_monthly_rate: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    player_monthly_year: int | None = Field(default=None, ge=2000, le=2100)
    player_monthly_month: int | None = Field(default=None, ge=1, le=12)
    guest_daily_rate: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class SettingsUpdateResponse(BaseModel):
    message: str
    created_count: int = 0


class ApplyPlayerIncomeRequest(BaseModel):
    player_ids: list[int] = Field(default_factory=list)
    amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    year: int | None = Field(default=None, ge=2000, le=2100)
    month: int | None = Field(default=None, ge=1, le=12)


class ApplyPlayerIncomeResponse(BaseModel):
    message: str
    created_count: int
    skipped_player_ids: list[int] = Field(default_factory=list)
