from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from badsession.core.db import Base


class Donation(Base):
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True)
    contributor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    contributor_name = Column(String(100), nullable=True)
    is_guest = Column(Boolean, nullable=False, default=False)
    amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    donated_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    contributor = relationship("User")

    @property
    def contributor_full_name(self) -> str | None:
        if self.is_guest:
            return self.contributor_name
        return self.contributor.full_name if self.contributor else None


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    recorded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    recorded_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    recorder = relationship("User")


class FinanceSettings(Base):
    __tablename__ = "finance_settings"

    id = Column(Integer, primary_key=True)
    player_monthly_rate = Column(Numeric(12, 2), nullable=False, default=0)
    player_monthly_year = Column(Integer, nullable=True)
    player_monthly_month = Column(Integer, nullable=True)
    guest_daily_rate = Column(Numeric(12, 2), nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
