from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from badsession.core.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="Player")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
