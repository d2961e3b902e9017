# app/models/expense.py

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    Numeric,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class Expense(Base):
    """Ledger row materialized from an approved request. Append-only."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # at most one expense per request
    request_id = Column(
        Integer,
        ForeignKey("requests.id"),
        nullable=False,
        unique=True,
    )

    amount = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    request = relationship("PayoutRequest", back_populates="expense")
    user = relationship("User")
