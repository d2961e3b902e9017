# app/models/payout_request.py

import enum
from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Enum,
    Numeric,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class PayoutRequest(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    amount = Column(Numeric(12, 2), nullable=False)
    link = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)

    # pending -> approved | rejected, never back
    status = Column(
        Enum(RequestStatus, name="request_status"),
        default=RequestStatus.pending,
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="requests")

    expense = relationship("Expense", back_populates="request", uselist=False)
