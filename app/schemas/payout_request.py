# app/schemas/payout_request.py

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from app.models.payout_request import RequestStatus


class PayoutRequestCreate(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    link: str
    quantity: int = Field(ge=1)

    @field_validator("link")
    @classmethod
    def validate_link(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("link is required")
        return value


class PayoutRequestOut(BaseModel):
    id: int
    user_id: int
    amount: float
    link: str
    quantity: int
    status: RequestStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DecisionOut(BaseModel):
    message: str
