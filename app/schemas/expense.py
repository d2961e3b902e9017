# app/schemas/expense.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ExpenseOut(BaseModel):
    id: int
    user_id: int
    request_id: int
    amount: float
    created_at: datetime

    class Config:
        from_attributes = True


class ApprovalOut(BaseModel):
    message: str
    expense: ExpenseOut


class ExpenseRow(BaseModel):
    id: int
    request_id: int
    user_id: int
    username: str
    amount: float
    link: str
    quantity: int
    created_at: datetime
    team_id: Optional[int] = None
    team_name: Optional[str] = None


class ExpensePage(BaseModel):
    expenses: List[ExpenseRow]
    totalItems: int
