# app/api/expenses.py

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.constants import MAX_DB_ID
from app.core.permissions import Identity, get_identity
from app.schemas.expense import ExpensePage
from app.services.expense_query import ExpenseFilters, Pagination, Sort, query_expenses
from app.services.visibility import resolve_scope

router = APIRouter(tags=["Expenses"])


@router.get("/expenses", response_model=ExpensePage)
def list_expenses(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    webmaster: Optional[int] = Query(None, ge=1, le=MAX_DB_ID),
    amount: Optional[Decimal] = None,
    team: Optional[int] = Query(None, ge=1, le=MAX_DB_ID),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="startDate must not be after endDate")

    scope = resolve_scope(identity)
    rows, total = query_expenses(
        db,
        scope,
        ExpenseFilters(
            webmaster=webmaster,
            amount=amount,
            team=team,
            start_date=start_date,
            end_date=end_date,
        ),
        Pagination.from_raw(limit, offset),
        Sort.from_raw(sort_by, sort_order),
    )
    return {"expenses": rows, "totalItems": total}
