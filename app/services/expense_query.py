# app/services/expense_query.py
"""
Paginated, filtered and sorted reads over the expense ledger.

Every client value reaches the database as a bound parameter. The sort
column is looked up in SORT_COLUMNS; the raw `sortBy` string never reaches
the SQL text.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from app.models.expense import Expense
from app.models.payout_request import PayoutRequest
from app.models.team import Team
from app.models.user import User
from app.services.visibility import AllScope, Scope, owner_clause

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_OFFSET = 0

SORT_COLUMNS = {
    "created_at": Expense.created_at,
    "amount": Expense.amount,
    "username": User.username,
    "team_name": Team.name,
}
DEFAULT_SORT = "created_at"


@dataclass
class ExpenseFilters:
    webmaster: Optional[int] = None
    amount: Optional[Decimal] = None
    team: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class Pagination:
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    @classmethod
    def from_raw(cls, limit: Any = None, offset: Any = None) -> "Pagination":
        return cls(
            limit=min(_non_negative_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
            offset=_non_negative_int(offset, DEFAULT_OFFSET),
        )


@dataclass
class Sort:
    key: str = DEFAULT_SORT
    descending: bool = False

    @classmethod
    def from_raw(cls, sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> "Sort":
        key = sort_by if sort_by in SORT_COLUMNS else DEFAULT_SORT
        descending = (sort_order or "").strip().lower() == "desc"
        return cls(key=key, descending=descending)


def _non_negative_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 0 else default


def build_conditions(scope: Scope, filters: ExpenseFilters) -> list:
    conditions = []

    scoped = owner_clause(scope, Expense.user_id)
    if scoped is not None:
        conditions.append(scoped)

    if filters.webmaster is not None:
        conditions.append(Expense.user_id == filters.webmaster)
    if filters.amount is not None:
        conditions.append(Expense.amount == filters.amount)
    # team filter is an admin tool; the other scopes are already narrower
    if filters.team is not None and isinstance(scope, AllScope):
        conditions.append(User.team_id == filters.team)
    if filters.start_date is not None:
        conditions.append(Expense.created_at >= datetime.combine(filters.start_date, time.min))
    if filters.end_date is not None:
        if filters.end_date < date.max:
            end_exclusive = datetime.combine(filters.end_date + timedelta(days=1), time.min)
            conditions.append(Expense.created_at < end_exclusive)
        else:
            conditions.append(Expense.created_at <= datetime.combine(date.max, time.max))

    return conditions


def _joined(statement):
    return (
        statement.select_from(Expense)
        .join(PayoutRequest, PayoutRequest.id == Expense.request_id)
        .join(User, User.id == Expense.user_id)
        .outerjoin(Team, Team.id == User.team_id)
    )


def query_expenses(
    db: Session,
    scope: Scope,
    filters: ExpenseFilters,
    pagination: Pagination,
    sort: Sort,
) -> tuple[list[dict], int]:
    conditions = build_conditions(scope, filters)
    where = and_(*conditions) if conditions else None

    include_team = isinstance(scope, AllScope)

    columns = [
        Expense.id,
        Expense.request_id,
        Expense.user_id,
        User.username,
        Expense.amount,
        PayoutRequest.link,
        PayoutRequest.quantity,
        Expense.created_at,
    ]
    if include_team:
        columns += [User.team_id, Team.name.label("team_name")]

    sort_column = SORT_COLUMNS[sort.key]
    order = sort_column.desc() if sort.descending else sort_column.asc()
    tie_break = Expense.id.desc() if sort.descending else Expense.id.asc()

    page = _joined(select(*columns))
    count = _joined(select(func.count(Expense.id)))
    if where is not None:
        page = page.where(where)
        count = count.where(where)

    page = page.order_by(order, tie_break).limit(pagination.limit).offset(pagination.offset)

    rows = [dict(row._mapping) for row in db.execute(page)]
    total = db.execute(count).scalar_one()
    return rows, total
