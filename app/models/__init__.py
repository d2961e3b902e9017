# Import every model so Base.metadata knows all tables.
from app.models.team import Team
from app.models.user import User
from app.models.payout_request import PayoutRequest, RequestStatus
from app.models.expense import Expense

__all__ = ["Team", "User", "PayoutRequest", "RequestStatus", "Expense"]
