from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import Forbidden, InternalError, InvalidState, NotFound
from app.models import Expense, PayoutRequest, RequestStatus
from app.services import request_service

from factories import add_request, identity_of


def _status(db, request_id):
    db.expire_all()
    return db.get(PayoutRequest, request_id).status


def _expenses_for(db, request_id):
    return db.query(Expense).filter(Expense.request_id == request_id).all()


def test_create_request_starts_pending(db, org) -> None:
    request = request_service.create_request(
        db, identity_of(org.alice), amount=Decimal("50"), link="x", quantity=2
    )

    assert request.status == RequestStatus.pending
    assert request.user_id == org.alice.id
    assert request.created_at == request.updated_at
    assert request.amount == Decimal("50")


@pytest.mark.parametrize("who", ["admin", "lead7"])
def test_create_request_is_only_for_users(db, org, who) -> None:
    with pytest.raises(Forbidden):
        request_service.create_request(
            db, identity_of(getattr(org, who)), amount=Decimal("1"), link="x", quantity=1
        )


def test_list_pending_for_team_skips_decided_and_foreign_requests(db, org) -> None:
    pending = add_request(db, org.alice)
    add_request(db, org.bob, status=RequestStatus.approved)
    add_request(db, org.bob, status=RequestStatus.rejected)
    add_request(db, org.carol)

    result = request_service.list_pending_for_team(db, 7)

    assert [r.id for r in result] == [pending.id]


def test_approve_materializes_expense_with_request_amount(db, org) -> None:
    request = add_request(db, org.alice, amount="50.00")

    expense = request_service.approve(db, request.id, identity_of(org.lead7))

    assert expense.request_id == request.id
    assert expense.user_id == org.alice.id
    assert expense.amount == Decimal("50.00")
    assert _status(db, request.id) == RequestStatus.approved


def test_approve_twice_is_invalid_state_and_keeps_single_expense(db, org) -> None:
    request = add_request(db, org.alice)
    request_service.approve(db, request.id, identity_of(org.lead7))

    with pytest.raises(InvalidState):
        request_service.approve(db, request.id, identity_of(org.lead7))

    assert len(_expenses_for(db, request.id)) == 1


def test_reject_after_approve_is_invalid_state(db, org) -> None:
    request = add_request(db, org.alice)
    request_service.approve(db, request.id, identity_of(org.lead7))

    with pytest.raises(InvalidState):
        request_service.reject(db, request.id, identity_of(org.lead7))

    assert _status(db, request.id) == RequestStatus.approved


def test_reject_has_no_ledger_side_effect(db, org) -> None:
    request = add_request(db, org.alice)

    request_service.reject(db, request.id, identity_of(org.lead7))

    assert _status(db, request.id) == RequestStatus.rejected
    assert _expenses_for(db, request.id) == []

    with pytest.raises(InvalidState):
        request_service.approve(db, request.id, identity_of(org.lead7))
    assert _expenses_for(db, request.id) == []


@pytest.mark.parametrize("decide", [request_service.approve, request_service.reject])
def test_cross_team_decision_looks_like_missing_request(db, org, decide) -> None:
    request = add_request(db, org.carol)

    with pytest.raises(NotFound):
        decide(db, request.id, identity_of(org.lead7))

    assert _status(db, request.id) == RequestStatus.pending
    assert _expenses_for(db, request.id) == []


@pytest.mark.parametrize("decide", [request_service.approve, request_service.reject])
def test_unknown_request_is_not_found(db, org, decide) -> None:
    with pytest.raises(NotFound):
        decide(db, 12345, identity_of(org.lead7))


@pytest.mark.parametrize("who", ["admin", "alice"])
def test_only_team_leaders_decide(db, org, who) -> None:
    request = add_request(db, org.alice)

    with pytest.raises(Forbidden):
        request_service.approve(db, request.id, identity_of(getattr(org, who)))

    assert _status(db, request.id) == RequestStatus.pending


def test_stale_second_approval_loses_the_race(session_factory, db, org) -> None:
    """
    Simulates two racing approvals: both sessions read the request as pending,
    then approve one after the other. The conditional UPDATE lets only the
    first through.
    """
    request = add_request(db, org.alice)
    leader = identity_of(org.lead7)

    first = session_factory()
    second = session_factory()
    try:
        # both sessions observe the request as pending before either decides
        assert first.get(PayoutRequest, request.id).status == RequestStatus.pending
        assert second.get(PayoutRequest, request.id).status == RequestStatus.pending

        request_service.approve(first, request.id, leader)
        with pytest.raises(InvalidState):
            request_service.approve(second, request.id, leader)
    finally:
        first.close()
        second.close()

    assert len(_expenses_for(db, request.id)) == 1


def test_ledger_failure_rolls_back_approval(db, org, monkeypatch: pytest.MonkeyPatch) -> None:
    request = add_request(db, org.alice)

    def failing_materialize(*args, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr("app.services.request_service.materialize", failing_materialize)

    with pytest.raises(InternalError):
        request_service.approve(db, request.id, identity_of(org.lead7))

    assert _status(db, request.id) == RequestStatus.pending
    assert _expenses_for(db, request.id) == []


@pytest.mark.parametrize("decide", [request_service.approve, request_service.reject])
@pytest.mark.parametrize("request_id", [0, -1, 2**31, 99999999999999999999])
def test_ids_outside_integer_column_are_not_found(db, org, decide, request_id) -> None:
    with pytest.raises(NotFound):
        decide(db, request_id, identity_of(org.lead7))
