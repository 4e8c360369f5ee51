"""
Shift Management Service

WHY: Track cashier shifts and cash accountability.

DESIGN PRINCIPLES:
- One open shift per user at a time
- Shifts are immutable once closed (no reopening)
- Closing never reconciles cash; variance is informational only
"""

from __future__ import annotations

from decimal import Decimal

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, ForbiddenError, InvalidStateError, NotFoundError
from ..extensions import db
from ..models import Shift, Transaction
from ..models.shifts import SHIFT_OPEN, SHIFT_CLOSED
from ..time_utils import utcnow
from ..validation import parse_money
from .unit_of_work import lock_for_update, unit_of_work


class ShiftConflictError(ConflictError):
    """The user already has an open shift."""
    status_code = 400


def open_shift(user_id: str, start_cash) -> Shift:
    """
    Open a new shift for a cashier.

    Args:
        user_id: Cashier opening the shift
        start_cash: Starting cash in drawer

    Raises:
        ValidationError: start_cash is not a non-negative amount
        ShiftConflictError: user already has an open shift
    """
    start_cash = parse_money(start_cash, "startCash")

    existing_open = get_active_shift(user_id)
    if existing_open:
        raise ShiftConflictError(
            "You already have an open shift",
            details={"shift_id": existing_open.id},
        )

    shift = Shift(
        user_id=user_id,
        status=SHIFT_OPEN,
        start_cash=start_cash,
        total_sales=Decimal("0.00"),
        transaction_count=0,
        start_time=utcnow(),
    )

    try:
        with unit_of_work() as session:
            session.add(shift)
    except IntegrityError:
        # A concurrent request opened a shift after the check above
        raise ShiftConflictError("You already have an open shift")

    current_app.logger.info("Shift %s opened by user %s", shift.id, user_id)
    return shift


def get_shift(shift_id: str) -> Shift | None:
    return db.session.get(Shift, shift_id)


def get_active_shift(user_id: str) -> Shift | None:
    """The user's open shift, if any. Absence is not an error."""
    return db.session.query(Shift).filter_by(
        user_id=user_id,
        status=SHIFT_OPEN
    ).first()


def list_user_shifts(user_id: str) -> list[Shift]:
    """All shifts of a user, newest first."""
    return db.session.query(Shift).filter_by(
        user_id=user_id
    ).order_by(Shift.start_time.desc()).all()


def close_shift(shift_id: str, end_cash, requesting_user_id: str) -> Shift:
    """
    Close a shift.

    IMMUTABLE: Once closed, the shift cannot be reopened or modified.

    Raises:
        ValidationError: end_cash is not a non-negative amount
        NotFoundError: shift does not exist
        ForbiddenError: shift belongs to another user
        InvalidStateError: shift is not open
    """
    end_cash = parse_money(end_cash, "endCash")

    with unit_of_work() as session:
        shift = lock_for_update(session.query(Shift).filter_by(id=shift_id)).first()

        if not shift:
            raise NotFoundError("Shift not found")

        if shift.user_id != requesting_user_id:
            raise ForbiddenError("You can only close your own shift")

        if not shift.is_open:
            raise InvalidStateError("Shift is already closed")

        shift.status = SHIFT_CLOSED
        shift.end_time = utcnow()
        shift.end_cash = end_cash

    current_app.logger.info(
        "Shift %s closed by user %s (variance %s)",
        shift.id, requesting_user_id, cash_variance(shift),
    )
    return shift


def expected_cash(shift: Shift) -> Decimal:
    """Opening float plus everything sold during the shift."""
    return Decimal(shift.start_cash) + Decimal(shift.total_sales or 0)


def cash_variance(shift: Shift) -> Decimal | None:
    """Counted minus expected cash; None while the shift is open."""
    if shift.end_cash is None:
        return None
    return Decimal(shift.end_cash) - expected_cash(shift)


def shift_summary(shift_id: str) -> dict:
    """
    Shift report: shift details, expected cash and variance,
    and a per-payment-method breakdown of its transactions.
    """
    shift = get_shift(shift_id)
    if not shift:
        raise NotFoundError("Shift not found")

    by_method: dict[str, dict] = {}
    transactions = db.session.query(Transaction).filter_by(shift_id=shift_id).all()
    for tx in transactions:
        bucket = by_method.setdefault(tx.payment_method, {"count": 0, "total": Decimal("0.00")})
        bucket["count"] += 1
        bucket["total"] += Decimal(tx.total)

    variance = cash_variance(shift)
    return {
        "shift": shift.to_dict(),
        "expectedCash": f"{expected_cash(shift):.2f}",
        "variance": f"{variance:.2f}" if variance is not None else None,
        "isClosed": shift.status == SHIFT_CLOSED,
        "paymentMethods": {
            method: {"count": v["count"], "total": f"{v['total']:.2f}"}
            for method, v in sorted(by_method.items())
        },
    }
