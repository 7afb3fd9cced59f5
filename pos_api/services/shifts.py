# =========================================================
# SHIFT LEDGER
#
# open -> closed (terminal). One open shift per user, backed by
# the uq_shifts_user_open partial index. Summaries are always
# recomputed from the transactions table.
# =========================================================

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    POSError,
)
from pos_api.domain.money import ZERO, to_money
from pos_api.models.shifts import Shift
from pos_api.models.transactions import Transaction
from pos_api.models.users import User

logger = logging.getLogger(__name__)


def get_shift(db: Session, shift_id: str) -> Shift | None:
    return db.get(Shift, shift_id)


def get_current_shift(db: Session, user_id: str) -> Shift | None:
    return (
        db.query(Shift)
        .filter(Shift.user_id == user_id, Shift.status == "open")
        .first()
    )


def open_shift(db: Session, user_id: str, starting_cash: Decimal) -> Shift:
    if starting_cash < 0:
        raise BusinessRuleError("Starting cash cannot be negative")

    if db.get(User, user_id) is None:
        raise NotFoundError(f"User {user_id} not found")

    if get_current_shift(db, user_id) is not None:
        raise ConflictError("User already has an open shift")

    shift = Shift(user_id=user_id, starting_cash=to_money(starting_cash), status="open")

    try:
        db.add(shift)
        db.commit()
        db.refresh(shift)

    except IntegrityError as exc:
        # Lost the race against a concurrent open for the same user
        db.rollback()
        raise ConflictError("User already has an open shift") from exc

    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Unable to open shift") from exc

    logger.info(f"Opened shift {shift.id} user={user_id} starting_cash={shift.starting_cash}")
    return shift


def close_shift(db: Session, shift_id: str, ending_cash: Decimal) -> Shift:
    if ending_cash < 0:
        raise BusinessRuleError("Ending cash cannot be negative")

    try:
        shift = (
            db.query(Shift)
            .filter(Shift.id == shift_id)
            .with_for_update()
            .first()
        )

        if shift is None:
            raise NotFoundError(f"Shift {shift_id} not found")

        if shift.status != "open":
            raise BusinessRuleError("Shift is already closed")

        shift.end_time = datetime.now(timezone.utc)
        shift.ending_cash = to_money(ending_cash)
        shift.status = "closed"

        db.commit()
        db.refresh(shift)

    except POSError:
        db.rollback()
        raise

    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Unable to close shift") from exc

    logger.info(f"Closed shift {shift.id} ending_cash={shift.ending_cash}")
    return shift


def get_shift_summary(db: Session, shift_id: str) -> dict | None:
    shift = get_shift(db, shift_id)

    if shift is None:
        return None

    rows = (
        db.query(Transaction.payment_method, Transaction.total)
        .filter(Transaction.shift_id == shift_id)
        .all()
    )

    totals = {"cash": ZERO, "card": ZERO}
    for method, total in rows:
        totals[method] = totals.get(method, ZERO) + Decimal(total)

    total_sales = sum(totals.values(), ZERO)

    return {
        "shift": shift,
        "total_sales": to_money(total_sales),
        "total_transactions": len(rows),
        "cash_sales": to_money(totals["cash"]),
        "card_sales": to_money(totals["card"]),
        "expected_cash": to_money(Decimal(shift.starting_cash) + totals["cash"]),
    }


def cash_discrepancy(summary: dict, counted_cash: Decimal) -> Decimal:
    """Counted drawer minus expected drawer; negative means the drawer is short."""
    return to_money(to_money(counted_cash) - summary["expected_cash"])
