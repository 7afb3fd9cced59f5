# =========================================================
# RETURNS
#
# prepare_return  -> locks the original sale row, runs the pure
#                    validation and prices the refund
# commit_return   -> ONE database transaction: return header,
#                    return items, stock increments and the
#                    completed -> refunded status flip
# =========================================================

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from pos_api.core.exceptions import (
    BusinessRuleError,
    NotFoundError,
    PersistenceError,
    POSError,
    ValidationFailed,
)
from pos_api.domain.money import to_money
from pos_api.domain.returns import (
    SoldLine,
    calculate_refund_amount,
    returnable_lines,
    validate_return,
)
from pos_api.models.returns import Return, ReturnItem
from pos_api.models.transactions import Transaction
from pos_api.schemas.returns import ReturnCreate, ReturnItemCreate
from pos_api.services.stock import adjust_stock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricedReturnLine:
    product_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class ReturnDraft:
    original_transaction_id: str
    user_id: str
    reason: str | None
    refund_method: str
    refund_amount: Decimal
    lines: tuple[PricedReturnLine, ...]
    # True when this return takes every sold unit back
    completes_refund: bool


def get_returns(db: Session) -> list[Return]:
    return (
        db.query(Return)
        .options(
            selectinload(Return.items),
            joinedload(Return.original_transaction),
        )
        .order_by(Return.created_at.desc())
        .all()
    )


def _already_returned(db: Session, transaction_id: str) -> list[ReturnItem]:
    return (
        db.query(ReturnItem)
        .join(Return, ReturnItem.return_id == Return.id)
        .filter(Return.original_transaction_id == transaction_id)
        .all()
    )


def _locked_original(db: Session, transaction_id: str):
    # Row lock is held until commit_return commits or rolls back
    return (
        db.query(Transaction)
        .options(selectinload(Transaction.items))
        .filter(Transaction.id == transaction_id)
        .with_for_update()
    )


def prepare_return(
    db: Session,
    return_data: ReturnCreate,
    items: list[ReturnItemCreate],
) -> ReturnDraft:
    original = _locked_original(db, return_data.original_transaction_id).first()

    if original is None:
        raise NotFoundError(f"Transaction {return_data.original_transaction_id} not found")

    if original.status != "completed":
        raise BusinessRuleError(f"Transaction {original.receipt_number} is {original.status} and cannot be returned")

    remaining = returnable_lines(original.items, _already_returned(db, original.id))

    validation = validate_return(remaining, items)
    if not validation.success:
        raise BusinessRuleError(validation.error)

    refund_amount = calculate_refund_amount(remaining, items)

    if return_data.refund_amount is not None and to_money(return_data.refund_amount) != refund_amount:
        raise ValidationFailed(
            f"refundAmount {to_money(return_data.refund_amount)} does not match "
            f"the original sale price total {refund_amount}"
        )

    prices: dict[str, SoldLine] = {line.product_id: line for line in remaining}
    requested: dict[str, int] = {}
    for item in items:
        sold = prices[item.product_id]
        if item.unit_price is not None and to_money(item.unit_price) != sold.unit_price:
            raise ValidationFailed(
                f"unitPrice for product {item.product_id} must be the original sale price {sold.unit_price}"
            )
        requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity

    lines = tuple(
        PricedReturnLine(
            product_id=product_id,
            quantity=quantity,
            unit_price=prices[product_id].unit_price,
            total_price=to_money(prices[product_id].unit_price * quantity),
        )
        for product_id, quantity in requested.items()
    )

    completes_refund = all(
        requested.get(line.product_id, 0) >= line.quantity for line in remaining
    )

    return ReturnDraft(
        original_transaction_id=original.id,
        user_id=return_data.user_id,
        reason=return_data.reason,
        refund_method=return_data.refund_method,
        refund_amount=refund_amount,
        lines=lines,
        completes_refund=completes_refund,
    )


def commit_return(db: Session, draft: ReturnDraft) -> Return:
    try:
        record = Return(
            original_transaction_id=draft.original_transaction_id,
            user_id=draft.user_id,
            reason=draft.reason,
            refund_amount=draft.refund_amount,
            refund_method=draft.refund_method,
        )
        record.items = [
            ReturnItem(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
            )
            for line in draft.lines
        ]
        db.add(record)
        db.flush()

        for line in draft.lines:
            adjust_stock(db, line.product_id, line.quantity)

        if draft.completes_refund:
            original = db.get(Transaction, draft.original_transaction_id)
            original.status = "refunded"

        db.commit()

    except POSError:
        db.rollback()
        raise

    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Return for transaction {draft.original_transaction_id} rolled back: {exc}")
        raise PersistenceError("Unable to complete return") from exc

    record_id = record.id
    logger.info(
        f"Committed return {record_id} for transaction {draft.original_transaction_id} "
        f"refund={draft.refund_amount} method={draft.refund_method} full={draft.completes_refund}"
    )

    db.expire_all()
    return (
        db.query(Return)
        .options(selectinload(Return.items), joinedload(Return.original_transaction))
        .filter(Return.id == record_id)
        .first()
    )
