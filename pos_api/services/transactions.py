# =========================================================
# TRANSACTION SETTLEMENT
#
# commit_transaction writes, as ONE database transaction:
# 1. the transaction header
# 2. its items
# 3. the stock decrement for every item (floored at zero)
# 4. the customer's loyalty accrual
# Any failure rolls back all of it.
# =========================================================

import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import update

from pos_api.core.config import settings
from pos_api.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    POSError,
    ValidationFailed,
)
from pos_api.domain.money import ZERO, to_money
from pos_api.domain.payment import PaymentRequest, validate_payment
from pos_api.models.customers import Customer
from pos_api.models.products import Product
from pos_api.models.shifts import Shift
from pos_api.models.transaction_items import TransactionItem
from pos_api.models.transactions import Transaction
from pos_api.schemas.transaction import TransactionCreate, TransactionItemCreate
from pos_api.services.stock import adjust_stock

logger = logging.getLogger(__name__)


# =========================================================
# READS
# =========================================================
def _with_items(query):
    return query.options(
        selectinload(Transaction.items).joinedload(TransactionItem.product),
        joinedload(Transaction.customer),
    )


def get_transactions(
    db: Session,
    shift_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Transaction]:
    query = _with_items(db.query(Transaction))

    if shift_id:
        query = query.filter(Transaction.shift_id == shift_id)

    if start_date:
        query = query.filter(Transaction.created_at >= datetime.combine(start_date, datetime.min.time()))

    if end_date:
        query = query.filter(Transaction.created_at <= datetime.combine(end_date, datetime.max.time()))

    return query.order_by(Transaction.created_at.desc()).all()


def get_transaction(db: Session, transaction_id: str) -> Transaction | None:
    return _with_items(db.query(Transaction)).filter(Transaction.id == transaction_id).first()


def get_transaction_by_receipt(db: Session, receipt_number: str) -> Transaction | None:
    return (
        _with_items(db.query(Transaction))
        .filter(Transaction.receipt_number == receipt_number)
        .first()
    )


# =========================================================
# WRITE-TIME MONEY CHECKS
# =========================================================
def verify_amounts(
    transaction_data: TransactionCreate,
    items: list[TransactionItemCreate],
) -> tuple[Decimal | None, Decimal | None]:
    """Reject drafts whose figures do not balance.

    Returns the (received, change) pair to store: both None for card,
    both filled in for cash.
    """
    if not items:
        raise BusinessRuleError("A transaction must contain at least one item")

    items_total = ZERO
    for index, item in enumerate(items):
        expected = to_money(item.unit_price * item.quantity)
        if to_money(item.total_price) != expected:
            raise ValidationFailed(
                f"items[{index}].totalPrice must equal unitPrice x quantity ({expected})"
            )
        items_total += expected

    subtotal = to_money(transaction_data.subtotal)
    if items_total != subtotal:
        raise ValidationFailed(
            f"subtotal {subtotal} does not match the sum of item totals {items_total}"
        )

    tax = to_money(transaction_data.tax)
    expected_tax = to_money(subtotal * settings.TAX_RATE)
    if tax != expected_tax:
        raise ValidationFailed(
            f"tax {tax} does not match subtotal x TAX_RATE {settings.TAX_RATE} ({expected_tax})"
        )

    total = to_money(transaction_data.total)
    if total != subtotal + tax:
        raise ValidationFailed("total must equal subtotal + tax")

    if transaction_data.payment_method == "card":
        return None, None

    result = validate_payment(
        PaymentRequest(method="cash", received_amount=transaction_data.received_amount),
        total,
    )
    if not result.success:
        raise BusinessRuleError(result.error)

    if (
        transaction_data.change_amount is not None
        and to_money(transaction_data.change_amount) != result.change_amount
    ):
        raise ValidationFailed(f"changeAmount must be {result.change_amount}")

    received = total if transaction_data.received_amount is None else to_money(transaction_data.received_amount)
    return received, result.change_amount


def loyalty_points_for(total: Decimal) -> int:
    if settings.LOYALTY_SPEND_PER_POINT <= 0:
        return 0
    return int(to_money(total) // settings.LOYALTY_SPEND_PER_POINT)


# =========================================================
# ATOMIC COMMIT
# =========================================================
def _check_references(db: Session, transaction_data: TransactionCreate, product_ids: set[str]) -> None:
    shift = db.get(Shift, transaction_data.shift_id)
    if shift is None:
        raise NotFoundError(f"Shift {transaction_data.shift_id} not found")
    if shift.status != "open":
        raise BusinessRuleError("Transactions can only be recorded on an open shift")

    if transaction_data.customer_id and db.get(Customer, transaction_data.customer_id) is None:
        raise NotFoundError(f"Customer {transaction_data.customer_id} not found")

    found = {
        row.id
        for row in db.query(Product.id).filter(Product.id.in_(product_ids)).all()
    }
    missing = sorted(product_ids - found)
    if missing:
        raise NotFoundError(f"Product {missing[0]} not found")

    receipt_taken = (
        db.query(Transaction.id)
        .filter(Transaction.receipt_number == transaction_data.receipt_number)
        .first()
    )
    if receipt_taken:
        raise ConflictError(
            f"Receipt number {transaction_data.receipt_number} already exists; regenerate and retry"
        )


def commit_transaction(
    db: Session,
    transaction_data: TransactionCreate,
    items: list[TransactionItemCreate],
) -> Transaction:
    received_amount, change_amount = verify_amounts(transaction_data, items)

    try:
        _check_references(db, transaction_data, {item.product_id for item in items})

        txn = Transaction(
            receipt_number=transaction_data.receipt_number,
            shift_id=transaction_data.shift_id,
            customer_id=transaction_data.customer_id,
            user_id=transaction_data.user_id,
            subtotal=to_money(transaction_data.subtotal),
            tax=to_money(transaction_data.tax),
            total=to_money(transaction_data.total),
            payment_method=transaction_data.payment_method,
            received_amount=received_amount,
            change_amount=change_amount,
            status="completed",
            is_offline=False,
        )
        txn.items = [
            TransactionItem(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=to_money(item.unit_price),
                total_price=to_money(item.total_price),
            )
            for item in items
        ]
        db.add(txn)
        db.flush()

        for item in items:
            adjust_stock(db, item.product_id, -item.quantity)

        points = loyalty_points_for(txn.total) if txn.customer_id else 0
        if points:
            db.execute(
                update(Customer)
                .where(Customer.id == txn.customer_id)
                .values(loyalty_points=Customer.loyalty_points + points)
                .execution_options(synchronize_session=False)
            )

        db.commit()

    except POSError:
        db.rollback()
        raise

    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Transaction {transaction_data.receipt_number} rejected by constraint: {exc.orig}")
        raise ConflictError(
            "Transaction conflicts with existing data (receipt number taken or a reference is invalid); "
            "regenerate and retry"
        ) from exc

    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Transaction {transaction_data.receipt_number} rolled back: {exc}")
        raise PersistenceError("Unable to complete transaction") from exc

    logger.info(
        f"Committed {txn.receipt_number} shift={txn.shift_id} "
        f"items={len(items)} total={txn.total} method={txn.payment_method}"
    )

    txn_id = txn.id

    # Stock was changed with bulk UPDATEs; reload anything cached
    db.expire_all()
    return get_transaction(db, txn_id)
