# =========================================================
# PAYMENT VALIDATION & TRANSACTION DRAFTS (PURE)
#
# validate_payment never raises; callers must check .success.
# Drafts are converted to the JSON shapes POST /api/transactions
# accepts: decimals as strings, items linked by a placeholder id.
# =========================================================

import random
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from pos_api.domain.cart import CartItem, CartSummary
from pos_api.domain.money import ZERO, money_str, to_money

PaymentMethod = Literal["cash", "card"]

PAYMENT_METHODS = ("cash", "card")

INSUFFICIENT_FUNDS = "insufficient_funds"
UNSUPPORTED_METHOD = "unsupported_method"

PENDING_TRANSACTION_ID = "pending"


@dataclass(frozen=True)
class PaymentRequest:
    method: str
    received_amount: Decimal | None = None


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    change_amount: Decimal | None = None
    error: str | None = None
    error_code: str | None = None


@dataclass(frozen=True)
class CheckoutContext:
    shift_id: str
    user_id: str
    customer_id: str | None = None


@dataclass(frozen=True)
class TransactionDraft:
    receipt_number: str
    shift_id: str
    user_id: str
    customer_id: str | None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    received_amount: Decimal | None
    change_amount: Decimal | None
    items: tuple[CartItem, ...]


def validate_payment(payment: PaymentRequest, total_due: Decimal) -> PaymentResult:
    total_due = to_money(total_due)

    if payment.method == "card":
        # The terminal has already authorized the amount
        return PaymentResult(success=True)

    if payment.method == "cash":
        received = total_due if payment.received_amount is None else to_money(payment.received_amount)

        if received < total_due:
            return PaymentResult(
                success=False,
                error=f"Insufficient cash: received {received}, due {total_due}",
                error_code=INSUFFICIENT_FUNDS,
            )

        return PaymentResult(success=True, change_amount=to_money(received - total_due))

    return PaymentResult(
        success=False,
        error=f"Unsupported payment method: {payment.method}",
        error_code=UNSUPPORTED_METHOD,
    )


def generate_receipt_number(now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """RCP-{epochMillis}-{3 digits}. Unique only with high probability."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = (rng or random).randrange(1000)
    return f"RCP-{now_ms}-{suffix:03d}"


def build_transaction_draft(
    cart: list[CartItem],
    summary: CartSummary,
    payment: PaymentRequest,
    result: PaymentResult,
    context: CheckoutContext,
    receipt_number: str | None = None,
) -> TransactionDraft:
    received_amount = None
    change_amount = None

    if payment.method == "cash":
        received_amount = summary.total if payment.received_amount is None else to_money(payment.received_amount)
        change_amount = result.change_amount if result.change_amount is not None else ZERO

    return TransactionDraft(
        receipt_number=receipt_number or generate_receipt_number(),
        shift_id=context.shift_id,
        user_id=context.user_id,
        customer_id=context.customer_id,
        subtotal=summary.subtotal,
        tax=summary.tax,
        total=summary.total,
        payment_method=payment.method,
        received_amount=received_amount,
        change_amount=change_amount,
        items=tuple(cart),
    )


def transaction_draft_to_insert(draft: TransactionDraft) -> dict:
    return {
        "receiptNumber": draft.receipt_number,
        "shiftId": draft.shift_id,
        "customerId": draft.customer_id,
        "userId": draft.user_id,
        "subtotal": money_str(draft.subtotal),
        "tax": money_str(draft.tax),
        "total": money_str(draft.total),
        "paymentMethod": draft.payment_method,
        "receivedAmount": None if draft.received_amount is None else money_str(draft.received_amount),
        "changeAmount": None if draft.change_amount is None else money_str(draft.change_amount),
        "status": "completed",
        "isOffline": False,
    }


def cart_items_to_transaction_items(
    cart: list[CartItem] | tuple[CartItem, ...],
    transaction_id: str = PENDING_TRANSACTION_ID,
) -> list[dict]:
    return [
        {
            "transactionId": transaction_id,
            "productId": item.id,
            "quantity": item.quantity,
            "unitPrice": money_str(item.price),
            "totalPrice": money_str(Decimal(item.price) * item.quantity),
        }
        for item in cart
    ]


def draft_to_request_body(draft: TransactionDraft) -> dict:
    """Body for POST /api/transactions."""
    return {
        "transaction": transaction_draft_to_insert(draft),
        "items": cart_items_to_transaction_items(draft.items),
    }
