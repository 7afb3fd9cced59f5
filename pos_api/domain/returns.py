# pos_api/domain/returns.py

from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal

from pos_api.domain.money import ZERO, to_money


@dataclass(frozen=True)
class ReturnLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class SoldLine:
    product_id: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class ReturnValidation:
    success: bool
    error: str | None = None
    product_id: str | None = None


def _sold_by_product(original_items) -> "OrderedDict[str, SoldLine]":
    # Original lines are keyed by product; repeated lines are merged
    sold = OrderedDict()
    for item in original_items:
        existing = sold.get(item.product_id)
        if existing is None:
            sold[item.product_id] = SoldLine(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=Decimal(str(item.unit_price)),
            )
        else:
            sold[item.product_id] = SoldLine(
                product_id=item.product_id,
                quantity=existing.quantity + item.quantity,
                unit_price=existing.unit_price,
            )
    return sold


def _requested_by_product(requested_items) -> "OrderedDict[str, int]":
    requested = OrderedDict()
    for item in requested_items:
        requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity
    return requested


def validate_return(original_items, requested_items) -> ReturnValidation:
    """Check every requested line against what was actually sold.

    ``original_items`` are sold lines (anything with ``product_id``,
    ``quantity`` and ``unit_price``), ``requested_items`` anything with
    ``product_id`` and ``quantity``. The first bad line wins.
    """
    requested_items = list(requested_items)
    if not requested_items:
        return ReturnValidation(success=False, error="Return must contain at least one item")

    sold = _sold_by_product(original_items)

    for item in requested_items:
        if item.quantity <= 0:
            return ReturnValidation(
                success=False,
                error=f"Invalid return quantity {item.quantity} for product {item.product_id}",
                product_id=item.product_id,
            )

    for product_id, quantity in _requested_by_product(requested_items).items():
        line = sold.get(product_id)

        if line is None:
            return ReturnValidation(
                success=False,
                error=f"Product {product_id} was not part of the original transaction",
                product_id=product_id,
            )

        if quantity > line.quantity:
            return ReturnValidation(
                success=False,
                error=(
                    f"Return quantity {quantity} for product {product_id} "
                    f"exceeds returnable quantity {line.quantity}"
                ),
                product_id=product_id,
            )

    return ReturnValidation(success=True)


def calculate_refund_amount(original_items, requested_items) -> Decimal:
    """Refund at the original sale price, never the live catalog price."""
    sold = _sold_by_product(original_items)
    total = ZERO

    for product_id, quantity in _requested_by_product(requested_items).items():
        line = sold.get(product_id)
        if line is None:
            continue
        total += line.unit_price * min(quantity, line.quantity)

    return to_money(total)


def returnable_lines(original_items, previous_return_items) -> list[SoldLine]:
    """Sold lines net of quantities already returned (never below zero)."""
    sold = _sold_by_product(original_items)
    already = _requested_by_product(previous_return_items)

    remaining = []
    for product_id, line in sold.items():
        quantity = max(0, line.quantity - already.get(product_id, 0))
        remaining.append(SoldLine(product_id=product_id, quantity=quantity, unit_price=line.unit_price))
    return remaining
