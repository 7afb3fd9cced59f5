# =========================================================
# CART (PURE DOMAIN LOGIC)
#
# Every operation returns a new cart and never raises:
# - quantities are clamped to the stock snapshot taken at add-time
# - unknown ids are no-ops
# =========================================================

from dataclasses import dataclass, replace
from decimal import Decimal

from pos_api.domain.money import ZERO, to_money

DEFAULT_TAX_RATE = Decimal("0.12")


@dataclass(frozen=True)
class CartItem:
    id: str
    sku: str
    name: str
    price: str
    stock: int
    quantity: int = 1


@dataclass(frozen=True)
class CartSummary:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int


def add_item(cart: list[CartItem], candidate: CartItem) -> list[CartItem]:
    for index, item in enumerate(cart):
        if item.id != candidate.id:
            continue

        if item.quantity >= candidate.stock:
            # Cannot sell more than the stock snapshot
            return list(cart)

        updated = replace(item, quantity=item.quantity + 1)
        return cart[:index] + [updated] + cart[index + 1:]

    if candidate.stock <= 0:
        return list(cart)

    return list(cart) + [replace(candidate, quantity=1)]


def remove_item(cart: list[CartItem], item_id: str) -> list[CartItem]:
    return [item for item in cart if item.id != item_id]


def update_quantity(cart: list[CartItem], item_id: str, quantity: int) -> list[CartItem]:
    if quantity <= 0:
        return remove_item(cart, item_id)

    return [
        replace(item, quantity=min(quantity, item.stock)) if item.id == item_id else item
        for item in cart
    ]


def clear() -> list[CartItem]:
    return []


def summarize(cart: list[CartItem], tax_rate: Decimal = DEFAULT_TAX_RATE) -> CartSummary:
    raw_subtotal = sum(
        (Decimal(item.price) * item.quantity for item in cart),
        ZERO,
    )
    subtotal = to_money(raw_subtotal)
    tax = to_money(raw_subtotal * Decimal(str(tax_rate)))

    return CartSummary(
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        item_count=sum(item.quantity for item in cart),
    )


def is_empty(cart: list[CartItem]) -> bool:
    return not cart


def get_item(cart: list[CartItem], item_id: str) -> CartItem | None:
    return next((item for item in cart if item.id == item_id), None)


def product_to_cart_item(product) -> CartItem:
    """Snapshot a catalog product (ORM row or schema) as a cart candidate."""
    return CartItem(
        id=product.id,
        sku=product.sku,
        name=product.name,
        price=str(to_money(product.price)),
        stock=product.stock,
        quantity=1,
    )
