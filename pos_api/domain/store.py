# pos_api/domain/store.py

from dataclasses import dataclass
from decimal import Decimal

from pos_api.core.config import settings
from pos_api.domain import cart as cart_ops
from pos_api.domain.cart import CartItem, CartSummary
from pos_api.domain.payment import CheckoutContext, PaymentRequest, PaymentResult, validate_payment


@dataclass(frozen=True)
class CheckoutPayload:
    cart: tuple[CartItem, ...]
    summary: CartSummary
    context: CheckoutContext


class CartStore:
    """Checkout-session state: cart lines plus the selected customer.

    One instance per terminal session; nothing is shared between
    instances. Mutations go through the pure functions in
    ``pos_api.domain.cart``. The tax rate defaults to ``settings.TAX_RATE``.
    """

    def __init__(self, tax_rate: Decimal | None = None):
        self.tax_rate = settings.TAX_RATE if tax_rate is None else tax_rate
        self.items: list[CartItem] = cart_ops.clear()
        self.selected_customer: str | None = None

    @property
    def summary(self) -> CartSummary:
        return cart_ops.summarize(self.items, self.tax_rate)

    def add(self, candidate: CartItem) -> None:
        self.items = cart_ops.add_item(self.items, candidate)

    def remove(self, item_id: str) -> None:
        self.items = cart_ops.remove_item(self.items, item_id)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        self.items = cart_ops.update_quantity(self.items, item_id, quantity)

    def clear(self) -> None:
        self.items = cart_ops.clear()
        self.selected_customer = None

    def set_selected_customer(self, customer_id: str | None) -> None:
        # "new" is the UI placeholder for an unsaved customer
        self.selected_customer = None if customer_id == "new" else customer_id

    def validate_payment(self, payment: PaymentRequest) -> PaymentResult:
        return validate_payment(payment, self.summary.total)

    def prepare_checkout(self, shift_id: str | None, user_id: str) -> CheckoutPayload | None:
        if cart_ops.is_empty(self.items) or not shift_id:
            return None

        return CheckoutPayload(
            cart=tuple(self.items),
            summary=self.summary,
            context=CheckoutContext(
                shift_id=shift_id,
                user_id=user_id,
                customer_id=self.selected_customer,
            ),
        )
