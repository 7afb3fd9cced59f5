"""
Pytest fixtures for the POS settlement API.

Every test gets a fresh in-memory SQLite schema, a TestClient, seeded
users with bearer tokens, a small catalog and an open shift.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pos_api.core.config import settings
from pos_api.core.hashing import hash_password
from pos_api.core.jwt import issue_token
from pos_api.core.rate_limiter import limiter
from pos_api.database import Base, SessionLocal, engine
from pos_api.domain.cart import add_item, product_to_cart_item, summarize, update_quantity
from pos_api.domain.payment import (
    CheckoutContext,
    PaymentRequest,
    build_transaction_draft,
    draft_to_request_body,
    validate_payment,
)
from pos_api.main import app
from pos_api.models import Category, Customer, Product, Shift, User


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    limiter.reset()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# USERS & TOKENS
# =============================================================================


def _make_user(db, username, role, password="Password123!"):
    user = User(username=username, password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    return user


def _headers(user):
    token = issue_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def cashier(db):
    return _make_user(db, "cashier1", "cashier")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin1", "admin")


@pytest.fixture
def cashier_headers(cashier):
    return _headers(cashier)


@pytest.fixture
def admin_headers(admin):
    return _headers(admin)


# =============================================================================
# CATALOG
# =============================================================================


@pytest.fixture
def category(db):
    cat = Category(name="Beverages")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def coffee(db, category):
    product = Product(sku="COF-001", name="Coffee Beans", price=Decimal("250.00"), stock=10, category_id=category.id)
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def tea(db, category):
    product = Product(sku="TEA-001", name="Green Tea", price=Decimal("80.00"), stock=5, category_id=category.id)
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def customer(db):
    person = Customer(name="Ana Reyes", phone="09171234567")
    db.add(person)
    db.commit()
    return person


@pytest.fixture
def open_shift(db, cashier):
    shift = Shift(user_id=cashier.id, starting_cash=Decimal("100.00"), status="open")
    db.add(shift)
    db.commit()
    return shift


# =============================================================================
# CHECKOUT HELPERS
# =============================================================================


@pytest.fixture
def checkout_body():
    """Build a POST /api/transactions body the way a terminal does.

    ``lines`` is a list of (product, quantity) pairs.
    """

    def build(shift, user, lines, method="cash", received=None, customer_id=None, receipt_number=None):
        cart = []
        for product, quantity in lines:
            cart = add_item(cart, product_to_cart_item(product))
            cart = update_quantity(cart, product.id, quantity)

        summary = summarize(cart, settings.TAX_RATE)
        payment = PaymentRequest(
            method=method,
            received_amount=None if received is None else Decimal(received),
        )
        result = validate_payment(payment, summary.total)
        draft = build_transaction_draft(
            cart,
            summary,
            payment,
            result,
            CheckoutContext(shift_id=shift.id, user_id=user.id, customer_id=customer_id),
            receipt_number=receipt_number,
        )
        return draft_to_request_body(draft)

    return build
