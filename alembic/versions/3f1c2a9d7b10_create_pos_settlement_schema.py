"""create_pos_settlement_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # USERS
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="cashier"),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("role IN ('cashier', 'manager', 'admin')", name="ck_users_role_valid"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # CATEGORIES
    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )

    # PRODUCTS
    op.create_table(
        "products",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("sku", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category_id", sa.String(36), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("ix_products_category_id", "products", ["category_id"], unique=False)

    # CUSTOMERS
    op.create_table(
        "customers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("loyalty_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_customers_phone", "customers", ["phone"], unique=False)

    # SHIFTS
    op.create_table(
        "shifts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("starting_cash", sa.Numeric(10, 2), nullable=False),
        sa.Column("ending_cash", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="open"),
        sa.CheckConstraint("status IN ('open', 'closed')", name="ck_shifts_status_valid"),
        sa.CheckConstraint("starting_cash >= 0", name="ck_shifts_starting_cash_non_negative"),
    )
    op.create_index("ix_shifts_user_id", "shifts", ["user_id"], unique=False)
    op.create_index(
        "uq_shifts_user_open",
        "shifts",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'open'"),
        sqlite_where=sa.text("status = 'open'"),
    )

    # TRANSACTIONS
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("receipt_number", sa.String(), nullable=False, unique=True),
        sa.Column("shift_id", sa.String(36), sa.ForeignKey("shifts.id"), nullable=False),
        sa.Column("customer_id", sa.String(36), sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("tax", sa.Numeric(10, 2), nullable=False),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.String(), nullable=False),
        sa.Column("received_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("change_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="completed"),
        sa.Column("is_offline", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("payment_method IN ('cash', 'card')", name="ck_transactions_payment_method"),
        sa.CheckConstraint(
            "status IN ('completed', 'refunded', 'cancelled')",
            name="ck_transactions_status_valid",
        ),
    )
    op.create_index("ix_transactions_shift_id", "transactions", ["shift_id"], unique=False)
    op.create_index("ix_transactions_customer_id", "transactions", ["customer_id"], unique=False)
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"], unique=False)
    op.create_index("ix_transactions_status", "transactions", ["status"], unique=False)
    op.create_index("ix_transactions_created_at", "transactions", ["created_at"], unique=False)
    op.create_index("ix_transactions_shift_created", "transactions", ["shift_id", "created_at"], unique=False)

    # TRANSACTION ITEMS
    op.create_table(
        "transaction_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("transaction_id", sa.String(36), sa.ForeignKey("transactions.id"), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_transaction_items_quantity_positive"),
    )
    op.create_index("ix_transaction_items_transaction_id", "transaction_items", ["transaction_id"], unique=False)
    op.create_index("ix_transaction_items_product_id", "transaction_items", ["product_id"], unique=False)

    # RETURNS
    op.create_table(
        "returns",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("original_transaction_id", sa.String(36), sa.ForeignKey("transactions.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("refund_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("refund_method", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("refund_method IN ('cash', 'card')", name="ck_returns_refund_method"),
        sa.CheckConstraint("refund_amount >= 0", name="ck_returns_refund_amount_non_negative"),
    )
    op.create_index("ix_returns_original_transaction_id", "returns", ["original_transaction_id"], unique=False)
    op.create_index("ix_returns_created_at", "returns", ["created_at"], unique=False)

    # RETURN ITEMS
    op.create_table(
        "return_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("return_id", sa.String(36), sa.ForeignKey("returns.id"), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_return_items_quantity_positive"),
    )
    op.create_index("ix_return_items_return_id", "return_items", ["return_id"], unique=False)
    op.create_index("ix_return_items_product_id", "return_items", ["product_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_return_items_product_id", table_name="return_items")
    op.drop_index("ix_return_items_return_id", table_name="return_items")
    op.drop_table("return_items")

    op.drop_index("ix_returns_created_at", table_name="returns")
    op.drop_index("ix_returns_original_transaction_id", table_name="returns")
    op.drop_table("returns")

    op.drop_index("ix_transaction_items_product_id", table_name="transaction_items")
    op.drop_index("ix_transaction_items_transaction_id", table_name="transaction_items")
    op.drop_table("transaction_items")

    op.drop_index("ix_transactions_shift_created", table_name="transactions")
    op.drop_index("ix_transactions_created_at", table_name="transactions")
    op.drop_index("ix_transactions_status", table_name="transactions")
    op.drop_index("ix_transactions_user_id", table_name="transactions")
    op.drop_index("ix_transactions_customer_id", table_name="transactions")
    op.drop_index("ix_transactions_shift_id", table_name="transactions")
    op.drop_table("transactions")

    op.drop_index("uq_shifts_user_open", table_name="shifts")
    op.drop_index("ix_shifts_user_id", table_name="shifts")
    op.drop_table("shifts")

    op.drop_index("ix_customers_phone", table_name="customers")
    op.drop_table("customers")

    op.drop_index("ix_products_category_id", table_name="products")
    op.drop_index("ix_products_sku", table_name="products")
    op.drop_table("products")

    op.drop_table("categories")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
