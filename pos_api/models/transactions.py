# models/transactions.py

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base
from pos_api.models._ids import new_id


class Transaction(Base):
    """A committed sale (receipt header).

    Written once together with its items and the matching stock decrement.
    The only later change allowed is status completed -> refunded.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=new_id)
    receipt_number = Column(String, unique=True, nullable=False)

    shift_id = Column(String(36), ForeignKey("shifts.id"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)

    # cash, card
    payment_method = Column(String, nullable=False)
    received_amount = Column(Numeric(10, 2), nullable=True)
    change_amount = Column(Numeric(10, 2), nullable=True)

    # completed, refunded, cancelled
    status = Column(String, nullable=False, default="completed", index=True)
    is_offline = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.id",
    )
    customer = relationship("Customer")

    __table_args__ = (
        CheckConstraint("payment_method IN ('cash', 'card')", name="ck_transactions_payment_method"),
        CheckConstraint(
            "status IN ('completed', 'refunded', 'cancelled')",
            name="ck_transactions_status_valid",
        ),
        Index("ix_transactions_shift_created", "shift_id", "created_at"),
    )
