# pos_api/models/returns.py

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base
from pos_api.models._ids import new_id


class Return(Base):
    __tablename__ = "returns"

    id = Column(String(36), primary_key=True, default=new_id)
    original_transaction_id = Column(
        String(36),
        ForeignKey("transactions.id"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    reason = Column(Text, nullable=True)
    refund_amount = Column(Numeric(10, 2), nullable=False)
    # cash, card
    refund_method = Column(String, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    items = relationship(
        "ReturnItem",
        back_populates="return_record",
        cascade="all, delete-orphan",
        order_by="ReturnItem.id",
    )
    original_transaction = relationship("Transaction")

    __table_args__ = (
        CheckConstraint("refund_method IN ('cash', 'card')", name="ck_returns_refund_method"),
        CheckConstraint("refund_amount >= 0", name="ck_returns_refund_amount_non_negative"),
    )


class ReturnItem(Base):
    __tablename__ = "return_items"

    id = Column(String(36), primary_key=True, default=new_id)

    return_id = Column(String(36), ForeignKey("returns.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    return_record = relationship("Return", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_return_items_quantity_positive"),
    )
