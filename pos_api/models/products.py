# pos_api/models/products.py

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base
from pos_api.models._ids import new_id


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    sku = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)

    # Mutated only by transaction and return commits (and admin overrides)
    stock = Column(Integer, nullable=False, default=0)

    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    expiration_date = Column(Date, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    category = relationship("Category", lazy="joined")

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )
