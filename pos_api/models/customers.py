# pos_api/models/customers.py

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from pos_api.database import Base
from pos_api.models._ids import new_id


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True, index=True)
    email = Column(String, nullable=True)
    loyalty_points = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
