# pos_api/models/categories.py

from sqlalchemy import Column, String, Text

from pos_api.database import Base
from pos_api.models._ids import new_id


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
