# pos_api/models/users.py

from sqlalchemy import CheckConstraint, Column, String, DateTime
from sqlalchemy.sql import func

from pos_api.database import Base
from pos_api.models._ids import new_id

USER_ROLES = ("cashier", "manager", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # cashier, manager, admin
    role = Column(String, nullable=False, default="cashier")
    email = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('cashier', 'manager', 'admin')", name="ck_users_role_valid"),
    )
