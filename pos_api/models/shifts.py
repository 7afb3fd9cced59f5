# pos_api/models/shifts.py

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, text
from sqlalchemy.sql import func

from pos_api.database import Base
from pos_api.models._ids import new_id


class Shift(Base):
    """A cash-drawer session owned by one user.

    Opened with a starting float and closed with the counted drawer. Once
    closed the row is never written again.
    """

    __tablename__ = "shifts"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    start_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)

    starting_cash = Column(Numeric(10, 2), nullable=False)
    ending_cash = Column(Numeric(10, 2), nullable=True)

    # open, closed
    status = Column(String, nullable=False, default="open")

    __table_args__ = (
        CheckConstraint("status IN ('open', 'closed')", name="ck_shifts_status_valid"),
        CheckConstraint("starting_cash >= 0", name="ck_shifts_starting_cash_non_negative"),
        # One open shift per user, enforced by the database
        Index(
            "uq_shifts_user_open",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'open'"),
            sqlite_where=text("status = 'open'"),
        ),
    )
