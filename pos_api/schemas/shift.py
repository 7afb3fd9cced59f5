from datetime import datetime
from decimal import Decimal

from pos_api.schemas.base import APIModel, NonNegativeMoney


class ShiftOpen(APIModel):
    user_id: str
    starting_cash: NonNegativeMoney


class ShiftClose(APIModel):
    ending_cash: NonNegativeMoney


class ShiftResponse(APIModel):
    id: str
    user_id: str
    start_time: datetime
    end_time: datetime | None
    starting_cash: Decimal
    ending_cash: Decimal | None
    status: str


class ShiftSummaryResponse(APIModel):
    shift: ShiftResponse
    total_sales: Decimal
    total_transactions: int
    cash_sales: Decimal
    card_sales: Decimal
    # startingCash + cashSales; the drawer count is compared against this
    expected_cash: Decimal
