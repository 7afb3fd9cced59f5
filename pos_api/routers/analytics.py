# =========================================================
# ANALYTICS ROUTER
#
# Read-only views computed fresh from the transaction log.
# =========================================================

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.schemas.analytics import DailySalesResponse, TopProductResponse
from pos_api.services import analytics as analytics_service

router = APIRouter(
    prefix="/api/analytics",
    tags=["Analytics"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/daily/{day}", response_model=DailySalesResponse)
def daily_sales(day: date, db: Session = Depends(get_db)):
    return analytics_service.daily_sales(db, day)


@router.get("/top-products", response_model=list[TopProductResponse])
def top_products(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return analytics_service.top_products(db, limit)
