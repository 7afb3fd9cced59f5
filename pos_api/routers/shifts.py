# =========================================================
# SHIFTS ROUTER
#
# open -> closed, one open shift per user.
# Summary is recomputed from the transaction log on every call.
# =========================================================

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.schemas.shift import ShiftClose, ShiftOpen, ShiftResponse, ShiftSummaryResponse
from pos_api.services import shifts as shift_service

router = APIRouter(
    prefix="/api/shifts",
    tags=["Shifts"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/current/{user_id}", response_model=ShiftResponse | None)
def get_current_shift(user_id: str, db: Session = Depends(get_db)):
    return shift_service.get_current_shift(db, user_id)


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def open_shift(shift_data: ShiftOpen, db: Session = Depends(get_db)):
    return shift_service.open_shift(db, shift_data.user_id, shift_data.starting_cash)


@router.put("/{shift_id}/close", response_model=ShiftResponse)
def close_shift(shift_id: str, close_data: ShiftClose, db: Session = Depends(get_db)):
    return shift_service.close_shift(db, shift_id, close_data.ending_cash)


@router.get("/{shift_id}/summary", response_model=ShiftSummaryResponse)
def get_shift_summary(shift_id: str, db: Session = Depends(get_db)):
    summary = shift_service.get_shift_summary(db, shift_id)

    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift not found")

    return summary


@router.get("/{shift_id}", response_model=ShiftResponse)
def get_shift(shift_id: str, db: Session = Depends(get_db)):
    shift = shift_service.get_shift(db, shift_id)

    if shift is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift not found")

    return shift
