# =========================================================
# TRANSACTIONS ROUTER
#
# POST commits header + items + stock decrement atomically.
# A 409 means the receipt number clashed: regenerate, resubmit.
# =========================================================

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.schemas.transaction import TransactionCommitRequest, TransactionResponse
from pos_api.services import transactions as transaction_service

router = APIRouter(
    prefix="/api/transactions",
    tags=["Transactions"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    shift_id: str | None = Query(None, alias="shiftId"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    return transaction_service.get_transactions(db, shift_id, start_date, end_date)


@router.get("/receipt/{receipt_number}", response_model=TransactionResponse)
def get_transaction_by_receipt(receipt_number: str, db: Session = Depends(get_db)):
    txn = transaction_service.get_transaction_by_receipt(db, receipt_number)

    if not txn:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")

    return txn


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)):
    txn = transaction_service.get_transaction(db, transaction_id)

    if not txn:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")

    return txn


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCommitRequest,
    db: Session = Depends(get_db),
):
    return transaction_service.commit_transaction(db, payload.transaction, payload.items)
