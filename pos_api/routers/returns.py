# pos_api/routers/returns.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.schemas.returns import ReturnCommitRequest, ReturnResponse
from pos_api.services import returns as return_service

router = APIRouter(
    prefix="/api/returns",
    tags=["Returns"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[ReturnResponse])
def list_returns(db: Session = Depends(get_db)):
    return return_service.get_returns(db)


@router.post("", response_model=ReturnResponse, status_code=status.HTTP_201_CREATED)
def create_return(
    payload: ReturnCommitRequest,
    db: Session = Depends(get_db),
):
    # Validation and pricing run before anything is written
    draft = return_service.prepare_return(db, payload.return_data, payload.items)
    return return_service.commit_return(db, draft)
