from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
import logging

from pos_api.database import get_db
from pos_api.models.users import User
from pos_api.schemas.user import LoginRequest, LoginResponse, UserResponse
from pos_api.core.auth import get_current_user
from pos_api.core.hashing import verify_password
from pos_api.core.jwt import issue_token
from pos_api.core.rate_limiter import limiter
from pos_api.core.config import settings

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

logger = logging.getLogger(__name__)


# ---------------- LOGIN (TOKEN-BASED) ----------------
@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(
    request: Request,
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.username == credentials.username).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info(f"Failed login for {credentials.username!r}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    token = issue_token(user)

    return {
        "user": user,
        "access_token": token,
        "token_type": "bearer",
    }


# ---------------- SESSION ----------------
@router.get("/session", response_model=UserResponse)
def session(current_user: User = Depends(get_current_user)):
    return current_user


# ---------------- LOGOUT ----------------
@router.post("/logout")
def logout():
    # Tokens are stateless; the client drops its copy
    return {"message": "Logged out successfully"}
