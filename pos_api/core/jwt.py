from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from pos_api.core.config import settings

TOKEN_TYPE = "access"


def create_access_token(claims: dict, expires_delta: timedelta | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_token(user, expires_delta: timedelta | None = None) -> str:
    """Bearer token for a terminal user: ``sub`` is the user id, ``role`` gates admin routes."""
    return create_access_token({"sub": str(user.id), "role": user.role}, expires_delta)


def decode_access_token(token: str) -> dict | None:
    """Claims of a valid, unexpired access token; None for anything else."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE or not payload.get("sub"):
        return None

    return payload
