from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Request
from jose import jwt, JWTError

from .errors import ApiError, ErrorCode

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(data: Dict, secret_key: str, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def decode_user_id(token: str, secret_key: str) -> Optional[str]:
    """Returns the subject of a valid token, or None for anything unusable."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    return str(subject) if subject else None


def get_current_user_id(request: Request) -> Optional[str]:
    return getattr(request.state, "user_id", None)


def require_user(request: Request) -> str:
    user_id = get_current_user_id(request)
    if not user_id:
        raise ApiError(ErrorCode.UNAUTHORIZED, "Unauthorized", status_code=401)
    return user_id


def require_user_pk(request: Request) -> int:
    """Authenticated user's primary key; tokens from elsewhere carry non-numeric subjects."""
    user_id = require_user(request)
    try:
        return int(user_id)
    except ValueError:
        raise ApiError(ErrorCode.UNAUTHORIZED, "Unauthorized", status_code=401)
