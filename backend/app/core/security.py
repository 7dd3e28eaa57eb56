from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings

bearer_scheme = HTTPBearer(auto_error=True)

# Subject of tokens issued to the server console / game host rather than a player
CONSOLE_SUBJECT = "console"


def _invalid_token() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": "invalid_token", "message": "Invalid or expired operator token."},
    )


def create_access_token(operator_id: Optional[int], expires_minutes: Optional[int] = None) -> str:
    """
    Token for a player acting as operator, or for the console when
    `operator_id` is None.
    """
    now = datetime.now(timezone.utc)
    expire_dt = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": CONSOLE_SUBJECT if operator_id is None else str(operator_id),
        "exp": int(expire_dt.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Operator's player id, None for the console. Raises 401 otherwise."""
    try:
        payload = jwt.decode(
            token.strip(),
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require_sub": True, "require_exp": True},
        )
    except JWTError:
        raise _invalid_token()

    sub = payload.get("sub")
    if sub == CONSOLE_SUBJECT:
        return None
    try:
        return int(sub)
    except (TypeError, ValueError):
        raise _invalid_token()
