# app/core/security.py

from datetime import datetime, timedelta
from typing import Iterable, Optional

from jose import JWTError, jwt

from app.core.config import settings

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM


def create_access_token(
    subject: str,
    roles: Iterable[str],
    name: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Mint a token in the shape the identity provider issues (used by tooling and tests)."""
    expire = datetime.utcnow() + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": subject,
        "roles": [getattr(r, "value", r) for r in roles],
        "exp": expire,
    }
    if name:
        payload["name"] = name
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
