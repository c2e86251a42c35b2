"""
FOCUSFLOW Analytics API - Token Verification

Decodes JWT access tokens issued by the auth service.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from focusflow.config import settings


def decode_token(token: str) -> Optional[str]:
    """Decode and validate a JWT token. Returns the owner id (``sub``) if valid."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None
    owner_id = payload.get("sub")
    if not owner_id:
        return None
    return owner_id


def encode_token(owner_id: str, expires_delta: timedelta = timedelta(minutes=30)) -> str:
    """Create a token the same way the auth service does. Used by tests and tooling."""
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": owner_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
