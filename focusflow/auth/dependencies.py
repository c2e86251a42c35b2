from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from focusflow.auth.tokens import decode_token


# HTTP Bearer token scheme - auto_error=False to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_owner(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> str:
    """Resolve the authenticated owner id from the bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    owner_id = decode_token(credentials.credentials)
    if owner_id is None:
        raise credentials_exception

    return owner_id


# Type alias for cleaner dependency injection
CurrentOwner = Annotated[str, Depends(get_current_owner)]
