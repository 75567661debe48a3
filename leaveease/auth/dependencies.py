from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.auth import repository
from leaveease.auth.schemas import CurrentUser
from leaveease.auth.security import decode_access_token
from leaveease.core.enums import Role
from leaveease.core.exceptions import Unauthenticated
from leaveease.db.session import get_db


# auto_error=False so a missing header is reported by get_current_user with our own detail
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth", auto_error=False)


def _credentials_exception(error: Unauthenticated) -> HTTPException:
    return HTTPException(
        status_code=error.status_code,
        detail=error.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated principal from the bearer token."""
    if not token:
        raise _credentials_exception(Unauthenticated("Not authenticated"))

    payload = decode_access_token(token)
    if payload is None:
        raise _credentials_exception(Unauthenticated())

    username = payload.get("sub")
    if not username:
        raise _credentials_exception(Unauthenticated())

    # Role is taken from the stored user, not the token, so demotions apply immediately
    user = await repository.find_by_username(db, username)
    if not user:
        raise _credentials_exception(Unauthenticated())

    try:
        role = Role(user.role)
    except ValueError:
        raise _credentials_exception(Unauthenticated())

    return CurrentUser(id=user.id, username=user.username, role=role)
