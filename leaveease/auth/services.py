import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.auth import repository
from leaveease.auth.models import User
from leaveease.auth.schemas import AuthResponse, LoginRequest, RegisterRequest
from leaveease.auth.security import create_access_token, hash_password, verify_password
from leaveease.core.enums import Role
from leaveease.core.exceptions import DuplicateUser, InvalidCredentials

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security")


def _issue_token(user: User) -> AuthResponse:
    token = create_access_token(subject={"sub": user.username, "role": user.role})
    return AuthResponse(access_token=token, username=user.username, role=Role(user.role))


async def register_user(db: AsyncSession, payload: RegisterRequest) -> AuthResponse:
    """Create an EMPLOYEE account and return a token for it."""
    if await repository.exists_by_username(db, payload.username):
        raise DuplicateUser("Username already taken")
    if await repository.exists_by_email(db, payload.email):
        raise DuplicateUser("Email already registered")

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=Role.EMPLOYEE.value,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same username/email
        await db.rollback()
        raise DuplicateUser("Username or email already registered") from e
    except Exception:
        await db.rollback()
        raise
    await db.refresh(user)

    logger.info("User registered: %s", user.username, extra={"username": user.username})
    return _issue_token(user)


async def login_user(db: AsyncSession, payload: LoginRequest) -> AuthResponse:
    user = await repository.find_by_username(db, payload.username)
    if not user or not verify_password(payload.password, user.password_hash):
        security_logger.info("login_failed", extra={"username": payload.username})
        raise InvalidCredentials()

    logger.info("User logged in: %s", user.username, extra={"username": user.username})
    return _issue_token(user)
