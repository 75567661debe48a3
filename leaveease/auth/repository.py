"""Identity store lookups. The leave engine only reads users through these."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.auth.models import User


async def find_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def exists_by_username(db: AsyncSession, username: str) -> bool:
    result = await db.execute(select(User.id).where(User.username == username).limit(1))
    return result.scalar_one_or_none() is not None


async def exists_by_email(db: AsyncSession, email: str) -> bool:
    result = await db.execute(
        select(User.id).where(func.lower(User.email) == func.lower(email)).limit(1)
    )
    return result.scalar_one_or_none() is not None
