"""Create the users and leave_requests tables if they do not exist yet."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine

# Register models on Base.metadata
import leaveease.core.models  # noqa: F401
from leaveease.db.session import Base, engine


async def create_tables(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(create_tables())
