"""
Seed script to create the first ADMIN user.

Run once (after init_db) with env set:
  ADMIN_USERNAME=admin
  ADMIN_EMAIL=admin@example.com
  ADMIN_PASSWORD=YourSecurePassword

Registration through the API only ever creates EMPLOYEE accounts, so this is
the way an administrator account comes into existence.
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from leaveease.auth import repository
from leaveease.auth.models import User
from leaveease.auth.security import hash_password
from leaveease.core.config import settings
from leaveease.core.enums import Role
from leaveease.core.logging import configure_logging
from leaveease.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


async def seed_admin(db: AsyncSession) -> None:
    username = settings.admin_username
    email = settings.admin_email
    password = settings.admin_password
    if not username or not email or not password:
        logger.info("No ADMIN_USERNAME/ADMIN_EMAIL/ADMIN_PASSWORD; skipping admin seed.")
        return

    user = await repository.find_by_username(db, username)
    if not user:
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=Role.ADMIN.value,
        )
        db.add(user)
        logger.info("Created ADMIN user: %s", username)
    else:
        user.role = Role.ADMIN.value
        user.password_hash = hash_password(password)
        logger.info("Updated existing user to ADMIN: %s", username)

    await db.commit()


async def main() -> None:
    configure_logging(settings.log_level)
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception:
            await db.rollback()
            logger.exception("Admin seed failed")
            raise


if __name__ == "__main__":
    asyncio.run(main())
