"""Seed the default admin account on app startup."""

import logging
from app.core.config import settings
from app.core.database import async_session
from app.models.user import User, UserRole
from app.services.auth import hash_password, get_user_by_email

logger = logging.getLogger(__name__)


async def seed_admin_account():
    """Create the configured admin account if it doesn't exist.

    Skipped when SEED_ADMIN_PASSWORD is empty.
    """
    if not settings.SEED_ADMIN_PASSWORD:
        logger.info("SEED_ADMIN_PASSWORD not set; skipping admin seed")
        return

    async with async_session() as db:
        try:
            existing_user = await get_user_by_email(db, settings.SEED_ADMIN_EMAIL)

            if existing_user:
                logger.info("Admin account already exists: %s", settings.SEED_ADMIN_EMAIL)
                return

            user = User(
                name=settings.SEED_ADMIN_NAME,
                email=settings.SEED_ADMIN_EMAIL,
                hashed_password=hash_password(settings.SEED_ADMIN_PASSWORD),
                role=UserRole.ADMIN,
            )
            db.add(user)
            await db.commit()

            logger.info("Admin account created: %s", settings.SEED_ADMIN_EMAIL)

        except Exception as e:
            logger.error("Failed to seed admin account: %s", e)
            await db.rollback()
