"""
Seed the demo user from configuration. No hardcoded credentials.
Set POSTBOARD_SEED_USER_EMAIL + POSTBOARD_SEED_USER_PASSWORD (and optionally
POSTBOARD_SEED_USER_NAME) to create an account that can request tokens.
"""
import logging

from postboard.core.config import Settings
from postboard.core.logging_safety import safe_log_identifier
from postboard.repositories.base import UserRecord, UserStore
from postboard.services.auth import hash_password

logger = logging.getLogger(__name__)


def seed_from_settings(users: UserStore, settings: Settings) -> UserRecord | None:
    """Create the configured seed user unless it already exists."""
    email = settings.seed_user_email
    password = settings.seed_user_password
    if not email or not password:
        return None

    existing = users.find_user_by_email(email)
    if existing is not None:
        logger.debug("Seed user already exists: %s", safe_log_identifier(email, prefix="email"))
        return existing

    user = users.create_user(
        name=settings.seed_user_name,
        email=email,
        password_hash=hash_password(password, rounds=settings.bcrypt_rounds),
    )
    logger.info("Seeded user: %s", safe_log_identifier(email, prefix="email"))
    return user
