"""
Database initialization - first-boot seeding
"""
import logging

from sqlalchemy.orm import Session

from fieldcollect.core.config import settings
from fieldcollect.core.permissions import Role
from fieldcollect.core.security import hash_password
from fieldcollect.models.user import User
from fieldcollect.services.user_service import get_user_by_username

logger = logging.getLogger(__name__)

DEMO_AGENT_USERNAME = "agent1"


def init_db(db: Session) -> bool:
    """
    Seed the system administrator (and the demo agent) if the admin
    username does not exist yet.

    Returns:
        True if anything was created
    """
    if get_user_by_username(db, settings.INITIAL_ADMIN_USERNAME):
        logger.info("Admin user already exists, skipping seeding")
        return False

    logger.info("Seeding admin user %s", settings.INITIAL_ADMIN_USERNAME)
    db.add(User(
        username=settings.INITIAL_ADMIN_USERNAME,
        password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
        full_name="System Administrator",
        role=Role.ADMIN.value,
        is_active=True,
    ))

    if settings.SEED_DEMO_AGENT and not get_user_by_username(db, DEMO_AGENT_USERNAME):
        logger.info("Seeding demo agent %s", DEMO_AGENT_USERNAME)
        db.add(User(
            username=DEMO_AGENT_USERNAME,
            password_hash=hash_password("password"),
            full_name="John Doe",
            role=Role.AGENT.value,
            is_active=True,
        ))

    db.commit()
    return True
