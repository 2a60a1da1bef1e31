"""Seed the bootstrap admin user from settings."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.db.seeds.seed_rbac import ADMIN_ROLE_NAME
from backoffice.models.role import Role
from backoffice.models.user import User
from backoffice.services.auth_service import auth_service

logger = logging.getLogger("backoffice")


def seed_admin(db: Session) -> Optional[User]:
    """Create the admin user if not already present. Requires seed_rbac first."""
    admin_role = db.query(Role).filter(Role.name == ADMIN_ROLE_NAME).first()
    if not admin_role:
        logger.warning("Role '%s' not found. Run seed_rbac first.", ADMIN_ROLE_NAME)
        return None

    existing = db.query(User).filter(User.username == settings.ADMIN_USERNAME).first()
    if existing:
        logger.info("Admin '%s' already exists, skipping.", settings.ADMIN_USERNAME)
        return existing

    admin = auth_service.create_user(
        db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD, ADMIN_ROLE_NAME,
    )
    logger.info("Created admin user: %s", settings.ADMIN_USERNAME)
    return admin
