"""Seed the default permission catalogue and the admin role."""

import logging

from sqlalchemy.orm import Session

from backoffice.models.role import Role, RolePermission
from backoffice.services.rbac_service import rbac_service

logger = logging.getLogger("backoffice")

DEFAULT_PERMISSIONS = [
    ("view_forms", "View submitted contact forms"),
    ("manage_users", "Manage system users and assign roles"),
    ("view_settings", "View and modify system settings"),
    ("manage_roles", "Manage roles and permissions"),
    ("carte_blanche", "Full access - bypasses all permission checks"),
]

ADMIN_ROLE_NAME = "admin"


def seed_rbac(db: Session) -> Role:
    """Insert default permissions and an admin role holding all of them.

    Safe to run repeatedly; existing rows are left alone.
    """
    permissions = [
        rbac_service.get_or_create_permission(db, name, description)
        for name, description in DEFAULT_PERMISSIONS
    ]

    admin_role = db.query(Role).filter(Role.name == ADMIN_ROLE_NAME).first()
    if admin_role is None:
        admin_role = Role(name=ADMIN_ROLE_NAME, description="Administrator with full access")
        db.add(admin_role)
        db.flush()

    held = {
        rp.permission_id
        for rp in db.query(RolePermission).filter(RolePermission.role_id == admin_role.id)
    }
    for permission in permissions:
        if permission.id not in held:
            db.add(RolePermission(role_id=admin_role.id, permission_id=permission.id))

    db.commit()
    db.refresh(admin_role)
    logger.info("Seeded %d permissions and role '%s'", len(permissions), ADMIN_ROLE_NAME)
    return admin_role
