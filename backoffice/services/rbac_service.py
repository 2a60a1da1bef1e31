"""RBAC service — roles, permissions, grants, and user role assignment."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.core.exceptions import ResourceNotFoundError, ValidationError
from backoffice.models.role import Role, Permission, RolePermission
from backoffice.models.user import User

logger = logging.getLogger("backoffice")

_UNSET = object()


class RBACService:
    """Reads and writes the role/permission model."""

    # ---- Reads ----

    @staticmethod
    def get_role(db: Session, role_id: int) -> Role:
        """Get a role by id."""
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise ResourceNotFoundError(f"Role {role_id} not found")
        return role

    @staticmethod
    def get_permission(db: Session, permission_id: int) -> Permission:
        """Get a permission by id."""
        permission = db.query(Permission).filter(Permission.id == permission_id).first()
        if not permission:
            raise ResourceNotFoundError(f"Permission {permission_id} not found")
        return permission

    @staticmethod
    def get_role_permissions(db: Session, role_id: int) -> List[Permission]:
        """Permissions currently granted to a role, without checking the role exists."""
        return (
            db.query(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .filter(RolePermission.role_id == role_id)
            .order_by(Permission.id)
            .all()
        )

    @staticmethod
    def get_role_with_permissions(db: Session, role_id: int) -> Tuple[Role, List[Permission]]:
        """Get a role together with its current permission set.

        Raises:
            ResourceNotFoundError: If the role does not exist.
        """
        role = RBACService.get_role(db, role_id)
        return role, RBACService.get_role_permissions(db, role_id)

    @staticmethod
    def get_all_roles(db: Session) -> List[Role]:
        return db.query(Role).order_by(Role.id).all()

    @staticmethod
    def get_all_permissions(db: Session) -> List[Permission]:
        return db.query(Permission).order_by(Permission.id).all()

    @staticmethod
    def get_all_users_with_roles(db: Session) -> List[User]:
        """All users; each carries its optional role via the joined relationship."""
        return db.query(User).order_by(User.created_at, User.username).all()

    # ---- Role mutations ----

    @staticmethod
    def _ensure_name_free(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
        query = db.query(Role).filter(Role.name == name)
        if exclude_id is not None:
            query = query.filter(Role.id != exclude_id)
        if query.first():
            raise ValidationError(f"Role '{name}' already exists")

    @staticmethod
    def create_role(db: Session, name: str, description: Optional[str] = None) -> Role:
        """Create a role. Names must be non-blank and unique."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name is required")
        RBACService._ensure_name_free(db, name)

        role = Role(name=name, description=description)
        db.add(role)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValidationError(f"Role '{name}' already exists")
        db.refresh(role)
        logger.info("Created role %s (%s)", role.id, role.name)
        return role

    @staticmethod
    def update_role(
        db: Session,
        role_id: int,
        name: Optional[str] = None,
        description=_UNSET,
    ) -> Role:
        """Update a role's name and/or description.

        ``description`` may be set to None explicitly to clear it.
        """
        role = RBACService.get_role(db, role_id)

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Role name is required")
            RBACService._ensure_name_free(db, name, exclude_id=role_id)
            role.name = name
        if description is not _UNSET:
            role.description = description

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValidationError(f"Role '{name}' already exists")
        db.refresh(role)
        logger.info("Updated role %s", role_id)
        return role

    @staticmethod
    def delete_role(db: Session, role_id: int) -> None:
        """Delete a role with its grants, detaching any users that held it.

        All three steps commit together or not at all.
        """
        role = RBACService.get_role(db, role_id)
        try:
            db.query(RolePermission).filter(
                RolePermission.role_id == role_id,
            ).delete(synchronize_session=False)
            detached = db.query(User).filter(
                User.role_id == role_id,
            ).update({"role_id": None}, synchronize_session=False)
            db.query(Role).filter(Role.id == role_id).delete(synchronize_session=False)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Role %s deletion rolled back", role_id)
            raise
        # Bulk deletes bypass the identity map; drop the stale instance
        db.expunge(role)
        logger.info("Deleted role %s (detached %s users)", role_id, detached)

    # ---- Grants ----

    @staticmethod
    def grant_permission(db: Session, role_id: int, permission_id: int) -> None:
        """Grant a permission to a role. Granting a held permission is a no-op."""
        RBACService.get_role(db, role_id)
        RBACService.get_permission(db, permission_id)

        existing = db.query(RolePermission).filter(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        ).first()
        if existing:
            return

        db.add(RolePermission(role_id=role_id, permission_id=permission_id))
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent grant of the same pair
            db.rollback()
            return
        logger.info("Granted permission %s to role %s", permission_id, role_id)

    @staticmethod
    def revoke_permission(db: Session, role_id: int, permission_id: int) -> None:
        """Revoke a permission from a role. Revoking an unheld permission is a no-op."""
        deleted = db.query(RolePermission).filter(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        ).delete(synchronize_session=False)
        db.commit()
        if deleted:
            logger.info("Revoked permission %s from role %s", permission_id, role_id)

    # ---- Users ----

    @staticmethod
    def set_user_role(db: Session, user_id: str, role_id: Optional[int]) -> User:
        """Assign a role to a user, or clear it with None."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        if role_id is not None:
            RBACService.get_role(db, role_id)

        user.role_id = role_id
        db.commit()
        db.refresh(user)
        logger.info("Set role of user %s to %s", user_id, role_id)
        return user

    # ---- Seeding helpers ----

    @staticmethod
    def get_or_create_permission(
        db: Session, name: str, description: Optional[str] = None,
    ) -> Permission:
        """Look up a permission by name, creating it if missing."""
        permission = db.query(Permission).filter(Permission.name == name).first()
        if permission is None:
            permission = Permission(name=name, description=description)
            db.add(permission)
            db.flush()
        return permission


rbac_service = RBACService()
