"""Role, Permission, and RolePermission models for RBAC."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from backoffice.db.base import Base


class Role(Base):
    """Named bundle of permissions assignable to users."""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class Permission(Base):
    """Atomic capability, identified by its name."""
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=True)


class RolePermission(Base):
    """Association between roles and permissions.

    The composite primary key makes a role's grants a set.
    """
    __tablename__ = "role_permissions"

    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id = Column(
        Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True
    )
