"""Models package — import all models so metadata.create_all can discover them."""

from backoffice.models.role import Role, Permission, RolePermission
from backoffice.models.user import User, UserSession
from backoffice.models.contact import Contact

__all__ = [
    "Role", "Permission", "RolePermission",
    "User", "UserSession", "Contact",
]
