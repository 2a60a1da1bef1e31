"""Authorization service — the per-request permission decision."""

from typing import List

from sqlalchemy.orm import Session

from backoffice.core.exceptions import ResourceNotFoundError
from backoffice.models.user import User
from backoffice.services.rbac_service import rbac_service

# Holding this permission passes every check.
CARTE_BLANCHE = "carte_blanche"


class AuthorizationService:
    """Answers whether a user's role grants a named permission.

    The rule is closed: either the role holds the exact (case-sensitive)
    permission name, or it holds ``carte_blanche``. There is no wildcard
    or prefix matching.
    """

    @staticmethod
    def get_user_permissions(db: Session, user_id: str) -> List[str]:
        """Names of the permissions held through the user's role.

        ``carte_blanche`` is reported as itself, not expanded.
        """
        user = db.query(User).filter(User.id == user_id).first()
        if user is None or user.role_id is None:
            return []
        try:
            _, permissions = rbac_service.get_role_with_permissions(db, user.role_id)
        except ResourceNotFoundError:
            return []
        return [p.name for p in permissions]

    @staticmethod
    def has_permission(db: Session, user_id: str, permission_name: str) -> bool:
        """True when the user's role holds ``permission_name`` or ``carte_blanche``."""
        granted = AuthorizationService.get_user_permissions(db, user_id)
        if CARTE_BLANCHE in granted:
            return True
        return permission_name in granted


authorization_service = AuthorizationService()
