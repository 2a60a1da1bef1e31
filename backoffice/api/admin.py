"""Admin API router — RBAC management, users, and contact submissions."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.db.session import get_db
from backoffice.schemas.schemas import (
    ContactOut, CurrentUserOut, PermissionOut, RoleCreate, RoleOut, RoleUpdate,
    SuccessResponse, UserOut, UserRoleUpdate,
)
from backoffice.services.auth_service import auth_service
from backoffice.services.authorization_service import authorization_service
from backoffice.services.contact_service import contact_service
from backoffice.services.rbac_service import rbac_service
from backoffice.core.security import (
    get_current_user_id, require_manage_roles, require_manage_users, require_view_forms,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/user", response_model=CurrentUserOut)
def get_me(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Current user with the permission names held through their role."""
    user = auth_service.get_user(db, user_id)
    return CurrentUserOut(
        id=user.id,
        username=user.username,
        role=RoleOut.model_validate(user.role) if user.role else None,
        permissions=authorization_service.get_user_permissions(db, user_id),
    )


@router.get("/contacts")
def list_contacts(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_view_forms),
):
    """Submitted contact forms, newest first."""
    return {
        "contacts": [
            ContactOut.model_validate(c) for c in contact_service.list_contacts(db)
        ],
    }


# ---- Users ----

@router.get("/users")
def list_users(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_users),
):
    """All users with their roles."""
    return {
        "users": [
            UserOut.model_validate(u) for u in rbac_service.get_all_users_with_roles(db)
        ],
    }


@router.put("/users/{target_id}/role")
def set_user_role(
    target_id: str,
    body: UserRoleUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_users),
):
    """Reassign a user's role, or clear it with ``role_id: null``."""
    user = rbac_service.set_user_role(db, target_id, body.role_id)
    return {"user": UserOut.model_validate(user)}


# ---- Roles ----

@router.get("/roles")
def list_roles(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    return {"roles": [RoleOut.model_validate(r) for r in rbac_service.get_all_roles(db)]}


@router.post("/roles")
def create_role(
    body: RoleCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    role = rbac_service.create_role(db, body.name, body.description)
    return {"role": RoleOut.model_validate(role)}


@router.put("/roles/{role_id}")
def update_role(
    role_id: int,
    body: RoleUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    """Update name and/or description; only fields present in the body change."""
    fields = body.model_dump(exclude_unset=True)
    role = rbac_service.update_role(db, role_id, **fields)
    return {"role": RoleOut.model_validate(role)}


@router.delete("/roles/{role_id}", response_model=SuccessResponse)
def delete_role(
    role_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    """Delete a role, its grants, and its user assignments in one transaction."""
    rbac_service.delete_role(db, role_id)
    return SuccessResponse()


@router.get("/roles/{role_id}/permissions")
def get_role_permissions(
    role_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    _, permissions = rbac_service.get_role_with_permissions(db, role_id)
    return {"permissions": [PermissionOut.model_validate(p) for p in permissions]}


# ---- Permissions ----

@router.get("/permissions")
def list_permissions(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    return {
        "permissions": [
            PermissionOut.model_validate(p) for p in rbac_service.get_all_permissions(db)
        ],
    }


@router.post("/roles/{role_id}/permissions/{permission_id}", response_model=SuccessResponse)
def grant_permission(
    role_id: int,
    permission_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    rbac_service.grant_permission(db, role_id, permission_id)
    return SuccessResponse()


@router.delete("/roles/{role_id}/permissions/{permission_id}", response_model=SuccessResponse)
def revoke_permission(
    role_id: int,
    permission_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_manage_roles),
):
    rbac_service.revoke_permission(db, role_id, permission_id)
    return SuccessResponse()
