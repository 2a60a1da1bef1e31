"""Pydantic schemas for API request/response serialization."""

from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime


# ---- Auth ----
class LoginRequest(BaseModel):
    username: str
    password: str


# ---- RBAC ----
class RoleOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RoleCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=255)

class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=255)

class PermissionOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


# ---- User ----
class UserOut(BaseModel):
    id: str
    username: str
    role_id: Optional[int] = None
    role: Optional[RoleOut] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CurrentUserOut(BaseModel):
    id: str
    username: str
    role: Optional[RoleOut] = None
    permissions: List[str] = []

class UserRoleUpdate(BaseModel):
    role_id: Optional[int] = Field(
        ..., validation_alias=AliasChoices("role_id", "roleId"),
    )


# ---- Contact ----
class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    company: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=1)

class ContactOut(BaseModel):
    id: int
    name: str
    email: str
    company: Optional[str] = None
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str

class SuccessResponse(BaseModel):
    success: bool = True
