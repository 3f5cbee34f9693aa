"""
User, permission and role models
"""
from typing import List, Optional
from pydantic import BaseModel, Field, validator


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=6)
    name: Optional[str] = None

    @validator("email")
    def validate_email(cls, v):
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email address")
        return v


class UserStatusUpdate(BaseModel):
    is_active: bool


class UserRoleUpdate(BaseModel):
    role: Optional[str] = None
    role_id: Optional[str] = None


class PermissionCreate(BaseModel):
    resource: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    description: Optional[str] = None


class PermissionIds(BaseModel):
    permission_ids: List[str] = Field(default_factory=list)


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    permission_ids: List[str] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
