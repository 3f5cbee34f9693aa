"""
Auth and user administration endpoints
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends

from app.core.errors import BadRequestError
from app.models.user import LoginRequest, RegisterRequest, UserRoleUpdate, UserStatusUpdate
from app.repositories.base import serialize_doc
from app.services import auth as auth_service
from ..deps import get_current_user, require_permission

router = APIRouter()
users_router = APIRouter()


@router.post("/register", status_code=201)
def register(body: RegisterRequest):
    return serialize_doc(auth_service.create_user(body.email, body.password, body.name))


@router.post("/login")
def login(body: LoginRequest):
    """Exchange email and password for a bearer token"""
    return serialize_doc(auth_service.login_user(body.email, body.password))


@router.get("/me")
def me(user: Dict[str, Any] = Depends(get_current_user)):
    return serialize_doc(user)


@users_router.get("/")
def list_users(_user=Depends(require_permission("users", "list"))):
    return serialize_doc(auth_service.list_users())


@users_router.patch("/{user_id}/status")
def set_user_status(
    user_id: str,
    body: UserStatusUpdate,
    _user=Depends(require_permission("users", "activate"))
):
    return serialize_doc(auth_service.set_user_active(user_id, body.is_active))


@users_router.patch("/{user_id}/role")
def change_user_role(
    user_id: str,
    body: UserRoleUpdate,
    _user=Depends(require_permission("users", "change-role"))
):
    if not body.role:
        raise BadRequestError("role is required")
    return serialize_doc(auth_service.change_role(user_id, body.role))
