"""
Permission and role endpoints
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, Query

from app.models.user import PermissionCreate, PermissionIds, RoleCreate, RoleUpdate, UserRoleUpdate
from app.repositories.base import serialize_doc
from app.services.permissions import PermissionService, RoleService
from ..deps import get_current_user, get_permission_service, get_role_service, require_permission

router = APIRouter()
roles_router = APIRouter()


@router.get("/")
def list_permissions(
    service: PermissionService = Depends(get_permission_service),
    _user=Depends(require_permission("permissions", "read"))
):
    return serialize_doc(service.find_all())


@router.post("/", status_code=201)
def create_permission(
    body: PermissionCreate,
    service: PermissionService = Depends(get_permission_service),
    _user=Depends(require_permission("permissions", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@router.post("/initialize")
def initialize_permissions(
    service: PermissionService = Depends(get_permission_service),
    _user=Depends(require_permission("permissions", "create"))
):
    return {"created": service.initialize_default_permissions()}


@router.get("/check")
def check_permission(
    resource: str = Query(...),
    action: str = Query(...),
    service: PermissionService = Depends(get_permission_service),
    user: Dict[str, Any] = Depends(get_current_user)
):
    """Whether the current user may perform action on resource"""
    return {"allowed": service.user_has_access(user, resource, action)}


@router.get("/users/{user_id}")
def get_user_permissions(
    user_id: str,
    service: PermissionService = Depends(get_permission_service),
    _user=Depends(require_permission("permissions", "read"))
):
    return serialize_doc(service.get_user_permissions(user_id))


@router.put("/users/{user_id}")
def update_user_permissions(
    user_id: str,
    body: PermissionIds,
    service: PermissionService = Depends(get_permission_service),
    _user=Depends(require_permission("permissions", "update"))
):
    """Replace the direct permissions of a user"""
    return serialize_doc(service.update_user_permissions(user_id, body.permission_ids))


# Roles

@roles_router.get("/")
def list_roles(
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "read"))
):
    return serialize_doc(service.find_all())


@roles_router.get("/with-permissions")
def list_roles_with_permissions(
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "read"))
):
    return serialize_doc(service.get_all_roles_with_permissions())


@roles_router.post("/", status_code=201)
def create_role(
    body: RoleCreate,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@roles_router.put("/users/{user_id}")
def assign_role(
    user_id: str,
    body: UserRoleUpdate,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("users", "change-role"))
):
    return serialize_doc(service.assign_role(user_id, body.role_id))


@roles_router.get("/{role_id}")
def get_role(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "read"))
):
    return serialize_doc(service.find_by_id(role_id))


@roles_router.patch("/{role_id}")
def update_role(
    role_id: str,
    body: RoleUpdate,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "update"))
):
    return serialize_doc(service.update(role_id, body.model_dump(exclude_unset=True)))


@roles_router.delete("/{role_id}")
def delete_role(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "delete"))
):
    return serialize_doc(service.delete(role_id))


@roles_router.get("/{role_id}/permissions")
def get_role_permissions(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "read"))
):
    return serialize_doc(service.get_role_permissions(role_id))


@roles_router.put("/{role_id}/permissions")
def update_role_permissions(
    role_id: str,
    body: PermissionIds,
    service: RoleService = Depends(get_role_service),
    _user=Depends(require_permission("permissions", "update"))
):
    return serialize_doc(service.update_role_permissions(role_id, body.permission_ids))
