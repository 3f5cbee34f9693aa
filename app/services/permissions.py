"""
Permission catalogue, per-user grants and roles
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.permissions_repo import (
    PermissionsRepository,
    RolePermissionsRepository,
    RolesRepository,
    UserPermissionsRepository,
)
from app.repositories.users_repo import UsersRepository

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

DEFAULT_PERMISSIONS = {
    "banner": ["create", "read", "update", "delete", "activate"],
    "categories-post": ["create", "read", "update", "delete", "list", "publish", "unpublish"],
    "categories-product": ["create", "read", "update", "delete"],
    "checkout": ["create", "read", "update", "delete"],
    "contact": ["create", "read", "list", "delete"],
    "pages": ["create", "read", "update", "delete"],
    "info-website": ["create", "read", "update", "delete", "activate"],
    "orders": ["create", "read", "update", "delete"],
    "permissions": ["create", "read", "update", "delete"],
    "posts": ["create", "read", "update", "delete", "list", "publish", "unpublish",
              "feature", "unfeature", "approve", "reject", "export"],
    "products": ["create", "read", "update", "delete"],
    "reviews": ["create", "read", "update", "delete"],
    "users": ["create", "read", "update", "delete", "list", "activate", "deactivate",
              "change-role", "reset-password"],
    "vietqr-config": ["create", "read", "update", "delete"],
    "vouchers": ["create", "read", "update", "delete"],
    "redirects": ["create", "read", "update", "delete"],
    "filters": ["create", "read", "update", "delete"],
}


class PermissionService:
    def __init__(self):
        self.permissions = PermissionsRepository()
        self.user_permissions = UserPermissionsRepository()
        self.users = UsersRepository()

    def initialize_default_permissions(self) -> int:
        created = 0
        for resource, actions in DEFAULT_PERMISSIONS.items():
            for action in actions:
                if not self.permissions.exists({"resource": resource, "action": action}):
                    self.permissions.create({"resource": resource, "action": action})
                    created += 1
        if created:
            logger.info(f"Initialized {created} default permissions")
        return created

    def find_all(self) -> List[Dict[str, Any]]:
        return self.permissions.find_many({}, sort=[("resource", 1), ("action", 1)])

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.permissions.exists({"resource": data["resource"], "action": data["action"]}):
            raise BadRequestError(f"Permission {data['resource']}:{data['action']} already exists")
        return self.permissions.create(dict(data))

    def resolve_permission_ids(self, permission_ids: List[str]):
        ids = [to_object_id(pid, "permission id") for pid in permission_ids]
        found = {p["_id"] for p in self.permissions.find_by_ids(ids)}
        missing = [str(pid) for pid in ids if pid not in found]
        if missing:
            raise NotFoundError("Permission", f"Permissions not found: {', '.join(missing)}")
        return list(dict.fromkeys(ids))

    def get_user_permissions(self, user_id: str) -> List[Dict[str, Any]]:
        return self.permissions.find_by_ids(self.user_permissions.permission_ids_for(user_id))

    def update_user_permissions(self, user_id: str, permission_ids: List[str]) -> List[Dict[str, Any]]:
        if not self.users.find_by_id(to_object_id(user_id, "user id")):
            raise NotFoundError("User", f"User with ID {user_id} not found")
        self.user_permissions.replace(user_id, self.resolve_permission_ids(permission_ids))
        return self.get_user_permissions(user_id)

    def check_user_permission(self, user_id: str, resource: str, action: str) -> bool:
        permission = self.permissions.find_one({"resource": resource, "action": action})
        if not permission:
            return False
        if permission["_id"] in self.user_permissions.permission_ids_for(user_id):
            return True
        user = self.users.find_by_id(to_object_id(user_id, "user id"))
        if user and user.get("role_id"):
            return permission["_id"] in RolePermissionsRepository().permission_ids_for(user["role_id"])
        return False

    def user_has_access(self, user: Dict[str, Any], resource: str, action: str) -> bool:
        if user.get("role") == ADMIN_ROLE:
            return True
        return self.check_user_permission(str(user["_id"]), resource, action)


class RoleService:
    def __init__(self, permissions: Optional[PermissionService] = None):
        self.roles = RolesRepository()
        self.role_permissions = RolePermissionsRepository()
        self.users = UsersRepository()
        self.permission_service = permissions or PermissionService()

    def find_all(self) -> List[Dict[str, Any]]:
        return self.roles.find_many({}, sort=[("name", 1)])

    def find_by_id(self, role_id: str) -> Dict[str, Any]:
        role = self.roles.find_by_id(to_object_id(role_id, "role id"))
        if not role:
            raise NotFoundError("Role", f"Role with ID {role_id} not found")
        return role

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        permission_ids = payload.pop("permission_ids", None) or []
        if self.roles.exists({"name": payload["name"]}):
            raise BadRequestError(f"Role {payload['name']} already exists")
        resolved = self.permission_service.resolve_permission_ids(permission_ids)
        role = self.roles.create(payload)
        if resolved:
            self.role_permissions.replace(role["_id"], resolved)
        return role

    def update(self, role_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        role = self.find_by_id(role_id)
        payload = {k: v for k, v in data.items() if v is not None}
        if payload.get("name") and payload["name"] != role["name"] and self.roles.exists({"name": payload["name"]}):
            raise BadRequestError(f"Role {payload['name']} already exists")
        return self.roles.update_by_id(role["_id"], payload)

    def delete(self, role_id: str) -> Dict[str, Any]:
        role = self.find_by_id(role_id)
        self.users.unset_role(role["_id"])
        self.role_permissions.delete_many({"role_id": role["_id"]})
        self.roles.delete_by_id(role["_id"])
        logger.info(f"Deleted role {role['name']}")
        return role

    def get_role_permissions(self, role_id: str) -> List[Dict[str, Any]]:
        role = self.find_by_id(role_id)
        ids = self.role_permissions.permission_ids_for(role["_id"])
        return self.permission_service.permissions.find_by_ids(ids)

    def update_role_permissions(self, role_id: str, permission_ids: List[str]) -> List[Dict[str, Any]]:
        role = self.find_by_id(role_id)
        self.role_permissions.replace(role["_id"], self.permission_service.resolve_permission_ids(permission_ids))
        return self.get_role_permissions(role_id)

    def get_all_roles_with_permissions(self) -> List[Dict[str, Any]]:
        return [
            {**role, "permissions": self.get_role_permissions(str(role["_id"]))}
            for role in self.find_all()
        ]

    def assign_role(self, user_id: str, role_id: Optional[str]) -> Dict[str, Any]:
        user = self.users.find_by_id(to_object_id(user_id, "user id"))
        if not user:
            raise NotFoundError("User", f"User with ID {user_id} not found")
        if role_id is None:
            return self.users.update_by_id(user["_id"], {}, unset=["role_id"])
        role = self.find_by_id(role_id)
        return self.users.update_by_id(user["_id"], {"role_id": role["_id"]})
