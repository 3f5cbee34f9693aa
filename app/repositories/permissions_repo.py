from typing import Dict, Any, List

from bson import ObjectId

from app.repositories.base import BaseRepository, to_object_id


class PermissionsRepository(BaseRepository):
    collection_name = "permissions"

    def find_by_ids(self, ids: List[ObjectId]) -> List[Dict[str, Any]]:
        if not ids:
            return []
        return self.find_many({"_id": {"$in": ids}}, sort=[("resource", 1), ("action", 1)])


class UserPermissionsRepository(BaseRepository):
    collection_name = "user_permissions"

    def permission_ids_for(self, user_id: str) -> List[ObjectId]:
        return [link["permission_id"] for link in self.find_many({"user_id": to_object_id(user_id, "user_id")})]

    def replace(self, user_id: str, permission_ids: List[ObjectId]) -> None:
        uid = to_object_id(user_id, "user_id")
        self.delete_many({"user_id": uid})
        for pid in permission_ids:
            self.create({"user_id": uid, "permission_id": pid})


class RolesRepository(BaseRepository):
    collection_name = "roles"


class RolePermissionsRepository(BaseRepository):
    collection_name = "role_permissions"

    def permission_ids_for(self, role_id) -> List[ObjectId]:
        return [link["permission_id"] for link in self.find_many({"role_id": to_object_id(role_id, "role_id")})]

    def replace(self, role_id, permission_ids: List[ObjectId]) -> None:
        rid = to_object_id(role_id, "role_id")
        self.delete_many({"role_id": rid})
        for pid in permission_ids:
            self.create({"role_id": rid, "permission_id": pid})
