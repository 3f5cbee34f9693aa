from typing import Optional, Dict, Any, List

from app.repositories.base import BaseRepository, to_object_id


class UsersRepository(BaseRepository):
    collection_name = "users"

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        if not email:
            return None
        return self.find_one({"email": email.strip().lower()})

    def find_active_by_id(self, uid: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"_id": to_object_id(uid), "is_active": True})

    def list_public(self) -> List[Dict[str, Any]]:
        users = self.find_many({}, sort=[("created_at", -1)])
        for user in users:
            user.pop("password_hash", None)
        return users

    def unset_role(self, role_id) -> int:
        """Detach a deleted role from every user holding it"""
        return self.update_raw(
            {"role_id": to_object_id(role_id)},
            {"$unset": {"role_id": ""}},
            many=True
        )
