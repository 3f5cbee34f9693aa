from typing import Optional, Dict, Any

from bson import ObjectId

from app.repositories.base import BaseRepository


class VietQRConfigRepository(BaseRepository):
    collection_name = "vietqr_configs"

    def find_active(self) -> Optional[Dict[str, Any]]:
        return self.find_one({"active": True}, sort=[("updated_at", -1)])

    def deactivate_all(self, except_id: Optional[ObjectId] = None) -> int:
        query: Dict[str, Any] = {"active": True}
        if except_id is not None:
            query["_id"] = {"$ne": except_id}
        return self.update_raw(query, {"$set": {"active": False}}, many=True)
