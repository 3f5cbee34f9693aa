from datetime import datetime
from typing import Optional, Dict, Any

from pymongo import ReturnDocument

from app.core.decorators import handle_db_errors
from app.repositories.base import BaseRepository


class RedirectsRepository(BaseRepository):
    collection_name = "redirects"

    def find_by_old_path(self, old_path: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"old_path": old_path})

    @handle_db_errors
    def hit(self, old_path: str) -> Optional[Dict[str, Any]]:
        """Fetch an active redirect and record the access in one round trip"""
        return self.collection.find_one_and_update(
            {"old_path": old_path, "is_active": True},
            {"$inc": {"hit_count": 1}, "$set": {"last_accessed": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER
        )
