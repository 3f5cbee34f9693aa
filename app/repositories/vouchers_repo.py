from datetime import datetime
from typing import Optional, Dict, Any

from pymongo import ReturnDocument

from app.core.decorators import handle_db_errors
from app.repositories.base import BaseRepository


class VouchersRepository(BaseRepository):
    collection_name = "vouchers"

    def find_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"code": code})

    @handle_db_errors
    def increment_usage(self, voucher_id, quantity: int) -> Optional[Dict[str, Any]]:
        """Increase used_count only while it is still below quantity"""
        return self.collection.find_one_and_update(
            {"_id": voucher_id, "used_count": {"$lt": quantity}},
            {"$inc": {"used_count": 1}, "$set": {"updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER
        )
