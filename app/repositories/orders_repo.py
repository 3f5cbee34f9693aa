from typing import Optional, Dict, Any, List

from bson import ObjectId

from app.repositories.base import BaseRepository


class OrdersRepository(BaseRepository):
    collection_name = "orders"

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"slug": slug})

    def find_completed_with_product(self, product_id: ObjectId) -> List[Dict[str, Any]]:
        return self.find_many({"status": "completed", "order_items.product": product_id})


class CheckoutsRepository(BaseRepository):
    collection_name = "checkouts"

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"slug": slug})

    def find_by_order(self, order_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.find_one({"order_id": order_id}, sort=[("created_at", -1)])

    def find_by_tx_hash(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"payment_method_info.transaction_hash": tx_hash})

    def has_paid_checkout(self, order_ids: List[ObjectId], user_id: str) -> bool:
        if not order_ids:
            return False
        return self.exists({
            "order_id": {"$in": order_ids},
            "user_id": user_id,
            "payment_status": "paid",
        })
