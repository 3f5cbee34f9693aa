from typing import Optional, Dict, Any, List

from app.repositories.base import BaseRepository


class ReviewsRepository(BaseRepository):
    collection_name = "reviews"

    def find_by_user_and_product(self, user_id: str, product_slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"user_id": user_id, "product_slug": product_slug})

    def active_for_product(self, product_slug: str) -> List[Dict[str, Any]]:
        return self.find_many(
            {"product_slug": product_slug, "is_active": True},
            sort=[("created_at", -1)]
        )
