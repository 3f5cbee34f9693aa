from typing import Optional, Dict, Any, List

from app.repositories.base import BaseRepository


class ProductsRepository(BaseRepository):
    collection_name = "products"

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"slug": slug})

    def find_search_candidates(self) -> List[Dict[str, Any]]:
        """Projection used by name/SKU search"""
        return list(self.collection.find({}, {"name": 1, "sku": 1, "slug": 1, "created_at": 1}))

    def find_by_slugs(self, slugs: List[str]) -> List[Dict[str, Any]]:
        return self.find_many({"slug": {"$in": slugs}})
