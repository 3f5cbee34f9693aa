from typing import Optional, Dict, Any, List

from bson import ObjectId

from app.repositories.base import BaseRepository


class PagesRepository(BaseRepository):
    collection_name = "pages"

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"slug": slug})


class InfoWebsiteRepository(BaseRepository):
    collection_name = "info_websites"

    def find_active(self) -> Optional[Dict[str, Any]]:
        return self.find_one({"is_active": True}, sort=[("updated_at", -1)])

    def deactivate_others(self, keep_id: ObjectId) -> int:
        return self.update_raw(
            {"_id": {"$ne": keep_id}, "is_active": True},
            {"$set": {"is_active": False}},
            many=True
        )


class FiltersRepository(BaseRepository):
    collection_name = "filters"

    def find_by_category(self, category_id: ObjectId) -> List[Dict[str, Any]]:
        return self.find_many({"categories": category_id}, sort=[("name", 1)])



class BannersRepository(BaseRepository):
    collection_name = "banners"

    def find_ordered(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self.find_many(query, sort=[("order", 1), ("created_at", -1)])


class ContactsRepository(BaseRepository):
    collection_name = "contacts"
