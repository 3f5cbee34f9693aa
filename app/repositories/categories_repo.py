from typing import Optional, Dict, Any, List

from bson import ObjectId

from app.repositories.base import BaseRepository, to_object_id


class CategoriesRepository(BaseRepository):
    collection_name = "categories"

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"slug": slug})

    def find_children(self, parent_id: ObjectId, active_only: bool = False) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {"parent_category": to_object_id(parent_id)}
        if active_only:
            query["is_active"] = True
        return self.find_many(query, sort=[("name", 1)])

    def find_child_by_name(self, parent_id: Optional[ObjectId], name: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"parent_category": parent_id, "name": name})

    def add_child(self, parent_id: ObjectId, child_id: ObjectId) -> None:
        self.update_raw({"_id": parent_id}, {"$addToSet": {"sub_categories": child_id}})

    def remove_child(self, parent_id: ObjectId, child_id: ObjectId) -> None:
        self.update_raw({"_id": parent_id}, {"$pull": {"sub_categories": child_id}})

    def set_level(self, category_id: ObjectId, level: int) -> None:
        self.update_raw({"_id": category_id}, {"$set": {"level": level}})
