import re
from typing import Optional, Dict, Any, List

from bson import ObjectId

from app.repositories.base import BaseRepository, to_object_id


class PostsRepository(BaseRepository):
    collection_name = "posts"

    def find_by_slug(self, slug: str, include_hidden: bool = True) -> Optional[Dict[str, Any]]:
        query: Dict[str, Any] = {"slug": slug, "is_deleted": False}
        if not include_hidden:
            query["is_visible"] = True
        return self.find_one(query)

    def slug_taken(self, slug: str) -> bool:
        return self.exists({"slug": slug})

    @staticmethod
    def listing_query(include_hidden: bool = False, search: Optional[str] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {"is_deleted": False}
        if not include_hidden:
            query["is_visible"] = True
        if search:
            pattern = re.escape(search.strip())
            query["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"author": {"$regex": pattern, "$options": "i"}},
            ]
        return query

    def transfer(self, from_user_id: str, to_user_id: str,
                 post_ids: Optional[List[ObjectId]] = None) -> int:
        query: Dict[str, Any] = {"user_id": from_user_id, "is_deleted": False}
        if post_ids is not None:
            query["_id"] = {"$in": post_ids}
        return self.update_raw(query, {"$set": {"user_id": to_user_id}}, many=True)


class PostCategoriesRepository(BaseRepository):
    collection_name = "post_categories"

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"slug": slug, "is_deleted": False})

    def find_children(self, parent_id: ObjectId) -> List[Dict[str, Any]]:
        return self.find_many(
            {"parent": to_object_id(parent_id), "is_deleted": False},
            sort=[("sort_order", 1), ("name", 1)]
        )

    def add_child(self, parent_id: ObjectId, child_id: ObjectId) -> None:
        self.update_raw({"_id": parent_id}, {"$addToSet": {"children": child_id}})

    def remove_child(self, parent_id: ObjectId, child_id: ObjectId) -> None:
        self.update_raw({"_id": parent_id}, {"$pull": {"children": child_id}})
