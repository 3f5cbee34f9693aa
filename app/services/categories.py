"""
Product category tree service

Categories keep an explicit parent reference, the list of direct children
(sub_categories) and a materialized level. Every mutation below keeps
level == parent.level + 1 (0 for roots) for the whole affected subtree.
"""
import logging
from collections import deque
from typing import Any, Dict, List, Optional, Set

from bson import ObjectId

from app.core.errors import BadRequestError, NotFoundError
from app.core.slug import generate_unique_slug
from app.repositories.base import to_object_id
from app.repositories.categories_repo import CategoriesRepository

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "filterable_attributes", "is_active")


def _summary(category: Dict[str, Any]) -> Dict[str, Any]:
    return {"_id": category["_id"], "name": category["name"], "slug": category["slug"]}


class CategoryService:
    def __init__(self, repo: Optional[CategoriesRepository] = None):
        self.repo = repo or CategoriesRepository()

    # -- lookups -------------------------------------------------------

    def _get_by_id_or_404(self, category_id: Any) -> Dict[str, Any]:
        category = self.repo.find_by_id(to_object_id(category_id, "category id"))
        if not category:
            raise NotFoundError("Category", f"Category with ID {category_id} not found")
        return category

    def _get_by_slug_or_404(self, slug: str) -> Dict[str, Any]:
        category = self.repo.find_by_slug(slug)
        if not category:
            raise NotFoundError("Category", f"Category with slug {slug} not found")
        return category

    def _with_children(self, category: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(category)
        result["sub_categories"] = self.repo.find_children(category["_id"])
        return result

    def _descendant_ids(self, root_id: ObjectId) -> Set[ObjectId]:
        seen: Set[ObjectId] = set()
        queue = deque([root_id])
        while queue:
            current = queue.popleft()
            for child in self.repo.find_children(current):
                if child["_id"] not in seen and child["_id"] != root_id:
                    seen.add(child["_id"])
                    queue.append(child["_id"])
        return seen

    def _cascade_levels(self, root_id: ObjectId, root_level: int) -> None:
        """Rewrite the level of every descendant of root_id"""
        visited = {root_id}
        queue = deque([(root_id, root_level)])
        while queue:
            current, level = queue.popleft()
            for child in self.repo.find_children(current):
                if child["_id"] in visited:
                    continue
                visited.add(child["_id"])
                if child.get("level") != level + 1:
                    self.repo.set_level(child["_id"], level + 1)
                queue.append((child["_id"], level + 1))

    # -- create --------------------------------------------------------

    def create_category(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        children = payload.pop("sub_categories", None) or []
        parent_id = payload.pop("parent_category", None)
        parent = self._get_by_id_or_404(parent_id) if parent_id else None

        category = self._create_node(payload, parent, children)
        logger.info(f"Created category {category['slug']} at level {category['level']}")
        return self._with_children(category)

    def _create_node(self, payload: Dict[str, Any], parent: Optional[Dict[str, Any]],
                     children: List[Dict[str, Any]]) -> Dict[str, Any]:
        doc = {
            "name": payload["name"],
            "slug": generate_unique_slug(payload["name"], self.repo.collection),
            "description": payload.get("description"),
            "filterable_attributes": payload.get("filterable_attributes") or {},
            "is_active": payload.get("is_active", True),
            "parent_category": parent["_id"] if parent else None,
            "level": parent.get("level", 0) + 1 if parent else 0,
            "sub_categories": [],
        }
        category = self.repo.create(doc)
        if parent:
            self.repo.add_child(parent["_id"], category["_id"])

        for child in children:
            self._create_child(category, child)
        return self.repo.find_by_id(category["_id"])

    def _create_child(self, parent: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        grandchildren = payload.pop("sub_categories", None) or []
        payload.pop("parent_category", None)

        existing = self.repo.find_child_by_name(parent["_id"], payload["name"])
        if existing:
            # same name under the same parent: reuse instead of duplicating
            self.repo.add_child(parent["_id"], existing["_id"])
            for grandchild in grandchildren:
                self._create_child(existing, grandchild)
            return existing
        return self._create_node(payload, parent, grandchildren)

    # -- read ----------------------------------------------------------

    def get_category_by_id(self, category_id: str) -> Dict[str, Any]:
        return self._with_children(self._get_by_id_or_404(category_id))

    def get_all_categories(self) -> List[Dict[str, Any]]:
        categories = self.repo.find_many({}, sort=[("level", 1), ("name", 1)])
        return [self._with_children(c) for c in categories]

    def get_category_by_slug(self, slug: str) -> Dict[str, Any]:
        category = self._get_by_slug_or_404(slug)
        result = self._with_children(category)
        result["full_sub_categories"] = self._build_tree(category["_id"], {category["_id"]})
        return result

    def _build_tree(self, parent_id: ObjectId, visited: Set[ObjectId]) -> List[Dict[str, Any]]:
        tree = []
        for child in self.repo.find_children(parent_id):
            if child["_id"] in visited:
                continue
            visited.add(child["_id"])
            node = dict(child)
            node["full_sub_categories"] = self._build_tree(child["_id"], visited)
            tree.append(node)
        return tree

    def get_simple_parent_categories(self) -> List[Dict[str, Any]]:
        roots = self.repo.find_many({"level": 0, "is_active": True}, sort=[("name", 1)])
        return [_summary(c) for c in roots]

    def get_sub_categories_by_parent_id(self, parent_id: str) -> List[Dict[str, Any]]:
        parent = self.repo.find_one({"_id": to_object_id(parent_id, "parent id"), "is_active": True})
        if not parent:
            raise NotFoundError("Category", f"Parent category with ID {parent_id} not found or inactive")
        return [_summary(c) for c in self.repo.find_children(parent["_id"], active_only=True)]

    # -- update --------------------------------------------------------

    def update_category(self, slug: str, data: Dict[str, Any]) -> Dict[str, Any]:
        category = self._get_by_slug_or_404(slug)

        if "parent_category" in data:
            self._move(category, data["parent_category"])

        updates = {k: data[k] for k in _EDITABLE_FIELDS if k in data and data[k] is not None}
        if updates:
            # the slug is kept on rename so existing links stay valid
            self.repo.update_by_id(category["_id"], updates)

        return self._with_children(self.repo.find_by_id(category["_id"]))

    def _move(self, category: Dict[str, Any], new_parent_id: Optional[str]) -> None:
        category_id = category["_id"]
        old_parent_id = category.get("parent_category")

        if new_parent_id:
            new_parent = self._get_by_id_or_404(new_parent_id)
            if new_parent["_id"] == category_id:
                raise BadRequestError("A category cannot be its own parent")
            if new_parent["_id"] in self._descendant_ids(category_id):
                raise BadRequestError("A category cannot be moved under one of its descendants")
            target_id, level = new_parent["_id"], new_parent.get("level", 0) + 1
        else:
            target_id, level = None, 0

        if old_parent_id and old_parent_id != target_id:
            self.repo.remove_child(old_parent_id, category_id)
        if target_id:
            self.repo.add_child(target_id, category_id)

        self.repo.update_by_id(category_id, {"parent_category": target_id, "level": level})
        self._cascade_levels(category_id, level)
        logger.info(f"Moved category {category['slug']} to level {level}")

    def set_filters_for_category(self, category_id: str, filters: Dict[str, Any]) -> Dict[str, Any]:
        category = self._get_by_id_or_404(category_id)
        return self.repo.update_by_id(category["_id"], {"filterable_attributes": filters})

    def get_filters_by_category(self, category_id: str) -> Dict[str, Any]:
        return self._get_by_id_or_404(category_id).get("filterable_attributes") or {}

    # -- delete --------------------------------------------------------

    def delete_category(self, slug: str) -> Dict[str, Any]:
        category = self._get_by_slug_or_404(slug)
        category_id = category["_id"]

        for child in self.repo.find_children(category_id):
            self.repo.update_by_id(child["_id"], {"parent_category": None, "level": 0})
            self._cascade_levels(child["_id"], 0)

        if category.get("parent_category"):
            self.repo.remove_child(category["parent_category"], category_id)

        self.repo.delete_by_id(category_id)
        logger.info(f"Deleted category {slug}")
        return category
