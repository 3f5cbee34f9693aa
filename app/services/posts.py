"""
Blog posts and the post category tree

Post categories form their own hierarchy, separate from the product
categories. Each node stores a materialized ``path`` built from its
ancestors' slugs so a whole branch can be read back with one query.
"""
import logging
from collections import deque
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.core.slug import generate_unique_slug, slugify
from app.repositories.base import to_object_id
from app.repositories.posts_repo import PostCategoriesRepository, PostsRepository
from app.services.redirects import RedirectService

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
POST_STATUSES = ("draft", "pending", "approved", "rejected")


class PostService:
    def __init__(self, repo: Optional[PostsRepository] = None,
                 redirects: Optional[RedirectService] = None):
        self.repo = repo or PostsRepository()
        self.redirects = redirects or RedirectService()

    def _get_or_404(self, slug: str, include_hidden: bool = True) -> Dict[str, Any]:
        post = self.repo.find_by_slug(slug, include_hidden=include_hidden)
        if not post:
            raise NotFoundError("Post", f"Post with slug {slug} not found")
        return post

    def create(self, data: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = dict(data)
        payload["slug"] = generate_unique_slug(payload.get("slug") or payload["name"], self.repo.collection)
        if not payload.get("published_date"):
            payload["published_date"] = datetime.utcnow()

        user = user or {}
        payload["author"] = (user.get("name") or "").strip() or "Admin"
        if user.get("_id"):
            payload["user_id"] = str(user["_id"])
            payload["created_by"] = payload["author"]
        payload.setdefault("status", "draft")
        payload.setdefault("is_visible", True)
        payload.setdefault("is_pinned", False)
        payload["is_deleted"] = False
        post = self.repo.create(payload)
        logger.info(f"Created post {post['slug']} by {post['author']}")
        return post

    def find_all(self, page: int = 1, limit: int = PAGE_SIZE, search: Optional[str] = None,
                 include_hidden: bool = False) -> Dict[str, Any]:
        query = self.repo.listing_query(include_hidden=include_hidden, search=search)
        return self.repo.paginate(query, page, limit, sort=[("is_pinned", -1), ("created_at", -1)])

    def find_by_user(self, user_id: str, page: int = 1, limit: int = PAGE_SIZE) -> Dict[str, Any]:
        return self.repo.paginate(
            {"user_id": user_id, "is_deleted": False}, page, limit, sort=[("created_at", -1)]
        )

    def find_by_status(self, status: str, page: int = 1, limit: int = PAGE_SIZE,
                       include_hidden: bool = False) -> Dict[str, Any]:
        if status not in POST_STATUSES:
            raise BadRequestError(f"Unknown post status {status}")
        query = self.repo.listing_query(include_hidden=include_hidden)
        query["status"] = status
        return self.repo.paginate(query, page, limit, sort=[("created_at", -1)])

    def find_one(self, slug: str, include_hidden: bool = False) -> Dict[str, Any]:
        return self._get_or_404(slug, include_hidden=include_hidden)

    def update(self, slug: str, data: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        post = self._get_or_404(slug)
        payload = {k: v for k, v in data.items() if v is not None}

        new_slug = slugify(payload.pop("slug", "") or "")
        if new_slug and new_slug != slug:
            if self.repo.slug_taken(new_slug):
                raise BadRequestError(f"Post slug {new_slug} is already in use")
            payload["slug"] = new_slug
        if user:
            payload["updated_by"] = user.get("name") or user.get("email")

        updated = self.repo.update_by_id(post["_id"], payload)
        if payload.get("slug"):
            self._record_redirect(slug, payload["slug"])
        return updated

    def update_slug(self, slug: str, new_slug: str) -> Dict[str, Any]:
        post = self._get_or_404(slug)
        new_slug = slugify(new_slug) if new_slug else ""
        if not new_slug:
            raise BadRequestError("New slug is required")
        if new_slug == slug:
            return post
        if self.repo.slug_taken(new_slug):
            raise BadRequestError(f"Post slug {new_slug} is already in use")
        updated = self.repo.update_by_id(post["_id"], {"slug": new_slug})
        self._record_redirect(slug, new_slug)
        return updated

    def _record_redirect(self, old_slug: str, new_slug: str) -> None:
        try:
            self.redirects.create({
                "old_path": f"/posts/{old_slug}",
                "new_path": f"/posts/{new_slug}",
                "type": "post",
                "status_code": 301,
                "is_active": True,
            })
        except Exception:
            logger.exception(f"Could not create redirect for post slug {old_slug} -> {new_slug}")

    def set_visibility(self, slug: str, is_visible: bool) -> Dict[str, Any]:
        post = self._get_or_404(slug)
        return self.repo.update_by_id(post["_id"], {"is_visible": is_visible})

    def set_status(self, slug: str, status: str, approver: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if status not in POST_STATUSES:
            raise BadRequestError(f"Unknown post status {status}")
        post = self._get_or_404(slug)
        update: Dict[str, Any] = {"status": status}
        if status == "approved":
            update["approved_by"] = (approver or {}).get("name")
            update["approved_date"] = datetime.utcnow()
        logger.info(f"Post {slug} moved to {status}")
        return self.repo.update_by_id(post["_id"], update)

    def soft_delete(self, slug: str) -> Dict[str, Any]:
        post = self._get_or_404(slug)
        return self.repo.update_by_id(post["_id"], {"is_deleted": True})

    def hard_delete(self, slug: str) -> Dict[str, Any]:
        post = self.repo.find_one({"slug": slug})
        if not post:
            raise NotFoundError("Post", f"Post with slug {slug} not found")
        self.repo.delete_by_id(post["_id"])
        return post

    def transfer_posts(self, from_user_id: str, to_user_id: str,
                       post_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        if from_user_id == to_user_id:
            raise BadRequestError("Source and target users must differ")
        ids = None
        if post_ids is not None:
            if not post_ids:
                raise BadRequestError("No posts selected for transfer")
            ids = [to_object_id(i, "post id") for i in post_ids]
        moved = self.repo.transfer(from_user_id, to_user_id, ids)
        logger.info(f"Transferred {moved} posts from {from_user_id} to {to_user_id}")
        return {"transferred": moved}


class PostCategoryService:
    def __init__(self, repo: Optional[PostCategoriesRepository] = None):
        self.repo = repo or PostCategoriesRepository()

    def _get_or_404(self, slug: str) -> Dict[str, Any]:
        category = self.repo.find_by_slug(slug)
        if not category:
            raise NotFoundError("Post category", f"Post category {slug} not found")
        return category

    def _hierarchy(self, parent_id: Optional[str]) -> Dict[str, Any]:
        if not parent_id:
            return {"path": "", "level": 0, "parent": None}
        parent = self.repo.find_by_id(to_object_id(parent_id, "parent id"))
        if not parent or parent.get("is_deleted"):
            raise NotFoundError("Post category", "Parent category not found")
        return {
            "path": f"{parent.get('path', '')}/{parent['slug']}".lstrip("/"),
            "level": parent.get("level", 0) + 1,
            "parent": parent["_id"],
        }

    def _is_ancestor_or_self(self, category_id: ObjectId, candidate_id: ObjectId) -> bool:
        """True when category_id is candidate_id or one of its ancestors"""
        seen = set()
        current = self.repo.find_by_id(candidate_id)
        while current and current["_id"] not in seen:
            if current["_id"] == category_id:
                return True
            seen.add(current["_id"])
            if not current.get("parent"):
                return False
            current = self.repo.find_by_id(current["parent"])
        return False

    def _cascade_paths(self, root: Dict[str, Any]) -> None:
        queue = deque([root])
        visited = {root["_id"]}
        while queue:
            node = queue.popleft()
            path = f"{node.get('path', '')}/{node['slug']}".lstrip("/")
            for child in self.repo.find_children(node["_id"]):
                if child["_id"] in visited:
                    continue
                visited.add(child["_id"])
                child = self.repo.update_by_id(child["_id"], {"path": path, "level": node["level"] + 1})
                queue.append(child)

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        hierarchy = self._hierarchy(payload.pop("parent", None))
        payload.update(hierarchy)
        payload["slug"] = generate_unique_slug(payload["name"], self.repo.collection)
        payload.setdefault("sort_order", 0)
        payload["children"] = []
        payload["is_deleted"] = False
        category = self.repo.create(payload)
        if hierarchy["parent"]:
            self.repo.add_child(hierarchy["parent"], category["_id"])
        return category

    def update(self, slug: str, data: Dict[str, Any]) -> Dict[str, Any]:
        category = self._get_or_404(slug)
        payload = dict(data)

        new_slug = payload.pop("slug", None)
        if new_slug:
            new_slug = slugify(new_slug)
            if new_slug != slug:
                if self.repo.exists({"slug": new_slug}):
                    raise ConflictError(f"Post category slug {new_slug} is already in use")
                payload["slug"] = new_slug

        moving = "parent" in payload
        if moving:
            parent_id = payload.pop("parent")
            if parent_id:
                parent_oid = to_object_id(parent_id, "parent id")
                if self._is_ancestor_or_self(category["_id"], parent_oid):
                    raise ConflictError("A category cannot be moved under itself or its descendants")
            payload.update(self._hierarchy(parent_id))

        updated = self.repo.update_by_id(category["_id"], payload)

        if moving and category.get("parent") != updated.get("parent"):
            if category.get("parent"):
                self.repo.remove_child(category["parent"], category["_id"])
            if updated.get("parent"):
                self.repo.add_child(updated["parent"], category["_id"])
        if moving or payload.get("slug"):
            self._cascade_paths(updated)
        return updated

    def _tree(self, node: Dict[str, Any], seen: set) -> Dict[str, Any]:
        seen.add(node["_id"])
        children = [
            self._tree(child, seen)
            for child in self.repo.find_children(node["_id"])
            if child["_id"] not in seen
        ]
        return {**node, "children": children}

    def find_one(self, slug: str) -> Dict[str, Any]:
        return self._tree(self._get_or_404(slug), set())

    def find_all(self, page: int = 1, limit: int = PAGE_SIZE) -> Dict[str, Any]:
        return self.repo.paginate(
            {"is_deleted": False}, page, limit, sort=[("sort_order", 1), ("created_at", -1)]
        )

    def soft_delete(self, slug: str) -> Dict[str, Any]:
        category = self._get_or_404(slug)
        return self.repo.update_by_id(category["_id"], {"is_deleted": True})

    def hard_delete(self, slug: str) -> Dict[str, Any]:
        category = self.repo.find_one({"slug": slug})
        if not category:
            raise NotFoundError("Post category", f"Post category {slug} not found")
        if category.get("parent"):
            self.repo.remove_child(category["parent"], category["_id"])
        self.repo.delete_by_id(category["_id"])
        return category
