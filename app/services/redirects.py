"""
URL redirect management
"""
import logging
import re
from typing import Any, Dict, List, Optional

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.redirects_repo import RedirectsRepository

logger = logging.getLogger(__name__)

ALLOWED_STATUS_CODES = (301, 302, 307, 308)


def normalize_path(path: str) -> str:
    path = (path or "").strip()
    if not path:
        raise BadRequestError("Redirect paths cannot be empty")
    if path.startswith(("http://", "https://")):
        return path
    return path if path.startswith("/") else f"/{path}"


class RedirectService:
    def __init__(self, repo: Optional[RedirectsRepository] = None):
        self.repo = repo or RedirectsRepository()

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        if "old_path" in payload:
            payload["old_path"] = normalize_path(payload["old_path"])
        if "new_path" in payload:
            payload["new_path"] = normalize_path(payload["new_path"])
        if payload.get("old_path") and payload.get("old_path") == payload.get("new_path"):
            raise BadRequestError("A redirect cannot point to itself")
        if "status_code" in payload and payload["status_code"] not in ALLOWED_STATUS_CODES:
            raise BadRequestError(f"Unsupported redirect status code {payload['status_code']}")
        return payload

    def find_redirect_by_path(self, path: str) -> Optional[Dict[str, Any]]:
        return self.repo.hit(normalize_path(path))

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        doc, _ = self._upsert(data)
        return doc

    def _upsert(self, data: Dict[str, Any]):
        payload = self._prepare(data)
        existing = self.repo.find_by_old_path(payload["old_path"])
        if existing:
            payload.pop("old_path")
            return self.repo.update_by_id(existing["_id"], payload), False

        payload.setdefault("is_active", True)
        payload.setdefault("status_code", 301)
        payload.setdefault("type", "other")
        payload["hit_count"] = 0
        payload["last_accessed"] = None
        doc = self.repo.create(payload)
        logger.info(f"Created redirect {doc['old_path']} -> {doc['new_path']}")
        return doc, True

    def create_bulk(self, items: List[Dict[str, Any]]) -> Dict[str, int]:
        created = updated = 0
        for item in items:
            _, was_created = self._upsert(item)
            if was_created:
                created += 1
            else:
                updated += 1
        return {"created": created, "updated": updated}

    def find_all(self, page: int = 1, limit: int = 20, type: Optional[str] = None,
                 is_active: Optional[bool] = None, path: Optional[str] = None,
                 status_code: Optional[int] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if type:
            query["type"] = type
        if is_active is not None:
            query["is_active"] = is_active
        if status_code:
            query["status_code"] = status_code
        if path:
            pattern = re.escape(path)
            query["$or"] = [
                {"old_path": {"$regex": pattern, "$options": "i"}},
                {"new_path": {"$regex": pattern, "$options": "i"}},
            ]
        return self.repo.paginate(query, page=page, limit=limit, sort=[("created_at", -1)])

    def find_one(self, redirect_id: str) -> Dict[str, Any]:
        redirect = self.repo.find_by_id(to_object_id(redirect_id, "redirect id"))
        if not redirect:
            raise NotFoundError("Redirect", f"Redirect with ID {redirect_id} not found")
        return redirect

    def update(self, redirect_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self.find_one(redirect_id)
        payload = self._prepare(data)
        new_old_path = payload.get("old_path")
        if new_old_path and new_old_path != current["old_path"]:
            clash = self.repo.find_by_old_path(new_old_path)
            if clash:
                raise BadRequestError(f"A redirect for {new_old_path} already exists")
        return self.repo.update_by_id(current["_id"], payload)

    def remove(self, redirect_id: str) -> Dict[str, Any]:
        redirect = self.find_one(redirect_id)
        self.repo.delete_by_id(redirect["_id"])
        return redirect
