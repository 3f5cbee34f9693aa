"""
Static pages, site (contact) information, banners and contact messages
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.errors import BadRequestError, NotFoundError
from app.core.slug import generate_unique_slug, slugify
from app.repositories.base import to_object_id
from app.repositories.content_repo import (
    BannersRepository,
    ContactsRepository,
    InfoWebsiteRepository,
    PagesRepository,
)

logger = logging.getLogger(__name__)


class PageService:
    def __init__(self, repo: Optional[PagesRepository] = None):
        self.repo = repo or PagesRepository()

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        requested = slugify(payload.get("slug")) if payload.get("slug") else None
        if requested:
            if self.repo.find_by_slug(requested):
                raise BadRequestError(f"Page slug {requested} is already in use")
            payload["slug"] = requested
        else:
            payload["slug"] = generate_unique_slug(payload["title"], self.repo.collection)
        return self.repo.create(payload)

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def find_one(self, page_id: str) -> Dict[str, Any]:
        page = self.repo.find_by_id(to_object_id(page_id, "page id"))
        if not page:
            raise NotFoundError("Page", f"Page with ID {page_id} not found")
        return page

    def find_by_slug(self, slug: str) -> Dict[str, Any]:
        page = self.repo.find_by_slug(slug)
        if not page:
            raise NotFoundError("Page", f"Page with slug {slug} not found")
        return page

    def update(self, slug: str, data: Dict[str, Any]) -> Dict[str, Any]:
        page = self.find_by_slug(slug)
        payload = {k: v for k, v in data.items() if v is not None}
        if payload.get("slug"):
            new_slug = slugify(payload["slug"])
            if new_slug != slug and self.repo.find_by_slug(new_slug):
                raise BadRequestError(f"Page slug {new_slug} is already in use")
            payload["slug"] = new_slug
        return self.repo.update_by_id(page["_id"], payload)

    def remove(self, slug: str) -> Dict[str, Any]:
        page = self.find_by_slug(slug)
        self.repo.delete_by_id(page["_id"])
        return page


class InfoWebsiteService:
    def __init__(self, repo: Optional[InfoWebsiteRepository] = None):
        self.repo = repo or InfoWebsiteRepository()

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        info = self.repo.create(dict(data))
        if info.get("is_active"):
            self.repo.deactivate_others(info["_id"])
        return info

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def find_one(self, info_id: str) -> Dict[str, Any]:
        info = self.repo.find_by_id(to_object_id(info_id, "info id"))
        if not info:
            raise NotFoundError("Site info", f"Site info with ID {info_id} not found")
        return info

    def find_active(self) -> Dict[str, Any]:
        info = self.repo.find_active()
        if not info:
            raise NotFoundError("Site info", "No active site information")
        return info

    def update(self, info_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        info = self.find_one(info_id)
        payload = {k: v for k, v in data.items() if v is not None}
        updated = self.repo.update_by_id(info["_id"], payload)
        if payload.get("is_active"):
            self.repo.deactivate_others(info["_id"])
        return updated

    def set_active(self, info_id: str) -> Dict[str, Any]:
        info = self.find_one(info_id)
        self.repo.deactivate_others(info["_id"])
        logger.info(f"Activated site info {info['name']}")
        return self.repo.update_by_id(info["_id"], {"is_active": True})

    def remove(self, info_id: str) -> Dict[str, Any]:
        info = self.find_one(info_id)
        self.repo.delete_by_id(info["_id"])
        return info


class BannerService:
    def __init__(self, repo: Optional[BannersRepository] = None):
        self.repo = repo or BannersRepository()

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.repo.create(dict(data))

    def find_all(self, type: Optional[str] = None, is_active: Optional[bool] = None) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        if type:
            query["type"] = type
        if is_active is not None:
            query["is_active"] = is_active
        return self.repo.find_ordered(query)

    def find_active_by_type(self, type: str) -> List[Dict[str, Any]]:
        return self.repo.find_ordered({"type": type, "is_active": True})

    def find_one(self, banner_id: str) -> Dict[str, Any]:
        banner = self.repo.find_by_id(to_object_id(banner_id, "banner id"))
        if not banner:
            raise NotFoundError("Banner", f"Banner with ID {banner_id} not found")
        return banner

    def update(self, banner_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        banner = self.find_one(banner_id)
        payload = {k: v for k, v in data.items() if v is not None}
        return self.repo.update_by_id(banner["_id"], payload)

    def update_order(self, banner_id: str, order: int) -> Dict[str, Any]:
        banner = self.find_one(banner_id)
        return self.repo.update_by_id(banner["_id"], {"order": order})

    def toggle_active(self, banner_id: str) -> Dict[str, Any]:
        banner = self.find_one(banner_id)
        return self.repo.update_by_id(banner["_id"], {"is_active": not banner.get("is_active", True)})

    def remove(self, banner_id: str) -> Dict[str, Any]:
        banner = self.find_one(banner_id)
        self.repo.delete_by_id(banner["_id"])
        return banner


class ContactService:
    """Messages sent through the storefront contact form"""

    def __init__(self, repo: Optional[ContactsRepository] = None):
        self.repo = repo or ContactsRepository()

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        contact = self.repo.create(dict(data))
        logger.info(f"New contact message from {contact['name']}")
        return contact

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def find_one(self, contact_id: str) -> Dict[str, Any]:
        contact = self.repo.find_by_id(to_object_id(contact_id, "contact id"))
        if not contact:
            raise NotFoundError("Contact", f"Contact with ID {contact_id} not found")
        return contact

    def remove(self, contact_id: str) -> Dict[str, Any]:
        contact = self.find_one(contact_id)
        self.repo.delete_by_id(contact["_id"])
        return contact
