"""
Blog post and post category endpoints
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from app.models.post import (
    PostCategoryCreate,
    PostCategoryUpdate,
    PostCreate,
    PostSlugUpdate,
    PostStatusUpdate,
    PostTransfer,
    PostUpdate,
    PostVisibilityUpdate,
)
from app.repositories.base import serialize_doc
from app.services.permissions import PermissionService
from app.services.posts import PAGE_SIZE, PostCategoryService, PostService
from ..deps import (
    get_current_user,
    get_optional_user,
    get_post_category_service,
    get_post_service,
    require_permission,
)

router = APIRouter()
categories_router = APIRouter()


def _can_see_hidden(user: Optional[Dict[str, Any]], requested: bool) -> bool:
    """Hidden posts are only listed for staff allowed to read posts"""
    return requested and bool(user) and PermissionService().user_has_access(user, "posts", "read")


# Posts

@router.get("/")
def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    search: Optional[str] = None,
    include_hidden: bool = False,
    service: PostService = Depends(get_post_service),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user)
):
    """List posts, pinned first, optionally filtered by name or author"""
    return serialize_doc(service.find_all(
        page=page, limit=limit, search=search,
        include_hidden=_can_see_hidden(user, include_hidden)
    ))


@router.post("/", status_code=201)
def create_post(
    body: PostCreate,
    service: PostService = Depends(get_post_service),
    user: Dict[str, Any] = Depends(require_permission("posts", "create"))
):
    return serialize_doc(service.create(body.model_dump(), user))


@router.get("/mine")
def list_my_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    service: PostService = Depends(get_post_service),
    user: Dict[str, Any] = Depends(get_current_user)
):
    return serialize_doc(service.find_by_user(str(user["_id"]), page=page, limit=limit))


@router.get("/status/{status}")
def list_posts_by_status(
    status: str,
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    include_hidden: bool = False,
    service: PostService = Depends(get_post_service),
    _user=Depends(require_permission("posts", "read"))
):
    return serialize_doc(service.find_by_status(status, page=page, limit=limit, include_hidden=include_hidden))


@router.post("/transfer")
def transfer_posts(
    body: PostTransfer,
    service: PostService = Depends(get_post_service),
    _user=Depends(require_permission("posts", "update"))
):
    """Move all (or the selected) posts of one author to another"""
    return service.transfer_posts(body.from_user_id, body.to_user_id, body.post_ids)


@router.get("/{slug}")
def get_post(
    slug: str,
    include_hidden: bool = False,
    service: PostService = Depends(get_post_service),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user)
):
    return serialize_doc(service.find_one(slug, include_hidden=_can_see_hidden(user, include_hidden)))


@router.patch("/{slug}")
def update_post(
    slug: str,
    body: PostUpdate,
    service: PostService = Depends(get_post_service),
    user: Dict[str, Any] = Depends(require_permission("posts", "update"))
):
    return serialize_doc(service.update(slug, body.model_dump(exclude_unset=True), user))


@router.patch("/{slug}/slug")
def update_post_slug(
    slug: str,
    body: PostSlugUpdate,
    service: PostService = Depends(get_post_service),
    _user=Depends(require_permission("posts", "update"))
):
    """Change the slug; the old URL keeps working through a 301 redirect"""
    return serialize_doc(service.update_slug(slug, body.new_slug))


@router.patch("/{slug}/visibility")
def update_post_visibility(
    slug: str,
    body: PostVisibilityUpdate,
    service: PostService = Depends(get_post_service),
    _user=Depends(require_permission("posts", "publish"))
):
    return serialize_doc(service.set_visibility(slug, body.is_visible))


@router.patch("/{slug}/status")
def update_post_status(
    slug: str,
    body: PostStatusUpdate,
    service: PostService = Depends(get_post_service),
    user: Dict[str, Any] = Depends(require_permission("posts", "approve"))
):
    return serialize_doc(service.set_status(slug, body.status, user))


@router.delete("/{slug}")
def delete_post(
    slug: str,
    service: PostService = Depends(get_post_service),
    _user=Depends(require_permission("posts", "delete"))
):
    return serialize_doc(service.soft_delete(slug))


@router.delete("/{slug}/force")
def force_delete_post(
    slug: str,
    service: PostService = Depends(get_post_service),
    _user=Depends(require_permission("posts", "delete"))
):
    return serialize_doc(service.hard_delete(slug))


# Post categories

@categories_router.get("/")
def list_post_categories(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    service: PostCategoryService = Depends(get_post_category_service)
):
    return serialize_doc(service.find_all(page=page, limit=limit))


@categories_router.post("/", status_code=201)
def create_post_category(
    body: PostCategoryCreate,
    service: PostCategoryService = Depends(get_post_category_service),
    _user=Depends(require_permission("categories-post", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@categories_router.get("/{slug}")
def get_post_category(slug: str, service: PostCategoryService = Depends(get_post_category_service)):
    """Category with its whole sub-tree"""
    return serialize_doc(service.find_one(slug))


@categories_router.patch("/{slug}")
def update_post_category(
    slug: str,
    body: PostCategoryUpdate,
    service: PostCategoryService = Depends(get_post_category_service),
    _user=Depends(require_permission("categories-post", "update"))
):
    return serialize_doc(service.update(slug, body.model_dump(exclude_unset=True)))


@categories_router.patch("/{slug}/soft-delete")
def soft_delete_post_category(
    slug: str,
    service: PostCategoryService = Depends(get_post_category_service),
    _user=Depends(require_permission("categories-post", "delete"))
):
    return serialize_doc(service.soft_delete(slug))


@categories_router.delete("/{slug}")
def delete_post_category(
    slug: str,
    service: PostCategoryService = Depends(get_post_category_service),
    _user=Depends(require_permission("categories-post", "delete"))
):
    return serialize_doc(service.hard_delete(slug))
