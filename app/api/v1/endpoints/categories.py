"""
Product category endpoints
"""
from fastapi import APIRouter, Depends

from app.models.category import CategoryCreate, CategoryFilters, CategoryUpdate
from app.repositories.base import serialize_doc
from app.services.categories import CategoryService
from ..deps import get_category_service, require_permission

router = APIRouter()


@router.post("/", status_code=201)
def create_category(
    body: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    _user=Depends(require_permission("categories-product", "create"))
):
    """Create a category, optionally with nested sub-categories"""
    return serialize_doc(service.create_category(body.model_dump()))


@router.get("/")
def list_categories(service: CategoryService = Depends(get_category_service)):
    """All categories with their direct children"""
    return serialize_doc(service.get_all_categories())


@router.get("/parents")
def list_parent_categories(service: CategoryService = Depends(get_category_service)):
    return serialize_doc(service.get_simple_parent_categories())


@router.get("/parents/{parent_id}/children")
def list_sub_categories(parent_id: str, service: CategoryService = Depends(get_category_service)):
    return serialize_doc(service.get_sub_categories_by_parent_id(parent_id))


@router.get("/id/{category_id}")
def get_category_by_id(category_id: str, service: CategoryService = Depends(get_category_service)):
    return serialize_doc(service.get_category_by_id(category_id))


@router.get("/id/{category_id}/filters")
def get_category_filters(category_id: str, service: CategoryService = Depends(get_category_service)):
    return serialize_doc(service.get_filters_by_category(category_id))


@router.put("/id/{category_id}/filters")
def set_category_filters(
    category_id: str,
    body: CategoryFilters,
    service: CategoryService = Depends(get_category_service),
    _user=Depends(require_permission("categories-product", "update"))
):
    return serialize_doc(service.set_filters_for_category(category_id, body.filters))


@router.get("/{slug}")
def get_category(slug: str, service: CategoryService = Depends(get_category_service)):
    """Category by slug with its full sub-category tree"""
    return serialize_doc(service.get_category_by_slug(slug))


@router.patch("/{slug}")
def update_category(
    slug: str,
    body: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
    _user=Depends(require_permission("categories-product", "update"))
):
    return serialize_doc(service.update_category(slug, body.model_dump(exclude_unset=True)))


@router.delete("/{slug}")
def delete_category(
    slug: str,
    service: CategoryService = Depends(get_category_service),
    _user=Depends(require_permission("categories-product", "delete"))
):
    """Delete a category; its children become root categories"""
    return serialize_doc(service.delete_category(slug))
