"""
Products API endpoints
"""
from fastapi import APIRouter, Depends, Query

from app.models.product import (
    ProductCategory,
    ProductCreate,
    ProductNameUpdate,
    ProductSlugUpdate,
    ProductUpdate,
    ProductVariantsUpdate,
)
from app.repositories.base import serialize_doc
from app.services.products import PAGE_SIZE, SEARCH_PAGE_SIZE, ProductService
from ..deps import get_product_service, require_permission

router = APIRouter()


@router.get("/")
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    service: ProductService = Depends(get_product_service)
):
    """List products, newest first"""
    return serialize_doc(service.find_all(page=page, limit=limit))


@router.get("/search")
def search_products(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(SEARCH_PAGE_SIZE, ge=1, le=100),
    service: ProductService = Depends(get_product_service)
):
    """Search by name words and SKU, best matches first"""
    return serialize_doc(service.search_by_name(q, page=page, limit=limit))


@router.get("/category/{main}")
def list_by_main_category(
    main: str,
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    service: ProductService = Depends(get_product_service)
):
    return serialize_doc(service.find_by_main_category(main, page=page, limit=limit))


@router.get("/subcategory/{sub}")
def list_by_sub_category(
    sub: str,
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    service: ProductService = Depends(get_product_service)
):
    return serialize_doc(service.find_by_sub_category(sub, page=page, limit=limit))


@router.get("/{slug}")
def get_product(slug: str, service: ProductService = Depends(get_product_service)):
    return serialize_doc(service.find_one(slug))


@router.post("/", status_code=201)
def create_product(
    body: ProductCreate,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@router.patch("/{slug}")
def update_product(
    slug: str,
    body: ProductUpdate,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "update"))
):
    return serialize_doc(service.update(slug, body.model_dump(exclude_unset=True)))


@router.patch("/{slug}/name")
def update_product_name(
    slug: str,
    body: ProductNameUpdate,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "update"))
):
    return serialize_doc(service.update_name(slug, body.name))


@router.patch("/{slug}/slug")
def update_product_slug(
    slug: str,
    body: ProductSlugUpdate,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "update"))
):
    """Change the slug and leave a 301 redirect behind"""
    return serialize_doc(service.update_slug(slug, body.slug))


@router.patch("/{slug}/category")
def update_product_category(
    slug: str,
    body: ProductCategory,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "update"))
):
    return serialize_doc(service.update_category(slug, body.model_dump()))


@router.patch("/{slug}/variants")
def update_product_variants(
    slug: str,
    body: ProductVariantsUpdate,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "update"))
):
    return serialize_doc(service.update_variants(slug, [v.model_dump() for v in body.variants]))


@router.delete("/{slug}")
def delete_product(
    slug: str,
    service: ProductService = Depends(get_product_service),
    _user=Depends(require_permission("products", "delete"))
):
    return serialize_doc(service.remove(slug))
