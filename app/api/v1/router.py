"""
API Router Factory
Provides centralized router creation and configuration
"""
from fastapi import APIRouter
from typing import List, Optional

from .endpoints import (
    auth,
    categories,
    checkout,
    content,
    orders,
    payments,
    permissions,
    posts,
    products,
    redirects,
    reviews,
    vouchers,
)


def create_router(
    prefix: str = "/api/v1",
    tags: Optional[List[str]] = None,
    include_auth: bool = True
) -> APIRouter:
    """
    Create configured API router with all endpoints

    Args:
        prefix: API route prefix
        tags: OpenAPI tags
        include_auth: Whether to include auth and user admin endpoints

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter(prefix=prefix, tags=tags or [])

    # Catalog
    router.include_router(categories.router, prefix="/categories", tags=["categories"])
    router.include_router(products.router, prefix="/products", tags=["products"])
    router.include_router(content.filters_router, prefix="/filters", tags=["filters"])
    router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])

    # Sales
    router.include_router(vouchers.router, prefix="/vouchers", tags=["vouchers"])
    router.include_router(orders.router, prefix="/orders", tags=["orders"])
    router.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
    router.include_router(payments.router, prefix="/payments", tags=["payments"])

    # Site
    router.include_router(redirects.router, prefix="/redirects", tags=["redirects"])
    router.include_router(content.pages_router, prefix="/pages", tags=["pages"])
    router.include_router(content.info_router, prefix="/info-website", tags=["info-website"])
    router.include_router(content.banners_router, prefix="/banners", tags=["banners"])
    router.include_router(content.contacts_router, prefix="/contacts", tags=["contacts"])

    # Blog
    router.include_router(posts.router, prefix="/posts", tags=["posts"])
    router.include_router(posts.categories_router, prefix="/post-categories", tags=["post-categories"])

    # Access control
    router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
    router.include_router(permissions.roles_router, prefix="/roles", tags=["roles"])

    if include_auth:
        router.include_router(auth.router, prefix="/auth", tags=["auth"])
        router.include_router(auth.users_router, prefix="/users", tags=["users"])

    return router


# Create default API router instance for export
api_router = create_router()
