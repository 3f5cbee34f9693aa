"""
Review endpoints
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends

from app.models.content import ReviewCreate, ReviewUpdate
from app.repositories.base import serialize_doc
from app.services.reviews import ReviewService
from ..deps import get_current_user, get_review_service, require_permission

router = APIRouter()


@router.post("/", status_code=201)
def create_review(
    body: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    user: Dict[str, Any] = Depends(get_current_user)
):
    """Review a product the current user bought and paid for"""
    return serialize_doc(service.create(body.model_dump(), user))


@router.get("/")
def list_reviews(
    service: ReviewService = Depends(get_review_service),
    _user=Depends(require_permission("reviews", "read"))
):
    return serialize_doc(service.find_all())


@router.get("/product/{product_slug}")
def list_product_reviews(product_slug: str, service: ReviewService = Depends(get_review_service)):
    return serialize_doc(service.find_by_product_slug(product_slug))


@router.get("/product/{product_slug}/rating")
def get_product_rating(product_slug: str, service: ReviewService = Depends(get_review_service)):
    return service.get_product_rating(product_slug)


@router.get("/product/{product_slug}/eligibility")
def get_review_eligibility(
    product_slug: str,
    service: ReviewService = Depends(get_review_service),
    user: Dict[str, Any] = Depends(get_current_user)
):
    return service.can_review(str(user["_id"]), product_slug)


@router.get("/{review_id}")
def get_review(review_id: str, service: ReviewService = Depends(get_review_service)):
    return serialize_doc(service.find_one(review_id))


@router.patch("/{review_id}")
def update_review(
    review_id: str,
    body: ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
    _user=Depends(require_permission("reviews", "update"))
):
    return serialize_doc(service.update(review_id, body.model_dump(exclude_unset=True)))


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    _user=Depends(require_permission("reviews", "delete"))
):
    """Hide a review (soft delete)"""
    return serialize_doc(service.remove(review_id))
