"""
Checkout endpoints
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends

from app.models.order import CheckoutCreate, CheckoutPaymentStatusUpdate, CheckoutUpdate
from app.repositories.base import serialize_doc
from app.services.checkout import CheckoutService
from ..deps import get_checkout_service, get_optional_user, require_permission

router = APIRouter()


@router.post("/", status_code=201)
def create_checkout(
    body: CheckoutCreate,
    service: CheckoutService = Depends(get_checkout_service),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user)
):
    data = body.model_dump()
    if user:
        data["user_id"] = str(user["_id"])
        data["email"] = data.get("email") or user.get("email")
    return serialize_doc(service.create(data))


@router.get("/")
def list_checkouts(
    service: CheckoutService = Depends(get_checkout_service),
    _user=Depends(require_permission("checkout", "read"))
):
    return serialize_doc(service.find_all())


@router.get("/{slug}")
def get_checkout(slug: str, service: CheckoutService = Depends(get_checkout_service)):
    return serialize_doc(service.find_one(slug))


@router.patch("/{slug}")
def update_checkout(
    slug: str,
    body: CheckoutUpdate,
    service: CheckoutService = Depends(get_checkout_service),
    _user=Depends(require_permission("checkout", "update"))
):
    return serialize_doc(service.update(slug, body.model_dump(exclude_unset=True)))


@router.patch("/{slug}/payment-status")
def update_checkout_payment_status(
    slug: str,
    body: CheckoutPaymentStatusUpdate,
    service: CheckoutService = Depends(get_checkout_service),
    _user=Depends(require_permission("checkout", "update"))
):
    return serialize_doc(service.update_payment_status(slug, body.payment_status))


@router.delete("/{slug}")
def delete_checkout(
    slug: str,
    service: CheckoutService = Depends(get_checkout_service),
    _user=Depends(require_permission("checkout", "delete"))
):
    return serialize_doc(service.remove(slug))
