"""
Order endpoints
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends

from app.models.order import OrderCreate, OrderPaymentUpdate, OrderUpdate
from app.repositories.base import serialize_doc
from app.services.orders import OrderService
from ..deps import get_optional_user, get_order_service, require_permission

router = APIRouter()


@router.post("/", status_code=201)
def create_order(
    body: OrderCreate,
    service: OrderService = Depends(get_order_service),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user)
):
    """Place an order; guests may order, a logged-in user is recorded on it"""
    data = body.model_dump()
    if user:
        data["user_id"] = str(user["_id"])
    return serialize_doc(service.create(data))


@router.get("/")
def list_orders(
    service: OrderService = Depends(get_order_service),
    _user=Depends(require_permission("orders", "read"))
):
    return serialize_doc(service.find_all())


@router.get("/{slug}")
def get_order(slug: str, service: OrderService = Depends(get_order_service)):
    return serialize_doc(service.find_one(slug))


@router.patch("/{slug}")
def update_order(
    slug: str,
    body: OrderUpdate,
    service: OrderService = Depends(get_order_service),
    _user=Depends(require_permission("orders", "update"))
):
    return serialize_doc(service.update(slug, body.model_dump(exclude_unset=True)))


@router.patch("/{slug}/payment")
def update_order_payment(
    slug: str,
    body: OrderPaymentUpdate,
    service: OrderService = Depends(get_order_service),
    _user=Depends(require_permission("orders", "update"))
):
    return serialize_doc(service.update_payment_status(slug, body.payment_method, body.payment_info))


@router.delete("/{slug}")
def delete_order(
    slug: str,
    service: OrderService = Depends(get_order_service),
    _user=Depends(require_permission("orders", "delete"))
):
    return serialize_doc(service.remove(slug))
