"""
Checkout service: customer details and payment state for an order
"""
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from app.core.errors import BadRequestError, NotFoundError
from app.core.slug import slugify
from app.repositories.base import to_object_id
from app.repositories.orders_repo import CheckoutsRepository, OrdersRepository
from app.services.vietqr import VietQRService

logger = logging.getLogger(__name__)

PAYMENT_STATUSES = ("pending", "paid", "failed")


def checkout_slug(name: str, checkout_id: ObjectId) -> str:
    base = slugify(name) or "checkout"
    return f"{base}-{str(checkout_id)[-6:]}"


class CheckoutService:
    def __init__(self, repo: Optional[CheckoutsRepository] = None,
                 orders: Optional[OrdersRepository] = None,
                 vietqr: Optional[VietQRService] = None):
        self.repo = repo or CheckoutsRepository()
        self.orders = orders or OrdersRepository()
        self.vietqr = vietqr or VietQRService()

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        order_id = to_object_id(payload.pop("order_id"), "order id")
        order = self.orders.find_by_id(order_id)
        if not order:
            raise NotFoundError("Order", f"Order with ID {order_id} not found")

        checkout_id = ObjectId()
        payment_method = payload.get("payment_method") or "cash"
        payment_info = payload.get("payment_method_info")
        if payment_method == "bank":
            payment_info = self.vietqr.generate_transfer_info(order["slug"], order["total_price"])

        checkout = self.repo.create({
            **payload,
            "_id": checkout_id,
            "order_id": order_id,
            "order_code": order["slug"],
            "slug": checkout_slug(payload["name"], checkout_id),
            "payment_method": payment_method,
            "payment_method_info": payment_info,
            "payment_status": "pending",
        })
        logger.info(f"Created checkout {checkout['slug']} for order {order['slug']} via {payment_method}")
        return checkout

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def find_one(self, slug: str) -> Dict[str, Any]:
        checkout = self.repo.find_by_slug(slug)
        if not checkout:
            raise NotFoundError("Checkout", f"Checkout with slug {slug} not found")
        return checkout

    def update(self, slug: str, data: Dict[str, Any]) -> Dict[str, Any]:
        checkout = self.find_one(slug)
        payload = {k: v for k, v in data.items() if v is not None}
        if "order_id" in payload:
            raise BadRequestError("The order of a checkout cannot be changed")

        requested_slug = payload.pop("slug", None)
        name = payload.get("name") or checkout["name"]
        if requested_slug or ("name" in payload and payload["name"] != checkout["name"]):
            new_slug = checkout_slug(name, checkout["_id"])
            if new_slug != slug:
                if self.repo.find_by_slug(new_slug):
                    raise BadRequestError(f"Checkout slug {new_slug} is already in use")
                payload["slug"] = new_slug

        return self.repo.update_by_id(checkout["_id"], payload)

    def update_payment_status(self, slug: str, payment_status: str) -> Dict[str, Any]:
        if payment_status not in PAYMENT_STATUSES:
            raise BadRequestError(
                f"Invalid payment status {payment_status}",
                details={"allowed": list(PAYMENT_STATUSES)}
            )
        checkout = self.find_one(slug)
        return self.repo.update_by_id(checkout["_id"], {"payment_status": payment_status})

    def remove(self, slug: str) -> Dict[str, Any]:
        checkout = self.find_one(slug)
        self.repo.delete_by_id(checkout["_id"])
        return checkout
