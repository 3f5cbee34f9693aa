"""
Order service
"""
import logging
import random
from typing import Any, Dict, List, Optional

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.orders_repo import OrdersRepository
from app.repositories.products_repo import ProductsRepository
from app.services.vouchers import VoucherService

logger = logging.getLogger(__name__)

ORDER_CODE_PREFIX = "DM"


def _subtotal(items: List[Dict[str, Any]]) -> float:
    return sum(item["price"] * item["quantity"] for item in items)


class OrderService:
    def __init__(self, repo: Optional[OrdersRepository] = None,
                 vouchers: Optional[VoucherService] = None,
                 products: Optional[ProductsRepository] = None):
        self.repo = repo or OrdersRepository()
        self.vouchers = vouchers or VoucherService()
        self.products = products or ProductsRepository()

    def generate_order_code(self) -> str:
        while True:
            code = ORDER_CODE_PREFIX + "".join(random.choices("0123456789", k=8))
            if not self.repo.find_by_slug(code):
                return code

    def _prepare_items(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        prepared = []
        for item in items:
            entry = dict(item)
            entry["product"] = to_object_id(entry["product"], "product id")
            prepared.append(entry)
        return prepared

    def _single_product_slug(self, items: List[Dict[str, Any]]) -> Optional[str]:
        product_ids = {item["product"] for item in items}
        if len(product_ids) != 1:
            return None
        product = self.products.find_by_id(product_ids.pop())
        return product.get("slug") if product else None

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        items = self._prepare_items(payload.pop("order_items"))

        slug = payload.pop("slug", None)
        if not slug or self.repo.find_by_slug(slug):
            slug = self.generate_order_code()

        subtotal = _subtotal(items)
        discount = 0
        voucher_code = payload.pop("voucher_code", None)
        if voucher_code:
            check = self.vouchers.check_voucher_validity(
                voucher_code,
                product_slug=self._single_product_slug(items),
                user_id=payload.get("user_id"),
                payment_method=payload.get("payment_method"),
                total_amount=subtotal,
            )
            if not check["valid"]:
                raise BadRequestError(check["message"], details={"voucher_code": voucher_code})
            self.vouchers.use_voucher(voucher_code, self._single_product_slug(items))
            discount = check["discount_amount"]

        order = self.repo.create({
            **payload,
            "slug": slug,
            "order_items": items,
            "subtotal_price": subtotal,
            "discount_amount": discount,
            "voucher_code": voucher_code,
            "total_price": subtotal - discount,
            "status": payload.get("status") or "pending",
        })
        logger.info(f"Created order {slug} total={order['total_price']}")
        return order

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def find_one(self, slug: str) -> Dict[str, Any]:
        order = self.repo.find_by_slug(slug)
        if not order:
            raise NotFoundError("Order", f"Order with slug {slug} not found")
        return order

    def find_by_order_code(self, order_code: str) -> Optional[Dict[str, Any]]:
        return self.repo.find_by_slug(order_code)

    def update(self, slug: str, data: Dict[str, Any]) -> Dict[str, Any]:
        order = self.find_one(slug)
        payload = dict(data)

        new_slug = payload.get("slug")
        if new_slug and new_slug != slug:
            if self.repo.find_by_slug(new_slug):
                raise BadRequestError(f"Order slug {new_slug} is already in use")
        elif "slug" in payload:
            payload.pop("slug")

        if payload.get("order_items"):
            items = self._prepare_items(payload["order_items"])
            subtotal = _subtotal(items)
            discount = min(order.get("discount_amount") or 0, subtotal)
            payload.update({
                "order_items": items,
                "subtotal_price": subtotal,
                "discount_amount": discount,
                "total_price": subtotal - discount,
            })
        else:
            payload.pop("order_items", None)

        return self.repo.update_by_id(order["_id"], payload)

    def update_payment_status(self, slug: str, payment_method: str,
                              payment_info: Dict[str, Any]) -> Dict[str, Any]:
        order = self.find_one(slug)
        update = {"payment_method": payment_method, "payment_info": payment_info}
        if payment_method == "payos" and (payment_info or {}).get("status") == "PAID":
            update["status"] = "completed"
        return self.repo.update_by_id(order["_id"], update)

    def remove(self, slug: str) -> Dict[str, Any]:
        order = self.find_one(slug)
        self.repo.delete_by_id(order["_id"])
        return order
