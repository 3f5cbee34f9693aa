"""
PayOS signatures and webhook handling
"""
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Optional

from app.core.config import PaymentConfig, payment_config
from app.core.errors import BadRequestError, NotFoundError
from app.repositories.orders_repo import CheckoutsRepository
from app.services.orders import OrderService

logger = logging.getLogger(__name__)


def _deep_sort(value: Any) -> Any:
    if isinstance(value, list):
        return [_deep_sort(v) for v in value]
    if isinstance(value, dict):
        return {k: _deep_sort(value[k]) for k in sorted(value)}
    return value


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_query_string(data: Dict[str, Any]) -> str:
    """Sorted key=value pairs joined by &, the form PayOS signs"""
    ordered = _deep_sort(data)
    return "&".join(f"{key}={_render(value)}" for key, value in ordered.items())


class PayOSService:
    def __init__(self, checkouts: Optional[CheckoutsRepository] = None,
                 orders: Optional[OrderService] = None,
                 config: Optional[PaymentConfig] = None):
        self.checkouts = checkouts or CheckoutsRepository()
        self.orders = orders or OrderService()
        self.config = config or payment_config

    def _hmac(self, message: str) -> str:
        key = self.config.PAYOS_CHECKSUM_KEY.get_secret_value().encode()
        return hmac.new(key, message.encode(), hashlib.sha256).hexdigest()

    def generate_signature(self, amount, cancel_url: str, description: str,
                           order_code, return_url: str) -> str:
        raw = to_query_string({
            "amount": amount,
            "cancelUrl": cancel_url,
            "description": description,
            "orderCode": order_code,
            "returnUrl": return_url,
        })
        return self._hmac(raw)

    def verify_signature(self, data: Dict[str, Any], signature: str) -> bool:
        expected = self._hmac(to_query_string(data))
        return hmac.compare_digest(expected, signature or "")

    def handle_webhook(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = payload.get("data") or {}
        if not self.verify_signature(data, payload.get("signature")):
            logger.warning(f"Rejected PayOS webhook for order {data.get('orderCode')}: bad signature")
            raise BadRequestError("Invalid PayOS signature")

        order_code = str(data.get("orderCode", ""))
        order = self.orders.find_by_order_code(order_code)
        if not order:
            raise NotFoundError("Order", f"Order {order_code} not found")
        checkout = self.checkouts.find_by_order(order["_id"])

        paid = payload.get("code") == "00"
        if paid:
            self.orders.update_payment_status(order["slug"], "payos", {**data, "status": "PAID"})
        if checkout:
            self.checkouts.update_by_id(checkout["_id"], {
                "payment_method": "payos",
                "payment_status": "paid" if paid else "failed",
                "payment_method_info": data,
            })
        logger.info(f"PayOS webhook for order {order_code}: {'paid' if paid else 'failed'}")
        return {"success": True, "order_code": order_code, "paid": paid}
