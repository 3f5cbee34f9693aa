"""
Voucher service: CRUD, eligibility listing, validity checks and redemption
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.vouchers_repo import VouchersRepository

logger = logging.getLogger(__name__)

GLOBAL = "GLOBAL"
PRODUCT_SPECIFIC = "PRODUCT_SPECIFIC"

_PAYMENT_METHOD_ALIASES = {
    "cod": "COD",
    "cash": "COD",
    "bank": "BANK",
    "banktransfer": "BANK",
    "banktranfer": "BANK",
    "all": "ALL",
}


def normalize_payment_method(value: Optional[str]) -> Optional[str]:
    """Map checkout payment method names onto voucher payment methods"""
    if not value:
        return None
    return _PAYMENT_METHOD_ALIASES.get(value.strip().lower(), value.strip().upper())


def format_vnd(amount: float) -> str:
    """Format an amount the vi-VN way: 1.500.000 VND"""
    return f"{int(round(amount)):,}".replace(",", ".") + " VND"


def calculate_discount(voucher: Dict[str, Any], total_amount: float) -> float:
    if voucher.get("discount_type") == "PERCENTAGE":
        discount = total_amount * voucher.get("discount_value", 0) / 100
    else:
        discount = voucher.get("discount_value", 0)
    return min(discount, total_amount)


class VoucherService:
    def __init__(self, repo: Optional[VouchersRepository] = None):
        self.repo = repo or VouchersRepository()

    def _apply_type_rules(self, data: Dict[str, Any], current: Optional[Dict[str, Any]] = None) -> None:
        voucher_type = data.get("voucher_type") or (current or {}).get("voucher_type") or GLOBAL
        if voucher_type == PRODUCT_SPECIFIC:
            slugs = data["product_slugs"] if "product_slugs" in data else (current or {}).get("product_slugs")
            if not slugs:
                raise BadRequestError("Product-specific vouchers must list at least one product")
        else:
            data["product_slugs"] = []

        start = data.get("start_date") or (current or {}).get("start_date")
        end = data.get("end_date") or (current or {}).get("end_date")
        if start and end and end < start:
            raise BadRequestError("Voucher end date must be after its start date")

    def _ensure_code_free(self, code: str, exclude_id=None) -> None:
        existing = self.repo.find_by_code(code)
        if existing and existing["_id"] != exclude_id:
            raise BadRequestError(f"Voucher code {code} already exists")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        self._ensure_code_free(payload["code"])
        self._apply_type_rules(payload)
        payload.setdefault("used_count", 0)
        payload.setdefault("payment_method", "ALL")
        payload.setdefault("minimum_amount", 0)
        payload.setdefault("is_active", True)
        voucher = self.repo.create(payload)
        logger.info(f"Created voucher {voucher['code']}")
        return voucher

    def find_all(self, page: int = 1, limit: int = 10, is_active: Optional[bool] = None,
                 voucher_type: Optional[str] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if is_active is not None:
            query["is_active"] = is_active
        if voucher_type:
            query["voucher_type"] = voucher_type
        return self.repo.paginate(query, page=page, limit=limit, sort=[("created_at", -1)])

    def find_one(self, voucher_id: str) -> Dict[str, Any]:
        voucher = self.repo.find_by_id(to_object_id(voucher_id, "voucher id"))
        if not voucher:
            raise NotFoundError("Voucher", f"Voucher with ID {voucher_id} not found")
        return voucher

    def find_by_code(self, code: str) -> Dict[str, Any]:
        voucher = self.repo.find_by_code(code)
        if not voucher:
            raise NotFoundError("Voucher", f"Voucher with code {code} not found")
        return voucher

    def find_valid_vouchers(self, product_slug: Optional[str] = None, user_id: Optional[str] = None,
                            payment_method: Optional[str] = None) -> List[Dict[str, Any]]:
        now = datetime.utcnow()
        conditions: List[Dict[str, Any]] = [
            {"is_active": True},
            {"start_date": {"$lte": now}},
            {"end_date": {"$gte": now}},
        ]
        if product_slug:
            conditions.append({"$or": [
                {"voucher_type": GLOBAL},
                {"voucher_type": PRODUCT_SPECIFIC, "product_slugs": product_slug},
            ]})
        else:
            conditions.append({"voucher_type": GLOBAL})
        if user_id:
            conditions.append({"$or": [{"user_id": user_id}, {"user_id": None}]})
        method = normalize_payment_method(payment_method)
        if method:
            conditions.append({"payment_method": {"$in": [method, "ALL"]}})

        vouchers = self.repo.find_many({"$and": conditions}, sort=[("created_at", -1)])
        return [v for v in vouchers if v.get("used_count", 0) < v.get("quantity", 0)]

    def check_voucher_validity(
        self,
        code: str,
        product_slug: Optional[str] = None,
        user_id: Optional[str] = None,
        payment_method: Optional[str] = None,
        total_amount: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Run the voucher checks in order and report the first failure.

        Business failures never raise; the result carries valid=False and
        a human-readable message instead.
        """
        voucher = self.repo.find_by_code(code)
        if not voucher:
            return {"valid": False, "message": "Voucher not found"}
        if not voucher.get("is_active", True):
            return {"valid": False, "message": "Voucher is inactive"}
        if voucher.get("used_count", 0) >= voucher.get("quantity", 0):
            return {"valid": False, "message": "Voucher usage limit reached"}

        now = datetime.utcnow()
        if now < voucher["start_date"] or now > voucher["end_date"]:
            return {"valid": False, "message": "Voucher is not valid at this time"}

        if voucher.get("voucher_type") == PRODUCT_SPECIFIC:
            if not product_slug:
                return {"valid": False, "message": "Product slug is required for this voucher"}
            if product_slug not in (voucher.get("product_slugs") or []):
                return {"valid": False, "message": "Voucher is not valid for this product"}

        if voucher.get("user_id") and voucher["user_id"] != user_id:
            return {"valid": False, "message": "Voucher is not available for this user"}

        minimum = voucher.get("minimum_amount") or 0
        if minimum > 0 and (total_amount is None or total_amount < minimum):
            return {
                "valid": False,
                "message": f"Voucher requires a minimum purchase amount of {format_vnd(minimum)}",
            }

        voucher_method = voucher.get("payment_method") or "ALL"
        method = normalize_payment_method(payment_method)
        if method and voucher_method != "ALL" and voucher_method != method:
            return {"valid": False, "message": "Voucher is not valid for this payment method"}

        result: Dict[str, Any] = {"valid": True, "voucher": voucher}
        if total_amount is not None:
            discount = calculate_discount(voucher, total_amount)
            result["discount_amount"] = discount
            result["final_price"] = total_amount - discount
        return result

    def use_voucher(self, code: str, product_slug: Optional[str] = None) -> Dict[str, Any]:
        voucher = self.find_by_code(code)
        if not voucher.get("is_active", True):
            raise BadRequestError("Voucher is inactive")
        if voucher.get("used_count", 0) >= voucher.get("quantity", 0):
            raise BadRequestError("Voucher usage limit reached")
        now = datetime.utcnow()
        if now < voucher["start_date"] or now > voucher["end_date"]:
            raise BadRequestError("Voucher is not valid at this time")
        if voucher.get("voucher_type") == PRODUCT_SPECIFIC:
            if not product_slug or product_slug not in (voucher.get("product_slugs") or []):
                raise BadRequestError("Voucher is not valid for this product")

        updated = self.repo.increment_usage(voucher["_id"], voucher["quantity"])
        if not updated:
            # another redemption took the last slot
            raise BadRequestError("Voucher usage limit reached")
        logger.info(f"Voucher {code} used ({updated['used_count']}/{updated['quantity']})")
        return updated

    def update(self, voucher_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self.find_one(voucher_id)
        payload = dict(data)
        if payload.get("code") and payload["code"] != current["code"]:
            self._ensure_code_free(payload["code"], exclude_id=current["_id"])
        if {"voucher_type", "product_slugs", "start_date", "end_date"} & payload.keys():
            self._apply_type_rules(payload, current)
        return self.repo.update_by_id(current["_id"], payload)

    def remove(self, voucher_id: str) -> Dict[str, Any]:
        voucher = self.find_one(voucher_id)
        self.repo.delete_by_id(voucher["_id"])
        return voucher
