"""
VietQR bank-transfer configuration and QR link generation
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

from app.core.config import PaymentConfig, payment_config
from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.vietqr_repo import VietQRConfigRepository

logger = logging.getLogger(__name__)


def build_qr_url(config: Dict[str, Any], amount: float, add_info: str,
                 base_url: Optional[str] = None) -> str:
    """Compose the img.vietqr.io image URL for a transfer"""
    base = (base_url or payment_config.VIETQR_IMAGE_BASE_URL).rstrip("/")
    template = config.get("template") or payment_config.VIETQR_DEFAULT_TEMPLATE
    path = f"{base}/{quote(config['bank_id'])}-{quote(config['account_no'])}-{quote(template)}.png"
    query = urlencode({
        "amount": int(round(amount)),
        "addInfo": add_info,
        "accountName": config.get("account_name", ""),
    }, quote_via=quote)
    return f"{path}?{query}"


class VietQRService:
    def __init__(self, repo: Optional[VietQRConfigRepository] = None,
                 config: Optional[PaymentConfig] = None):
        self.repo = repo or VietQRConfigRepository()
        self.config = config or payment_config

    def get_config(self) -> Optional[Dict[str, Any]]:
        return self.repo.find_active()

    def get_all_configs(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def _get_or_404(self, config_id: str) -> Dict[str, Any]:
        config = self.repo.find_by_id(to_object_id(config_id, "config id"))
        if not config:
            raise NotFoundError("VietQR config", f"VietQR config with ID {config_id} not found")
        return config

    def create_config(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        payload.setdefault("template", self.config.VIETQR_DEFAULT_TEMPLATE)
        payload.setdefault("active", False)
        created = self.repo.create(payload)
        if created["active"]:
            self.repo.deactivate_all(except_id=created["_id"])
        logger.info(f"Created VietQR config for bank {created['bank_id']}")
        return created

    def update_config(self, config_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self._get_or_404(config_id)
        updated = self.repo.update_by_id(current["_id"], dict(data))
        if data.get("active"):
            self.repo.deactivate_all(except_id=current["_id"])
        return updated

    def set_active(self, config_id: str) -> Dict[str, Any]:
        current = self._get_or_404(config_id)
        self.repo.deactivate_all(except_id=current["_id"])
        return self.repo.update_by_id(current["_id"], {"active": True})

    def generate_transfer_info(self, order_code: str, amount: float) -> Dict[str, Any]:
        config = self.get_config()
        if not config:
            raise BadRequestError("No active VietQR configuration")
        if amount is None or amount <= 0:
            raise BadRequestError("Transfer amount must be greater than 0")
        return {
            "bank_id": config["bank_id"],
            "account_no": config["account_no"],
            "account_name": config["account_name"],
            "amount": amount,
            "description": order_code,
            "qr_code_url": build_qr_url(config, amount, order_code,
                                        base_url=self.config.VIETQR_IMAGE_BASE_URL),
            "generated_at": datetime.utcnow(),
        }
