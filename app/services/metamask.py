"""
MetaMask USDT (BEP-20) payments

The wallet performs the on-chain transfer; this service records what the
client should pay and the transaction it reports back.
"""
import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional

from app.core.config import PaymentConfig, payment_config
from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.repositories.orders_repo import CheckoutsRepository, OrdersRepository

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
TX_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


class MetaMaskService:
    def __init__(self, checkouts: Optional[CheckoutsRepository] = None,
                 orders: Optional[OrdersRepository] = None,
                 config: Optional[PaymentConfig] = None):
        self.checkouts = checkouts or CheckoutsRepository()
        self.orders = orders or OrdersRepository()
        self.config = config or payment_config

    def _load(self, slug: str):
        checkout = self.checkouts.find_by_slug(slug)
        if not checkout:
            raise NotFoundError("Checkout", f"Checkout with slug {slug} not found")
        order = self.orders.find_by_id(checkout["order_id"])
        if not order:
            raise NotFoundError("Order", f"Order for checkout {slug} not found")
        return checkout, order

    def _token_info(self) -> Dict[str, Any]:
        return {
            "contract_address": self.config.USDT_CONTRACT_ADDRESS,
            "decimals": self.config.USDT_DECIMALS,
            "symbol": "USDT",
        }

    def generate_payment_info(self, slug: str, receiving_address: Optional[str] = None) -> Dict[str, Any]:
        address = receiving_address or self.config.SHOP_WALLET_ADDRESS
        if not address:
            raise BadRequestError("A receiving wallet address is required")
        if not ADDRESS_RE.match(address):
            raise BadRequestError(f"Invalid wallet address {address}")

        checkout, order = self._load(slug)
        info = {
            "receiving_address": address,
            "amount": order["total_price"],
            "currency": "USDT",
            "token": self._token_info(),
            "network": self.config.DEFAULT_NETWORK,
            "generated_at": datetime.utcnow(),
        }
        self.checkouts.update_by_id(checkout["_id"], {
            "payment_method": "metamask",
            "payment_method_info": info,
        })
        return info

    def verify_transaction(
        self,
        slug: str,
        tx_hash: str,
        amount: float,
        wallet_address: str,
        network: Optional[str] = None,
        chain_id: Optional[str] = None,
        block_explorer: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not TX_HASH_RE.match(tx_hash or ""):
            raise BadRequestError(f"Invalid transaction hash {tx_hash}")
        if not ADDRESS_RE.match(wallet_address or ""):
            raise BadRequestError(f"Invalid wallet address {wallet_address}")

        checkout, order = self._load(slug)
        used_by = self.checkouts.find_by_tx_hash(tx_hash)
        if used_by and used_by["_id"] != checkout["_id"]:
            raise ConflictError(
                "Transaction hash already used for another checkout",
                details={"tx_hash": tx_hash}
            )

        previous = checkout.get("payment_method_info") or {}
        info = {
            **previous,
            "transaction_hash": tx_hash,
            "wallet_address": wallet_address,
            "amount_usdt": amount,
            "amount_vnd": order["total_price"],
            "verified_at": datetime.utcnow(),
            "verified": True,
            "token": self._token_info(),
            "network": network or self.config.DEFAULT_NETWORK,
            "chain_id": chain_id,
            "block_explorer": block_explorer or self.config.BLOCK_EXPLORER_URL,
        }
        updated = self.checkouts.update_by_id(checkout["_id"], {
            "payment_method": "metamask",
            "payment_method_info": info,
            "payment_status": "paid",
        })
        self.orders.update_by_id(order["_id"], {"status": "processing"})
        logger.info(f"MetaMask payment {tx_hash} recorded for checkout {slug}")
        return updated
