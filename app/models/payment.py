"""
Payment integration models (VietQR, MetaMask, PayOS)
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class VietQRConfigCreate(BaseModel):
    bank_id: str = Field(..., min_length=1)
    account_no: str = Field(..., min_length=1)
    account_name: str = Field(..., min_length=1)
    template: str = "compact2"
    active: bool = False


class VietQRConfigUpdate(BaseModel):
    bank_id: Optional[str] = None
    account_no: Optional[str] = None
    account_name: Optional[str] = None
    template: Optional[str] = None
    active: Optional[bool] = None


class MetaMaskPaymentRequest(BaseModel):
    receiving_address: Optional[str] = None


class MetaMaskVerifyRequest(BaseModel):
    tx_hash: str
    amount: float = Field(..., gt=0, description="Amount paid in USDT")
    wallet_address: str
    network: Optional[str] = None
    chain_id: Optional[str] = None
    block_explorer: Optional[str] = None


class PayOSWebhook(BaseModel):
    code: str
    desc: Optional[str] = None
    success: Optional[bool] = None
    data: Dict[str, Any]
    signature: str
