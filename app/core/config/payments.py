"""
Payment provider configuration
"""
from typing import Optional
from pydantic import Field, SecretStr, validator
from pydantic_settings import BaseSettings


class PaymentConfig(BaseSettings):
    """VietQR, MetaMask (USDT on BSC) and PayOS settings"""

    model_config = {
        "env_prefix": "PAYMENT_",
        "env_file": ".env",
        "extra": "ignore"
    }

    # VietQR
    VIETQR_IMAGE_BASE_URL: str = Field(
        "https://img.vietqr.io/image",
        description="Base URL of the VietQR image API"
    )
    VIETQR_DEFAULT_TEMPLATE: str = Field("compact2", description="Default QR template")

    # MetaMask / USDT
    USDT_CONTRACT_ADDRESS: str = Field(
        "0x55d398326f99059fF775485246999027B3197955",
        description="USDT (BEP-20) token contract"
    )
    USDT_DECIMALS: int = Field(18, ge=0, description="USDT token decimals")
    DEFAULT_NETWORK: str = Field("BSC", description="Default chain name")
    BLOCK_EXPLORER_URL: str = Field("https://bscscan.com/", description="Block explorer")
    SHOP_WALLET_ADDRESS: Optional[str] = Field(
        None,
        description="Fallback receiving wallet for MetaMask payments"
    )

    # PayOS
    PAYOS_CHECKSUM_KEY: SecretStr = Field(
        SecretStr(""),
        description="PayOS checksum key used for HMAC signatures"
    )

    @validator("VIETQR_IMAGE_BASE_URL")
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


payment_config = PaymentConfig()
