"""
Voucher models
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, validator


def _as_naive_utc(v):
    """Mongo stores naive UTC datetimes; drop tzinfo after converting"""
    if isinstance(v, datetime) and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class VoucherType(str, Enum):
    GLOBAL = "GLOBAL"
    PRODUCT_SPECIFIC = "PRODUCT_SPECIFIC"


class VoucherPaymentMethod(str, Enum):
    BANK = "BANK"
    COD = "COD"
    ALL = "ALL"


class DiscountType(str, Enum):
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"


class VoucherBase(BaseModel):
    model_config = {"use_enum_values": True}

    description: Optional[str] = None
    voucher_type: VoucherType = VoucherType.GLOBAL
    product_slugs: List[str] = Field(default_factory=list)
    user_id: Optional[str] = None
    quantity: int = Field(..., ge=1)
    start_date: datetime
    end_date: datetime
    payment_method: VoucherPaymentMethod = VoucherPaymentMethod.ALL
    discount_type: DiscountType
    discount_value: float = Field(..., gt=0)
    minimum_amount: float = Field(0, ge=0)
    is_active: bool = True

    @validator("start_date", "end_date")
    def naive_utc(cls, v):
        return _as_naive_utc(v)


class VoucherCreate(VoucherBase):
    code: str = Field(..., min_length=1, max_length=50)

    @validator("code")
    def normalize_code(cls, v):
        return v.strip()

    @validator("discount_value")
    def percentage_cap(cls, v, values):
        if values.get("discount_type") == DiscountType.PERCENTAGE and v > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return v


class VoucherUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    voucher_type: Optional[VoucherType] = None
    product_slugs: Optional[List[str]] = None
    user_id: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    payment_method: Optional[VoucherPaymentMethod] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(None, gt=0)
    minimum_amount: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @validator("code")
    def normalize_code(cls, v):
        return v.strip() if v else v

    @validator("start_date", "end_date")
    def naive_utc(cls, v):
        return _as_naive_utc(v)


class VoucherCheck(BaseModel):
    code: str
    product_slug: Optional[str] = None
    user_id: Optional[str] = None
    payment_method: Optional[str] = None
    total_amount: Optional[float] = Field(None, ge=0)


class VoucherUse(BaseModel):
    code: str
    product_slug: Optional[str] = None
