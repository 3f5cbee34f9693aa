"""
Order and checkout models
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, validator


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CheckoutPaymentMethod(str, Enum):
    CASH = "cash"
    PAYOS = "payos"
    BANK = "bank"
    PAYPAL = "paypal"
    METAMASK = "metamask"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class OrderItem(BaseModel):
    product: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    variant: Optional[Dict[str, Any]] = None


class OrderCreate(BaseModel):
    model_config = {"use_enum_values": True}

    order_items: List[OrderItem] = Field(..., min_length=1)
    slug: Optional[str] = None
    voucher_code: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING
    payment_method: Optional[str] = None


class OrderUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    order_items: Optional[List[OrderItem]] = None
    slug: Optional[str] = None
    status: Optional[OrderStatus] = None
    payment_method: Optional[str] = None


class OrderPaymentUpdate(BaseModel):
    payment_method: str
    payment_info: Dict[str, Any] = Field(default_factory=dict)


class CheckoutCreate(BaseModel):
    model_config = {"use_enum_values": True}

    order_id: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200)
    phone: str
    address: str = Field(..., min_length=1)
    payment_method: CheckoutPaymentMethod = CheckoutPaymentMethod.CASH
    payment_method_info: Optional[Dict[str, Any]] = None

    @validator("phone")
    def validate_phone(cls, v):
        digits = v.strip()
        if not digits.isdigit() or not 10 <= len(digits) <= 11:
            raise ValueError("Phone number must have 10 or 11 digits")
        return digits


class CheckoutUpdate(BaseModel):
    model_config = {"use_enum_values": True}

    order_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_method: Optional[CheckoutPaymentMethod] = None
    payment_method_info: Optional[Dict[str, Any]] = None

    @validator("phone")
    def validate_phone(cls, v):
        if v is None:
            return v
        digits = v.strip()
        if not digits.isdigit() or not 10 <= len(digits) <= 11:
            raise ValueError("Phone number must have 10 or 11 digits")
        return digits


class CheckoutPaymentStatusUpdate(BaseModel):
    payment_status: str
