"""
Voucher endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.models.voucher import VoucherCheck, VoucherCreate, VoucherUpdate, VoucherUse
from app.repositories.base import serialize_doc
from app.services.vouchers import VoucherService
from ..deps import get_voucher_service, require_permission

router = APIRouter()


@router.post("/", status_code=201)
def create_voucher(
    body: VoucherCreate,
    service: VoucherService = Depends(get_voucher_service),
    _user=Depends(require_permission("vouchers", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@router.get("/")
def list_vouchers(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    is_active: Optional[bool] = None,
    voucher_type: Optional[str] = None,
    service: VoucherService = Depends(get_voucher_service),
    _user=Depends(require_permission("vouchers", "read"))
):
    return serialize_doc(service.find_all(page=page, limit=limit, is_active=is_active,
                                          voucher_type=voucher_type))


@router.get("/valid")
def list_valid_vouchers(
    product_slug: Optional[str] = None,
    user_id: Optional[str] = None,
    payment_method: Optional[str] = None,
    service: VoucherService = Depends(get_voucher_service)
):
    """Vouchers usable right now for the given product, user and payment method"""
    return serialize_doc(service.find_valid_vouchers(product_slug, user_id, payment_method))


@router.post("/check")
def check_voucher(body: VoucherCheck, service: VoucherService = Depends(get_voucher_service)):
    """Check a code without redeeming it"""
    return serialize_doc(service.check_voucher_validity(
        body.code,
        product_slug=body.product_slug,
        user_id=body.user_id,
        payment_method=body.payment_method,
        total_amount=body.total_amount,
    ))


@router.post("/use")
def use_voucher(
    body: VoucherUse,
    service: VoucherService = Depends(get_voucher_service),
    _user=Depends(require_permission("vouchers", "update"))
):
    return serialize_doc(service.use_voucher(body.code, body.product_slug))


@router.get("/code/{code}")
def get_voucher_by_code(code: str, service: VoucherService = Depends(get_voucher_service)):
    return serialize_doc(service.find_by_code(code))


@router.get("/{voucher_id}")
def get_voucher(
    voucher_id: str,
    service: VoucherService = Depends(get_voucher_service),
    _user=Depends(require_permission("vouchers", "read"))
):
    return serialize_doc(service.find_one(voucher_id))


@router.patch("/{voucher_id}")
def update_voucher(
    voucher_id: str,
    body: VoucherUpdate,
    service: VoucherService = Depends(get_voucher_service),
    _user=Depends(require_permission("vouchers", "update"))
):
    return serialize_doc(service.update(voucher_id, body.model_dump(exclude_unset=True)))


@router.delete("/{voucher_id}")
def delete_voucher(
    voucher_id: str,
    service: VoucherService = Depends(get_voucher_service),
    _user=Depends(require_permission("vouchers", "delete"))
):
    return serialize_doc(service.remove(voucher_id))
