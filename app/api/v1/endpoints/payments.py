"""
Payment endpoints: VietQR configuration, MetaMask USDT and PayOS webhooks
"""
from fastapi import APIRouter, Depends

from app.core.errors import NotFoundError
from app.models.payment import (
    MetaMaskPaymentRequest,
    MetaMaskVerifyRequest,
    PayOSWebhook,
    VietQRConfigCreate,
    VietQRConfigUpdate,
)
from app.repositories.base import serialize_doc
from app.services.metamask import MetaMaskService
from app.services.orders import OrderService
from app.services.payos import PayOSService
from app.services.vietqr import VietQRService
from ..deps import (
    get_metamask_service,
    get_order_service,
    get_payos_service,
    get_vietqr_service,
    require_permission,
)

router = APIRouter()


# VietQR

@router.get("/vietqr/config")
def get_active_vietqr_config(service: VietQRService = Depends(get_vietqr_service)):
    """The active bank account, or null when none is configured"""
    return serialize_doc(service.get_config())


@router.get("/vietqr/configs")
def list_vietqr_configs(
    service: VietQRService = Depends(get_vietqr_service),
    _user=Depends(require_permission("vietqr-config", "read"))
):
    return serialize_doc(service.get_all_configs())


@router.post("/vietqr/configs", status_code=201)
def create_vietqr_config(
    body: VietQRConfigCreate,
    service: VietQRService = Depends(get_vietqr_service),
    _user=Depends(require_permission("vietqr-config", "create"))
):
    return serialize_doc(service.create_config(body.model_dump()))


@router.patch("/vietqr/configs/{config_id}")
def update_vietqr_config(
    config_id: str,
    body: VietQRConfigUpdate,
    service: VietQRService = Depends(get_vietqr_service),
    _user=Depends(require_permission("vietqr-config", "update"))
):
    return serialize_doc(service.update_config(config_id, body.model_dump(exclude_unset=True)))


@router.post("/vietqr/configs/{config_id}/activate")
def activate_vietqr_config(
    config_id: str,
    service: VietQRService = Depends(get_vietqr_service),
    _user=Depends(require_permission("vietqr-config", "update"))
):
    return serialize_doc(service.set_active(config_id))


@router.get("/vietqr/orders/{order_code}")
def get_order_transfer_info(
    order_code: str,
    service: VietQRService = Depends(get_vietqr_service),
    orders: OrderService = Depends(get_order_service)
):
    """Bank transfer details and QR image URL for an order"""
    order = orders.find_by_order_code(order_code)
    if not order:
        raise NotFoundError("Order", f"Order {order_code} not found")
    return serialize_doc(service.generate_transfer_info(order["slug"], order["total_price"]))


# MetaMask

@router.post("/metamask/{slug}/payment-info")
def generate_metamask_payment(
    slug: str,
    body: MetaMaskPaymentRequest,
    service: MetaMaskService = Depends(get_metamask_service)
):
    return serialize_doc(service.generate_payment_info(slug, body.receiving_address))


@router.post("/metamask/{slug}/verify")
def verify_metamask_payment(
    slug: str,
    body: MetaMaskVerifyRequest,
    service: MetaMaskService = Depends(get_metamask_service)
):
    return serialize_doc(service.verify_transaction(
        slug,
        body.tx_hash,
        body.amount,
        body.wallet_address,
        network=body.network,
        chain_id=body.chain_id,
        block_explorer=body.block_explorer,
    ))


# PayOS

@router.post("/payos/webhook")
def payos_webhook(body: PayOSWebhook, service: PayOSService = Depends(get_payos_service)):
    return serialize_doc(service.handle_webhook(body.model_dump()))
