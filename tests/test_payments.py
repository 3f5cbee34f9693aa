import hashlib
import hmac

import pytest

from app.core.errors import BadRequestError, ConflictError
from app.repositories.products_repo import ProductsRepository
from app.services.checkout import CheckoutService
from app.services.metamask import MetaMaskService
from app.services.orders import OrderService
from app.services.payos import PayOSService, to_query_string
from app.services.vietqr import VietQRService, build_qr_url

SHOP_WALLET = "0x" + "a" * 40
CUSTOMER_WALLET = "0x" + "b" * 40
TX_ONE = "0x" + "1" * 64
TX_TWO = "0x" + "2" * 64


@pytest.fixture
def order():
    product = ProductsRepository().create({"name": "Tai nghe", "slug": "tai-nghe"})
    return OrderService().create({
        "order_items": [{"product": str(product["_id"]), "quantity": 1, "price": 250000}],
    })


@pytest.fixture
def checkout(order):
    return CheckoutService().create({
        "order_id": str(order["_id"]), "name": "Phạm D", "phone": "0912345678", "address": "Đà Nẵng",
    })


def _sign(data):
    return hmac.new(b"test-checksum-key", to_query_string(data).encode(), hashlib.sha256).hexdigest()


def test_build_qr_url_encodes_query():
    config = {"bank_id": "MB", "account_no": "999", "account_name": "CUA HANG", "template": "print"}
    url = build_qr_url(config, 150000.4, "DM12345678", base_url="https://img.vietqr.io/image/")
    assert url == ("https://img.vietqr.io/image/MB-999-print.png"
                   "?amount=150000&addInfo=DM12345678&accountName=CUA%20HANG")


def test_only_one_vietqr_config_active():
    service = VietQRService()
    first = service.create_config({"bank_id": "VCB", "account_no": "1", "account_name": "A", "active": True})
    second = service.create_config({"bank_id": "MB", "account_no": "2", "account_name": "B", "active": True})
    assert service.get_config()["_id"] == second["_id"]

    service.set_active(str(first["_id"]))
    active = [c for c in service.get_all_configs() if c["active"]]
    assert [c["_id"] for c in active] == [first["_id"]]


def test_transfer_info_rejects_non_positive_amount():
    service = VietQRService()
    service.create_config({"bank_id": "VCB", "account_no": "1", "account_name": "A", "active": True})
    with pytest.raises(BadRequestError):
        service.generate_transfer_info("DM00000000", 0)


def test_vietqr_order_endpoint(client, order):
    VietQRService().create_config({"bank_id": "VCB", "account_no": "1", "account_name": "A", "active": True})
    resp = client.get(f"/api/v1/payments/vietqr/orders/{order['slug']}")
    assert resp.status_code == 200
    assert resp.json()["amount"] == 250000
    assert client.get("/api/v1/payments/vietqr/orders/DM99999999").status_code == 404


def test_metamask_payment_info(checkout, order):
    info = MetaMaskService().generate_payment_info(checkout["slug"], SHOP_WALLET)
    assert info["receiving_address"] == SHOP_WALLET
    assert info["amount"] == order["total_price"]
    assert info["token"]["symbol"] == "USDT"

    stored = CheckoutService().find_one(checkout["slug"])
    assert stored["payment_method"] == "metamask"


def test_metamask_payment_info_requires_address(checkout):
    with pytest.raises(BadRequestError):
        MetaMaskService().generate_payment_info(checkout["slug"])
    with pytest.raises(BadRequestError):
        MetaMaskService().generate_payment_info(checkout["slug"], "0x123")


def test_metamask_verify_marks_paid(checkout, order):
    service = MetaMaskService()
    service.generate_payment_info(checkout["slug"], SHOP_WALLET)
    updated = service.verify_transaction(checkout["slug"], TX_ONE, 10.5, CUSTOMER_WALLET)

    assert updated["payment_status"] == "paid"
    assert updated["payment_method_info"]["transaction_hash"] == TX_ONE
    assert updated["payment_method_info"]["receiving_address"] == SHOP_WALLET
    assert OrderService().find_one(order["slug"])["status"] == "processing"

    # reporting the same transaction again for the same checkout is accepted
    service.verify_transaction(checkout["slug"], TX_ONE, 10.5, CUSTOMER_WALLET)


def test_metamask_transaction_cannot_pay_two_checkouts(checkout, order):
    other = CheckoutService().create({
        "order_id": str(order["_id"]), "name": "Other", "phone": "0912345678", "address": "x",
    })
    service = MetaMaskService()
    service.verify_transaction(checkout["slug"], TX_ONE, 10, CUSTOMER_WALLET)
    with pytest.raises(ConflictError):
        service.verify_transaction(other["slug"], TX_ONE, 10, CUSTOMER_WALLET)
    service.verify_transaction(other["slug"], TX_TWO, 10, CUSTOMER_WALLET)


def test_metamask_rejects_malformed_hash(checkout):
    with pytest.raises(BadRequestError):
        MetaMaskService().verify_transaction(checkout["slug"], "0xabc", 1, CUSTOMER_WALLET)


def test_metamask_http_duplicate_is_conflict(client, checkout, order):
    other = CheckoutService().create({
        "order_id": str(order["_id"]), "name": "Other", "phone": "0912345678", "address": "x",
    })
    body = {"tx_hash": TX_ONE, "amount": 10, "wallet_address": CUSTOMER_WALLET}
    assert client.post(f"/api/v1/payments/metamask/{checkout['slug']}/verify", json=body).status_code == 200
    resp = client.post(f"/api/v1/payments/metamask/{other['slug']}/verify", json=body)
    assert resp.status_code == 409
    assert resp.json()["error"] == "CONFLICT"


def test_to_query_string_sorts_keys():
    data = {"orderCode": 123, "amount": 2000.0, "description": "DM1", "extra": None}
    assert to_query_string(data) == "amount=2000&description=DM1&extra=&orderCode=123"


def test_payos_signature_round_trip():
    service = PayOSService()
    data = {"orderCode": 1, "amount": 2000, "description": "x"}
    assert service.verify_signature(data, _sign(data))
    assert not service.verify_signature(data, "0" * 64)
    expected = _sign({"amount": 2000, "cancelUrl": "c", "description": "d", "orderCode": 1, "returnUrl": "r"})
    assert service.generate_signature(2000, "c", "d", 1, "r") == expected


def test_payos_webhook_paid(checkout, order):
    data = {"orderCode": order["slug"], "amount": 250000, "description": order["slug"]}
    result = PayOSService().handle_webhook({"code": "00", "data": data, "signature": _sign(data)})

    assert result["paid"] is True
    assert OrderService().find_one(order["slug"])["status"] == "completed"
    assert CheckoutService().find_one(checkout["slug"])["payment_status"] == "paid"


def test_payos_webhook_failed(checkout, order):
    data = {"orderCode": order["slug"], "amount": 250000}
    PayOSService().handle_webhook({"code": "01", "data": data, "signature": _sign(data)})

    assert OrderService().find_one(order["slug"])["status"] == "pending"
    assert CheckoutService().find_one(checkout["slug"])["payment_status"] == "failed"


def test_payos_webhook_bad_signature(client, checkout, order):
    data = {"orderCode": order["slug"], "amount": 250000}
    resp = client.post("/api/v1/payments/payos/webhook",
                       json={"code": "00", "data": data, "signature": "deadbeef"})
    assert resp.status_code == 400
    assert CheckoutService().find_one(checkout["slug"])["payment_status"] == "pending"
