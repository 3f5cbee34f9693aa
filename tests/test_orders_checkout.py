import re
from datetime import datetime, timedelta

import pytest
from bson import ObjectId

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.products_repo import ProductsRepository
from app.services.checkout import CheckoutService, checkout_slug
from app.services.orders import OrderService
from app.services.vietqr import VietQRService
from app.services.vouchers import VoucherService


@pytest.fixture
def product():
    return ProductsRepository().create({"name": "Áo thun", "slug": "ao-thun", "base_price": 100000})


@pytest.fixture
def orders():
    return OrderService()


@pytest.fixture
def checkouts():
    return CheckoutService()


def _voucher(**overrides):
    now = datetime.utcnow()
    data = {
        "code": "SHIRT20",
        "voucher_type": "PRODUCT_SPECIFIC",
        "product_slugs": ["ao-thun"],
        "quantity": 1,
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=1),
        "discount_type": "PERCENTAGE",
        "discount_value": 20,
    }
    data.update(overrides)
    return VoucherService().create(data)


def _items(product, quantity=2):
    return [{"product": str(product["_id"]), "quantity": quantity, "price": 100000}]


def test_order_code_format(orders):
    assert re.fullmatch(r"DM\d{8}", orders.generate_order_code())


def test_create_order_totals(orders, product):
    order = orders.create({"order_items": _items(product)})
    assert order["slug"].startswith("DM")
    assert order["subtotal_price"] == 200000
    assert order["discount_amount"] == 0
    assert order["total_price"] == 200000
    assert order["status"] == "pending"
    assert isinstance(order["order_items"][0]["product"], ObjectId)


def test_create_order_keeps_free_slug_and_replaces_taken_one(orders, product):
    first = orders.create({"order_items": _items(product), "slug": "DM00000001"})
    assert first["slug"] == "DM00000001"
    second = orders.create({"order_items": _items(product), "slug": "DM00000001"})
    assert second["slug"] != "DM00000001"


def test_order_with_voucher_redeems_once(orders, product):
    _voucher()
    order = orders.create({"order_items": _items(product), "voucher_code": "SHIRT20"})
    assert order["discount_amount"] == 40000
    assert order["total_price"] == 160000
    assert VoucherService().find_by_code("SHIRT20")["used_count"] == 1

    with pytest.raises(BadRequestError) as exc:
        orders.create({"order_items": _items(product), "voucher_code": "SHIRT20"})
    assert exc.value.message == "Voucher usage limit reached"


def test_multi_product_order_cannot_use_product_voucher(orders, product):
    other = ProductsRepository().create({"name": "Quần", "slug": "quan"})
    _voucher()
    items = _items(product) + [{"product": str(other["_id"]), "quantity": 1, "price": 50000}]
    with pytest.raises(BadRequestError) as exc:
        orders.create({"order_items": items, "voucher_code": "SHIRT20"})
    assert exc.value.message == "Product slug is required for this voucher"
    assert orders.repo.count({}) == 0


def test_update_recomputes_totals(orders, product):
    order = orders.create({"order_items": _items(product)})
    updated = orders.update(order["slug"], {"order_items": _items(product, quantity=3)})
    assert updated["total_price"] == 300000


def test_payos_paid_completes_order(orders, product):
    order = orders.create({"order_items": _items(product)})
    updated = orders.update_payment_status(order["slug"], "payos", {"status": "PAID"})
    assert updated["status"] == "completed"
    other = orders.create({"order_items": _items(product)})
    assert orders.update_payment_status(other["slug"], "cash", {})["status"] == "pending"


def test_checkout_slug():
    checkout_id = ObjectId("64b0000000000000000abc12")
    assert checkout_slug("Nguyễn Văn A", checkout_id) == "nguyen-van-a-0abc12"


def test_create_cash_checkout(orders, checkouts, product):
    order = orders.create({"order_items": _items(product)})
    checkout = checkouts.create({
        "order_id": str(order["_id"]),
        "name": "Trần Thị B",
        "phone": "0901234567",
        "address": "Hà Nội",
    })
    assert checkout["slug"].startswith("tran-thi-b-")
    assert checkout["order_id"] == order["_id"]
    assert checkout["payment_method"] == "cash"
    assert checkout["payment_status"] == "pending"


def test_bank_checkout_stores_transfer_info(orders, checkouts, product):
    VietQRService().create_config({
        "bank_id": "VCB", "account_no": "0123456789", "account_name": "SHOP", "active": True,
    })
    order = orders.create({"order_items": _items(product)})
    checkout = checkouts.create({
        "order_id": str(order["_id"]),
        "name": "Lê C",
        "phone": "0901234567",
        "address": "HCM",
        "payment_method": "bank",
    })
    info = checkout["payment_method_info"]
    assert info["amount"] == 200000
    assert info["description"] == order["slug"]
    assert info["qr_code_url"].startswith("https://img.vietqr.io/image/VCB-0123456789-compact2.png?")


def test_bank_checkout_without_config_fails(orders, checkouts, product):
    order = orders.create({"order_items": _items(product)})
    with pytest.raises(BadRequestError):
        checkouts.create({
            "order_id": str(order["_id"]), "name": "D", "phone": "0901234567",
            "address": "x", "payment_method": "bank",
        })


def test_checkout_for_missing_order(checkouts):
    with pytest.raises(NotFoundError):
        checkouts.create({"order_id": str(ObjectId()), "name": "E", "phone": "0901234567", "address": "x"})


def test_checkout_update_rules(orders, checkouts, product):
    order = orders.create({"order_items": _items(product)})
    checkout = checkouts.create({"order_id": str(order["_id"]), "name": "Old Name",
                                 "phone": "0901234567", "address": "x"})
    with pytest.raises(BadRequestError):
        checkouts.update(checkout["slug"], {"order_id": str(ObjectId())})

    renamed = checkouts.update(checkout["slug"], {"name": "New Name"})
    assert renamed["slug"] == checkout_slug("New Name", checkout["_id"])

    with pytest.raises(BadRequestError):
        checkouts.update_payment_status(renamed["slug"], "refunded")
    assert checkouts.update_payment_status(renamed["slug"], "paid")["payment_status"] == "paid"


def test_checkout_http_phone_validation(client, product):
    order = OrderService().create({"order_items": _items(product)})
    resp = client.post("/api/v1/checkout/", json={
        "order_id": str(order["_id"]), "name": "F", "phone": "12ab", "address": "x",
    })
    assert resp.status_code == 422

    resp = client.post("/api/v1/checkout/", json={
        "order_id": str(order["_id"]), "name": "F", "phone": "0901234567", "address": "x",
    })
    assert resp.status_code == 201
    assert resp.json()["order_id"] == str(order["_id"])


def test_order_http_create_records_user(client, product, customer, customer_headers):
    resp = client.post("/api/v1/orders/", json={"order_items": _items(product)}, headers=customer_headers)
    assert resp.status_code == 201
    assert resp.json()["user_id"] == str(customer["_id"])
    assert client.get("/api/v1/orders/", headers=customer_headers).status_code == 403


def test_guest_order_cannot_claim_another_users_voucher(client, product, customer):
    _voucher(code="VIP", voucher_type="GLOBAL", product_slugs=[], user_id=str(customer["_id"]))
    resp = client.post("/api/v1/orders/", json={
        "order_items": _items(product),
        "voucher_code": "VIP",
        "user_id": str(customer["_id"]),
    })
    assert resp.status_code == 400
    assert resp.json()["message"] == "Voucher is not available for this user"
    assert VoucherService().find_by_code("VIP")["used_count"] == 0


def test_logged_in_user_redeems_own_voucher(client, product, customer, customer_headers):
    _voucher(code="VIP", voucher_type="GLOBAL", product_slugs=[], user_id=str(customer["_id"]))
    resp = client.post("/api/v1/orders/", json={"order_items": _items(product), "voucher_code": "VIP"},
                       headers=customer_headers)
    assert resp.status_code == 201
    assert resp.json()["discount_amount"] == 40000
