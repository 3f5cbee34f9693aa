from datetime import datetime, timedelta

import pytest
from freezegun import freeze_time

from app.core.errors import BadRequestError
from app.services.vouchers import VoucherService, calculate_discount, format_vnd, normalize_payment_method


@pytest.fixture
def service():
    return VoucherService()


def _voucher(**overrides):
    data = {
        "code": "SALE10",
        "voucher_type": "GLOBAL",
        "quantity": 5,
        "start_date": datetime(2025, 1, 1),
        "end_date": datetime(2025, 12, 31),
        "discount_type": "PERCENTAGE",
        "discount_value": 10,
    }
    data.update(overrides)
    return data


def test_format_vnd():
    assert format_vnd(1500000) == "1.500.000 VND"
    assert format_vnd(0) == "0 VND"


def test_normalize_payment_method():
    assert normalize_payment_method("cod") == "COD"
    assert normalize_payment_method("bankTransfer") == "BANK"
    assert normalize_payment_method(None) is None


def test_calculate_discount_is_capped_at_total():
    assert calculate_discount({"discount_type": "PERCENTAGE", "discount_value": 10}, 200000) == 20000
    assert calculate_discount({"discount_type": "FIXED", "discount_value": 50000}, 30000) == 30000


def test_product_specific_requires_products(service):
    with pytest.raises(BadRequestError):
        service.create(_voucher(voucher_type="PRODUCT_SPECIFIC", product_slugs=[]))


def test_global_voucher_drops_product_list(service):
    voucher = service.create(_voucher(product_slugs=["ao-thun"]))
    assert voucher["product_slugs"] == []


def test_duplicate_code_rejected(service):
    service.create(_voucher())
    with pytest.raises(BadRequestError):
        service.create(_voucher())


@freeze_time("2025-06-01")
def test_valid_check_returns_discount(service):
    service.create(_voucher())
    result = service.check_voucher_validity("SALE10", total_amount=300000)
    assert result["valid"] is True
    assert result["discount_amount"] == 30000
    assert result["final_price"] == 270000


@freeze_time("2025-06-01")
@pytest.mark.parametrize("overrides,kwargs,message", [
    ({"is_active": False}, {}, "Voucher is inactive"),
    ({"quantity": 1, "used_count": 1}, {}, "Voucher usage limit reached"),
    ({"start_date": datetime(2025, 7, 1)}, {}, "Voucher is not valid at this time"),
    ({"voucher_type": "PRODUCT_SPECIFIC", "product_slugs": ["ao"]}, {},
     "Product slug is required for this voucher"),
    ({"voucher_type": "PRODUCT_SPECIFIC", "product_slugs": ["ao"]}, {"product_slug": "quan"},
     "Voucher is not valid for this product"),
    ({"user_id": "u1"}, {"user_id": "u2"}, "Voucher is not available for this user"),
    ({"minimum_amount": 1500000}, {"total_amount": 1000000},
     "Voucher requires a minimum purchase amount of 1.500.000 VND"),
    ({"minimum_amount": 500000}, {},
     "Voucher requires a minimum purchase amount of 500.000 VND"),
    ({"payment_method": "COD"}, {"payment_method": "bank"}, "Voucher is not valid for this payment method"),
])
def test_check_reports_first_failure(service, overrides, kwargs, message):
    service.create(_voucher(**overrides))
    result = service.check_voucher_validity("SALE10", **kwargs)
    assert result == {"valid": False, "message": message}


def test_check_unknown_code(service):
    assert service.check_voucher_validity("NOPE") == {"valid": False, "message": "Voucher not found"}


@freeze_time("2025-06-01")
def test_inactive_is_reported_before_quota(service):
    service.create(_voucher(is_active=False, quantity=1, used_count=1))
    assert service.check_voucher_validity("SALE10")["message"] == "Voucher is inactive"


@freeze_time("2025-06-01")
def test_use_voucher_stops_at_quantity(service):
    service.create(_voucher(quantity=2))
    assert service.use_voucher("SALE10")["used_count"] == 1
    assert service.use_voucher("SALE10")["used_count"] == 2
    with pytest.raises(BadRequestError):
        service.use_voucher("SALE10")
    assert service.find_by_code("SALE10")["used_count"] == 2


def test_increment_usage_is_conditional(service):
    voucher = service.create(_voucher(quantity=1))
    assert service.repo.increment_usage(voucher["_id"], 1)["used_count"] == 1
    assert service.repo.increment_usage(voucher["_id"], 1) is None


def test_expired_voucher_cannot_be_used(service):
    service.create(_voucher())
    with freeze_time("2026-02-01"):
        with pytest.raises(BadRequestError):
            service.use_voucher("SALE10")


@freeze_time("2025-06-01")
def test_find_valid_vouchers_filters(service):
    service.create(_voucher(code="ALL"))
    service.create(_voucher(code="COD", payment_method="COD"))
    service.create(_voucher(code="SHIRT", voucher_type="PRODUCT_SPECIFIC", product_slugs=["ao"]))
    service.create(_voucher(code="MINE", user_id="u1"))
    service.create(_voucher(code="GONE", quantity=1, used_count=1))
    service.create(_voucher(code="LATER", start_date=datetime(2025, 6, 2)))

    codes = {v["code"] for v in service.find_valid_vouchers()}
    assert codes == {"ALL", "COD", "MINE"}

    codes = {v["code"] for v in service.find_valid_vouchers(product_slug="ao", user_id="u2",
                                                            payment_method="bank")}
    assert codes == {"ALL", "SHIRT"}


def test_update_validates_dates(service):
    voucher = service.create(_voucher())
    with pytest.raises(BadRequestError):
        service.update(str(voucher["_id"]), {"end_date": datetime(2024, 1, 1)})


def test_voucher_http_check_and_admin_create(client, admin_headers):
    now = datetime.utcnow()
    body = {
        "code": " WELCOME ",
        "quantity": 3,
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=1)).isoformat(),
        "discount_type": "FIXED",
        "discount_value": 20000,
    }
    resp = client.post("/api/v1/vouchers/", json=body, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["code"] == "WELCOME"

    check = client.post("/api/v1/vouchers/check", json={"code": "WELCOME", "total_amount": 100000})
    assert check.status_code == 200
    assert check.json()["valid"] is True
    assert check.json()["final_price"] == 80000


def test_voucher_percentage_over_100_rejected(client, admin_headers):
    body = {
        "code": "TOO_MUCH",
        "quantity": 1,
        "start_date": "2025-01-01T00:00:00",
        "end_date": "2025-12-31T00:00:00",
        "discount_type": "PERCENTAGE",
        "discount_value": 150,
    }
    resp = client.post("/api/v1/vouchers/", json=body, headers=admin_headers)
    assert resp.status_code == 422
    assert resp.json()["error"] == "VALIDATION_ERROR"
