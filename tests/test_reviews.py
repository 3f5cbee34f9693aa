import pytest

from app.core.errors import BadRequestError
from app.repositories.orders_repo import CheckoutsRepository, OrdersRepository
from app.repositories.products_repo import ProductsRepository
from app.services.reviews import ReviewService


@pytest.fixture
def service():
    return ReviewService()


@pytest.fixture
def product():
    return ProductsRepository().create({"name": "Bình nước", "slug": "binh-nuoc"})


def _purchase(product, user, order_status="completed", payment_status="paid"):
    order = OrdersRepository().create({
        "slug": "DM00000042",
        "status": order_status,
        "order_items": [{"product": product["_id"], "quantity": 1, "price": 90000}],
        "total_price": 90000,
    })
    CheckoutsRepository().create({
        "order_id": order["_id"],
        "user_id": str(user["_id"]),
        "slug": "buyer-000042",
        "payment_status": payment_status,
    })
    return order


def test_review_requires_paid_completed_purchase(service, product, customer):
    with pytest.raises(BadRequestError):
        service.create({"product_slug": "binh-nuoc", "rating": 5}, customer)

    _purchase(product, customer, order_status="processing")
    assert service.has_purchased(str(customer["_id"]), "binh-nuoc") is False


def test_unpaid_checkout_does_not_count(service, product, customer):
    _purchase(product, customer, payment_status="pending")
    assert service.has_purchased(str(customer["_id"]), "binh-nuoc") is False


def test_one_review_per_product(service, product, customer):
    _purchase(product, customer)
    review = service.create({"product_slug": "binh-nuoc", "rating": 4, "comment": "Tốt"}, customer)
    assert review["is_verified_purchase"] is True
    assert review["user_email"] == "customer@example.com"

    with pytest.raises(BadRequestError):
        service.create({"product_slug": "binh-nuoc", "rating": 5}, customer)
    assert service.can_review(str(customer["_id"]), "binh-nuoc") == {
        "can_review": False, "has_purchased": True, "has_reviewed": True,
    }


def test_rating_ignores_removed_reviews(service):
    repo = service.repo
    repo.create({"product_slug": "p", "user_id": "1", "rating": 5, "is_active": True})
    repo.create({"product_slug": "p", "user_id": "2", "rating": 4, "is_active": True})
    hidden = repo.create({"product_slug": "p", "user_id": "3", "rating": 1, "is_active": True})
    service.remove(str(hidden["_id"]))

    assert service.get_product_rating("p") == {"average_rating": 4.5, "total_reviews": 2}
    assert service.get_product_rating("none") == {"average_rating": 0, "total_reviews": 0}
    assert len(service.find_by_product_slug("p")) == 2


def test_review_http_flow(client, product, customer, customer_headers):
    _purchase(product, customer)
    resp = client.post("/api/v1/reviews/", json={"product_slug": "binh-nuoc", "rating": 5},
                       headers=customer_headers)
    assert resp.status_code == 201

    rating = client.get("/api/v1/reviews/product/binh-nuoc/rating").json()
    assert rating == {"average_rating": 5.0, "total_reviews": 1}

    bad = client.post("/api/v1/reviews/", json={"product_slug": "binh-nuoc", "rating": 6},
                      headers=customer_headers)
    assert bad.status_code == 422
