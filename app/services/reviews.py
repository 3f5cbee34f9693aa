"""
Product reviews, limited to verified purchases
"""
import logging
from typing import Any, Dict, List

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.orders_repo import CheckoutsRepository, OrdersRepository
from app.repositories.products_repo import ProductsRepository
from app.repositories.reviews_repo import ReviewsRepository

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self):
        self.repo = ReviewsRepository()
        self.products = ProductsRepository()
        self.orders = OrdersRepository()
        self.checkouts = CheckoutsRepository()

    def has_purchased(self, user_id: str, product_slug: str) -> bool:
        """A completed order with the product, paid through a checkout of this user"""
        product = self.products.find_by_slug(product_slug)
        if not product:
            return False
        orders = self.orders.find_completed_with_product(product["_id"])
        return self.checkouts.has_paid_checkout([o["_id"] for o in orders], user_id)

    def create(self, data: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        user_id = str(user["_id"])
        product_slug = data["product_slug"]
        if self.repo.find_by_user_and_product(user_id, product_slug):
            raise BadRequestError("You have already reviewed this product")
        if not self.has_purchased(user_id, product_slug):
            raise BadRequestError("You can only review products you have purchased")

        review = self.repo.create({
            **data,
            "user_id": user_id,
            "user_name": user.get("name"),
            "user_email": user.get("email"),
            "is_active": True,
            "is_verified_purchase": True,
        })
        logger.info(f"User {user_id} reviewed {product_slug} ({review['rating']}/5)")
        return review

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("created_at", -1)])

    def find_by_product_slug(self, product_slug: str) -> List[Dict[str, Any]]:
        return self.repo.active_for_product(product_slug)

    def find_one(self, review_id: str) -> Dict[str, Any]:
        review = self.repo.find_by_id(to_object_id(review_id, "review id"))
        if not review:
            raise NotFoundError("Review", f"Review with ID {review_id} not found")
        return review

    def update(self, review_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        review = self.find_one(review_id)
        payload = {k: v for k, v in data.items() if v is not None}
        return self.repo.update_by_id(review["_id"], payload)

    def remove(self, review_id: str) -> Dict[str, Any]:
        review = self.find_one(review_id)
        return self.repo.update_by_id(review["_id"], {"is_active": False})

    def get_product_rating(self, product_slug: str) -> Dict[str, Any]:
        reviews = self.repo.active_for_product(product_slug)
        if not reviews:
            return {"average_rating": 0, "total_reviews": 0}
        average = sum(r["rating"] for r in reviews) / len(reviews)
        return {"average_rating": round(average, 1), "total_reviews": len(reviews)}

    def can_review(self, user_id: str, product_slug: str) -> Dict[str, Any]:
        already = self.repo.find_by_user_and_product(user_id, product_slug) is not None
        purchased = self.has_purchased(user_id, product_slug)
        return {"can_review": purchased and not already, "has_purchased": purchased,
                "has_reviewed": already}