"""
Product catalog service
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from app.core.errors import BadRequestError, NotFoundError
from app.core.slug import generate_unique_slug, normalize_for_search, slugify
from app.repositories.base import paginate
from app.repositories.products_repo import ProductsRepository
from app.services.redirects import RedirectService

logger = logging.getLogger(__name__)

PAGE_SIZE = 12
SEARCH_PAGE_SIZE = 16

_HAS_DIGIT = re.compile(r"\d")


def _allows_partial(keyword: str) -> bool:
    return len(keyword) >= 4 or bool(_HAS_DIGIT.search(keyword))


def score_product(keywords: List[str], name: str, sku: str) -> Tuple[bool, int]:
    """
    Score a product against search keywords.

    Every keyword has to hit the SKU or a word of the name. Exact SKU
    hits weigh most, then SKU substrings, then whole name words, then
    partial name words (only for keywords of 4+ chars or with a digit).
    """
    name_words = normalize_for_search(name).split()
    sku = normalize_for_search(sku).replace(" ", "")
    score = 0
    for keyword in keywords:
        matched = False
        if sku and keyword == sku:
            score += 100
            matched = True
        elif sku and keyword in sku:
            score += 50
            matched = True
        for word in name_words:
            if word == keyword:
                score += 10
                matched = True
            elif _allows_partial(keyword) and keyword in word:
                score += 5
                matched = True
        if not matched:
            return False, 0
    return True, score


class ProductService:
    def __init__(self, repo: Optional[ProductsRepository] = None,
                 redirects: Optional[RedirectService] = None):
        self.repo = repo or ProductsRepository()
        self.redirects = redirects or RedirectService()

    def _get_or_404(self, slug: str) -> Dict[str, Any]:
        product = self.repo.find_by_slug(slug)
        if not product:
            raise NotFoundError("Product", f"Product with slug {slug} not found")
        return product

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(data)
        name = (payload.get("name") or "").strip()
        if not name:
            raise BadRequestError("Product name is required")
        if not payload.get("base_price") or payload["base_price"] <= 0:
            raise BadRequestError("Base price must be greater than 0")
        payload["name"] = name
        payload["slug"] = generate_unique_slug(name, self.repo.collection)
        payload.setdefault("sold", 0)
        self._check_variants(payload.get("variants") or [])
        product = self.repo.create(payload)
        logger.info(f"Created product {product['slug']}")
        return product

    def find_all(self, page: int = 1, limit: int = PAGE_SIZE) -> Dict[str, Any]:
        return self.repo.paginate({}, page=page, limit=limit, sort=[("created_at", -1)])

    def find_by_main_category(self, main: str, page: int = 1, limit: int = PAGE_SIZE) -> Dict[str, Any]:
        return self.repo.paginate({"category.main": main}, page=page, limit=limit,
                                  sort=[("created_at", -1)])

    def find_by_sub_category(self, sub: str, page: int = 1, limit: int = PAGE_SIZE) -> Dict[str, Any]:
        return self.repo.paginate({"category.sub": sub}, page=page, limit=limit,
                                  sort=[("created_at", -1)])

    def find_one(self, slug: str) -> Dict[str, Any]:
        return self._get_or_404(slug)

    def update(self, slug: str, data: Dict[str, Any]) -> Dict[str, Any]:
        product = self._get_or_404(slug)
        payload = dict(data)
        new_slug = payload.pop("slug", None)
        if new_slug and new_slug != slug:
            self._ensure_slug_free(new_slug)
            payload["slug"] = new_slug
        if "variants" in payload:
            self._check_variants(payload["variants"] or [])
        updated = self.repo.update_by_id(product["_id"], payload)
        if new_slug and new_slug != slug:
            self._record_redirect(slug, new_slug)
        return updated

    def update_name(self, slug: str, name: str) -> Dict[str, Any]:
        product = self._get_or_404(slug)
        if not name or not name.strip():
            raise BadRequestError("Product name is required")
        return self.repo.update_by_id(product["_id"], {"name": name.strip()})

    def update_category(self, slug: str, category: Dict[str, Any]) -> Dict[str, Any]:
        product = self._get_or_404(slug)
        if not category or not category.get("main"):
            raise BadRequestError("Main category is required")
        return self.repo.update_by_id(product["_id"], {
            "category": {
                "main": category["main"],
                "sub": category.get("sub") or [],
                "tags": category.get("tags") or [],
            }
        })

    def update_variants(self, slug: str, variants: List[Dict[str, Any]]) -> Dict[str, Any]:
        product = self._get_or_404(slug)
        self._check_variants(variants)
        return self.repo.update_by_id(product["_id"], {"variants": variants})

    def _check_variants(self, variants: List[Dict[str, Any]]) -> None:
        seen_skus = set()
        for index, variant in enumerate(variants):
            if not variant.get("variant_name"):
                raise BadRequestError(f"Variant {index} is missing a name")
            if not variant.get("combination"):
                raise BadRequestError(f"Variant {index} is missing its attribute combination")
            if variant.get("stock", 0) < 0:
                raise BadRequestError(f"Variant {index} has negative stock")
            sku = variant.get("sku")
            if sku:
                if sku in seen_skus:
                    raise BadRequestError(f"Duplicate variant SKU {sku}")
                seen_skus.add(sku)

    def _ensure_slug_free(self, slug: str) -> None:
        if self.repo.find_by_slug(slug):
            raise BadRequestError(f"Slug {slug} is already in use")

    def update_slug(self, slug: str, new_slug: str) -> Dict[str, Any]:
        product = self._get_or_404(slug)
        new_slug = slugify(new_slug) if new_slug else ""
        if not new_slug:
            raise BadRequestError("New slug is required")
        if new_slug == slug:
            return product
        self._ensure_slug_free(new_slug)
        updated = self.repo.update_by_id(product["_id"], {"slug": new_slug})
        self._record_redirect(slug, new_slug)
        return updated

    def _record_redirect(self, old_slug: str, new_slug: str) -> None:
        try:
            self.redirects.create({
                "old_path": f"/products/{old_slug}",
                "new_path": f"/products/{new_slug}",
                "type": "product",
                "status_code": 301,
                "is_active": True,
            })
        except Exception:
            logger.exception(f"Could not create redirect for product slug {old_slug} -> {new_slug}")

    def search_by_name(self, term: str, page: int = 1, limit: int = SEARCH_PAGE_SIZE) -> Dict[str, Any]:
        keywords = normalize_for_search(term).split()
        if not keywords:
            return paginate([], 0, page, limit)

        scored = []
        for candidate in self.repo.find_search_candidates():
            matched, score = score_product(keywords, candidate.get("name", ""), candidate.get("sku") or "")
            if matched:
                scored.append((score, candidate))
        scored.sort(key=lambda pair: pair[0], reverse=True)

        page = max(page, 1)
        window = scored[(page - 1) * limit: page * limit]
        by_id = {p["_id"]: p for p in self.repo.find_many({"_id": {"$in": [c["_id"] for _, c in window]}})}
        items = []
        for score, candidate in window:
            product = by_id.get(candidate["_id"])
            if product:
                items.append({**product, "search_score": score})
        return paginate(items, len(scored), page, limit)

    def remove(self, slug: str) -> Dict[str, Any]:
        product = self._get_or_404(slug)
        self.repo.delete_by_id(product["_id"])
        logger.info(f"Deleted product {slug}")
        return product
