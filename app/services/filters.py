"""
Catalogue filters attached to categories
"""
from typing import Any, Dict, List, Optional

from app.core.errors import BadRequestError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.content_repo import FiltersRepository


def validate_range_options(range_options: List[Dict[str, Any]]) -> None:
    if not range_options:
        raise BadRequestError("Range filters need at least one range option")
    for index, option in enumerate(range_options):
        if not option.get("label"):
            raise BadRequestError(f"Range option {index} is missing a label")
        low, high = option.get("min"), option.get("max")
        if low is None or low < 0:
            raise BadRequestError(f"Range option {index} needs a minimum of at least 0")
        if high is None or high <= low:
            raise BadRequestError(f"Range option {index} needs a maximum greater than its minimum")


class FilterService:
    def __init__(self, repo: Optional[FiltersRepository] = None):
        self.repo = repo or FiltersRepository()

    def _normalize(self, payload: Dict[str, Any], current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if "categories" in payload and payload["categories"] is not None:
            payload["categories"] = [to_object_id(c, "category id") for c in payload["categories"]]

        filter_type = payload.get("type") or (current or {}).get("type")
        if filter_type == "range":
            options = payload.get("range_options")
            if options is None:
                options = (current or {}).get("range_options") or []
            validate_range_options(options)
            payload["range_options"] = options
            payload["options"] = []
        elif "type" in payload or "range_options" in payload:
            payload["range_options"] = []
        return payload

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.repo.create(self._normalize(dict(data)))

    def find_all(self) -> List[Dict[str, Any]]:
        return self.repo.find_many({}, sort=[("name", 1)])

    def find_one(self, filter_id: str) -> Dict[str, Any]:
        item = self.repo.find_by_id(to_object_id(filter_id, "filter id"))
        if not item:
            raise NotFoundError("Filter", f"Filter with ID {filter_id} not found")
        return item

    def update(self, filter_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self.find_one(filter_id)
        payload = {k: v for k, v in data.items() if v is not None}
        return self.repo.update_by_id(current["_id"], self._normalize(payload, current))

    def remove(self, filter_id: str) -> Dict[str, Any]:
        item = self.find_one(filter_id)
        self.repo.delete_by_id(item["_id"])
        return item

    def find_by_category(self, category_id: str) -> List[Dict[str, Any]]:
        return self.repo.find_by_category(to_object_id(category_id, "category id"))
