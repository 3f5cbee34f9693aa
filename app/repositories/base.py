"""
Base Repository Pattern Implementation
"""
import math
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from pymongo.collection import Collection
from pymongo import ReturnDocument
from bson import ObjectId
from bson.errors import InvalidId

from app.core.database import db_manager
from app.core.decorators import handle_db_errors
from app.core.errors import BadRequestError


def to_object_id(value: Any, field: str = "id") -> ObjectId:
    """Coerce a string id into an ObjectId, raising 400 on malformed input"""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise BadRequestError(f"Invalid {field}: {value}", details={"field": field})


def serialize_doc(value: Any) -> Any:
    """Recursively make Mongo documents JSON friendly (_id -> id, ObjectId -> str)"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [serialize_doc(v) for v in value]
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if key == "_id":
                out["id"] = serialize_doc(item)
            else:
                out[key] = serialize_doc(item)
        return out
    return value


def paginate(items: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "data": items,
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }


class BaseRepository:
    """
    Base repository with common CRUD operations
    """

    collection_name: str = ""

    def __init__(self, collection_name: Optional[str] = None):
        self.collection_name = collection_name or self.collection_name

    @property
    def collection(self) -> Collection:
        return db_manager.get_collection(self.collection_name)

    @handle_db_errors
    def find_by_id(self, id: Any) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": to_object_id(id)})

    @handle_db_errors
    def find_one(self, query: Dict, sort: Optional[List[Tuple[str, int]]] = None) -> Optional[Dict[str, Any]]:
        """Find single document by query"""
        return self.collection.find_one(query, sort=sort)

    @handle_db_errors
    def find_many(
        self,
        query: Optional[Dict] = None,
        skip: int = 0,
        limit: int = 0,
        sort: Optional[List[Tuple[str, int]]] = None
    ) -> List[Dict[str, Any]]:
        """Find multiple documents by query"""
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    @handle_db_errors
    def count(self, query: Optional[Dict] = None) -> int:
        """Count documents matching query"""
        return self.collection.count_documents(query or {})

    def exists(self, query: Dict) -> bool:
        return self.find_one(query) is not None

    @handle_db_errors
    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create new document, stamping created_at/updated_at"""
        now = datetime.utcnow()
        doc = dict(data)
        doc.setdefault("created_at", now)
        doc["updated_at"] = now
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    @handle_db_errors
    def update_by_id(self, id: Any, data: Dict[str, Any],
                     unset: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
        """Apply $set (and optional $unset) and return the updated document"""
        update: Dict[str, Any] = {"$set": {**data, "updated_at": datetime.utcnow()}}
        if unset:
            update["$unset"] = {field: "" for field in unset}
        return self.collection.find_one_and_update(
            {"_id": to_object_id(id)},
            update,
            return_document=ReturnDocument.AFTER
        )

    @handle_db_errors
    def update_raw(self, query: Dict, update: Dict, many: bool = False) -> int:
        """Run a raw update document, returning the modified count"""
        if many:
            return self.collection.update_many(query, update).modified_count
        return self.collection.update_one(query, update).modified_count

    @handle_db_errors
    def delete_by_id(self, id: Any) -> bool:
        """Delete document by ID"""
        result = self.collection.delete_one({"_id": to_object_id(id)})
        return result.deleted_count > 0

    @handle_db_errors
    def delete_many(self, query: Dict) -> int:
        return self.collection.delete_many(query).deleted_count

    def paginate(
        self,
        query: Dict,
        page: int = 1,
        limit: int = 10,
        sort: Optional[List[Tuple[str, int]]] = None
    ) -> Dict[str, Any]:
        page = max(page, 1)
        items = self.find_many(query, skip=(page - 1) * limit, limit=limit, sort=sort)
        return paginate(items, self.count(query), page, limit)
