"""
Slug helpers for Vietnamese text
"""
import re
import unicodedata
from typing import Any, Optional

from bson import ObjectId
from pymongo.collection import Collection

from app.core.errors import BadRequestError

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_NOT_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")
_PUNCTUATION = re.compile(r"[^\w\s]", re.UNICODE)


def remove_tones(text: str) -> str:
    """Strip Vietnamese diacritics, mapping đ/Đ to d/D"""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = _COMBINING_MARKS.sub("", decomposed)
    return stripped.replace("đ", "d").replace("Đ", "D")


def slugify(text: Optional[str]) -> str:
    """
    Convert a (possibly Vietnamese) title into a URL slug.

    >>> slugify("Áo thun Đẹp  2024!")
    'ao-thun-dep-2024'
    """
    if not text:
        return ""
    value = _NOT_SLUG_CHARS.sub("", remove_tones(text)).strip()
    value = _WHITESPACE.sub("-", value)
    value = _DASHES.sub("-", value)
    return value.lower()


def normalize_for_search(text: Optional[str]) -> str:
    """Lowercase, tone-free, punctuation replaced with single spaces"""
    if not text:
        return ""
    value = remove_tones(text).lower()
    value = _PUNCTUATION.sub(" ", value)
    return _WHITESPACE.sub(" ", value).strip()


def generate_unique_slug(
    text: str,
    collection: Collection,
    exclude_id: Optional[Any] = None,
    field: str = "slug"
) -> str:
    """Return slugify(text), suffixed with -1, -2, ... until unused in collection"""
    base = slugify(text)
    if not base:
        raise BadRequestError("Cannot generate a slug from an empty value")

    query_extra = {}
    if exclude_id is not None:
        oid = exclude_id if isinstance(exclude_id, ObjectId) else ObjectId(str(exclude_id))
        query_extra = {"_id": {"$ne": oid}}

    candidate = base
    counter = 1
    while collection.find_one({field: candidate, **query_extra}, {"_id": 1}):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
