import pytest

from app.core.errors import BadRequestError
from app.core.slug import generate_unique_slug, normalize_for_search, slugify


@pytest.mark.parametrize("text,expected", [
    ("Áo thun Đẹp  2024!", "ao-thun-dep-2024"),
    ("Điện thoại   di động", "dien-thoai-di-dong"),
    ("  Giày -- thể thao  ", "giay-the-thao"),
    ("Hello, World", "hello-world"),
    ("", ""),
    (None, ""),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_normalize_for_search_strips_tones_and_punctuation():
    assert normalize_for_search("Bàn phím  CƠ, RGB-87") == "ban phim co rgb 87"


def test_generate_unique_slug_appends_counter(mongo_db):
    col = mongo_db["categories"]
    assert generate_unique_slug("Áo khoác", col) == "ao-khoac"
    col.insert_one({"slug": "ao-khoac"})
    assert generate_unique_slug("Áo khoác", col) == "ao-khoac-1"
    col.insert_one({"slug": "ao-khoac-1"})
    assert generate_unique_slug("Áo khoác", col) == "ao-khoac-2"


def test_generate_unique_slug_ignores_excluded_document(mongo_db):
    col = mongo_db["categories"]
    doc_id = col.insert_one({"slug": "quan-jean"}).inserted_id
    assert generate_unique_slug("Quần jean", col, exclude_id=doc_id) == "quan-jean"


def test_generate_unique_slug_rejects_empty(mongo_db):
    with pytest.raises(BadRequestError):
        generate_unique_slug("!!!", mongo_db["categories"])
