import pytest

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.services.posts import PostCategoryService, PostService
from app.services.redirects import RedirectService


@pytest.fixture
def posts():
    return PostService()


@pytest.fixture
def post_categories():
    return PostCategoryService()


def test_create_fills_slug_author_and_publish_date(posts, customer):
    first = posts.create({"name": "Khuyến mãi tháng 6"}, customer)
    assert first["slug"] == "khuyen-mai-thang-6"
    assert first["author"] == "Khách Hàng"
    assert first["user_id"] == str(customer["_id"])
    assert first["published_date"] is not None
    assert first["status"] == "draft"

    second = posts.create({"name": "Khuyến mãi tháng 6"})
    assert second["slug"] == "khuyen-mai-thang-6-1"
    assert second["author"] == "Admin"


def test_listing_skips_hidden_and_deleted(posts):
    posts.create({"name": "Visible"})
    posts.create({"name": "Hidden", "is_visible": False})
    posts.create({"name": "Gone"})
    posts.create({"name": "Pinned", "is_pinned": True})
    posts.soft_delete("gone")

    names = [p["name"] for p in posts.find_all()["data"]]
    assert names[0] == "Pinned"
    assert set(names) == {"Pinned", "Visible"}
    assert posts.find_all(include_hidden=True)["total"] == 3

    with pytest.raises(NotFoundError):
        posts.find_one("hidden")
    assert posts.find_one("hidden", include_hidden=True)["name"] == "Hidden"
    with pytest.raises(NotFoundError):
        posts.find_one("gone", include_hidden=True)


def test_search_matches_name_or_author(posts, customer):
    posts.create({"name": "Cách chọn giày (2024)"}, customer)
    posts.create({"name": "Mẹo giặt áo"})
    assert [p["name"] for p in posts.find_all(search="giày (2024")["data"]] == ["Cách chọn giày (2024)"]
    assert posts.find_all(search="khách")["total"] == 1


def test_update_slug_records_post_redirect(posts):
    posts.create({"name": "Bài cũ"})
    updated = posts.update_slug("bai-cu", "Bài mới")
    assert updated["slug"] == "bai-moi"

    redirect = RedirectService().repo.find_by_old_path("/posts/bai-cu")
    assert redirect["new_path"] == "/posts/bai-moi"
    assert redirect["type"] == "post"

    posts.create({"name": "Khác"})
    with pytest.raises(BadRequestError):
        posts.update("khac", {"slug": "bai-moi"})


def test_status_approval_records_approver(posts, admin_user):
    posts.create({"name": "Review"})
    with pytest.raises(BadRequestError):
        posts.set_status("review", "published")

    approved = posts.set_status("review", "approved", admin_user)
    assert approved["status"] == "approved"
    assert approved["approved_by"] == "Admin"
    assert approved["approved_date"] is not None
    assert posts.find_by_status("approved")["total"] == 1


def test_hard_delete_removes_soft_deleted_post(posts):
    posts.create({"name": "Tạm"})
    posts.soft_delete("tam")
    posts.hard_delete("tam")
    assert posts.repo.count({}) == 0
    with pytest.raises(NotFoundError):
        posts.hard_delete("tam")


def test_transfer_posts(posts, customer, admin_user):
    a = posts.create({"name": "A"}, customer)
    posts.create({"name": "B"}, customer)
    owner, target = str(customer["_id"]), str(admin_user["_id"])

    with pytest.raises(BadRequestError):
        posts.transfer_posts(owner, owner)
    assert posts.transfer_posts(owner, target, [str(a["_id"])]) == {"transferred": 1}
    assert posts.find_by_user(owner)["total"] == 1
    assert posts.transfer_posts(owner, target) == {"transferred": 1}
    assert posts.find_by_user(target)["total"] == 2


def test_post_category_paths_and_tree(post_categories):
    news = post_categories.create({"name": "Tin tức"})
    tech = post_categories.create({"name": "Công nghệ", "parent": str(news["_id"])})
    laptop = post_categories.create({"name": "Laptop", "parent": str(tech["_id"])})

    assert (news["path"], news["level"]) == ("", 0)
    assert (tech["path"], tech["level"]) == ("tin-tuc", 1)
    assert (laptop["path"], laptop["level"]) == ("tin-tuc/cong-nghe", 2)

    tree = post_categories.find_one("tin-tuc")
    assert tree["children"][0]["slug"] == "cong-nghe"
    assert tree["children"][0]["children"][0]["slug"] == "laptop"

    with pytest.raises(NotFoundError):
        post_categories.create({"name": "X", "parent": "64b000000000000000000000"})


def test_post_category_move_rejects_cycles_and_cascades(post_categories):
    news = post_categories.create({"name": "Tin tức"})
    tech = post_categories.create({"name": "Công nghệ", "parent": str(news["_id"])})
    laptop = post_categories.create({"name": "Laptop", "parent": str(tech["_id"])})

    with pytest.raises(ConflictError):
        post_categories.update("tin-tuc", {"parent": str(laptop["_id"])})
    with pytest.raises(ConflictError):
        post_categories.update("tin-tuc", {"parent": str(news["_id"])})

    moved = post_categories.update("cong-nghe", {"parent": None})
    assert (moved["path"], moved["level"], moved["parent"]) == ("", 0, None)
    assert post_categories.repo.find_by_slug("laptop")["path"] == "cong-nghe"
    assert post_categories.repo.find_by_slug("laptop")["level"] == 1
    assert tech["_id"] not in post_categories.repo.find_by_slug("tin-tuc")["children"]


def test_post_category_slug_conflict_and_delete(post_categories):
    news = post_categories.create({"name": "Tin tức"})
    post_categories.create({"name": "Sự kiện", "parent": str(news["_id"])})
    with pytest.raises(ConflictError):
        post_categories.update("su-kien", {"slug": "tin-tuc"})

    post_categories.soft_delete("su-kien")
    assert post_categories.find_one("tin-tuc")["children"] == []
    post_categories.hard_delete("su-kien")
    assert post_categories.repo.find_by_slug("tin-tuc")["children"] == []


def test_hidden_posts_only_listed_for_staff(client, admin_headers, customer_headers):
    resp = client.post("/api/v1/posts/", json={"name": "Nháp", "is_visible": False}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["author"] == "Admin"

    assert client.get("/api/v1/posts/", params={"include_hidden": True}).json()["total"] == 0
    assert client.get("/api/v1/posts/", params={"include_hidden": True},
                      headers=customer_headers).json()["total"] == 0
    assert client.get("/api/v1/posts/", params={"include_hidden": True},
                      headers=admin_headers).json()["total"] == 1
    assert client.get("/api/v1/posts/nhap").status_code == 404


def test_post_writes_require_permission(client, customer_headers):
    resp = client.post("/api/v1/posts/", json={"name": "Spam"}, headers=customer_headers)
    assert resp.status_code == 403
    resp = client.post("/api/v1/post-categories/", json={"name": "Spam"}, headers=customer_headers)
    assert resp.status_code == 403
