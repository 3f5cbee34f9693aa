import pytest

from app.core.errors import BadRequestError, NotFoundError
from app.services.content import BannerService, ContactService, InfoWebsiteService, PageService
from app.services.filters import FilterService, validate_range_options


def test_page_slug_from_title_or_request():
    pages = PageService()
    assert pages.create({"title": "Chính sách đổi trả"})["slug"] == "chinh-sach-doi-tra"
    assert pages.create({"title": "Chính sách đổi trả"})["slug"] == "chinh-sach-doi-tra-1"
    assert pages.create({"title": "X", "slug": "Giới Thiệu"})["slug"] == "gioi-thieu"
    with pytest.raises(BadRequestError):
        pages.create({"title": "Y", "slug": "gioi-thieu"})


def test_single_active_site_info():
    service = InfoWebsiteService()
    with pytest.raises(NotFoundError):
        service.find_active()

    first = service.create({"name": "Shop A", "is_active": True})
    second = service.create({"name": "Shop B", "is_active": True})
    assert service.find_active()["_id"] == second["_id"]
    assert service.find_one(str(first["_id"]))["is_active"] is False

    service.set_active(str(first["_id"]))
    active = [i for i in service.find_all() if i["is_active"]]
    assert [i["name"] for i in active] == ["Shop A"]


@pytest.mark.parametrize("options", [
    [],
    [{"label": "", "min": 0, "max": 10}],
    [{"label": "a", "min": -1, "max": 10}],
    [{"label": "a", "min": 10, "max": 10}],
])
def test_invalid_range_options(options):
    with pytest.raises(BadRequestError):
        validate_range_options(options)


def test_range_filter_clears_plain_options():
    service = FilterService()
    created = service.create({
        "name": "Giá",
        "type": "range",
        "options": ["ignored"],
        "range_options": [{"label": "Dưới 1 triệu", "min": 0, "max": 1000000}],
    })
    assert created["options"] == []
    assert created["range_options"][0]["max"] == 1000000

    switched = service.update(str(created["_id"]), {"type": "checkbox", "options": ["a"]})
    assert switched["range_options"] == []
    assert switched["options"] == ["a"]


def test_filters_by_category():
    service = FilterService()
    category_id = "64b0000000000000000000aa"
    service.create({"name": "Màu", "type": "checkbox", "categories": [category_id], "options": ["đỏ"]})
    service.create({"name": "Size", "type": "checkbox", "categories": []})
    assert [f["name"] for f in service.find_by_category(category_id)] == ["Màu"]


def test_public_site_info_endpoint(client, admin_headers):
    assert client.get("/api/v1/info-website/active").status_code == 404
    resp = client.post("/api/v1/info-website/", json={"name": "Shop", "phone": "0900", "is_active": True},
                       headers=admin_headers)
    assert resp.status_code == 201
    assert client.get("/api/v1/info-website/active").json()["name"] == "Shop"


def test_range_filter_http_validation(client, admin_headers):
    resp = client.post("/api/v1/filters/", json={"name": "Giá", "type": "range"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "BAD_REQUEST"


def test_banners_ordered_and_toggled():
    service = BannerService()
    late = service.create({"title": "B", "image": "/b.jpg", "type": "home", "order": 2, "is_active": True})
    service.create({"title": "A", "image": "/a.jpg", "type": "home", "order": 1, "is_active": True})
    service.create({"title": "S", "image": "/s.jpg", "type": "sidebar", "order": 0, "is_active": True})

    assert [b["title"] for b in service.find_active_by_type("home")] == ["A", "B"]
    assert [b["title"] for b in service.find_all(type="sidebar")] == ["S"]

    service.update_order(str(late["_id"]), 0)
    assert [b["title"] for b in service.find_active_by_type("home")] == ["B", "A"]

    assert service.toggle_active(str(late["_id"]))["is_active"] is False
    assert [b["title"] for b in service.find_all(is_active=False)] == ["B"]
    assert [b["title"] for b in service.find_active_by_type("home")] == ["A"]


def test_missing_banner_and_contact():
    with pytest.raises(NotFoundError):
        BannerService().find_one("64b000000000000000000000")
    with pytest.raises(NotFoundError):
        ContactService().remove("64b000000000000000000000")


def test_contact_form_is_public_but_listing_is_not(client, admin_headers, customer_headers):
    resp = client.post("/api/v1/contacts/", json={
        "name": "Chị Lan", "phone": "0901234567", "message": "Shop còn size M không?",
    })
    assert resp.status_code == 201
    contact_id = resp.json()["id"]

    assert client.get("/api/v1/contacts/", headers=customer_headers).status_code == 403
    listed = client.get("/api/v1/contacts/", headers=admin_headers).json()
    assert [c["name"] for c in listed] == ["Chị Lan"]

    assert client.delete(f"/api/v1/contacts/{contact_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/v1/contacts/{contact_id}", headers=admin_headers).status_code == 404


def test_banner_http_admin_only(client, admin_headers, customer_headers):
    body = {"title": "Sale", "image": "/sale.jpg"}
    assert client.post("/api/v1/banners/", json=body, headers=customer_headers).status_code == 403
    resp = client.post("/api/v1/banners/", json=body, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["type"] == "home"
    assert [b["title"] for b in client.get("/api/v1/banners/active/home").json()] == ["Sale"]
