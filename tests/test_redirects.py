import pytest

from app.core.errors import BadRequestError
from app.services.redirects import RedirectService, normalize_path


@pytest.fixture
def service():
    return RedirectService()


def test_normalize_path():
    assert normalize_path("san-pham/cu") == "/san-pham/cu"
    assert normalize_path(" /a ") == "/a"
    assert normalize_path("https://example.com/x") == "https://example.com/x"
    with pytest.raises(BadRequestError):
        normalize_path("  ")


def test_create_upserts_on_old_path(service):
    first = service.create({"old_path": "old", "new_path": "/new"})
    assert first["old_path"] == "/old"
    assert first["status_code"] == 301
    assert first["hit_count"] == 0

    second = service.create({"old_path": "/old", "new_path": "/newer", "status_code": 302})
    assert second["_id"] == first["_id"]
    assert second["new_path"] == "/newer"
    assert service.repo.count({}) == 1


def test_rejects_self_redirect_and_bad_status(service):
    with pytest.raises(BadRequestError):
        service.create({"old_path": "/a", "new_path": "a"})
    with pytest.raises(BadRequestError):
        service.create({"old_path": "/a", "new_path": "/b", "status_code": 404})


def test_bulk_counts_created_and_updated(service):
    service.create({"old_path": "/a", "new_path": "/b"})
    result = service.create_bulk([
        {"old_path": "/a", "new_path": "/c"},
        {"old_path": "/d", "new_path": "/e"},
        {"old_path": "/f", "new_path": "/g"},
    ])
    assert result == {"created": 2, "updated": 1}


def test_lookup_records_hits_and_skips_inactive(service):
    service.create({"old_path": "/a", "new_path": "/b"})
    service.create({"old_path": "/off", "new_path": "/b", "is_active": False})

    service.find_redirect_by_path("/a")
    redirect = service.find_redirect_by_path("a")
    assert redirect["hit_count"] == 2
    assert redirect["last_accessed"] is not None
    assert service.find_redirect_by_path("/off") is None


def test_find_all_escapes_path_filter(service):
    service.create({"old_path": "/a.b", "new_path": "/x"})
    service.create({"old_path": "/axb", "new_path": "/y"})
    page = service.find_all(path="a.b")
    assert [r["old_path"] for r in page["data"]] == ["/a.b"]
    assert page["total"] == 1


def test_update_rejects_taken_old_path(service):
    service.create({"old_path": "/a", "new_path": "/b"})
    other = service.create({"old_path": "/c", "new_path": "/d"})
    with pytest.raises(BadRequestError):
        service.update(str(other["_id"]), {"old_path": "/a"})


def test_middleware_redirects_storefront_paths(client, service):
    service.create({"old_path": "/san-pham/ao-cu", "new_path": "/san-pham/ao-moi"})
    resp = client.get("/san-pham/ao-cu?color=red", follow_redirects=False)
    assert resp.status_code == 301
    assert resp.headers["location"] == "/san-pham/ao-moi?color=red"


def test_middleware_uses_stored_status_code(client, service):
    service.create({"old_path": "/tam", "new_path": "/moi", "status_code": 302})
    assert client.get("/tam", follow_redirects=False).status_code == 302


def test_middleware_ignores_api_paths(client, service):
    service.create({"old_path": "/api/v1/products/old", "new_path": "/api/v1/products/new"})
    resp = client.get("/api/v1/products/old", follow_redirects=False)
    assert resp.status_code == 404


def test_resolve_endpoint(client, service):
    service.create({"old_path": "/a", "new_path": "/b"})
    resp = client.get("/api/v1/redirects/resolve", params={"path": "/a"})
    assert resp.status_code == 200
    assert resp.json()["new_path"] == "/b"
    assert client.get("/api/v1/redirects/resolve", params={"path": "/zzz"}).status_code == 404


def test_admin_bulk_endpoint(client, admin_headers):
    resp = client.post("/api/v1/redirects/bulk", headers=admin_headers, json={"redirects": [
        {"old_path": "/1", "new_path": "/2"},
        {"old_path": "/3", "new_path": "/4", "type": "product"},
    ]})
    assert resp.status_code == 200
    assert resp.json() == {"created": 2, "updated": 0}


def test_middleware_passes_through_when_lookup_fails(client, service, monkeypatch):
    service.create({"old_path": "/redoc", "new_path": "/elsewhere"})

    def broken_lookup(self, path):
        raise RuntimeError("redirects collection unavailable")

    monkeypatch.setattr(RedirectService, "find_redirect_by_path", broken_lookup)
    resp = client.get("/redoc", follow_redirects=False)
    assert resp.status_code == 200
    assert "location" not in resp.headers
