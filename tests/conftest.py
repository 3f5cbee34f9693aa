import os

import pytest

# Test configuration must be in place before the app modules read it
os.environ.setdefault("STOREFRONT_BCRYPT_ROUNDS", "4")
os.environ.setdefault("PAYMENT_PAYOS_CHECKSUM_KEY", "test-checksum-key")

import mongomock  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.database import db_manager  # noqa: E402
from app.main import app  # noqa: E402
from app.repositories.indexes import ensure_indexes  # noqa: E402
from app.services.auth import create_user, login_user  # noqa: E402
from app.services.permissions import PermissionService  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_db():
    """Fresh in-memory MongoDB for every test"""
    db_manager.use_client(mongomock.MongoClient())
    ensure_indexes()
    PermissionService().initialize_default_permissions()
    yield db_manager.db
    db_manager.close()


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def admin_user():
    return create_user("admin@example.com", "admin-pass", name="Admin", role="admin")


@pytest.fixture
def admin_headers(admin_user):
    token = login_user("admin@example.com", "admin-pass")["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer():
    return create_user("customer@example.com", "customer-pass", name="Khách Hàng")


@pytest.fixture
def customer_headers(customer):
    token = login_user("customer@example.com", "customer-pass")["access_token"]
    return {"Authorization": f"Bearer {token}"}
