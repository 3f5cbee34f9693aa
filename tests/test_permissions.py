import pytest

from app.core.errors import NotFoundError
from app.services.permissions import DEFAULT_PERMISSIONS, PermissionService, RoleService


@pytest.fixture
def permissions():
    return PermissionService()


@pytest.fixture
def roles():
    return RoleService()


def _permission_id(permissions, resource, action):
    return str(permissions.permissions.find_one({"resource": resource, "action": action})["_id"])


def test_default_catalogue_is_idempotent(permissions):
    expected = sum(len(actions) for actions in DEFAULT_PERMISSIONS.values())
    assert len(permissions.find_all()) == expected
    assert permissions.initialize_default_permissions() == 0


def test_admin_role_bypasses_checks(permissions, admin_user):
    assert permissions.user_has_access(admin_user, "vouchers", "delete")
    assert permissions.user_has_access(admin_user, "unknown", "thing")


def test_direct_grant(permissions, customer):
    user_id = str(customer["_id"])
    assert not permissions.check_user_permission(user_id, "orders", "read")

    granted = permissions.update_user_permissions(user_id, [_permission_id(permissions, "orders", "read")])
    assert [(p["resource"], p["action"]) for p in granted] == [("orders", "read")]
    assert permissions.check_user_permission(user_id, "orders", "read")
    assert not permissions.check_user_permission(user_id, "orders", "delete")


def test_update_user_permissions_rejects_unknown_ids(permissions, customer):
    with pytest.raises(NotFoundError):
        permissions.update_user_permissions(str(customer["_id"]), ["64b000000000000000000000"])


def test_role_grant_and_role_delete(permissions, roles, customer):
    user_id = str(customer["_id"])
    role = roles.create({
        "name": "editor",
        "permission_ids": [_permission_id(permissions, "pages", "update")],
    })
    roles.assign_role(user_id, str(role["_id"]))
    assert permissions.check_user_permission(user_id, "pages", "update")

    roles.delete(str(role["_id"]))
    assert "role_id" not in permissions.users.find_by_id(customer["_id"])
    assert not permissions.check_user_permission(user_id, "pages", "update")


def test_roles_with_permissions(permissions, roles):
    roles.create({"name": "support", "permission_ids": [_permission_id(permissions, "orders", "read")]})
    listed = roles.get_all_roles_with_permissions()
    assert listed[0]["name"] == "support"
    assert [p["action"] for p in listed[0]["permissions"]] == ["read"]


def test_customer_gets_forbidden_until_granted(client, admin_headers, customer, customer_headers):
    assert client.get("/api/v1/orders/", headers=customer_headers).status_code == 403

    permissions = PermissionService()
    resp = client.put(
        f"/api/v1/permissions/users/{customer['_id']}",
        json={"permission_ids": [_permission_id(permissions, "orders", "read")]},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert client.get("/api/v1/orders/", headers=customer_headers).status_code == 200


def test_permission_check_endpoint(client, customer_headers):
    resp = client.get("/api/v1/permissions/check", params={"resource": "orders", "action": "read"},
                      headers=customer_headers)
    assert resp.json() == {"allowed": False}
