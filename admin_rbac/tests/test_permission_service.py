"""Tests for the permission catalog read path."""

from admin_rbac.core.restricted_modules import is_restricted_module
from admin_rbac.models import Module, Permission, Role, RolePermission
from admin_rbac.services.permission_service import build_permission_key, permission_service


def test_build_permission_key_is_lower_case():
    assert build_permission_key("Orders", "VIEW") == "orders:view"


def test_catalog_excludes_restricted_modules(seeded):
    modules = permission_service.list_modules_with_permissions(seeded)
    keys = [m["module_key"] for m in modules]

    assert keys
    assert not any(is_restricted_module(k) for k in keys)
    assert "admin_roles" not in keys
    assert "settings_general" not in keys
    assert "orders" in keys


def test_catalog_ordering_and_keys(seeded):
    modules = permission_service.list_modules_with_permissions(seeded)
    keys = [m["module_key"] for m in modules]
    assert keys == sorted(keys)

    orders = next(m for m in modules if m["module_key"] == "orders")
    names = [p["permission_name"] for p in orders["permissions"]]
    assert names == sorted(names) == ["delete", "edit", "list", "view"]
    assert {p["permission_key"] for p in orders["permissions"]} == {
        "orders:delete", "orders:edit", "orders:list", "orders:view",
    }


def test_module_without_permissions_is_listed(db):
    db.add(Module(module_key="reports", module_name="Reports"))
    db.commit()

    modules = permission_service.list_modules_with_permissions(db)

    assert modules == [{
        "module_id": modules[0]["module_id"],
        "module_key": "reports",
        "module_name": "Reports",
        "description": None,
        "is_system": False,
        "permissions": [],
    }]


def test_flagged_module_is_hidden(db):
    db.add(Module(module_key="payouts", module_name="Payouts", is_super_admin_only=True))
    db.commit()

    assert permission_service.list_modules_with_permissions(db) == []
    assert [m.module_key for m in permission_service.list_modules(db)] == ["payouts"]


def test_list_modules_includes_restricted(seeded):
    keys = {m.module_key for m in permission_service.list_modules(seeded)}
    assert {"admin_roles", "orders", "settings_general"} <= keys


def test_role_permission_keys(db):
    module = Module(module_key="Orders", module_name="Orders")
    db.add(module)
    db.flush()
    permission = Permission(module_id=module.module_id, permission_name="List")
    role = Role(role_name="Ops", role_key="ops")
    db.add_all([permission, role])
    db.flush()
    db.add(RolePermission(role_id=role.role_id, permission_id=permission.permission_id))
    db.commit()

    assert permission_service.get_role_permission_keys(db, role.role_id) == ["orders:list"]
    assert permission_service.get_role_permission_keys(db, None) == []
