"""Tests for the per-request authorization gate."""

import pytest
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.testclient import TestClient

from admin_rbac.core.exceptions import AdminContextMissingError, PermissionDeniedError
from admin_rbac.core.security import AuthorizeAdmin, authorize_admin, missing_permissions
from admin_rbac.main import admin_context_missing_handler, permission_denied_handler
from admin_rbac.schemas.schemas import AdminContext


def make_context(permissions=(), is_super_admin=False):
    return AdminContext(
        id=1,
        username="tester",
        is_super_admin=is_super_admin,
        permissions=list(permissions),
    )


def build_app(context):
    """Tiny app whose router attaches ``context`` the way authentication would."""
    async def attach(request: Request):
        if context is not None:
            request.state.admin = context

    app = FastAPI()
    app.add_exception_handler(PermissionDeniedError, permission_denied_handler)
    app.add_exception_handler(AdminContextMissingError, admin_context_missing_handler)
    router = APIRouter(dependencies=[Depends(attach)])

    @router.get("/single", dependencies=[Depends(authorize_admin("orders:view"))])
    async def single():
        return {"ok": True}

    @router.get("/both", dependencies=[Depends(authorize_admin("orders:view", "orders:edit"))])
    async def both():
        return {"ok": True}

    @router.get(
        "/either",
        dependencies=[Depends(authorize_admin("orders:view", "orders:edit", match="any"))],
    )
    async def either():
        return {"ok": True}

    @router.get("/open", dependencies=[Depends(authorize_admin())])
    async def open_route():
        return {"ok": True}

    app.include_router(router)
    return TestClient(app)


def test_missing_context_is_server_error():
    client = build_app(None)
    response = client.get("/single")

    assert response.status_code == 500
    assert response.json() == {"error": "Admin context missing from request."}


def test_super_admin_passes_everything():
    client = build_app(make_context(is_super_admin=True))
    for path in ("/single", "/both", "/either"):
        assert client.get(path).status_code == 200


def test_held_permission_passes():
    client = build_app(make_context(["orders:view"]))
    assert client.get("/single").json() == {"ok": True}


def test_permission_keys_compare_case_insensitively():
    client = build_app(make_context(["Orders:VIEW"]))
    assert client.get("/single").status_code == 200


def test_missing_permission_is_forbidden():
    client = build_app(make_context(["blogs:view"]))
    response = client.get("/single")

    assert response.status_code == 403
    assert response.json() == {
        "error": "Forbidden: insufficient permissions.",
        "missingPermissions": ["orders:view"],
    }


def test_all_required_by_default():
    client = build_app(make_context(["orders:view"]))
    response = client.get("/both")

    assert response.status_code == 403
    assert response.json()["missingPermissions"] == ["orders:edit"]


def test_all_required_lists_every_missing_key():
    client = build_app(make_context())
    assert client.get("/both").json()["missingPermissions"] == ["orders:view", "orders:edit"]


def test_any_match_needs_one_key():
    client = build_app(make_context(["orders:edit"]))
    assert client.get("/either").status_code == 200


def test_any_match_with_none_held():
    client = build_app(make_context(["blogs:view"]))
    response = client.get("/either")

    assert response.status_code == 403
    assert response.json()["missingPermissions"] == ["orders:view", "orders:edit"]


def test_no_requirements_only_needs_context():
    assert build_app(make_context()).get("/open").status_code == 200
    assert build_app(None).get("/open").status_code == 500


def test_required_keys_are_normalized():
    gate = AuthorizeAdmin(["Orders:View", ""])
    assert gate.required == ["orders:view"]
    assert AuthorizeAdmin("Blogs:List").required == ["blogs:list"]


def test_invalid_match_mode():
    with pytest.raises(ValueError):
        AuthorizeAdmin("orders:view", match="some")


def test_missing_permissions_helper():
    admin = make_context(["orders:view"])
    assert missing_permissions(admin, ["orders:view", "orders:edit"]) == ["orders:edit"]
    assert missing_permissions(make_context(is_super_admin=True), ["x:y"]) == []
