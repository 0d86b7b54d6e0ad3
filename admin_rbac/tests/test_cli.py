"""Tests for the rbacctl maintenance commands."""

import json

import pytest
from typer.testing import CliRunner

from admin_rbac.cli import app
from admin_rbac.db import session as db_session
from admin_rbac.models import AdminAccount, RolePermission
from admin_rbac.services.role_service import role_service

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_sessions(monkeypatch, session_factory):
    monkeypatch.setattr(db_session, "SessionLocal", session_factory)


def test_seed_creates_super_admin(db):
    result = runner.invoke(app, ["db", "seed"])

    assert result.exit_code == 0, result.output
    admin = db.query(AdminAccount).one()
    assert admin.role.is_super_admin
    assert admin.role_assigned_by == "system-seed"

    again = runner.invoke(app, ["db", "seed"])
    assert again.exit_code == 0
    assert db.query(AdminAccount).count() == 1


def test_cleanup_dry_run_then_apply(seeded, perm_id):
    role = role_service.create_role(seeded, "Legacy")
    leaked = perm_id("profile:edit")
    seeded.add(RolePermission(role_id=role.role_id, permission_id=leaked))
    seeded.commit()

    preview = runner.invoke(app, ["permissions", "cleanup", "--dry-run"])
    assert preview.exit_code == 0
    assert "profile:edit" in preview.output
    assert "DRY RUN: 1 permission(s) would be removed" in preview.output
    assert seeded.query(RolePermission).count() == 1

    applied = runner.invoke(app, ["permissions", "cleanup"])
    assert applied.exit_code == 0
    assert "Removed 1 restricted permission(s) from 1 role(s)" in applied.output
    assert seeded.query(RolePermission).count() == 0

    clean = runner.invoke(app, ["permissions", "cleanup"])
    assert "Database is clean" in clean.output


def test_catalog_prints_json(seeded):
    result = runner.invoke(app, ["permissions", "catalog"])

    assert result.exit_code == 0
    keys = [m["module_key"] for m in json.loads(result.stdout)]
    assert "orders" in keys
    assert "profile" not in keys
