"""Shared fixtures: an in-memory SQLite database per test and an API client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import admin_rbac.models  # noqa: F401
from admin_rbac.db.base import Base
from admin_rbac.db.session import build_engine, get_db
from admin_rbac.db.seeds.seed_rbac import seed_rbac
from admin_rbac.core.security import create_access_token
from admin_rbac.main import app
from admin_rbac.models import AdminAccount, Module, Permission, Role, SUPER_ADMIN_ROLE_KEY


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    """Default module catalog plus the super-admin role."""
    seed_rbac(db)
    return db


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def perm_id(db):
    """Look up a permission id by its ``module_key:permission_name`` key."""
    def _lookup(key: str) -> int:
        module_key, name = key.split(":")
        permission = (
            db.query(Permission)
            .join(Module, Module.module_id == Permission.module_id)
            .filter(Module.module_key == module_key, Permission.permission_name == name)
            .one()
        )
        return permission.permission_id
    return _lookup


@pytest.fixture
def super_admin_role(seeded):
    return seeded.query(Role).filter(Role.role_key == SUPER_ADMIN_ROLE_KEY).one()


@pytest.fixture
def make_admin(db):
    def _make(username: str, role=None, status: str = "active") -> AdminAccount:
        admin = AdminAccount(
            username=username,
            email=f"{username}@example.com",
            hashed_password="not-a-real-hash",
            status=status,
            role_id=role.role_id if role is not None else None,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin
    return _make


@pytest.fixture
def auth_headers():
    def _headers(admin: AdminAccount) -> dict:
        token = create_access_token({"sub": admin.username})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def super_headers(make_admin, auth_headers, super_admin_role):
    return auth_headers(make_admin("root", role=super_admin_role))
