"""Tests for the super-admin-only module rules."""

from types import SimpleNamespace

import pytest

from admin_rbac.core.restricted_modules import (
    get_restricted_module_keys,
    is_restricted_module,
    module_is_restricted,
)


@pytest.mark.parametrize("module_key", [
    "settings_general",
    "settings_",
    "seo_settings",
    "seo_settings_meta",
    "roles",
    "admin_roles",
    "admins",
    "admin_accounts",
    "profile",
    "profile_tab_2fa",
    "telegram_bot_configuration",
    "offline_payment_methods",
])
def test_restricted_keys(module_key):
    assert is_restricted_module(module_key) is True


@pytest.mark.parametrize("module_key", [
    "orders",
    "blogs",
    "site_settings",
    "profile_tab_avatar",
    "Settings_general",
])
def test_unrestricted_keys(module_key):
    assert is_restricted_module(module_key) is False


@pytest.mark.parametrize("module_key", ["", None])
def test_empty_key_is_not_restricted(module_key):
    assert is_restricted_module(module_key) is False


def test_restricted_key_set_is_a_copy():
    keys = get_restricted_module_keys()
    assert "admin_roles" in keys
    keys.add("orders")
    assert "orders" not in get_restricted_module_keys()
    assert is_restricted_module("orders") is False


def test_flag_column_restricts_any_key():
    flagged = SimpleNamespace(module_key="orders", is_super_admin_only=True)
    plain = SimpleNamespace(module_key="orders", is_super_admin_only=False)
    static = SimpleNamespace(module_key="settings_mail", is_super_admin_only=False)

    assert module_is_restricted(flagged) is True
    assert module_is_restricted(plain) is False
    assert module_is_restricted(static) is True
