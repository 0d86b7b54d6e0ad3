"""Modules whose permissions only the super-admin role may hold.

Restricted modules never appear in the permission catalog and their
permissions are rejected when assigned to any other role. A module is
restricted when its key matches the static rules below or when its
``is_super_admin_only`` column is set.
"""

from typing import Optional, Set

RESTRICTED_MODULE_PREFIXES = ("settings_", "seo_settings")

RESTRICTED_MODULE_KEYS = frozenset({
    "telegram_bot_configuration",
    "telegram_bot_config",
    "roles",
    "admin_roles",
    "profile",
    "profile_tab_2fa",
    "profile_tab_password",
    "profile_tab_email",
    "offline_payment_methods",
    "admins",
    "admin_accounts",
})


def is_restricted_module(module_key: Optional[str]) -> bool:
    """Check if a module key is restricted (super-admin only)."""
    if not module_key:
        return False
    if module_key.startswith(RESTRICTED_MODULE_PREFIXES):
        return True
    return module_key in RESTRICTED_MODULE_KEYS


def get_restricted_module_keys() -> Set[str]:
    """Return a copy of the fixed restricted key set."""
    return set(RESTRICTED_MODULE_KEYS)


def module_is_restricted(module) -> bool:
    """Check a Module row against both the flag column and the static rules."""
    return bool(getattr(module, "is_super_admin_only", False)) or is_restricted_module(
        module.module_key
    )
