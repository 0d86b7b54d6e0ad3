"""Seed the baseline module catalog and the super-admin role."""

import logging
from sqlalchemy.orm import Session

from admin_rbac.models.module import Module, Permission
from admin_rbac.models.role import Role, SUPER_ADMIN_ROLE_KEY
from admin_rbac.core.restricted_modules import is_restricted_module

logger = logging.getLogger("admin_rbac")

PERMISSION_ACTIONS = ["list", "view", "edit", "delete"]

DEFAULT_MODULES = [
    ("admin_accounts", "Admin Accounts", "CRUD access to administrator accounts, security and status."),
    ("admin_roles", "Admin Roles & Permissions", "Manage role definitions, permission assignments and RBAC policies."),
    ("audit_logs", "Audit Logs", "Review the trail of role and admin changes."),
    ("blogs", "Blogs", "Manage blog posts, categories and tags."),
    ("coupons", "Coupons", "Create, validate and bulk-generate coupon codes."),
    ("courses", "Courses", "Manage courses, topics and course content."),
    ("files", "File Manager", "Manage folders, digital assets, uploads and file metadata."),
    ("inventory", "Inventory", "Track stock levels and inventory logs."),
    ("leads", "Leads", "Manage leads, sources, statuses and tasks."),
    ("offline_payment_methods", "Offline Payment Methods", "Configure bank transfer and other offline payments."),
    ("orders", "Orders", "Manage order lifecycle, fulfillment, payments and status."),
    ("profile", "Profile", "Own profile, password, email and 2FA."),
    ("seo_settings", "SEO Settings", "Site-wide SEO defaults."),
    ("settings_general", "General Settings", "Site-wide configuration."),
    ("suppliers", "Suppliers", "Manage suppliers and purchasing contacts."),
    ("telegram_bot_configuration", "Telegram Bot Configuration", "Bot tokens and notification subscriptions."),
]

SUPER_ADMIN_ROLE = {
    "role_key": SUPER_ADMIN_ROLE_KEY,
    "role_name": "Super Admin",
    "description": "System role with unrestricted access to all admin modules.",
}


def seed_modules(db: Session) -> int:
    """Upsert the default modules and their list/view/edit/delete permissions."""
    created = 0
    for module_key, module_name, description in DEFAULT_MODULES:
        module = db.query(Module).filter(Module.module_key == module_key).first()
        if module is None:
            module = Module(module_key=module_key)
            db.add(module)
        module.module_name = module_name
        module.description = description
        module.is_system = True
        module.is_super_admin_only = is_restricted_module(module_key)
        db.flush()

        existing = {p.permission_name for p in module.permissions}
        for action in PERMISSION_ACTIONS:
            if action in existing:
                continue
            db.add(Permission(
                module_id=module.module_id,
                permission_name=action,
                description=f"{action} access for {module_name}",
            ))
            created += 1
    db.commit()
    return created


def seed_super_admin_role(db: Session) -> Role:
    """Ensure the frozen super-admin system role exists.

    It gets no role-permission rows; super-admins bypass the join table.
    """
    role = db.query(Role).filter(Role.role_key == SUPER_ADMIN_ROLE["role_key"]).first()
    if role is None:
        role = Role(role_key=SUPER_ADMIN_ROLE["role_key"])
        db.add(role)
    role.role_name = SUPER_ADMIN_ROLE["role_name"]
    role.description = SUPER_ADMIN_ROLE["description"]
    role.is_system = True
    db.commit()
    db.refresh(role)
    return role


def seed_rbac(db: Session) -> None:
    """Insert the module catalog and the super-admin role if missing."""
    created = seed_modules(db)
    seed_super_admin_role(db)
    logger.info("Seeded %d modules, %d new permissions", len(DEFAULT_MODULES), created)
