"""Import all models so metadata.create_all can discover them."""

from admin_rbac.models.module import Module, Permission
from admin_rbac.models.role import Role, RolePermission, SUPER_ADMIN_ROLE_KEY
from admin_rbac.models.admin import AdminAccount
from admin_rbac.models.audit_log import AuditLog

__all__ = [
    "Module", "Permission",
    "Role", "RolePermission", "SUPER_ADMIN_ROLE_KEY",
    "AdminAccount", "AuditLog",
]
