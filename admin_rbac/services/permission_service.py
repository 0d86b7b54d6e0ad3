"""Permission catalog: read-only listing of modules and their permissions."""

from typing import List, Dict, Any

from sqlalchemy.orm import Session

from admin_rbac.models.module import Module, Permission
from admin_rbac.models.role import RolePermission
from admin_rbac.core.restricted_modules import module_is_restricted


def build_permission_key(module_key: str, action: str) -> str:
    """Canonical ``module_key:permission_name`` identifier, lower-cased."""
    return f"{module_key}:{action}".lower()


class PermissionService:
    """Read path over the module/permission catalog."""

    @staticmethod
    def list_modules_with_permissions(db: Session) -> List[Dict[str, Any]]:
        """Return ``{module -> permissions[]}`` without super-admin-only modules.

        Rows come from a left join ordered by module_key then
        permission_name, so modules keep first-seen order and modules with
        no permissions still appear with an empty list.
        """
        rows = (
            db.query(Module, Permission)
            .outerjoin(Permission, Permission.module_id == Module.module_id)
            .order_by(Module.module_key.asc(), Permission.permission_name.asc())
            .all()
        )

        modules: List[Dict[str, Any]] = []
        by_id: Dict[int, Dict[str, Any]] = {}
        for module, permission in rows:
            if module_is_restricted(module):
                continue

            entry = by_id.get(module.module_id)
            if entry is None:
                entry = {
                    "module_id": module.module_id,
                    "module_key": module.module_key,
                    "module_name": module.module_name,
                    "description": module.description,
                    "is_system": bool(module.is_system),
                    "permissions": [],
                }
                by_id[module.module_id] = entry
                modules.append(entry)

            if permission is not None:
                entry["permissions"].append({
                    "permission_id": permission.permission_id,
                    "permission_name": permission.permission_name,
                    "description": permission.description,
                    "permission_key": build_permission_key(
                        module.module_key, permission.permission_name
                    ),
                })

        return modules

    @staticmethod
    def list_modules(db: Session) -> List[Module]:
        """Every module row, restricted or not."""
        return db.query(Module).order_by(Module.module_id.asc()).all()

    @staticmethod
    def get_role_permission_keys(db: Session, role_id: int) -> List[str]:
        """Lower-cased permission keys explicitly granted to a role."""
        if not role_id:
            return []
        rows = (
            db.query(Module.module_key, Permission.permission_name)
            .join(Permission, Permission.module_id == Module.module_id)
            .join(RolePermission, RolePermission.permission_id == Permission.permission_id)
            .filter(RolePermission.role_id == role_id)
            .all()
        )
        return [build_permission_key(module_key, name) for module_key, name in rows]


permission_service = PermissionService()
