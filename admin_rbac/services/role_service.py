"""Role service: role lifecycle and permission assignment."""

import logging
import math
import re
from typing import Optional, Dict, Any, List, Iterable

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from admin_rbac.models.admin import AdminAccount
from admin_rbac.models.module import Module, Permission
from admin_rbac.models.role import Role, RolePermission, SUPER_ADMIN_ROLE_KEY
from admin_rbac.core.restricted_modules import module_is_restricted
from admin_rbac.core.exceptions import (
    ForbiddenError,
    ResourceConflictError,
    ResourceNotFoundError,
    ValidationError,
    forbidden_restricted,
)
from admin_rbac.services.permission_service import build_permission_key

logger = logging.getLogger("admin_rbac")

ROLE_KEY_MAX_LENGTH = 100

# Signed 64-bit range of the integer primary keys
DB_ID_MIN = -2 ** 63
DB_ID_MAX = 2 ** 63 - 1


def slugify(value: Any) -> str:
    """Lowercase, collapse non-alphanumerics to ``_``, trim ``_``, cap at 100 chars."""
    slug = re.sub(r"[^a-z0-9]+", "_", str(value).strip().lower())
    slug = re.sub(r"_{2,}", "_", slug.strip("_"))
    return slug[:ROLE_KEY_MAX_LENGTH]


def is_storable_id(value: int) -> bool:
    return DB_ID_MIN <= value <= DB_ID_MAX


def coerce_permission_ids(values: Iterable[Any]) -> List[int]:
    """De-duplicate ids in first-seen order, dropping anything not an integer."""
    seen: Dict[int, None] = {}
    for value in values:
        if isinstance(value, bool) or value is None:
            continue
        try:
            number = float(str(value).strip()) if isinstance(value, str) else float(value)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(number) or not number.is_integer():
            continue
        seen.setdefault(int(number), None)
    return list(seen)


class RoleService:
    """Manages roles and their replace-all permission sets."""

    @staticmethod
    def get(db: Session, role_id: int) -> Role:
        if not is_storable_id(role_id):
            raise ResourceNotFoundError("Role not found")
        role = db.query(Role).filter(Role.role_id == role_id).first()
        if not role:
            raise ResourceNotFoundError("Role not found")
        return role

    @staticmethod
    def create_role(
        db: Session,
        role_name: Optional[str],
        role_key: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Role:
        """Create a non-system role.

        Raises:
            ValidationError: If role_name is missing or the key slugifies to nothing.
            ResourceConflictError: If the name or key is taken.
        """
        name = (role_name or "").strip()
        if not name:
            raise ValidationError("role_name is required")

        key = (role_key and slugify(role_key)) or slugify(name)
        if not key:
            raise ValidationError("role_key cannot be empty")

        existing = (
            db.query(Role.role_id)
            .filter(or_(Role.role_name == name, Role.role_key == key))
            .first()
        )
        if existing:
            raise ResourceConflictError("A role with the same name or key already exists.")

        role = Role(
            role_name=name,
            role_key=key,
            description=description or None,
            is_system=False,
        )
        db.add(role)
        db.commit()
        db.refresh(role)
        logger.info("Role created: %s (%s)", role.role_key, role.role_id)
        return role

    @staticmethod
    def list_roles(db: Session) -> List[Dict[str, Any]]:
        """All roles with permission and admin counts, ordered by name."""
        rows = (
            db.query(
                Role,
                func.count(func.distinct(RolePermission.permission_id)),
                func.count(func.distinct(AdminAccount.id)),
            )
            .outerjoin(RolePermission, RolePermission.role_id == Role.role_id)
            .outerjoin(AdminAccount, AdminAccount.role_id == Role.role_id)
            .group_by(Role.role_id)
            .order_by(Role.role_name.asc())
            .all()
        )
        return [
            {
                "role_id": role.role_id,
                "role_name": role.role_name,
                "role_key": role.role_key,
                "description": role.description,
                "is_system": bool(role.is_system),
                "permission_count": permission_count,
                "admin_count": admin_count,
            }
            for role, permission_count, admin_count in rows
        ]

    @staticmethod
    def list_role_permissions(db: Session, role_id: int) -> List[Dict[str, Any]]:
        """Permissions joined to a role, unfiltered by restricted status."""
        rows = (
            db.query(Permission, Module)
            .join(RolePermission, RolePermission.permission_id == Permission.permission_id)
            .join(Module, Module.module_id == Permission.module_id)
            .filter(RolePermission.role_id == role_id)
            .order_by(Module.module_key.asc(), Permission.permission_name.asc())
            .all()
        )
        return [
            {
                "permission_id": permission.permission_id,
                "permission_name": permission.permission_name,
                "description": permission.description,
                "module_id": module.module_id,
                "module_key": module.module_key,
                "module_name": module.module_name,
                "permission_key": build_permission_key(
                    module.module_key, permission.permission_name
                ),
            }
            for permission, module in rows
        ]

    @staticmethod
    def get_role(db: Session, role_id: int) -> Dict[str, Any]:
        """A role with the permissions it actually holds."""
        role = RoleService.get(db, role_id)
        return {
            "role_id": role.role_id,
            "role_name": role.role_name,
            "role_key": role.role_key,
            "description": role.description,
            "is_system": bool(role.is_system),
            "permissions": RoleService.list_role_permissions(db, role.role_id),
        }

    @staticmethod
    def update_role(db: Session, role_id: int, **fields: Any) -> Role:
        """Update role_name, role_key and/or description.

        Only keys present in ``fields`` are applied, so ``description=None``
        clears the description while omitting it leaves it unchanged.
        """
        role = RoleService.get(db, role_id)
        if role.is_super_admin:
            raise ForbiddenError("Super admin role cannot be modified.")

        updates: Dict[str, Any] = {}

        if "role_name" in fields:
            name = (fields["role_name"] or "").strip()
            if not name:
                raise ValidationError("role_name cannot be empty")
            updates["role_name"] = name

        if "role_key" in fields:
            key = slugify(fields["role_key"] or "")
            if not key:
                raise ValidationError("role_key cannot be empty")
            updates["role_key"] = key

        if "description" in fields:
            updates["description"] = fields["description"] or None

        if not updates:
            raise ValidationError("No updates provided")

        duplicate = (
            db.query(Role.role_id)
            .filter(
                or_(
                    Role.role_name == updates.get("role_name", role.role_name),
                    Role.role_key == updates.get("role_key", role.role_key),
                ),
                Role.role_id != role.role_id,
            )
            .first()
        )
        if duplicate:
            raise ResourceConflictError("Another role with the same name or key already exists.")

        for key, value in updates.items():
            setattr(role, key, value)
        db.commit()
        db.refresh(role)
        logger.info("Role updated: %s (%s)", role.role_key, role.role_id)
        return role

    @staticmethod
    def delete_role(db: Session, role_id: int) -> None:
        """Delete an unused, non-system role and its grants atomically."""
        role = RoleService.get(db, role_id)
        if role.is_system:
            raise ForbiddenError("System roles cannot be deleted.")

        in_use = db.query(AdminAccount).filter(AdminAccount.role_id == role.role_id).count()
        if in_use > 0:
            raise ResourceConflictError(
                "Role is assigned to administrators and cannot be deleted."
            )

        try:
            db.query(RolePermission).filter(RolePermission.role_id == role.role_id).delete()
            db.delete(role)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Role deleted: %s (%s)", role.role_key, role_id)

    @staticmethod
    def assign_permissions(db: Session, role_id: int, permission_ids: Any) -> List[int]:
        """Replace the role's permission set with ``permission_ids``.

        This sets the complete set; callers adding one permission must send
        the current set plus the new id. Returns the ids now granted.

        Raises:
            ValidationError: If the input is not a list or contains unknown ids.
            ForbiddenError: For the super-admin role or restricted permissions.
        """
        if not isinstance(permission_ids, (list, tuple)):
            raise ValidationError("permissions must be an array of permission IDs.")
        ids = coerce_permission_ids(permission_ids)

        role = RoleService.get(db, role_id)
        if role.is_super_admin:
            raise ForbiddenError(
                "Super admin role automatically has full access and cannot be modified."
            )

        # ids past the key range cannot exist and are reported as invalid below
        lookup = [pid for pid in ids if is_storable_id(pid)]
        found: Dict[int, Module] = {}
        if lookup:
            rows = (
                db.query(Permission.permission_id, Module)
                .join(Module, Module.module_id == Permission.module_id)
                .filter(Permission.permission_id.in_(lookup))
                .all()
            )
            found = {permission_id: module for permission_id, module in rows}

        restricted = [pid for pid in ids if pid in found and module_is_restricted(found[pid])]
        if restricted:
            modules = list(dict.fromkeys(found[pid].module_key for pid in restricted))
            logger.warning(
                "Rejected restricted permissions %s for role %s", restricted, role.role_key
            )
            raise forbidden_restricted(restricted, modules)

        missing = [pid for pid in ids if pid not in found]
        if missing:
            raise ValidationError(
                "One or more permission IDs are invalid.",
                invalidPermissionIds=missing,
            )

        try:
            db.query(RolePermission).filter(RolePermission.role_id == role.role_id).delete()
            if ids:
                db.add_all(
                    RolePermission(role_id=role.role_id, permission_id=pid) for pid in ids
                )
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Permissions replaced for role %s: %d granted", role.role_key, len(ids))
        return ids

    @staticmethod
    def cleanup_restricted_permissions(db: Session, dry_run: bool = False) -> Dict[str, Any]:
        """Strip restricted-module grants from every role except super-admin.

        Returns a report grouped by role key. Nothing is deleted when
        ``dry_run`` is set.
        """
        super_admin = db.query(Role).filter(Role.role_key == SUPER_ADMIN_ROLE_KEY).first()
        if not super_admin:
            raise ResourceNotFoundError("Super admin role not found in database")

        rows = (
            db.query(RolePermission, Role, Permission, Module)
            .join(Role, Role.role_id == RolePermission.role_id)
            .join(Permission, Permission.permission_id == RolePermission.permission_id)
            .join(Module, Module.module_id == Permission.module_id)
            .filter(RolePermission.role_id != super_admin.role_id)
            .order_by(Role.role_key, Module.module_key, Permission.permission_name)
            .all()
        )
        to_delete = [row for row in rows if module_is_restricted(row[3])]

        by_role: Dict[str, Dict[str, Any]] = {}
        for _, role, permission, module in to_delete:
            entry = by_role.setdefault(role.role_key, {
                "role_id": role.role_id,
                "role_name": role.role_name,
                "permissions": [],
            })
            entry["permissions"].append({
                "permission_id": permission.permission_id,
                "module_key": module.module_key,
                "module_name": module.module_name,
                "permission_name": permission.permission_name,
            })

        report = {"dry_run": dry_run, "roles": by_role, "found": len(to_delete), "deleted": 0}
        if dry_run or not to_delete:
            return report

        try:
            for grant, _, _, _ in to_delete:
                db.delete(grant)
            db.commit()
            report["deleted"] = len(to_delete)
        except Exception:
            db.rollback()
            raise
        logger.info(
            "Removed %d restricted permission(s) from %d role(s)",
            report["deleted"], len(by_role),
        )
        return report


role_service = RoleService()
