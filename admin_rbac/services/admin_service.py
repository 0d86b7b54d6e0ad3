"""Admin account service: creation, listing and role assignment."""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from admin_rbac.models.admin import AdminAccount
from admin_rbac.models.role import Role
from admin_rbac.core.security import hash_password
from admin_rbac.services.role_service import is_storable_id
from admin_rbac.core.exceptions import (
    ResourceConflictError,
    ResourceNotFoundError,
    ValidationError,
)

logger = logging.getLogger("admin_rbac")


def admin_to_dict(admin: AdminAccount) -> Dict[str, Any]:
    return {
        "id": admin.id,
        "username": admin.username,
        "email": admin.email,
        "first_name": admin.first_name,
        "last_name": admin.last_name,
        "status": admin.status,
        "role_id": admin.role_id,
        "role_key": admin.role.role_key if admin.role else None,
        "role_name": admin.role.role_name if admin.role else None,
        "role_assigned_at": admin.role_assigned_at,
        "role_assigned_by": admin.role_assigned_by,
        "created_at": admin.created_at,
    }


class AdminService:
    """Manages admin accounts and which role they hold."""

    @staticmethod
    def _resolve_role(db: Session, role_id: Optional[int]) -> Optional[Role]:
        if role_id is None:
            return None
        role = None
        if is_storable_id(role_id):
            role = db.query(Role).filter(Role.role_id == role_id).first()
        if not role:
            raise ValidationError("Invalid role_id provided")
        return role

    @staticmethod
    def get(db: Session, admin_id: int) -> AdminAccount:
        admin = db.query(AdminAccount).filter(AdminAccount.id == admin_id).first()
        if not admin:
            raise ResourceNotFoundError("Admin not found")
        return admin

    @staticmethod
    def create_admin(
        db: Session,
        username: str,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        role_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> AdminAccount:
        """Create an admin, optionally with a role."""
        existing = (
            db.query(AdminAccount.id)
            .filter(or_(AdminAccount.username == username, AdminAccount.email == email))
            .first()
        )
        if existing:
            raise ResourceConflictError("An admin with the same username or email already exists.")

        role = AdminService._resolve_role(db, role_id)
        admin = AdminAccount(
            username=username,
            email=email,
            hashed_password=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            status="active",
            role_id=role.role_id if role else None,
            role_assigned_at=datetime.now(timezone.utc) if role else None,
            role_assigned_by=created_by if role else None,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info("Admin created: %s", admin.username)
        return admin

    @staticmethod
    def list_admins(db: Session) -> List[AdminAccount]:
        return db.query(AdminAccount).order_by(AdminAccount.id.asc()).all()

    @staticmethod
    def assign_role(
        db: Session,
        admin_id: int,
        role_id: Optional[int],
        assigned_by: Optional[str] = None,
    ) -> AdminAccount:
        """Point an admin at a role, or at no role when ``role_id`` is None."""
        admin = AdminService.get(db, admin_id)
        role = AdminService._resolve_role(db, role_id)
        admin.role_id = role.role_id if role else None
        admin.role_assigned_at = datetime.now(timezone.utc)
        admin.role_assigned_by = assigned_by
        db.commit()
        db.refresh(admin)
        logger.info("Admin %s assigned role %s", admin.username, role.role_key if role else None)
        return admin

    @staticmethod
    def set_status(db: Session, admin_id: int, status: str) -> AdminAccount:
        """Enable or disable an admin account."""
        if status not in ("active", "disabled"):
            raise ValidationError("status must be 'active' or 'disabled'")
        admin = AdminService.get(db, admin_id)
        admin.status = status
        db.commit()
        db.refresh(admin)
        return admin


admin_service = AdminService()
