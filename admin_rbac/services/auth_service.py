"""Auth service: admin login and request context resolution."""

import logging
from typing import Dict, Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from admin_rbac.models.admin import AdminAccount
from admin_rbac.core.config import settings
from admin_rbac.core.security import verify_password, create_access_token
from admin_rbac.core.exceptions import AuthenticationError, ForbiddenError
from admin_rbac.schemas.schemas import AdminContext
from admin_rbac.services.permission_service import permission_service

logger = logging.getLogger("admin_rbac")


class AuthService:
    """Authenticates admins and resolves their permission set."""

    @staticmethod
    def build_admin_context(db: Session, admin: AdminAccount) -> AdminContext:
        """Resolve role and permission keys once, at authentication time."""
        role = admin.role
        if role is None:
            is_super_admin = settings.TREAT_UNASSIGNED_ADMINS_AS_SUPER_ADMIN
            permissions = []
        else:
            is_super_admin = role.is_super_admin
            permissions = permission_service.get_role_permission_keys(db, role.role_id)

        return AdminContext(
            id=admin.id,
            username=admin.username,
            email=admin.email,
            role_id=admin.role_id,
            role_key=role.role_key if role else None,
            role_name=role.role_name if role else None,
            is_super_admin=is_super_admin,
            permissions=permissions,
        )

    @staticmethod
    def get_active_admin(db: Session, username: str) -> AdminAccount:
        """Load an admin by username for an authenticated request.

        Raises:
            ForbiddenError: If the admin does not exist or is disabled.
        """
        admin = db.query(AdminAccount).filter(AdminAccount.username == username).first()
        if not admin:
            raise ForbiddenError("Forbidden: user is not an admin")
        if admin.is_disabled:
            raise ForbiddenError(
                "Admin account is disabled. Please contact a super administrator."
            )
        return admin

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
        """Verify credentials and return an access token with the admin context.

        Raises:
            AuthenticationError: If credentials are invalid.
            ForbiddenError: If the account is disabled.
        """
        admin: Optional[AdminAccount] = (
            db.query(AdminAccount)
            .filter(or_(AdminAccount.username == username, AdminAccount.email == username))
            .first()
        )
        if not admin or not verify_password(password, admin.hashed_password):
            raise AuthenticationError("Invalid username or password")
        if admin.is_disabled:
            raise ForbiddenError(
                "Admin account is disabled. Please contact a super administrator."
            )

        context = AuthService.build_admin_context(db, admin)
        access_token = create_access_token({
            "sub": admin.username,
            "admin_id": admin.id,
            "role": context.role_key,
        })
        logger.info("Admin logged in: %s", admin.username)
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "admin": context,
        }


auth_service = AuthService()
