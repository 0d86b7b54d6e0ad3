"""Seed the super-admin account from env vars."""

import logging
from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.orm import Session

from admin_rbac.models.admin import AdminAccount
from admin_rbac.models.role import Role, SUPER_ADMIN_ROLE_KEY
from admin_rbac.core.security import hash_password
from admin_rbac.core.config import settings

logger = logging.getLogger("admin_rbac")


def seed_super_admin(db: Session) -> None:
    """Create the super-admin account if not already present."""
    super_admin_role = db.query(Role).filter(Role.role_key == SUPER_ADMIN_ROLE_KEY).first()
    if not super_admin_role:
        logger.warning("super_admin role not found. Run seed_rbac first.")
        return

    existing = (
        db.query(AdminAccount)
        .filter(or_(
            AdminAccount.username == settings.SUPER_ADMIN_USERNAME,
            AdminAccount.email == settings.SUPER_ADMIN_EMAIL,
        ))
        .first()
    )
    if existing:
        logger.info("Super admin '%s' already exists, skipping.", existing.username)
        return

    admin = AdminAccount(
        username=settings.SUPER_ADMIN_USERNAME,
        email=settings.SUPER_ADMIN_EMAIL,
        hashed_password=hash_password(settings.SUPER_ADMIN_PASSWORD),
        first_name="Super",
        last_name="Admin",
        status="active",
        role_id=super_admin_role.role_id,
        role_assigned_at=datetime.now(timezone.utc),
        role_assigned_by="system-seed",
    )
    db.add(admin)
    db.commit()
    logger.info("Created super admin: %s", settings.SUPER_ADMIN_USERNAME)
