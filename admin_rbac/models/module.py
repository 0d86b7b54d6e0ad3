"""Module and permission catalog models."""

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from admin_rbac.db.base import Base


class Module(Base):
    """Functional area of the admin panel that owns a set of permissions."""
    __tablename__ = "res_modules"

    module_id = Column(Integer, primary_key=True, autoincrement=True)
    module_key = Column(String(100), unique=True, nullable=False, index=True)
    module_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_system = Column(Boolean, default=False, nullable=False)
    # OR-ed with the static rules in core.restricted_modules
    is_super_admin_only = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    permissions = relationship(
        "Permission",
        back_populates="module",
        order_by="Permission.permission_name",
        cascade="all, delete-orphan",
    )


class Permission(Base):
    """Named capability within a module, e.g. ``list`` or ``edit``."""
    __tablename__ = "res_permissions"
    __table_args__ = (
        UniqueConstraint("module_id", "permission_name", name="res_permissions_module_action_unique"),
    )

    permission_id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(
        Integer, ForeignKey("res_modules.module_id", ondelete="CASCADE"), nullable=False
    )
    permission_name = Column(String(64), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    module = relationship("Module", back_populates="permissions")
