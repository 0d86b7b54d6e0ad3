"""Role and role-permission models for RBAC."""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from admin_rbac.db.base import Base

SUPER_ADMIN_ROLE_KEY = "super_admin"


class Role(Base):
    """Named bundle of permissions assignable to admin accounts."""
    __tablename__ = "res_roles"

    role_id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(255), unique=True, nullable=False)
    role_key = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_system = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    admins = relationship("AdminAccount", back_populates="role")

    @property
    def is_super_admin(self) -> bool:
        """The system super-admin role is frozen and implicitly holds every permission."""
        return bool(self.is_system) and self.role_key == SUPER_ADMIN_ROLE_KEY

    def __repr__(self):
        return f"<Role {self.role_key}>"


class RolePermission(Base):
    """Explicit permission grant to a role. The super-admin role has none."""
    __tablename__ = "res_role_permissions"

    role_id = Column(
        Integer, ForeignKey("res_roles.role_id", ondelete="CASCADE"), primary_key=True
    )
    permission_id = Column(
        Integer, ForeignKey("res_permissions.permission_id", ondelete="CASCADE"), primary_key=True
    )
