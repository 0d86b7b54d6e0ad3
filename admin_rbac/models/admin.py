"""Admin account model."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from admin_rbac.db.base import Base

DISABLED_STATUSES = {"disabled", "inactive", "0", "false"}


class AdminAccount(Base):
    """Administrator with an optional role."""
    __tablename__ = "res_admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(191), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    status = Column(String(20), default="active", nullable=False)
    role_id = Column(
        Integer, ForeignKey("res_roles.role_id", ondelete="SET NULL"), nullable=True
    )
    role_assigned_at = Column(DateTime, nullable=True)
    role_assigned_by = Column(String(191), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    role = relationship("Role", back_populates="admins", lazy="joined")

    @property
    def is_disabled(self) -> bool:
        if self.status is None:
            return False
        return str(self.status).strip().lower() in DISABLED_STATUSES

    def __repr__(self):
        return f"<AdminAccount {self.username}>"
