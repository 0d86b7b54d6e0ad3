"""Append-only audit log model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from admin_rbac.db.base import Base


class AuditLog(Base):
    """One RBAC event. Written by AuditService.record, never updated or deleted."""
    __tablename__ = "res_audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(Integer, ForeignKey("res_admins.id", ondelete="SET NULL"), nullable=True)
    actor_username = Column(String(191), nullable=True)
    action = Column(String(100), nullable=False, index=True)  # e.g. "role.created"
    resource_type = Column(String(50), nullable=False, index=True)  # role, admin
    resource_id = Column(String(100), nullable=True)
    old_value_json = Column(Text, nullable=True)
    new_value_json = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.resource_type}/{self.resource_id}>"
