"""Audit trail for role, permission and admin account changes."""

import json
import logging
from typing import Optional, Any, Dict

from sqlalchemy.orm import Session
from fastapi import Request

from admin_rbac.models.audit_log import AuditLog
from admin_rbac.schemas.schemas import AdminContext

logger = logging.getLogger("admin_rbac")

USER_AGENT_MAX_LENGTH = 500


def _to_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, default=str)


class AuditService:
    """Appends one row per successful RBAC mutation. Rows are never updated."""

    @staticmethod
    def record(
        db: Session,
        request: Request,
        action: str,
        resource_type: str,
        resource_id: Optional[Any] = None,
        old_value: Optional[Any] = None,
        new_value: Optional[Any] = None,
        actor: Optional[AdminContext] = None,
    ) -> AuditLog:
        """Write an entry; the actor defaults to ``request.state.admin``.

        ``action`` is dotted, e.g. ``role.permissions_assigned``. The entry
        is committed on its own so it survives a later failure in the request.
        """
        if actor is None:
            actor = getattr(request.state, "admin", None)

        entry = AuditLog(
            actor_id=actor.id if actor else None,
            actor_username=actor.username if actor else None,
            action=action,
            resource_type=resource_type,
            resource_id=None if resource_id is None else str(resource_id),
            old_value_json=_to_json(old_value),
            new_value_json=_to_json(new_value),
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent", "")[:USER_AGENT_MAX_LENGTH] or None,
        )
        db.add(entry)
        db.commit()
        logger.debug("audit %s %s/%s by %s", action, resource_type, resource_id, entry.actor_username)
        return entry

    @staticmethod
    def query_logs(
        db: Session,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Dict[str, Any]:
        """Newest entries first. ``action`` matches as a prefix, so ``role.`` selects every role event."""
        query = db.query(AuditLog)
        if action:
            query = query.filter(AuditLog.action.startswith(action))
        if resource_type:
            query = query.filter(AuditLog.resource_type == resource_type)

        return {
            "logs": (
                query.order_by(AuditLog.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            ),
            "total": query.count(),
            "page": page,
            "page_size": page_size,
        }


audit_service = AuditService()
