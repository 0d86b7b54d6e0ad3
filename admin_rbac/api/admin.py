"""Admin accounts / Audit API router."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from admin_rbac.db.session import get_db
from admin_rbac.api.dependencies import AdminIdPath, authenticate_admin
from admin_rbac.core.security import authorize_admin
from admin_rbac.schemas.schemas import (
    AdminCreate, AdminOut, AdminRoleAssign, AdminStatusUpdate, AuditLogOut, success,
)
from admin_rbac.services.admin_service import admin_service, admin_to_dict
from admin_rbac.services.audit_service import audit_service

router = APIRouter(tags=["admin"], dependencies=[Depends(authenticate_admin)])


@router.get("/admins", dependencies=[Depends(authorize_admin("admin_accounts:list"))])
async def list_admins(db: Session = Depends(get_db)):
    """List admin accounts with their roles."""
    admins = admin_service.list_admins(db)
    return success([AdminOut(**admin_to_dict(a)).model_dump() for a in admins])


@router.post(
    "/admins",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize_admin("admin_accounts:edit"))],
)
async def create_admin(body: AdminCreate, request: Request, db: Session = Depends(get_db)):
    """Create an admin account, optionally with a role."""
    admin = admin_service.create_admin(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role_id=body.role_id,
        created_by=request.state.admin.username,
    )
    data = AdminOut(**admin_to_dict(admin)).model_dump()
    audit_service.record(
        db, request, action="admin.created", resource_type="admin",
        resource_id=admin.id, new_value=data,
    )
    return success(data, "Admin created successfully.")


@router.put("/admins/{admin_id}/role", dependencies=[Depends(authorize_admin("admin_accounts:edit"))])
async def assign_admin_role(
    admin_id: AdminIdPath,
    body: AdminRoleAssign,
    request: Request,
    db: Session = Depends(get_db),
):
    """Assign a role to an admin, or clear it with ``role_id: null``."""
    previous = admin_service.get(db, admin_id).role_id
    admin = admin_service.assign_role(
        db, admin_id, body.role_id, assigned_by=request.state.admin.username,
    )
    audit_service.record(
        db, request, action="admin.role_assigned", resource_type="admin",
        resource_id=admin_id, old_value={"role_id": previous}, new_value={"role_id": admin.role_id},
    )
    return success(AdminOut(**admin_to_dict(admin)).model_dump(), "Role assigned successfully.")


@router.put("/admins/{admin_id}/status", dependencies=[Depends(authorize_admin("admin_accounts:edit"))])
async def update_admin_status(
    admin_id: AdminIdPath,
    body: AdminStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Enable or disable an admin account."""
    admin = admin_service.set_status(db, admin_id, body.status)
    audit_service.record(
        db, request, action="admin.status_changed", resource_type="admin",
        resource_id=admin_id, new_value={"status": admin.status},
    )
    return success(AdminOut(**admin_to_dict(admin)).model_dump(), "Status updated successfully.")


@router.get("/audit", dependencies=[Depends(authorize_admin("audit_logs:list"))])
async def get_audit_logs(
    action: Optional[str] = Query(None),
    resource_type: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Query the RBAC audit trail."""
    result = audit_service.query_logs(db, action, resource_type, page, page_size)
    return success({
        "logs": [AuditLogOut.model_validate(log).model_dump() for log in result["logs"]],
        "total": result["total"],
        "page": result["page"],
    })
