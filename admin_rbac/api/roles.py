"""Roles API router: role CRUD and permission assignment."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from admin_rbac.db.session import get_db
from admin_rbac.api.dependencies import RoleIdPath, authenticate_admin
from admin_rbac.core.security import authorize_admin
from admin_rbac.schemas.schemas import (
    RoleCreate, RoleUpdate, RoleOut, RoleListItem, RoleDetail, RolePermissionOut,
    PermissionAssignRequest, success,
)
from admin_rbac.services.role_service import role_service
from admin_rbac.services.audit_service import audit_service

router = APIRouter(
    prefix="/roles",
    tags=["roles"],
    dependencies=[Depends(authenticate_admin)],
)


@router.post(
    "/create",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize_admin("admin_roles:edit"))],
)
async def create_role(body: RoleCreate, request: Request, db: Session = Depends(get_db)):
    """Create a role; role_key defaults to a slug of role_name."""
    role = role_service.create_role(db, body.role_name, body.role_key, body.description)
    data = RoleOut.model_validate(role).model_dump()
    audit_service.record(
        db, request, action="role.created", resource_type="role",
        resource_id=role.role_id, new_value=data,
    )
    return success(data, "Role created successfully.")


@router.get("", dependencies=[Depends(authorize_admin("admin_roles:list"))])
async def list_roles(db: Session = Depends(get_db)):
    """List roles with permission and admin counts."""
    roles = role_service.list_roles(db)
    return success([RoleListItem(**r).model_dump() for r in roles])


@router.put("/update/{role_id}", dependencies=[Depends(authorize_admin("admin_roles:edit"))])
async def update_role(
    role_id: RoleIdPath,
    body: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Update a role's name, key or description. The super-admin role is frozen."""
    before = RoleOut.model_validate(role_service.get(db, role_id)).model_dump()
    role = role_service.update_role(db, role_id, **body.model_dump(exclude_unset=True))
    data = RoleOut.model_validate(role).model_dump()
    audit_service.record(
        db, request, action="role.updated", resource_type="role",
        resource_id=role_id, old_value=before, new_value=data,
    )
    return success(data, "Role updated successfully.")


@router.delete("/delete/{role_id}", dependencies=[Depends(authorize_admin("admin_roles:delete"))])
async def delete_role(role_id: RoleIdPath, request: Request, db: Session = Depends(get_db)):
    """Delete an unused, non-system role."""
    role_service.delete_role(db, role_id)
    audit_service.record(
        db, request, action="role.deleted", resource_type="role", resource_id=role_id,
    )
    return success(message="Role deleted successfully.")


@router.get("/{role_id}", dependencies=[Depends(authorize_admin("admin_roles:view"))])
async def get_role(role_id: RoleIdPath, db: Session = Depends(get_db)):
    """Get a role with the permissions it holds."""
    return success(RoleDetail(**role_service.get_role(db, role_id)).model_dump())


@router.post("/{role_id}/permissions", dependencies=[Depends(authorize_admin("admin_roles:edit"))])
async def assign_permissions(
    role_id: RoleIdPath,
    body: PermissionAssignRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Replace the role's complete permission set.

    This is not additive: fetch the current set first to add one permission.
    """
    granted = role_service.assign_permissions(db, role_id, body.permissions)
    audit_service.record(
        db, request, action="role.permissions_assigned", resource_type="role",
        resource_id=role_id, new_value=granted,
    )
    return success(message="Permissions updated successfully.")


@router.get("/{role_id}/permissions", dependencies=[Depends(authorize_admin("admin_roles:view"))])
async def list_role_permissions(role_id: RoleIdPath, db: Session = Depends(get_db)):
    """Permissions granted to a role."""
    rows = role_service.list_role_permissions(db, role_id)
    return success([RolePermissionOut(**r).model_dump() for r in rows])
