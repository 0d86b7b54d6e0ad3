"""Permission catalog and module API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from admin_rbac.db.session import get_db
from admin_rbac.api.dependencies import authenticate_admin
from admin_rbac.core.security import authorize_admin
from admin_rbac.schemas.schemas import ModuleOut, ModuleWithPermissions, success
from admin_rbac.services.permission_service import permission_service

router = APIRouter(tags=["permissions"], dependencies=[Depends(authenticate_admin)])


@router.get("/permissions", dependencies=[Depends(authorize_admin("admin_roles:view"))])
async def list_modules_with_permissions(db: Session = Depends(get_db)):
    """Modules with their permissions, excluding super-admin-only modules."""
    modules = permission_service.list_modules_with_permissions(db)
    return success([ModuleWithPermissions(**m).model_dump() for m in modules])


@router.get("/modules", dependencies=[Depends(authorize_admin("admin_roles:view"))])
async def list_modules(db: Session = Depends(get_db)):
    """All modules."""
    modules = permission_service.list_modules(db)
    return success([ModuleOut.model_validate(m).model_dump() for m in modules])
