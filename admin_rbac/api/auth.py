"""Auth API router: login and current admin."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from admin_rbac.db.session import get_db
from admin_rbac.schemas.schemas import LoginRequest, TokenResponse, AdminContext, success
from admin_rbac.services.auth_service import auth_service
from admin_rbac.services.audit_service import audit_service
from admin_rbac.api.dependencies import authenticate_admin

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate and return a JWT access token."""
    result = auth_service.authenticate(db, body.username, body.password)
    admin = result["admin"]
    audit_service.record(
        db, request, action="admin.login", resource_type="admin",
        resource_id=admin.id, actor=admin,
    )
    return success(TokenResponse(**result).model_dump(), "Login successful.")


@router.get("/me")
async def get_me(admin: AdminContext = Depends(authenticate_admin)):
    """Current admin with resolved role and permissions."""
    return success(admin.model_dump())
