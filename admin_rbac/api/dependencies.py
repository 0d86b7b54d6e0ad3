"""Request dependencies shared by the admin routers."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Path, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from admin_rbac.db.session import get_db
from admin_rbac.core.security import decode_token
from admin_rbac.schemas.schemas import AdminContext
from admin_rbac.services.auth_service import auth_service
from admin_rbac.services.role_service import DB_ID_MAX, DB_ID_MIN

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)

# Path ids outside the primary key range fail validation instead of reaching the database
RoleIdPath = Annotated[int, Path(ge=DB_ID_MIN, le=DB_ID_MAX)]
AdminIdPath = Annotated[int, Path(ge=DB_ID_MIN, le=DB_ID_MAX)]


async def authenticate_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> AdminContext:
    """Resolve the caller from the Bearer token and attach it to ``request.state.admin``.

    Attach at router level so it runs before any ``authorize_admin`` check.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing or invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_token(credentials.credentials)
    username = payload.get("sub")
    if not username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    admin = auth_service.get_active_admin(db, username)
    context = auth_service.build_admin_context(db, admin)
    request.state.admin = context
    return context
