"""JWT authentication helpers and the per-request authorization gate."""

import logging
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Sequence, Union

from fastapi import HTTPException, status, Request
from jose import JWTError, jwt

from admin_rbac.core.config import settings
from admin_rbac.core.exceptions import AdminContextMissingError, PermissionDeniedError

logger = logging.getLogger("admin_rbac")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pwd_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token, please login again",
            headers={"WWW-Authenticate": "Bearer"},
        )


def normalize_permissions(permissions: Union[str, Sequence[str], None]) -> List[str]:
    """Accept a single key or a list of keys; drop empties and lower-case."""
    if not permissions:
        return []
    if isinstance(permissions, str):
        permissions = [permissions]
    return [perm.lower() for perm in permissions if perm]


def missing_permissions(admin, required: Sequence[str]) -> List[str]:
    """Required keys the admin does not hold, in declaration order.

    ``admin`` is anything with ``is_super_admin`` and ``permissions``;
    super-admins are never missing anything.
    """
    if admin.is_super_admin:
        return []
    assigned = {(perm or "").lower() for perm in (admin.permissions or [])}
    return [perm for perm in required if perm not in assigned]


class AuthorizeAdmin:
    """Dependency that checks the authenticated admin's permission keys.

    The admin context must already be on ``request.state.admin`` (set by the
    router-level authentication dependency). With ``match="all"`` every
    required key must be held; with ``match="any"`` one is enough.
    """

    def __init__(self, required: Union[str, Sequence[str]], match: str = "all"):
        if match not in ("all", "any"):
            raise ValueError("match must be 'all' or 'any'")
        self.required = normalize_permissions(required)
        self.match = match

    async def __call__(self, request: Request):
        admin = getattr(request.state, "admin", None)
        if admin is None:
            logger.error("Admin context missing on %s %s", request.method, request.url.path)
            raise AdminContextMissingError()

        missing = missing_permissions(admin, self.required)
        if not missing:
            return admin
        if self.match == "any" and len(missing) < len(self.required):
            return admin

        logger.info("Admin %s denied on %s: missing %s", admin.username, request.url.path, missing)
        raise PermissionDeniedError(missing)


def authorize_admin(*keys: str, match: str = "all") -> AuthorizeAdmin:
    """Convenience factory: ``Depends(authorize_admin("admin_roles:edit"))``."""
    if len(keys) == 1:
        return AuthorizeAdmin(keys[0], match=match)
    return AuthorizeAdmin(list(keys), match=match)
