"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


# ---- Auth ----
class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)  # username or email
    password: str = Field(..., min_length=1)

class AdminContext(BaseModel):
    """Authenticated caller, resolved once per request."""
    id: int
    username: str
    email: Optional[str] = None
    role_id: Optional[int] = None
    role_key: Optional[str] = None
    role_name: Optional[str] = None
    is_super_admin: bool = False
    permissions: List[str] = []

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminContext


# ---- Permission catalog ----
class PermissionOut(BaseModel):
    permission_id: int
    permission_name: str
    description: Optional[str] = None
    permission_key: str

class ModuleWithPermissions(BaseModel):
    module_id: int
    module_key: str
    module_name: str
    description: Optional[str] = None
    is_system: bool
    permissions: List[PermissionOut] = []

class ModuleOut(BaseModel):
    module_id: int
    module_key: str
    module_name: str
    description: Optional[str] = None
    is_system: bool
    is_super_admin_only: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Role ----
class RoleCreate(BaseModel):
    role_name: Optional[str] = None
    role_key: Optional[str] = None
    description: Optional[str] = None

class RoleUpdate(BaseModel):
    role_name: Optional[str] = None
    role_key: Optional[str] = None
    description: Optional[str] = None

class RoleOut(BaseModel):
    role_id: int
    role_name: str
    role_key: str
    description: Optional[str] = None
    is_system: bool

    class Config:
        from_attributes = True

class RoleListItem(RoleOut):
    permission_count: int = 0
    admin_count: int = 0

class RolePermissionOut(BaseModel):
    permission_id: int
    permission_name: str
    description: Optional[str] = None
    module_id: int
    module_key: str
    module_name: str
    permission_key: str

class RoleDetail(RoleOut):
    permissions: List[RolePermissionOut] = []

class PermissionAssignRequest(BaseModel):
    # Entries are coerced to integers by the role service; anything else is dropped.
    permissions: List[Any]


# ---- Admin accounts ----
class AdminCreate(BaseModel):
    username: str = Field(..., min_length=3)
    email: str = Field(..., min_length=4)
    password: str = Field(..., min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role_id: Optional[int] = None

class AdminRoleAssign(BaseModel):
    role_id: Optional[int] = None

class AdminStatusUpdate(BaseModel):
    status: str

class AdminOut(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: str
    role_id: Optional[int] = None
    role_key: Optional[str] = None
    role_name: Optional[str] = None
    role_assigned_at: Optional[datetime] = None
    role_assigned_by: Optional[str] = None
    created_at: Optional[datetime] = None


# ---- Audit ----
class AuditLogOut(BaseModel):
    id: int
    actor_username: Optional[str] = None
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Generic ----
def success(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Build the ``{status, data, message?}`` success envelope."""
    body: Dict[str, Any] = {"status": "success"}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body
