"""Custom exception classes for the admin RBAC service."""

from typing import Any, Dict, List, Optional


class AdminPanelError(Exception):
    """Base exception for the admin panel.

    ``status_code`` is the HTTP status the API layer answers with and
    ``extra`` is merged into the JSON error body.
    """

    status_code = 500

    def __init__(self, message: str = "An error occurred", **extra: Any):
        self.message = message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)


class ValidationError(AdminPanelError):
    """Raised when input validation fails."""
    status_code = 400


class AuthenticationError(AdminPanelError):
    """Raised when authentication fails."""
    status_code = 401


class ForbiddenError(AdminPanelError):
    """Raised on a policy violation (system role, restricted module)."""
    status_code = 403


class ResourceNotFoundError(AdminPanelError):
    """Raised when a requested resource is not found."""
    status_code = 404


class ResourceConflictError(AdminPanelError):
    """Raised when a resource already exists or is still in use."""
    status_code = 409


class PermissionDeniedError(Exception):
    """Raised by the authorization gate when required permissions are missing."""

    def __init__(self, missing_permissions: List[str]):
        self.missing_permissions = missing_permissions
        super().__init__(", ".join(missing_permissions))


class AdminContextMissingError(Exception):
    """Raised when a protected route runs without an authenticated admin."""


def error_body(exc: AdminPanelError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": "error", "message": exc.message}
    body.update(exc.extra)
    return body


def forbidden_restricted(
    invalid_permission_ids: List[int],
    restricted_modules: List[str],
    message: Optional[str] = None,
) -> ForbiddenError:
    return ForbiddenError(
        message or "These permissions can only be assigned to super admin role.",
        invalidPermissionIds=invalid_permission_ids,
        restrictedModules=restricted_modules,
    )
