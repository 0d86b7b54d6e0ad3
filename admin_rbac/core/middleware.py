"""HTTP middleware: CORS for the admin UI and a per-request access log."""

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from admin_rbac.core.config import settings

logger = logging.getLogger("admin_rbac")

REQUEST_ID_HEADER = "X-Request-Id"
QUIET_PATHS = {"/api/health"}


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Propagate a request id and log status, latency and the acting admin."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = rid
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = rid
        if request.url.path in QUIET_PATHS:
            return response

        # request.state.admin is only set once authentication has run
        admin = getattr(request.state, "admin", None)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %d (%.1fms) admin=%s rid=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            admin.username if admin else "anonymous",
            rid,
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(AccessLogMiddleware)
