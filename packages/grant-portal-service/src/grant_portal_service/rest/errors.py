"""Exception handlers rendering every failure as ``{"error": "..."}``."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from grant_portal_service.auth.provider import IdentityProviderError
from grant_portal_service.errors import PortalError, UpstreamFailure

log = structlog.get_logger(__name__)


async def _portal_error(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse({"error": "Invalid request body", "details": details}, status_code=400)


async def _identity_provider_error(request: Request, exc: IdentityProviderError) -> JSONResponse:
    # Provider validation text is safe to show; everything else stays generic.
    if exc.user_message:
        return JSONResponse({"error": exc.user_message}, status_code=400)
    log.error("identity_provider_failure", path=request.url.path, error=str(exc))
    return await _portal_error(request, UpstreamFailure("Identity provider request failed"))


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, _portal_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(IdentityProviderError, _identity_provider_error)
    app.add_exception_handler(Exception, _unhandled_error)
