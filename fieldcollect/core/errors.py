"""
Central error handling for the field collection backend

Domain errors are raised by services and guards and rendered here into a
consistent JSON body. Authorization failures are terminal for the request.
"""
import logging
import traceback
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
    "Access-Control-Allow-Headers": "*",
}


class AppError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def extra(self) -> Dict[str, Any]:
        return {}


class AuthenticationRequired(AppError):
    """No (valid) actor on the request"""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail)


class PermissionDenied(AppError):
    """The actor lacks the role or permission for the requested action"""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, action: str, detail: Optional[str] = None):
        super().__init__(detail or f"No permission to perform '{action}'")
        self.action = action

    def extra(self) -> Dict[str, Any]:
        return {"action": self.action}


class ValidationFailed(AppError):
    """
    Input rejected at field level.

    `field` is the path of the first offending field (e.g.
    ``customFields.Roof Type``); `errors` carries every failure found.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.field = field
        self.errors = errors or [{"field": field, "message": message}]

    def extra(self) -> Dict[str, Any]:
        return {"field": self.field, "errors": self.errors}


class NotFound(AppError):
    """The addressed record, column or user does not exist"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(f"{resource} with id {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with its status code and field/action details"""
    content = {
        "error": True,
        "status_code": exc.status_code,
        "detail": exc.detail,
        "path": str(request.url.path),
    }
    content.update(exc.extra())
    headers = dict(_CORS_HEADERS)
    if isinstance(exc, AuthenticationRequired):
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "status_code": exc.status_code,
            "detail": exc.detail,
            "path": str(request.url.path)
        },
        headers=_CORS_HEADERS
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    from fieldcollect.core.config import settings

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "status_code": 422,
                "detail": "Validation error: Invalid request data",
                "path": str(request.url.path)
            }
        )

    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    first = errors[0] if errors else {}
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": True,
            "status_code": 422,
            "detail": "Validation error",
            "field": ".".join(str(p) for p in first.get("loc", ())[1:]),
            "errors": errors,
            "path": str(request.url.path)
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    from fieldcollect.core.config import settings

    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "status_code": 500,
                "detail": "Internal server error",
                "path": str(request.url.path)
            },
            headers=_CORS_HEADERS
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "status_code": 500,
            "detail": str(exc),
            "path": str(request.url.path),
            "traceback": traceback.format_exc() if settings.APP_ENV == "local" else None
        },
        headers=_CORS_HEADERS
    )
