"""Custom exception handlers for consistent error responses.

Domain exceptions (`church_onboarding.errors`) and framework errors are
rendered in one envelope:

    {"error": {"code": "...", "message": "...", "details": {...}}}
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from church_onboarding.errors import OnboardingException

logger = logging.getLogger(__name__)


# ── Rendering ────────────────────────────────────────────────

def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def _request_context(request: Request) -> dict:
    return {"path": request.url.path, "method": request.method}


# ── Handlers ─────────────────────────────────────────────────

async def onboarding_exception_handler(request: Request, exc: OnboardingException) -> JSONResponse:
    """Domain errors raised by the wizard core, the session store or a router."""
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s %s -> %s: %s",
        request.method, request.url.path, exc.error_code, exc.message,
        extra={"error_code": exc.error_code, **_request_context(request)},
    )
    return error_response(exc.status_code, exc.error_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework HTTP errors (401 from the bearer scheme, 404/405 routing)."""
    if exc.status_code >= 500:
        logger.error("HTTP %s: %s", exc.status_code, exc.detail, extra=_request_context(request))
    return error_response(
        exc.status_code,
        f"HTTP_{exc.status_code}",
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies or parameters.

    Wizard field rules are not reported here; they come back inside the
    wizard view with a 200.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Invalid request on %s: %d error(s)", request.url.path, len(errors))
    return error_response(
        HTTPStatus(422),
        "VALIDATION_ERROR",
        "Validation error",
        details={"errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # Internal details stay in the log
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OnboardingException, onboarding_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
