# pos_api/core/error_handlers.py

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pos_api.core.config import settings
from pos_api.core.exceptions import POSError

logger = logging.getLogger("pos_api.errors")

SENSITIVE_FIELDS = (
    "password",
    "passwd",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "cookie",
    "session",
)

MAX_SANITIZE_DEPTH = 10


def sanitize(value, depth: int = 0):
    """Return a copy of ``value`` with secret-looking keys redacted."""
    if depth > MAX_SANITIZE_DEPTH or value is None:
        return value

    if isinstance(value, (list, tuple)):
        return [sanitize(item, depth + 1) for item in value]

    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            if any(field in str(key).lower() for field in SENSITIVE_FIELDS):
                cleaned[key] = "[REDACTED]"
            else:
                cleaned[key] = sanitize(item, depth + 1)
        return cleaned

    return value


def _request_context(request: Request, status_code: int) -> str:
    context = f"{request.method} {request.url.path} {status_code}"

    if not settings.is_production:
        params = sanitize(dict(request.path_params))
        query = sanitize(dict(request.query_params))
        if params:
            context += f" params={params}"
        if query:
            context += f" query={query}"

    return context


def _format_validation_errors(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location or 'body'}: {error.get('msg')}")
    return "Invalid request: " + "; ".join(problems)


async def pos_error_handler(request: Request, exc: POSError):
    if exc.status_code >= 500:
        logger.error(
            f"ERROR {_request_context(request, exc.status_code)}: {exc.message}",
            exc_info=exc.__cause__ or exc,
        )
        message = "Internal server error" if settings.is_production else exc.message
    else:
        logger.info(f"{_request_context(request, exc.status_code)}: {exc.message}")
        message = exc.message

    return JSONResponse(status_code=exc.status_code, content={"message": message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = _format_validation_errors(exc)
    logger.info(f"{_request_context(request, 400)}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"ERROR {_request_context(request, 500)}: {exc}")

    if settings.is_production:
        content = {"message": "Internal server error"}
    else:
        content = {"message": str(exc), "error": type(exc).__name__}

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(POSError, pos_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
