"""Map domain and framework exceptions onto HTTP status codes and the error envelope."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from urbanmart.api.responses import error
from urbanmart.config import is_production
from urbanmart.utils.errors import AuthenticationError, InvalidTransitionError, PermissionDeniedError

logger = structlog.get_logger(__name__)


def flatten_messages(messages) -> str:
    """Collapse a Protean ``{field: [messages]}`` mapping into one readable string."""
    if isinstance(messages, dict):
        parts = []
        for value in messages.values():
            if isinstance(value, list | tuple):
                parts.extend(str(v) for v in value)
            else:
                parts.append(str(value))
        return "; ".join(parts)
    return str(messages)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error(message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return _error_response(400, "; ".join(details) or "Invalid request")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    status_code = 409 if isinstance(exc, InvalidTransitionError) else 400
    return _error_response(status_code, flatten_messages(exc.messages))


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error_response(404, flatten_messages(exc.messages))


async def invalid_operation_handler(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error_response(409, flatten_messages(exc.messages))


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return _error_response(401, exc.message)


async def permission_denied_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return _error_response(403, exc.message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    message = "Internal server error" if is_production() else f"Internal server error: {exc}"
    return _error_response(500, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidOperationError, invalid_operation_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(PermissionDeniedError, permission_denied_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
