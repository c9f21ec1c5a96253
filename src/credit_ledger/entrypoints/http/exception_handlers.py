"""Map ledger errors onto HTTP responses with the shared error body."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from credit_ledger.domain.errors import DomainError

logger = logging.getLogger(__name__)

# Keyed by the error code of each base error family
STATUS_CODE_MAP: dict[str, int] = {
    "VALIDATION_ERROR": 422,  # HTTP_422_UNPROCESSABLE_CONTENT
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: DomainError) -> int:
    """Status of the closest error family in the exception class hierarchy."""
    for cls in type(exc).__mro__:
        code = getattr(cls, "error_code", None)
        if code in STATUS_CODE_MAP:
            return STATUS_CODE_MAP[code]
    return status.HTTP_400_BAD_REQUEST


def _where(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


def _error_body(detail: str, code: str, **fields: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"detail": detail, "code": code}
    body.update({key: value for key, value in fields.items() if value})
    return body


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """
    Specific codes (ACCOUNT_BLOCKED, CREDIT_LIMIT_EXCEEDED, ...) take the
    status of the family they extend. Business context (account ids,
    balances) is returned for client errors only.
    """
    status_code = status_code_for(exc)
    error_dict = exc.to_dict()

    if status_code >= 500:
        logger.error(
            "Ledger error",
            extra={"error_code": exc.error_code, "context": exc.context, **_where(request)},
        )
    else:
        logger.info("Client error", extra={"error_code": exc.error_code, **_where(request)})

    return JSONResponse(
        status_code=status_code,
        content=_error_body(
            error_dict["message"],
            error_dict["code"],
            errors=error_dict.get("errors"),
            context=exc.context if status_code < 500 else None,
        ),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Field path without the 'body'/'query'/'path' location prefix
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "path")),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info("Request validation error", extra={"errors": errors, **_where(request)})

    return JSONResponse(
        status_code=422,
        content=_error_body("Invalid request parameters", "VALIDATION_ERROR", errors=errors),
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    logger.info("Value error", extra={"error_message": str(exc), **_where(request)})
    return JSONResponse(status_code=422, content=_error_body(str(exc), "INVALID_VALUE"))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error",
        exc_info=exc,
        extra={"error_type": type(exc).__name__, **_where(request)},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
