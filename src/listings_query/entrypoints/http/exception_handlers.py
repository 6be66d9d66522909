"""FastAPI exception handlers for domain errors.

Translates domain errors to HTTP responses with the structured error format
of error_responses.ErrorResponse. The domain layer never logs its own errors;
logging happens here, once, at the protocol boundary.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from listings_query.adapters.param_coercion import InvalidFilterValue
from listings_query.domain.errors import DomainError

logger = logging.getLogger(__name__)

HTTP_422_UNPROCESSABLE = 422

STATUS_CODE_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": HTTP_422_UNPROCESSABLE,
    "UNRECOGNIZED_KIND": HTTP_422_UNPROCESSABLE,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "UNRECOGNIZED_VARIANT": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _request_extra(request: Request) -> dict[str, Any]:
    return {"path": request.url.path, "method": request.method}


def _error_body(detail: str, code: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"detail": detail, "code": code}
    if errors:
        body["errors"] = errors
    return body


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Handle all domain errors.

    Status comes from STATUS_CODE_BY_ERROR_CODE (unmapped codes are 400).
    Server-side failures (an unknown query variant is a wiring bug) are logged
    at ERROR with their context; client errors at INFO.
    """
    error_dict = exc.to_dict()
    status_code = STATUS_CODE_BY_ERROR_CODE.get(exc.error_code, status.HTTP_400_BAD_REQUEST)

    if status_code >= 500:
        logger.error(
            "Domain error occurred",
            extra={
                "error_code": exc.error_code,
                "error_message": exc.message,
                "context": exc.context,
                **_request_extra(request),
            },
        )
        # Internal details stay in the log
        body = _error_body("An internal error occurred", exc.error_code)
    else:
        logger.info(
            "Client error",
            extra={"error_code": exc.error_code, "error_message": exc.message, **_request_extra(request)},
        )
        body = _error_body(exc.message, exc.error_code, error_dict.get("errors"))

    return JSONResponse(status_code=status_code, content=body)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI/Pydantic validation errors (e.g. a non-integer X-User-Id)."""
    errors = [
        {
            # Drop the 'query'/'header' location prefix
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "header")),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info("Request validation error", extra={"errors": errors, **_request_extra(request)})

    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE,
        content=_error_body("Invalid request parameters", "VALIDATION_ERROR", errors),
    )


async def handle_invalid_filter_value(request: Request, exc: InvalidFilterValue) -> JSONResponse:
    """Handle filter values a query object could not coerce (e.g. max_aum=lots, limit=-1).

    Other ValueErrors are bugs and fall through to the catch-all handler.
    """
    logger.info("Invalid filter value", extra={"error_message": str(exc), **_request_extra(request)})

    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE,
        content=_error_body(str(exc), "INVALID_VALUE"),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler; always logged with the traceback."""
    logger.error(
        "Unexpected error occurred",
        exc_info=exc,
        extra={"error_type": type(exc).__name__, "error_message": str(exc), **_request_extra(request)},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the app. Call once at startup."""
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidFilterValue, handle_invalid_filter_value)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.info("Exception handlers registered successfully")
