"""Exception handlers rendering every failure as {"error": {code, message, details}}"""
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...domain.errors import DomainError
from ...utils.logger import get_correlation_id, get_logger

logger = get_logger(__name__)


def _error_response(http_status: int, body: Dict[str, Any]) -> JSONResponse:
    correlation_id = get_correlation_id()
    headers = {"X-Correlation-Id": correlation_id} if correlation_id else None
    return JSONResponse(status_code=http_status, content=jsonable_encoder(body), headers=headers)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    # 5xx domain errors (store or feed trouble) are logged as errors; the rest are caller mistakes
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{request.method} {request.url.path} failed with {exc.error_code}: {exc.message}",
        extra={"reason": exc.error_code, "status_code": exc.http_status}
    )
    return _error_response(exc.http_status, exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(
        f"Rejected malformed {request.method} {request.url.path}: {exc.errors()}",
        extra={"reason": "VALIDATION_ERROR"}
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": {"errors": exc.errors()},
        }
    })


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "details": {"correlation_id": get_correlation_id()},
        }
    })


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
