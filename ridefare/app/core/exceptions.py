"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict
from ridefare.app.core.observability import correlation_id_of

logger = logging.getLogger("ridefare")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ConfigurationNotFoundError(AppException):
    """Raised when no active configuration row exists for a pricing lookup."""

    def __init__(self, table: str, key: Dict[str, Any]):
        super().__init__(
            message=f"No active {table} configuration found",
            error_code="ERR_CONFIG_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"table": table, "key": key}
        )


class UnknownBookingTypeError(AppException):
    """Raised when a fare is requested for an unsupported booking type."""

    def __init__(self, booking_type: Any):
        super().__init__(
            message=f"Unknown booking type: {booking_type}",
            error_code="ERR_UNKNOWN_BOOKING_TYPE",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"booking_type": booking_type}
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class InvalidRideStateError(AppException):
    """Raised when a ride transition is not allowed from its current status."""

    def __init__(self, ride_id: int, current_status: str, expected: str):
        super().__init__(
            message=f"Ride {ride_id} is {current_status}, expected {expected}",
            error_code="ERR_RIDE_STATE",
            status_code=status.HTTP_409_CONFLICT,
            details={"ride_id": ride_id, "status": current_status}
        )


# Global Exception Handlers

HTTP_ERROR_CODES = {
    400: "ERR_BAD_REQUEST",
    404: "ERR_NOT_FOUND",
    405: "ERR_METHOD_NOT_ALLOWED",
    409: "ERR_CONFLICT",
    500: "ERR_INTERNAL_SERVER",
}


def error_response(status_code: int, error_code: str, message: str, details: Dict[str, Any] = None) -> JSONResponse:
    """Uniform `{error_code, message, details}` error body."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or {}
        }
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for domain exceptions raised by services and the pricing engine."""
    logger.info(
        "%s on %s %s [%s]: %s",
        exc.error_code, request.method, request.url.path, correlation_id_of(request), exc.message
    )
    return error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for HTTPException raised by routing and endpoint parameter checks."""
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "ERR_UNKNOWN")
    return error_response(exc.status_code, error_code, exc.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request body and parameter validation errors."""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "ERR_VALIDATION", "Validation error", {"errors": errors}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception on %s %s [%s]", request.method, request.url.path, correlation_id_of(request)
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "ERR_INTERNAL_SERVER", "An internal server error occurred"
    )
