"""
Error Handling Module for PeopleDesk

This module provides centralized error handling with:
- Custom exception hierarchy shared by simulated and remote data paths
- Standardized error responses
- Error logging
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union
import logging

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
logger = logging.getLogger("peopledesk.errors")


class ErrorCode(str, Enum):
    """Standardized error codes for the application"""

    # Validation Errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"

    # Resource Errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"

    # External Service Errors (502/503)
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"

    # Internal Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base exception for all application exceptions"""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.field = field
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response"""
        result = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationException(AppException):
    """Base validation exception"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            field=field,
        )


class InvalidArgumentException(ValidationException):
    """Malformed pagination, filter, sort or payload parameters"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
    ):
        super().__init__(message=message, field=field, details=details, code=code)


class InvalidDateRangeException(InvalidArgumentException):
    """Invalid date range"""

    def __init__(self, start_date: str, end_date: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Invalid date range: {start_date} to {end_date}. Start date must not be after end date.",
            code=ErrorCode.INVALID_DATE_RANGE,
            details={"start_date": start_date, "end_date": end_date},
        )


# ============================================================================
# Resource Exceptions
# ============================================================================

class NotFoundException(AppException):
    """Resource not found exception"""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Union[str, int]] = None,
        message: Optional[str] = None,
        code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        if message is None:
            if resource_id is not None:
                message = f"{resource_type} with ID '{resource_id}' not found"
            else:
                message = f"{resource_type} not found"
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={
                "resource_type": resource_type,
                "resource_id": str(resource_id) if resource_id is not None else None,
            },
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class IllegalTransitionException(AppException):
    """Status change not permitted by the entity's lifecycle"""

    def __init__(
        self,
        entity_type: str,
        from_status: str,
        to_status: str,
        message: Optional[str] = None,
    ):
        super().__init__(
            code=ErrorCode.ILLEGAL_TRANSITION,
            message=message or f"Cannot move {entity_type} from {from_status} to {to_status}",
            status_code=status.HTTP_409_CONFLICT,
            details={
                "entity_type": entity_type,
                "from_status": from_status,
                "to_status": to_status,
            },
        )
        self.entity_type = entity_type
        self.from_status = from_status
        self.to_status = to_status


# ============================================================================
# External Service Exceptions
# ============================================================================

class ExternalServiceException(AppException):
    """External service error exception"""

    def __init__(
        self,
        service_name: str,
        message: str,
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        _details = details or {}
        _details["service"] = service_name
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=_details,
            original_error=original_error,
        )


class BackendUnavailableException(ExternalServiceException):
    """Live-mode forwarding to the HR backend failed"""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            service_name="hr-backend",
            message=message,
            code=ErrorCode.BACKEND_UNAVAILABLE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            original_error=original_error,
            details=details,
        )


# ============================================================================
# Exception Handlers
# ============================================================================

def create_error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None,
    field: Optional[str] = None,
) -> JSONResponse:
    """Create a standardized error response"""
    content = {
        "detail": {
            "code": code.value,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }
    if field:
        content["detail"]["field"] = field
    if details:
        content["detail"]["details"] = details

    return JSONResponse(status_code=status_code, content=content)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle AppException"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"AppException: {exc.code.value} - {exc.message}",
        extra={
            "code": exc.code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
        },
        exc_info=exc.original_error,
    )

    return create_error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        field=exc.field,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException"""
    code_map = {
        400: ErrorCode.INVALID_ARGUMENT,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.ILLEGAL_TRANSITION,
        422: ErrorCode.VALIDATION_ERROR,
        500: ErrorCode.INTERNAL_ERROR,
        502: ErrorCode.EXTERNAL_SERVICE_ERROR,
        503: ErrorCode.BACKEND_UNAVAILABLE,
    }

    error_code = code_map.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    logger.warning(
        f"HTTPException: {exc.status_code} - {message}",
        extra={"path": request.url.path, "method": request.method},
    )

    return create_error_response(
        code=error_code,
        message=message,
        status_code=exc.status_code,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning(
        f"ValidationError: {len(errors)} validation errors",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )

    return create_error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message="Request validation failed",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details={"errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions"""
    logger.critical(
        f"UnhandledException: {type(exc).__name__} - {str(exc)}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )

    return create_error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application"""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================================================
# Error Envelope Decoding
# ============================================================================

def exception_from_error_body(status_code: int, body: Any) -> AppException:
    """
    Rebuild an AppException from a standardized error response body.

    Used by the HTTP backend so that live-mode callers see the same
    exception types the simulation raises.
    """
    detail = body.get("detail") if isinstance(body, dict) else None
    if not isinstance(detail, dict):
        detail = {"message": str(detail or body or "Backend request failed")}

    code = detail.get("code")
    message = detail.get("message") or "Backend request failed"
    details = detail.get("details") or {}

    if code == ErrorCode.ILLEGAL_TRANSITION.value:
        return IllegalTransitionException(
            entity_type=str(details.get("entity_type", "")),
            from_status=str(details.get("from_status", "")),
            to_status=str(details.get("to_status", "")),
            message=message,
        )
    if code == ErrorCode.NOT_FOUND.value or status_code == status.HTTP_404_NOT_FOUND:
        return NotFoundException(
            resource_type=str(details.get("resource_type") or "Resource"),
            resource_id=details.get("resource_id"),
            message=message,
        )
    if status_code >= 500:
        return BackendUnavailableException(
            message=f"Backend error ({status_code}): {message}",
            details={"status_code": status_code},
        )
    return InvalidArgumentException(message=message, field=detail.get("field"), details=details)
