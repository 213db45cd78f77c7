"""
Global exception handlers and custom exception classes.

Every error the services raise is an AppException subclass carrying a stable
error code; the handlers below render them as one uniform JSON envelope.
"""
import logging
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Set up logging
logger = logging.getLogger(__name__)

# Codes for errors raised by routing and body parsing rather than by the services
HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.context = context or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


class ValidationException(AppException):
    """Raised when input is malformed or inconsistent."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, detail: str):
        super().__init__("Validation failed", details=detail, context={"field": field})


class NotFoundException(AppException):
    """Raised when an entity does not exist within the caller's scope."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", identifier: Any = None):
        context = {"resource": resource}
        if identifier is not None:
            context["identifier"] = identifier
        super().__init__(f"{resource} not found", context=context)


class UserNotFoundException(NotFoundException):
    code = "USER_NOT_FOUND"

    def __init__(self, identifier: Any = None):
        super().__init__("User", identifier)


class StaffNotFoundException(NotFoundException):
    code = "STAFF_NOT_FOUND"

    def __init__(self, identifier: Any = None):
        super().__init__("Staff member", identifier)


class ClinicNotFoundException(NotFoundException):
    code = "CLINIC_NOT_FOUND"

    def __init__(self, identifier: Any = None):
        super().__init__("Clinic", identifier)


class HospitalNotFoundException(NotFoundException):
    code = "HOSPITAL_NOT_FOUND"

    def __init__(self, identifier: Any = None):
        super().__init__("Hospital", identifier)


class ConflictException(AppException):
    """Raised when a value violates a uniqueness rule."""
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"

    def __init__(self, field: str, value: Any, resource: str, message: Optional[str] = None):
        super().__init__(
            message or f"{field} already exists",
            context={"field": field, "value": value, "resource": resource},
        )
        self.field = field
        self.value = value


class DuplicateEmailException(ConflictException):
    code = "DUPLICATE_EMAIL"

    def __init__(self, email: str, resource: str = "user"):
        super().__init__("email", email, resource, "Email address already exists")


class DuplicatePhoneException(ConflictException):
    code = "DUPLICATE_PHONE"

    def __init__(self, phone: str, resource: str = "user"):
        super().__init__("phone", phone, resource, "Phone number already exists")


class DuplicateNationalIDException(ConflictException):
    code = "DUPLICATE_NATIONAL_ID"

    def __init__(self, national_id: str, resource: str = "user"):
        super().__init__("national_id", national_id, resource, "National ID already exists")


class DuplicateTaxIDException(ConflictException):
    code = "DUPLICATE_TAX_ID"

    def __init__(self, tax_id: str, resource: str = "hospital"):
        super().__init__("tax_id", tax_id, resource, "Tax ID already exists")


class BusinessRuleException(AppException):
    """Raised when an operation would break a domain invariant."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BUSINESS_RULE_VIOLATION"

    def __init__(self, rule: str, context: Optional[Dict[str, Any]] = None):
        super().__init__("Business rule violation", details=rule, context=context)


class DatabaseException(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "DATABASE_ERROR"

    def __init__(self, operation: str, error: Optional[Exception] = None):
        super().__init__("Database operation failed", details=operation, context={"operation": operation})
        self.error = error


class InternalException(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"

    def __init__(self, detail: str, error: Optional[Exception] = None):
        super().__init__("Internal server error", details=detail)
        self.error = error


class ExternalServiceException(AppException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, error: Optional[Exception] = None):
        super().__init__(f"{service} service error", context={"service": service})
        self.error = error


def error_envelope(
    status_code: int,
    code: str,
    message: str,
    details: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the JSON body shared by every error response.

    Returns:
        Dict: {error, message, code, details?, context?}
    """
    body = {
        "error": HTTPStatus(status_code).phrase,
        "message": message,
        "code": code,
    }
    if details:
        body["details"] = details
    if context:
        body["context"] = context
    return body


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    if exc.status_code >= 500:
        cause = getattr(exc, "error", None)
        logger.error(
            f"Internal error on {request.method} {request.url.path}: code={exc.code} "
            f"details={exc.details} context={exc.context} cause={cause!r}"
        )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(
            error_envelope(exc.status_code, exc.code, exc.message, exc.details, exc.context)
        ),
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    errors = jsonable_encoder(exc.errors())
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in errors]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            status.HTTP_400_BAD_REQUEST,
            ValidationException.code,
            "Validation failed",
            details=f"Invalid fields: {', '.join(fields)}",
            context={"errors": errors},
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for routing-level errors (unknown path, wrong method, unreadable body).

    Returns:
        JSONResponse: Standardized error response with the original status
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail),
        ),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Handler for anything that escaped the service layer.

    Returns:
        JSONResponse: Generic internal error response
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            InternalException.code,
            "An unexpected error occurred",
        ),
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
