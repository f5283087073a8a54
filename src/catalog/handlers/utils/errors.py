"""
Error taxonomy for the catalog functions.

Every expected failure is a subclass of BaseServiceError carrying its error code,
HTTP status and classification. Anything else is treated as an unexpected fault
and surfaced generically by the request pipeline.
"""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from catalog.constants import ERROR_CODES, ERRORS
from catalog.handlers.utils.observability import count, logger, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    ROUTING = "ROUTING"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        details: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.details = details or []
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "error_message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "details": self.details,
        }


class ValidationError(BaseServiceError):
    """Raised when input is malformed or out of range."""

    http_status = 400

    def __init__(
        self,
        message: str = ERRORS['VALIDATION_FAILED'],
        field_errors: Optional[List[Dict[str, str]]] = None,
        error_code: str = ERROR_CODES['VALIDATION_ERROR'],
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            details=field_errors,
        )

    @property
    def field_errors(self) -> List[Dict[str, str]]:
        return self.details


class NotFoundError(BaseServiceError):
    """Raised when a referenced entity is absent or excluded (soft-deleted)."""

    http_status = 404

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"{resource_type} not found",
            error_code=ERROR_CODES['NOT_FOUND'],
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidStateError(BaseServiceError):
    """Raised when a business rule forbids the requested transition."""

    http_status = 400

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ERROR_CODES['INVALID_STATE'],
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.BUSINESS_LOGIC,
        )
        self.current_status = current_status


class MethodNotAllowedError(BaseServiceError):
    """Raised when a route exists but the HTTP method is not served."""

    http_status = 405

    def __init__(self, method: str):
        super().__init__(
            message=ERRORS['METHOD_NOT_ALLOWED'],
            error_code=ERROR_CODES['METHOD_NOT_ALLOWED'],
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.ROUTING,
        )
        self.method = method


class InfrastructureError(BaseServiceError):
    """Raised when a backing store cannot be reached. Never retried inside the core."""

    http_status = 500

    def __init__(self, message: str, error_code: str = ERROR_CODES['DB_CONNECTION_ERROR']):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
        )


class AuditWriteError(BaseServiceError):
    """Audit record could not be written. Recovered inside the audit sink, never surfaced."""

    def __init__(self, entity_id: str, cause: Exception):
        super().__init__(
            message=f"Failed to write audit log for {entity_id}: {cause}",
            error_code="AUDIT_WRITE_FAILED",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INFRASTRUCTURE,
        )
        self.entity_id = entity_id
        self.cause = cause


def get_http_status_code(error: Exception) -> int:
    """Get appropriate HTTP status code for error."""
    if isinstance(error, BaseServiceError):
        return error.http_status
    return 500


def format_error_response(error: Exception) -> Dict[str, Any]:
    """
    Build the canonical error body: {code, message, details?}.

    Unknown exceptions never expose their message.
    """
    if not isinstance(error, BaseServiceError) or error.http_status >= 500:
        code = error.error_code if isinstance(error, InfrastructureError) else ERROR_CODES['INTERNAL_SERVER_ERROR']
        return {"code": code, "message": ERRORS['INTERNAL']}

    body: Dict[str, Any] = {"code": error.error_code, "message": error.message}
    if error.details:
        body["details"] = error.details
    return body


def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    count(f"Error{error.category.value.title().replace('_', '')}")

    tracer.put_annotation("error_code", error.error_code)

    log = logger.warning if error.http_status < 500 else logger.error
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
        }
    )
