# ==============================================
# docmapper/core/exceptions.py
# ==============================================
from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(self, message: str,
                 error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code}')"


class PathEvaluationError(AppException):
    """Exception raised when a path-query is malformed or cannot be evaluated."""

    def __init__(
        self,
        path: str,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.path = path
        self.cause = cause

        if not message:
            message = f"Cannot evaluate path '{path}'"
            if cause is not None:
                message = f"{message}: {cause}"

        exception_details = details or {}
        exception_details["path"] = path

        super().__init__(
            message=message,
            error_code="PATH_EVALUATION_ERROR",
            details=exception_details,
        )


class TransformationError(AppException):
    """Exception raised when a transformation chain cannot produce a typed value."""

    def __init__(
        self,
        message: str,
        raw_value: Optional[str] = None,
        operation: Optional[str] = None,
        target_type: Optional[type] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.raw_value = raw_value
        self.operation = operation
        self.target_type = target_type

        exception_details = details or {}
        exception_details.update({
            "raw_value": raw_value,
            "operation": operation,
            "target_type": getattr(target_type, "__name__", None),
        })

        super().__init__(
            message=message,
            error_code="TRANSFORMATION_ERROR",
            details=exception_details,
        )


class FieldBindingError(AppException):
    """Exception raised when a mapping rule cannot be bound onto a record."""

    def __init__(
        self,
        field_name: str,
        message: str,
        rule: Optional[Any] = None,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field_name = field_name
        self.rule = rule
        self.cause = cause

        exception_details = details or {}
        exception_details["field"] = field_name
        if rule is not None:
            exception_details["rule"] = getattr(rule, "name", None)
            exception_details["source_path"] = getattr(rule, "source_path", None)

        super().__init__(
            message=message,
            error_code="FIELD_BINDING_ERROR",
            details=exception_details,
        )


class PersistenceBoundaryError(AppException):
    """Exception raised when the persistence collaborator fails."""

    def __init__(
        self,
        operation: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
    ):
        self.operation = operation
        self.cause = cause

        super().__init__(
            message=message or f"Persistence failed during {operation}: {cause}",
            error_code="PERSISTENCE_ERROR",
            details={"operation": operation},
        )


class DocumentParseError(AppException):
    """Exception raised when a document cannot be parsed into a tree."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="DOCUMENT_PARSE_ERROR",
            details=details,
        )


class UnsupportedDocumentTypeError(AppException):
    """Exception raised when no strategy is registered for a document type."""

    def __init__(self, document_type: Optional[str], supported: Optional[list] = None):
        self.document_type = document_type

        message = f"Unsupported document type: {document_type}"
        if supported:
            message = f"{message}. Supported types: {supported}"

        super().__init__(
            message=message,
            error_code="UNSUPPORTED_DOCUMENT_TYPE",
            details={"document_type": document_type},
        )


class MappingConfigurationError(AppException):
    """Exception raised for invalid mapping configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="MAPPING_CONFIGURATION_ERROR",
            details=details,
        )


class DatabaseError(AppException):
    """Exception raised for database errors."""

    def __init__(
        self,
        message: str = "Database error occurred",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation

        exception_details = details or {}
        if operation:
            exception_details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            details=exception_details,
        )


class RecordValidationError(AppException):
    """Exception raised when a bound record fails its document-type checks."""

    def __init__(self, message: str, record_type: Optional[str] = None):
        self.record_type = record_type

        super().__init__(
            message=message,
            error_code="RECORD_VALIDATION_ERROR",
            details={"record_type": record_type},
        )
