"""Exception hierarchy for template loading, metric generation and output."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    FILE_ERROR = "FILE_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    RESOURCE_ERROR = "RESOURCE_ERROR"
    OUTPUT_ERROR = "OUTPUT_ERROR"


class MetricsAdvisorError(Exception):
    """Base class for every error this package raises on purpose."""

    error_type: ErrorType = ErrorType.RESOURCE_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        file_path: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})
        self.file_path = file_path

    def to_structured(self) -> dict[str, Any]:
        """Return a JSON-serialisable description of the error."""
        return {
            "error": self.error_type.value,
            "message": self.message,
            "details": self.details,
            "file_path": self.file_path,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ResourceError(MetricsAdvisorError):
    """A resource cannot be handled by a generator.

    Raised for unsupported resource types, a missing catalog entry list for a
    type that is declared as supported, and malformed resource shapes. These
    are programming or configuration defects, never transient.
    """

    error_type = ErrorType.RESOURCE_ERROR


class TemplateError(MetricsAdvisorError):
    """A template file could not be read or parsed."""

    error_type = ErrorType.FILE_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        file_path: str = "",
        error_type: ErrorType = ErrorType.FILE_ERROR,
    ) -> None:
        super().__init__(message, details=details, file_path=file_path)
        self.error_type = error_type


class OutputError(MetricsAdvisorError):
    error_type = ErrorType.OUTPUT_ERROR
