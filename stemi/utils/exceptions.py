"""
Custom Exception Hierarchy

Provides specific exception types for the prediction pipeline
with structured error information.
"""
from typing import Optional, Dict, Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from stemi.core.validation.feature_validator import FieldViolation


class StemiDetectorError(Exception):
    """Base exception for all STEMI detector errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class RequestFormatError(StemiDetectorError):
    """Request envelope could not be read as a JSON object."""

    def __init__(
        self,
        message: str = "Bad request",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            details=details
        )


class FeatureValidationError(StemiDetectorError):
    """One or more input features violated the canonical schema."""

    def __init__(
        self,
        violations: List["FieldViolation"],
        message: str = "Invalid input",
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"issues": [v.to_dict() for v in violations]}
        )
        self.violations = list(violations)

    @property
    def issues(self) -> List[Dict[str, Any]]:
        return self.details["issues"]


class InferenceError(StemiDetectorError):
    """Internal numeric failure while scoring a validated record."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INFERENCE_ERROR",
            details=details
        )


class ConfigurationError(StemiDetectorError):
    """Coefficient table or risk thresholds are unusable."""

    def __init__(
        self,
        message: str,
        component: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"component": component, **(details or {})}
        )
        self.component = component
