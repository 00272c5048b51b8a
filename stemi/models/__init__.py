"""
API Models
"""
from .prediction import (
    PredictionResponse,
    ValidationIssue,
    ValidationErrorResponse,
    ErrorResponse,
    HealthResponse,
    FeatureSchemaResponse,
    ModelInfoResponse,
)

__all__ = [
    "PredictionResponse",
    "ValidationIssue",
    "ValidationErrorResponse",
    "ErrorResponse",
    "HealthResponse",
    "FeatureSchemaResponse",
    "ModelInfoResponse",
]
