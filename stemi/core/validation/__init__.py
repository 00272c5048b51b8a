"""
Validation Module

Schema validation of raw clinical feature payloads.
Gates the scoring engine: only validated records are ever scored.
"""
from .feature_validator import (
    FeatureValidator,
    FieldViolation,
    ValidationReport,
    ViolationType,
)

__all__ = [
    "FeatureValidator",
    "FieldViolation",
    "ValidationReport",
    "ViolationType",
]
