"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    StemiDetectorError,
    RequestFormatError,
    FeatureValidationError,
    InferenceError,
    ConfigurationError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "StemiDetectorError",
    "RequestFormatError",
    "FeatureValidationError",
    "InferenceError",
    "ConfigurationError",
]
