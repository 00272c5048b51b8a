"""
Feature Schema

Canonical clinical inputs and the validated record type.
"""
from .schema import (
    FeatureKind,
    FeatureSpec,
    FeatureRecord,
    FEATURE_SPECS,
    FEATURE_NAMES,
    INTERCEPT_TERM,
    get_spec,
    schema_description,
)

__all__ = [
    "FeatureKind",
    "FeatureSpec",
    "FeatureRecord",
    "FEATURE_SPECS",
    "FEATURE_NAMES",
    "INTERCEPT_TERM",
    "get_spec",
    "schema_description",
]
