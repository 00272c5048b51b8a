"""
API Schemas

Pydantic response envelopes for the STEMI Detector API. Request bodies are
read raw and checked by ``stemi.core.validation`` so that every field
violation is reported in one response and strings are never coerced.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class PredictionResponse(BaseModel):
    """Probability, risk band and log-odds decomposition for one patient."""
    probability: float = Field(..., gt=0.0, lt=1.0, description="Estimated probability of STEMI")
    riskCategory: Literal["Low", "Intermediate", "High"]
    contributions: Dict[str, float] = Field(
        ..., description="Signed log-odds contribution per term, including 'intercept'"
    )


class ValidationIssue(BaseModel):
    """One field-level schema violation."""
    path: List[str]
    field: str
    type: str
    message: str
    received: Optional[Any] = None
    expected_range: Optional[List[float]] = None


class ValidationErrorResponse(BaseModel):
    error: str = "Invalid input"
    issues: List[ValidationIssue]


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    status: str
    version: str
    model_version: str
    uptime_seconds: float


class FeatureSchemaResponse(BaseModel):
    features: List[Dict[str, Any]]


class ModelInfoResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_version: str
    thresholds: Dict[str, float]
    logit_bounds: List[float]
    coefficients: Dict[str, Any]
    features: List[Dict[str, Any]]
