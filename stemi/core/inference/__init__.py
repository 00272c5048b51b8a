"""
Inference Module

Logistic STEMI scoring with additive per-feature explanations.

Usage:
    from stemi.core.inference import ScoringEngine

    engine = ScoringEngine()
    result = engine.predict(record)
    result.probability, result.risk_category, result.top_contributions(5)
"""
from .coefficients import CoefficientTable, TermCoefficient, Transform, DEFAULT_COEFFICIENTS
from .risk_bands import RiskCategory, RiskThresholds, DEFAULT_THRESHOLDS
from .scoring_engine import ScoringEngine, PredictionResult, sigmoid, logit, MAX_ABS_LOGIT

__all__ = [
    "CoefficientTable",
    "TermCoefficient",
    "Transform",
    "DEFAULT_COEFFICIENTS",
    "RiskCategory",
    "RiskThresholds",
    "DEFAULT_THRESHOLDS",
    "ScoringEngine",
    "PredictionResult",
    "sigmoid",
    "logit",
    "MAX_ABS_LOGIT",
]
