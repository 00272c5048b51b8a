"""
Prediction Service

Single entry point used by the API layer: validate a raw payload, then
score it. The scoring engine is never invoked for an invalid payload.
"""
from typing import Any, Dict, Optional

from stemi.core.features import schema_description
from stemi.core.inference import ScoringEngine, PredictionResult
from stemi.core.validation import FeatureValidator
from stemi.utils import get_logger

logger = get_logger(__name__)


class PredictionService:
    """
    Validate -> score pipeline.

    Stateless apart from its injected validator and engine, both of which
    are read-only after construction.
    """

    def __init__(
        self,
        validator: Optional[FeatureValidator] = None,
        engine: Optional[ScoringEngine] = None,
    ):
        self.validator = validator or FeatureValidator()
        self.engine = engine or ScoringEngine()

    def predict(self, raw: Any) -> PredictionResult:
        """
        Validate and score one payload.

        Raises:
            FeatureValidationError: With every field violation, if invalid.
        """
        report = self.validator.validate(raw)
        if not report.is_valid:
            logger.info(
                f"Prediction rejected: {len(report.violations)} violation(s) "
                f"on {report.fields_in_error}"
            )
        record = report.raise_for_errors()

        logger.debug(f"Scoring record: {record.to_dict()}")
        result = self.engine.predict(record)

        top = ", ".join(f"{name}={value:+.2f}" for name, value in result.top_contributions(3))
        logger.info(
            f"Prediction: {result.risk_category.value} "
            f"(p={result.probability:.3f}, model={result.model_version})"
        )
        logger.debug(f"Top contributions: {top}")
        return result

    def model_info(self) -> Dict[str, Any]:
        """Model version, thresholds, coefficients and the feature schema."""
        info = self.engine.describe()
        info["features"] = schema_description()
        return info
