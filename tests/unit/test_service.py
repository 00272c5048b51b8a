"""
Unit Tests for the Prediction Service

Tests for the validate -> score pipeline and model reference data.
"""
import math

import pytest

from stemi.core.features import FEATURE_NAMES, INTERCEPT_TERM
from stemi.core.inference import RiskCategory, ScoringEngine, logit
from stemi.services import PredictionService
from stemi.utils.exceptions import FeatureValidationError


class _SpyEngine(ScoringEngine):
    """Engine that records whether it was invoked."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def predict(self, record):
        self.calls += 1
        return super().predict(record)


class TestPredictionService:
    """Tests for PredictionService.predict."""

    def test_end_to_end_example(self, service, example_features):
        result = service.predict(example_features)

        assert 0.0 < result.probability < 1.0
        assert set(result.contributions) == {INTERCEPT_TERM, *FEATURE_NAMES}
        assert math.isclose(
            sum(result.contributions.values()), logit(result.probability), rel_tol=1e-9
        )
        assert result.risk_category == service.engine.thresholds.classify(result.probability)

    def test_low_risk(self, service, low_risk_features):
        assert service.predict(low_risk_features).risk_category == RiskCategory.LOW

    def test_invalid_input_never_scored(self, validator, example_features):
        spy = _SpyEngine()
        service = PredictionService(validator=validator, engine=spy)
        example_features["ageYears"] = 150
        del example_features["heartRateBpm"]

        with pytest.raises(FeatureValidationError) as exc_info:
            service.predict(example_features)

        assert spy.calls == 0
        assert {i["field"] for i in exc_info.value.issues} == {"ageYears", "heartRateBpm"}

    def test_valid_input_scored_once(self, validator, example_features):
        spy = _SpyEngine()
        service = PredictionService(validator=validator, engine=spy)
        service.predict(example_features)
        assert spy.calls == 1

    def test_repeatable(self, service, example_features):
        assert service.predict(example_features).to_dict() == service.predict(example_features).to_dict()

    def test_default_collaborators(self, example_features):
        service = PredictionService()
        assert service.predict(example_features).model_version == service.engine.model_version


class TestModelInfo:
    """Tests for PredictionService.model_info."""

    def test_model_info(self, service):
        info = service.model_info()

        assert info["model_version"] == service.engine.model_version
        assert info["thresholds"] == {"low": 0.10, "high": 0.50}
        assert list(info["coefficients"]["terms"]) == list(FEATURE_NAMES)
        assert [f["name"] for f in info["features"]] == list(FEATURE_NAMES)
        lo, hi = info["logit_bounds"]
        assert lo < hi
