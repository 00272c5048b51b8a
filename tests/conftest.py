"""
Pytest Configuration and Fixtures

Shared fixtures for STEMI detector tests.
"""
import pytest
from pathlib import Path
import sys
from typing import Any, Dict

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stemi.core.inference import ScoringEngine
from stemi.core.validation import FeatureValidator
from stemi.services import PredictionService


@pytest.fixture
def example_features() -> Dict[str, Any]:
    """Default patient from the web form."""
    return {
        "ageYears": 60,
        "male": True,
        "chestPainTypical": True,
        "stElevationMm": 2,
        "reciprocalChanges": True,
        "troponinNgL": 80,
        "heartRateBpm": 90,
        "systolicBp": 120,
        "smoker": False,
        "diabetes": False,
    }


@pytest.fixture
def low_risk_features() -> Dict[str, Any]:
    """Young patient, no ischemic findings."""
    return {
        "ageYears": 25,
        "male": False,
        "chestPainTypical": False,
        "stElevationMm": 0,
        "reciprocalChanges": False,
        "troponinNgL": 3,
        "heartRateBpm": 70,
        "systolicBp": 125,
        "smoker": False,
        "diabetes": False,
    }


@pytest.fixture
def validator() -> FeatureValidator:
    return FeatureValidator()


@pytest.fixture
def engine() -> ScoringEngine:
    return ScoringEngine()


@pytest.fixture
def service(validator, engine) -> PredictionService:
    return PredictionService(validator=validator, engine=engine)
