"""
Risk Category Bands

Discretises a STEMI probability into Low / Intermediate / High. Bands are
closed below and open above:

    p <  low           -> Low
    low <= p < high    -> Intermediate
    p >= high          -> High
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from stemi.utils.exceptions import ConfigurationError


class RiskCategory(str, Enum):
    """Triage framing of the predicted probability."""
    LOW          = "Low"
    INTERMEDIATE = "Intermediate"
    HIGH         = "High"

    @property
    def rank(self) -> int:
        return _RANK[self]


_RANK = {
    RiskCategory.LOW:          0,
    RiskCategory.INTERMEDIATE: 1,
    RiskCategory.HIGH:         2,
}


@dataclass(frozen=True)
class RiskThresholds:
    """Lower edges of the Intermediate and High bands."""
    low: float
    high: float

    def __post_init__(self):
        if not (math.isfinite(self.low) and math.isfinite(self.high)):
            raise ConfigurationError("Risk thresholds must be finite", component="thresholds")
        if not (0.0 < self.low < self.high < 1.0):
            raise ConfigurationError(
                f"Risk thresholds must satisfy 0 < low < high < 1 (got {self.low}, {self.high})",
                component="thresholds",
                details={"low": self.low, "high": self.high},
            )

    def classify(self, probability: float) -> RiskCategory:
        if probability < self.low:
            return RiskCategory.LOW
        if probability < self.high:
            return RiskCategory.INTERMEDIATE
        return RiskCategory.HIGH

    def to_dict(self) -> Dict[str, float]:
        return {"low": self.low, "high": self.high}


DEFAULT_THRESHOLDS = RiskThresholds(low=0.10, high=0.50)
