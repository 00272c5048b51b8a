"""
STEMI Scoring Engine

Logistic scoring of a validated FeatureRecord:

    z = intercept + sum_i(w_i * x_i)
    p = 1 / (1 + exp(-z))

The per-term products ``w_i * x_i`` (plus the intercept) are returned as an
additive decomposition of z, which is what the "top contributing features"
explanation is built from. The probability is mapped to a risk category by
fixed threshold bands.

Pure and deterministic: the engine holds only read-only model constants and
is safe to share across threads and concurrent requests.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

import numpy as np

from stemi.core.features import FEATURE_SPECS, FeatureKind, FeatureRecord, INTERCEPT_TERM
from stemi.utils import get_logger
from stemi.utils.exceptions import ConfigurationError, InferenceError

from .coefficients import CoefficientTable, DEFAULT_COEFFICIENTS
from .risk_bands import RiskCategory, RiskThresholds, DEFAULT_THRESHOLDS

logger = get_logger(__name__)

# Beyond this |z| the logistic function rounds to exactly 0.0 or 1.0 in
# double precision (1 - sigmoid(37) == 0.0).
MAX_ABS_LOGIT = 30.0


def sigmoid(z: float) -> float:
    """Overflow-free logistic function."""
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    ez = math.exp(z)
    return ez / (1.0 + ez)


def logit(p: float) -> float:
    """Inverse of :func:`sigmoid` for p in (0, 1)."""
    if not 0.0 < p < 1.0:
        raise ValueError(f"logit is undefined for p={p}")
    return math.log(p) - math.log1p(-p)


@dataclass(frozen=True)
class PredictionResult:
    """Outcome of scoring one FeatureRecord."""
    probability: float
    risk_category: RiskCategory
    contributions: Mapping[str, float]
    linear_predictor: float
    model_version: str = ""

    def __post_init__(self):
        if not isinstance(self.contributions, MappingProxyType):
            object.__setattr__(self, "contributions", MappingProxyType(dict(self.contributions)))

    def top_contributions(self, k: int = 5) -> List[Tuple[str, float]]:
        """
        The k feature terms with the largest absolute contribution.

        The intercept is excluded. Ties keep schema order.
        """
        features = [(n, v) for n, v in self.contributions.items() if n != INTERCEPT_TERM]
        features.sort(key=lambda item: abs(item[1]), reverse=True)
        return features[:max(k, 0)]

    def to_dict(self) -> Dict[str, Any]:
        """Outbound wire shape."""
        return {
            "probability": self.probability,
            "riskCategory": self.risk_category.value,
            "contributions": dict(self.contributions),
        }


class ScoringEngine:
    """
    Maps a FeatureRecord to a PredictionResult with a fixed logistic model.

    The coefficient table and thresholds are injected once at construction
    and never modified, so alternate models can be substituted in tests
    without touching process state.
    """

    def __init__(
        self,
        coefficients: CoefficientTable = DEFAULT_COEFFICIENTS,
        thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
    ):
        self.coefficients = coefficients
        self.thresholds = thresholds
        self._terms = coefficients.terms
        self._names: Tuple[str, ...] = tuple(t.feature for t in self._terms)
        self._weights = np.array([t.weight for t in self._terms], dtype=np.float64)
        self._weights.setflags(write=False)

        self.logit_bounds = self._reachable_logit_bounds()
        bound = max(abs(self.logit_bounds[0]), abs(self.logit_bounds[1]))
        if bound >= MAX_ABS_LOGIT:
            raise ConfigurationError(
                f"Coefficient table can reach |z|={bound:.2f}; probabilities would "
                f"saturate at 0 or 1 (limit {MAX_ABS_LOGIT})",
                component="coefficients",
                details={"version": coefficients.version, "logit_bounds": list(self.logit_bounds)},
            )

        logger.info(
            f"ScoringEngine initialized (model={coefficients.version}, "
            f"thresholds={thresholds.low}/{thresholds.high}, "
            f"z in [{self.logit_bounds[0]:.2f}, {self.logit_bounds[1]:.2f}])"
        )

    @property
    def model_version(self) -> str:
        return self.coefficients.version

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def encode(self, record: FeatureRecord) -> np.ndarray:
        """Encoded term vector x, in schema order."""
        return np.array(
            [t.encode(record.encode(t.feature)) for t in self._terms],
            dtype=np.float64,
        )

    def contributions(self, record: FeatureRecord) -> Dict[str, float]:
        """Intercept first, then ``w_i * x_i`` for every feature in schema order."""
        products = self._weights * self.encode(record)
        out = {INTERCEPT_TERM: float(self.coefficients.intercept)}
        out.update((name, float(c)) for name, c in zip(self._names, products))
        return out

    @staticmethod
    def linear_predictor(contributions: Mapping[str, float]) -> float:
        """Sum of the contributions, in their insertion order."""
        return sum(contributions.values())

    def classify(self, probability: float) -> RiskCategory:
        return self.thresholds.classify(probability)

    def predict(self, record: FeatureRecord) -> PredictionResult:
        """
        Score a validated record.

        Raises:
            InferenceError: If the linear predictor is non-finite. This
                cannot happen with a validated record and a checked
                coefficient table, so it signals a corrupted model.
        """
        contributions = self.contributions(record)
        z = self.linear_predictor(contributions)

        if not math.isfinite(z):
            logger.critical(
                f"ScoringEngine: non-finite linear predictor ({z}) "
                f"with model {self.model_version}"
            )
            raise InferenceError(
                "Linear predictor is not finite",
                details={"model_version": self.model_version},
            )

        probability = sigmoid(z)
        category = self.classify(probability)

        return PredictionResult(
            probability=probability,
            risk_category=category,
            contributions=contributions,
            linear_predictor=z,
            model_version=self.model_version,
        )

    # ------------------------------------------------------------------
    # Model checks
    # ------------------------------------------------------------------

    def _reachable_logit_bounds(self) -> Tuple[float, float]:
        """
        Smallest and largest z over the whole feature domain.

        Every term is monotonic in its feature, so each one is extremal at
        an end of that feature's range.
        """
        lo = hi = float(self.coefficients.intercept)
        specs = {s.name: s for s in FEATURE_SPECS}
        for term in self._terms:
            spec = specs[term.feature]
            if spec.kind is FeatureKind.BOOLEAN:
                ends = (0.0, 1.0)
            else:
                ends = (float(spec.minimum), float(spec.maximum))
            values = [term.weight * term.encode(v) for v in ends]
            lo += min(values)
            hi += max(values)
        return lo, hi

    def describe(self) -> Dict[str, Any]:
        return {
            "model_version": self.model_version,
            "thresholds": self.thresholds.to_dict(),
            "logit_bounds": list(self.logit_bounds),
            "coefficients": self.coefficients.to_dict(),
        }
