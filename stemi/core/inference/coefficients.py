"""
Logistic Model Coefficients

Versioned, read-only coefficient table for the STEMI logistic model.

Each feature contributes ``weight * x`` to the log-odds, where the encoded
value is ``x = (transform(value) - center) / scale``. Flags use the identity
transform with no centering, so their contribution is either 0 or ``weight``.
Continuous inputs are centred on a clinically typical value so that the
intercept reads as the log-odds of a reference patient.

The default values below are an educational placeholder; they are not fitted
to a cohort and must not be used for clinical decisions.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from stemi.core.features import FEATURE_NAMES, INTERCEPT_TERM
from stemi.utils.exceptions import ConfigurationError


class Transform(str, Enum):
    """Monotonic (non-decreasing) transform applied before centering."""
    IDENTITY = "identity"
    LOG1P    = "log1p"

    def apply(self, value: float) -> float:
        if self is Transform.LOG1P:
            return math.log1p(value)
        return value


@dataclass(frozen=True)
class TermCoefficient:
    """Weight and encoding of one feature term."""
    feature: str
    weight: float
    center: float = 0.0
    scale: float = 1.0
    transform: Transform = Transform.IDENTITY

    def encode(self, value: float) -> float:
        return (self.transform.apply(value) - self.center) / self.scale

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature": self.feature,
            "weight": self.weight,
            "center": self.center,
            "scale": self.scale,
            "transform": self.transform.value,
        }


@dataclass(frozen=True)
class CoefficientTable:
    """
    Intercept plus exactly one term per canonical feature.

    Terms are stored in canonical schema order regardless of the order
    they were supplied in.
    """
    version: str
    intercept: float
    terms: Tuple[TermCoefficient, ...]

    def __post_init__(self):
        seen: Dict[str, TermCoefficient] = {}
        for term in self.terms:
            if term.feature == INTERCEPT_TERM:
                raise ConfigurationError(
                    f"'{INTERCEPT_TERM}' is reserved and cannot be a feature term",
                    component="coefficients",
                )
            if term.feature in seen:
                raise ConfigurationError(
                    f"Duplicate coefficient for {term.feature}",
                    component="coefficients",
                )
            seen[term.feature] = term

        missing = [n for n in FEATURE_NAMES if n not in seen]
        extra = sorted(set(seen) - set(FEATURE_NAMES))
        if missing or extra:
            raise ConfigurationError(
                "Coefficient table does not match the feature schema",
                component="coefficients",
                details={"missing": missing, "unexpected": extra},
            )

        if not math.isfinite(self.intercept):
            raise ConfigurationError("Intercept must be finite", component="coefficients")
        for term in seen.values():
            if not (math.isfinite(term.weight) and math.isfinite(term.center)):
                raise ConfigurationError(
                    f"Non-finite coefficient for {term.feature}",
                    component="coefficients",
                )
            if not (math.isfinite(term.scale) and term.scale > 0):
                raise ConfigurationError(
                    f"Scale for {term.feature} must be a positive finite number",
                    component="coefficients",
                )

        object.__setattr__(self, "terms", tuple(seen[n] for n in FEATURE_NAMES))

    def term(self, feature: str) -> TermCoefficient:
        for t in self.terms:
            if t.feature == feature:
                return t
        raise KeyError(f"No coefficient for {feature}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CoefficientTable":
        """
        Build a table from a plain mapping.

        Expected shape::

            {
                "version": "...",
                "intercept": -5.0,
                "terms": {
                    "ageYears": {"weight": 0.25, "center": 60, "scale": 10},
                    "male": {"weight": 0.35},
                    "troponinNgL": {"weight": 0.45, "transform": "log1p"},
                    ...
                }
            }

        A bare number is accepted in place of a term mapping and is taken as
        the weight.
        """
        try:
            terms = []
            for feature, spec in data["terms"].items():
                if isinstance(spec, Mapping):
                    terms.append(TermCoefficient(
                        feature=feature,
                        weight=float(spec["weight"]),
                        center=float(spec.get("center", 0.0)),
                        scale=float(spec.get("scale", 1.0)),
                        transform=Transform(spec.get("transform", Transform.IDENTITY.value)),
                    ))
                else:
                    terms.append(TermCoefficient(feature=feature, weight=float(spec)))
            return cls(
                version=str(data.get("version", "custom")),
                intercept=float(data["intercept"]),
                terms=tuple(terms),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Malformed coefficient table: {e}",
                component="coefficients",
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "intercept": self.intercept,
            "terms": {t.feature: t.to_dict() for t in self.terms},
        }


# ── Default model ─────────────────────────────────────────────────────────────

# Reference patient: 60 y, HR 80, SBP 130, troponin at the 99th-percentile URL
TROPONIN_URL_NG_L = 14.0

DEFAULT_COEFFICIENTS = CoefficientTable(
    version="stemi-lr-demo-1",
    intercept=-5.0,
    terms=(
        TermCoefficient("ageYears",          0.25, center=60.0, scale=10.0),
        TermCoefficient("male",              0.35),
        TermCoefficient("chestPainTypical",  1.10),
        TermCoefficient("stElevationMm",     0.90),
        TermCoefficient("reciprocalChanges", 1.20),
        TermCoefficient("troponinNgL",       0.45, center=math.log1p(TROPONIN_URL_NG_L),
                        transform=Transform.LOG1P),
        TermCoefficient("heartRateBpm",      0.10, center=80.0, scale=10.0),
        TermCoefficient("systolicBp",       -0.08, center=130.0, scale=10.0),
        TermCoefficient("smoker",            0.30),
        TermCoefficient("diabetes",          0.25),
    ),
)
