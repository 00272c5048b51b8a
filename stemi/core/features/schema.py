"""
Canonical Feature Schema

Defines the ten clinical inputs accepted by the STEMI scoring engine,
their types and their inclusive physiological bounds, plus the immutable
FeatureRecord produced by the validator.

Units:
    ageYears       years
    stElevationMm  mm, maximum across leads, 0.5 mm resolution
    troponinNgL    ng/L (high-sensitivity assay)
    heartRateBpm   beats per minute
    systolicBp     mmHg
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class FeatureKind(str, Enum):
    """Semantic type of a canonical feature."""
    INTEGER = "integer"
    REAL    = "real"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FeatureSpec:
    """Name, type and domain of one canonical feature."""
    name: str
    kind: FeatureKind
    label: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    unit: str = ""

    @property
    def is_numeric(self) -> bool:
        return self.kind is not FeatureKind.BOOLEAN

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "type": self.kind.value,
            "label": self.label,
        }
        if self.is_numeric:
            out["min"] = self.minimum
            out["max"] = self.maximum
            out["unit"] = self.unit
            if self.step is not None:
                out["step"] = self.step
        return out


# Reserved contribution key; never a feature name.
INTERCEPT_TERM = "intercept"

FEATURE_SPECS: Tuple[FeatureSpec, ...] = (
    FeatureSpec("ageYears",          FeatureKind.INTEGER, "Age (years)", 18, 100, unit="years"),
    FeatureSpec("male",              FeatureKind.BOOLEAN, "Male"),
    FeatureSpec("chestPainTypical",  FeatureKind.BOOLEAN, "Typical ischemic chest pain"),
    FeatureSpec("stElevationMm",     FeatureKind.REAL,    "ST elevation (mm, max lead)", 0, 10, step=0.5, unit="mm"),
    FeatureSpec("reciprocalChanges", FeatureKind.BOOLEAN, "Reciprocal ST changes present"),
    FeatureSpec("troponinNgL",       FeatureKind.REAL,    "Troponin (ng/L)", 0, 100000, unit="ng/L"),
    FeatureSpec("heartRateBpm",      FeatureKind.INTEGER, "Heart rate (bpm)", 30, 220, unit="bpm"),
    FeatureSpec("systolicBp",        FeatureKind.INTEGER, "Systolic BP (mmHg)", 60, 240, unit="mmHg"),
    FeatureSpec("smoker",            FeatureKind.BOOLEAN, "Current smoker"),
    FeatureSpec("diabetes",          FeatureKind.BOOLEAN, "Diabetes"),
)

FEATURE_NAMES: Tuple[str, ...] = tuple(s.name for s in FEATURE_SPECS)

_SPECS_BY_NAME: Dict[str, FeatureSpec] = {s.name: s for s in FEATURE_SPECS}


def get_spec(name: str) -> FeatureSpec:
    """Look up the spec of a canonical feature. Raises KeyError if unknown."""
    return _SPECS_BY_NAME[name]


def schema_description() -> List[Dict[str, Any]]:
    """JSON-ready description of every canonical feature, in schema order."""
    return [s.to_dict() for s in FEATURE_SPECS]


@dataclass(frozen=True)
class FeatureRecord:
    """
    A validated set of clinical features.

    Only the validator should construct these; field names mirror the
    camelCase wire names so that records round-trip through JSON unchanged.
    """
    ageYears: int
    male: bool
    chestPainTypical: bool
    stElevationMm: float
    reciprocalChanges: bool
    troponinNgL: float
    heartRateBpm: int
    systolicBp: int
    smoker: bool
    diabetes: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def encode(self, name: str) -> float:
        """Raw numeric encoding of a field (booleans as 0.0 / 1.0)."""
        if name not in _SPECS_BY_NAME:
            raise KeyError(f"Unknown feature: {name}")
        return float(getattr(self, name))
