"""
Feature Validation Module

Checks a raw key/value payload against the canonical feature schema and
produces either a typed, immutable FeatureRecord or the complete list of
field-level violations. Every field is checked; nothing short-circuits, so
callers can report all problems at once.

Strings are never coerced to numbers or booleans: clinical values that
arrive as text are rejected rather than silently parsed.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from stemi.core.features import FEATURE_SPECS, FeatureKind, FeatureRecord, FeatureSpec
from stemi.utils import get_logger
from stemi.utils.exceptions import FeatureValidationError

logger = get_logger(__name__)


class ViolationType(str, Enum):
    """Kinds of field-level schema violations."""
    MISSING       = "missing"         # Absent or null
    WRONG_TYPE    = "wrong_type"      # e.g. string for a number, number for a flag
    NON_FINITE    = "non_finite"      # NaN / Inf
    OUT_OF_RANGE  = "out_of_range"    # Outside inclusive bounds
    OFF_STEP      = "off_step"        # Not a multiple of the field's resolution
    UNKNOWN_FIELD = "unknown_field"   # Only when unknown fields are rejected


@dataclass(frozen=True)
class FieldViolation:
    """A single problem with a single input field."""
    field: str
    violation_type: ViolationType
    message: str
    actual_value: Any = None
    expected_range: Optional[Tuple[float, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "path": [self.field] if self.field else [],
            "field": self.field,
            "type": self.violation_type.value,
            "message": self.message,
        }
        if _is_json_scalar(self.actual_value):
            out["received"] = self.actual_value
        if self.expected_range is not None:
            out["expected_range"] = list(self.expected_range)
        return out


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one payload: a record or a list of violations."""
    record: Optional[FeatureRecord] = None
    violations: Tuple[FieldViolation, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return self.record is not None and not self.violations

    @property
    def fields_in_error(self) -> List[str]:
        return sorted({v.field for v in self.violations})

    def raise_for_errors(self) -> FeatureRecord:
        """Return the record, or raise FeatureValidationError with every violation."""
        if not self.is_valid:
            raise FeatureValidationError(list(self.violations))
        return self.record

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "violation_count": len(self.violations),
            "issues": [v.to_dict() for v in self.violations],
        }


def _is_json_scalar(value: Any) -> bool:
    if isinstance(value, (bool, str)):
        return True
    if isinstance(value, numbers.Real):
        return _is_finite(value)
    return False


def _is_finite(value: numbers.Real) -> bool:
    # Python ints are unbounded and always finite
    return isinstance(value, numbers.Integral) or math.isfinite(value)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; flags are never numbers here
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _fmt(value: numbers.Real) -> str:
    if isinstance(value, numbers.Integral):
        return str(value)
    return f"{value:.15g}"


class FeatureValidator:
    """
    Validates raw payloads against the canonical feature schema.

    Stateless: safe to share across threads and concurrent requests.
    """

    def __init__(self, reject_unknown: bool = False):
        """
        Args:
            reject_unknown: Report keys outside the schema as violations
                            instead of silently ignoring them.
        """
        self.reject_unknown = reject_unknown
        self._specs = FEATURE_SPECS
        self._known = frozenset(s.name for s in FEATURE_SPECS)

    def validate(self, raw: Any) -> ValidationReport:
        """
        Validate a raw payload.

        Args:
            raw: Untyped key -> value mapping, typically a decoded JSON object.

        Returns:
            ValidationReport holding either a FeatureRecord or all violations.
        """
        if not isinstance(raw, Mapping):
            violation = FieldViolation(
                field="",
                violation_type=ViolationType.WRONG_TYPE,
                message=f"Expected an object of features, got {type(raw).__name__}",
            )
            return ValidationReport(violations=(violation,))

        violations: List[FieldViolation] = []
        values: Dict[str, Any] = {}

        for spec in self._specs:
            value, problem = self._check_field(spec, raw)
            if problem is not None:
                violations.append(problem)
            else:
                values[spec.name] = value

        unknown = sorted(str(k) for k in raw.keys() if k not in self._known)
        if unknown:
            if self.reject_unknown:
                for name in unknown:
                    violations.append(FieldViolation(
                        field=name,
                        violation_type=ViolationType.UNKNOWN_FIELD,
                        message=f"{name} is not a recognised feature",
                    ))
            else:
                logger.debug(f"FeatureValidator: ignoring unknown fields {unknown}")

        if violations:
            logger.debug(
                f"FeatureValidator: {len(violations)} violation(s) on "
                f"{sorted({v.field for v in violations})}"
            )
            return ValidationReport(violations=tuple(violations))

        return ValidationReport(record=FeatureRecord(**values))

    def _check_field(
        self, spec: FeatureSpec, raw: Mapping
    ) -> Tuple[Any, Optional[FieldViolation]]:
        """Check one field. Returns (coerced value, None) or (None, violation)."""
        name = spec.name
        if name not in raw or raw[name] is None:
            return None, FieldViolation(
                field=name,
                violation_type=ViolationType.MISSING,
                message=f"{name} is required",
            )

        value = raw[name]

        if spec.kind is FeatureKind.BOOLEAN:
            if not isinstance(value, bool):
                return None, self._wrong_type(name, value, "a boolean")
            return value, None

        if not _is_number(value):
            return None, self._wrong_type(name, value, "a number")

        if not _is_finite(value):
            return None, FieldViolation(
                field=name,
                violation_type=ViolationType.NON_FINITE,
                message=f"{name} must be a finite number (got {value})",
            )

        if spec.kind is FeatureKind.INTEGER:
            if not (isinstance(value, numbers.Integral) or float(value).is_integer()):
                return None, self._wrong_type(name, value, "an integer")

        bounds = (spec.minimum, spec.maximum)
        if value < spec.minimum or value > spec.maximum:
            return None, FieldViolation(
                field=name,
                violation_type=ViolationType.OUT_OF_RANGE,
                message=(
                    f"{name} must be between {_fmt(spec.minimum)} and "
                    f"{_fmt(spec.maximum)} (got {_fmt(value)})"
                ),
                actual_value=value,
                expected_range=bounds,
            )

        value = int(value) if spec.kind is FeatureKind.INTEGER else float(value)

        if spec.step is not None:
            steps = (value - spec.minimum) / spec.step
            if not math.isclose(steps, round(steps), abs_tol=1e-9):
                return None, FieldViolation(
                    field=name,
                    violation_type=ViolationType.OFF_STEP,
                    message=f"{name} must be a multiple of {_fmt(spec.step)} (got {_fmt(value)})",
                    actual_value=value,
                )

        return value, None

    @staticmethod
    def _wrong_type(name: str, value: Any, expected: str) -> FieldViolation:
        return FieldViolation(
            field=name,
            violation_type=ViolationType.WRONG_TYPE,
            message=f"{name} must be {expected} (got {type(value).__name__})",
            actual_value=value,
        )
