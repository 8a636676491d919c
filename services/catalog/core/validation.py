"""
Where: services/catalog/core/validation.py
What: Field validation for submitted resource bodies.
Why: Check request fields against declared rules before anything is persisted.

Rules are evaluated in declaration order and the first violation wins; later
violations are never reported.
"""

import math
from dataclasses import dataclass
from enum import Enum
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Tuple

from ..models import Rejected, RejectionKind, Validated, ValidationResult


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ABSENT = "absent"
    OTHER = "other"


_MISSING = object()


def classify(value: Any) -> ValueKind:
    """
    Tag a raw JSON value. null counts as absent; booleans are never numbers.
    NaN and infinities (json.loads accepts NaN, Infinity and 1e400) are not numbers.
    """
    if value is _MISSING or value is None:
        return ValueKind.ABSENT
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.NUMBER
    if isinstance(value, float):
        return ValueKind.NUMBER if math.isfinite(value) else ValueKind.OTHER
    if isinstance(value, str):
        return ValueKind.STRING
    return ValueKind.OTHER


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: ValueKind
    required: bool = True
    min_length: Optional[int] = None
    minimum: Optional[float] = None

    def check(self, value: Any) -> Optional[str]:
        """Return the violation message for this value, or None."""
        kind = classify(value)
        if kind is ValueKind.ABSENT:
            return f"{self.name} is required" if self.required else None
        if kind is not self.kind:
            article = "an" if self.kind.value[0] in "aeiou" else "a"
            return f"{self.name} must be {article} {self.kind.value}"
        if self.min_length is not None and len(value) < self.min_length:
            return f"{self.name} must be at least {self.min_length} characters long"
        if self.minimum is not None and value < self.minimum:
            return f"{self.name} must be at least {self.minimum:g}"
        return None


RuleSet = Tuple[FieldRule, ...]

PRODUCT_RULES: RuleSet = (
    FieldRule("name", ValueKind.STRING, required=True, min_length=3),
    FieldRule("price", ValueKind.NUMBER, required=True, minimum=0),
)


def validate(raw_fields: Optional[Mapping[str, Any]], rules: Sequence[FieldRule]) -> ValidationResult:
    """
    Check raw request fields against an ordered rule set.

    Returns Validated with the declared fields that were supplied (values
    untouched) or Rejected carrying the first violation in rule order.
    """
    if not isinstance(raw_fields, Mapping):
        return Rejected(RejectionKind.VALIDATION_FAILED, "request body must be a JSON object")

    validated = {}
    for rule in rules:
        value = raw_fields.get(rule.name, _MISSING)
        error = rule.check(value)
        if error is not None:
            return Rejected(RejectionKind.VALIDATION_FAILED, error)
        if value is not _MISSING:
            validated[rule.name] = value

    return Validated(validated)
