"""Declarative field validation for decoded JSON payloads."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from src.core.errors import FieldViolation, ValidationErrorSet


class BoundOp(StrEnum):
    GT = "gt"
    GTE = "gte"


@dataclass(frozen=True, slots=True)
class NumericBound:
    op: BoundOp
    threshold: float

    def accepts(self, value: float) -> bool:
        if self.op is BoundOp.GT:
            return value > self.threshold
        return value >= self.threshold

    def describe(self, field_name: str) -> str:
        if self.op is BoundOp.GT:
            return f"{field_name} must be greater than {self.threshold:g}"
        return f"{field_name} must be greater than or equal to {self.threshold:g}"


@dataclass(frozen=True, slots=True)
class FieldRule:
    field_name: str
    value_type: type = str
    required: bool = False
    numeric_bound: NumericBound | None = None
    max_length: int | None = None


Schema = tuple[FieldRule, ...]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _matches_type(value: Any, value_type: type) -> bool:
    if value_type is float:
        return _is_number(value)
    return isinstance(value, value_type)


def _is_zero_value(value: Any) -> bool:
    # Absent, empty and zero are indistinguishable to a required check.
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if _is_number(value):
        return value == 0
    return False


def _to_float(value: int | float) -> float | None:
    try:
        converted = float(value)
    except OverflowError:
        return None
    return converted if math.isfinite(converted) else None


def _check_field(rule: FieldRule, value: Any) -> tuple[str | None, Any]:
    """Return the violation message for ``value``, or None and the cleaned value."""
    if rule.required and _is_zero_value(value):
        return f"{rule.field_name} is required", None
    if value is None:
        return None, None
    if not _matches_type(value, rule.value_type):
        return f"{rule.field_name} is invalid", None
    if rule.value_type is float:
        value = _to_float(value)
        if value is None:
            return f"{rule.field_name} is invalid", None
    if rule.max_length is not None and len(value) > rule.max_length:
        return f"{rule.field_name} must be at most {rule.max_length} characters", None
    if rule.numeric_bound is not None and not rule.numeric_bound.accepts(value):
        return rule.numeric_bound.describe(rule.field_name), None
    return None, value


def validate_fields(payload: Mapping[str, Any], schema: Schema, partial: bool = False) -> dict[str, Any]:
    """Check ``payload`` against ``schema`` and return the declared fields.

    Every rule is evaluated in declaration order and all violations are
    raised together as a ValidationErrorSet. Each field reports at most one
    violation. In ``partial`` mode fields missing from the payload are
    skipped entirely.
    """
    violations: list[FieldViolation] = []
    cleaned: dict[str, Any] = {}
    for rule in schema:
        present = rule.field_name in payload
        if partial and not present:
            continue
        value = payload.get(rule.field_name)
        message, cleaned_value = _check_field(rule, value)
        if message is not None:
            violations.append(FieldViolation(field=rule.field_name, message=message))
        elif present and value is not None:
            cleaned[rule.field_name] = cleaned_value

    if violations:
        raise ValidationErrorSet(violations)
    return cleaned
