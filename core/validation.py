"""
core/validation.py -- Declarative field rules and an explicit validator.

Rule sets are plain data (field name -> FieldRule) owned by the module that
owns the entity: auth.credentials.USER_RULES and catalog.rules.BOOK_RULES.
validate() walks a rule set and returns a ValidationResult; it never raises,
so callers decide whether an invalid result becomes a ValidationError.

Usage:
    data = normalize(raw, USER_RULES)
    result = validate(data, USER_RULES)
    if not result.ok:
        raise ValidationError("Validation failed", details=result.as_list())

Layer rule: no imports from api/, auth/, or catalog/.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class FieldRule:
    """Constraints for a single input field.

    Every constraint is optional. Messages mirror what the client sees in the
    "detail" list of a 400 response.
    """

    required: bool = False
    required_message: str = "This field is required"
    kind: Optional[type] = None  # str, float, bool -- checked before other constraints
    kind_message: str = "Invalid type"
    min_length: Optional[int] = None
    min_length_message: str = ""
    max_length: Optional[int] = None
    max_length_message: str = ""
    pattern: Optional[str] = None
    pattern_message: str = "Invalid format"
    choices: tuple = ()
    choices_message: str = "Invalid value"
    minimum: Optional[float] = None
    minimum_message: str = ""
    trim: bool = False
    lowercase: bool = False


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def as_list(self) -> list[dict[str, str]]:
        return [asdict(e) for e in self.errors]


def normalize(data: Mapping[str, Any], rules: Mapping[str, FieldRule]) -> dict[str, Any]:
    """Return a copy of data with trim/lowercase rules applied to string fields.

    Fields not mentioned in rules are dropped, so callers can pass a raw
    request body without unknown keys leaking into the store.
    """
    cleaned: dict[str, Any] = {}
    for name, rule in rules.items():
        if name not in data:
            continue
        value = data[name]
        if isinstance(value, str):
            if rule.trim or rule.lowercase:
                value = value.strip()
            if rule.lowercase:
                value = value.lower()
        cleaned[name] = value
    return cleaned


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _check(name: str, value: Any, rule: FieldRule) -> Optional[FieldError]:
    if rule.kind is not None:
        # bool is a subclass of int; never accept True as a price.
        if rule.kind is float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return FieldError(name, rule.kind_message)
            if not math.isfinite(value):
                return FieldError(name, rule.kind_message)
        elif not isinstance(value, rule.kind):
            return FieldError(name, rule.kind_message)

    if isinstance(value, str):
        if rule.min_length is not None and len(value) < rule.min_length:
            return FieldError(name, rule.min_length_message or f"Must be at least {rule.min_length} characters")
        if rule.max_length is not None and len(value) > rule.max_length:
            return FieldError(name, rule.max_length_message or f"Cannot exceed {rule.max_length} characters")
        if rule.pattern is not None and re.match(rule.pattern, value) is None:
            return FieldError(name, rule.pattern_message)

    if rule.choices and value not in rule.choices:
        return FieldError(name, rule.choices_message)

    if rule.minimum is not None and isinstance(value, (int, float)) and value < rule.minimum:
        return FieldError(name, rule.minimum_message or f"Cannot be less than {rule.minimum}")

    return None


def validate(
    data: Mapping[str, Any],
    rules: Mapping[str, FieldRule],
    partial: bool = False,
) -> ValidationResult:
    """Check data against rules and collect at most one error per field.

    partial=True validates only the fields present in data (used for
    partial updates): required-ness is skipped, but a field that is present
    and empty still fails its required rule.
    """
    result = ValidationResult()
    for name, rule in rules.items():
        present = name in data
        if partial and not present:
            continue
        value = data.get(name)
        if _is_missing(value):
            if rule.required:
                result.errors.append(FieldError(name, rule.required_message))
            continue
        error = _check(name, value, rule)
        if error is not None:
            result.errors.append(error)
    return result
