"""Violation kinds and the errors raised by fieldrules.

Two severities exist. Fatal errors (``NotARecordError``,
``UnexportedFieldError``) abort a call before any field is checked.
Violations are collected per field and surface together as one
``RecordValidationError``.
"""

from dataclasses import dataclass
from enum import Enum


class ViolationKind(str, Enum):
    """Failure kinds a single field can produce."""
    SYNTAX = "syntax"
    LENGTH = "length"
    MEMBERSHIP = "membership"
    MAXIMUM = "maximum"
    MINIMUM = "minimum"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ViolationKind.SYNTAX: "invalid validator syntax",
    ViolationKind.LENGTH: "len validation failed",
    ViolationKind.MEMBERSHIP: "in validation failed",
    ViolationKind.MAXIMUM: "max validation failed",
    ViolationKind.MINIMUM: "min validation failed",
}


@dataclass(frozen=True)
class Violation:
    """One recorded failure tied to a field name."""
    field: str
    kind: ViolationKind

    def __str__(self) -> str:
        return f"{self.field}: {self.kind.description}"

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "kind": self.kind.value,
            "message": self.kind.description,
        }

    def to_exception(self) -> "FieldValidationError":
        return FieldValidationError(self)


class FieldRulesError(Exception):
    """Base class for every error raised by fieldrules."""


class NotARecordError(FieldRulesError, TypeError):
    """Raised when the value handed to the engine is not a record."""

    def __init__(self, value: object = None):
        self.value = value
        super().__init__("wrong argument given, should be a record")


class UnexportedFieldError(FieldRulesError):
    """Raised when a rule targets a field the engine may not read."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"validation for unexported field is not allowed: {field}")


class FieldValidationError(FieldRulesError, ValueError):
    """A single violation in exception form."""

    def __init__(self, violation: Violation):
        self.violation = violation
        super().__init__(str(violation))

    @property
    def field(self) -> str:
        return self.violation.field

    @property
    def kind(self) -> ViolationKind:
        return self.violation.kind


class RecordValidationError(FieldRulesError, ValueError):
    """Composite error carrying every violation found in one record."""

    def __init__(self, violations):
        self.violations = tuple(violations)
        super().__init__("\n".join(str(v) for v in self.violations))

    def __len__(self) -> int:
        return len(self.violations)

    def unwrap(self) -> list[FieldValidationError]:
        """Recover the individual violations as exceptions."""
        return [v.to_exception() for v in self.violations]

    def kinds(self) -> list[ViolationKind]:
        return [v.kind for v in self.violations]

    def is_kind(self, kind: ViolationKind | str) -> bool:
        """Tell whether any wrapped violation has the given kind."""
        kind = ViolationKind(kind)
        return any(v.kind == kind for v in self.violations)

    def for_field(self, field: str) -> list[Violation]:
        return [v for v in self.violations if v.field == field]
