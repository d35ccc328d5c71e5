"""Rule dispatcher: walks a record's fields and runs their rules."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .config import FieldRulesConfig
from .errors import RecordValidationError, Violation
from .fields import inspect_record
from .rules import RuleChecker

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Violations collected while checking one record."""
    record_type: str
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = valid, 1 = violations."""
        return 0 if self.ok else 1

    def to_error(self) -> RecordValidationError | None:
        """Combine the violations into one error, or None when valid."""
        if self.ok:
            return None
        return RecordValidationError(self.violations)

    def raise_for_violations(self) -> None:
        error = self.to_error()
        if error is not None:
            raise error

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "record": self.record_type,
            "valid": self.ok,
            "violations": [v.to_dict() for v in self.violations],
        }


class Validator:
    """Validates records against their field rule annotations.

    Holds configuration only; every call works on its own accumulator.
    """

    def __init__(self, config: FieldRulesConfig | None = None):
        self.config = config or FieldRulesConfig()

    def check(self, record: object, rules: Mapping[str, str] | None = None) -> ValidationReport:
        """Run every annotated field's rule and report the violations.

        Args:
            record: Dataclass or pydantic model instance
            rules: Optional sidecar annotations keyed by field name

        Returns:
            ValidationReport, empty when the record is valid

        Raises:
            NotARecordError: If ``record`` is not a record
            UnexportedFieldError: If a rule targets an unexported field
        """
        specs = inspect_record(record, rules, tag_key=self.config.tag_key)
        checker = RuleChecker(self.config)
        record_type = type(record).__name__

        for spec in specs:
            if not spec.annotation:
                continue
            logger.debug(f"{record_type}.{spec.name} = {spec.value!r} [{spec.annotation}]")
            checker.check(spec.annotation, spec.name, spec.value)

        report = ValidationReport(record_type=record_type, violations=checker.violations)
        logger.info(f"Validated {record_type}: {len(report.violations)} violation(s)")
        return report

    def validate(self, record: object, rules: Mapping[str, str] | None = None) -> None:
        """Raise RecordValidationError if the record has any violation."""
        self.check(record, rules).raise_for_violations()


def check(
    record: object,
    rules: Mapping[str, str] | None = None,
    config: FieldRulesConfig | None = None,
) -> ValidationReport:
    return Validator(config).check(record, rules)


def validate(
    record: object,
    rules: Mapping[str, str] | None = None,
    config: FieldRulesConfig | None = None,
) -> None:
    """Validate a record, raising on fatal errors and on violations.

    Raises:
        NotARecordError: If ``record`` is not a record
        UnexportedFieldError: If a rule targets an unexported field
        RecordValidationError: If any field violates its rule
    """
    Validator(config).validate(record, rules)
