"""Tests for violations and the composite error."""

from dataclasses import FrozenInstanceError

import pytest

from fieldrules.errors import (
    FieldRulesError,
    FieldValidationError,
    NotARecordError,
    RecordValidationError,
    UnexportedFieldError,
    Violation,
    ViolationKind,
)


class TestViolation:
    """Test Violation class."""

    def test_string_representation(self):
        assert str(Violation("Name", ViolationKind.SYNTAX)) == "Name: invalid validator syntax"
        assert str(Violation("Age", ViolationKind.MINIMUM)) == "Age: min validation failed"

    def test_immutable(self):
        violation = Violation("Name", ViolationKind.LENGTH)
        with pytest.raises(FrozenInstanceError):
            violation.field = "Other"

    def test_to_exception(self):
        error = Violation("Role", ViolationKind.MEMBERSHIP).to_exception()
        assert isinstance(error, FieldValidationError)
        assert error.field == "Role"
        assert error.kind == ViolationKind.MEMBERSHIP
        assert str(error) == "Role: in validation failed"


class TestRecordValidationError:
    """Test the aggregate error."""

    @pytest.fixture
    def error(self):
        return RecordValidationError([
            Violation("Code", ViolationKind.LENGTH),
            Violation("Age", ViolationKind.MAXIMUM),
            Violation("Code", ViolationKind.LENGTH),
        ])

    def test_message_joins_lines(self, error):
        assert str(error) == (
            "Code: len validation failed\n"
            "Age: max validation failed\n"
            "Code: len validation failed"
        )

    def test_unwrap_preserves_order(self, error):
        unwrapped = error.unwrap()
        assert [(e.field, e.kind) for e in unwrapped] == [
            ("Code", ViolationKind.LENGTH),
            ("Age", ViolationKind.MAXIMUM),
            ("Code", ViolationKind.LENGTH),
        ]

    def test_kind_queries(self, error):
        assert error.kinds() == [ViolationKind.LENGTH, ViolationKind.MAXIMUM, ViolationKind.LENGTH]
        assert error.is_kind("maximum")
        assert not error.is_kind(ViolationKind.SYNTAX)
        assert len(error.for_field("Code")) == 2

    def test_hierarchy(self, error):
        assert isinstance(error, FieldRulesError)
        assert isinstance(error, ValueError)
        assert isinstance(NotARecordError(None), TypeError)
        assert isinstance(UnexportedFieldError("_x"), FieldRulesError)
