"""fieldrules - declarative field validation for Python records.

Rules are attached to dataclass or pydantic fields as ``name:parameter``
annotations (``len``, ``in``, ``min``, ``max``) and checked at runtime. Every
violation in a record is reported together.
"""

__version__ = "0.1.0"
__description__ = "Declarative field validation for dataclasses and pydantic models"

from fieldrules.config import FieldRulesConfig, load_config
from fieldrules.engine import ValidationReport, Validator, check, validate
from fieldrules.errors import (
    FieldRulesError,
    FieldValidationError,
    NotARecordError,
    RecordValidationError,
    UnexportedFieldError,
    Violation,
    ViolationKind,
)
from fieldrules.fields import rule

__all__ = [
    "__version__",
    "__description__",
    "FieldRulesConfig",
    "load_config",
    "ValidationReport",
    "Validator",
    "check",
    "validate",
    "rule",
    "FieldRulesError",
    "FieldValidationError",
    "NotARecordError",
    "RecordValidationError",
    "UnexportedFieldError",
    "Violation",
    "ViolationKind",
]
