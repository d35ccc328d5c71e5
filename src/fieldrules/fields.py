"""Record introspection.

A record is a dataclass instance or a pydantic model instance. Rule
annotations are read from field metadata or from a sidecar mapping of
field name to annotation supplied next to the record.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .errors import NotARecordError, UnexportedFieldError

DEFAULT_TAG_KEY = "validate"


@dataclass(frozen=True)
class FieldSpec:
    """A record field as seen by the dispatcher."""
    name: str
    value: Any
    annotation: str | None = None

    @property
    def exported(self) -> bool:
        return is_exported(self.name)


def is_exported(name: str) -> bool:
    """Fields with a leading underscore are private to the record."""
    return not name.startswith("_")


def is_record(value: object) -> bool:
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or isinstance(value, BaseModel)


def rule(annotation: str, *, tag_key: str = DEFAULT_TAG_KEY, **field_kwargs):
    """Declare a dataclass field carrying a rule annotation.

    Usage::

        @dataclass
        class User:
            name: str = rule("min:3")
            role: str = rule("in:admin,user", default="user")
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[tag_key] = annotation
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _dataclass_fields(record, tag_key: str) -> list[FieldSpec]:
    return [
        FieldSpec(f.name, getattr(record, f.name), f.metadata.get(tag_key))
        for f in dataclasses.fields(record)
    ]


def _model_fields(record: BaseModel, tag_key: str) -> list[FieldSpec]:
    specs = []
    for name, info in type(record).model_fields.items():
        extra = info.json_schema_extra
        annotation = extra.get(tag_key) if isinstance(extra, dict) else None
        specs.append(FieldSpec(name, getattr(record, name), annotation))
    return specs


def inspect_record(
    record: object,
    rules: Mapping[str, str] | None = None,
    tag_key: str = DEFAULT_TAG_KEY,
) -> list[FieldSpec]:
    """List the fields of a record with their effective annotations.

    Args:
        record: Dataclass or pydantic model instance
        rules: Optional sidecar annotations keyed by field name; these take
               precedence over field metadata
        tag_key: Metadata key holding the annotation

    Returns:
        Field specs in declaration order

    Raises:
        NotARecordError: If ``record`` is not a record instance
        UnexportedFieldError: If an annotation targets a field the engine
                              may not read
    """
    if not is_record(record):
        raise NotARecordError(record)

    if isinstance(record, BaseModel):
        specs = _model_fields(record, tag_key)
    else:
        specs = _dataclass_fields(record, tag_key)

    if rules:
        readable = {spec.name for spec in specs if spec.exported}
        for name in rules:
            if name not in readable:
                raise UnexportedFieldError(name)
        specs = [
            dataclasses.replace(spec, annotation=rules.get(spec.name, spec.annotation))
            for spec in specs
        ]

    for spec in specs:
        if spec.annotation and not spec.exported:
            raise UnexportedFieldError(spec.name)

    return specs
