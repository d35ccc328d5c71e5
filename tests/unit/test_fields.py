"""Tests for record introspection."""

import dataclasses
from dataclasses import dataclass

import pytest
from pydantic import BaseModel, Field, PrivateAttr

from fieldrules.errors import NotARecordError, UnexportedFieldError
from fieldrules.fields import FieldSpec, inspect_record, is_record, rule


@dataclass
class Token:
    value: str = rule("len:8")
    scopes: list[str] = rule("in:read,write", default_factory=list)
    issuer: str = "local"
    _cache: str = ""


class Product(BaseModel):
    sku: str = Field(json_schema_extra={"validate": "len:6"})
    price: int = 0
    _internal: str = PrivateAttr(default="")


class TestIsRecord:
    def test_instances(self):
        assert is_record(Token(value="x"))
        assert is_record(Product(sku="abc"))

    @pytest.mark.parametrize("value", [None, Token, Product, {"a": 1}, (1, 2), "text"])
    def test_non_records(self, value):
        assert not is_record(value)


class TestRuleHelper:
    def test_metadata_is_set(self):
        f = dataclasses.fields(Token)[0]
        assert f.metadata["validate"] == "len:8"

    def test_keeps_extra_metadata(self):
        f = rule("min:1", metadata={"doc": "count"}, default=1)
        assert dict(f.metadata) == {"doc": "count", "validate": "min:1"}
        assert f.default == 1

    def test_custom_tag_key(self):
        f = rule("min:1", tag_key="check")
        assert dict(f.metadata) == {"check": "min:1"}


class TestInspectRecord:
    def test_dataclass_fields_in_order(self):
        specs = inspect_record(Token(value="abc", scopes=["read"]))
        assert specs == [
            FieldSpec("value", "abc", "len:8"),
            FieldSpec("scopes", ["read"], "in:read,write"),
            FieldSpec("issuer", "local", None),
            FieldSpec("_cache", "", None),
        ]

    def test_private_field_without_rule_is_fine(self):
        specs = inspect_record(Token(value="abc"))
        assert not specs[-1].exported

    def test_pydantic_fields(self):
        specs = inspect_record(Product(sku="abc123", price=5))
        assert [(s.name, s.value, s.annotation) for s in specs] == [
            ("sku", "abc123", "len:6"),
            ("price", 5, None),
        ]

    def test_sidecar_overrides(self):
        specs = inspect_record(Product(sku="abc123"), rules={"price": "min:1", "sku": "len:3"})
        assert [s.annotation for s in specs] == ["len:3", "min:1"]

    def test_sidecar_private_attribute_is_fatal(self):
        with pytest.raises(UnexportedFieldError):
            inspect_record(Product(sku="abc123"), rules={"_internal": "len:1"})

    def test_sidecar_private_dataclass_field_is_fatal(self):
        with pytest.raises(UnexportedFieldError) as exc_info:
            inspect_record(Token(value="abc"), rules={"_cache": "len:1"})
        assert exc_info.value.field == "_cache"

    def test_not_a_record(self):
        with pytest.raises(NotARecordError):
            inspect_record(object())
