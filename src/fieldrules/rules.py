"""Rule parsing and the per-call rule checker.

A rule annotation has the form ``name:parameter``. Every handler first
parses its parameter (syntax step) and then applies its semantic check to
the field value, walking sequences element by element.
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .config import FieldRulesConfig, LengthUnit, UnknownRulePolicy
from .errors import Violation, ViolationKind

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")


class RuleName(str, Enum):
    """Rule names as written in annotations."""
    LENGTH = "len"
    MEMBERSHIP = "in"
    MINIMUM = "min"
    MAXIMUM = "max"


_RULE_NAMES = frozenset(r.value for r in RuleName)


@dataclass(frozen=True)
class Rule:
    """A parsed annotation: rule name plus its raw parameter."""
    name: str
    parameter: str | None

    @classmethod
    def parse_annotation(cls, annotation: str) -> "Rule":
        """Split an annotation on its first ``:``.

        ``parameter`` is None when the annotation has no ``:`` at all.
        """
        name, sep, parameter = annotation.partition(":")
        return cls(name=name, parameter=parameter if sep else None)

    @property
    def known(self) -> bool:
        return self.name in _RULE_NAMES


class RuleSyntaxError(ValueError):
    """Raised by the parameter parsers; turned into a syntax violation."""


def parse_int(text: str) -> int:
    """Parse a strict decimal integer (optional sign, ASCII digits only)."""
    if not _INT_RE.fullmatch(text):
        raise RuleSyntaxError(f"not an integer: {text!r}")
    return int(text)


def parse_length(parameter: str) -> int:
    length = parse_int(parameter)
    if length < 0:
        raise RuleSyntaxError(f"length must be non-negative: {length}")
    return length


def parse_bound(parameter: str) -> int:
    return parse_int(parameter)


def parse_str_members(parameter: str) -> list[str]:
    if not parameter:
        raise RuleSyntaxError("empty membership list")
    return parameter.split(",")


def parse_int_members(parameter: str, strict: bool = False) -> list[int]:
    """Parse a comma separated integer list.

    Entries that are not integers count as 0 unless ``strict`` is set.
    """
    members = []
    for entry in parse_str_members(parameter):
        try:
            members.append(parse_int(entry))
        except RuleSyntaxError:
            if strict:
                raise
            members.append(0)
    return members


def iter_scalars(value) -> Iterator[str | int]:
    """Yield the string and integer leaves of a value, flattening sequences."""
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_scalars(item)
    elif isinstance(value, str):
        yield value
    elif isinstance(value, int) and not isinstance(value, bool):
        yield value


class RuleChecker:
    """Applies rules to field values and accumulates violations.

    One instance belongs to exactly one validation call.
    """

    def __init__(self, config: FieldRulesConfig | None = None):
        self.config = config or FieldRulesConfig()
        self.violations: list[Violation] = []
        self._handlers = {
            RuleName.LENGTH.value: self.check_length,
            RuleName.MEMBERSHIP.value: self.check_membership,
            RuleName.MINIMUM.value: self.check_minimum,
            RuleName.MAXIMUM.value: self.check_maximum,
        }

    def add(self, field: str, kind: ViolationKind) -> None:
        logger.debug(f"{field}: {kind.description}")
        self.violations.append(Violation(field, kind))

    def check(self, annotation: str, field: str, value) -> None:
        """Dispatch one field annotation to its rule handler."""
        rule = Rule.parse_annotation(annotation)

        # Any annotation without a parameter is malformed, known name or not
        if rule.parameter is None:
            self.add(field, ViolationKind.SYNTAX)
            return

        if not rule.known:
            self._unknown_rule(rule, field)
            return

        self._handlers[rule.name](rule.parameter, field, value)

    def _unknown_rule(self, rule: Rule, field: str) -> None:
        policy = self.config.unknown_rules
        if policy == UnknownRulePolicy.ERROR:
            self.add(field, ViolationKind.SYNTAX)
        elif policy == UnknownRulePolicy.WARN:
            logger.warning(f"Unknown rule '{rule.name}' on field {field} skipped")
        else:
            logger.debug(f"Unknown rule '{rule.name}' on field {field} skipped")

    def _measure(self, text: str) -> int:
        if self.config.length_unit == LengthUnit.BYTES:
            return len(text.encode("utf-8"))
        return len(text)

    def _parsed(self, parser, parameter: str, field: str):
        try:
            return parser(parameter)
        except RuleSyntaxError as e:
            logger.debug(f"Syntax error in rule for {field}: {e}")
            self.add(field, ViolationKind.SYNTAX)
            return None

    def check_length(self, parameter: str, field: str, value) -> None:
        length = self._parsed(parse_length, parameter, field)
        if length is None:
            return
        for item in iter_scalars(value):
            if isinstance(item, str) and self._measure(item) != length:
                self.add(field, ViolationKind.LENGTH)

    def check_minimum(self, parameter: str, field: str, value) -> None:
        bound = self._parsed(parse_bound, parameter, field)
        if bound is None:
            return
        for item in iter_scalars(value):
            measured = self._measure(item) if isinstance(item, str) else item
            if measured < bound:
                self.add(field, ViolationKind.MINIMUM)

    def check_maximum(self, parameter: str, field: str, value) -> None:
        bound = self._parsed(parse_bound, parameter, field)
        if bound is None:
            return
        for item in iter_scalars(value):
            measured = self._measure(item) if isinstance(item, str) else item
            if measured > bound:
                self.add(field, ViolationKind.MAXIMUM)

    def check_membership(self, parameter: str, field: str, value) -> None:
        # Members are parsed once the first string or integer value shows up
        members = None
        int_members = None
        for item in iter_scalars(value):
            if isinstance(item, str):
                if members is None:
                    members = self._parsed(parse_str_members, parameter, field)
                    if members is None:
                        return
                if item not in members:
                    self.add(field, ViolationKind.MEMBERSHIP)
                continue

            if int_members is None:
                int_members = self._parsed(
                    lambda p: parse_int_members(p, strict=self.config.strict_membership),
                    parameter,
                    field,
                )
                if int_members is None:
                    return
            if item not in int_members:
                self.add(field, ViolationKind.MEMBERSHIP)
