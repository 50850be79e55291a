"""Schema Model

Immutable description of what to validate:
- Schema: one per validated type, an ordered tuple of FieldRules
- FieldRule: one field's ordered rule chain plus its fail-fast checkpoints
- RuleStep: a rule kind, its parameters and an optional message key
- NestedSpec: marks a field whose value (or each element) is validated
  against another schema

A checkpoint is a step count: checkpoint `c` means "if any of the first `c`
steps failed, stop before running step `c`". A checkpoint equal to the chain
length is legal and has no observable effect, as does checkpoint 0.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from fieldcheck.errors import ErrorCode, SchemaError, SchemaProblem


class RuleKind(str, Enum):
    """Rule kind tags, grouped by the value type they apply to."""
    # Presence
    REQUIRED = "required"
    REQUIRED_IF = "required_if"
    REQUIRED_UNLESS = "required_unless"
    REQUIRED_WITH = "required_with"
    REQUIRED_WITHOUT = "required_without"

    # String / format
    EMAIL = "email"
    URL = "url"
    UUID = "uuid"
    LENGTH = "length"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    PATTERN = "pattern"
    ALPHA = "alpha"
    ALPHANUMERIC = "alphanumeric"
    ASCII = "ascii"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    ONE_OF = "one_of"
    NOT_ONE_OF = "not_one_of"
    ENUM = "enum"
    JSON = "json"
    LUHN = "luhn"
    CREDIT_CARD = "credit_card"

    # Numeric
    MIN = "min"
    MAX = "max"
    BETWEEN = "between"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    ZERO = "zero"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DIVISIBLE_BY = "divisible_by"
    EVEN = "even"
    ODD = "odd"
    DECIMAL_PLACES = "decimal_places"

    # Boolean
    ACCEPTED = "accepted"

    # Collection
    SIZE = "size"
    MIN_SIZE = "min_size"
    MAX_SIZE = "max_size"
    NOT_EMPTY = "not_empty"
    DISTINCT = "distinct"
    CONTAINS_VALUE = "contains_value"
    NOT_CONTAINS = "not_contains"

    # Date / time
    DATE_FORMAT = "date_format"
    ISO_DATE = "iso_date"
    ISO_DATETIME = "iso_datetime"
    FUTURE = "future"
    PAST = "past"
    TODAY = "today"

    # Network
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    IP = "ip"
    MAC_ADDRESS = "mac_address"
    PORT = "port"

    # File
    MIME_TYPE = "mime_type"
    FILE_EXTENSION = "file_extension"
    MAX_FILE_SIZE = "max_file_size"

    # Cross-field
    SAME = "same"
    DIFFERENT = "different"

    # Extension point
    CUSTOM = "custom"

    @property
    def message_key(self) -> str:
        """Default message key, e.g. MIN_LENGTH -> "field.minlength"."""
        return f"field.{self.value.replace('_', '')}"

    @property
    def is_presence(self) -> bool:
        """Presence rules are the only ones evaluated against a None value."""
        return self in _PRESENCE

    @property
    def sibling_fields(self) -> tuple[str, ...]:
        """Parameter names that hold references to sibling fields."""
        return _SIBLING_PARAMS.get(self, ())


_PRESENCE = frozenset({
    RuleKind.REQUIRED, RuleKind.REQUIRED_IF, RuleKind.REQUIRED_UNLESS,
    RuleKind.REQUIRED_WITH, RuleKind.REQUIRED_WITHOUT,
})

_SIBLING_PARAMS: dict[RuleKind, tuple[str, ...]] = {
    RuleKind.SAME: ("field",),
    RuleKind.DIFFERENT: ("field",),
    RuleKind.REQUIRED_IF: ("field",),
    RuleKind.REQUIRED_UNLESS: ("field",),
    RuleKind.REQUIRED_WITH: ("fields",),
    RuleKind.REQUIRED_WITHOUT: ("fields",),
}


@dataclass(frozen=True, slots=True)
class RuleStep:
    """One rule in a field's chain."""
    kind: RuleKind
    params: Mapping[str, Any] = field(default_factory=dict)
    message: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "kind", RuleKind(self.kind))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def message_key(self) -> str:
        return self.message or self.kind.message_key

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.params.items())
        return f"{self.kind.value}({args})"


@dataclass(frozen=True, slots=True)
class NestedSpec:
    """Nested validation marker.

    `each` selects element-wise validation of a collection. `schema` names the
    nested schema; when None the nested value's type selects the plan.
    """
    each: bool = False
    schema: str | None = None


@dataclass(frozen=True, slots=True)
class FieldRule:
    """A field's ordered rule chain, checkpoints and nested marker."""
    name: str
    steps: tuple[RuleStep, ...] = ()
    checkpoints: frozenset[int] = frozenset()
    nullable: bool = True
    nested: NestedSpec | None = None

    def __post_init__(self):
        if not self.name:
            raise SchemaError([SchemaProblem(ErrorCode.E2100_SCHEMA_GENERIC, "field name must not be empty")])
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "checkpoints", frozenset(self.checkpoints))
        bad = sorted(c for c in self.checkpoints if not 0 <= c <= len(self.steps))
        if bad:
            raise SchemaError([SchemaProblem(
                ErrorCode.E2107_INVALID_CHECKPOINT,
                f"checkpoint(s) {bad} outside 0..{len(self.steps)}",
                field=self.name,
            )])

    @classmethod
    def of(cls, name: str, *items: RuleStep | _FailFast, nullable: bool = True,
           nested: NestedSpec | None = None) -> FieldRule:
        """Build from a rule list where FAIL_FAST marks a checkpoint in place."""
        steps: list[RuleStep] = []
        checkpoints: set[int] = set()
        for item in items:
            if item is FAIL_FAST:
                checkpoints.add(len(steps))
            elif isinstance(item, RuleStep):
                steps.append(item)
            else:
                raise TypeError(f"expected RuleStep or FAIL_FAST, got {type(item).__name__}")
        return cls(name, tuple(steps), frozenset(checkpoints), nullable, nested)

    @property
    def has_presence_step(self) -> bool:
        return any(step.kind.is_presence for step in self.steps)


class _FailFast:
    __slots__ = ()

    def __repr__(self) -> str: return "FAIL_FAST"


FAIL_FAST = _FailFast()


@dataclass(frozen=True, slots=True)
class Schema:
    """Validation schema for one type.

    Built once, shared freely across concurrent calls.
    """
    name: str
    fields: tuple[FieldRule, ...] = ()
    target: type | None = None

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        seen: set[str] = set()
        duplicates = [f.name for f in self.fields if f.name in seen or seen.add(f.name)]
        if duplicates:
            raise SchemaError([
                SchemaProblem(ErrorCode.E2106_DUPLICATE_FIELD, "duplicate field name", schema=self.name, field=name)
                for name in dict.fromkeys(duplicates)
            ])

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def field(self, name: str) -> FieldRule:
        for rule in self.fields:
            if rule.name == name:
                return rule
        raise KeyError(name)

    @classmethod
    def builder(cls, name: str, target: type | None = None) -> SchemaBuilder:
        return SchemaBuilder(name, target)


class SchemaBuilder:
    """Fluent schema construction.

        schema = (
            Schema.builder("User", target=User)
            .field("email", rules.required(), FAIL_FAST, rules.email())
            .nested("address", schema="Address")
            .each("phones", rules.not_empty())
            .build()
        )
    """

    def __init__(self, name: str, target: type | None = None):
        self._name = name
        self._target = target
        self._fields: list[FieldRule] = []

    def field(self, name: str, *items: RuleStep | _FailFast, nullable: bool = True) -> SchemaBuilder:
        self._fields.append(FieldRule.of(name, *items, nullable=nullable))
        return self

    def nested(self, name: str, *items: RuleStep | _FailFast, schema: str | None = None,
               nullable: bool = True) -> SchemaBuilder:
        """Field whose value is itself validated against `schema`."""
        self._fields.append(FieldRule.of(name, *items, nullable=nullable, nested=NestedSpec(False, schema)))
        return self

    def each(self, name: str, *items: RuleStep | _FailFast, schema: str | None = None,
             nullable: bool = True) -> SchemaBuilder:
        """Collection field whose elements are each validated against `schema`."""
        self._fields.append(FieldRule.of(name, *items, nullable=nullable, nested=NestedSpec(True, schema)))
        return self

    def add(self, rule: FieldRule) -> SchemaBuilder:
        self._fields.append(rule)
        return self

    def extend(self, rules: Iterable[FieldRule]) -> SchemaBuilder:
        self._fields.extend(rules)
        return self

    def build(self) -> Schema:
        return Schema(self._name, tuple(self._fields), self._target)
