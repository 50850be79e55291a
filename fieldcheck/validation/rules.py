"""Rule Constructors

Thin factories for RuleStep values. Every constructor takes an optional
`message` keyword that replaces the default message key of its kind.

    from fieldcheck.validation import rules, FAIL_FAST

    FieldRule.of("age", rules.required(), FAIL_FAST, rules.min_value(18), rules.max_value(120))
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from .schema import FAIL_FAST, RuleKind, RuleStep


def _step(kind: RuleKind, message: str | None, **params: Any) -> RuleStep:
    return RuleStep(kind, {k: v for k, v in params.items() if v is not None}, message)


# Presence

def required(*, message: str | None = None) -> RuleStep:
    return _step(RuleKind.REQUIRED, message)


def required_if(field: str, value: Any, *, message: str | None = None) -> RuleStep:
    """Required when sibling `field` stringifies to `value`."""
    return _step(RuleKind.REQUIRED_IF, message, field=field, value=value)


def required_unless(field: str, value: Any, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.REQUIRED_UNLESS, message, field=field, value=value)


def required_with(*fields: str, message: str | None = None) -> RuleStep:
    """Required when any of `fields` is present."""
    return _step(RuleKind.REQUIRED_WITH, message, fields=fields)


def required_without(*fields: str, message: str | None = None) -> RuleStep:
    """Required when all of `fields` are absent."""
    return _step(RuleKind.REQUIRED_WITHOUT, message, fields=fields)


# String / format

def email(*, message: str | None = None) -> RuleStep: return _step(RuleKind.EMAIL, message)


def url(*, message: str | None = None) -> RuleStep: return _step(RuleKind.URL, message)


def uuid(*, message: str | None = None) -> RuleStep: return _step(RuleKind.UUID, message)


def length(min: int, max: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.LENGTH, message, min=min, max=max)


def min_length(min: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MIN_LENGTH, message, min=min)


def max_length(max: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MAX_LENGTH, message, max=max)


def pattern(regex: str, *, flags: int = 0, message: str | None = None) -> RuleStep:
    """Full-match `regex`. Checked for catastrophic backtracking at compile time."""
    return _step(RuleKind.PATTERN, message, regex=regex, flags=flags)


def alpha(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ALPHA, message)


def alphanumeric(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ALPHANUMERIC, message)


def ascii(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ASCII, message)


def lowercase(*, message: str | None = None) -> RuleStep: return _step(RuleKind.LOWERCASE, message)


def uppercase(*, message: str | None = None) -> RuleStep: return _step(RuleKind.UPPERCASE, message)


def starts_with(value: str, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.STARTS_WITH, message, value=value)


def ends_with(value: str, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.ENDS_WITH, message, value=value)


def contains(value: str, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.CONTAINS, message, value=value)


def one_of(*values: Any, message: str | None = None) -> RuleStep:
    return _step(RuleKind.ONE_OF, message, values=tuple(str(v) for v in values))


def not_one_of(*values: Any, message: str | None = None) -> RuleStep:
    return _step(RuleKind.NOT_ONE_OF, message, values=tuple(str(v) for v in values))


def enum(enum_type: type[Enum], *, message: str | None = None) -> RuleStep:
    """Value must be a member of `enum_type` or the name of one."""
    return _step(RuleKind.ENUM, message, enum=enum_type)


def json(*, message: str | None = None) -> RuleStep: return _step(RuleKind.JSON, message)


def luhn(*, message: str | None = None) -> RuleStep: return _step(RuleKind.LUHN, message)


def credit_card(*, message: str | None = None) -> RuleStep: return _step(RuleKind.CREDIT_CARD, message)


# Numeric

def min_value(value: int | float, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MIN, message, value=value)


def max_value(value: int | float, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MAX, message, value=value)


def between(min: int | float, max: int | float, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.BETWEEN, message, min=min, max=max)


def positive(*, message: str | None = None) -> RuleStep: return _step(RuleKind.POSITIVE, message)


def negative(*, message: str | None = None) -> RuleStep: return _step(RuleKind.NEGATIVE, message)


def zero(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ZERO, message)


def integer(*, message: str | None = None) -> RuleStep: return _step(RuleKind.INTEGER, message)


def decimal(*, message: str | None = None) -> RuleStep: return _step(RuleKind.DECIMAL, message)


def divisible_by(divisor: int | float, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.DIVISIBLE_BY, message, divisor=divisor)


def even(*, message: str | None = None) -> RuleStep: return _step(RuleKind.EVEN, message)


def odd(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ODD, message)


def decimal_places(places: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.DECIMAL_PLACES, message, places=places)


# Boolean

def accepted(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ACCEPTED, message)


# Collection

def size(min: int, max: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.SIZE, message, min=min, max=max)


def min_size(min: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MIN_SIZE, message, min=min)


def max_size(max: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MAX_SIZE, message, max=max)


def not_empty(*, message: str | None = None) -> RuleStep: return _step(RuleKind.NOT_EMPTY, message)


def distinct(*, message: str | None = None) -> RuleStep: return _step(RuleKind.DISTINCT, message)


def contains_value(value: Any, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.CONTAINS_VALUE, message, value=str(value))


def not_contains(value: Any, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.NOT_CONTAINS, message, value=str(value))


# Date / time

def date_format(format: str, *, message: str | None = None) -> RuleStep:
    """String must parse with `datetime.strptime(value, format)`."""
    return _step(RuleKind.DATE_FORMAT, message, format=format)


def iso_date(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ISO_DATE, message)


def iso_datetime(*, message: str | None = None) -> RuleStep: return _step(RuleKind.ISO_DATETIME, message)


def future(*, message: str | None = None) -> RuleStep: return _step(RuleKind.FUTURE, message)


def past(*, message: str | None = None) -> RuleStep: return _step(RuleKind.PAST, message)


def today(*, message: str | None = None) -> RuleStep: return _step(RuleKind.TODAY, message)


# Network

def ipv4(*, message: str | None = None) -> RuleStep: return _step(RuleKind.IPV4, message)


def ipv6(*, message: str | None = None) -> RuleStep: return _step(RuleKind.IPV6, message)


def ip(*, message: str | None = None) -> RuleStep: return _step(RuleKind.IP, message)


def mac_address(*, message: str | None = None) -> RuleStep: return _step(RuleKind.MAC_ADDRESS, message)


def port(*, message: str | None = None) -> RuleStep: return _step(RuleKind.PORT, message)


# File

def mime_type(*values: str, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MIME_TYPE, message, values=values)


def file_extension(*values: str, message: str | None = None) -> RuleStep:
    return _step(RuleKind.FILE_EXTENSION, message, values=values)


def max_file_size(bytes: int, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.MAX_FILE_SIZE, message, bytes=bytes)


# Cross-field

def same(field: str, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.SAME, message, field=field)


def different(field: str, *, message: str | None = None) -> RuleStep:
    return _step(RuleKind.DIFFERENT, message, field=field)


# Extension point

def custom(name: str, *, message: str | None = None, **params: Any) -> RuleStep:
    """Predicate registered under `name` in the validator's PredicateRegistry."""
    return _step(RuleKind.CUSTOM, message, name=name, **params)

