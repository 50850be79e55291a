"""Predicate Library

Built-in checks, one per RuleKind, plus the pydantic models that validate
their parameters at plan-compilation time.

Contract: predicate(value, inputs) -> Check, or an awaitable of Check for
predicates that touch the filesystem. Built-ins never raise for ordinary
input. A predicate that targets a value type (string, number, collection,
date) treats other types as not applicable and passes them. Booleans are
never numbers.

Formats with a real grammar (JSON, IP addresses, URLs, e-mail addresses,
Luhn numbers) are parsed structurally; regexes are kept for fixed-width
shapes only (UUID, MAC, ISO date/time) and are never run on inputs longer
than the configured input ceiling.
"""
from __future__ import annotations

import ipaddress
import math
import mimetypes
import os
import re
from collections.abc import Mapping as MappingABC, Sequence, Set
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from numbers import Real
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Self, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .jsonshape import is_valid_json
from .schema import RuleKind

if TYPE_CHECKING:
    from .context import ValidationContext

MAX_INPUT_LENGTH = 10_000

UUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")
MAC_RE = re.compile(r"(?:[0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}")
ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
ISO_DATETIME_RE = re.compile(
    r"([0-9]{4}-[0-9]{2}-[0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.[0-9]+)?(?:Z|[+-][0-9]{2}:[0-9]{2})?"
)

_EMAIL_LOCAL = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._%+-")
_EMAIL_DOMAIN = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-")
_ACCEPTED = frozenset({"1", "yes", "true", "on"})
_URL_SCHEMES = frozenset({"http", "https"})


# Parameter models

class RuleParams(BaseModel):
    """Base for rule parameters: immutable, unknown keys rejected."""
    model_config = ConfigDict(frozen=True, extra="forbid")


class NoParams(RuleParams):
    pass


class RangeParams(RuleParams):
    min: int = Field(0, ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> Self:
        if self.min > self.max: raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self


class MinParams(RuleParams):
    min: int = Field(ge=0)


class MaxParams(RuleParams):
    max: int = Field(ge=0)


class PatternParams(RuleParams):
    regex: str = Field(min_length=1)
    flags: int = 0


class TextParams(RuleParams):
    value: str = Field(min_length=1)


class ChoiceParams(RuleParams):
    values: tuple[str, ...] = Field(min_length=1)


class EnumParams(RuleParams):
    enum: type[Enum]


class BoundParams(RuleParams):
    value: int | float | Decimal

    @field_validator("value")
    @classmethod
    def _finite(cls, v):
        if not _is_finite(v): raise ValueError("bound must be a finite number")
        return v


class BetweenParams(RuleParams):
    min: int | float | Decimal
    max: int | float | Decimal

    @field_validator("min", "max")
    @classmethod
    def _finite(cls, v):
        if not _is_finite(v): raise ValueError("bound must be a finite number")
        return v

    @model_validator(mode="after")
    def _ordered(self) -> Self:
        if self.min > self.max: raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self


class DivisorParams(RuleParams):
    divisor: int | float | Decimal

    @field_validator("divisor")
    @classmethod
    def _non_zero(cls, v):
        if not _is_finite(v): raise ValueError("divisor must be a finite number")
        if v == 0: raise ValueError("divisor must not be zero")
        return v


class PlacesParams(RuleParams):
    places: int = Field(ge=0)


class ValueParams(RuleParams):
    value: str


class FormatParams(RuleParams):
    format: str = Field(min_length=1)


class ExtensionParams(RuleParams):
    values: tuple[str, ...] = Field(min_length=1)

    @field_validator("values")
    @classmethod
    def _strip_dots(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ext.lstrip(".") for ext in v)


class FileSizeParams(RuleParams):
    bytes: int = Field(gt=0)


class FieldRefParams(RuleParams):
    field: str = Field(min_length=1)


class ConditionParams(RuleParams):
    field: str = Field(min_length=1)
    value: Any = None


class FieldsParams(RuleParams):
    fields: tuple[str, ...] = Field(min_length=1)


class CustomParams(RuleParams):
    """Custom rule parameters; extra keys are handed to the predicate."""
    model_config = ConfigDict(frozen=True, extra="allow")
    name: str = Field(min_length=1)


# Results and inputs

@dataclass(frozen=True, slots=True)
class Check:
    """Outcome of one predicate evaluation.

    `args` feed message interpolation. `key` replaces the step's message key.
    `messages` are final texts that bypass the resolver.
    """
    is_valid: bool
    args: tuple[Any, ...] = ()
    key: str | None = None
    messages: tuple[str, ...] = ()

    @classmethod
    def valid(cls) -> Check: return _VALID

    @classmethod
    def invalid(cls, *args: Any, key: str | None = None) -> Check: return cls(False, args, key)

    @classmethod
    def literal(cls, *messages: str) -> Check: return cls(False, messages=messages)

    @classmethod
    def of(cls, ok: bool, *args: Any) -> Check: return _VALID if ok else cls(False, args)


_VALID = Check(True)


def read_field(obj: Any, name: str) -> Any:
    """Field value by key for mappings, by attribute otherwise; None when absent."""
    if isinstance(obj, MappingABC): return obj.get(name)
    return getattr(obj, name, None)


@dataclass(frozen=True, slots=True)
class PredicateInputs:
    """Everything a predicate may consult besides the value itself."""
    params: RuleParams
    parent: Any
    context: ValidationContext
    max_input_length: int = MAX_INPUT_LENGTH
    regex: re.Pattern | None = None

    def sibling(self, name: str) -> Any: return read_field(self.parent, name)


Predicate = Callable[[Any, PredicateInputs], Union[Check, Awaitable[Check]]]


# Value helpers

def _is_number(value: Any) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    if isinstance(value, Decimal): return value.is_finite()
    if isinstance(value, float): return math.isfinite(value)
    return True


def _is_nan(value: Any) -> bool:
    if isinstance(value, Decimal): return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _is_collection(value: Any) -> bool:
    return isinstance(value, (Sequence, Set, MappingABC)) and not isinstance(value, (str, bytes, bytearray))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: Any) -> str | None:
    """String form used by textual comparisons (one_of, required_if, ...)."""
    if value is None: return None
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, Enum): return _text(value.value)
    return str(value)


def _aligned(bound: Any, value: Any) -> Any:
    """Make `bound` arithmetic-compatible with `value`; Decimal mixes with neither float nor Fraction."""
    if isinstance(value, Decimal) and isinstance(bound, (float, Fraction)): return Decimal(str(float(bound)))
    if isinstance(bound, Decimal) and isinstance(value, float): return float(bound)
    if isinstance(bound, Decimal) and isinstance(value, Fraction): return Fraction(bound)
    return bound


def _exact(number: Any) -> Any:
    return Fraction(str(number)) if isinstance(number, float) else Fraction(number)


def _remainder(value: Any, divisor: Any) -> Any:
    """value % divisor, exact whenever a Decimal is involved."""
    if isinstance(value, Decimal) or isinstance(divisor, Decimal): return _exact(value) % _exact(divisor)
    return value % divisor


def _too_long(value: str, inputs: PredicateInputs, key: str = "field.too_long") -> Check | None:
    if len(value) > inputs.max_input_length: return Check.invalid(inputs.max_input_length, key=key)
    return None


def luhn_valid(digits: str) -> bool:
    total = 0
    for i, ch in enumerate(reversed(digits)):
        n = ord(ch) - 48
        if i % 2:
            n *= 2
            if n > 9: n -= 9
        total += n
    return total % 10 == 0


def _card_digits(value: str) -> str | None:
    digits = value.replace(" ", "").replace("-", "")
    if not digits or not (digits.isascii() and digits.isdigit()): return None
    return digits


def _known_card_range(digits: str) -> bool:
    n = len(digits)

    def prefix(k: int) -> int: return int(digits[:k])

    return any((
        digits.startswith("4") and n in (13, 16),  # Visa
        51 <= prefix(2) <= 55 and n == 16,  # Mastercard
        2221 <= prefix(4) <= 2720 and n == 16,
        digits[:2] in ("34", "37") and n == 15,  # Amex
        (digits.startswith("6011") or digits.startswith("65") or 644 <= prefix(3) <= 649) and n == 16,  # Discover
        622126 <= prefix(6) <= 622925 and n == 16,
        300 <= prefix(3) <= 305 and n == 14,  # Diners
        digits[:2] in ("36", "38") and n == 14,
        3528 <= prefix(4) <= 3589 and n == 16,  # JCB
    ))


def is_valid_email(value: str) -> bool:
    local, sep, domain = value.partition("@")
    if not sep or not local or "@" in domain: return False
    if not all(c in _EMAIL_LOCAL for c in local): return False
    if not all(c in _EMAIL_DOMAIN for c in domain): return False
    head, dot, tld = domain.rpartition(".")
    return bool(dot and head and len(tld) >= 2 and tld.isascii() and tld.isalpha())


def is_valid_url(value: str) -> bool:
    if not value or any(c.isspace() for c in value): return False
    scheme, sep, _ = value.partition("://")
    if not sep or scheme.lower() not in _URL_SCHEMES: return False
    try:
        parts = urlsplit(value)
        host = parts.hostname
        _ = parts.port  # raises on a malformed port
    except ValueError:
        return False
    return bool(parts.netloc and host)


def is_valid_ip(value: str, version: int | None = None) -> bool:
    if not value or value != value.strip(): return False
    parsers = {4: (ipaddress.IPv4Address,), 6: (ipaddress.IPv6Address,)}.get(
        version, (ipaddress.IPv4Address, ipaddress.IPv6Address))
    for parser in parsers:
        try:
            parser(value)
            return True
        except ValueError:
            continue
    return False


# Presence

def check_required(value: Any, inputs: PredicateInputs) -> Check:
    return Check.of(not _is_blank(value))


def check_required_if(value: Any, inputs: PredicateInputs) -> Check:
    p: ConditionParams = inputs.params
    if _text(inputs.sibling(p.field)) == _text(p.value) and _is_blank(value):
        return Check.invalid(p.field, _text(p.value))
    return Check.valid()


def check_required_unless(value: Any, inputs: PredicateInputs) -> Check:
    p: ConditionParams = inputs.params
    if _text(inputs.sibling(p.field)) != _text(p.value) and _is_blank(value):
        return Check.invalid(p.field, _text(p.value))
    return Check.valid()


def check_required_with(value: Any, inputs: PredicateInputs) -> Check:
    p: FieldsParams = inputs.params
    if any(inputs.sibling(f) is not None for f in p.fields) and _is_blank(value):
        return Check.invalid(p.fields)
    return Check.valid()


def check_required_without(value: Any, inputs: PredicateInputs) -> Check:
    p: FieldsParams = inputs.params
    if all(inputs.sibling(f) is None for f in p.fields) and _is_blank(value):
        return Check.invalid(p.fields)
    return Check.valid()


# String / format

def check_email(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return _too_long(value, inputs) or Check.of(is_valid_email(value))


def check_url(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(is_valid_url(value))


def check_uuid(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return _too_long(value, inputs) or Check.of(UUID_RE.fullmatch(value) is not None)


def check_length(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    p: RangeParams = inputs.params
    return Check.of(p.min <= len(value) <= p.max, p.min, p.max)


def check_min_length(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(len(value) >= inputs.params.min, inputs.params.min)


def check_max_length(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(len(value) <= inputs.params.max, inputs.params.max)


def check_pattern(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    if (guard := _too_long(value, inputs, "field.pattern.too_long")) is not None: return guard
    p: PatternParams = inputs.params
    regex = inputs.regex or re.compile(p.regex, p.flags)
    return Check.of(regex.fullmatch(value) is not None, p.regex)


def check_alpha(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(value.isascii() and value.isalpha())


def check_alphanumeric(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(value.isascii() and value.isalnum())


def check_ascii(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(bool(value) and value.isascii())


def check_lowercase(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(value == value.lower())


def check_uppercase(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(value == value.upper())


def check_starts_with(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(value.startswith(inputs.params.value), inputs.params.value)


def check_ends_with(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(value.endswith(inputs.params.value), inputs.params.value)


def check_contains(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(inputs.params.value in value, inputs.params.value)


def check_one_of(value: Any, inputs: PredicateInputs) -> Check:
    values = inputs.params.values
    return Check.of(_text(value) in values, values)


def check_not_one_of(value: Any, inputs: PredicateInputs) -> Check:
    values = inputs.params.values
    return Check.of(_text(value) not in values, values)


def check_enum(value: Any, inputs: PredicateInputs) -> Check:
    enum_type = inputs.params.enum
    names = tuple(enum_type.__members__)
    if isinstance(value, enum_type): return Check.valid()
    return Check.of(isinstance(value, str) and value in enum_type.__members__, names)


def check_json(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(is_valid_json(value))


def check_luhn(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    digits = _card_digits(value)
    return Check.of(digits is not None and luhn_valid(digits))


def check_credit_card(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    digits = _card_digits(value)
    return Check.of(
        digits is not None and 13 <= len(digits) <= 19 and luhn_valid(digits) and _known_card_range(digits)
    )


# Numeric

def check_min(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    bound = inputs.params.value
    if _is_nan(value): return Check.invalid(bound)
    return Check.of(value >= _aligned(bound, value), bound)


def check_max(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    bound = inputs.params.value
    if _is_nan(value): return Check.invalid(bound)
    return Check.of(value <= _aligned(bound, value), bound)


def check_between(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    p: BetweenParams = inputs.params
    if _is_nan(value): return Check.invalid(p.min, p.max)
    return Check.of(_aligned(p.min, value) <= value <= _aligned(p.max, value), p.min, p.max)


# NaN is neither positive, negative nor zero
def check_positive(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(not _is_nan(value) and value > 0)


def check_negative(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(not _is_nan(value) and value < 0)


def check_zero(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(not _is_nan(value) and value == 0)


def _is_integral(value: Any) -> bool:
    if isinstance(value, int): return True
    if isinstance(value, float): return value.is_integer()
    if isinstance(value, Decimal): return value.is_finite() and value == value.to_integral_value()
    return value == int(value)


def check_integer(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(_is_integral(value))


def check_decimal(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(_is_finite(value) and not isinstance(value, int) and not _is_integral(value))


# Remainder-based checks fail for NaN and infinities
def check_divisible_by(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    divisor = inputs.params.divisor
    if not _is_finite(value): return Check.invalid(divisor)
    return Check.of(_remainder(value, divisor) == 0, divisor)


def check_even(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(_is_finite(value) and _remainder(value, 2) == 0)


def check_odd(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_number(value): return Check.valid()
    return Check.of(_is_finite(value) and _remainder(value, 2) != 0)


def check_decimal_places(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, (str, Decimal)): return Check.valid()
    text = str(value)
    places = inputs.params.places
    _, dot, fraction = text.partition(".")
    return Check.of(bool(dot) and len(fraction) == places, places)


# Boolean

def check_accepted(value: Any, inputs: PredicateInputs) -> Check:
    if isinstance(value, bool): return Check.of(value)
    if isinstance(value, str): return Check.of(value.lower() in _ACCEPTED)
    if isinstance(value, int): return Check.of(value == 1)
    return Check.invalid()


# Collection

def check_size(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_collection(value): return Check.valid()
    p: RangeParams = inputs.params
    return Check.of(p.min <= len(value) <= p.max, p.min, p.max)


def check_min_size(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_collection(value): return Check.valid()
    return Check.of(len(value) >= inputs.params.min, inputs.params.min)


def check_max_size(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_collection(value): return Check.valid()
    return Check.of(len(value) <= inputs.params.max, inputs.params.max)


def check_not_empty(value: Any, inputs: PredicateInputs) -> Check:
    if not (_is_collection(value) or isinstance(value, (str, bytes, bytearray))): return Check.valid()
    return Check.of(len(value) > 0)


def check_distinct(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)): return Check.valid()
    try:
        return Check.of(len(set(value)) == len(value))
    except TypeError:
        seen: list[Any] = []
        for item in value:
            if item in seen: return Check.invalid()
            seen.append(item)
        return Check.valid()


def check_contains_value(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_collection(value): return Check.valid()
    needle = inputs.params.value
    return Check.of(any(_text(item) == needle for item in value), needle)


def check_not_contains(value: Any, inputs: PredicateInputs) -> Check:
    if not _is_collection(value): return Check.valid()
    needle = inputs.params.value
    return Check.of(all(_text(item) != needle for item in value), needle)


# Date / time

def check_date_format(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    fmt = inputs.params.format
    try:
        datetime.strptime(value, fmt)
    except ValueError:
        return Check.invalid(fmt)
    return Check.valid()


def check_iso_date(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    if (guard := _too_long(value, inputs)) is not None: return guard
    if ISO_DATE_RE.fullmatch(value) is None: return Check.invalid()
    try:
        date.fromisoformat(value)
    except ValueError:
        return Check.invalid()
    return Check.valid()


def check_iso_datetime(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    if (guard := _too_long(value, inputs)) is not None: return guard
    match = ISO_DATETIME_RE.fullmatch(value)
    if match is None: return Check.invalid()
    day, hour, minute, second = match.groups()
    try:
        date.fromisoformat(day)
    except ValueError:
        return Check.invalid()
    return Check.of(int(hour) < 24 and int(minute) < 60 and int(second) < 60)


def _now_like(value: datetime | date, inputs: PredicateInputs) -> datetime | date:
    """Current instant in the shape of `value` (date, naive or aware datetime)."""
    now = inputs.context.now()
    if isinstance(value, datetime):
        if value.tzinfo is None: return now.replace(tzinfo=None)
        return now.astimezone(value.tzinfo)
    return now.date()


def check_future(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, date): return Check.valid()
    return Check.of(value > _now_like(value, inputs))


def check_past(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, date): return Check.valid()
    return Check.of(value < _now_like(value, inputs))


def check_today(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, date): return Check.valid()
    now = _now_like(value, inputs)
    if isinstance(value, datetime): return Check.of(value.date() == now.date())
    return Check.of(value == now)


# Network

def check_ipv4(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(is_valid_ip(value, 4))


def check_ipv6(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(is_valid_ip(value, 6))


def check_ip(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return Check.of(is_valid_ip(value))


def check_mac_address(value: Any, inputs: PredicateInputs) -> Check:
    if not isinstance(value, str): return Check.valid()
    return _too_long(value, inputs) or Check.of(MAC_RE.fullmatch(value) is not None)


def check_port(value: Any, inputs: PredicateInputs) -> Check:
    port: int | None = None
    if isinstance(value, int) and not isinstance(value, bool): port = value
    elif isinstance(value, str) and value.isascii() and value.isdigit() and len(value) <= 5: port = int(value)
    return Check.of(port is not None and 1 <= port <= 65535)


# File

def _file_name(value: Any) -> str | None:
    if isinstance(value, os.PathLike): return os.fspath(value)
    if isinstance(value, str): return value
    return None


def check_mime_type(value: Any, inputs: PredicateInputs) -> Check:
    allowed = inputs.params.values
    if isinstance(value, os.PathLike):
        guessed, _ = mimetypes.guess_type(os.fspath(value))
        return Check.of((guessed or "application/octet-stream") in allowed, allowed)
    if isinstance(value, str): return Check.of(value in allowed, allowed)
    return Check.valid()


def check_file_extension(value: Any, inputs: PredicateInputs) -> Check:
    name = _file_name(value)
    if name is None: return Check.valid()
    allowed = inputs.params.values
    base = os.path.basename(name)
    _, dot, extension = base.rpartition(".")
    return Check.of(bool(dot) and extension in allowed, allowed)


async def check_max_file_size(value: Any, inputs: PredicateInputs) -> Check:
    limit = inputs.params.bytes
    if isinstance(value, (bytes, bytearray, memoryview)): return Check.of(len(value) <= limit, limit)
    if not isinstance(value, os.PathLike): return Check.valid()
    size = await inputs.context.dispatcher.run_blocking(os.path.getsize, value)
    return Check.of(size <= limit, limit)


# Cross-field

def check_same(value: Any, inputs: PredicateInputs) -> Check:
    other = inputs.params.field
    return Check.of(value == inputs.sibling(other), other)


def check_different(value: Any, inputs: PredicateInputs) -> Check:
    other = inputs.params.field
    return Check.of(value != inputs.sibling(other), other)


PREDICATES: dict[RuleKind, tuple[type[RuleParams], Predicate]] = {
    RuleKind.REQUIRED: (NoParams, check_required),
    RuleKind.REQUIRED_IF: (ConditionParams, check_required_if),
    RuleKind.REQUIRED_UNLESS: (ConditionParams, check_required_unless),
    RuleKind.REQUIRED_WITH: (FieldsParams, check_required_with),
    RuleKind.REQUIRED_WITHOUT: (FieldsParams, check_required_without),
    RuleKind.EMAIL: (NoParams, check_email),
    RuleKind.URL: (NoParams, check_url),
    RuleKind.UUID: (NoParams, check_uuid),
    RuleKind.LENGTH: (RangeParams, check_length),
    RuleKind.MIN_LENGTH: (MinParams, check_min_length),
    RuleKind.MAX_LENGTH: (MaxParams, check_max_length),
    RuleKind.PATTERN: (PatternParams, check_pattern),
    RuleKind.ALPHA: (NoParams, check_alpha),
    RuleKind.ALPHANUMERIC: (NoParams, check_alphanumeric),
    RuleKind.ASCII: (NoParams, check_ascii),
    RuleKind.LOWERCASE: (NoParams, check_lowercase),
    RuleKind.UPPERCASE: (NoParams, check_uppercase),
    RuleKind.STARTS_WITH: (TextParams, check_starts_with),
    RuleKind.ENDS_WITH: (TextParams, check_ends_with),
    RuleKind.CONTAINS: (TextParams, check_contains),
    RuleKind.ONE_OF: (ChoiceParams, check_one_of),
    RuleKind.NOT_ONE_OF: (ChoiceParams, check_not_one_of),
    RuleKind.ENUM: (EnumParams, check_enum),
    RuleKind.JSON: (NoParams, check_json),
    RuleKind.LUHN: (NoParams, check_luhn),
    RuleKind.CREDIT_CARD: (NoParams, check_credit_card),
    RuleKind.MIN: (BoundParams, check_min),
    RuleKind.MAX: (BoundParams, check_max),
    RuleKind.BETWEEN: (BetweenParams, check_between),
    RuleKind.POSITIVE: (NoParams, check_positive),
    RuleKind.NEGATIVE: (NoParams, check_negative),
    RuleKind.ZERO: (NoParams, check_zero),
    RuleKind.INTEGER: (NoParams, check_integer),
    RuleKind.DECIMAL: (NoParams, check_decimal),
    RuleKind.DIVISIBLE_BY: (DivisorParams, check_divisible_by),
    RuleKind.EVEN: (NoParams, check_even),
    RuleKind.ODD: (NoParams, check_odd),
    RuleKind.DECIMAL_PLACES: (PlacesParams, check_decimal_places),
    RuleKind.ACCEPTED: (NoParams, check_accepted),
    RuleKind.SIZE: (RangeParams, check_size),
    RuleKind.MIN_SIZE: (MinParams, check_min_size),
    RuleKind.MAX_SIZE: (MaxParams, check_max_size),
    RuleKind.NOT_EMPTY: (NoParams, check_not_empty),
    RuleKind.DISTINCT: (NoParams, check_distinct),
    RuleKind.CONTAINS_VALUE: (ValueParams, check_contains_value),
    RuleKind.NOT_CONTAINS: (ValueParams, check_not_contains),
    RuleKind.DATE_FORMAT: (FormatParams, check_date_format),
    RuleKind.ISO_DATE: (NoParams, check_iso_date),
    RuleKind.ISO_DATETIME: (NoParams, check_iso_datetime),
    RuleKind.FUTURE: (NoParams, check_future),
    RuleKind.PAST: (NoParams, check_past),
    RuleKind.TODAY: (NoParams, check_today),
    RuleKind.IPV4: (NoParams, check_ipv4),
    RuleKind.IPV6: (NoParams, check_ipv6),
    RuleKind.IP: (NoParams, check_ip),
    RuleKind.MAC_ADDRESS: (NoParams, check_mac_address),
    RuleKind.PORT: (NoParams, check_port),
    RuleKind.MIME_TYPE: (ChoiceParams, check_mime_type),
    RuleKind.FILE_EXTENSION: (ExtensionParams, check_file_extension),
    RuleKind.MAX_FILE_SIZE: (FileSizeParams, check_max_file_size),
    RuleKind.SAME: (FieldRefParams, check_same),
    RuleKind.DIFFERENT: (FieldRefParams, check_different),
}
