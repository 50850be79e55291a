"""Validation Outcome Types

Success/Failure variants for the non-throwing consumption style. Both are
frozen and final so `match` statements over an Outcome are exhaustive:

    match await validator.validate(payload):
        case Success(value):
            persist(value)
        case Failure(errors):
            respond(400, errors)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, NoReturn, Sequence, TypeVar, Union, final

from .types import ValidationError

T = TypeVar("T")
U = TypeVar("U")

ErrorMap = Mapping[str, Sequence[str]]


@final
@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """The validated value, unchanged."""
    value: T

    def is_success(self) -> bool: return True

    def is_failure(self) -> bool: return False

    def map(self, f: Callable[[T], U]) -> Outcome[U]:
        """Transform the validated value."""
        return Success(f(self.value))

    def flat_map(self, f: Callable[[T], Outcome[U]]) -> Outcome[U]:
        """Chain a further step that may itself fail."""
        return f(self.value)

    def map_errors(self, f: Callable[[dict[str, list[str]]], dict[str, list[str]]]) -> Outcome[T]:
        return self

    def fold(self, on_success: Callable[[T], U], on_failure: Callable[[dict[str, list[str]]], U]) -> U:
        return on_success(self.value)

    def get_or_else(self, f: Callable[[dict[str, list[str]]], T]) -> T:
        return self.value

    def get_or_default(self, default: T) -> T:
        return self.value

    def get_or_none(self) -> T | None:
        return self.value

    def get_or_raise(self) -> T:
        return self.value

    def on_success(self, action: Callable[[T], Any]) -> Outcome[T]:
        """Run `action` for its side effect; returns self."""
        action(self.value)
        return self

    def on_failure(self, action: Callable[[dict[str, list[str]]], Any]) -> Outcome[T]:
        return self


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """The path-addressed error map of a failed call.

    The map and its message sequences are read-only (tuples); accessors hand
    out plain list copies.
    """
    errors: ErrorMap = field(default_factory=dict)

    def __post_init__(self):
        frozen = MappingProxyType({path: tuple(messages) for path, messages in self.errors.items()})
        object.__setattr__(self, "errors", frozen)

    def is_success(self) -> bool: return False

    def is_failure(self) -> bool: return True

    def as_dict(self) -> dict[str, list[str]]:
        return {path: list(messages) for path, messages in self.errors.items()}

    def map(self, f: Callable[[Any], U]) -> Outcome[U]:
        return self

    def flat_map(self, f: Callable[[Any], Outcome[U]]) -> Outcome[U]:
        return self

    def map_errors(self, f: Callable[[dict[str, list[str]]], dict[str, list[str]]]) -> Outcome[Any]:
        """Transform the error map, e.g. to translate or prefix paths."""
        return Failure(f(self.as_dict()))

    def fold(self, on_success: Callable[[Any], U], on_failure: Callable[[dict[str, list[str]]], U]) -> U:
        return on_failure(self.as_dict())

    def get_or_else(self, f: Callable[[dict[str, list[str]]], T]) -> T:
        return f(self.as_dict())

    def get_or_default(self, default: T) -> T:
        return default

    def get_or_none(self) -> None:
        return None

    def get_or_raise(self) -> NoReturn:
        """Raises ValidationError carrying this error map."""
        raise self.to_exception()

    def to_exception(self) -> ValidationError:
        return ValidationError(self.as_dict())

    def on_success(self, action: Callable[[Any], Any]) -> Outcome[Any]:
        return self

    def on_failure(self, action: Callable[[dict[str, list[str]]], Any]) -> Outcome[Any]:
        """Run `action` with the error map for its side effect; returns self."""
        action(self.as_dict())
        return self


Outcome = Union[Success[T], Failure]


def from_errors(value: T, errors: Mapping[str, list[str]]) -> Outcome[T]:
    """Success when `errors` is empty, otherwise Failure."""
    return Failure(errors) if errors else Success(value)
