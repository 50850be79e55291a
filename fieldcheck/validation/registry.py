"""Custom Predicate Registry

Extension point for rules the built-in library does not cover. A custom
predicate receives the field value and the PredicateInputs (parent object,
context, extra rule parameters) and answers with:

- True or None: valid
- False: invalid, reported under the step's message key (default field.custom)
- str: invalid, the string is the message
- a Check, for full control over key and arguments

It may be sync or async. Blocking predicates are moved to the context
dispatcher's executor. Raising ValidationError attaches all of its messages
to the current field; any other exception propagates out of validate().

    registry = PredicateRegistry()

    @registry.predicate("strong_password")
    def strong_password(value, inputs):
        return any(c.isdigit() for c in value) or "Password needs a digit"
"""
from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass
from typing import Any, Callable

from fieldcheck.errors import ValidationError

from .predicates import Check, Predicate, PredicateInputs


def interpret(result: Any, name: str) -> Check:
    """Normalize a custom predicate's return value into a Check."""
    if result is None or result is True: return Check.valid()
    if result is False: return Check.invalid()
    if isinstance(result, str): return Check.literal(result)
    if isinstance(result, Check): return result
    raise TypeError(f"custom predicate {name!r} returned {type(result).__name__}; expected bool, str, None or Check")


@dataclass(frozen=True, slots=True)
class CustomPredicate:
    """A registered custom predicate."""
    name: str
    fn: Callable[[Any, PredicateInputs], Any]
    blocking: bool = False
    accepts_none: bool = False

    async def __call__(self, value: Any, inputs: PredicateInputs) -> Check:
        try:
            if self.blocking:
                result = await inputs.context.dispatcher.run_blocking(self.fn, value, inputs)
            else:
                result = self.fn(value, inputs)
            if inspect.isawaitable(result):
                result = await result
        except ValidationError as exc:
            messages = exc.all_messages()
            return Check.literal(*messages) if messages else Check.invalid()
        return interpret(result, self.name)

    def as_predicate(self) -> Predicate:
        return self


class PredicateRegistry:
    """Named custom predicates, resolved when plans are compiled."""

    def __init__(self):
        self._predicates: dict[str, CustomPredicate] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        fn: Callable[[Any, PredicateInputs], Any],
        *,
        blocking: bool = False,
        accepts_none: bool = False,
        replace: bool = False,
    ) -> CustomPredicate:
        """Register `fn` under `name`.

        Args:
            blocking: run in the dispatcher's executor instead of on the loop
            accepts_none: also evaluate when the field value is None
            replace: allow overwriting an existing registration
        """
        if not name: raise ValueError("predicate name must not be empty")
        if not callable(fn): raise TypeError(f"predicate {name!r} is not callable")
        custom = CustomPredicate(name, fn, blocking, accepts_none)
        with self._lock:
            if name in self._predicates and not replace:
                raise ValueError(f"predicate {name!r} is already registered")
            self._predicates[name] = custom
        return custom

    def predicate(self, name: str, *, blocking: bool = False, accepts_none: bool = False):
        """Decorator form of register()."""
        def decorator(fn: Callable[[Any, PredicateInputs], Any]) -> Callable[[Any, PredicateInputs], Any]:
            self.register(name, fn, blocking=blocking, accepts_none=accepts_none)
            return fn
        return decorator

    def resolve(self, name: str) -> CustomPredicate | None:
        return self._predicates.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._predicates)

    def __contains__(self, name: str) -> bool: return name in self._predicates

    def __len__(self) -> int: return len(self._predicates)
