"""Validator Facade

Owns the compiled plans, the custom predicate registry and the executor,
and exposes the two consumption styles:

    validator = Validator(user_schema, address_schema)

    match await validator.validate(payload):          # algebraic
        case Success(value): ...
        case Failure(errors): ...

    user = await validator.validate_or_raise(payload)  # throwing

Registration compiles immediately; a schema that cannot be compiled is never
registered. Plans are published copy-on-write so validate() reads them
without locking.
"""
from __future__ import annotations

import threading
from typing import Any, Iterable, TypeVar

from fieldcheck.config import Settings, get_settings
from fieldcheck.errors import ErrorCode, Outcome, SchemaError, SchemaProblem

from .compiler import Plan, PlanCompiler
from .context import ValidationContext
from .executor import Executor, join_all
from .registry import PredicateRegistry
from .schema import Schema

T = TypeVar("T")


class Validator:
    """Validates values against registered schemas."""

    def __init__(
        self,
        *schemas: Schema,
        registry: PredicateRegistry | None = None,
        settings: Settings | None = None,
        context: ValidationContext | None = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or PredicateRegistry()
        self.default_context = context
        self._compiler = PlanCompiler(self.registry, settings=self.settings)
        self._executor = Executor(
            self,
            nested_on_local_failure=self.settings.NESTED_ON_LOCAL_FAILURE,
            max_input_length=self.settings.MAX_INPUT_LENGTH,
        )
        self._by_name: dict[str, Plan] = {}
        self._by_type: dict[type, Plan] = {}
        self._lock = threading.Lock()
        if schemas: self.register(*schemas)

    @property
    def schemas(self) -> tuple[str, ...]:
        return tuple(self._by_name)

    def register(self, *schemas: Schema) -> list[Plan]:
        """Compile and register `schemas` as one atomic batch."""
        with self._lock:
            clashes = [s.name for s in schemas if s.name in self._by_name]
            if clashes:
                raise SchemaError(
                    SchemaProblem(ErrorCode.E2100_SCHEMA_GENERIC, "schema is already registered", schema=name)
                    for name in clashes
                )
            known = set(self._by_name) | {s.name for s in schemas}
            plans = self._compiler.compile_all(schemas, known_schemas=known)

            by_name, by_type = dict(self._by_name), dict(self._by_type)
            for plan in plans:
                by_name[plan.name] = plan
                if plan.target is not None: by_type[plan.target] = plan
            self._by_name, self._by_type = by_name, by_type
        return plans

    def plan_for(self, value: Any, schema: str | None = None) -> Plan:
        """Plan by schema name, or by the value's type (nearest registered base class)."""
        if schema is not None:
            plan = self._by_name.get(schema)
            if plan is None:
                raise SchemaError([SchemaProblem(ErrorCode.E2105_UNKNOWN_SCHEMA, "no schema registered under this name", schema=schema)])
            return plan
        by_type = self._by_type
        for cls in type(value).__mro__:
            plan = by_type.get(cls)
            if plan is not None: return plan
        raise SchemaError([SchemaProblem(
            ErrorCode.E2105_UNKNOWN_SCHEMA, f"no schema registered for type {type(value).__qualname__}")])

    def _context(self, context: ValidationContext | None) -> ValidationContext:
        if context is not None: return context
        if self.default_context is None: self.default_context = ValidationContext()
        return self.default_context

    async def validate(self, value: T, context: ValidationContext | None = None, *,
                       schema: str | None = None) -> Outcome[T]:
        """Success(value) when every rule passes, otherwise Failure(error map)."""
        plan = self.plan_for(value, schema)
        return await self._executor.validate(plan, value, self._context(context))

    async def validate_or_raise(self, value: T, context: ValidationContext | None = None, *,
                                schema: str | None = None) -> T:
        """The value itself, or raises ValidationError with the error map."""
        outcome = await self.validate(value, context, schema=schema)
        return outcome.get_or_raise()

    async def validate_many(self, values: Iterable[T], context: ValidationContext | None = None, *,
                            schema: str | None = None) -> list[Outcome[T]]:
        """Validate several values concurrently; outcomes keep input order."""
        return await join_all([self.validate(v, context, schema=schema) for v in values])
