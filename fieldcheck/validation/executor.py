"""Validation Executor

Runs a compiled Plan against a value:
- one asyncio task per declared field, joined before returning
- each field's rule chain runs in order, honoring fail-fast checkpoints
- None values skip every non-presence rule
- nested values (or each element of a nested collection) are validated
  recursively under `parent.child` / `parent[i].child` paths
- results merge in field declaration order, depth-first, never in
  completion order

A dispatcher permit is held only while a field's own rule chain runs and is
released before nested recursion, so nested work cannot starve on a bounded
dispatcher. If any task raises, its siblings are cancelled and awaited and
the original exception propagates unchanged.
"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping, Sequence, Set
from time import perf_counter
from typing import Any, Awaitable, Protocol, TypeVar

from fieldcheck.errors import Outcome, from_errors
from fieldcheck.logging import engine_logger

from .compiler import CompiledField, Plan
from .context import ValidationContext
from .predicates import MAX_INPUT_LENGTH, PredicateInputs, read_field

T = TypeVar("T")

ErrorMap = dict[str, list[str]]


class PlanLookup(Protocol):
    def plan_for(self, value: Any, schema: str | None = None) -> Plan: ...


async def join_all(aws: list[Awaitable[T]]) -> list[T]:
    """Run awaitables as tasks; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks: task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def child_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _elements(value: Any) -> list[tuple[str, Any]]:
    """(index suffix, element) pairs of a nested collection."""
    if isinstance(value, Mapping): return [(f"[{key}]", item) for key, item in value.items()]
    if isinstance(value, (Sequence, Set)) and not isinstance(value, (str, bytes, bytearray)):
        return [(f"[{i}]", item) for i, item in enumerate(value)]
    return []


class Executor:
    """Runs plans; one instance is shared by every call of a Validator."""

    def __init__(
        self,
        plans: PlanLookup,
        *,
        nested_on_local_failure: bool = True,
        max_input_length: int = MAX_INPUT_LENGTH,
    ):
        self._plans = plans
        self.nested_on_local_failure = nested_on_local_failure
        self.max_input_length = max_input_length
        self._log = engine_logger()

    async def validate(self, plan: Plan, value: Any, context: ValidationContext) -> Outcome[Any]:
        started = perf_counter()
        errors = await self.run(plan, value, context)
        self._log.debug(
            "validation_completed",
            schema=plan.name,
            valid=not errors,
            fields_failed=len(errors),
            duration_ms=round((perf_counter() - started) * 1000, 3),
        )
        return from_errors(value, errors)

    async def run(self, plan: Plan, value: Any, context: ValidationContext, prefix: str = "") -> ErrorMap:
        """Error map of `value` against `plan`, paths prefixed by `prefix`."""
        parts = await join_all([self._run_field(field, value, context, prefix) for field in plan.fields])
        merged: ErrorMap = {}
        for part in parts: merged.update(part)
        return merged

    async def _run_field(self, field: CompiledField, parent: Any, context: ValidationContext, prefix: str) -> ErrorMap:
        path = child_path(prefix, field.name)
        value = read_field(parent, field.name)
        errors: ErrorMap = {}

        async with context.dispatcher.slot():
            messages = await self._run_chain(field, value, parent, context)
        if messages: errors[path] = messages

        nested = field.nested
        if nested is not None and value is not None and (not messages or self.nested_on_local_failure):
            if nested.each:
                elements = [(f"{path}{suffix}", item) for suffix, item in _elements(value) if item is not None]
                parts = await join_all([self._run_nested(item, nested.schema, context, p) for p, item in elements])
                for part in parts: errors.update(part)
            else:
                errors.update(await self._run_nested(value, nested.schema, context, path))
        return errors

    async def _run_nested(self, value: Any, schema: str | None, context: ValidationContext, path: str) -> ErrorMap:
        plan = self._plans.plan_for(value, schema)
        return await self.run(plan, value, context, path)

    async def _run_chain(self, field: CompiledField, value: Any, parent: Any, context: ValidationContext) -> list[str]:
        if value is None and not field.nullable and not field.has_presence:
            return [await context.resolver.resolve("field.notnull", (), context.locale)]

        messages: list[str] = []
        failed = False
        for step in field.steps:
            if failed and step.index in field.checkpoints: break
            if value is None and not step.accepts_none: continue

            inputs = PredicateInputs(step.params, parent, context, self.max_input_length, step.regex)
            result = step.check(value, inputs)
            if inspect.isawaitable(result): result = await result
            if result.is_valid: continue

            failed = True
            if result.messages:
                messages.extend(result.messages)
            else:
                messages.append(await context.resolver.resolve(result.key or step.key, result.args, context.locale))
        return messages
