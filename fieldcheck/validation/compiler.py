"""Validation Plan Compiler

Turns a Schema into an immutable Plan the executor can run without further
lookups: parameters validated into pydantic models, predicates bound, user
patterns analyzed and compiled into the shared PatternCache, custom rules
resolved, cross-field references checked.

Compilation is all-or-nothing. Every problem of a schema (or of a batch of
schemas) is collected and raised together in one SchemaError.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Collection, Iterable

from pydantic import ValidationError as ParamsError

from fieldcheck.config import Settings, get_settings
from fieldcheck.errors import ErrorCode, SchemaError, SchemaProblem
from fieldcheck.logging import compiler_logger

from .patterns import PatternAnalysis, PatternCache, Verdict, analyze, pattern_cache
from .predicates import PREDICATES, CustomParams, Predicate, RuleParams
from .registry import PredicateRegistry
from .schema import FieldRule, NestedSpec, RuleKind, RuleStep, Schema


@dataclass(frozen=True, slots=True)
class CompiledStep:
    """A rule step bound to its predicate and validated parameters."""
    index: int
    kind: RuleKind
    key: str
    check: Predicate
    params: RuleParams
    regex: re.Pattern | None = None
    accepts_none: bool = False


@dataclass(frozen=True, slots=True)
class CompiledField:
    name: str
    steps: tuple[CompiledStep, ...]
    checkpoints: frozenset[int]
    nullable: bool
    has_presence: bool
    nested: NestedSpec | None


@dataclass(frozen=True, slots=True)
class Plan:
    """Executable, shareable form of a Schema."""
    schema: Schema
    fields: tuple[CompiledField, ...]
    warnings: tuple[PatternAnalysis, ...] = ()

    @property
    def name(self) -> str: return self.schema.name

    @property
    def target(self) -> type | None: return self.schema.target

    @property
    def step_count(self) -> int: return sum(len(f.steps) for f in self.fields)


def _describe(exc: ParamsError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'params'}: {err['msg']}" for err in exc.errors()
    )


class PlanCompiler:
    """Compiles schemas against a predicate registry."""

    def __init__(
        self,
        registry: PredicateRegistry | None = None,
        *,
        settings: Settings | None = None,
        cache: PatternCache = pattern_cache,
    ):
        self.registry = registry or PredicateRegistry()
        self.settings = settings or get_settings()
        self.cache = cache
        self._log = compiler_logger()

    def compile(self, schema: Schema, *, known_schemas: Collection[str] | None = None) -> Plan:
        """Compile one schema or raise SchemaError listing every problem."""
        plan, problems = self._compile(schema, known_schemas)
        if problems:
            self._log.warning("schema_rejected", schema=schema.name, problems=len(problems))
            raise SchemaError(problems)
        self._publish(plan)
        return plan

    def compile_all(self, schemas: Iterable[Schema], *, known_schemas: Collection[str] | None = None) -> list[Plan]:
        """Compile a batch atomically: either every schema compiles or none does."""
        schemas = list(schemas)
        plans: list[Plan] = []
        problems: list[SchemaProblem] = []
        seen: set[str] = set()
        for schema in schemas:
            if schema.name in seen:
                problems.append(SchemaProblem(ErrorCode.E2100_SCHEMA_GENERIC, "schema defined twice in batch", schema=schema.name))
                continue
            seen.add(schema.name)
            plan, found = self._compile(schema, known_schemas)
            plans.append(plan)
            problems.extend(found)
        if problems:
            self._log.warning("schema_rejected", schemas=[s.name for s in schemas], problems=len(problems))
            raise SchemaError(problems)
        for plan in plans: self._publish(plan)
        return plans

    def _publish(self, plan: Plan) -> None:
        for warning in plan.warnings:
            self._log.warning("pattern_warning", schema=plan.name, pattern=warning.pattern, reason=warning.reason)
        self._log.info("plan_compiled", schema=plan.name, fields=len(plan.fields), steps=plan.step_count)

    def _compile(self, schema: Schema, known_schemas: Collection[str] | None) -> tuple[Plan, list[SchemaProblem]]:
        problems: list[SchemaProblem] = []
        warnings: list[PatternAnalysis] = []
        names = set(schema.field_names)
        fields: list[CompiledField] = []

        for rule in schema.fields:
            steps: list[CompiledStep] = []
            for index, step in enumerate(rule.steps):
                compiled = self._compile_step(schema, rule, index, step, names, problems, warnings)
                if compiled is not None: steps.append(compiled)
            nested = rule.nested
            if nested is not None and nested.schema is not None and known_schemas is not None \
                    and nested.schema not in known_schemas:
                problems.append(SchemaProblem(
                    ErrorCode.E2105_UNKNOWN_SCHEMA, f"nested schema {nested.schema!r} is not registered",
                    schema=schema.name, field=rule.name))
            fields.append(CompiledField(
                name=rule.name,
                steps=tuple(steps),
                checkpoints=rule.checkpoints,
                nullable=rule.nullable,
                has_presence=rule.has_presence_step,
                nested=nested,
            ))
        return Plan(schema, tuple(fields), tuple(warnings)), problems

    def _compile_step(
        self,
        schema: Schema,
        rule: FieldRule,
        index: int,
        step: RuleStep,
        names: set[str],
        problems: list[SchemaProblem],
        warnings: list[PatternAnalysis],
    ) -> CompiledStep | None:
        def problem(code: ErrorCode, message: str) -> None:
            problems.append(SchemaProblem(code, message, schema=schema.name, field=rule.name, step=index))

        if step.kind is RuleKind.CUSTOM:
            model, check = CustomParams, None
        else:
            model, check = PREDICATES[step.kind]
        try:
            params = model.model_validate(dict(step.params))
        except ParamsError as exc:
            problem(ErrorCode.E2104_INVALID_PARAMETERS, f"{step.kind.value}: {_describe(exc)}")
            return None

        regex = None
        accepts_none = step.kind.is_presence

        if step.kind is RuleKind.PATTERN:
            analysis = analyze(params.regex, max_length=self.settings.MAX_PATTERN_LENGTH, flags=params.flags)
            if analysis.verdict is Verdict.REJECT:
                problem(analysis.code or ErrorCode.E2101_UNSAFE_PATTERN, f"pattern {params.regex[:80]!r} rejected: {analysis.reason}")
                return None
            if analysis.verdict is Verdict.WARN: warnings.append(analysis)
            regex = self.cache.prime(params.regex, params.flags, analysis.compiled)

        if step.kind is RuleKind.CUSTOM:
            custom = self.registry.resolve(params.name)
            if custom is None:
                problem(ErrorCode.E2103_UNRESOLVED_PREDICATE, f"no custom predicate registered as {params.name!r}")
                return None
            check, accepts_none = custom.as_predicate(), custom.accepts_none

        for param in step.kind.sibling_fields:
            refs = getattr(params, param)
            for ref in (refs,) if isinstance(refs, str) else refs:
                if ref not in names:
                    problem(ErrorCode.E2104_INVALID_PARAMETERS, f"{step.kind.value} references unknown field {ref!r}")
                elif ref == rule.name:
                    problem(ErrorCode.E2104_INVALID_PARAMETERS, f"{step.kind.value} references its own field")

        return CompiledStep(index, step.kind, step.message_key, check, params, regex, accepts_none)
