"""Declarative Field Validation

Schemas describe per-field rule chains once; the compiler turns them into
immutable plans that are shared by every concurrent call.

Key Features:
- Ordered rule chains with fail-fast checkpoints
- ReDoS-safe user patterns (static analysis before compilation)
- Concurrent per-field execution with deterministic, path-addressed errors
- Nested objects and collections (`departments[0].teams[1].name`)
- Localized messages with locale fallback and positional arguments
- Custom sync/async/blocking predicates
- Throwing or algebraic (Success/Failure) consumption

Usage:
    from fieldcheck.validation import FAIL_FAST, Schema, Validator, rules

    user = (
        Schema.builder("User", target=User)
        .field("email", rules.required(), FAIL_FAST, rules.email())
        .field("age", rules.min_value(18))
        .each("addresses", schema="Address")
        .build()
    )
    validator = Validator(user, address)

    outcome = await validator.validate(payload)
"""

from . import rules

# Schema model
from .schema import (
    FAIL_FAST,
    FieldRule,
    NestedSpec,
    RuleKind,
    RuleStep,
    Schema,
    SchemaBuilder,
)

# Pattern safety
from .patterns import (
    PatternAnalysis,
    PatternCache,
    Verdict,
    analyze,
    pattern_cache,
)

# Predicates
from .predicates import (
    PREDICATES,
    Check,
    PredicateInputs,
)
from .registry import (
    CustomPredicate,
    PredicateRegistry,
)

# Messages
from .messages import (
    DefaultMessageResolver,
    MessageResolver,
    default_resolver,
)

# Execution
from .context import (
    Dispatcher,
    ValidationContext,
    default_dispatcher,
    fixed_clock,
)
from .compiler import (
    CompiledField,
    CompiledStep,
    Plan,
    PlanCompiler,
)
from .executor import Executor
from .validator import Validator

__all__ = [
    "rules",
    # Schema
    "FAIL_FAST",
    "FieldRule",
    "NestedSpec",
    "RuleKind",
    "RuleStep",
    "Schema",
    "SchemaBuilder",
    # Patterns
    "PatternAnalysis",
    "PatternCache",
    "Verdict",
    "analyze",
    "pattern_cache",
    # Predicates
    "PREDICATES",
    "Check",
    "PredicateInputs",
    "CustomPredicate",
    "PredicateRegistry",
    # Messages
    "DefaultMessageResolver",
    "MessageResolver",
    "default_resolver",
    # Execution
    "Dispatcher",
    "ValidationContext",
    "default_dispatcher",
    "fixed_clock",
    "CompiledField",
    "CompiledStep",
    "Plan",
    "PlanCompiler",
    "Executor",
    "Validator",
]
