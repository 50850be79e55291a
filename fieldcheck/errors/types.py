"""Error Types

Two failure families with distinct lifetimes:
- SchemaError: raised once, at plan compilation, listing every problem found
  in a schema. A schema that raises it never produces a plan.
- ValidationError: raised per call by the throwing consumption style. Carries
  the path-addressed, ordered error map of the failed call.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


class ErrorCode(Enum):
    """Validation error code taxonomy.

    E20xx: Call-level validation failures
    E21xx: Schema compilation failures
    """
    # Call-level (E20xx)
    E2000_VALIDATION_FAILED = 2000

    # Schema compilation (E21xx)
    E2100_SCHEMA_GENERIC = 2100
    E2101_UNSAFE_PATTERN = 2101
    E2102_INVALID_PATTERN = 2102
    E2103_UNRESOLVED_PREDICATE = 2103
    E2104_INVALID_PARAMETERS = 2104
    E2105_UNKNOWN_SCHEMA = 2105
    E2106_DUPLICATE_FIELD = 2106
    E2107_INVALID_CHECKPOINT = 2107

    @property
    def category(self) -> str:
        """Human-readable error category."""
        return "schema" if self.value >= 2100 else "validation"


@dataclass(frozen=True, slots=True)
class SchemaProblem:
    """A single defect found while compiling a schema."""
    code: ErrorCode
    message: str
    schema: str = ""
    field: str | None = None
    step: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code.name, "schema": self.schema, "message": self.message}
        if self.field is not None: result["field"] = self.field
        if self.step is not None: result["step"] = self.step
        return result

    def __str__(self) -> str:
        where = self.schema
        if self.field is not None: where = f"{where}.{self.field}"
        if self.step is not None: where = f"{where}[step {self.step}]"
        return f"[{self.code.name}] {where}: {self.message}"


class SchemaError(Exception):
    """Raised when a schema cannot be compiled into a plan.

    All problems of the offending batch are reported together.
    """

    def __init__(self, problems: Iterable[SchemaProblem]):
        self.problems: tuple[SchemaProblem, ...] = tuple(problems)
        super().__init__(str(self))

    @property
    def codes(self) -> set[ErrorCode]:
        return {p.code for p in self.problems}

    def __str__(self) -> str:
        if len(self.problems) == 1: return str(self.problems[0])
        lines = "\n".join(f"  - {p}" for p in self.problems)
        return f"Schema compilation failed with {len(self.problems)} problem(s):\n{lines}"


@dataclass(eq=False)
class ValidationError(Exception):
    """Validation failure for one call.

    `errors` maps a field path (e.g. "departments[0].teams[1].name") to the
    messages collected for it, in rule declaration order. Path keys keep the
    order the executor produced them in.
    """
    errors: dict[str, list[str]]
    message: str = ""
    code: ErrorCode = ErrorCode.E2000_VALIDATION_FAILED
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.message:
            self.message = f"Validation failed with {self.field_count} field error(s)"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    @property
    def error_count(self) -> int:
        return sum(len(messages) for messages in self.errors.values())

    @property
    def field_count(self) -> int:
        return len(self.errors)

    def field_errors(self, path: str) -> list[str]:
        """Messages recorded for `path`, empty when the path passed."""
        return list(self.errors.get(path, ()))

    def has_field_error(self, path: str) -> bool:
        return bool(self.errors.get(path))

    def all_messages(self) -> list[str]:
        """Every message, flattened in path order."""
        return [message for messages in self.errors.values() for message in messages]

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        payload: dict[str, Any] = {
            "code": self.code.name,
            "message": self.message,
            "errors": {path: list(messages) for path, messages in self.errors.items()},
        }
        if self.details: payload["details"] = dict(self.details)
        return payload

    def to_json(self, *, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
