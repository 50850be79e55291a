"""Error Handling

Key components:
- ErrorCode: error code taxonomy
- SchemaError / SchemaProblem: compile-time schema defects
- ValidationError: throwing-style call failure
- Success / Failure: algebraic call outcome

Usage:
    from fieldcheck.errors import Success, Failure

    match await validator.validate(user):
        case Success(value):
            ...
        case Failure(errors):
            ...
"""
from .types import (
    ErrorCode,
    SchemaProblem,
    SchemaError,
    ValidationError,
)
from .outcome import (
    Outcome,
    Success,
    Failure,
    from_errors,
)

__all__ = [
    "ErrorCode",
    "SchemaProblem",
    "SchemaError",
    "ValidationError",
    "Outcome",
    "Success",
    "Failure",
    "from_errors",
]
