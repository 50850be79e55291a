"""fieldcheck: concurrent, localized validation of nested values.

Applications opt into the library's structured logging at startup:

    import fieldcheck

    fieldcheck.configure_from_settings()  # FIELDCHECK_LOG_LEVEL, FIELDCHECK_LOG_JSON
"""

from fieldcheck.config import Settings, get_settings
from fieldcheck.errors import (
    ErrorCode,
    Failure,
    Outcome,
    SchemaError,
    Success,
    ValidationError,
)
from fieldcheck.logging import configure_from_settings, configure_logging
from fieldcheck.validation import (
    FAIL_FAST,
    DefaultMessageResolver,
    Dispatcher,
    FieldRule,
    PredicateRegistry,
    Schema,
    ValidationContext,
    Validator,
    rules,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "ErrorCode",
    "Failure",
    "Outcome",
    "SchemaError",
    "Success",
    "ValidationError",
    "configure_from_settings",
    "configure_logging",
    "FAIL_FAST",
    "DefaultMessageResolver",
    "Dispatcher",
    "FieldRule",
    "PredicateRegistry",
    "Schema",
    "ValidationContext",
    "Validator",
    "rules",
]
