"""Tests for structured logging setup and the events the library emits."""

from __future__ import annotations

import logging

import pytest
import structlog

from fieldcheck.config import Settings
from fieldcheck.errors import SchemaError
from fieldcheck.logging import (
    LoggerRegistry,
    bind_context,
    clear_context,
    compiler_logger,
    configure_from_settings,
    configure_logging,
    get_shared_processors,
)
from fieldcheck.validation import FieldRule, PatternCache, PlanCompiler, Schema, ValidationContext, Validator, rules
from fieldcheck.validation.messages import load_builtin_table


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.events: list[dict] = []

    def emit(self, record: logging.LogRecord) -> None:
        if isinstance(record.msg, dict): self.events.append(record.msg)


@pytest.fixture
def events():
    """Event dicts emitted under the fieldcheck logger, at DEBUG."""
    lib_logger = logging.getLogger("fieldcheck")
    handler = _Collect()
    previous = lib_logger.level
    lib_logger.addHandler(handler)
    lib_logger.setLevel(logging.DEBUG)
    try:
        yield handler.events
    finally:
        lib_logger.removeHandler(handler)
        lib_logger.setLevel(previous)
        clear_context()


def named(events: list[dict], name: str) -> list[dict]:
    return [e for e in events if e.get("event") == name]


@pytest.mark.unit
class TestConfiguration:
    def test_configure_logging_owns_the_library_logger(self) -> None:
        try:
            configure_logging("DEBUG", json_logs=True)
            lib_logger = logging.getLogger("fieldcheck")
            assert lib_logger.level == logging.DEBUG
            assert lib_logger.propagate is False
            assert len(lib_logger.handlers) == 1
        finally:
            configure_logging("WARNING")

    def test_unknown_level_falls_back_to_info(self) -> None:
        try:
            configure_logging("LOUD")
            assert logging.getLogger("fieldcheck").level == logging.INFO
        finally:
            configure_logging("WARNING")

    def test_configure_from_settings_reads_level_and_format(self) -> None:
        try:
            configure_from_settings(Settings(_env_file=None, LOG_LEVEL="ERROR", LOG_JSON=True))
            lib_logger = logging.getLogger("fieldcheck")
            assert lib_logger.level == logging.ERROR
            handler, = lib_logger.handlers
            assert isinstance(handler.formatter.processors[-1], structlog.processors.JSONRenderer)

            configure_from_settings(Settings(_env_file=None, LOG_LEVEL="DEBUG", LOG_JSON=False))
            assert lib_logger.level == logging.DEBUG
            handler, = lib_logger.handlers
            assert isinstance(handler.formatter.processors[-1], structlog.dev.ConsoleRenderer)
        finally:
            configure_logging("WARNING")

    def test_environment_drives_configuration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIELDCHECK_LOG_LEVEL", "ERROR")
        try:
            configure_from_settings(Settings(_env_file=None))
            assert logging.getLogger("fieldcheck").level == logging.ERROR
        finally:
            configure_logging("WARNING")

    def test_shared_processors_include_library_tag(self) -> None:
        names = [getattr(p, "__name__", type(p).__name__) for p in get_shared_processors()]
        assert "_add_library_info" in names
        assert "merge_contextvars" in names

    def test_registry_caches_domain_loggers(self) -> None:
        assert LoggerRegistry.get("compiler") is compiler_logger()


@pytest.mark.unit
class TestEvents:
    def test_plan_compiled(self, events: list[dict]) -> None:
        PlanCompiler(cache=PatternCache()).compile(Schema("User", (FieldRule.of("email", rules.email()),)))
        event, = named(events, "plan_compiled")
        assert event["schema"] == "User"
        assert event["steps"] == 1
        assert event["library"] == "fieldcheck"
        assert event["logger"] == "fieldcheck.compiler"

    def test_pattern_warning(self, events: list[dict]) -> None:
        PlanCompiler(cache=PatternCache()).compile(Schema("S", (FieldRule.of("x", rules.pattern("^[a-z]+$")),)))
        event, = named(events, "pattern_warning")
        assert event["pattern"] == "^[a-z]+$"
        assert event["level"] == "warning"

    def test_schema_rejected(self, events: list[dict]) -> None:
        with pytest.raises(SchemaError):
            PlanCompiler(cache=PatternCache()).compile(Schema("S", (FieldRule.of("x", rules.custom("ghost")),)))
        event, = named(events, "schema_rejected")
        assert event["problems"] == 1
        assert not named(events, "plan_compiled")

    @pytest.mark.asyncio
    async def test_validation_completed_carries_bound_context(self, events: list[dict]) -> None:
        validator = Validator(Schema("S", (FieldRule.of("x", rules.required()),)), context=ValidationContext.for_testing())
        bind_context(request_id="req-42")
        await validator.validate({}, schema="S")
        event, = named(events, "validation_completed")
        assert event["valid"] is False
        assert event["fields_failed"] == 1
        assert event["request_id"] == "req-42"
        assert event["level"] == "debug"

    def test_long_values_are_truncated(self, events: list[dict]) -> None:
        pattern = "^" + "a" * 300 + ".*$"
        PlanCompiler(cache=PatternCache()).compile(Schema("S", (FieldRule.of("x", rules.pattern(pattern)),)))
        event, = named(events, "pattern_warning")
        assert event["pattern"].startswith("^aaa")
        assert event["pattern"].endswith("...(+104)")

    def test_missing_message_table(self, events: list[dict]) -> None:
        load_builtin_table.cache_clear()
        assert load_builtin_table("zz") == {}
        event, = named(events, "message_table_missing")
        assert event["locale"] == "zz"
        assert event["logger"] == "fieldcheck.messages"
