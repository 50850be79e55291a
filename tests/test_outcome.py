"""Tests for Success/Failure outcomes and the error types."""

from __future__ import annotations

import json

import pytest

from fieldcheck.errors import (
    ErrorCode,
    Failure,
    SchemaError,
    SchemaProblem,
    Success,
    ValidationError,
    from_errors,
)

ERRORS = {"email": ["Please enter a valid email address"], "address.zip": ["This field is required", "Bad zip"]}


@pytest.mark.unit
class TestSuccess:
    def test_accessors(self) -> None:
        outcome = Success(5)
        assert outcome.is_success() and not outcome.is_failure()
        assert outcome.get_or_raise() == 5
        assert outcome.get_or_none() == 5
        assert outcome.get_or_default(0) == 5
        assert outcome.get_or_else(lambda errors: 0) == 5

    def test_combinators(self) -> None:
        outcome = Success(5)
        assert outcome.map(lambda v: v * 2) == Success(10)
        assert outcome.flat_map(lambda v: Failure({"x": ["no"]})).is_failure()
        assert outcome.map_errors(lambda e: {}) is outcome
        assert outcome.fold(lambda v: f"ok {v}", lambda e: "bad") == "ok 5"

    def test_side_effects(self) -> None:
        seen: list[object] = []
        Success(1).on_success(seen.append).on_failure(seen.append)
        assert seen == [1]


@pytest.mark.unit
class TestFailure:
    def test_accessors(self) -> None:
        outcome = Failure(ERRORS)
        assert outcome.is_failure() and not outcome.is_success()
        assert outcome.get_or_none() is None
        assert outcome.get_or_default("fallback") == "fallback"
        assert outcome.get_or_else(lambda errors: len(errors)) == 2

    def test_errors_are_read_only_copies(self) -> None:
        source = {"a": ["x"]}
        outcome = Failure(source)
        source["a"].append("y")
        assert outcome.as_dict() == {"a": ["x"]}
        with pytest.raises(TypeError):
            outcome.errors["b"] = ["z"]  # type: ignore[index]

    def test_message_sequences_are_frozen(self) -> None:
        outcome = Failure({"a": ["x"]})
        assert outcome.errors["a"] == ("x",)
        with pytest.raises(AttributeError):
            outcome.errors["a"].append("y")  # type: ignore[attr-defined]
        outcome.as_dict()["a"].append("y")
        assert outcome.as_dict() == {"a": ["x"]}

    def test_get_or_raise(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Failure(ERRORS).get_or_raise()
        assert exc_info.value.errors == ERRORS

    def test_combinators(self) -> None:
        outcome = Failure(ERRORS)
        assert outcome.map(lambda v: v) is outcome
        assert outcome.flat_map(lambda v: Success(v)) is outcome
        prefixed = outcome.map_errors(lambda errors: {f"user.{k}": v for k, v in errors.items()})
        assert list(prefixed.as_dict()) == ["user.email", "user.address.zip"]
        assert outcome.fold(lambda v: "ok", lambda e: sorted(e)) == ["address.zip", "email"]

    def test_side_effects(self) -> None:
        seen: list[object] = []
        Failure({"a": ["x"]}).on_success(seen.append).on_failure(seen.append)
        assert seen == [{"a": ["x"]}]

    def test_pattern_matching(self) -> None:
        match Failure(ERRORS):
            case Success(value):
                pytest.fail(f"unexpected success {value}")
            case Failure(errors):
                assert "email" in errors

    def test_from_errors(self) -> None:
        assert from_errors("v", {}) == Success("v")
        assert from_errors("v", ERRORS).is_failure()


@pytest.mark.unit
class TestValidationError:
    def test_default_message(self) -> None:
        error = ValidationError(ERRORS)
        assert str(error) == "Validation failed with 2 field error(s)"
        assert error.code is ErrorCode.E2000_VALIDATION_FAILED

    def test_counts_and_lookup(self) -> None:
        error = ValidationError(ERRORS)
        assert error.field_count == 2
        assert error.error_count == 3
        assert error.field_errors("address.zip") == ["This field is required", "Bad zip"]
        assert error.field_errors("name") == []
        assert error.has_field_error("email")
        assert not error.has_field_error("name")
        assert error.all_messages() == ["Please enter a valid email address", "This field is required", "Bad zip"]

    def test_serialization(self) -> None:
        error = ValidationError(ERRORS, details={"schema": "User"})
        payload = json.loads(error.to_json())
        assert payload["code"] == "E2000_VALIDATION_FAILED"
        assert payload["errors"] == ERRORS
        assert payload["details"] == {"schema": "User"}

    def test_is_raisable(self) -> None:
        with pytest.raises(ValidationError, match="1 field error"):
            raise ValidationError({"a": ["x"]})


@pytest.mark.unit
class TestSchemaError:
    def test_single_problem_message(self) -> None:
        problem = SchemaProblem(ErrorCode.E2103_UNRESOLVED_PREDICATE, "no predicate", schema="User", field="name", step=2)
        assert str(SchemaError([problem])) == "[E2103_UNRESOLVED_PREDICATE] User.name[step 2]: no predicate"

    def test_problem_to_dict(self) -> None:
        problem = SchemaProblem(ErrorCode.E2105_UNKNOWN_SCHEMA, "missing", schema="User")
        assert problem.to_dict() == {"code": "E2105_UNKNOWN_SCHEMA", "schema": "User", "message": "missing"}

    def test_codes_and_category(self) -> None:
        error = SchemaError([
            SchemaProblem(ErrorCode.E2101_UNSAFE_PATTERN, "a"),
            SchemaProblem(ErrorCode.E2104_INVALID_PARAMETERS, "b"),
        ])
        assert error.codes == {ErrorCode.E2101_UNSAFE_PATTERN, ErrorCode.E2104_INVALID_PARAMETERS}
        assert ErrorCode.E2101_UNSAFE_PATTERN.category == "schema"
        assert ErrorCode.E2000_VALIDATION_FAILED.category == "validation"
