"""Shared pytest fixtures and domain types for fieldcheck tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest

from fieldcheck.errors import Failure, Outcome
from fieldcheck.logging import configure_logging
from fieldcheck.validation import (
    Check,
    PredicateInputs,
    PredicateRegistry,
    ValidationContext,
    Validator,
)
from fieldcheck.validation.predicates import PREDICATES
from fieldcheck.validation.schema import RuleKind

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


# Domain types

@dataclass
class Address:
    street: str | None = None
    city: str | None = None
    zip: str | None = None


@dataclass
class User:
    email: str | None = None
    name: str | None = None
    age: int | None = None
    password: str | None = None
    confirm: str | None = None
    address: Address | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Member:
    name: str | None = None
    email: str | None = None


@dataclass
class Team:
    name: str | None = None
    members: list[Member] = field(default_factory=list)


@dataclass
class Department:
    name: str | None = None
    teams: list[Team] = field(default_factory=list)


@dataclass
class Company:
    name: str | None = None
    departments: list[Department] = field(default_factory=list)


# Fixtures

@pytest.fixture(scope="session", autouse=True)
def quiet_logging() -> None:
    """Library logging at WARNING; tests that inspect events lower it locally."""
    configure_logging("WARNING")


@pytest.fixture
def ctx() -> ValidationContext:
    """Deterministic context: English, unbounded dispatcher, clock fixed at NOW."""
    return ValidationContext.for_testing(clock=NOW)


@pytest.fixture
def registry() -> PredicateRegistry:
    return PredicateRegistry()


@pytest.fixture
def validator(registry: PredicateRegistry, ctx: ValidationContext) -> Validator:
    """Empty validator; tests register their own schemas."""
    return Validator(registry=registry, context=ctx)


# Helpers

def run_predicate(kind: RuleKind, value: Any, context: ValidationContext, parent: Any = None, /, **params: Any) -> Check:
    """Evaluate one built-in predicate synchronously."""
    model, check = PREDICATES[kind]
    inputs = PredicateInputs(model.model_validate(params), parent if parent is not None else {}, context)
    return check(value, inputs)


def errors_of(outcome: Outcome[Any]) -> dict[str, list[str]]:
    assert isinstance(outcome, Failure), f"expected Failure, got {outcome!r}"
    return outcome.as_dict()
