"""Tests for the pattern safety analyzer and the pattern cache."""

from __future__ import annotations

import re

import pytest

from fieldcheck.errors import ErrorCode
from fieldcheck.validation import PatternCache, Verdict, analyze
from fieldcheck.validation.patterns import tokenize


@pytest.mark.unit
class TestRejections:
    @pytest.mark.parametrize("pattern", [
        r"(a+)+",
        r"(a*)*",
        r"^(\w+\s?)+$",
        r"(x(a+){2})*",
        r"(?:[a-z]+)*@",
    ])
    def test_nested_quantifiers(self, pattern: str) -> None:
        result = analyze(pattern)
        assert result.verdict is Verdict.REJECT
        assert result.code is ErrorCode.E2101_UNSAFE_PATTERN
        assert "nested quantifiers" in result.reason

    @pytest.mark.parametrize("pattern", [
        r"(a|ab)+c",
        r"((a|ab))+",
        r"(?:(?:a|ab))+",
        r"^((a|aa))*$",
        r"(x|(?:y|yz))+",
    ])
    def test_overlapping_alternation(self, pattern: str) -> None:
        result = analyze(pattern)
        assert result.verdict is Verdict.REJECT
        assert "alternation" in result.reason

    def test_multiple_wildcards(self) -> None:
        result = analyze(r"^.*foo.*$")
        assert result.verdict is Verdict.REJECT
        assert "wildcards" in result.reason

    def test_length_ceiling(self) -> None:
        result = analyze("a" * 101, max_length=100)
        assert result.verdict is Verdict.REJECT
        assert result.code is ErrorCode.E2101_UNSAFE_PATTERN
        assert analyze("a" * 100, max_length=100).verdict is Verdict.ACCEPT

    @pytest.mark.parametrize("pattern", ["[", "(abc", "a{2,1}", "*a"])
    def test_invalid_syntax(self, pattern: str) -> None:
        result = analyze(pattern)
        assert result.verdict is Verdict.REJECT
        assert result.code is ErrorCode.E2102_INVALID_PATTERN

    def test_rejected_analysis_carries_no_compiled_pattern(self) -> None:
        assert analyze(r"(a+)+").compiled is None


@pytest.mark.unit
class TestAcceptance:
    @pytest.mark.parametrize("pattern", [
        r"^\d{3}-\d{4}$",
        r"^(ab|cd)+$",
        r"(?:a|b){1,3}",
        r"(?i)abc",
        r"^[A-Z]{2}[0-9]{2}$",
        r"^(?P<year>\d{4})-(?P<month>\d{2})$",
        r"\(\)",
    ])
    def test_safe_patterns(self, pattern: str) -> None:
        result = analyze(pattern)
        assert result.verdict is Verdict.ACCEPT
        assert result.accepted
        assert isinstance(result.compiled, re.Pattern)

    def test_single_wildcard_warns(self) -> None:
        result = analyze(r"^prefix.*$")
        assert result.verdict is Verdict.WARN
        assert result.accepted
        assert result.compiled is not None

    def test_unbounded_class_warns(self) -> None:
        result = analyze(r"^[a-z]+$")
        assert result.verdict is Verdict.WARN
        assert "character class" in result.reason

    def test_flags_are_applied(self) -> None:
        result = analyze(r"^abc$", flags=re.IGNORECASE)
        assert result.compiled.fullmatch("ABC")

    def test_lookahead_is_not_a_repeated_group(self) -> None:
        assert analyze(r"^(?=\d{3})\d{3}$").verdict is Verdict.ACCEPT


@pytest.mark.unit
class TestTokenizer:
    def test_top_level_alternation(self) -> None:
        branches = tokenize("a|bc")
        assert [len(b) for b in branches] == [1, 2]

    def test_deep_nesting_does_not_recurse(self) -> None:
        depth = 5000
        branches = tokenize("(" * depth + "a" + ")" * depth)
        group = branches[0][0]
        for _ in range(depth - 1):
            group = group.branches[0][0]
        assert group.branches[0][0].kind == "literal"

    def test_escaped_classes(self) -> None:
        atom, = tokenize(r"\d+")[0]
        assert atom.kind == "class"
        assert atom.unbounded


@pytest.mark.unit
class TestPatternCache:
    def test_prime_compiles_once(self) -> None:
        cache = PatternCache()
        first = cache.prime(r"^\d+$")
        assert cache.prime(r"^\d+$") is first
        assert r"^\d+$" in cache
        assert len(cache) == 1

    def test_prime_keeps_supplied_compiled_pattern(self) -> None:
        cache = PatternCache()
        compiled = re.compile("abc")
        assert cache.prime("abc", 0, compiled) is compiled
        assert cache.get("abc") is compiled

    def test_flags_are_part_of_the_key(self) -> None:
        cache = PatternCache()
        plain = cache.prime("abc")
        folded = cache.prime("abc", re.IGNORECASE)
        assert plain is not folded
        assert len(cache) == 2

    def test_clear(self) -> None:
        cache = PatternCache()
        cache.prime("abc")
        cache.clear()
        assert cache.get("abc") is None
