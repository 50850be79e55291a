"""Tests for message resolution and interpolation."""

from __future__ import annotations

import pytest

from fieldcheck.validation import DefaultMessageResolver, MessageResolver
from fieldcheck.validation.messages import (
    display_arg,
    format_message,
    language_of,
    load_builtin_table,
    normalize_locale,
)


@pytest.fixture
def resolver() -> DefaultMessageResolver:
    return DefaultMessageResolver(locales=["en", "fr"], default_locale="en")


@pytest.mark.unit
class TestLocaleTags:
    def test_normalize(self) -> None:
        assert normalize_locale("fr_CA") == "fr-ca"
        assert normalize_locale("FR-ca") == "fr-ca"
        assert normalize_locale(" en ") == "en"

    def test_language_of(self) -> None:
        assert language_of("fr_CA") == "fr"
        assert language_of("en") == "en"


@pytest.mark.unit
class TestInterpolation:
    def test_positional_arguments(self) -> None:
        assert format_message("between {0} and {1}", (2, 5)) == "between 2 and 5"

    def test_integral_floats_render_without_fraction(self) -> None:
        assert format_message("at least {0}", (18.0,)) == "at least 18"
        assert format_message("at least {0}", (18.5,)) == "at least 18.5"

    def test_sequences_render_comma_joined(self) -> None:
        assert display_arg(("a", "b", "c")) == "a, b, c"
        assert display_arg(True) is True

    def test_malformed_template_returned_as_is(self) -> None:
        assert format_message("needs {0} and {1}", (1,)) == "needs {0} and {1}"
        assert format_message("broken {", (1,)) == "broken {"
        assert format_message("named {x}", (1,)) == "named {x}"

    def test_no_arguments_leave_braces_alone(self) -> None:
        assert format_message("literal {0}", ()) == "literal {0}"


@pytest.mark.unit
class TestBuiltinTables:
    def test_english_and_french_ship(self) -> None:
        assert load_builtin_table("en")["field.required"] == "This field is required"
        assert load_builtin_table("fr")["field.required"] == "Ce champ est obligatoire"

    def test_tables_cover_the_same_keys(self) -> None:
        assert set(load_builtin_table("en")) == set(load_builtin_table("fr"))

    def test_missing_table_is_empty(self) -> None:
        assert load_builtin_table("xx") == {}


@pytest.mark.unit
class TestDefaultMessageResolver:
    def test_satisfies_protocol(self, resolver: DefaultMessageResolver) -> None:
        assert isinstance(resolver, MessageResolver)
        assert resolver.locales == ("en", "fr")

    @pytest.mark.asyncio
    async def test_resolves_builtin(self, resolver: DefaultMessageResolver) -> None:
        assert await resolver.resolve("field.required", (), "en") == "This field is required"
        assert await resolver.resolve("field.minlength", (8,), "en") == "This field must be at least 8 characters"

    @pytest.mark.asyncio
    async def test_region_falls_back_to_language(self, resolver: DefaultMessageResolver) -> None:
        assert await resolver.resolve("field.required", (), "fr_CA") == "Ce champ est obligatoire"
        assert await resolver.resolve("field.minlength", (8,), "FR-ca") == "Ce champ doit contenir au moins 8 caractères"

    @pytest.mark.asyncio
    async def test_unknown_locale_falls_back_to_default(self, resolver: DefaultMessageResolver) -> None:
        assert await resolver.resolve("field.required", (), "de") == "This field is required"

    @pytest.mark.asyncio
    async def test_unknown_key_returns_key(self, resolver: DefaultMessageResolver) -> None:
        assert await resolver.resolve("user.nickname.taken", ("bob",), "en") == "user.nickname.taken"

    @pytest.mark.asyncio
    async def test_overrides_win_for_exact_locale(self) -> None:
        resolver = DefaultMessageResolver(
            {"en": {"field.required": "Required!", "user.age.adult": "Must be {0}+"}},
            locales=["en", "fr"],
        )
        assert await resolver.resolve("field.required", (), "en") == "Required!"
        assert await resolver.resolve("user.age.adult", (18,), "en") == "Must be 18+"
        assert await resolver.resolve("field.required", (), "fr") == "Ce champ est obligatoire"

    @pytest.mark.asyncio
    async def test_with_overrides_layers_without_mutating(self, resolver: DefaultMessageResolver) -> None:
        layered = resolver.with_overrides("fr", {"field.email": "Courriel invalide"})
        assert await layered.resolve("field.email", (), "fr") == "Courriel invalide"
        assert await resolver.resolve("field.email", (), "fr") == "Veuillez saisir une adresse e-mail valide"

    def test_template(self, resolver: DefaultMessageResolver) -> None:
        assert resolver.template("field.min", "en") == "This field must be at least {0}"
        assert resolver.format("field.min", (18.0,), "en") == "This field must be at least 18"
