"""Message Resolution

Turns a failed rule's message key and arguments into localized text.

Resolution never raises and never performs I/O at call time: the built-in
tables are YAML files shipped with the package, loaded once per locale when
a resolver is constructed.

Fallback chain for (key, locale):
    override[locale] -> builtin[locale] -> builtin[language] -> builtin[default] -> key
"""
from __future__ import annotations

from collections.abc import Set
from functools import lru_cache
from importlib import resources
from typing import Any, Iterable, Mapping, Protocol, Sequence, runtime_checkable

import yaml

from fieldcheck.config import get_settings
from fieldcheck.logging import messages_logger


@runtime_checkable
class MessageResolver(Protocol):
    """Anything that can turn (key, args, locale) into display text."""

    async def resolve(self, key: str, args: Sequence[Any], locale: str) -> str: ...


def normalize_locale(tag: str) -> str:
    """'fr_CA' and 'FR-ca' both become 'fr-ca'."""
    return tag.replace("_", "-").strip().lower()


def language_of(tag: str) -> str:
    return normalize_locale(tag).split("-", 1)[0]


def display_arg(arg: Any) -> Any:
    """Render an interpolation argument the way users expect to read it."""
    if isinstance(arg, bool): return arg
    if isinstance(arg, float) and arg.is_integer(): return int(arg)
    if isinstance(arg, (list, tuple, Set)): return ", ".join(str(display_arg(a)) for a in arg)
    return arg


def format_message(template: str, args: Sequence[Any]) -> str:
    """Positional interpolation; the template is returned as-is when it cannot be formatted."""
    if not args: return template
    try:
        return template.format(*(display_arg(a) for a in args))
    except (IndexError, KeyError, ValueError, AttributeError, TypeError):
        return template


@lru_cache(maxsize=None)
def load_builtin_table(locale: str) -> Mapping[str, str]:
    """Load the packaged table for `locale`; empty when none ships."""
    log = messages_logger()
    resource = resources.files("fieldcheck.validation").joinpath("locales", f"{locale}.yaml")
    if not resource.is_file():
        log.warning("message_table_missing", locale=locale)
        return {}
    table = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
    log.debug("message_table_loaded", locale=locale, keys=len(table))
    return {str(k): str(v) for k, v in table.items()}


class DefaultMessageResolver:
    """Table-backed resolver with per-locale overrides.

    Args:
        overrides: {locale: {key: template}} replacing built-in texts
        locales: locales to pre-load; defaults to FIELDCHECK_SUPPORTED_LOCALES
        default_locale: last locale tried before falling back to the key
    """

    def __init__(
        self,
        overrides: Mapping[str, Mapping[str, str]] | None = None,
        *,
        locales: Iterable[str] | None = None,
        default_locale: str | None = None,
    ):
        settings = get_settings()
        self.default_locale = normalize_locale(default_locale or settings.DEFAULT_LOCALE)
        wanted = [normalize_locale(loc) for loc in (locales or settings.SUPPORTED_LOCALES)]
        if self.default_locale not in wanted: wanted.append(self.default_locale)
        self._builtin: dict[str, Mapping[str, str]] = {loc: load_builtin_table(loc) for loc in wanted}
        self._overrides: dict[str, dict[str, str]] = {
            normalize_locale(loc): dict(table) for loc, table in (overrides or {}).items()
        }

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(loc for loc, table in self._builtin.items() if table)

    def with_overrides(self, locale: str, messages: Mapping[str, str]) -> DefaultMessageResolver:
        """New resolver with `messages` layered over this one's overrides for `locale`."""
        merged = {loc: dict(table) for loc, table in self._overrides.items()}
        merged.setdefault(normalize_locale(locale), {}).update(messages)
        return DefaultMessageResolver(merged, locales=self._builtin.keys(), default_locale=self.default_locale)

    def template(self, key: str, locale: str) -> str:
        """Un-interpolated text for `key`, following the fallback chain."""
        loc = normalize_locale(locale)
        for table in (
            self._overrides.get(loc),
            self._builtin.get(loc),
            self._builtin.get(language_of(loc)),
            self._builtin.get(self.default_locale),
        ):
            if table and key in table: return table[key]
        return key

    def format(self, key: str, args: Sequence[Any], locale: str) -> str:
        return format_message(self.template(key, locale), args)

    async def resolve(self, key: str, args: Sequence[Any], locale: str) -> str:
        return self.format(key, args, locale)


@lru_cache
def default_resolver() -> DefaultMessageResolver:
    """Process-wide resolver shared by contexts that do not supply one."""
    return DefaultMessageResolver()
