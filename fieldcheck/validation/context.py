"""Validation Context

Per-call (or shared default) execution environment:
- locale used to resolve messages
- message resolver
- dispatcher: concurrency limiter plus executor for blocking predicates
- clock used by date predicates
- free-form metadata for custom predicates

Contexts are frozen; with_* methods return modified copies.
"""
from __future__ import annotations

import asyncio
import functools
import os
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, AsyncIterator, Callable, Mapping, TypeVar
from weakref import WeakKeyDictionary

from fieldcheck.config import get_settings

from .messages import MessageResolver, default_resolver

T = TypeVar("T")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fixed_clock(moment: datetime) -> Clock:
    """Clock frozen at `moment` (naive values are taken as UTC)."""
    if moment.tzinfo is None: moment = moment.replace(tzinfo=timezone.utc)
    return lambda: moment


def default_concurrency() -> int:
    return get_settings().MAX_CONCURRENCY or min(32, (os.cpu_count() or 1) + 4)


class Dispatcher:
    """Bounds concurrently running rule chains and hosts blocking work.

    One semaphore is kept per event loop so a dispatcher can be shared by
    callers on different loops. `max_concurrency=None` means unbounded.
    """

    def __init__(self, max_concurrency: int | None = None, executor: Executor | None = None):
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.max_concurrency = max_concurrency
        self.executor = executor
        self._semaphores: WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Semaphore] = WeakKeyDictionary()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Dispatcher(max_concurrency={self.max_concurrency}, executor={type(self.executor).__name__ if self.executor else None})"

    def _semaphore(self) -> asyncio.Semaphore | None:
        if self.max_concurrency is None: return None
        loop = asyncio.get_running_loop()
        semaphore = self._semaphores.get(loop)
        if semaphore is None:
            with self._lock:
                semaphore = self._semaphores.get(loop)
                if semaphore is None:
                    semaphore = self._semaphores[loop] = asyncio.Semaphore(self.max_concurrency)
        return semaphore

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one concurrency permit for the duration of the block."""
        semaphore = self._semaphore()
        if semaphore is None:
            yield
            return
        async with semaphore:
            yield

    async def run_blocking(self, fn: Callable[..., T], *args: Any) -> T:
        """Run `fn(*args)` in the executor (the loop default when none is set)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, functools.partial(fn, *args))

    @classmethod
    def unbounded(cls) -> Dispatcher:
        return cls(None)

    @classmethod
    def for_io(cls, max_concurrency: int | None = None) -> Dispatcher:
        """Dispatcher backed by a dedicated thread pool for blocking predicates."""
        return cls(max_concurrency or default_concurrency(),
                   ThreadPoolExecutor(thread_name_prefix="fieldcheck-io"))


@functools.lru_cache
def default_dispatcher() -> Dispatcher:
    """Process-wide dispatcher sized from FIELDCHECK_MAX_CONCURRENCY or the CPU count."""
    return Dispatcher(default_concurrency())


def _default_locale() -> str:
    return get_settings().DEFAULT_LOCALE


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Execution environment for one or more validate calls."""
    locale: str = field(default_factory=_default_locale)
    resolver: MessageResolver = field(default_factory=default_resolver)
    dispatcher: Dispatcher = field(default_factory=default_dispatcher)
    clock: Clock = utc_now
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def with_locale(self, locale: str) -> ValidationContext: return replace(self, locale=locale)

    def with_resolver(self, resolver: MessageResolver) -> ValidationContext: return replace(self, resolver=resolver)

    def with_dispatcher(self, dispatcher: Dispatcher) -> ValidationContext: return replace(self, dispatcher=dispatcher)

    def with_clock(self, clock: Clock) -> ValidationContext: return replace(self, clock=clock)

    def with_metadata(self, **metadata: Any) -> ValidationContext:
        """Copy with `metadata` merged over the existing entries."""
        return replace(self, metadata={**self.metadata, **metadata})

    def now(self) -> datetime:
        return self.clock()

    async def message(self, key: str, args: tuple[Any, ...] = ()) -> str:
        return await self.resolver.resolve(key, args, self.locale)

    @classmethod
    def for_io(cls, locale: str | None = None, **kwargs: Any) -> ValidationContext:
        """Context whose dispatcher runs blocking predicates on a dedicated pool."""
        return cls(locale=locale or _default_locale(), dispatcher=Dispatcher.for_io(), **kwargs)

    @classmethod
    def for_testing(cls, clock: datetime | Clock | None = None, locale: str = "en", **kwargs: Any) -> ValidationContext:
        """Deterministic context: fixed clock, unbounded dispatcher."""
        if isinstance(clock, datetime): clock = fixed_clock(clock)
        return cls(locale=locale, dispatcher=Dispatcher.unbounded(), clock=clock or utc_now, **kwargs)
