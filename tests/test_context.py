"""Tests for the validation context and the dispatcher."""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from fieldcheck.validation import DefaultMessageResolver, Dispatcher, ValidationContext, fixed_clock
from fieldcheck.validation.context import default_concurrency


@pytest.mark.unit
class TestClock:
    def test_fixed_clock_assumes_utc_for_naive(self) -> None:
        clock = fixed_clock(datetime(2024, 1, 1, 9, 30))
        assert clock() == datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)

    def test_for_testing_accepts_datetime_or_callable(self) -> None:
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert ValidationContext.for_testing(clock=moment).now() == moment
        assert ValidationContext.for_testing(clock=lambda: moment).now() == moment


@pytest.mark.unit
class TestValidationContext:
    def test_with_methods_return_copies(self) -> None:
        base = ValidationContext.for_testing()
        french = base.with_locale("fr")
        assert french.locale == "fr"
        assert base.locale == "en"
        assert french.dispatcher is base.dispatcher

    def test_with_metadata_merges(self) -> None:
        ctx = ValidationContext.for_testing(metadata={"tenant": "a"}).with_metadata(user="u1")
        assert dict(ctx.metadata) == {"tenant": "a", "user": "u1"}
        with pytest.raises(TypeError):
            ctx.metadata["x"] = 1  # type: ignore[index]

    def test_with_resolver_and_clock(self) -> None:
        resolver = DefaultMessageResolver({"en": {"field.required": "Need it"}}, locales=["en"])
        moment = datetime(2030, 1, 1, tzinfo=timezone.utc)
        ctx = ValidationContext.for_testing().with_resolver(resolver).with_clock(fixed_clock(moment))
        assert ctx.resolver is resolver
        assert ctx.now() == moment

    @pytest.mark.asyncio
    async def test_message_uses_context_locale(self) -> None:
        ctx = ValidationContext.for_testing(locale="fr")
        assert await ctx.message("field.required") == "Ce champ est obligatoire"

    def test_defaults(self) -> None:
        ctx = ValidationContext()
        assert ctx.locale == "en"
        assert ctx.dispatcher.max_concurrency == default_concurrency()

    def test_for_io_uses_thread_pool(self) -> None:
        ctx = ValidationContext.for_io()
        assert isinstance(ctx.dispatcher.executor, ThreadPoolExecutor)
        ctx.dispatcher.executor.shutdown()


@pytest.mark.unit
class TestDispatcher:
    def test_rejects_non_positive_bound(self) -> None:
        with pytest.raises(ValueError):
            Dispatcher(0)

    @pytest.mark.asyncio
    async def test_slot_bounds_concurrency(self) -> None:
        dispatcher = Dispatcher(2)
        running = peak = 0

        async def work() -> None:
            nonlocal running, peak
            async with dispatcher.slot():
                running += 1
                peak = max(peak, running)
                await asyncio.sleep(0.01)
                running -= 1

        await asyncio.gather(*(work() for _ in range(10)))
        assert peak == 2

    @pytest.mark.asyncio
    async def test_unbounded_slot(self) -> None:
        dispatcher = Dispatcher.unbounded()
        async with dispatcher.slot():
            pass
        assert dispatcher.max_concurrency is None

    @pytest.mark.asyncio
    async def test_run_blocking_leaves_the_loop_thread(self) -> None:
        loop_thread = threading.get_ident()
        dispatcher = Dispatcher(4, ThreadPoolExecutor(max_workers=1))
        try:
            worker_thread = await dispatcher.run_blocking(threading.get_ident)
        finally:
            dispatcher.executor.shutdown()
        assert worker_thread != loop_thread

    def test_semaphores_are_per_loop(self) -> None:
        dispatcher = Dispatcher(1)

        async def grab() -> asyncio.Semaphore:
            return dispatcher._semaphore()

        first = asyncio.run(grab())
        second = asyncio.run(grab())
        assert first is not second
