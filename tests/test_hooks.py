"""
Unit tests for the named-event hooks and the cancellation primitives.
"""

import asyncio
import pytest
import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.cancellation import CancellableResult, CancelSignal, race
from shared.hooks import Hooks, extend_hooks


class TestHooks:
    """Test subscription management and running handlers."""

    def test_events(self):
        hooks = Hooks("a", "b")
        assert hooks.events == ("a", "b")
        assert hooks.has("a")
        assert not hooks.has("c")

    def test_unknown_event(self):
        hooks = Hooks("a")
        with pytest.raises(KeyError, match="Unknown hook event"):
            hooks.add("b", lambda: None)

    @pytest.mark.asyncio
    async def test_run_unknown_event(self):
        hooks = Hooks("a")
        with pytest.raises(KeyError):
            await hooks.run("b")

    @pytest.mark.asyncio
    async def test_handlers_run_in_subscription_order(self):
        hooks = Hooks("a")
        calls = []
        hooks.add("a", lambda: calls.append(1))
        hooks.add("a", lambda: calls.append(2))
        hooks.add("a", lambda: calls.append(3))

        await hooks.run("a")
        assert calls == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        hooks = Hooks("a")
        calls = []
        unsubscribe = hooks.add("a", lambda: calls.append("x"))
        assert hooks.count("a") == 1

        unsubscribe()
        unsubscribe()
        assert hooks.count("a") == 0

        await hooks.run("a")
        assert calls == []

    @pytest.mark.asyncio
    async def test_awaits_async_handlers(self):
        hooks = Hooks("a")
        calls = []

        async def slow():
            await asyncio.sleep(0.01)
            calls.append("slow")

        hooks.add("a", slow)
        hooks.add("a", lambda: calls.append("sync"))
        await hooks.run("a")

        # The synchronous handler ran while the coroutine was pending
        assert calls == ["sync", "slow"]

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self):
        hooks = Hooks("a")

        def boom():
            raise RuntimeError("boom")

        hooks.add("a", boom)
        with pytest.raises(RuntimeError, match="boom"):
            await hooks.run("a")

    @pytest.mark.asyncio
    async def test_run_returns_early_when_cancelled(self):
        hooks = Hooks("a")
        never = asyncio.Event()
        hooks.add("a", never.wait)
        signal = CancelSignal()

        task = asyncio.ensure_future(hooks.run("a", signal))
        await asyncio.sleep(0)
        signal.cancel()

        await asyncio.wait_for(task, timeout=1)

    def test_clear(self):
        hooks = Hooks("a", "b")
        hooks.add("a", lambda: None)
        hooks.add("b", lambda: None)

        hooks.clear("a")
        assert hooks.count("a") == 0
        assert hooks.count("b") == 1

        hooks.clear()
        assert hooks.count("b") == 0


class TestExtendHooks:
    """Test composing a base bus with extra events."""

    def test_union_of_events(self):
        base = Hooks("update")
        extended = extend_hooks(base, "turnDelay")
        assert extended.events == ("update", "turnDelay")
        assert extended.has("update")
        assert extended.has("turnDelay")

    @pytest.mark.asyncio
    async def test_base_events_are_shared(self):
        base = Hooks("update")
        extended = extend_hooks(base, "turnDelay")
        calls = []

        extended.add("update", lambda: calls.append("update"))
        # Running on the base bus reaches handlers added through the extension
        await base.run("update")
        assert calls == ["update"]
        assert base.count("update") == 1

    @pytest.mark.asyncio
    async def test_extra_events_stay_on_extension(self):
        base = Hooks("update")
        extended = extend_hooks(base, "turnDelay")
        calls = []

        extended.add("turnDelay", lambda: calls.append("turn"))
        await extended.run("turnDelay")
        assert calls == ["turn"]
        assert not base.has("turnDelay")

    def test_clear_many(self):
        base = Hooks("update", "explosionDelay")
        extended = extend_hooks(base, "turnDelay", "gameDelay")
        for event in extended.events:
            extended.add(event, lambda: None)

        extended.clear_many(["explosionDelay", "turnDelay", "gameDelay"])

        assert extended.count("update") == 1
        assert extended.count("explosionDelay") == 0
        assert extended.count("turnDelay") == 0
        assert extended.count("gameDelay") == 0

    def test_nested_extension(self):
        inner = extend_hooks(Hooks("a"), "b")
        outer = extend_hooks(inner, "c")
        assert outer.events == ("a", "b", "c")
        outer.add("a", lambda: None)
        assert inner.count("a") == 1


class TestCancelSignal:
    """Test the cancellation flag."""

    def test_cancel_is_idempotent(self):
        signal = CancelSignal()
        assert not signal.cancelled
        signal.cancel()
        signal.cancel()
        assert signal.cancelled

    @pytest.mark.asyncio
    async def test_wait_resolves_after_cancel(self):
        signal = CancelSignal()
        waiter = asyncio.ensure_future(signal.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        signal.cancel()
        await asyncio.wait_for(waiter, timeout=1)


class TestRace:
    """Test racing awaitables against a signal."""

    @pytest.mark.asyncio
    async def test_work_wins(self):
        async def work():
            return 42

        assert await race(work(), CancelSignal()) == (True, 42)

    @pytest.mark.asyncio
    async def test_without_signal(self):
        async def work():
            return "done"

        assert await race(work(), None) == (True, "done")

    @pytest.mark.asyncio
    async def test_signal_wins(self):
        signal = CancelSignal()
        never = asyncio.Event()

        task = asyncio.ensure_future(race(never.wait(), signal))
        await asyncio.sleep(0)
        signal.cancel()

        assert await asyncio.wait_for(task, timeout=1) == (False, None)

    @pytest.mark.asyncio
    async def test_already_cancelled(self):
        signal = CancelSignal()
        signal.cancel()
        never = asyncio.Event()
        assert await race(never.wait(), signal) == (False, None)

    @pytest.mark.asyncio
    async def test_work_errors_propagate(self):
        async def work():
            raise ValueError("bad move")

        with pytest.raises(ValueError, match="bad move"):
            await race(work(), CancelSignal())


class TestCancellableResult:
    """Test the handle returned for cancellable runs."""

    @pytest.mark.asyncio
    async def test_resolves_to_task_result(self):
        async def work():
            return [1, 2]

        handle = CancellableResult(asyncio.ensure_future(work()))
        assert await handle == [1, 2]
        assert handle.done()
        assert handle.result() == [1, 2]
        assert not handle.cancelled

    @pytest.mark.asyncio
    async def test_cancel_raises_signal_only(self):
        signal = CancelSignal()

        async def work():
            await signal.wait()
            return "partial"

        handle = CancellableResult(asyncio.ensure_future(work()), signal)
        handle.cancel()

        assert handle.cancelled
        assert handle.signal is signal
        assert await handle == "partial"

    @pytest.mark.asyncio
    async def test_done_callback_receives_handle(self):
        async def work():
            return 1

        handle = CancellableResult(asyncio.ensure_future(work()))
        seen = []
        handle.add_done_callback(seen.append)
        await handle
        await asyncio.sleep(0)

        assert seen == [handle]
