"""Cooperative cancellation primitives.

Every suspension point in the engine and the runner races its natural wait
against a ``CancelSignal``. Whoever settles first wins; a raised signal makes
the enclosing operation unwind into a reset instead of continuing.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Generator, Generic, TypeVar

T = TypeVar("T")


class CancelSignal:
    """Idempotent cancellation flag that can be awaited.

    The signal may be created before an event loop is running; the underlying
    ``asyncio.Event`` binds to whichever loop first waits on it.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Raise the signal. Calling it again is a no-op."""
        self._event.set()

    async def wait(self) -> None:
        """Resolve once the signal has been raised."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancelSignal(cancelled={self.cancelled})"


class CancellableResult(Generic[T]):
    """A pending result paired with the signal that can settle it early.

    Cancelling does not cancel the task itself. The task is expected to observe
    the signal at its next suspension point and return whatever it has
    accumulated so far, so awaiting a cancelled result yields a value rather
    than raising ``asyncio.CancelledError``.
    """

    def __init__(self, task: asyncio.Future, signal: CancelSignal | None = None):
        self._task = task
        self._signal = signal if signal is not None else CancelSignal()

    @property
    def signal(self) -> CancelSignal:
        return self._signal

    @property
    def cancelled(self) -> bool:
        return self._signal.cancelled

    def cancel(self) -> None:
        self._signal.cancel()

    def done(self) -> bool:
        return self._task.done()

    def result(self) -> T:
        """Return the settled value; raises ``asyncio.InvalidStateError`` while pending."""
        return self._task.result()

    def add_done_callback(self, fn: Callable[["CancellableResult[T]"], Any]) -> None:
        self._task.add_done_callback(lambda _task: fn(self))

    def __await__(self) -> Generator[Any, None, T]:
        return self._task.__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"CancellableResult({state}, cancelled={self.cancelled})"


async def race(awaitable, signal: CancelSignal | None):
    """Await ``awaitable`` unless ``signal`` fires first.

    Returns ``(True, value)`` when the awaitable finished first and
    ``(False, None)`` when the signal won. The losing side is cancelled.
    """
    if signal is None:
        return True, await awaitable

    work = asyncio.ensure_future(awaitable)
    if signal.cancelled:
        work.cancel()
        return False, None

    waiter = asyncio.ensure_future(signal.wait())
    try:
        done, _pending = await asyncio.wait(
            {work, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work in done:
        waiter.cancel()
        return True, work.result()

    work.cancel()
    return False, None
