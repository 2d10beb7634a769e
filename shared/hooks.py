"""Named-event hooks.

A small event bus with a fixed vocabulary of event names chosen by the owning
component. Handlers take no arguments and may return an awaitable; running an
event waits for every handler, or for a cancellation signal if that fires
first.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Iterable

from shared.cancellation import CancelSignal, race

HookFn = Callable[[], Any]
Unsubscribe = Callable[[], None]


class Hooks:
    """Registry mapping event names to ordered handler lists."""

    def __init__(self, *events: str) -> None:
        self._handlers: dict[str, list[HookFn]] = {event: [] for event in events}

    @property
    def events(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def has(self, event: str) -> bool:
        return event in self._handlers

    def _handlers_for(self, event: str) -> list[HookFn]:
        try:
            return self._handlers[event]
        except KeyError:
            raise KeyError(f"Unknown hook event: {event!r}") from None

    def add(self, event: str, handler: HookFn) -> Unsubscribe:
        """Subscribe ``handler`` to ``event``.

        Returns:
            A function removing this subscription. Calling it twice is harmless.
        """
        handlers = self._handlers_for(event)
        handlers.append(handler)

        def unsubscribe() -> None:
            try:
                handlers.remove(handler)
            except ValueError:
                pass

        return unsubscribe

    def count(self, event: str) -> int:
        return len(self._handlers_for(event))

    async def run(self, event: str, cancellation: CancelSignal | None = None) -> None:
        """Run every handler of ``event``.

        Handlers are started in subscription order. Synchronous handlers run
        immediately; awaitables are gathered and raced against
        ``cancellation``. Handler exceptions propagate to the caller.
        """
        pending = []
        for handler in list(self._handlers_for(event)):
            outcome = handler()
            if inspect.isawaitable(outcome):
                pending.append(outcome)

        if not pending:
            return

        await race(asyncio.gather(*pending), cancellation)

    def clear(self, event: str | None = None) -> None:
        if event is None:
            for handlers in self._handlers.values():
                handlers.clear()
            return
        self._handlers_for(event).clear()

    def __repr__(self) -> str:
        counts = ", ".join(f"{k}={len(v)}" for k, v in self._handlers.items())
        return f"Hooks({counts})"


class ExtendedHooks:
    """Union of a base bus and additional events, delegating by ownership."""

    def __init__(self, base: Hooks | "ExtendedHooks", extra: Hooks) -> None:
        self._base = base
        self._extra = extra

    @property
    def events(self) -> tuple[str, ...]:
        return self._base.events + self._extra.events

    def has(self, event: str) -> bool:
        return self._base.has(event) or self._extra.has(event)

    def _owner(self, event: str) -> Hooks | "ExtendedHooks":
        return self._base if self._base.has(event) else self._extra

    def add(self, event: str, handler: HookFn) -> Unsubscribe:
        return self._owner(event).add(event, handler)

    def count(self, event: str) -> int:
        return self._owner(event).count(event)

    async def run(self, event: str, cancellation: CancelSignal | None = None) -> None:
        await self._owner(event).run(event, cancellation)

    def clear(self, event: str | None = None) -> None:
        if event is None:
            self._base.clear()
            self._extra.clear()
            return
        self._owner(event).clear(event)

    def clear_many(self, events: Iterable[str]) -> None:
        for event in events:
            self.clear(event)


def extend_hooks(base: Hooks | ExtendedHooks, *events: str) -> ExtendedHooks:
    """Compose ``base`` with new ``events`` into a single bus."""
    return ExtendedHooks(base, Hooks(*events))
