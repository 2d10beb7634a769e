"""Shared protocol definitions."""

from __future__ import annotations

from typing import Awaitable, Protocol, TYPE_CHECKING, Union, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover - used for type hints only
    from game.game_context import GameContext

Move = tuple[int, int]


@runtime_checkable
class Playable(Protocol):
    """Protocol describing what the runner needs from a player strategy."""

    name: str

    def play(self, context: GameContext) -> Union[Move, Awaitable[Move]]: ...

    def on_game_start(self) -> None: ...
