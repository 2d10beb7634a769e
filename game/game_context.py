"""Read-only game context handed to player strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - used for type hints only
    from game.chain_reaction_game import ChainReactionGame, ReadOnlySet
    from game.grid import Cell


class GameContext:
    """Everything a strategy may look at when choosing its move.

    One context is created per player slot and stays valid for the lifetime of
    the game object; the cell sets and grid queries always reflect the live
    board. Strategies cannot mutate the game through it.
    """

    __slots__ = ("_game", "_player")

    def __init__(self, game: ChainReactionGame, player: int):
        self._game = game
        self._player = player

    def __setattr__(self, name, value):
        if hasattr(self, "_player"):
            raise AttributeError("GameContext is read-only")
        object.__setattr__(self, name, value)

    @property
    def width(self) -> int:
        return self._game.width

    @property
    def height(self) -> int:
        return self._game.height

    @property
    def player(self) -> int:
        return self._player

    @property
    def grid(self) -> tuple[Cell, ...]:
        return self._game.grid

    @property
    def empty_cells(self) -> ReadOnlySet:
        return self._game.empty_cells

    @property
    def owned_cells(self) -> tuple[ReadOnlySet, ...]:
        return self._game.owned_cells

    def available_cells(self) -> set[int]:
        """Positions this player may legally play: empty cells plus their own."""
        return set(self._game.empty_cells) | set(self._game.owned_cells[self._player])

    def can_place(self, x: int, y: int) -> bool:
        return self._game.can_place(x, y)

    def neighbors(self, pos: int) -> tuple[int, ...]:
        return self._game.neighbors(pos)

    def mass(self, pos: int) -> int:
        return self._game.mass(pos)

    def capacity(self, pos: int) -> int:
        return self._game.capacity(pos)

    def to_xy(self, pos: int) -> tuple[int, int]:
        return self._game.to_xy(pos)

    def to_pos(self, x: int, y: int) -> int:
        return self._game.to_pos(x, y)

    def __repr__(self) -> str:
        return f"GameContext(player={self._player}, {self.width}x{self.height})"
