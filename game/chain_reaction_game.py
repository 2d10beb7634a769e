"""Chain Reaction game engine.

Players take turns adding one unit of mass to an empty cell or to a cell they
already own. A cell whose mass reaches its capacity explodes: it sends one unit
to each neighbor, claiming those neighbors (and all of their mass) for the
exploding player. Neighbors that reach capacity in turn explode in the next
wave. Every player gets at least one turn; after that the game ends when only
one player has mass left on the board.
"""

from __future__ import annotations

import logging
from collections.abc import Set
from typing import Iterator

import numpy as np

from shared.cancellation import CancelSignal
from shared.hooks import Hooks
from .constants import EMPTY, EXPLOSION_DELAY, UPDATE, ENGINE_EVENTS
from .errors import (
    CellTakenError,
    GameOverError,
    GameStillActiveError,
    NegativeScoreError,
    OutOfBoundsError,
)
from .grid import Cell, EMPTY_CELL, Grid
from .placement_result import PlacementResult

logger = logging.getLogger(__name__)


class ReadOnlySet(Set):
    """Live, read-only view of a set owned by the engine."""

    __slots__ = ("_data",)

    def __init__(self, data: set):
        self._data = data

    @classmethod
    def _from_iterable(cls, it):
        # Set operators (|, &, -) produce plain, detached sets
        return set(it)

    def __contains__(self, item) -> bool:
        return item in self._data

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ReadOnlySet({sorted(self._data)})"


class _Aborted(Exception):
    """Raised internally when cancellation is observed at a suspension point."""


class ChainReactionGame:
    def __init__(self, width, height, players):
        if players < 1:
            raise ValueError("Player count cannot be zero.")

        self.grid_geometry = Grid(width, height)

        # A cascade can only fail to settle while a single owner is alone on the
        # board during the grace period, i.e. on turn 0 or 1 with at most 2
        # units. It settles whenever the board has more edges than units.
        if self.grid_geometry.edge_count <= 2:
            raise ValueError(f"A {width}x{height} board is too small to play on.")

        self.width = width
        self.height = height
        self.players = players

        self.hooks = Hooks(*ENGINE_EVENTS)
        self._cancellation = CancelSignal()

        # Board arena: one owner and one count per position
        self._owners = np.full(self.grid_geometry.size, EMPTY, dtype=np.int64)
        self._counts = np.zeros(self.grid_geometry.size, dtype=np.int64)
        self._scores = np.zeros(players, dtype=np.int64)

        self._empty_cells: set[int] = set(range(self.grid_geometry.size))
        self._owned_cells: list[set[int]] = [set() for _ in range(players)]
        self._empty_view = ReadOnlySet(self._empty_cells)
        self._owned_views = tuple(ReadOnlySet(cells) for cells in self._owned_cells)

        self._current_player = 0
        self._alive_players = 0
        self._turn = 0
        self.latest_move: int | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> int:
        return self._current_player

    @property
    def turn(self) -> int:
        """Number of placements completed since the last reset."""
        return self._turn

    @property
    def alive_players(self) -> int:
        return self._alive_players

    @property
    def scores(self) -> np.ndarray:
        return self._scores.copy()

    @property
    def owners(self) -> np.ndarray:
        view = self._owners.view()
        view.flags.writeable = False
        return view

    @property
    def counts(self) -> np.ndarray:
        view = self._counts.view()
        view.flags.writeable = False
        return view

    @property
    def grid(self) -> tuple[Cell, ...]:
        return tuple(self.cell(pos) for pos in range(self.grid_geometry.size))

    @property
    def empty_cells(self) -> ReadOnlySet:
        return self._empty_view

    @property
    def owned_cells(self) -> tuple[ReadOnlySet, ...]:
        return self._owned_views

    @property
    def cancellation(self) -> CancelSignal:
        return self._cancellation

    def to_pos(self, x: int, y: int) -> int:
        return self.grid_geometry.to_pos(x, y)

    def to_xy(self, pos: int) -> tuple[int, int]:
        return self.grid_geometry.to_xy(pos)

    def in_bounds(self, x: int, y: int) -> bool:
        return self.grid_geometry.in_bounds(x, y)

    def neighbors(self, pos: int) -> tuple[int, ...]:
        return self.grid_geometry.neighbors(pos)

    def capacity(self, pos: int) -> int:
        return self.grid_geometry.capacity(pos)

    def cell(self, pos: int) -> Cell:
        owner = int(self._owners[pos])
        if owner == EMPTY:
            return EMPTY_CELL
        return Cell(owner=owner, count=int(self._counts[pos]))

    def mass(self, pos: int) -> int:
        return int(self._counts[pos])

    def should_explode(self, pos: int) -> bool:
        """Tells whether the cell at ``pos`` has reached critical mass."""
        if self._owners[pos] == EMPTY:
            return False
        return bool(self._counts[pos] >= self.grid_geometry.capacities[pos])

    def player_is_alive(self, player: int) -> bool:
        """A player is alive while they have mass, or before their first move."""
        return bool(self._scores[player] > 0) or player >= self._turn

    def can_place(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        owner = self._owners[self.to_pos(x, y)]
        return owner == EMPTY or owner == self._current_player

    def is_active(self) -> bool:
        # Let each player play one turn. After that, the game is finished
        # when only a single player has cells on the board.
        if self._turn <= self._alive_players:
            return True
        return self._alive_players > 1

    def winner(self) -> int:
        if self.is_active():
            raise GameStillActiveError()
        return int(np.flatnonzero(self._scores > 0)[0])

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def arm(self, signal: CancelSignal | None = None) -> CancelSignal:
        """Install a fresh cancellation signal (or ``signal``) and return it."""
        self._cancellation = signal if signal is not None else CancelSignal()
        return self._cancellation

    def cancel(self) -> None:
        """Abort any in-flight placement at its next suspension point."""
        self._cancellation.cancel()

    async def _wait(self, event: str) -> None:
        await self.hooks.run(event, self._cancellation)
        if self._cancellation.cancelled:
            raise _Aborted()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    async def reset(self) -> None:
        """Mutates the game back into its original, unaltered state."""
        self._current_player = 0
        self._turn = 0
        self._alive_players = 0
        self.latest_move = None
        self._owners.fill(EMPTY)
        self._counts.fill(0)
        self._scores.fill(0)

        self._empty_cells.clear()
        self._empty_cells.update(range(self.grid_geometry.size))
        for cells in self._owned_cells:
            cells.clear()

        await self.hooks.run(UPDATE)

    def next_player(self) -> None:
        """Pass the turn without placing."""
        self._current_player = (self._current_player + 1) % self.players

    async def place(self, x: int, y: int) -> PlacementResult:
        """Adds one unit of mass for the current player at ``(x, y)``.

        Raises:
            OutOfBoundsError: ``(x, y)`` is outside the grid
            GameOverError: the game has already finished
            CellTakenError: the cell belongs to another player
        """
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y)
        if not self.is_active():
            raise GameOverError()

        pos = self.to_pos(x, y)
        player = self._current_player
        owner = int(self._owners[pos])

        if owner == EMPTY:
            self._claim(pos, player, 1)
        elif owner != player:
            raise CellTakenError(x, y, owner)
        else:
            self._counts[pos] += 1

        self._update_score(player, 1)
        self.latest_move = pos
        result = PlacementResult(pos, player)

        try:
            await self._wait(UPDATE)

            if self.should_explode(pos):
                self.latest_move = None
                result.exploded = True
                await self._wait(EXPLOSION_DELAY)
                await self._explode(pos, player, result)
        except _Aborted:
            logger.debug("Placement at %s aborted by cancellation", (x, y))
            result.aborted = True
            await self.reset()
            return result

        self._current_player = (player + 1) % self.players
        self._turn += 1
        return result

    async def _explode(self, origin: int, player: int, result: PlacementResult) -> None:
        """Splits a critical cell and takes over its neighbors, wave by wave."""
        neighbor_map = self.grid_geometry.neighbor_map
        capacities = self.grid_geometry.capacities

        self._drain(origin, player)
        queue = list(neighbor_map[origin])

        while queue:
            # Keyed dict used as an insertion-ordered set. A cell hit by several
            # exploding neighbors in the same wave must explode only once.
            criticals: dict[int, None] = {}

            for pos in queue:
                owner = int(self._owners[pos])
                if owner == EMPTY:
                    self._claim(pos, player, 1)
                else:
                    if owner != player:
                        stolen = int(self._counts[pos])
                        self._update_score(player, stolen)
                        self._update_score(owner, -stolen)
                        self._transfer(pos, owner, player)
                        result.captured[owner] = result.captured.get(owner, 0) + stolen
                    self._counts[pos] += 1

                if self.is_active() and self._counts[pos] >= capacities[pos]:
                    criticals[pos] = None

            result.waves += 1
            logger.debug(
                "Wave %d: %d cell(s) hit, %d critical", result.waves, len(queue), len(criticals)
            )

            # Observers see the overloaded cells before they are drained
            await self._wait(UPDATE)
            await self._wait(EXPLOSION_DELAY)

            queue = []
            for pos in criticals:
                queue.extend(neighbor_map[pos])
                self._drain(pos, player)

    # ------------------------------------------------------------------
    # Bookkeeping helpers
    # ------------------------------------------------------------------

    def _claim(self, pos: int, player: int, count: int) -> None:
        self._owners[pos] = player
        self._counts[pos] = count
        self._empty_cells.discard(pos)
        self._owned_cells[player].add(pos)

    def _transfer(self, pos: int, old_owner: int, new_owner: int) -> None:
        self._owners[pos] = new_owner
        self._owned_cells[old_owner].discard(pos)
        self._owned_cells[new_owner].add(pos)

    def _drain(self, pos: int, player: int) -> None:
        """Removes one capacity worth of mass, emptying the cell if nothing is left."""
        self._counts[pos] -= self.grid_geometry.capacities[pos]
        if self._counts[pos] == 0:
            self._owners[pos] = EMPTY
            self._owned_cells[player].discard(pos)
            self._empty_cells.add(pos)

    def _update_score(self, player: int, delta: int) -> None:
        """Updates a player's score while keeping the alive count in sync."""
        old_score = int(self._scores[player])
        new_score = old_score + delta
        if new_score < 0:
            raise NegativeScoreError(player, new_score)
        self._scores[player] = new_score

        if not old_score and new_score:
            self._alive_players += 1
        elif old_score and not new_score:
            self._alive_players -= 1

    def __str__(self):
        rows = []
        for y in range(self.height):
            row = [str(self.cell(self.to_pos(x, y))) for x in range(self.width)]
            rows.append(" ".join(row))
        rows.append(f"scores: {self._scores.tolist()}")
        return "\n".join(rows)
