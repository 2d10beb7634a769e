from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Cell:
    """Read-only snapshot of one board position.

    ``owner`` is ``None`` for empty cells, in which case ``count`` is 0.
    """

    owner: int | None = None
    count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.owner is None

    def __str__(self) -> str:
        return "o" if self.is_empty else str(self.count)


EMPTY_CELL = Cell()


class Grid:
    # The board is a width x height rectangle stored as a flat sequence:
    #
    #   pos = y * width + x
    #
    #   3x3 board          capacities
    #    0 1 2              2 3 2
    #    3 4 5              3 4 3
    #    6 7 8              2 3 2
    #
    # Two cells are neighbors when they share an edge. The capacity of a cell is
    # the number of its in-bounds neighbors, which is also the mass at which
    # the cell explodes.

    # Neighbor order: left, right, up, down
    DIRECTIONS = [(-1, 0), (1, 0), (0, -1), (0, 1)]

    def __init__(self, width: int, height: int):
        if width < 1:
            raise ValueError("Width cannot be zero.")
        if height < 1:
            raise ValueError("Height cannot be zero.")

        self.width = width
        self.height = height
        self.size = width * height

        self.neighbor_map: tuple[tuple[int, ...], ...] = tuple(
            self._compute_neighbors(pos) for pos in range(self.size)
        )
        self.capacities = self._compute_capacities(width, height)
        self.capacities.flags.writeable = False

    @property
    def edge_count(self) -> int:
        """Number of pairs of adjacent cells."""
        return self.width * (self.height - 1) + self.height * (self.width - 1)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def to_pos(self, x: int, y: int) -> int:
        return y * self.width + x

    def to_xy(self, pos: int) -> tuple[int, int]:
        return pos % self.width, pos // self.width

    def neighbors(self, pos: int) -> tuple[int, ...]:
        return self.neighbor_map[pos]

    def capacity(self, pos: int) -> int:
        return int(self.capacities[pos])

    def _compute_neighbors(self, pos: int) -> tuple[int, ...]:
        x, y = self.to_xy(pos)
        return tuple(
            self.to_pos(x + dx, y + dy)
            for dx, dy in self.DIRECTIONS
            if self.in_bounds(x + dx, y + dy)
        )

    @staticmethod
    def _compute_capacities(width: int, height: int) -> np.ndarray:
        # Start every cell at 4 and take one away for each border it touches
        capacity = np.full((height, width), 4, dtype=np.int64)
        capacity[:, 0] -= 1
        capacity[:, -1] -= 1
        capacity[0, :] -= 1
        capacity[-1, :] -= 1
        return capacity.reshape(-1)
