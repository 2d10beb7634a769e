from __future__ import annotations

from typing import Awaitable, Union

import numpy as np

from game.game_context import GameContext

Move = tuple[int, int]


class ChainReactionPlayer:
    """Base player with shared state and lifecycle hooks."""

    def __init__(self, n: int, rng_seed: int | None = None):
        self.n = n
        self.name = f"Player {n}"
        self.rng_seed = rng_seed
        self.rng = np.random.default_rng(rng_seed)

    def play(self, context: GameContext) -> Union[Move, Awaitable[Move]]:
        raise NotImplementedError

    #
    # Lifecycle hooks
    #
    def on_game_start(self) -> None:
        """Inform the player that a fresh game is about to begin."""
        return None

    def _pick(self, positions) -> int:
        """Choose uniformly among ``positions`` using this player's generator."""
        ordered = sorted(positions)
        if not ordered:
            raise ValueError(f"{self.name} has no legal move.")
        return ordered[int(self.rng.integers(len(ordered)))]

    def __repr__(self):
        return f"{type(self).__name__}(n={self.n}, name={self.name!r})"
