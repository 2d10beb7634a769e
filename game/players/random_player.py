from __future__ import annotations

from game.game_context import GameContext
from game.players.chain_reaction_player import ChainReactionPlayer


class RandomPlayer(ChainReactionPlayer):

    def __init__(self, n, rng_seed=None):
        super().__init__(n, rng_seed)
        self.name = f"Random {n}"

    def play(self, context: GameContext):
        """Select a uniformly random legal cell.

        Legal cells are the empty ones plus the ones this player already owns.
        """
        pos = self._pick(context.available_cells())
        return context.to_xy(pos)
