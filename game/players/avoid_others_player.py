from __future__ import annotations

from game.game_context import GameContext
from game.players.chain_reaction_player import ChainReactionPlayer


class AvoidOthersPlayer(ChainReactionPlayer):
    """Avoids placing cells in dense areas.

    Every legal cell is scored by the total mass of its neighbors and the
    emptiest neighborhood wins. Ties go to the lowest position so the player
    is fully deterministic.
    """

    def __init__(self, n, rng_seed=None):
        super().__init__(n, rng_seed)
        self.name = f"Avoid others {n}"

    def neighbor_mass(self, context: GameContext, pos: int) -> int:
        return sum(context.mass(n) for n in context.neighbors(pos))

    def play(self, context: GameContext):
        available = context.available_cells()
        if not available:
            raise ValueError(f"{self.name} has no legal move.")
        pos = min(available, key=lambda p: (self.neighbor_mass(context, p), p))
        return context.to_xy(pos)
