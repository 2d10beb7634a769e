from __future__ import annotations

from game.game_context import GameContext
from game.players.chain_reaction_player import ChainReactionPlayer


class FormChainsPlayer(ChainReactionPlayer):
    """Builds up one cell at a time without tipping it over.

    The player keeps a target cell across turns and feeds it until it is one
    unit short of exploding, then moves on to a neighboring cell so that the
    loaded cells form a chain. Cells one unit short of capacity are avoided
    whenever a safer choice exists.
    """

    def __init__(self, n, rng_seed=None):
        super().__init__(n, rng_seed)
        self.name = f"Form chains {n}"
        self.current: int | None = None

    def on_game_start(self) -> None:
        self.current = None

    def _is_loaded(self, context: GameContext, pos: int) -> bool:
        return context.mass(pos) >= context.capacity(pos) - 1

    def play(self, context: GameContext):
        available = context.available_cells()
        non_critical = [p for p in available if not self._is_loaded(context, p)]
        choice = non_critical if non_critical else list(available)

        if self.current is None or self.current not in available:
            self.current = self._pick(choice)
        elif self._is_loaded(context, self.current):
            candidates = [
                n for n in context.neighbors(self.current)
                if n in available and not self._is_loaded(context, n)
            ]
            if candidates:
                self.current = self._pick(candidates)
            else:
                self.current = self._pick(choice)

        return context.to_xy(self.current)
