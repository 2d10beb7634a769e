from __future__ import annotations

from game.players.chain_reaction_player import ChainReactionPlayer


class FixedPlayer(ChainReactionPlayer):
    """Player that always plays the same cell."""

    def __init__(self, n, x, y):
        super().__init__(n)
        self.x = x
        self.y = y
        self.name = f"Fixed {n} ({x}, {y})"

    def play(self, context):
        return self.x, self.y
