from __future__ import annotations

from game.players.chain_reaction_player import ChainReactionPlayer


class ReplayPlayer(ChainReactionPlayer):
    """Player that replays moves from a list of (x, y) pairs."""

    def __init__(self, n, moves):
        super().__init__(n)
        self.moves = [tuple(move) for move in moves]
        self.move_index = 0
        self.name = f"Replay {n}"

    def on_game_start(self) -> None:
        self.move_index = 0

    def play(self, context):
        """Return the next move from the replay list."""
        if self.move_index >= len(self.moves):
            raise ValueError(f"No more moves for player {self.n}")

        move = self.moves[self.move_index]
        self.move_index += 1
        return move
