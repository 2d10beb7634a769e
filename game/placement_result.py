"""Placement result value object.

This class encapsulates the outcome of a single ``place`` call so that the
runner, loggers and tests can inspect what happened without reaching into the
engine's internals.
"""

from __future__ import annotations


class PlacementResult:
    """Encapsulates the result of a placement.

    Attributes:
        pos: Flat board position that was played.
        player: Player index that made the move.
        exploded: Whether the placement triggered an explosion.
        waves: Number of cascade waves processed (0 without an explosion).
        captured: Units taken from other players during the cascade,
            keyed by victim player index.
        aborted: Whether cancellation interrupted the move and reset the board.
    """

    def __init__(self, pos, player, exploded=False, waves=0, captured=None, aborted=False):
        self.pos = pos
        self.player = player
        self.exploded = exploded
        self.waves = waves
        self.captured = captured if captured is not None else {}
        self.aborted = aborted

    def __repr__(self):
        return (
            f"PlacementResult(pos={self.pos}, player={self.player}, exploded={self.exploded}, "
            f"waves={self.waves}, captured={self.captured}, aborted={self.aborted})"
        )

    def has_captures(self):
        """Check if any opponent mass was taken over.

        Returns:
            bool: True if at least one unit changed hands
        """
        return any(self.captured.values())

    def total_captured(self):
        return sum(self.captured.values())
