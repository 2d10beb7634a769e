"""Error taxonomy for the Chain Reaction engine.

All errors are synchronous contract violations raised at the point of misuse.
Cancellation is not an error and never raises one of these.
"""


class ChainReactionError(Exception):
    """Base class for every engine and runner error."""


class OutOfBoundsError(ChainReactionError, IndexError):
    """Placement coordinates lie outside the grid."""

    def __init__(self, x: int, y: int):
        super().__init__(f"Field ({x}, {y}) is outside of bounds.")
        self.x = x
        self.y = y


class CellTakenError(ChainReactionError, ValueError):
    """Placement targets a cell owned by another player."""

    def __init__(self, x: int, y: int, owner: int):
        super().__init__(f"Field ({x}, {y}) is already taken by player {owner}.")
        self.x = x
        self.y = y
        self.owner = owner


class GameOverError(ChainReactionError, RuntimeError):
    """Placement attempted after the game has finished."""

    def __init__(self):
        super().__init__("Cannot play once game is over.")


class GameStillActiveError(ChainReactionError, RuntimeError):
    """Winner requested while the game is still being played."""

    def __init__(self):
        super().__init__("Game is still active.")


class NegativeScoreError(ChainReactionError, AssertionError):
    """Score bookkeeping went below zero. Indicates an engine bug."""

    def __init__(self, player: int, score: int):
        super().__init__(f"Player {player} cannot have a negative score ({score}).")
        self.player = player
        self.score = score


class RunnerBusyError(ChainReactionError, RuntimeError):
    """A run was started while another one is still in progress."""

    def __init__(self):
        super().__init__("Runner is already running.")
