"""Players."""

from .chain_reaction_player import ChainReactionPlayer
from .random_player import RandomPlayer
from .avoid_others_player import AvoidOthersPlayer
from .form_chains_player import FormChainsPlayer
from .human_player import HumanPlayer
from .fixed_player import FixedPlayer
from .replay_player import ReplayPlayer

__all__ = [
    "ChainReactionPlayer",
    "RandomPlayer",
    "AvoidOthersPlayer",
    "FormChainsPlayer",
    "HumanPlayer",
    "FixedPlayer",
    "ReplayPlayer",
]
