"""Controller module for Chain Reaction.

Contains the multi-game runner and the simulation session that wires it to
players, pacing and logging.
"""

from controller.runner import Runner
from controller.game_session import SimulationSession

__all__ = ["Runner", "SimulationSession"]
